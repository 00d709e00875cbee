from __future__ import annotations

from contextlib import ExitStack, contextmanager
from typing import BinaryIO, Iterator

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud.storage.exceptions import InvalidResponse

from .config import CopySettings
from .errors import TransferError
from .output import warn
from .paths import classify
from .streams import ClientFactory, open_read, open_write

STREAM_ERRORS = (OSError, ValueError, GoogleAPIError, GoogleAuthError, InvalidResponse)


def copy_stream(
    src: BinaryIO,
    dst: BinaryIO,
    buffer_size: int,
    src_name: str = "source",
    dst_name: str = "destination",
) -> int:
    """Копирует src в dst блоками по buffer_size до конца входа; возвращает число байтов.

    При ошибке чтения или записи копирование прерывается, уже записанное
    в dst не откатывается.
    """
    total = 0
    while True:
        try:
            chunk = src.read(buffer_size)
        except STREAM_ERRORS as exc:
            raise TransferError(f"read {src_name}: {exc}") from exc
        if not chunk:
            return total
        try:
            dst.write(chunk)
        except STREAM_ERRORS as exc:
            raise TransferError(f"write {dst_name}: {exc}") from exc
        total += len(chunk)


@contextmanager
def released(stream: BinaryIO, name: str) -> Iterator[BinaryIO]:
    """Закрывает поток на любом пути выхода.

    Ошибка close() после успешного копирования поднимается как TransferError:
    для gs:// именно в close() уходит последний запрос загрузки. Если копирование
    уже упало, ошибка закрытия только выводится, а наружу идёт исходная ошибка.
    """
    try:
        yield stream
    except BaseException:
        try:
            # discard() есть у одиночной загрузки: недописанный объект не отправляется
            getattr(stream, "discard", stream.close)()
        except STREAM_ERRORS as exc:
            warn(f"{name}: close failed: {exc}")
        raise
    try:
        stream.close()
    except STREAM_ERRORS as exc:
        raise TransferError(f"{name}: close failed: {exc}") from exc


def copy_path(source: str, destination: str, settings: CopySettings, client_factory: ClientFactory) -> int:
    src_location = classify(source)
    dst_location = classify(destination)

    with ExitStack() as stack:
        src = stack.enter_context(released(open_read(src_location, client_factory, settings), source))
        dst = stack.enter_context(released(open_write(dst_location, client_factory, settings), destination))
        return copy_stream(src, dst, settings.buffer_size, source, destination)
