from __future__ import annotations

import io
import sys
import tempfile
from typing import BinaryIO, Callable

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage

from .config import CopySettings
from .errors import StreamOpenError
from .paths import Local, Location, Remote, Stdio

# GCS принимает resumable-куски только кратные 256 KiB
CHUNK_ALIGNMENT = 256 * 1024
# До этого размера буфер одиночной загрузки живёт в памяти, дальше — во временном файле
SPOOL_MAX_SIZE = 8 * 1024 * 1024

ClientFactory = Callable[[], storage.Client]

# ошибки API, авторизации (RefreshError, TransportError), сети и библиотеки
# (ValueError для пустого имени объекта) при открытии gs://-потока
REMOTE_OPEN_ERRORS = (GoogleAPIError, GoogleAuthError, OSError, ValueError)


def align_chunk_size(size: int) -> int:
    if size <= 0:
        return 0
    return ((size + CHUNK_ALIGNMENT - 1) // CHUNK_ALIGNMENT) * CHUNK_ALIGNMENT


class SingleRequestWriter(io.BufferedIOBase):
    """Накапливает данные и отправляет объект одним upload_from_file() при close()."""

    def __init__(self, blob: storage.Blob):
        super().__init__()
        self._blob = blob
        self._buffer = tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_SIZE)
        self.bytes_buffered = 0

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        if self.closed:
            raise ValueError("write to closed upload stream")
        written = self._buffer.write(data)
        self.bytes_buffered += written
        return written

    def discard(self) -> None:
        """Закрывает поток без загрузки: объект в бакете не создаётся."""
        if self.closed:
            return
        self._buffer.close()
        super().close()

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._buffer.seek(0)
            self._blob.upload_from_file(self._buffer, rewind=True, size=self.bytes_buffered)
        finally:
            self._buffer.close()
            super().close()


def _stdio(fd: int, mode: str) -> BinaryIO:
    # closefd=False: закрытие потока не закрывает дескриптор процесса
    return open(fd, mode, closefd=False)


def _blob_for(location: Remote, client_factory: ClientFactory) -> storage.Blob:
    return client_factory().bucket(location.bucket).blob(location.key)


def open_read(location: Location, client_factory: ClientFactory, settings: CopySettings) -> BinaryIO:
    if isinstance(location, Stdio):
        return _stdio(sys.stdin.fileno(), "rb")
    if isinstance(location, Local):
        try:
            return open(location.path, "rb")
        except OSError as exc:
            raise StreamOpenError(location.path, exc) from exc
    if isinstance(location, Remote):
        try:
            blob = _blob_for(location, client_factory)
            # reload() заранее проверяет существование и доступ к объекту
            blob.reload()
            return blob.open("rb")
        except REMOTE_OPEN_ERRORS as exc:
            raise StreamOpenError(str(location), exc) from exc
    raise TypeError(f"unsupported location: {location!r}")


def open_write(location: Location, client_factory: ClientFactory, settings: CopySettings) -> BinaryIO:
    if isinstance(location, Stdio):
        return _stdio(sys.stdout.fileno(), "wb")
    if isinstance(location, Local):
        try:
            return open(location.path, "wb")
        except OSError as exc:
            raise StreamOpenError(location.path, exc) from exc
    if isinstance(location, Remote):
        chunk_size = align_chunk_size(settings.chunk_size())
        try:
            blob = _blob_for(location, client_factory)
            if chunk_size == 0:
                return SingleRequestWriter(blob)
            return blob.open("wb", chunk_size=chunk_size, ignore_flush=True)
        except REMOTE_OPEN_ERRORS as exc:
            raise StreamOpenError(str(location), exc) from exc
    raise TypeError(f"unsupported location: {location!r}")
