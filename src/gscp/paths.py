from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .errors import InvalidRemotePath

GS_PREFIX = "gs://"
STDIO_SENTINEL = "-"


@dataclass(frozen=True)
class Stdio:
    def __str__(self) -> str:
        return STDIO_SENTINEL


@dataclass(frozen=True)
class Local:
    path: str

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class Remote:
    bucket: str
    key: str = ""

    def __str__(self) -> str:
        return format_remote(self.bucket, self.key)


Location = Union[Stdio, Local, Remote]


def is_gs_path(path: str) -> bool:
    return len(path) > len(GS_PREFIX) and path[:len(GS_PREFIX)] == GS_PREFIX


def split_gs_path(path: str) -> tuple[str, str]:
    """Делит ``gs://bucket/key`` на (bucket, key) по первому '/'; key может быть пустым."""
    bucket, _, key = path[len(GS_PREFIX):].partition("/")
    return bucket, key


def format_remote(bucket: str, key: str) -> str:
    if key:
        return f"{GS_PREFIX}{bucket}/{key}"
    return f"{GS_PREFIX}{bucket}"


def classify(path: str) -> Location:
    """Определяет вид пути: stdio, объект в бакете или локальный файл.

    Путь с префиксом ``gs://`` и пустым именем бакета (``gs://``, ``gs:///key``)
    считается ошибкой, а не локальным путём.
    """
    if path == STDIO_SENTINEL:
        return Stdio()
    if path.startswith(GS_PREFIX):
        if not is_gs_path(path):
            raise InvalidRemotePath(path, "missing bucket name")
        bucket, key = split_gs_path(path)
        if not bucket:
            raise InvalidRemotePath(path, "missing bucket name")
        return Remote(bucket, key)
    return Local(path)
