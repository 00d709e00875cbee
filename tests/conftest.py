import io

import pytest
from google.api_core.exceptions import NotFound

from gscp.config import CopySettings


class FakeUpload(io.BytesIO):
    """Поток blob.open("wb"): данные попадают в хранилище при close()."""

    def __init__(self, blob, chunk_size):
        super().__init__()
        self._blob = blob
        self.chunk_size = chunk_size

    def close(self):
        if not self.closed:
            self._blob.client.objects[(self._blob.bucket_name, self._blob.name)] = self.getvalue()
        super().close()


class FakeBlob:
    def __init__(self, client, bucket_name, name):
        self.client = client
        self.bucket_name = bucket_name
        self.name = name

    def reload(self):
        if self.client.reload_error is not None:
            raise self.client.reload_error
        if not self.name:
            raise ValueError("Cannot determine path without a blob name.")
        if (self.bucket_name, self.name) not in self.client.objects:
            raise NotFound(f"No such object: {self.bucket_name}/{self.name}")

    def open(self, mode="r", chunk_size=None, ignore_flush=False):
        self.client.calls.append(("open", self.bucket_name, self.name, mode, chunk_size))
        if mode == "rb":
            return io.BytesIO(self.client.objects[(self.bucket_name, self.name)])
        if mode == "wb":
            return FakeUpload(self, chunk_size)
        raise ValueError(f"unsupported mode {mode}")

    def upload_from_file(self, file_obj, rewind=False, size=None):
        self.client.calls.append(("upload_from_file", self.bucket_name, self.name, size))
        if not self.name:
            raise ValueError("Cannot determine path without a blob name.")
        if rewind:
            file_obj.seek(0)
        self.client.objects[(self.bucket_name, self.name)] = file_obj.read()


class FakeBucket:
    def __init__(self, client, name):
        self.client = client
        self.name = name

    def blob(self, name):
        return FakeBlob(self.client, self.name, name)


class FakeClient:
    """In-memory замена google.cloud.storage.Client."""

    def __init__(self, objects=None):
        self.objects = dict(objects or {})
        self.calls = []
        # исключение, которое бросит следующий reload()
        self.reload_error = None

    def bucket(self, name):
        return FakeBucket(self, name)


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def client_factory(fake_client):
    return lambda: fake_client


@pytest.fixture
def settings():
    return CopySettings()


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)
    monkeypatch.delenv("GOOGLE_UPLOAD_CHUNK_SIZE", raising=False)
