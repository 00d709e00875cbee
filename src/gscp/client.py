from __future__ import annotations

from typing import Callable, Optional

from google.auth.exceptions import GoogleAuthError
from google.cloud import storage

from .config import CopySettings
from .errors import ClientError, ConfigError


def new_storage_client(settings: CopySettings) -> storage.Client:
    """Создаёт клиент GCS: из файла ключа сервисного аккаунта или через ambient-креденшлы."""
    keyfile = settings.credentials
    try:
        if keyfile:
            return storage.Client.from_service_account_json(keyfile)
        return storage.Client()
    except GoogleAuthError as exc:
        raise ClientError(f"cannot create storage client: {exc}") from exc
    except (OSError, ValueError) as exc:
        # без файла ключа это сбой ambient-окружения, а не конфигурации
        if not keyfile:
            raise ClientError(f"cannot create storage client: {exc}") from exc
        if isinstance(exc, FileNotFoundError):
            raise ConfigError(f"credentials file not found: {keyfile}") from exc
        raise ConfigError(f"cannot load credentials file {keyfile}: {exc}") from exc


class ClientProvider:
    """Создаёт клиент при первом обращении и отдаёт один и тот же экземпляр дальше.

    Локальные копии и stdio не требуют креденшлов, поэтому клиент строится
    только когда открывается gs://-путь.
    """

    def __init__(self, settings: CopySettings, factory: Optional[Callable[[CopySettings], storage.Client]] = None):
        self._settings = settings
        self._factory = factory or new_storage_client
        self._client: Optional[storage.Client] = None

    @property
    def created(self) -> bool:
        return self._client is not None

    def __call__(self) -> storage.Client:
        if self._client is None:
            self._client = self._factory(self._settings)
        return self._client
