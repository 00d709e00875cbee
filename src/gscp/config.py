from __future__ import annotations

import os
import re
from argparse import Namespace
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError

CREDENTIALS_ENV = "GOOGLE_APPLICATION_CREDENTIALS"
CHUNK_SIZE_ENV = "GOOGLE_UPLOAD_CHUNK_SIZE"

DEFAULT_BUFFER_SIZE = 64 * 1024

# как strconv.Atoi: только знак и десятичные цифры, без пробелов и "_"
INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class CopyConfigModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    credentials: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("credentials", "credentials_file", "credentials-file"),
    )
    # 0 — загрузка одним запросом, >0 — resumable upload кусками такого размера
    upload_chunk_size: Optional[int] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("upload_chunk_size", "upload-chunk-size", "chunk_size", "chunk-size"),
    )
    buffer_size: Optional[int] = Field(
        default=None,
        gt=0,
        validation_alias=AliasChoices("buffer_size", "buffer-size"),
    )


@dataclass(frozen=True)
class CopySettings:
    credentials: Optional[str] = None
    # строка — сырое значение GOOGLE_UPLOAD_CHUNK_SIZE, разбирается только для gs://-назначения
    upload_chunk_size: Union[int, str] = 0
    buffer_size: int = DEFAULT_BUFFER_SIZE
    verbose: bool = False

    def chunk_size(self) -> int:
        if isinstance(self.upload_chunk_size, str):
            return parse_chunk_size(self.upload_chunk_size) or 0
        return self.upload_chunk_size


def load_copy_config(path: str) -> CopyConfigModel:
    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")
    try:
        with config_path.open("r", encoding="utf-8") as fh:
            parsed = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc
    if isinstance(parsed, dict) and "gscp" in parsed and isinstance(parsed["gscp"], dict):
        parsed = parsed["gscp"]
    if not isinstance(parsed, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping at the top level.")
    try:
        return CopyConfigModel(**parsed)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {config_path}: {exc}") from exc


def parse_chunk_size(raw: Optional[str]) -> Optional[int]:
    """Разбирает значение GOOGLE_UPLOAD_CHUNK_SIZE. Пустое или отсутствующее — None."""
    if raw is None or raw == "":
        return None
    if not INTEGER_RE.fullmatch(raw):
        raise ConfigError(f"{CHUNK_SIZE_ENV}: not an integer: {raw!r}")
    size = int(raw)
    if size < 0:
        raise ConfigError(f"{CHUNK_SIZE_ENV}: must not be negative: {size}")
    return size


def resolve_copy_settings(
    cli_args: Namespace,
    config: Optional[CopyConfigModel] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> CopySettings:
    """Собирает настройки: CLI > переменные окружения > YAML-конфиг > значения по умолчанию."""
    if environ is None:
        environ = os.environ

    env_values = {
        "credentials": environ.get(CREDENTIALS_ENV) or None,
        "upload_chunk_size": environ.get(CHUNK_SIZE_ENV) or None,
    }

    def pick(name: str, cli_name: Optional[str] = None, default=None):
        cli_value = getattr(cli_args, cli_name or name, None)
        if cli_value is not None:
            return cli_value
        env_value = env_values.get(name)
        if env_value is not None:
            return env_value
        if config is not None:
            conf_value = getattr(config, name)
            if conf_value is not None:
                return conf_value
        return default

    credentials = pick("credentials")
    upload_chunk_size = pick("upload_chunk_size", cli_name="chunk_size", default=0)
    buffer_size = pick("buffer_size", default=DEFAULT_BUFFER_SIZE)

    if isinstance(upload_chunk_size, int) and upload_chunk_size < 0:
        raise ConfigError(f"upload chunk size must not be negative: {upload_chunk_size}")
    if buffer_size <= 0:
        raise ConfigError(f"buffer size must be positive: {buffer_size}")

    return CopySettings(
        credentials=credentials,
        upload_chunk_size=upload_chunk_size,
        buffer_size=buffer_size,
        verbose=bool(getattr(cli_args, "verbose", False)),
    )
