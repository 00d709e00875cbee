import argparse
import platform
import sys

from . import __version__
from .client import ClientProvider
from .config import load_copy_config, resolve_copy_settings
from .errors import GscpError
from .output import console, format_bytes
from .transfer import copy_path

PROG = "gscp"


class CopyArgumentParser(argparse.ArgumentParser):
    """ArgumentParser, который при ошибке использования завершается с кодом 1, а не 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def version_string(prog: str = PROG) -> str:
    return (
        f"{prog} version: {__version__} "
        f"({platform.python_implementation()} {platform.python_version()} "
        f"on {sys.platform}/{platform.machine()})"
    )


def build_parser() -> argparse.ArgumentParser:
    epilog = """
Примеры:

  # Скопировать локальный файл в бакет
  gscp ./report.csv gs://my-bucket/reports/report.csv

  # Скачать объект в stdout
  gscp gs://my-bucket/reports/report.csv - | head

  # Загрузить stdin кусками по 8 MiB
  tar c ./data | GOOGLE_UPLOAD_CHUNK_SIZE=8388608 gscp - gs://my-bucket/data.tar

Переменные окружения:
  GOOGLE_APPLICATION_CREDENTIALS  путь к JSON-ключу сервисного аккаунта
  GOOGLE_UPLOAD_CHUNK_SIZE        размер куска загрузки в байтах (0 — одним запросом)
"""
    parser = CopyArgumentParser(
        prog=PROG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="Копирует байты между stdin/stdout, локальными файлами и объектами Google Cloud Storage",
        epilog=epilog,
    )
    parser.add_argument("source", help="Откуда читать: '-' (stdin), gs://bucket/key или локальный путь")
    parser.add_argument("destination", help="Куда писать: '-' (stdout), gs://bucket/key или локальный путь")
    parser.add_argument("--version", "-v", action="version", version=version_string(), help="Показать версию и выйти")
    parser.add_argument("--config", default=None, help="YAML-файл с настройками (credentials, upload_chunk_size, buffer_size)")
    parser.add_argument("--credentials", default=None, help="JSON-ключ сервисного аккаунта (перекрывает GOOGLE_APPLICATION_CREDENTIALS)")
    parser.add_argument("--chunk-size", dest="chunk_size", type=int, default=None, help="Размер куска загрузки в байтах; 0 — загрузка одним запросом (перекрывает GOOGLE_UPLOAD_CHUNK_SIZE)")
    parser.add_argument("--buffer-size", dest="buffer_size", type=int, default=None, help="Размер буфера копирования в байтах (по умолчанию: 65536)")
    parser.add_argument("--verbose", action="store_true", help="Вывести итог копирования в stderr")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config_model = load_copy_config(args.config) if args.config else None
        settings = resolve_copy_settings(args, config_model)
        client_provider = ClientProvider(settings)
        copied = copy_path(args.source, args.destination, settings, client_provider)
    except GscpError as exc:
        raise SystemExit(f"{parser.prog}: {exc}") from exc
    except KeyboardInterrupt:
        raise SystemExit(f"{parser.prog}: interrupted")

    if settings.verbose:
        console.print(f"Copied {format_bytes(copied)} from {args.source} to {args.destination}", markup=False, soft_wrap=True)
