"""gscp — копирование байтов между stdin/stdout, локальными файлами и Google Cloud Storage."""

__version__ = "1.0.0"
