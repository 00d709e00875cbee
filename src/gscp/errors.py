"""Иерархия ошибок gscp. Все ошибки фатальны для одного запуска."""


class GscpError(Exception):
    """Базовая ошибка: cli.main превращает её в SystemExit с кодом 1."""


class ConfigError(GscpError):
    pass


class InvalidRemotePath(ConfigError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"invalid remote path {path!r}: {reason}")
        self.path = path


class ClientError(GscpError):
    pass


class StreamOpenError(GscpError):
    def __init__(self, location: str, cause: BaseException):
        super().__init__(f"{location}: {cause}")
        self.location = location


class TransferError(GscpError):
    pass
