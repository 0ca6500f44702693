class TranslationCheckerError(Exception):
    def __init__(self, message: str, code: str = "CHECKER_ERROR") -> None:
        super().__init__(message)
        self.code = code


class ConfigurationError(TranslationCheckerError):
    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, "CONFIG_ERROR")
        self.field = field


class DiscoveryError(TranslationCheckerError):
    def __init__(self, message: str, path: str) -> None:
        super().__init__(message, "DISCOVERY_ERROR")
        self.path = path
