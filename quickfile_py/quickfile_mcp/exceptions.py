class QuickFileError(Exception):
    """Base package error."""


class ConfigError(QuickFileError):
    """Credentials are missing or unreadable."""


class ClientError(QuickFileError):
    """A QuickFile API call failed.

    ``code`` is the HTTP status as a string, the vendor's own error code, or
    one of ``TIMEOUT``, ``NETWORK_ERROR``, ``PARSE_ERROR`` and ``UNKNOWN``.
    """

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return self.message


class ParseError(ClientError):
    def __init__(self, message: str = "Invalid API response structure") -> None:
        super().__init__(message, "PARSE_ERROR")


class ValidationError(QuickFileError):
    """Tool arguments were rejected before any request was sent."""
