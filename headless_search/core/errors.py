"""Error taxonomy shared by the transport, the engine and controllers."""

from enum import StrEnum


class ErrorKind(StrEnum):
    """User-visible failure categories stored on canonical state."""

    NETWORK = "network"
    AUTH = "auth"
    SERVER = "server"


class SearchError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(SearchError):
    """Engine cannot be built from the given configuration."""

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("Invalid search configuration: " + "; ".join(self.problems))


class TransportError(SearchError):
    """A backend call failed. Subclasses pin the ``kind``."""

    kind: ErrorKind = ErrorKind.SERVER

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NetworkError(TransportError):
    kind = ErrorKind.NETWORK


class AuthError(TransportError):
    kind = ErrorKind.AUTH


class ServerError(TransportError):
    kind = ErrorKind.SERVER
