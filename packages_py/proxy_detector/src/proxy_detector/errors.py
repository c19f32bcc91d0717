from .types import FailureKind


class ProxyDetectionError(Exception):
    """Base exception for detector failures."""
    kind: FailureKind = FailureKind.IO_FAILURE


class MalformedSourceError(ProxyDetectionError):
    """Raised when a source holds data that cannot be interpreted."""
    kind = FailureKind.MALFORMED_SOURCE


class AccessDeniedError(ProxyDetectionError):
    """Raised when the caller lacks the privilege to read a source."""
    kind = FailureKind.ACCESS_DENIED


class ContextMismatchError(ProxyDetectionError):
    """Raised when a per-user source is queried outside that user's context."""
    kind = FailureKind.CONTEXT_MISMATCH


class IOFailureError(ProxyDetectionError):
    """Raised when an underlying store or file cannot be read."""
    kind = FailureKind.IO_FAILURE


class SettingsError(Exception):
    """Raised when detector settings cannot be loaded."""
    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.path = path
