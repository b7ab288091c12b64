"""
Nick Error Types

Exceptions raised by the session facade:
- InvalidConfiguration: bad options, raised synchronously at construction
- UnsupportedEnvironment / IncompatibleEnvironment: no usable backend
- InitializationFailed: backend startup failed (delivered through await)
- UnobservedFailure: an async failure nobody awaited
"""

from typing import Optional


class NickError(Exception):
    """Base class for all nick errors."""


class InvalidConfiguration(NickError, ValueError):
    """
    Raised when a raw options mapping is malformed.

    Attributes:
        field: Raw option key that failed validation (None if the whole
            options value was rejected)
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class UnsupportedEnvironment(NickError):
    """Raised when no registered backend matches the host environment."""


class IncompatibleEnvironment(UnsupportedEnvironment):
    """
    Raised when the host runtime is recognized but lacks a capability
    its backend needs (for example Playwright is not installed).
    """

    def __init__(self, message: str, missing: frozenset[str] = frozenset()):
        super().__init__(message)
        self.missing = missing


class InitializationFailed(NickError):
    """Raised when the backend's one-time startup fails."""


class UnobservedFailure(NickError):
    """Raised by the supervisor when an async failure was never awaited."""
