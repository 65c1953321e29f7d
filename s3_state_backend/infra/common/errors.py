"""Centralized error types."""


class BackendError(Exception):
    """Base exception for backend errors."""
    pass


class ConfigError(BackendError):
    """Configuration error.

    Carries the diagnostics that caused it when raised from a validation pass.
    """

    def __init__(self, message: str, diagnostics=None):
        super().__init__(message)
        self.diagnostics = diagnostics
