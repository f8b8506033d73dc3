"""Memory subsystem error types.

Public orchestrator operations report these as structured results rather
than raising; they surface as exceptions only between internal layers.
"""


class MemorySystemError(Exception):
    """Base exception for memory subsystem errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(MemorySystemError):
    """Memory is enabled but a required setting (e.g. API key) is missing."""


class ConnectivityError(MemorySystemError):
    """The remote memory service could not be reached or rejected a call."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MemoryValidationError(MemorySystemError):
    """A required argument is missing or malformed."""


class MalformedDataError(MemorySystemError):
    """A stored value could not be parsed; recovered by skipping it."""
