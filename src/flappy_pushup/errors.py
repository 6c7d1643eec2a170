"""
errors.py: Exception types shared by the game and the ranking service.
"""


class ValidationError(ValueError):
    """Malformed ranking input. Surfaced to HTTP callers as a 400."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StorageUnavailable(RuntimeError):
    """The persistence layer failed (database or local file)."""


class SignalUnavailable(LookupError):
    """No control input has been observed yet."""
