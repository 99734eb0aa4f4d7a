"""
Error taxonomy for a bot cycle.

Every failure inside a cycle surfaces as one of these so the scheduler
can report which stage aborted.
"""

from typing import Optional


class QotdError(Exception):
    """Base exception for question bot failures."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class FetchError(QotdError):
    """The question source was unreachable or unreadable."""


class ReconcileError(QotdError):
    """Reconciliation of fetched lines failed unexpectedly."""


class NotifyError(QotdError):
    """Delivery to the notification channel failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message, original_error)
        self.status_code = status_code


class PersistError(QotdError):
    """Reading or writing durable state failed."""


class SerializationError(PersistError):
    """Persisted state exists but is malformed."""
