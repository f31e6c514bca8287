r"""Exceptions describing why a retry loop terminated.

A ``RetryController`` never raises these itself. They are returned by
``RetryController.err()`` once the controller stops reporting
``ongoing()``, and the caller decides whether to raise, log, or wrap them.
"""

from __future__ import annotations

__all__ = [
    "BackoffError",
    "DeadlineCancelledError",
    "DeadlineError",
    "DeadlineExceededError",
    "RetriesExhaustedError",
]


class BackoffError(RuntimeError):
    """Base class for all the terminal reasons of a retry loop."""


class DeadlineError(BackoffError):
    """Raised when a retry loop was bounded by its deadline."""


class DeadlineExceededError(DeadlineError):
    """The deadline expired before the retry loop finished.

    Example:
        ```pycon
        >>> from backoffkit.exceptions import DeadlineExceededError
        >>> str(DeadlineExceededError())
        'deadline exceeded'

        ```
    """

    def __init__(self, message: str = "deadline exceeded") -> None:
        super().__init__(message)


class DeadlineCancelledError(DeadlineError):
    """The deadline was cancelled explicitly, for example by an upstream
    caller."""

    def __init__(self, message: str = "deadline cancelled") -> None:
        super().__init__(message)


class RetriesExhaustedError(BackoffError):
    """The maximum number of retries was reached.

    Args:
        num_retries: The number of retries performed before giving up.

    Example:
        ```pycon
        >>> from backoffkit.exceptions import RetriesExhaustedError
        >>> error = RetriesExhaustedError(10)
        >>> str(error)
        'terminated after 10 retries'
        >>> error.num_retries
        10

        ```
    """

    def __init__(self, num_retries: int) -> None:
        super().__init__(f"terminated after {num_retries} retries")
        self.num_retries = num_retries
