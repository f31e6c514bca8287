r"""backoffkit - Exponential backoff controller for retry loops.

This package governs how a caller repeatedly attempts an operation that
may transiently fail, such as a remote network call or a database query:
when to wait, how long to wait, and when to give up. It never performs
the retried operation itself.

Key Features:
    - Exponential delays (2s, 4s, 8s, ...) with up to one second of jitter
    - Termination by retry count, by deadline, or both
    - A 64 second default deadline when no other bound is given
    - Waits interrupted as soon as the deadline expires or is cancelled
    - Server-suggested delays (Retry-After) through ``wait_for``
    - Blocking and asyncio controllers
    - Retry policies for HTTP responses and PostgreSQL errors
    - Prometheus gauges on a caller-owned registry

Example:
    ```pycon
    >>> from backoffkit import RetryController
    >>> from backoffkit.deadline import Deadline
    >>> def do_remote_call():  # doctest: +SKIP
    ...     ...
    ...
    >>> with Deadline(60.0) as deadline:  # doctest: +SKIP
    ...     retry = RetryController(deadline, max_retries=10)
    ...     while retry.ongoing():
    ...         error = do_remote_call()
    ...         if error is None:
    ...             break
    ...         retry.wait()
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "AsyncRetryController",
    "BackoffError",
    "ControllerConfig",
    "Deadline",
    "DeadlineCancelledError",
    "DeadlineError",
    "DeadlineExceededError",
    "RetriesExhaustedError",
    "RetryController",
    "__version__",
    "with_timeout",
]

from importlib.metadata import PackageNotFoundError, version

from backoffkit.controller import RetryController
from backoffkit.controller_async import AsyncRetryController
from backoffkit.core.config import ControllerConfig
from backoffkit.deadline import Deadline, with_timeout
from backoffkit.exceptions import (
    BackoffError,
    DeadlineCancelledError,
    DeadlineError,
    DeadlineExceededError,
    RetriesExhaustedError,
)

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
