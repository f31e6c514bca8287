r"""Blocking retry controller.

This module provides ``RetryController``, which decides when a retry
loop should wait, how long, and when it should give up. It does not
perform the retried operation itself.

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
    ...         if do_remote_call():
    ...             break
    ...         retry.wait()
    ...     error = retry.err()
    ...

    ```
"""

from __future__ import annotations

__all__ = ["RetryController"]

from typing import TYPE_CHECKING

from backoffkit.core.controller_logic import BaseRetryController

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self


class RetryController(BaseRetryController):
    """Retry controller blocking the calling thread between retries.

    The delay before retry ``n`` is ``2 ** n`` seconds plus a random
    jitter below one second. A wait is interrupted as soon as the deadline
    expires or is cancelled, including from another thread.

    Example:
        ```pycon
        >>> from backoffkit import RetryController
        >>> retry = RetryController(max_retries=3)
        >>> retries = 0
        >>> while retry.ongoing():
        ...     _ = retry.next_delay()
        ...     retries += 1
        ...
        >>> retries
        3
        >>> retry.err()
        RetriesExhaustedError('terminated after 3 retries')

        ```
    """

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def wait(self) -> None:
        """Sleep for the next exponential delay, then return.

        The retry count is incremented once. Returns early if the deadline
        fires, and immediately if the controller is not ongoing.
        """
        if not self.ongoing():
            return
        self._sleep(self.next_delay())

    def wait_for(self, delay: float) -> None:
        """Sleep for a caller-supplied delay, for example one provided by
        the remote API, then return.

        The retry count is incremented once, just like ``wait``. A zero
        delay falls back to ``wait``, so callers can pass the result of
        ``retry_after_http`` without checking it. Negative delays are
        treated as zero. Jitter is added to the delay.

        Args:
            delay: The suggested delay in seconds.
        """
        if delay == 0:
            self.wait()
            return
        if not self.ongoing():
            return
        self._sleep(self._advance_for(delay))

    def _sleep(self, delay: float) -> None:
        self._log_wait(delay)
        if self._deadline.wait(delay):
            self._on_deadline()
