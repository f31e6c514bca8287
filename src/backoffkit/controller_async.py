r"""Asyncio retry controller.

This module provides ``AsyncRetryController``, the asyncio twin of
``RetryController``. Waiting suspends the current task instead of
blocking the thread.

Example:
    ```pycon
    >>> import asyncio
    >>> from backoffkit import AsyncRetryController
    >>> async def main():  # doctest: +SKIP
    ...     async with AsyncRetryController(max_retries=5) as retry:
    ...         while retry.ongoing():
    ...             if await do_remote_call():
    ...                 break
    ...             await retry.wait()
    ...         return retry.err()
    ...
    >>> asyncio.run(main())  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = ["AsyncRetryController"]

from typing import TYPE_CHECKING

from backoffkit.core.controller_logic import BaseRetryController

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self


class AsyncRetryController(BaseRetryController):
    """Retry controller suspending the current task between retries.

    Same termination rules and delay law as ``RetryController``. A wait
    resumes as soon as the deadline expires or is cancelled, including
    from another thread. Cancelling the waiting task propagates
    ``asyncio.CancelledError`` as usual.
    """

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    async def wait(self) -> None:
        """Suspend for the next exponential delay.

        The retry count is incremented once. Resumes early if the deadline
        fires, and immediately if the controller is not ongoing.
        """
        if not self.ongoing():
            return
        await self._sleep(self.next_delay())

    async def wait_for(self, delay: float) -> None:
        """Suspend for a caller-supplied delay plus jitter.

        A zero delay falls back to ``wait``. The retry count is incremented
        once in every case.

        Args:
            delay: The suggested delay in seconds.
        """
        if delay == 0:
            await self.wait()
            return
        if not self.ongoing():
            return
        await self._sleep(self._advance_for(delay))

    async def _sleep(self, delay: float) -> None:
        self._log_wait(delay)
        if await self._deadline.wait_async(delay):
            self._on_deadline()
