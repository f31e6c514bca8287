r"""Cancellable deadlines bounding retry loops in time.

A ``Deadline`` is a cancellation signal with an optional expiry time. It
can be derived from a parent deadline: the child never outlives its
parent, and cancelling the parent cancels the child. Blocking waiters
(``wait``) and asyncio waiters (``wait_async``) are woken as soon as the
deadline expires or is cancelled, from any thread.

Example:
    ```pycon
    >>> from backoffkit.deadline import Deadline, with_timeout
    >>> root = Deadline.background()
    >>> root.expires_at is None
    True
    >>> child = with_timeout(root, 30.0)
    >>> child.done()
    False
    >>> root.cancel()
    >>> child.done()
    True
    >>> child.err()
    DeadlineCancelledError('deadline cancelled')

    ```
"""

from __future__ import annotations

__all__ = ["Deadline", "with_timeout"]

import asyncio
import logging
import threading
import time
import weakref
from typing import TYPE_CHECKING

from backoffkit.core.validation import validate_timeout
from backoffkit.exceptions import DeadlineCancelledError, DeadlineError, DeadlineExceededError

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType
    from typing import Self

logger: logging.Logger = logging.getLogger(__name__)


class Deadline:
    r"""Cancellation signal with an optional expiry time.

    Thread-safe implementation using a lock and an event.

    Args:
        timeout: Optional number of seconds after which the deadline
            expires. Must be > 0 if provided. If None, the deadline only
            expires with its parent or when cancelled.
        parent: Optional parent deadline. The child expires no later than
            its parent and is cancelled when its parent is, as long as
            something else keeps a reference to it.

    Attributes:
        expires_at: The ``time.monotonic()`` value at which the deadline
            expires, or None if it has no expiry.

    Raises:
        ValueError: If timeout is not positive.

    Example:
        ```pycon
        >>> from backoffkit.deadline import Deadline
        >>> with Deadline(10.0) as deadline:
        ...     deadline.remaining() <= 10.0
        ...
        True
        >>> deadline.err()
        DeadlineCancelledError('deadline cancelled')

        ```
    """

    def __init__(self, timeout: float | None = None, *, parent: Deadline | None = None) -> None:
        if timeout is not None:
            validate_timeout(timeout)

        expires_at = None if timeout is None else time.monotonic() + timeout
        if parent is not None and parent.expires_at is not None:
            expires_at = (
                parent.expires_at if expires_at is None else min(expires_at, parent.expires_at)
            )
        self._expires_at = expires_at
        self._parent = parent

        # State tracking (protected by lock)
        self._error: DeadlineError | None = None
        self._children: weakref.WeakSet[Deadline] = weakref.WeakSet()
        self._callbacks: list[Callable[[], None]] = []
        self._lock = threading.Lock()
        self._done = threading.Event()

        if parent is not None:
            parent._attach(self)

    @classmethod
    def background(cls) -> Deadline:
        """Create a deadline that never expires and is only done when
        cancelled."""
        return cls()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(remaining={self.remaining()}, error={self._error!r})"

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.cancel()

    @property
    def expires_at(self) -> float | None:
        return self._expires_at

    def remaining(self) -> float | None:
        """Return the number of seconds before expiry.

        Returns:
            The remaining time in seconds (never negative), or None if the
            deadline has no expiry.
        """
        if self._expires_at is None:
            return None
        return max(self._expires_at - time.monotonic(), 0.0)

    def err(self) -> DeadlineError | None:
        """Return why the deadline is done.

        Returns:
            ``DeadlineExceededError`` if it expired,
            ``DeadlineCancelledError`` if it was cancelled, or None while it
            is still running.
        """
        with self._lock:
            error = self._error
        if error is None and self._expires_at is not None and time.monotonic() >= self._expires_at:
            self._finish(DeadlineExceededError())
            with self._lock:
                error = self._error
        return error

    def done(self) -> bool:
        """Indicate whether the deadline has expired or was cancelled."""
        return self.err() is not None

    def cancel(self) -> None:
        """Cancel the deadline and all the deadlines derived from it.

        Cancelling a deadline that is already done is a no-op, apart from
        releasing its link to its parent.
        """
        self._finish(DeadlineCancelledError())

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the deadline is done or ``timeout`` seconds elapsed.

        Args:
            timeout: Optional maximum number of seconds to block. If None,
                block until the deadline is done.

        Returns:
            True if the deadline is done, False if the timeout elapsed first.
        """
        end = None if timeout is None else time.monotonic() + timeout
        while not self.done():
            if end is not None and time.monotonic() >= end:
                return False
            self._done.wait(self._next_timeout(end))
        return True

    async def wait_async(self, timeout: float | None = None) -> bool:
        """Suspend the current task until the deadline is done or
        ``timeout`` seconds elapsed.

        The task is woken immediately when the deadline is cancelled,
        including from another thread.

        Args:
            timeout: Optional maximum number of seconds to wait. If None,
                wait until the deadline is done.

        Returns:
            True if the deadline is done, False if the timeout elapsed first.
        """
        end = None if timeout is None else time.monotonic() + timeout
        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[None] = loop.create_future()

        def _wake() -> None:
            if not waiter.done():
                waiter.set_result(None)

        def _on_done() -> None:
            loop.call_soon_threadsafe(_wake)

        self.add_done_callback(_on_done)
        try:
            while not self.done():
                if end is not None and time.monotonic() >= end:
                    return False
                await asyncio.wait({waiter}, timeout=self._next_timeout(end))
            return True
        finally:
            self.remove_done_callback(_on_done)

    def add_done_callback(self, callback: Callable[[], None]) -> None:
        """Register a callback invoked once when the deadline is cancelled
        or detected as expired.

        The callback runs immediately if the deadline is already done.
        Callbacks may run on any thread.
        """
        with self._lock:
            if self._error is None:
                self._callbacks.append(callback)
                return
        self._invoke(callback)

    def remove_done_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def _next_timeout(self, end: float | None) -> float | None:
        candidates = [
            t
            for t in (self.remaining(), None if end is None else end - time.monotonic())
            if t is not None
        ]
        if not candidates:
            return None
        # Event.wait rejects timeouts above TIMEOUT_MAX
        return min(max(min(candidates), 0.0), threading.TIMEOUT_MAX)

    def _attach(self, child: Deadline) -> None:
        with self._lock:
            if self._error is None:
                self._children.add(child)
                return
            error = self._error
        child._finish(type(error)())

    def _detach(self, child: Deadline) -> None:
        with self._lock:
            self._children.discard(child)

    def _finish(self, error: DeadlineError) -> None:
        with self._lock:
            if self._error is None:
                self._error = error
                self._done.set()
                children, self._children = list(self._children), weakref.WeakSet()
                callbacks, self._callbacks = self._callbacks, []
            else:
                children, callbacks = [], []

        if self._parent is not None:
            self._parent._detach(self)
        for child in children:
            child._finish(type(error)())
        for callback in callbacks:
            self._invoke(callback)

    @staticmethod
    def _invoke(callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Error in deadline done callback: {e}")


def with_timeout(parent: Deadline | None, timeout: float) -> Deadline:
    """Derive a deadline expiring after ``timeout`` seconds, or earlier if
    its parent does.

    Args:
        parent: The parent deadline, or None for a root deadline.
        timeout: Number of seconds before expiry. Must be > 0.

    Returns:
        The derived deadline. The parent only keeps a weak reference to
        it, so a derived deadline nobody refers to any more is released
        even if it is never cancelled.

    Example:
        ```pycon
        >>> from backoffkit.deadline import Deadline, with_timeout
        >>> parent = Deadline(5.0)
        >>> child = with_timeout(parent, 60.0)
        >>> child.expires_at == parent.expires_at
        True

        ```
    """
    return Deadline(timeout, parent=parent)
