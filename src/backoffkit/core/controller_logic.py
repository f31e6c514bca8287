r"""Shared controller logic for both sync and async retry controllers.

This module provides the state machine shared by ``RetryController`` and
``AsyncRetryController``: the retry counter, the deadline, and the
termination rules. Only the waiting differs between the two.
"""

from __future__ import annotations

__all__ = ["BaseRetryController"]

import logging
import random
from typing import TYPE_CHECKING

from backoffkit.backoff.exponential import ExponentialBackoff
from backoffkit.core.config import ControllerConfig
from backoffkit.deadline import Deadline, with_timeout
from backoffkit.exceptions import BackoffError, RetriesExhaustedError
from backoffkit.utils.jitter import draw_jitter
from backoffkit.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from backoffkit.backoff.base import BaseBackoffStrategy

logger: logging.Logger = logging.getLogger(__name__)


class BaseRetryController:
    """State machine of a retry loop.

    A controller is either ongoing or terminated. It terminates when its
    deadline expires or is cancelled, or when ``max_retries`` waits were
    issued (if ``max_retries`` > 0). There is no way back.

    If neither a retry count nor a deadline expiry bounds the loop, a
    deadline of ``default_timeout`` seconds (64 by default) is derived from
    the given deadline. The controller owns that deadline and cancels it
    when closed; a caller-supplied deadline is never cancelled.

    A controller is meant to be used by a single retry loop, and is not
    safe to share between threads or tasks.

    Args:
        deadline: Optional deadline bounding the loop in time.
        max_retries: Maximum number of retries. 0 means the loop is only
            bounded by its deadline. Overrides ``config.max_retries``.
        default_timeout: Timeout in seconds of the synthesized deadline.
            Overrides ``config.default_timeout``.
        max_jitter: Exclusive upper bound in seconds of the jitter added
            to every wait. Overrides ``config.max_jitter``.
        backoff_strategy: Optional strategy computing the base delay from
            the retry number. Defaults to
            ``ExponentialBackoff(config.base_delay)``.
        name: Optional name used in logs and metrics.
        config: Optional controller configuration.
        rng: Optional random number generator used to draw jitter.

    Raises:
        ValueError: If a parameter is out of range.
    """

    def __init__(
        self,
        deadline: Deadline | None = None,
        max_retries: int | None = None,
        *,
        default_timeout: float | None = None,
        max_jitter: float | None = None,
        backoff_strategy: BaseBackoffStrategy | None = None,
        name: str | None = None,
        config: ControllerConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._config = (config or ControllerConfig()).merge(
            max_retries=max_retries, default_timeout=default_timeout, max_jitter=max_jitter
        )
        self._backoff_strategy = backoff_strategy or ExponentialBackoff(
            base_delay=self._config.base_delay
        )
        self._name = name
        self._rng = rng

        self._owns_deadline = False
        self._released = False
        if deadline is None:
            deadline = Deadline.background()
        if deadline.expires_at is None and self._config.max_retries == 0:
            deadline = with_timeout(deadline, self._config.default_timeout)
            self._owns_deadline = True
            logger.debug(
                f"No retry bound for {self._label}, using a default deadline of "
                f"{self._config.default_timeout:.2f}s"
            )
        self._deadline = deadline

        self._num_retries = 0
        self._last_delay = 0.0

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(name={self._name!r}, num_retries={self._num_retries}, "
            f"max_retries={self.max_retries}, deadline={self._deadline!r})"
        )

    @property
    def deadline(self) -> Deadline:
        return self._deadline

    @property
    def owns_deadline(self) -> bool:
        """Indicate whether the deadline was synthesized by the controller."""
        return self._owns_deadline

    @property
    def max_retries(self) -> int:
        return self._config.max_retries

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def num_retries(self) -> int:
        """The number of waits issued so far."""
        return self._num_retries

    @property
    def last_delay(self) -> float:
        """The delay computed by the last call to ``next_delay``, in
        seconds, including jitter."""
        return self._last_delay

    @property
    def _label(self) -> str:
        return self._name or "retry controller"

    def ongoing(self) -> bool:
        """Indicate whether the caller should keep retrying.

        Returns:
            True if the deadline is not done and the retry count is not
            exhausted.
        """
        return not self._deadline.done() and (
            self.max_retries == 0 or self._num_retries < self.max_retries
        )

    def err(self) -> BackoffError | None:
        """Return the reason why the controller terminated.

        The deadline is checked first, so only one reason is ever reported.
        An owned deadline released by ``close`` before it was done is not
        a reason: a loop closed after a success reports None.

        Returns:
            The deadline error (``DeadlineExceededError`` or
            ``DeadlineCancelledError``), a ``RetriesExhaustedError``, or
            None while the controller is ongoing.
        """
        error = self._deadline.err()
        if error is not None and not self._released:
            return error
        if self.max_retries != 0 and self._num_retries >= self.max_retries:
            return RetriesExhaustedError(self._num_retries)
        return None

    def next_delay(self) -> float:
        """Advance the retry count and compute the delay before the next
        retry.

        Calling this method increments ``num_retries``, exactly like a
        ``wait`` does; ``wait`` calls it internally. The delay is
        ``2 ** num_retries`` seconds with the default strategy, plus a
        random jitter in ``[0, max_jitter)``.

        Returns:
            The delay in seconds.
        """
        self._num_retries += 1
        self._last_delay = self._backoff_strategy.calculate(self._num_retries) + self._jitter()
        return self._last_delay

    def close(self) -> None:
        """Release the deadline if the controller synthesized it.

        Cancelling a still running owned deadline this way is not a
        failure of the retry loop, and is not reported by ``err``.
        """
        if self._owns_deadline and not self._deadline.done():
            self._released = True
            self._deadline.cancel()

    def _advance_for(self, delay: float) -> float:
        """Advance the retry count for a caller-supplied delay and return
        the time to wait, jitter included."""
        self._num_retries += 1
        self._last_delay = max(delay, 0.0) + self._jitter()
        return self._last_delay

    def _jitter(self) -> float:
        return draw_jitter(self._config.max_jitter, rng=self._rng)

    def _log_wait(self, delay: float) -> None:
        log_structured(
            logger,
            logging.DEBUG,
            f"{self._label} waiting {delay:.2f}s before retry {self._num_retries}",
            controller=self._name,
            retry=self._num_retries,
            max_retries=self.max_retries,
            delay=delay,
        )

    def _on_deadline(self) -> None:
        logger.debug(f"{self._label} woken up by its deadline: {self._deadline.err()}")
        self.close()
