r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from backoffkit.backoff.base import BaseBackoffStrategy
from backoffkit.core.config import DEFAULT_BASE_DELAY


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as: base_delay * (2 ** retry), with optional max_delay cap.

    This is the strategy used by ``RetryController.next_delay``. With the
    default base delay of one second, the first retry waits 2s, the second
    4s, the third 8s, and so on.

    Args:
        base_delay: The base delay factor in seconds (default: 1.0).
        max_delay: Optional maximum delay cap in seconds.

    Example:
        ```pycon
        >>> from backoffkit.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff()
        >>> backoff.calculate(1)
        2.0
        >>> backoff.calculate(2)
        4.0
        >>> backoff.calculate(3)
        8.0
        >>> backoff = ExponentialBackoff(base_delay=1.0, max_delay=5.0)
        >>> backoff.calculate(10)
        5.0

        ```
    """

    def __init__(self, base_delay: float = DEFAULT_BASE_DELAY, max_delay: float | None = None) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        if max_delay is not None and max_delay <= 0:
            msg = f"max_delay must be positive if specified, got {max_delay}"
            raise ValueError(msg)

        self.base_delay = base_delay
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(base_delay={self.base_delay}, max_delay={self.max_delay})"

    def calculate(self, retry: int) -> float:
        """Calculate exponential backoff delay.

        Args:
            retry: The retry number (1-indexed).

        Returns:
            base_delay * (2 ** retry), capped at max_delay if set.
        """
        delay = float(self.base_delay * (2**retry))
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
