r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy is a pure function of the retry number. It never
    includes jitter, which the controller adds on top of it.
    """

    @abstractmethod
    def calculate(self, retry: int) -> float:
        """Calculate the base delay for a given retry.

        Args:
            retry: The retry number (1-indexed). retry=1 is the delay
                before the first retry, retry=2 before the second, etc.

        Returns:
            The delay in seconds, without jitter.
        """
