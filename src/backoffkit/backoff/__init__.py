r"""Backoff strategies for retry delays.

This package provides the delay laws used by retry controllers. The
default is an exponential law doubling the delay on every retry.
"""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ExponentialBackoff"]

from backoffkit.backoff.base import BaseBackoffStrategy
from backoffkit.backoff.exponential import ExponentialBackoff
