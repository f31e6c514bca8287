r"""Utility functions for retry controllers.

This package provides helpers for jitter calculation, Retry-After header
parsing, and structured logging.
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "draw_jitter",
    "get_correlation_id",
    "log_structured",
    "parse_retry_after",
    "set_correlation_id",
]

from backoffkit.utils.jitter import draw_jitter
from backoffkit.utils.retry_after import parse_retry_after
from backoffkit.utils.structured_logging import (
    StructuredFormatter,
    clear_correlation_id,
    get_correlation_id,
    log_structured,
    set_correlation_id,
)
