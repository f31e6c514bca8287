r"""Retry-After header parsing utilities.

This module provides functions for parsing the Retry-After header value
from HTTP responses according to RFC 7231, section 7.1.3.
"""

from __future__ import annotations

__all__ = ["parse_retry_after"]

import logging
from contextlib import suppress
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

logger: logging.Logger = logging.getLogger(__name__)


def parse_retry_after(retry_after_header: str | None) -> float:
    """Parse the Retry-After header value from an HTTP response.

    The Retry-After header can be specified in two formats according to RFC 7231:
    1. An integer representing the number of seconds to wait (e.g., "120")
    2. An HTTP-date in RFC 5322 format (e.g., "Wed, 21 Oct 2015 07:28:00 GMT")

    Args:
        retry_after_header: The value of the Retry-After header as a string,
            or None if the header is not present in the response.

    Returns:
        The number of seconds to wait before retrying. For an HTTP-date this
        is the parsed date minus the current time, so a date in the past
        yields a negative value. 0.0 if the header is absent or cannot be
        parsed, which ``wait_for`` treats as "use the exponential delay".

    Example:
        ```pycon
        >>> from backoffkit.utils import parse_retry_after
        >>> parse_retry_after("120")
        120.0
        >>> parse_retry_after(None)
        0.0
        >>> parse_retry_after("invalid")
        0.0

        ```
    """
    if not retry_after_header:
        return 0.0

    with suppress(ValueError, OverflowError):
        return float(int(retry_after_header))

    try:
        retry_date: datetime = parsedate_to_datetime(retry_after_header)
    except (ValueError, TypeError, OverflowError):
        logger.debug(f"Failed to parse Retry-After header: {retry_after_header!r}")
        return 0.0
    if retry_date.tzinfo is None:
        retry_date = retry_date.replace(tzinfo=timezone.utc)
    return (retry_date - datetime.now(timezone.utc)).total_seconds()
