r"""Retry policy for HTTP responses.

Example:
    ```pycon
    >>> import httpx
    >>> from backoffkit import RetryController
    >>> from backoffkit.policy import retry_after_http, should_retry_http
    >>> def call_api():  # doctest: +SKIP
    ...     retry = RetryController(max_retries=10)
    ...     with httpx.Client() as client:
    ...         while retry.ongoing():
    ...             response = client.get("https://api.example.com/data")
    ...             if response.status_code == httpx.codes.OK:
    ...                 return response
    ...             if not should_retry_http(response):
    ...                 response.raise_for_status()
    ...             retry.wait_for(retry_after_http(response))
    ...     raise retry.err()
    ...

    ```
"""

from __future__ import annotations

__all__ = ["retry_after_http", "should_retry_http"]

import logging
from typing import TYPE_CHECKING

from backoffkit.core.config import RETRY_STATUS_CODES
from backoffkit.utils.retry_after import parse_retry_after

if TYPE_CHECKING:
    import httpx

logger: logging.Logger = logging.getLogger(__name__)


def should_retry_http(response: httpx.Response) -> bool:
    """Indicate whether retrying is a reasonable way to deal with an HTTP
    response.

    Args:
        response: The HTTP response.

    Returns:
        True for 429 (Too Many Requests) and any 5xx status code.

    Example:
        ```pycon
        >>> import httpx
        >>> from backoffkit.policy import should_retry_http
        >>> should_retry_http(httpx.Response(503))
        True
        >>> should_retry_http(httpx.Response(404))
        False

        ```
    """
    return response.status_code in RETRY_STATUS_CODES


def retry_after_http(response: httpx.Response) -> float:
    """Read the delay suggested by the server in the ``Retry-After``
    header.

    Both the HTTP-date and the integer seconds formats are supported.

    Args:
        response: The HTTP response.

    Returns:
        The suggested delay in seconds, or 0.0 if the header is absent or
        cannot be parsed. The result can be passed to ``wait_for`` as-is.

    Example:
        ```pycon
        >>> import httpx
        >>> from backoffkit.policy import retry_after_http
        >>> retry_after_http(httpx.Response(429, headers={"Retry-After": "120"}))
        120.0
        >>> retry_after_http(httpx.Response(503))
        0.0

        ```
    """
    delay = parse_retry_after(response.headers.get("Retry-After"))
    if delay:
        logger.debug(f"Server suggested a delay of {delay:.2f}s (status {response.status_code})")
    return delay
