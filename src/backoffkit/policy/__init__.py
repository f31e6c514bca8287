r"""Retry policies deciding whether a failure is worth retrying.

These helpers inspect the outcome of the caller's operation and feed
their decisions to a retry controller.
"""

from __future__ import annotations

__all__ = ["retry_after_http", "should_retry_http", "should_retry_postgresql"]

from backoffkit.policy.http import retry_after_http, should_retry_http
from backoffkit.policy.postgresql import should_retry_postgresql
