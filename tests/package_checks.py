from __future__ import annotations

import logging
import sys

import httpx

import backoffkit
from backoffkit.policy import retry_after_http, should_retry_http

logger: logging.Logger = logging.getLogger(__name__)


def check_count_bound() -> None:
    logger.info("Checking count bound...")
    retry = backoffkit.RetryController(max_retries=5)
    while retry.ongoing():
        retry.next_delay()
    assert isinstance(retry.err(), backoffkit.RetriesExhaustedError)


def check_deadline_bound() -> None:
    logger.info("Checking deadline bound...")
    with backoffkit.RetryController(default_timeout=0.5) as retry:
        while retry.ongoing():
            retry.wait()
        assert isinstance(retry.err(), backoffkit.DeadlineExceededError)


def check_http_policy() -> None:
    logger.info("Checking HTTP policy...")
    response = httpx.Response(429, headers={"Retry-After": "2"})
    assert should_retry_http(response)
    assert retry_after_http(response) == 2.0


def main() -> None:
    r"""Run all package checks to validate installation and
    functionality."""
    try:
        check_count_bound()
        check_deadline_bound()
        check_http_policy()

        logger.info("✅ All package checks passed successfully!")
    except Exception:
        logger.exception("❌ Package check failed")
        sys.exit(1)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
