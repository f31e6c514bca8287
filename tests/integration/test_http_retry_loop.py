r"""Retry loops driving real httpx clients against a mock transport."""

from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest

from backoffkit import ControllerConfig, Deadline, RetriesExhaustedError, RetryController
from backoffkit.policy import retry_after_http, should_retry_http


def make_client(*statuses: tuple[int, dict[str, str]]) -> tuple[httpx.Client, list[httpx.Request]]:
    """Create a client answering the given (status, headers) in order, then
    repeating the last one."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        status_code, headers = statuses[min(len(requests), len(statuses)) - 1]
        return httpx.Response(status_code, headers=headers)

    return httpx.Client(transport=httpx.MockTransport(handler)), requests


def fetch(client: httpx.Client, retry: RetryController) -> httpx.Response | None:
    while retry.ongoing():
        response = client.get("https://api.example.com/data")
        if response.status_code == httpx.codes.OK:
            return response
        if not should_retry_http(response):
            response.raise_for_status()
        retry.wait_for(retry_after_http(response))
    return None


def test_retry_until_success(background: Deadline) -> None:
    client, requests = make_client((503, {}), (429, {"Retry-After": "3"}), (200, {}))
    retry = RetryController(background, 10, config=ControllerConfig(max_jitter=0.0))
    with client, patch.object(background, "wait", return_value=False) as wait:
        response = fetch(client, retry)

    assert response is not None
    assert response.status_code == 200
    assert len(requests) == 3
    # exponential delay for the 503, then the delay suggested by the server
    assert [c.args for c in wait.call_args_list] == [(2.0,), (3.0,)]
    assert retry.num_retries == 2
    assert retry.err() is None


def test_retry_exhausted(background: Deadline) -> None:
    client, requests = make_client((500, {}))
    retry = RetryController(background, 3)
    with client, patch.object(background, "wait", return_value=False):
        response = fetch(client, retry)

    assert response is None
    assert len(requests) == 3
    assert isinstance(retry.err(), RetriesExhaustedError)


def test_non_retryable_status_stops_loop(background: Deadline) -> None:
    client, requests = make_client((404, {}))
    retry = RetryController(background, 3)
    with client, pytest.raises(httpx.HTTPStatusError):
        fetch(client, retry)
    assert len(requests) == 1
    assert retry.num_retries == 0
