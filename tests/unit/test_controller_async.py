r"""Unit tests for the asyncio AsyncRetryController."""

from __future__ import annotations

import asyncio
import threading
import time
from unittest.mock import AsyncMock, patch

import pytest

from backoffkit import (
    AsyncRetryController,
    ControllerConfig,
    Deadline,
    DeadlineCancelledError,
    DeadlineExceededError,
    RetriesExhaustedError,
)

#######################################################
#     Tests for AsyncRetryController termination      #
#######################################################


@pytest.mark.asyncio
async def test_async_controller_count_bounded_termination(
    background: Deadline, no_jitter: ControllerConfig
) -> None:
    """Test that a count-bounded async controller stops after exactly
    max_retries waits."""
    retry = AsyncRetryController(background, 4, config=no_jitter)
    with patch.object(retry.deadline, "wait_async", AsyncMock(return_value=False)) as wait:
        while retry.ongoing():
            await retry.wait()

    assert [c.args for c in wait.await_args_list] == [(2.0,), (4.0,), (8.0,), (16.0,)]
    error = retry.err()
    assert isinstance(error, RetriesExhaustedError)
    assert "terminated after 4 retries" in str(error)


@pytest.mark.asyncio
async def test_async_controller_deadline_bounded_termination() -> None:
    """Test that a deadline-bounded async controller stops shortly after
    the deadline expires."""
    start = time.monotonic()
    with Deadline(0.2) as deadline:
        retry = AsyncRetryController(deadline, 0)
        while retry.ongoing():
            await retry.wait()
        assert isinstance(retry.err(), DeadlineExceededError)
    assert time.monotonic() - start < 1.5


@pytest.mark.asyncio
async def test_async_controller_default_deadline_terminates() -> None:
    """Test that an async controller without any bound still terminates."""
    async with AsyncRetryController(default_timeout=0.2) as retry:
        assert retry.owns_deadline
        while retry.ongoing():
            await retry.wait()
        assert isinstance(retry.err(), DeadlineExceededError)


@pytest.mark.asyncio
async def test_async_controller_context_manager_releases_owned_deadline() -> None:
    async with AsyncRetryController(default_timeout=30.0) as retry:
        assert retry.ongoing()
    assert not retry.ongoing()
    assert retry.err() is None


############################################
#     Tests for AsyncRetryController.wait  #
############################################


@pytest.mark.asyncio
async def test_async_wait_noop_when_terminated(background: Deadline) -> None:
    retry = AsyncRetryController(background, 1)
    retry.next_delay()
    with patch.object(retry.deadline, "wait_async", AsyncMock()) as wait:
        await retry.wait()
    wait.assert_not_awaited()
    assert retry.num_retries == 1


@pytest.mark.asyncio
async def test_async_wait_woken_by_cancellation_from_thread() -> None:
    """Test that cancelling the deadline from another thread resumes the
    waiting task immediately."""
    with Deadline.background() as deadline:
        retry = AsyncRetryController(deadline, 3)
        timer = threading.Timer(0.1, deadline.cancel)
        timer.start()
        start = time.monotonic()
        await retry.wait()
        elapsed = time.monotonic() - start
        timer.join()

    assert elapsed < 1.5
    assert isinstance(retry.err(), DeadlineCancelledError)


@pytest.mark.asyncio
async def test_async_wait_woken_by_cancellation_from_task() -> None:
    with Deadline.background() as deadline:
        retry = AsyncRetryController(deadline, 3)

        async def cancel_later() -> None:
            await asyncio.sleep(0.1)
            deadline.cancel()

        task = asyncio.create_task(cancel_later())
        start = time.monotonic()
        await retry.wait()
        await task

    assert time.monotonic() - start < 1.5
    assert not retry.ongoing()


@pytest.mark.asyncio
async def test_async_wait_task_cancellation_propagates(background: Deadline) -> None:
    retry = AsyncRetryController(background, 3)
    task = asyncio.create_task(retry.wait())
    await asyncio.sleep(0.05)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert retry.num_retries == 1


################################################
#     Tests for AsyncRetryController.wait_for  #
################################################


@pytest.mark.asyncio
async def test_async_wait_for_zero_falls_back_to_wait(
    background: Deadline, no_jitter: ControllerConfig
) -> None:
    """Test that wait_for(0) behaves like wait."""
    retry = AsyncRetryController(background, 5, config=no_jitter)
    with patch.object(retry.deadline, "wait_async", AsyncMock(return_value=False)) as wait:
        await retry.wait_for(0)
    wait.assert_awaited_once_with(2.0)
    assert retry.num_retries == 1


@pytest.mark.asyncio
async def test_async_wait_for_uses_suggested_delay(
    background: Deadline, no_jitter: ControllerConfig
) -> None:
    """Test that wait_for increments the retry count exactly once."""
    retry = AsyncRetryController(background, 5, config=no_jitter)
    with patch.object(retry.deadline, "wait_async", AsyncMock(return_value=False)) as wait:
        await retry.wait_for(7.0)
    wait.assert_awaited_once_with(7.0)
    assert retry.num_retries == 1


@pytest.mark.asyncio
async def test_async_wait_for_woken_by_deadline() -> None:
    start = time.monotonic()
    with Deadline(0.1) as deadline:
        retry = AsyncRetryController(deadline, 0)
        await retry.wait_for(30.0)
        assert isinstance(retry.err(), DeadlineExceededError)
    assert time.monotonic() - start < 1.5


@pytest.mark.asyncio
async def test_async_wait_for_very_long_delay_woken_by_cancellation() -> None:
    with Deadline.background() as deadline:
        retry = AsyncRetryController(deadline, 3)
        asyncio.get_running_loop().call_later(0.1, deadline.cancel)
        start = time.monotonic()
        await retry.wait_for(1e10)
        elapsed = time.monotonic() - start

    assert elapsed < 1.5
    assert retry.num_retries == 1
    assert isinstance(retry.err(), DeadlineCancelledError)
