r"""Unit tests for controller parameter validation."""

from __future__ import annotations

import pytest

from backoffkit.core.validation import validate_controller_params, validate_timeout

######################################
#     Tests for validate_timeout     #
######################################


@pytest.mark.parametrize("timeout", [0.001, 1, 64.0])
def test_validate_timeout_valid(timeout: float) -> None:
    validate_timeout(timeout)


@pytest.mark.parametrize("timeout", [0, 0.0, -1.0])
def test_validate_timeout_invalid(timeout: float) -> None:
    with pytest.raises(ValueError, match=r"timeout must be > 0"):
        validate_timeout(timeout)


def test_validate_timeout_name() -> None:
    with pytest.raises(ValueError, match=r"default_timeout must be > 0, got -2"):
        validate_timeout(-2, name="default_timeout")


################################################
#     Tests for validate_controller_params     #
################################################


@pytest.mark.parametrize("max_retries", [0, 1, 100])
def test_validate_controller_params_valid(max_retries: int) -> None:
    validate_controller_params(max_retries=max_retries, default_timeout=64.0)


def test_validate_controller_params_zero_jitter_and_delay() -> None:
    validate_controller_params(max_retries=0, default_timeout=1.0, max_jitter=0.0, base_delay=0.0)


def test_validate_controller_params_negative_max_retries() -> None:
    with pytest.raises(ValueError, match=r"max_retries must be >= 0, got -1"):
        validate_controller_params(max_retries=-1, default_timeout=64.0)


def test_validate_controller_params_invalid_default_timeout() -> None:
    with pytest.raises(ValueError, match=r"default_timeout must be > 0, got 0"):
        validate_controller_params(max_retries=0, default_timeout=0)


def test_validate_controller_params_negative_jitter() -> None:
    with pytest.raises(ValueError, match=r"max_jitter must be >= 0"):
        validate_controller_params(max_retries=0, default_timeout=1.0, max_jitter=-1.0)


def test_validate_controller_params_negative_base_delay() -> None:
    with pytest.raises(ValueError, match=r"base_delay must be >= 0"):
        validate_controller_params(max_retries=0, default_timeout=1.0, base_delay=-1.0)
