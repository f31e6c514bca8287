r"""Configuration and validation for retry controllers."""

from __future__ import annotations

__all__ = [
    "ControllerConfig",
    "DEFAULT_BASE_DELAY",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "MAX_JITTER",
    "RETRYABLE_POSTGRESQL_CODES",
    "RETRY_STATUS_CODES",
    "validate_controller_params",
    "validate_timeout",
]

from backoffkit.core.config import (
    DEFAULT_BASE_DELAY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    MAX_JITTER,
    RETRY_STATUS_CODES,
    RETRYABLE_POSTGRESQL_CODES,
    ControllerConfig,
)
from backoffkit.core.validation import validate_controller_params, validate_timeout
