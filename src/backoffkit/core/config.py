r"""Configuration dataclass and defaults for retry controllers.

This module provides configuration constants and a dataclass-based
configuration object for ``RetryController`` and
``AsyncRetryController``.
"""

from __future__ import annotations

__all__ = [
    "ControllerConfig",
    "DEFAULT_BASE_DELAY",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "MAX_JITTER",
    "RETRYABLE_POSTGRESQL_CODES",
    "RETRY_STATUS_CODES",
]

from dataclasses import dataclass, replace
from typing import Any

from backoffkit.core.validation import validate_controller_params

# Timeout in seconds of the deadline synthesized when a controller is
# bounded neither by a retry count nor by a caller deadline
DEFAULT_TIMEOUT = 64.0

# 0 means the retry loop is only bounded by its deadline
DEFAULT_MAX_RETRIES = 0

# Base delay of the exponential law, in seconds
# Wait time = base_delay * (2 ** retry)
# With 1.0: 1st retry waits 2s, 2nd waits 4s, 3rd waits 8s
DEFAULT_BASE_DELAY = 1.0

# Jitter is drawn uniformly in [0, MAX_JITTER) seconds, in whole milliseconds
# See https://cloud.google.com/iot/docs/how-tos/exponential-backoff
MAX_JITTER = 1.0

# HTTP status codes worth retrying
# 429: Too Many Requests - Rate limiting
# 5xx: Server errors
RETRY_STATUS_CODES = (429, *range(500, 600))

# PostgreSQL SQLSTATE codes worth retrying
# See https://www.postgresql.org/docs/current/errcodes-appendix.html
RETRYABLE_POSTGRESQL_CODES = frozenset(
    {
        # connection exceptions
        "08000",
        "08001",
        "08004",
        "08006",
        # invalid transaction state
        "25000",
        "25P01",
        "25P02",
        "25P03",
        # invalid transaction termination
        "2D000",
    }
)


@dataclass
class ControllerConfig:
    """Configuration for retry controllers.

    Args:
        max_retries: Maximum number of retries. Must be >= 0. 0 means the
            loop is only bounded by its deadline.
        default_timeout: Timeout in seconds of the synthesized deadline
            used when the loop would otherwise be unbounded. Must be > 0.
        max_jitter: Exclusive upper bound in seconds of the random jitter
            added to every wait. Must be >= 0.
        base_delay: Base delay in seconds of the exponential law.
            Must be >= 0.

    Example:
        ```pycon
        >>> from backoffkit.core.config import ControllerConfig
        >>> config = ControllerConfig()
        >>> config.default_timeout
        64.0
        >>> config = ControllerConfig(max_retries=5)
        >>> merged = config.merge(max_retries=10)
        >>> merged.max_retries
        10
        >>> config.max_retries
        5

        ```
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    default_timeout: float = DEFAULT_TIMEOUT
    max_jitter: float = MAX_JITTER
    base_delay: float = DEFAULT_BASE_DELAY

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_controller_params(
            max_retries=self.max_retries,
            default_timeout=self.default_timeout,
            max_jitter=self.max_jitter,
            base_delay=self.base_delay,
        )

    def merge(self, **overrides: Any) -> ControllerConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ControllerConfig instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary format.

        Returns:
            Dictionary with the controller configuration parameters.
        """
        return {
            "max_retries": self.max_retries,
            "default_timeout": self.default_timeout,
            "max_jitter": self.max_jitter,
            "base_delay": self.base_delay,
        }
