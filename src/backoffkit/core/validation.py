r"""Parameter validation utilities for retry controllers.

This module provides validation functions for the controller parameters
to ensure they meet the required constraints before a retry loop starts.
"""

from __future__ import annotations

__all__ = ["validate_controller_params", "validate_timeout"]


def validate_timeout(timeout: float, name: str = "timeout") -> None:
    """Validate a timeout expressed in seconds.

    Args:
        timeout: The timeout in seconds. Must be > 0.
        name: The parameter name used in the error message.

    Raises:
        ValueError: If timeout is <= 0.

    Example:
        ```pycon
        >>> from backoffkit.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout <= 0:
        msg = f"{name} must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_controller_params(
    max_retries: int,
    default_timeout: float,
    max_jitter: float = 1.0,
    base_delay: float = 1.0,
) -> None:
    """Validate retry controller parameters.

    Args:
        max_retries: Maximum number of retries. Must be >= 0. A value of 0
            means the retry loop is only bounded by its deadline.
        default_timeout: Timeout in seconds of the deadline synthesized when
            neither a retry count nor a deadline bounds the loop. Must be > 0.
        max_jitter: Upper bound (exclusive) in seconds of the random jitter
            added to every wait. Must be >= 0.
        base_delay: Base delay in seconds of the exponential law. Must be >= 0.

    Raises:
        ValueError: If any parameter is out of range.

    Example:
        ```pycon
        >>> from backoffkit.core.validation import validate_controller_params
        >>> validate_controller_params(max_retries=3, default_timeout=64.0)
        >>> validate_controller_params(max_retries=-1, default_timeout=64.0)
        Traceback (most recent call last):
        ...
        ValueError: max_retries must be >= 0, got -1

        ```
    """
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)
    validate_timeout(default_timeout, name="default_timeout")
    if max_jitter < 0:
        msg = f"max_jitter must be >= 0, got {max_jitter}"
        raise ValueError(msg)
    if base_delay < 0:
        msg = f"base_delay must be >= 0, got {base_delay}"
        raise ValueError(msg)
