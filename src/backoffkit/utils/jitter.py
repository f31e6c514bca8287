r"""Random jitter added to every retry delay.

Jitter spreads the retries of many callers failing at the same time,
which avoids synchronized retry storms against a recovering service.
"""

from __future__ import annotations

__all__ = ["draw_jitter"]

import random

from backoffkit.core.config import MAX_JITTER


def draw_jitter(max_jitter: float = MAX_JITTER, rng: random.Random | None = None) -> float:
    """Draw a random jitter in ``[0, max_jitter)`` seconds.

    The jitter is drawn in whole milliseconds.

    Args:
        max_jitter: Exclusive upper bound of the jitter, in seconds.
        rng: Optional random number generator. Defaults to the ``random``
            module's shared generator.

    Returns:
        The jitter in seconds. 0.0 if ``max_jitter`` is below one millisecond.

    Example:
        ```pycon
        >>> import random
        >>> from backoffkit.utils.jitter import draw_jitter
        >>> 0.0 <= draw_jitter() < 1.0
        True
        >>> draw_jitter(0.0)
        0.0

        ```
    """
    max_millis = int(max_jitter * 1000)
    if max_millis <= 0:
        return 0.0
    source = random if rng is None else rng
    return source.randrange(max_millis) / 1000  # noqa: S311
