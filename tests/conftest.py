from __future__ import annotations

import random
from typing import TYPE_CHECKING

import pytest

from backoffkit.core.config import ControllerConfig
from backoffkit.deadline import Deadline

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def no_jitter() -> ControllerConfig:
    """Create a controller configuration without jitter, so delays are
    deterministic."""
    return ControllerConfig(max_jitter=0.0)


@pytest.fixture
def rng() -> random.Random:
    """Create a seeded random number generator for reproducible jitter."""
    return random.Random(42)  # noqa: S311


@pytest.fixture
def background() -> Generator[Deadline, None, None]:
    """Create a deadline that never expires, cancelled at teardown."""
    with Deadline.background() as deadline:
        yield deadline
