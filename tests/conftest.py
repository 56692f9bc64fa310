from __future__ import annotations

from typing import Iterator

import numpy as np
import pytest

from coloring.gradient import Gradient, GradientSegment
from rendering.executor import TaskExecutor


@pytest.fixture(scope="session", autouse=True)
def np_seed() -> None:
    np.random.seed(12345)


@pytest.fixture()
def executor() -> Iterator[TaskExecutor]:
    with TaskExecutor(4) as ex:
        yield ex


@pytest.fixture()
def two_segment_gradient() -> Gradient:
    return Gradient([
        GradientSegment((0, 0, 0), (255, 0, 0), 0.0, 0.5, 16),
        GradientSegment((255, 0, 0), (10, 20, 30), 0.5, 1.0, 16),
    ])


@pytest.fixture()
def flat_gradient() -> Gradient:
    """Every pixel, inside or out, colors to (200, 200, 200)."""
    return Gradient([
        GradientSegment((200, 200, 200), (200, 200, 200), 0.0, 10.0, 1),
    ])


@pytest.fixture()
def random_raster():
    def make(height: int, width: int) -> np.ndarray:
        return np.random.randint(0, 256, size=(3, height, width)).astype(np.uint8)
    return make
