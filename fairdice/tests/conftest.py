from __future__ import annotations

from collections import deque
from typing import Iterable, List

import pytest
from prometheus_client import CollectorRegistry

from fairdice.dice import Die
from fairdice.metrics import Metrics


class ScriptedSampler:
    """
    Sampler double returning pre-scripted values in order.

    Records every requested range so tests can assert which draws happened.
    """

    def __init__(self, values: Iterable[int]) -> None:
        self._values = deque(values)
        self.ranges: List[int] = []

    def __call__(self, range_: int) -> int:
        self.ranges.append(range_)
        if not self._values:
            raise AssertionError(f"sampler exhausted (range={range_})")
        value = self._values.popleft()
        assert 0 <= value < range_, f"scripted {value} outside [0, {range_})"
        return value

    @property
    def remaining(self) -> int:
        return len(self._values)


@pytest.fixture
def registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture
def metrics(registry: CollectorRegistry) -> Metrics:
    return Metrics(registry=registry)


@pytest.fixture
def cycle_dice() -> tuple[Die, Die, Die]:
    """The classic non-transitive triple: A beats B, B beats C, C beats A."""
    return (
        Die((2, 2, 4, 4, 9, 9)),
        Die((1, 1, 6, 6, 8, 8)),
        Die((3, 3, 5, 5, 7, 7)),
    )
