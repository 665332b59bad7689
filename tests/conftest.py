"""Pytest configuration and shared fixtures."""

import pytest

from statefield.core.dimensions import DIMENSION_KEYS, StateVector
from statefield.core.sample import Sample

# Fixed reference time for tests: 2024-01-01T00:00:00Z in ms
T0 = 1_704_067_200_000
HOUR_MS = 60 * 60 * 1000


@pytest.fixture
def t0() -> int:
    """Reference timestamp in milliseconds."""
    return T0


@pytest.fixture
def zero_state() -> StateVector:
    """Every axis at 0."""
    return StateVector({key: 0 for key in DIMENSION_KEYS})


@pytest.fixture
def max_state() -> StateVector:
    """Every axis at 5."""
    return StateVector({key: 5 for key in DIMENSION_KEYS})


@pytest.fixture
def mid_state() -> StateVector:
    """Every axis at the slider default of 3."""
    return StateVector.default()


@pytest.fixture
def driven_state() -> StateVector:
    """
    Everything maxed except Creative_Output and Chaos_Load.

    A well-resourced, calm state with no creative pressure.
    """
    values = {key: 5 for key in DIMENSION_KEYS}
    values["Creative_Output"] = 0
    values["Chaos_Load"] = 0
    return StateVector(values)


@pytest.fixture
def make_samples(t0):
    """
    Build a sample list from (offset_ms, {key: value}) pairs.

    Axes not mentioned stay at 3.
    """

    def _make(*steps):
        samples = []
        for offset, overrides in steps:
            values = StateVector.default().to_dict()
            values.update(overrides)
            samples.append(Sample(timestamp=t0 + offset, state=StateVector(values)))
        return samples

    return _make


@pytest.fixture
def clock(t0):
    """Mutable fake clock; set ``clock.now`` to move time."""

    class _Clock:
        def __init__(self):
            self.now = t0

        def __call__(self) -> int:
            return self.now

    return _Clock()
