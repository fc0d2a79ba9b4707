"""Shared test fixtures for terrascatter tests."""

import itertools
import tempfile
from pathlib import Path

import numpy as np
import pytest


class CyclingRandom:
    """Deterministic random source cycling through fixed fractions in [0, 1)."""

    def __init__(self, fractions: list[float]) -> None:
        self._fractions = itertools.cycle(fractions)
        self.calls = 0

    def uniform(self, low: float, high: float) -> float:
        self.calls += 1
        return low + (high - low) * next(self._fractions)

    def integers(self, low: int, high: int) -> int:
        self.calls += 1
        return min(low + int((high - low) * next(self._fractions)), high - 1)


class ConstantRandom:
    """Random source that always returns the same point of the range."""

    def __init__(self, fraction: float) -> None:
        self.fraction = fraction
        self.calls = 0

    def uniform(self, low: float, high: float) -> float:
        self.calls += 1
        return low + (high - low) * self.fraction

    def integers(self, low: int, high: int) -> int:
        self.calls += 1
        return low


class ForbiddenRandom:
    """Random source that fails the test if anything draws from it."""

    def uniform(self, low: float, high: float) -> float:
        raise AssertionError("random source must not be used")

    def integers(self, low: int, high: int) -> int:
        raise AssertionError("random source must not be used")


@pytest.fixture
def cycling_random():
    """Factory for fresh CyclingRandom instances over a fixed sequence."""
    fractions = [0.13, 0.87, 0.42, 0.05, 0.66, 0.99, 0.31, 0.58]
    return lambda: CyclingRandom(fractions)


@pytest.fixture
def midpoint_random() -> ConstantRandom:
    """Random source whose uniform draws are the centre of the range."""
    return ConstantRandom(0.5)


@pytest.fixture
def max_random() -> ConstantRandom:
    """Random source whose uniform draws sit at the top of the range."""
    return ConstantRandom(1.0)


@pytest.fixture
def forbidden_random() -> ForbiddenRandom:
    return ForbiddenRandom()


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded numpy generator."""
    return np.random.default_rng(1234)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config_toml():
    """Sample scene config as TOML string."""
    return """
seed = 99
extent = [64.0, 32.0]

[heightfield]
size = 16
roughness = 2.0
decay = 0.5
boundary = "partial"
normalize = true
vertical_scale = 20.0

[scatter]
minimum_distance = 3.0
iterations_per_point = 10
object_type = "rock"
"""


@pytest.fixture
def config_file(temp_dir, sample_config_toml):
    """Create a temporary config file."""
    config_path = temp_dir / "test_scene.toml"
    config_path.write_text(sample_config_toml)
    return config_path
