"""Fast Poisson-disk sampling for blue-noise point scattering.

Grows a point set from a single random seed. Each round picks a point from
the active frontier and throws candidates into the annulus between one and
two minimum distances around it. A uniform grid with cells of
``minimum_distance / sqrt(2)`` holds at most one point per cell and bounds
every neighbour query to a 5x5 block of cells.
"""

import math
from dataclasses import dataclass

import numpy as np
import structlog
from numpy.typing import NDArray

from .exceptions import InvalidArgumentError
from .types import Bounds, Point, PointLike, RandomSource

logger = structlog.get_logger()

DEFAULT_ITERATIONS_PER_POINT = 30
INVERSE_ROOT_TWO = 1.0 / math.sqrt(2.0)

# Cells scanned on each side of a candidate's cell
NEIGHBOURHOOD_RADIUS = 2

EMPTY_CELL = -1


@dataclass(frozen=True)
class SamplingStats:
    """Counters collected over one sampling run."""

    rounds: int
    candidates: int
    rejected_out_of_bounds: int
    rejected_too_close: int
    peak_frontier: int


class _SampleGrid:
    """Uniform acceleration grid mapping cells to at most one sample index."""

    def __init__(self, bounds: Bounds, cell_size: float) -> None:
        self.bounds = bounds
        self.cell_size = cell_size
        self.width = math.ceil(bounds.width / cell_size)
        self.height = math.ceil(bounds.height / cell_size)
        # One extra row and column for points whose index rounds up to the edge
        self.cells: NDArray[np.int64] = np.full(
            (self.width + 1, self.height + 1), EMPTY_CELL, dtype=np.int64
        )

    def cell_of(self, point: Point) -> tuple[int, int]:
        return (
            math.floor((point.x - self.bounds.bottom_left.x) / self.cell_size),
            math.floor((point.y - self.bounds.bottom_left.y) / self.cell_size),
        )

    def insert(self, point: Point, index: int) -> None:
        i, j = self.cell_of(point)
        self.cells[i, j] = index

    def neighbours(self, point: Point) -> list[int]:
        """Indices of samples in the 5x5 block of cells around point."""
        i, j = self.cell_of(point)
        i0 = max(0, i - NEIGHBOURHOOD_RADIUS)
        i1 = min(self.width, i + NEIGHBOURHOOD_RADIUS)
        j0 = max(0, j - NEIGHBOURHOOD_RADIUS)
        j1 = min(self.height, j + NEIGHBOURHOOD_RADIUS)
        block = self.cells[i0 : i1 + 1, j0 : j1 + 1]
        return [int(k) for k in block[block != EMPTY_CELL]]


def generate_samples(
    bottom_left: PointLike,
    top_right: PointLike,
    minimum_distance: float,
    iterations_per_point: int,
    rng: RandomSource,
) -> list[Point]:
    """Scatter points over a rectangle with a minimum separation.

    Args:
        bottom_left: Lower corner of the sampling rectangle.
        top_right: Upper corner of the sampling rectangle (exclusive).
        minimum_distance: No two returned points are closer than this.
        iterations_per_point: Candidates tried per frontier pick. Values
            <= 0 fall back to DEFAULT_ITERATIONS_PER_POINT.
        rng: Random source for every draw.

    Returns:
        Accepted points in acceptance order, seed first.

    Raises:
        InvalidArgumentError: If minimum_distance is not positive and finite
            or the rectangle has zero or negative area.
    """
    points, _ = sample_with_stats(
        bottom_left, top_right, minimum_distance, iterations_per_point, rng
    )
    return points


def sample_with_stats(
    bottom_left: PointLike,
    top_right: PointLike,
    minimum_distance: float,
    iterations_per_point: int,
    rng: RandomSource,
) -> tuple[list[Point], SamplingStats]:
    """Same as generate_samples, also returning run counters."""
    if not math.isfinite(minimum_distance) or minimum_distance <= 0:
        raise InvalidArgumentError(
            f"minimum_distance must be finite and > 0, got {minimum_distance}"
        )
    bounds = Bounds.from_corners(bottom_left, top_right)
    if iterations_per_point <= 0:
        iterations_per_point = DEFAULT_ITERATIONS_PER_POINT

    grid = _SampleGrid(bounds, minimum_distance * INVERSE_ROOT_TWO)
    samples: list[Point] = []
    active: list[Point] = []
    min_sq = minimum_distance * minimum_distance
    max_sq = 4.0 * min_sq

    first = Point(
        rng.uniform(bounds.bottom_left.x, bounds.top_right.x),
        rng.uniform(bounds.bottom_left.y, bounds.top_right.y),
    )
    if not bounds.contains(first):
        # uniform() may round up to the excluded top edge
        first = Point(
            min(first.x, math.nextafter(bounds.top_right.x, bounds.bottom_left.x)),
            min(first.y, math.nextafter(bounds.top_right.y, bounds.bottom_left.y)),
        )
    grid.insert(first, 0)
    samples.append(first)
    active.append(first)

    rounds = candidates = out_of_bounds = too_close = 0
    peak_frontier = 1

    while active:
        rounds += 1
        index = int(rng.integers(0, len(active)))
        origin = active[index]

        found = False
        for _ in range(iterations_per_point):
            candidates += 1
            theta = rng.uniform(0.0, 2.0 * math.pi)
            radius = math.sqrt(rng.uniform(min_sq, max_sq))
            candidate = Point(
                origin.x + radius * math.cos(theta),
                origin.y + radius * math.sin(theta),
            )

            if not bounds.contains(candidate):
                out_of_bounds += 1
                continue

            if any(
                samples[k].distance_squared(candidate) <= min_sq
                for k in grid.neighbours(candidate)
            ):
                too_close += 1
                continue

            grid.insert(candidate, len(samples))
            samples.append(candidate)
            active.append(candidate)
            found = True

        if not found:
            active.pop(index)
        peak_frontier = max(peak_frontier, len(active))

    stats = SamplingStats(
        rounds=rounds,
        candidates=candidates,
        rejected_out_of_bounds=out_of_bounds,
        rejected_too_close=too_close,
        peak_frontier=peak_frontier,
    )
    logger.debug(
        "samples_generated",
        count=len(samples),
        minimum_distance=minimum_distance,
        rounds=rounds,
        rejected_out_of_bounds=out_of_bounds,
        rejected_too_close=too_close,
    )
    return samples, stats
