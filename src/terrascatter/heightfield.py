"""Diamond-Square heightfield synthesis.

Fills a square (size + 1) x (size + 1) grid from four corner seeds by
recursive quadrant subdivision. Each level sets the centre of the current
square (diamond step), then its four edge midpoints (square step), and
recurses into the four quadrants.

Heights are indexed ``heights[y, x]``: rows are y, columns are x.
"""

import math
from dataclasses import dataclass

import numpy as np
import structlog
from numpy.typing import NDArray

from .exceptions import InvalidArgumentError
from .types import RandomSource

logger = structlog.get_logger()

BOUNDARY_MODES = ("skip", "partial")


def is_power_of_two(n: int) -> bool:
    """Return True if n is a positive power of two."""
    return n >= 1 and (n & (n - 1)) == 0


@dataclass
class _Field:
    """Mutable state threaded through the recursion."""

    heights: NDArray[np.float32]
    assigned: NDArray[np.bool_]
    rng: RandomSource
    decay: float
    boundary: str

    @property
    def last_index(self) -> int:
        return self.heights.shape[0] - 1

    def clamp(self, index: int) -> int:
        return min(max(index, 0), self.last_index)

    def in_grid(self, x: int, y: int) -> bool:
        return 0 <= x <= self.last_index and 0 <= y <= self.last_index

    def mean_of(self, cells: list[tuple[int, int]]) -> float:
        """Mean of the stored values; unset cells contribute their initial 0."""
        return sum(float(self.heights[y, x]) for x, y in cells) / len(cells)

    def displace(self, x: int, y: int, mean: float, roughness: float) -> None:
        """Set an unassigned cell to mean plus a bounded random offset."""
        self.heights[y, x] = mean + self.rng.uniform(-roughness, roughness)
        self.assigned[y, x] = True


def synthesize_heightfield(
    size: int,
    roughness: float,
    rng: RandomSource,
    *,
    base: float = 0.0,
    decay: float = 1.0,
    boundary: str = "skip",
) -> NDArray[np.float32]:
    """Synthesize a fractal heightfield with the Diamond-Square algorithm.

    Sizes that are not a power of two are accepted but only partially
    populated: cells that no subdivision level reaches keep their initial
    value of 0.

    Args:
        size: Side length of the square; the grid is size + 1 per side.
        roughness: Bound of the uniform offset added to each computed cell.
        rng: Random source for the offsets.
        base: Value of the four corner seeds.
        decay: Factor applied to roughness at each deeper level. 1.0 keeps
            roughness constant across levels.
        boundary: "skip" leaves edge midpoints whose diamond neighbourhood
            leaves the grid unset; "partial" averages the in-grid neighbours.

    Returns:
        Float32 array of shape (size + 1, size + 1).

    Raises:
        InvalidArgumentError: If any parameter is out of range.
    """
    if isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size < 1:
        raise InvalidArgumentError(f"size must be an integer >= 1, got {size!r}")
    if not math.isfinite(roughness) or roughness < 0:
        raise InvalidArgumentError(f"roughness must be finite and >= 0, got {roughness}")
    if not math.isfinite(decay) or decay <= 0:
        raise InvalidArgumentError(f"decay must be finite and > 0, got {decay}")
    if not math.isfinite(base):
        raise InvalidArgumentError(f"base must be finite, got {base}")
    if boundary not in BOUNDARY_MODES:
        raise InvalidArgumentError(
            f"boundary must be one of {BOUNDARY_MODES}, got {boundary!r}"
        )

    size = int(size)
    if not is_power_of_two(size):
        logger.warning(
            "heightfield_size_not_power_of_two",
            size=size,
            detail="cells unreached by subdivision keep their initial value",
        )

    dimension = size + 1
    field = _Field(
        heights=np.zeros((dimension, dimension), dtype=np.float32),
        assigned=np.zeros((dimension, dimension), dtype=bool),
        rng=rng,
        decay=decay,
        boundary=boundary,
    )

    for x, y in ((0, 0), (size, 0), (0, size), (size, size)):
        field.heights[y, x] = base
        field.assigned[y, x] = True

    _subdivide(field, 0, 0, size, roughness)

    logger.debug(
        "heightfield_synthesized",
        size=size,
        roughness=roughness,
        unset_cells=int(np.count_nonzero(~field.assigned)),
        min=float(field.heights.min()),
        max=float(field.heights.max()),
    )
    return field.heights


def _subdivide(
    field: _Field,
    origin_x: int,
    origin_y: int,
    size: int,
    roughness: float,
) -> None:
    half = size // 2
    if half < 1:
        return

    _diamond_step(field, origin_x, origin_y, size, roughness)
    _square_step(field, origin_x, origin_y, size, roughness)

    child_roughness = roughness * field.decay
    _subdivide(field, origin_x, origin_y, half, child_roughness)
    _subdivide(field, origin_x + half, origin_y, half, child_roughness)
    _subdivide(field, origin_x, origin_y + half, half, child_roughness)
    _subdivide(field, origin_x + half, origin_y + half, half, child_roughness)


def _diamond_step(
    field: _Field,
    origin_x: int,
    origin_y: int,
    size: int,
    roughness: float,
) -> None:
    """Set the centre of the square from its four corners."""
    half = size // 2
    center_x, center_y = origin_x + half, origin_y + half
    if field.assigned[center_y, center_x]:
        return

    x0, x1 = field.clamp(origin_x), field.clamp(origin_x + size)
    y0, y1 = field.clamp(origin_y), field.clamp(origin_y + size)
    mean = field.mean_of([(x0, y0), (x1, y0), (x0, y1), (x1, y1)])
    field.displace(center_x, center_y, mean, roughness)


def _square_step(
    field: _Field,
    origin_x: int,
    origin_y: int,
    size: int,
    roughness: float,
) -> None:
    """Set the four edge midpoints of the square from their diamond neighbours."""
    half = size // 2
    midpoints = (
        (origin_x + half, origin_y),
        (origin_x, origin_y + half),
        (origin_x + half, origin_y + size),
        (origin_x + size, origin_y + half),
    )

    for mid_x, mid_y in midpoints:
        if not field.in_grid(mid_x, mid_y) or field.assigned[mid_y, mid_x]:
            continue

        neighbours = [
            (mid_x - half, mid_y),
            (mid_x + half, mid_y),
            (mid_x, mid_y - half),
            (mid_x, mid_y + half),
        ]
        inside = [(x, y) for x, y in neighbours if field.in_grid(x, y)]
        if len(inside) < len(neighbours) and field.boundary == "skip":
            continue

        # Sibling centres not yet visited by the depth-first walk still read 0
        field.displace(mid_x, mid_y, field.mean_of(inside), roughness)
