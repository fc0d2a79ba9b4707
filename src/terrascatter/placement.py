"""Object placement: lift scattered points onto a heightfield."""

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .exceptions import InvalidArgumentError
from .types import Point


@dataclass
class PlacedObject:
    """A placed object at (x, elevation, y) in world units."""

    x: float
    elevation: float
    y: float
    object_type: str
    object_id: str


class HeightLookup:
    """Nearest-lower-cell elevation lookup over a heightfield footprint.

    The heightfield spans [0, size_x] x [0, size_z] in world units. Positions
    outside the footprint are clamped to its edge.
    """

    def __init__(
        self,
        heights: NDArray[np.float32],
        extent: tuple[float, float],
        vertical_scale: float = 1.0,
    ) -> None:
        if heights.ndim != 2 or heights.shape[0] < 1 or heights.shape[1] < 1:
            raise InvalidArgumentError(
                f"heights must be a non-empty 2D array, got shape {heights.shape}"
            )
        size_x, size_z = extent
        if size_x <= 0 or size_z <= 0:
            raise InvalidArgumentError(f"extent must be positive, got {extent}")

        self.heights = heights
        self.size_x = float(size_x)
        self.size_z = float(size_z)
        self.vertical_scale = vertical_scale

    def elevation_at(self, x: float, y: float) -> float:
        rows, cols = self.heights.shape
        norm_x = min(max(x / self.size_x, 0.0), 1.0)
        norm_y = min(max(y / self.size_z, 0.0), 1.0)
        col = math.floor(norm_x * (cols - 1))
        row = math.floor(norm_y * (rows - 1))
        return float(self.heights[row, col]) * self.vertical_scale


def place_on_heightfield(
    points: list[Point],
    lookup: HeightLookup,
    object_type: str = "tree",
) -> list[PlacedObject]:
    """Place one object per point at the terrain elevation below it.

    Args:
        points: Scattered 2D positions.
        lookup: Elevation lookup for the terrain.
        object_type: Type tag; ids are "{object_type}_{n}".

    Returns:
        Placed objects in the same order as points.
    """
    return [
        PlacedObject(
            x=point.x,
            elevation=lookup.elevation_at(point.x, point.y),
            y=point.y,
            object_type=object_type,
            object_id=f"{object_type}_{n}",
        )
        for n, point in enumerate(points)
    ]


def normalize_heights(heights: NDArray[np.float32]) -> NDArray[np.float32]:
    """Rescale elevations linearly to [0, 1].

    A constant field maps to all zeros.
    """
    low = float(np.min(heights))
    high = float(np.max(heights))
    if high - low <= 0:
        return np.zeros_like(heights, dtype=np.float32)
    return ((heights - low) / (high - low)).astype(np.float32)
