"""Core types shared by the synthesizer and the sampler."""

import math
from dataclasses import dataclass
from typing import Protocol, Sequence

from .exceptions import InvalidArgumentError


class RandomSource(Protocol):
    """Random generator consumed by the algorithms.

    ``numpy.random.Generator`` satisfies this protocol. Tests substitute
    deterministic fakes.
    """

    def uniform(self, low: float, high: float) -> float:
        """Return a float drawn uniformly from [low, high)."""
        ...

    def integers(self, low: int, high: int) -> int:
        """Return an int drawn uniformly from [low, high)."""
        ...


@dataclass(frozen=True)
class Point:
    """Immutable 2D point in world units."""

    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def distance_squared(self, other: "Point") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def distance(self, other: "Point") -> float:
        return math.sqrt(self.distance_squared(other))

    def __iter__(self):
        yield self.x
        yield self.y


PointLike = Point | Sequence[float]


def as_point(value: PointLike) -> Point:
    """Coerce a Point or an (x, y) pair into a Point.

    Raises:
        InvalidArgumentError: If the value is not a pair of finite numbers.
    """
    if isinstance(value, Point):
        point = value
    else:
        try:
            x, y = value
            point = Point(float(x), float(y))
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Expected an (x, y) pair, got {value!r}") from e

    if not (math.isfinite(point.x) and math.isfinite(point.y)):
        raise InvalidArgumentError(f"Point coordinates must be finite: {point}")
    return point


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle spanning [bottom_left, top_right)."""

    bottom_left: Point
    top_right: Point

    @property
    def width(self) -> float:
        return self.top_right.x - self.bottom_left.x

    @property
    def height(self) -> float:
        return self.top_right.y - self.bottom_left.y

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains(self, point: Point) -> bool:
        """Half-open containment test, min <= v < max on both axes."""
        return (
            self.bottom_left.x <= point.x < self.top_right.x
            and self.bottom_left.y <= point.y < self.top_right.y
        )

    @classmethod
    def from_corners(cls, bottom_left: PointLike, top_right: PointLike) -> "Bounds":
        """Build bounds from two corners, rejecting degenerate rectangles.

        Raises:
            InvalidArgumentError: If either side has zero or negative length.
        """
        bounds = cls(as_point(bottom_left), as_point(top_right))
        if bounds.width <= 0 or bounds.height <= 0:
            raise InvalidArgumentError(
                f"Sampling rectangle must have positive area, got "
                f"{bounds.width} x {bounds.height}"
            )
        return bounds
