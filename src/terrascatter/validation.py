"""Post-generation validation of heightfields and sample sets."""

import numpy as np
import structlog
from numpy.typing import NDArray
from scipy.spatial import cKDTree

from .heightfield import is_power_of_two
from .types import Bounds, Point

logger = structlog.get_logger()

DISTANCE_EPSILON = 1e-6


class ValidationResult:
    """Result of scene validation."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.passed = True

    def add_error(self, message: str) -> None:
        """Add validation error."""
        self.errors.append(message)
        self.passed = False

    def add_warning(self, message: str) -> None:
        """Add validation warning."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> None:
        """Fold another result's findings into this one."""
        for error in other.errors:
            self.add_error(error)
        self.warnings.extend(other.warnings)


def validate_heightfield(
    heights: NDArray[np.float32],
    base: float = 0.0,
) -> ValidationResult:
    """Check shape, corner seeds and finiteness of a heightfield.

    Args:
        heights: Heightfield of shape (size + 1, size + 1).
        base: Expected corner value.

    Returns:
        ValidationResult with any errors/warnings.
    """
    result = ValidationResult()

    if heights.ndim != 2 or heights.shape[0] != heights.shape[1]:
        result.add_error(f"Heightfield is not square: shape {heights.shape}")
        return result

    size = heights.shape[0] - 1
    if size < 1:
        result.add_error("Heightfield has fewer than 2 cells per side")
        return result

    corners = [heights[0, 0], heights[0, size], heights[size, 0], heights[size, size]]
    if not np.allclose(corners, base):
        result.add_error(f"Corners {[float(c) for c in corners]} differ from base {base}")

    non_finite = int(np.count_nonzero(~np.isfinite(heights)))
    if non_finite:
        result.add_error(f"Heightfield has {non_finite} non-finite cells")

    if not is_power_of_two(size):
        result.add_warning(
            f"Side {size + 1} is not 2**k + 1; some cells were never subdivided"
        )

    return result


def validate_samples(
    points: list[Point],
    bounds: Bounds,
    minimum_distance: float,
) -> ValidationResult:
    """Check containment and minimum separation of a sample set.

    Args:
        points: Sampled points.
        bounds: Rectangle the points must lie in.
        minimum_distance: Required pairwise separation.

    Returns:
        ValidationResult with any errors/warnings.
    """
    result = ValidationResult()

    if not points:
        result.add_error("Sample set is empty")
        return result

    outside = sum(1 for p in points if not bounds.contains(p))
    if outside:
        result.add_error(f"{outside} samples lie outside {bounds}")

    if len(points) > 1:
        coords = np.array([(p.x, p.y) for p in points], dtype=np.float64)
        tree = cKDTree(coords)
        close_pairs = tree.query_pairs(minimum_distance - DISTANCE_EPSILON)
        if close_pairs:
            result.add_error(
                f"{len(close_pairs)} sample pairs closer than {minimum_distance}"
            )

    return result


def validate_scene(
    heights: NDArray[np.float32],
    points: list[Point],
    bounds: Bounds,
    minimum_distance: float,
    base: float = 0.0,
) -> ValidationResult:
    """Validate a heightfield and its sample set together."""
    result = validate_heightfield(heights, base)
    result.merge(validate_samples(points, bounds, minimum_distance))

    if result.passed:
        logger.info("scene_validation_passed", warnings=len(result.warnings))
    else:
        logger.warning("scene_validation_failed", errors=result.errors)

    for warning in result.warnings:
        logger.warning("scene_validation_warning", detail=warning)

    return result
