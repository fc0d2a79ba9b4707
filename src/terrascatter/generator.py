"""Scene generation orchestration."""

from pathlib import Path

import numpy as np
import structlog
from numpy.typing import NDArray

from .config import SceneConfig
from .heightfield import synthesize_heightfield
from .persistence import save_scene
from .placement import HeightLookup, PlacedObject, normalize_heights, place_on_heightfield
from .sampling import SamplingStats, sample_with_stats
from .types import Bounds, Point
from .validation import ValidationResult, validate_scene

logger = structlog.get_logger()


class GenerationResult:
    """Result of scene generation with intermediate data."""

    def __init__(
        self,
        heights: NDArray[np.float32],
        points: list[Point],
        objects: list[PlacedObject],
        config: SceneConfig,
        stats: SamplingStats,
        validation: ValidationResult,
    ):
        self.heights = heights
        self.points = points
        self.objects = objects
        self.config = config
        self.stats = stats
        self.validation = validation


def generate_scene(config: SceneConfig) -> GenerationResult:
    """Generate a heightfield and scatter objects over it.

    Args:
        config: Scene generation configuration.

    Returns:
        GenerationResult with heights, sample points and placed objects.
    """
    rng = np.random.default_rng(config.seed)
    hf = config.heightfield
    size_x, size_z = config.footprint

    logger.info(
        "scene_generation_started",
        seed=config.seed,
        size=hf.size,
        footprint=(size_x, size_z),
    )

    heights = synthesize_heightfield(
        hf.size,
        hf.roughness,
        rng,
        base=hf.base,
        decay=hf.decay,
        boundary=hf.boundary,
    )

    bounds = Bounds(Point(0.0, 0.0), Point(size_x, size_z))
    points, stats = sample_with_stats(
        bounds.bottom_left,
        bounds.top_right,
        config.scatter.minimum_distance,
        config.scatter.iterations_per_point,
        rng,
    )
    logger.info("samples_scattered", count=len(points), rounds=stats.rounds)

    # Corner seeds are checked before any rescaling moves them
    validation = validate_scene(
        heights, points, bounds, config.scatter.minimum_distance, base=hf.base
    )

    if hf.normalize:
        heights = normalize_heights(heights)

    lookup = HeightLookup(heights, (size_x, size_z), hf.vertical_scale)
    objects = place_on_heightfield(points, lookup, config.scatter.object_type)

    logger.info(
        "scene_generation_finished",
        objects=len(objects),
        min_elevation=float(heights.min()) * hf.vertical_scale,
        max_elevation=float(heights.max()) * hf.vertical_scale,
    )

    return GenerationResult(
        heights=heights,
        points=points,
        objects=objects,
        config=config,
        stats=stats,
        validation=validation,
    )


def generate_and_save_scene(config: SceneConfig, save_path: Path) -> GenerationResult:
    """Generate a scene and save it to disk.

    Args:
        config: Scene generation configuration.
        save_path: Path to save the generated scene.

    Returns:
        GenerationResult for the saved scene.
    """
    result = generate_scene(config)

    save_path.parent.mkdir(parents=True, exist_ok=True)
    save_scene(save_path, result.heights, result.objects, config)

    return result
