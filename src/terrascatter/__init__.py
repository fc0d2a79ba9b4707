"""Fractal heightfield synthesis and blue-noise object scattering.

Two independent algorithms: Diamond-Square heightfields and fast
Poisson-disk sampling, plus the glue to place sampled points on a
generated terrain, validate, persist and preview the result.
"""

from .config import HeightfieldConfig, ScatterConfig, SceneConfig, find_config, load_config
from .exceptions import InvalidArgumentError, TerrascatterError
from .generator import GenerationResult, generate_and_save_scene, generate_scene
from .heightfield import is_power_of_two, synthesize_heightfield
from .persistence import load_scene, save_scene
from .placement import HeightLookup, PlacedObject, normalize_heights, place_on_heightfield
from .sampling import (
    DEFAULT_ITERATIONS_PER_POINT,
    SamplingStats,
    generate_samples,
    sample_with_stats,
)
from .types import Bounds, Point, RandomSource
from .validation import ValidationResult, validate_heightfield, validate_samples, validate_scene

__all__ = [
    # Types
    "Bounds",
    "Point",
    "RandomSource",
    # Heightfield
    "is_power_of_two",
    "synthesize_heightfield",
    # Sampling
    "DEFAULT_ITERATIONS_PER_POINT",
    "SamplingStats",
    "generate_samples",
    "sample_with_stats",
    # Placement
    "HeightLookup",
    "PlacedObject",
    "normalize_heights",
    "place_on_heightfield",
    # Generation
    "GenerationResult",
    "generate_scene",
    "generate_and_save_scene",
    # Config
    "HeightfieldConfig",
    "ScatterConfig",
    "SceneConfig",
    "find_config",
    "load_config",
    # Persistence
    "load_scene",
    "save_scene",
    # Validation
    "ValidationResult",
    "validate_heightfield",
    "validate_samples",
    "validate_scene",
    # Exceptions
    "TerrascatterError",
    "InvalidArgumentError",
]
