"""Scene configuration models and TOML loading."""

import tomllib
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .heightfield import is_power_of_two
from .sampling import DEFAULT_ITERATIONS_PER_POINT


class HeightfieldConfig(BaseModel):
    """Diamond-Square heightfield parameters."""

    size: int = Field(default=128, ge=1, description="Side length; grid is size + 1")
    roughness: float = Field(
        default=0.5, ge=0.0, description="Bound of the random offset per cell"
    )
    base: float = Field(default=0.0, description="Corner seed elevation")
    decay: float = Field(
        default=1.0, gt=0.0, description="Roughness multiplier per subdivision level"
    )
    boundary: Literal["skip", "partial"] = Field(
        default="skip", description="Edge midpoint policy at the grid border"
    )
    normalize: bool = Field(
        default=False, description="Rescale elevations to [0, 1] after synthesis"
    )
    vertical_scale: float = Field(
        default=10.0, description="Multiplier from stored height to world elevation"
    )

    @property
    def is_power_of_two(self) -> bool:
        return is_power_of_two(self.size)


class ScatterConfig(BaseModel):
    """Blue-noise scattering parameters."""

    minimum_distance: float = Field(
        default=5.0, gt=0.0, description="Minimum distance between points"
    )
    iterations_per_point: int = Field(
        default=DEFAULT_ITERATIONS_PER_POINT,
        description="Candidates tried per frontier pick (<= 0 uses the default)",
    )
    object_type: str = Field(default="tree", description="Type tag for placed objects")


class SceneConfig(BaseModel):
    """Complete scene generation configuration."""

    seed: int = Field(default=42, description="Random seed for reproducibility")
    heightfield: HeightfieldConfig = Field(default_factory=HeightfieldConfig)
    scatter: ScatterConfig = Field(default_factory=ScatterConfig)
    extent: tuple[float, float] | None = Field(
        default=None,
        description="World footprint (size_x, size_z); defaults to the heightfield size",
    )

    @field_validator("extent")
    @classmethod
    def _extent_positive(
        cls, value: tuple[float, float] | None
    ) -> tuple[float, float] | None:
        if value is not None and (value[0] <= 0 or value[1] <= 0):
            raise ValueError(f"extent must be positive on both axes, got {value}")
        return value

    @property
    def footprint(self) -> tuple[float, float]:
        """World footprint (size_x, size_z) covered by heights and samples."""
        if self.extent is not None:
            return self.extent
        size = float(self.heightfield.size)
        return (size, size)


def load_config(config_path: Path) -> SceneConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed SceneConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        pydantic.ValidationError: If values are out of range.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return SceneConfig.model_validate(data)


def _configs_dir() -> Path:
    return Path(__file__).parent.parent.parent / "configs"


def find_config(name: str) -> Path:
    """Find a config file by name.

    Searches in the following order:
    1. Exact path if name contains path separator or ends in .toml
    2. configs/{name}.toml
    3. configs/{name}

    Args:
        name: Config name or path.

    Returns:
        Path to the config file.

    Raises:
        FileNotFoundError: If config file is not found.
    """
    if "/" in name or name.endswith(".toml"):
        path = Path(name)
        if path.exists():
            return path
        raise FileNotFoundError(f"Config file not found: {name}")

    configs_dir = _configs_dir()

    config_path = configs_dir / f"{name}.toml"
    if config_path.exists():
        return config_path

    config_path = configs_dir / name
    if config_path.exists():
        return config_path

    raise FileNotFoundError(
        f"Config '{name}' not found in {configs_dir}. "
        f"Available configs: {list_configs()}"
    )


def list_configs() -> list[str]:
    """List available config names."""
    configs_dir = _configs_dir()
    if not configs_dir.exists():
        return []
    return sorted(p.stem for p in configs_dir.glob("*.toml"))
