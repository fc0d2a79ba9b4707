"""Scene persistence: save and load generated heightfields and objects."""

import json
from datetime import datetime, timezone
from pathlib import Path

import numpy as np
import structlog
from numpy.typing import NDArray

from .config import SceneConfig
from .placement import PlacedObject

logger = structlog.get_logger()

FORMAT_VERSION = 1


def save_scene(
    path: Path,
    heights: NDArray[np.float32],
    objects: list[PlacedObject],
    config: SceneConfig,
) -> None:
    """Save a generated scene to disk.

    Uses numpy's compressed .npz format for efficient storage.

    Args:
        path: Output path (should end with .npz).
        heights: Heightfield array, indexed [y, x].
        objects: List of placed objects.
        config: Generation configuration used.
    """
    objects_data = [
        {
            "x": obj.x,
            "elevation": obj.elevation,
            "y": obj.y,
            "object_type": obj.object_type,
            "object_id": obj.object_id,
        }
        for obj in objects
    ]

    metadata = {
        "version": FORMAT_VERSION,
        "seed": config.seed,
        "size": config.heightfield.size,
        "footprint": list(config.footprint),
        "config": config.model_dump(mode="json"),
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }

    # np.savez appends .npz when missing; write through a handle to keep the name
    with open(path, "wb") as f:
        np.savez_compressed(
            f,
            heights=heights,
            objects=np.frombuffer(json.dumps(objects_data).encode("utf-8"), dtype=np.uint8),
            metadata=np.frombuffer(json.dumps(metadata).encode("utf-8"), dtype=np.uint8),
        )

    file_size = path.stat().st_size / 1024
    logger.info("scene_saved", path=str(path), size_kb=round(file_size, 1))


def load_scene(path: Path) -> tuple[NDArray[np.float32], list[PlacedObject], dict]:
    """Load a scene from disk.

    Args:
        path: Path to .npz file.

    Returns:
        Tuple of (heights array, list of PlacedObject, metadata dict).

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If file format is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Scene file not found: {path}")

    with np.load(path) as data:
        if "heights" not in data:
            raise ValueError("Invalid scene file: missing 'heights' array")
        heights = data["heights"]

        objects: list[PlacedObject] = []
        if "objects" in data:
            objects_data = json.loads(data["objects"].tobytes().decode("utf-8"))
            objects = [PlacedObject(**obj) for obj in objects_data]

        metadata: dict = {}
        if "metadata" in data:
            metadata = json.loads(data["metadata"].tobytes().decode("utf-8"))

    logger.info(
        "scene_loaded",
        path=str(path),
        shape=heights.shape,
        objects=len(objects),
    )
    return heights, objects, metadata
