"""PNG previews of generated scenes."""

from pathlib import Path

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from .placement import PlacedObject, normalize_heights

OBJECT_COLOR = (20, 140, 20)


def render_preview(
    heights: NDArray[np.float32],
    objects: list[PlacedObject] | None = None,
    extent: tuple[float, float] | None = None,
) -> Image.Image:
    """Render a one-pixel-per-cell greyscale image with objects overlaid.

    Args:
        heights: Heightfield indexed [y, x]; row 0 is the top image row.
        objects: Optional placed objects to mark.
        extent: World footprint (size_x, size_z) the objects live in.
            Defaults to the grid size.

    Returns:
        RGB PIL Image.
    """
    rows, cols = heights.shape
    shade = (normalize_heights(heights) * 255).astype(np.uint8)
    img = Image.fromarray(np.stack([shade, shade, shade], axis=-1))

    if objects:
        size_x, size_z = extent if extent is not None else (cols - 1, rows - 1)
        pixels = img.load()
        for obj in objects:
            col = int(obj.x / size_x * (cols - 1)) if size_x else 0
            row = int(obj.y / size_z * (rows - 1)) if size_z else 0
            if 0 <= col < cols and 0 <= row < rows:
                pixels[col, row] = OBJECT_COLOR

    return img


def save_preview(
    path: Path,
    heights: NDArray[np.float32],
    objects: list[PlacedObject] | None = None,
    extent: tuple[float, float] | None = None,
) -> None:
    """Render a preview and write it as PNG."""
    path.parent.mkdir(parents=True, exist_ok=True)
    render_preview(heights, objects, extent).save(path, format="PNG")
