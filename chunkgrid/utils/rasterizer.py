"""Rasterization utilities — classified chunk map to an 8-bit grayscale grid."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from chunkgrid.models.grid import CellClass, ClassifiedMap, ScanRegion

logger = logging.getLogger(__name__)

# ── Pixel intensities ──

PIXEL_EMPTY = 0
PIXEL_CONNECTOR = 127
PIXEL_ANCHOR = 255

_CLASS_PIXELS: dict[CellClass, int] = {
    CellClass.CONNECTOR: PIXEL_CONNECTOR,
    CellClass.ANCHOR: PIXEL_ANCHOR,
}


def rasterize(classified: ClassifiedMap, region: ScanRegion) -> NDArray[np.uint8]:
    """Render ``classified`` over ``region``.

    Returns a ``(region.width, region.columns)`` array: rows follow z, columns
    follow x, both relative to ``region.offset``.
    """
    grid = np.full(region.shape, PIXEL_EMPTY, dtype=np.uint8)
    for coord, cls in classified.cells.items():
        if not region.contains(coord):
            raise ValueError(f"Cell {coord} lies outside the scanned region {region}")
        grid[coord.z - region.offset.z, coord.x - region.offset.x] = _CLASS_PIXELS[cls]
    return grid


def save_png(grid: NDArray[np.uint8], path: str | Path) -> Path:
    """Write a single-channel 8-bit PNG."""
    path = Path(path)
    if grid.ndim != 2 or grid.dtype != np.uint8:
        raise ValueError(f"expected a 2-D uint8 grid, got {grid.dtype} with shape {grid.shape}")
    Image.fromarray(grid).save(path, format="PNG")
    logger.info("Wrote raster %s (%d x %d)", path, grid.shape[1], grid.shape[0])
    return path
