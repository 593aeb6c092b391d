from __future__ import annotations

import numpy as np

from models.raster import Raster


def make_raster(rows) -> Raster:
    """Build a Raster from nested [row][col] (r, g, b) tuples."""
    return Raster(pixels=np.array(rows, dtype=np.uint8))


def uniform_raster(width: int, height: int, rgb=(40, 120, 200)) -> Raster:
    pixels = np.empty((height, width, 3), dtype=np.uint8)
    pixels[:, :] = rgb
    return Raster(pixels=pixels)


def column_split_raster(width: int, height: int, split: int) -> Raster:
    """Black columns before ``split``, white from ``split`` on."""
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    pixels[:, split:] = 255
    return Raster(pixels=pixels)


def checkerboard_raster(width: int, height: int) -> Raster:
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            if (x + y) % 2:
                pixels[y, x] = 255
    return Raster(pixels=pixels)
