from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple
import numpy as np

from models.color import pack_rgb


@dataclass
class Raster:
    """
    Simple data object: RGB pixels (+ optional source path for bookkeeping).
    Holds no manipulation logic; transforms never write into a source raster.
    """
    pixels: np.ndarray  # Shape (H, W, 3), dtype uint8, RGB order.
    path: Path | None = None  # Source of the raster.

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def channels(self, x: int, y: int) -> Tuple[int, int, int]:
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)

    def get_rgb(self, x: int, y: int) -> int:
        return pack_rgb(*self.channels(x, y))
