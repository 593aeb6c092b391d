from __future__ import annotations
from dataclasses import dataclass

from models import color as colors


@dataclass(frozen=True)
class Pixel:
    """
    Value object: one computed color at a raster coordinate.
    The default (-1, -1) position means "not placed yet" and must not be
    written into a raster.
    """
    x: int = -1
    y: int = -1
    color: int = 0  # packed 0xAARRGGBB

    @property
    def is_placed(self) -> bool:
        return self.x >= 0 and self.y >= 0

    @property
    def red(self) -> int:
        return colors.red(self.color)

    @property
    def green(self) -> int:
        return colors.green(self.color)

    @property
    def blue(self) -> int:
        return colors.blue(self.color)
