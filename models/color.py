from __future__ import annotations
from typing import Tuple
import math


# Packed colors are 0xAARRGGBB ints, alpha always opaque.
ALPHA_MASK = 0xFF000000

BLACK = 0xFF000000
WHITE = 0xFFFFFFFF
RED = 0xFFFF0000
GREEN = 0xFF00FF00
BLUE = 0xFF0000FF

# Max distance between two colors
MAX_DISTANCE = math.sqrt(3 * (255 * 255))


def pack_rgb(red: int, green: int, blue: int) -> int:
    """
    Pack three 8-bit channels into an opaque 0xAARRGGBB int.

    Raises:
        ValueError: if any channel is outside [0, 255].
    """
    for name, value in (("red", red), ("green", green), ("blue", blue)):
        if not 0 <= value <= 255:
            raise ValueError(f"Color parameter outside of expected range: {name}={value}")
    return ALPHA_MASK | (int(red) << 16) | (int(green) << 8) | int(blue)


def red(packed: int) -> int:
    return (packed >> 16) & 0xFF


def green(packed: int) -> int:
    return (packed >> 8) & 0xFF


def blue(packed: int) -> int:
    return packed & 0xFF


def unpack_rgb(packed: int) -> Tuple[int, int, int]:
    return red(packed), green(packed), blue(packed)


def distance(first: int, second: int) -> float:
    """
    Euclidean distance between two packed colors over red, green and blue.
    Alpha is ignored.
    """
    r_dist = red(first) - red(second)
    g_dist = green(first) - green(second)
    b_dist = blue(first) - blue(second)
    return math.sqrt(r_dist * r_dist + g_dist * g_dist + b_dist * b_dist)
