from __future__ import annotations

import logging

import numpy as np

from models.color import BLACK, WHITE, unpack_rgb
from models.raster import Raster
from services.traversal_service import TraversalService

logger = logging.getLogger(__name__)

BLACK_RGB = np.array(unpack_rgb(BLACK), dtype=np.uint8)
WHITE_RGB = np.array(unpack_rgb(WHITE), dtype=np.uint8)


def _to_channels(values: np.ndarray) -> np.ndarray:
    """
    Truncate float channel values towards zero and clamp them at 255.

    Like an int cast, +inf saturates (to 255) and NaN becomes 0. There is no
    lower clamp: a channel that is still negative after truncation raises
    ValueError.
    """
    values = np.trunc(np.minimum(np.nan_to_num(values, nan=0.0), 255))
    if np.any(values < 0):
        raise ValueError(
            f"Color parameter outside of expected range: {values.min():.0f}"
        )
    return values.astype(np.uint8)


class ManipulationService:
    """
    Per-pixel and neighbourhood manipulations.
    *   No I/O here; works only with Raster objects (RGB numpy arrays).
    *   Every method returns a new Raster; the source is only read.
    *   Each row band is computed with numpy on the traversal's thread pool.
    """

    def __init__(self, traversal_service: TraversalService | None = None):
        self.traversal = traversal_service or TraversalService()

    # ─── Public API ────────────────────────────────────────────────
    def brighten(self, raster: Raster, ratio: float) -> Raster:
        """
        Multiply every channel by ``ratio`` (< 1 darkens, > 1 brightens),
        truncating and clamping at 255.

        There is no lower clamp: a negative ratio that leaves a channel below
        zero raises ValueError.
        """
        logger.info(f"Brightening {raster.width}x{raster.height} raster by {ratio}")
        source = raster.pixels

        def brighten_rows(y_start: int, y_end: int) -> np.ndarray:
            rows = source[y_start:y_end].astype(np.float64)
            with np.errstate(invalid="ignore"):
                return _to_channels(rows * ratio)

        return self.traversal.map_bands(raster, brighten_rows)

    def increase_contrast(self, raster: Raster, contrast_ratio: float) -> Raster:
        """
        Scale every channel by its own intensity: ``c * (c * contrast_ratio / 10)``,
        so bright channels grow faster than dark ones. Clamped at 255.
        """
        actual_ratio = contrast_ratio / 10
        logger.info(
            f"Increasing contrast of {raster.width}x{raster.height} raster "
            f"(ratio={contrast_ratio})"
        )
        source = raster.pixels

        def contrast_rows(y_start: int, y_end: int) -> np.ndarray:
            rows = source[y_start:y_end].astype(np.float64)
            with np.errstate(invalid="ignore"):
                return _to_channels(rows * (rows * actual_ratio))

        return self.traversal.map_bands(raster, contrast_rows)

    def pointalize(self, raster: Raster, distance_threshold: float, radius: int) -> Raster:
        """
        Emphasize edges and points of interest.

        For each pixel, sums the color distance to every in-bounds neighbour
        within ``radius``, each divided by the squared offset length, then
        divides by ``radius**2 - 1``. Pixels scoring above
        ``distance_threshold`` become BLACK, the rest WHITE.

        The normalizer is the same for every pixel, so border pixels (which
        have fewer neighbours) are divided by the interior constant too.
        With radius 1 it is 0: any difference scores +inf, none scores NaN.
        """
        if distance_threshold < 0:
            raise ValueError(f"distance_threshold must be non-negative, got {distance_threshold}")
        if radius < 1:
            raise ValueError(f"radius must be positive, got {radius}")

        # Total pixels around a pixel for a given radius
        total_surrounding = np.float64(radius * radius - 1)
        width, height = raster.width, raster.height
        source = raster.pixels.astype(np.int32)
        logger.info(
            f"Pointalizing {width}x{height} raster "
            f"(threshold={distance_threshold}, radius={radius})"
        )

        def pointalize_rows(y_start: int, y_end: int) -> np.ndarray:
            total = np.zeros((y_end - y_start, width), dtype=np.float64)

            # Same (dy, dx) order per pixel as a scalar loop, so sums match it exactly.
            for dy in range(-radius, radius + 1):
                for dx in range(-radius, radius + 1):
                    if dx == 0 and dy == 0:
                        continue
                    # Window of band pixels whose (x+dx, y+dy) neighbour is in bounds
                    y0, y1 = max(y_start, -dy), min(y_end, height - dy)
                    x0, x1 = max(0, -dx), min(width, width - dx)
                    if y0 >= y1 or x0 >= x1:
                        continue

                    diff = source[y0:y1, x0:x1] - source[y0 + dy:y1 + dy, x0 + dx:x1 + dx]
                    distance = np.sqrt((diff * diff).sum(axis=-1))
                    total[y0 - y_start:y1 - y_start, x0:x1] += distance / (dy * dy + dx * dx)

            with np.errstate(divide="ignore", invalid="ignore"):
                score = total / total_surrounding

            rows = np.empty((y_end - y_start, width, 3), dtype=np.uint8)
            rows[:] = WHITE_RGB
            rows[score > distance_threshold] = BLACK_RGB
            return rows

        return self.traversal.map_bands(raster, pointalize_rows)
