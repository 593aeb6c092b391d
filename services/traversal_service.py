from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Tuple, TypeVar
import logging
import os

import numpy as np
from dotenv import load_dotenv

from models.pixel import Pixel
from models.raster import Raster
from repositories.raster_repository import RasterRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

T = TypeVar("T")

PixelFunction = Callable[[int, int], Pixel]
# (y_start, y_end) -> (y_end - y_start, W, 3) uint8 block of output rows
BandFunction = Callable[[int, int], np.ndarray]


class TraversalService:
    """
    Visits every (x, y) of a raster once, fanning the work over a thread pool
    of contiguous row bands.

    Work is split in two phases so the output raster is never read while it
    is being filled:
    *   compute: every band runs in parallel and only reads the source.
    *   commit: each result is written into its own cell (or rows) of a
        freshly allocated output raster.

    Two granularities share the same bands:
    *   ``compute`` / ``map_raster`` call ``f(x, y)`` once per coordinate and
        collect Pixels.
    *   ``compute_bands`` / ``map_bands`` call ``f(y_start, y_end)`` once per
        band; numpy releases the GIL during its array work, so bands really
        run side by side.
    """

    def __init__(self, max_workers: int | None = None):
        env_workers = os.getenv("TRAVERSAL_MAX_WORKERS")
        if max_workers is None and env_workers:
            max_workers = int(env_workers)
        self.max_workers = max(1, max_workers or os.cpu_count() or 1)
        self.raster_repository = RasterRepository()

    # ─── Per coordinate ────────────────────────────────────────────
    def compute(self, width: int, height: int, f: PixelFunction) -> List[Pixel]:
        """
        Call ``f`` exactly once per coordinate and collect the results.
        No ordering is guaranteed between calls; an exception raised by ``f``
        is re-raised here.
        """
        if width <= 0:
            return []

        def band_pixels(y_start: int, y_end: int) -> List[Pixel]:
            return [f(x, y) for y in range(y_start, y_end) for x in range(width)]

        pixels: List[Pixel] = []
        for _, band in self._run_bands(height, band_pixels):
            pixels.extend(band)
        return pixels

    def commit(self, target: Raster, pixels: List[Pixel]) -> Raster:
        """Write every computed pixel into its own cell of ``target``."""
        for pixel in pixels:
            self.raster_repository.write_pixel(target, pixel)
        return target

    def map_raster(self, source: Raster, f: PixelFunction) -> Raster:
        """Compute over ``source`` and commit into a new raster of the same shape."""
        pixels = self.compute(source.width, source.height, f)
        output = self.raster_repository.blank_like(source)
        return self.commit(output, pixels)

    # ─── Per band ──────────────────────────────────────────────────
    def compute_bands(self, height: int, f: BandFunction) -> List[Tuple[int, np.ndarray]]:
        """Call ``f`` once per row band; returns ``(y_start, rows)`` pairs."""
        return self._run_bands(height, f)

    def commit_bands(self, target: Raster, bands: List[Tuple[int, np.ndarray]]) -> Raster:
        for y_start, rows in bands:
            self.raster_repository.write_rows(target, y_start, rows)
        return target

    def map_bands(self, source: Raster, f: BandFunction) -> Raster:
        """Compute row bands over ``source`` and commit them into a new raster."""
        if source.width <= 0:
            return self.raster_repository.blank_like(source)
        bands = self.compute_bands(source.height, f)
        output = self.raster_repository.blank_like(source)
        return self.commit_bands(output, bands)

    # ─── Internal helpers ──────────────────────────────────────────
    def _row_bands(self, height: int) -> List[Tuple[int, int]]:
        workers = min(self.max_workers, height)
        chunk = (height + workers - 1) // workers
        return [(start, min(start + chunk, height)) for start in range(0, height, chunk)]

    def _run_bands(self, height: int, f: Callable[[int, int], T]) -> List[Tuple[int, T]]:
        if height <= 0:
            return []

        bands = self._row_bands(height)
        logger.debug(f"Traversing {height} row(s) in {len(bands)} band(s)")

        if len(bands) == 1:
            y_start, y_end = bands[0]
            return [(y_start, f(y_start, y_end))]

        with ThreadPoolExecutor(max_workers=len(bands)) as pool:
            futures: List[Future[T]] = [pool.submit(f, lo, hi) for lo, hi in bands]
            return [(lo, fut.result()) for (lo, _), fut in zip(bands, futures)]
