from pathlib import Path
from typing import Union, Iterable, Iterator
import numpy as np
import cv2
from PIL import Image as PILImage
from dotenv import load_dotenv
import logging
import os
import signal
from models.pixel import Pixel
from models.raster import Raster
from models.color import unpack_rgb

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class RasterRepository:
    """
    Handles file I/O and pixel writes for Raster entities.
    """
    def __init__(self):
        # Load as set
        self.VALID_EXTS = {
            ext.strip().lower()
            for ext in os.getenv("VALID_IMAGE_EXTENSIONS", ".jpg,.jpeg,.png,.bmp").split(",")
            if ext.strip()
        }

    @staticmethod
    def blank_like(raster: Raster) -> Raster:
        """Freshly allocated raster with the same shape; never aliases the source."""
        return Raster(pixels=np.zeros_like(raster.pixels))

    @staticmethod
    def write_pixel(raster: Raster, pixel: Pixel) -> None:
        if not pixel.is_placed:
            raise ValueError(f"Pixel has no position yet: {pixel}")
        raster.pixels[pixel.y, pixel.x] = unpack_rgb(pixel.color)

    @staticmethod
    def write_rows(raster: Raster, y_start: int, rows: np.ndarray) -> None:
        y_end = y_start + rows.shape[0]
        if y_start < 0 or y_end > raster.height or rows.shape[1:] != raster.pixels.shape[1:]:
            raise ValueError(
                f"Rows of shape {rows.shape} do not fit at y={y_start} "
                f"in a {raster.width}x{raster.height} raster"
            )
        raster.pixels[y_start:y_end] = rows

    @staticmethod
    def load(path: Union[str, Path], timeout: int = 5) -> Raster:
        path = Path(path)

        # ─── timeout wrapper (5 s default) ────────────────────────────────
        def _handler(signum, frame):
            raise TimeoutError(f"cv2.imread timed-out after {timeout}s: {path}")

        previous = signal.signal(signal.SIGALRM, _handler)
        signal.alarm(timeout)
        try:
            arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
        finally:
            signal.alarm(0)  # always disarm
            signal.signal(signal.SIGALRM, previous)
        # ──────────────────────────────────────────────────────────────────

        if arr_bgr is None:
            raise FileNotFoundError(f"Image not found or unreadable: {path}")

        arr = np.ascontiguousarray(arr_bgr[:, :, ::-1])
        return Raster(pixels=arr, path=path)

    @staticmethod
    def save(raster: Raster, path: Union[str, Path] = None) -> Path:
        target = Path(path) if path is not None else raster.path
        if target is None:
            raise ValueError("Raster has no path to save to")

        target.parent.mkdir(parents=True, exist_ok=True)
        PILImage.fromarray(np.ascontiguousarray(raster.pixels)).save(target)
        return target

    def iter_dir(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[Raster]:
        """
        Yield Raster objects one at a time.  Nothing accumulates in memory.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)

        allowed = {e.lower() for e in (exts or self.VALID_EXTS)}
        pattern = "**/*" if recursive else "*"

        for p in sorted(folder.glob(pattern)):
            if p.suffix.lower() not in allowed:
                logger.debug(f"Skipping due to extension: {p}")
                continue
            if not p.is_file():
                logger.debug(f"Skipping because not file: {p}")
                continue
            try:
                yield self.load(p)
            except (FileNotFoundError, TimeoutError) as err:
                logger.warning(f"Skipping {p.name}: {err}")
