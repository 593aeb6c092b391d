"""
Manipulate Image Pipeline
Loads one image, runs pointalize, brighten and increase_contrast on it and
saves each result beside the others in the output directory.
"""

import os
import logging
from pathlib import Path
from typing import Dict
from dotenv import load_dotenv

from models.raster import Raster
from services.raster_service import RasterService
from services.manipulation_service import ManipulationService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

MANIPULATED_DIR = os.getenv("MANIPULATED_DIR_PATH", "data/manipulated")
OUTPUT_EXT = os.getenv("OUTPUT_IMG_EXT", ".jpg")

POINTALIZE_DISTANCE = float(os.getenv("POINTALIZE_DISTANCE", "10"))
POINTALIZE_RADIUS = int(os.getenv("POINTALIZE_RADIUS", "4"))
BRIGHTEN_RATIO = float(os.getenv("BRIGHTEN_RATIO", "2.0"))
CONTRAST_RATIO = float(os.getenv("CONTRAST_RATIO", "0.15"))


def manipulate_raster(
    raster: Raster,
    *,
    manipulation_service: ManipulationService | None = None,
    distance: float = POINTALIZE_DISTANCE,
    radius: int = POINTALIZE_RADIUS,
    brighten_ratio: float = BRIGHTEN_RATIO,
    contrast_ratio: float = CONTRAST_RATIO,
) -> Dict[str, Raster]:
    """
    Run every manipulation on an in-memory raster.

    Returns:
        Dict[str, Raster]: results keyed by suffix ("points", "brighten", "contrast")
    """
    manipulation_service = manipulation_service or ManipulationService()
    return {
        "points": manipulation_service.pointalize(raster, distance, radius),
        "brighten": manipulation_service.brighten(raster, brighten_ratio),
        "contrast": manipulation_service.increase_contrast(raster, contrast_ratio),
    }


def save_manipulations(
    raster: Raster,
    *,
    raster_service: RasterService | None = None,
    manipulation_service: ManipulationService | None = None,
    output_dir: str | Path = MANIPULATED_DIR,
    ext: str = OUTPUT_EXT,
    **params,
) -> Dict[str, Path]:
    """
    Manipulate a loaded raster and save ``<stem>_<suffix><ext>`` files.

    Args:
        raster: Raster to manipulate; its path names the outputs
        raster_service: Service for raster I/O
        manipulation_service: Service running the manipulations
        output_dir: Directory the results are written to
        ext: File extension of the written images
        **params: forwarded to ``manipulate_raster``

    Returns:
        Dict[str, Path]: written file per suffix
    """
    raster_service = raster_service or RasterService()
    output_dir = Path(output_dir)
    output_ext = ext or ".jpg"
    stem = raster.path.stem if raster.path else "raster"

    results = manipulate_raster(raster, manipulation_service=manipulation_service, **params)

    written = {}
    for suffix, result in results.items():
        target = output_dir / f"{stem}_{suffix}{output_ext}"
        written[suffix] = raster_service.save(result, target)
        logger.info(f"Saved {suffix} result to {target}")

    return written


def manipulate_image(
    path: str | Path,
    *,
    raster_service: RasterService | None = None,
    **options,
) -> Dict[str, Path]:
    """
    Load ``path`` and hand it to ``save_manipulations``.
    """
    raster_service = raster_service or RasterService()

    raster = raster_service.load(path)
    logger.info(f"Loaded {raster.path} ({raster.width}x{raster.height})")

    return save_manipulations(raster, raster_service=raster_service, **options)
