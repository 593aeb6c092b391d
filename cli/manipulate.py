import argparse
import logging
import sys
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from tqdm import tqdm

# Load environment variables first
load_dotenv()

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from models.kernel import Kernel, KernelType
from pipeline import manipulate_image as pipeline
from services.manipulation_service import ManipulationService
from services.raster_service import RasterService
from services.traversal_service import TraversalService

logger = logging.getLogger(__name__)


def run_images(args) -> int:
    raster_service = RasterService()
    options = dict(
        raster_service=raster_service,
        manipulation_service=ManipulationService(TraversalService(args.workers)),
        output_dir=args.output_dir,
        distance=args.distance,
        radius=args.radius,
        brighten_ratio=args.brighten,
        contrast_ratio=args.contrast,
    )

    processed = failures = 0
    for item in args.inputs:
        path = Path(item)
        if not path.is_dir():
            try:
                pipeline.manipulate_image(path, **options)
                processed += 1
            except (FileNotFoundError, TimeoutError, ValueError, OSError) as err:
                failures += 1
                logger.error(f"Failed to manipulate {path}: {err}")
            continue

        for raster in tqdm(raster_service.stream_gallery(path), desc=path.name, ncols=70):
            try:
                pipeline.save_manipulations(raster, **options)
                processed += 1
            except (ValueError, OSError) as err:
                failures += 1
                logger.error(f"Failed to manipulate {raster.path}: {err}")

    if not processed and not failures:
        logger.error("No input images found")
        return 1

    logger.info(f"Manipulated {processed}/{processed + failures} image(s)")
    return 1 if failures else 0


def run_kernel(args) -> int:
    try:
        kernel = Kernel(args.radius, args.type)
    except ValueError as err:
        logger.error(str(err))
        return 1
    print(kernel)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="image-manipulator",
        description="Brighten, contrast and pointalize images; print kernels.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    images = sub.add_parser("images", help="manipulate image files or folders")
    images.add_argument("inputs", nargs="+", help="image files or directories")
    images.add_argument("-o", "--output-dir", default=pipeline.MANIPULATED_DIR)
    images.add_argument("--distance", type=float, default=pipeline.POINTALIZE_DISTANCE,
                        help="pointalize distance threshold")
    images.add_argument("--radius", type=int, default=pipeline.POINTALIZE_RADIUS,
                        help="pointalize neighbourhood radius")
    images.add_argument("--brighten", type=float, default=pipeline.BRIGHTEN_RATIO)
    images.add_argument("--contrast", type=float, default=pipeline.CONTRAST_RATIO)
    images.add_argument("--workers", type=int, default=None,
                        help="traversal threads (default: TRAVERSAL_MAX_WORKERS or cpu count)")
    images.set_defaults(func=run_images)

    kernel = sub.add_parser("kernel", help="print a kernel grid")
    kernel.add_argument("--radius", type=int, default=1)
    kernel.add_argument("--type", default=KernelType.MEAN.name,
                        help="MEAN or GAUSSIAN")
    kernel.set_defaults(func=run_kernel)

    return parser


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
