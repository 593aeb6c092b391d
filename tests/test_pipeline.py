from __future__ import annotations

import numpy as np

from pipeline.manipulate_image import manipulate_image, manipulate_raster, save_manipulations
from repositories.raster_repository import RasterRepository
from raster_helpers import column_split_raster


def test_manipulate_raster_runs_every_manipulation(service) -> None:
    source = column_split_raster(6, 4, 3)
    results = manipulate_raster(
        source,
        manipulation_service=service,
        distance=0.0,
        radius=2,
        brighten_ratio=0.5,
        contrast_ratio=0.0,
    )

    assert set(results) == {"points", "brighten", "contrast"}
    assert results["brighten"].channels(5, 0) == (127, 127, 127)
    assert np.all(results["contrast"].pixels == 0)
    assert results["points"].channels(0, 0) == (255, 255, 255)
    assert results["points"].channels(2, 0) == (0, 0, 0)


def test_manipulate_image_writes_one_file_per_result(tmp_path, service) -> None:
    src = RasterRepository.save(column_split_raster(5, 5, 2), tmp_path / "photo.png")
    out_dir = tmp_path / "out"

    written = manipulate_image(
        src,
        manipulation_service=service,
        output_dir=out_dir,
        ext=".png",
        radius=1,
    )

    assert {p.name for p in written.values()} == {
        "photo_points.png",
        "photo_brighten.png",
        "photo_contrast.png",
    }
    for path in written.values():
        loaded = RasterRepository.load(path)
        assert (loaded.width, loaded.height) == (5, 5)


def test_save_manipulations_names_pathless_rasters(tmp_path, service) -> None:
    written = save_manipulations(
        column_split_raster(4, 3, 2),
        manipulation_service=service,
        output_dir=tmp_path,
        ext=".png",
        radius=2,
    )

    assert sorted(p.name for p in written.values()) == [
        "raster_brighten.png",
        "raster_contrast.png",
        "raster_points.png",
    ]
