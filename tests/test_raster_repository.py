from __future__ import annotations

import numpy as np
import pytest

from models.pixel import Pixel
from models.color import pack_rgb
from repositories.raster_repository import RasterRepository
from services.raster_service import RasterService
from raster_helpers import make_raster, uniform_raster


def test_png_save_then_load_keeps_rgb_order(tmp_path) -> None:
    repo = RasterRepository()
    source = make_raster([
        [(255, 0, 0), (0, 255, 0)],
        [(0, 0, 255), (12, 34, 56)],
    ])

    written = repo.save(source, tmp_path / "nested" / "img.png")
    loaded = repo.load(written)

    assert written.exists()
    assert loaded.path == written
    assert (loaded.width, loaded.height) == (2, 2)
    assert np.array_equal(loaded.pixels, source.pixels)


def test_load_missing_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        RasterRepository.load(tmp_path / "missing.png")


def test_save_without_any_path_raises() -> None:
    with pytest.raises(ValueError, match="no path"):
        RasterRepository.save(uniform_raster(1, 1))


def test_iter_dir_skips_other_extensions(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("VALID_IMAGE_EXTENSIONS", ".png")
    repo = RasterRepository()
    repo.save(uniform_raster(2, 2), tmp_path / "a.png")
    repo.save(uniform_raster(3, 1), tmp_path / "b.png")
    (tmp_path / "notes.txt").write_text("not an image")

    rasters = list(repo.iter_dir(tmp_path))

    assert [r.path.name for r in rasters] == ["a.png", "b.png"]
    assert [(r.width, r.height) for r in rasters] == [(2, 2), (3, 1)]


def test_iter_dir_requires_a_directory(tmp_path) -> None:
    with pytest.raises(NotADirectoryError):
        list(RasterRepository().iter_dir(tmp_path / "nope"))


def test_write_pixel_sets_channels() -> None:
    raster = uniform_raster(2, 2, (0, 0, 0))
    RasterRepository.write_pixel(raster, Pixel(1, 0, pack_rgb(7, 8, 9)))
    assert raster.channels(1, 0) == (7, 8, 9)
    assert raster.channels(0, 1) == (0, 0, 0)


def test_blank_like_allocates_new_storage() -> None:
    source = uniform_raster(3, 2, (5, 5, 5))
    blank = RasterRepository.blank_like(source)
    assert blank.pixels.shape == source.pixels.shape
    assert blank.pixels.dtype == np.uint8
    assert not np.shares_memory(blank.pixels, source.pixels)
    assert np.all(blank.pixels == 0)


def test_write_rows_places_a_block_of_rows() -> None:
    raster = uniform_raster(3, 4, (0, 0, 0))
    rows = np.full((2, 3, 3), 200, dtype=np.uint8)

    RasterRepository.write_rows(raster, 1, rows)

    assert np.all(raster.pixels[1:3] == 200)
    assert np.all(raster.pixels[[0, 3]] == 0)


@pytest.mark.parametrize("y_start, shape", [(3, (2, 3, 3)), (-1, (1, 3, 3)), (0, (1, 2, 3))])
def test_write_rows_rejects_blocks_that_do_not_fit(y_start, shape) -> None:
    raster = uniform_raster(3, 4)
    with pytest.raises(ValueError, match="do not fit"):
        RasterRepository.write_rows(raster, y_start, np.zeros(shape, dtype=np.uint8))


def test_raster_service_saves_to_own_path_and_streams_back(tmp_path) -> None:
    service = RasterService()
    raster = uniform_raster(4, 3, (1, 2, 3))
    raster.path = tmp_path / "r.png"

    assert service.save(raster) == tmp_path / "r.png"

    streamed = list(service.stream_gallery(tmp_path, exts=[".png"]))
    assert len(streamed) == 1
    assert streamed[0].channels(3, 2) == (1, 2, 3)
    assert service.load(tmp_path / "r.png").width == 4


def test_unreadable_files_are_skipped_while_streaming(tmp_path) -> None:
    RasterRepository.save(uniform_raster(2, 2), tmp_path / "good.png")
    (tmp_path / "broken.png").write_bytes(b"not a png")

    rasters = list(RasterService().stream_gallery(tmp_path, exts=[".png"]))

    assert [r.path.name for r in rasters] == ["good.png"]
