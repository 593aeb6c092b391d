from pathlib import Path
from typing import Iterable, Union, Iterator
from models.raster import Raster
from repositories.raster_repository import RasterRepository


class RasterService:
    """I/O helpers.  No manipulation logic."""
    def __init__(self):
        self.raster_repository = RasterRepository()

    def load(self, path: str | Path) -> Raster:
        """Load a single image from disk into a Raster object."""
        return self.raster_repository.load(path)

    def stream_gallery(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[Raster]:
        """
        Yield rasters lazily instead of returning a gigantic list.
        """
        return self.raster_repository.iter_dir(folder,
                                               recursive=recursive,
                                               exts=exts)

    def save(self, raster: Raster, path: Union[str, Path] = None) -> Path:
        """
        Business-level method to save the raster, to ``path`` or its own path.
        """
        return self.raster_repository.save(raster, path)
