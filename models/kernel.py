from __future__ import annotations
from enum import Enum
import logging
import numpy as np

logger = logging.getLogger(__name__)

# Largest radius whose GAUSSIAN center weight 2**(2*radius) fits in int64;
# wider GAUSSIAN grids hold Python ints instead.
MAX_INT64_GAUSSIAN_RADIUS = 31


class KernelType(Enum):
    MEAN = "MEAN"
    GAUSSIAN = "GAUSSIAN"


class Kernel:
    """
    A square grid of integer weights for filters, blurs and other
    neighbourhood manipulations.

    The grid is (2*radius + 1) wide and built once at construction time.
    It can be read relative to its center cell (``get_relative``) or
    relative to its upper left corner (``get_absolute``).

    *   MEAN: every weight is 1.
    *   GAUSSIAN: power-of-two approximation, weight ``1 << (i + j)`` on the
        upper left quadrant, mirrored into the other three. Smallest at the
        corners, ``2**(2*radius)`` at the center.
    *   Any other type falls back to MEAN with a warning.
    """

    def __init__(self, radius: int = 1, kernel_type: KernelType | str = KernelType.MEAN):
        if radius < 0:
            raise ValueError(f"Kernel radius must be non-negative, got {radius}")

        self.radius = int(radius)
        self.diameter = (self.radius << 1) + 1
        self.type = self._resolve_type(kernel_type)

        self._grid = self._build_grid()
        self._grid.flags.writeable = False

    # ─── Construction ──────────────────────────────────────────────
    @staticmethod
    def _resolve_type(kernel_type) -> KernelType | None:
        if isinstance(kernel_type, KernelType):
            return kernel_type
        if isinstance(kernel_type, str):
            try:
                return KernelType[kernel_type.strip().upper()]
            except KeyError:
                pass
        return None

    def _build_grid(self) -> np.ndarray:
        wide = self.type is KernelType.GAUSSIAN and self.radius > MAX_INT64_GAUSSIAN_RADIUS
        grid = np.zeros((self.diameter, self.diameter), dtype=object if wide else np.int64)

        if self.type is KernelType.MEAN:
            # Fills with one - get average around a pixel
            grid.fill(1)
        elif self.type is KernelType.GAUSSIAN:
            center = self.diameter // 2
            last_index = self.diameter - 1

            for i in range(center + 1):
                for j in range(center + 1):
                    value = 1 << (i + j)
                    grid[i, j] = value
                    grid[last_index - i, last_index - j] = value
                    grid[i, last_index - j] = value
                    grid[last_index - i, j] = value
        else:
            logger.warning("Kernel type not valid. defaulting to MEAN")
            self.type = KernelType.MEAN
            grid.fill(1)

        return grid

    # ─── Accessors ─────────────────────────────────────────────────
    @property
    def grid(self) -> np.ndarray:
        """Read-only (diameter, diameter) view of the weights, indexed [row, col]."""
        return self._grid

    def get_relative(self, rel_x: int, rel_y: int) -> int:
        """
        Weight at an offset from the center cell.

        Raises:
            IndexError: if either offset exceeds the radius.
        """
        if abs(rel_x) > self.radius or abs(rel_y) > self.radius:
            raise IndexError("Coordinate not in Kernel grid")

        center = self.diameter // 2
        return int(self._grid[center + rel_y, center + rel_x])

    def get_absolute(self, x: int, y: int) -> int:
        """
        Weight at a position from the upper left corner.

        Only the upper left quadrant (0..radius on both axes) is reachable;
        mirrored weights are available through ``get_relative``.

        Raises:
            IndexError: if x or y is outside [0, radius].
        """
        if x > self.radius or x < 0 or y > self.radius or y < 0:
            raise IndexError("Coordinate not in Kernel grid")

        return int(self._grid[y, x])

    def __str__(self) -> str:
        # Gets max number of digits in the grid numbers
        max_digits = (
            len(str(1 << (2 * self.radius)))
            if self.type is KernelType.GAUSSIAN
            else 1
        )
        width = max_digits + 1

        rows = "".join(
            "".join(f"{int(value):>{width}}" for value in row) + "\n"
            for row in self._grid
        )
        return f"Type: {self.type.name}\ngrid: \n{rows}"

    def __repr__(self) -> str:
        return f"Kernel(radius={self.radius}, kernel_type={self.type})"
