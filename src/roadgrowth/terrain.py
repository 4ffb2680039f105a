"""Terrain height field contract and simple adapters.

The growth engine only needs `get_altitude(x, y)`, returning None when the
coordinates fall outside the terrain domain.
"""

import logging
from typing import Callable, Optional, Protocol, Tuple

import numpy as np

from .contracts import optional_float

logger = logging.getLogger(__name__)

Bounds = Tuple[float, float, float, float]


class TerrainDomainError(ValueError):
    """Raised when the start site lies outside the terrain domain."""


class Terrain(Protocol):
    def get_altitude(self, x: float, y: float) -> Optional[float]:
        ...


def _within(bounds: Optional[Bounds], x: float, y: float) -> bool:
    if bounds is None:
        return True
    minx, miny, maxx, maxy = bounds
    return minx <= x <= maxx and miny <= y <= maxy


class ConstantTerrain:
    """Flat terrain, optionally limited to (minx, miny, maxx, maxy)."""

    def __init__(self, altitude: float, bounds: Optional[Bounds] = None):
        self.altitude = float(altitude)
        self.bounds = bounds

    def get_altitude(self, x: float, y: float) -> Optional[float]:
        if not _within(self.bounds, x, y):
            return None
        return self.altitude


class FunctionTerrain:
    """Terrain backed by a callable f(x, y) -> Optional[float]."""

    def __init__(self, func: Callable[[float, float], Optional[float]], bounds: Optional[Bounds] = None):
        self.func = func
        self.bounds = bounds

    def get_altitude(self, x: float, y: float) -> Optional[float]:
        if not _within(self.bounds, x, y):
            return None
        return optional_float(self.func(x, y))


class GridTerrain:
    """
    Heightmap terrain sampled with bilinear interpolation.

    heights[row, col] holds the elevation at
    x = minx + col * (maxx - minx) / (cols - 1),
    y = miny + row * (maxy - miny) / (rows - 1).
    NaN cells mark holes in the domain.
    """

    def __init__(self, heights, bound_min: Tuple[float, float], bound_max: Tuple[float, float]):
        heights = np.asarray(heights, dtype=float)
        if heights.ndim != 2 or heights.shape[0] < 2 or heights.shape[1] < 2:
            raise ValueError(f"GridTerrain: heights must be a 2D array of at least 2x2, got shape {heights.shape}")
        if bound_max[0] <= bound_min[0] or bound_max[1] <= bound_min[1]:
            raise ValueError("GridTerrain: bound_max must be strictly greater than bound_min")

        self.heights = heights
        self.bound_min = (float(bound_min[0]), float(bound_min[1]))
        self.bound_max = (float(bound_max[0]), float(bound_max[1]))
        rows, cols = heights.shape
        self.cell_width = (self.bound_max[0] - self.bound_min[0]) / (cols - 1)
        self.cell_height = (self.bound_max[1] - self.bound_min[1]) / (rows - 1)

        logger.debug(f"GridTerrain {rows}x{cols} over {self.bound_min} - {self.bound_max}")

    @classmethod
    def from_file(cls, path: str, bound_min, bound_max) -> 'GridTerrain':
        """Load a heightmap saved with numpy.save."""
        return cls(np.load(path), bound_min, bound_max)

    @property
    def bounds(self) -> Bounds:
        return self.bound_min + self.bound_max

    def get_altitude(self, x: float, y: float) -> Optional[float]:
        if not _within(self.bounds, x, y):
            return None

        rows, cols = self.heights.shape
        fx = (x - self.bound_min[0]) / self.cell_width
        fy = (y - self.bound_min[1]) / self.cell_height
        col = min(int(np.floor(fx)), cols - 2)
        row = min(int(np.floor(fy)), rows - 2)
        tx = fx - col
        ty = fy - row

        cell = self.heights[row:row + 2, col:col + 2]
        if np.isnan(cell).any():
            return None

        top = cell[0, 0] * (1.0 - tx) + cell[0, 1] * tx
        bottom = cell[1, 0] * (1.0 - tx) + cell[1, 1] * tx
        return float(top * (1.0 - ty) + bottom * ty)
