"""Génération des pixels couverts par une touche de pinceau (hypersphère)."""

from __future__ import annotations

from functools import lru_cache
from typing import Iterator, Sequence, Tuple, Union

import numpy as np


@lru_cache(maxsize=64)
def footprint_offsets(radius: int, num_dimensions: int) -> np.ndarray:
    """
    Integer offsets (N, num_dimensions) of every point within `radius` of the
    origin, in C order. The returned array is read-only and shared.
    """
    r = int(radius)
    if r < 0:
        raise ValueError(f"Brush radius must be >= 0, got {radius}.")
    n = int(num_dimensions)
    size = 2 * r + 1
    grid = np.indices((size,) * n).reshape(n, -1).T - r
    keep = np.sum(grid * grid, axis=1) <= r * r
    offsets = np.ascontiguousarray(grid[keep], dtype=np.int64)
    offsets.setflags(write=False)
    return offsets


def round_center(center: Sequence[float], num_dimensions: int) -> np.ndarray:
    """Nearest grid coordinate (half-up rounding) of the first `num_dimensions` components."""
    values = np.asarray(center, dtype=np.float64)
    if values.shape[0] < num_dimensions:
        raise ValueError(
            f"Center has {values.shape[0]} components, {num_dimensions} spatial axes required."
        )
    return np.floor(values[:num_dimensions] + 0.5).astype(np.int64)


class NeighborhoodPixelsGenerator:
    """Brush footprint over a grid whose axes are all spatial."""

    time_series = False

    def __init__(self, num_dimensions: int) -> None:
        self.num_dimensions = int(num_dimensions)

    @property
    def spatial_dimensions(self) -> int:
        return self.num_dimensions

    def coordinates(self, center: Sequence[float], timepoint: int, radius: int) -> np.ndarray:
        """Footprint as an (N, num_dimensions) int64 array."""
        offsets = footprint_offsets(int(radius), self.spatial_dimensions)
        return offsets + round_center(center, self.spatial_dimensions)

    def pixels_at(self, center: Sequence[float], timepoint: int, radius: int) -> Iterator[Tuple[int, ...]]:
        """Lazy, one-shot sequence of the footprint coordinates."""
        coords = self.coordinates(center, timepoint, radius)
        return (tuple(int(v) for v in row) for row in coords)


class TimeSeriesPixelsGenerator(NeighborhoodPixelsGenerator):
    """Brush footprint for time series: the last axis is time and is pinned to the timepoint."""

    time_series = True

    def __init__(self, num_dimensions: int) -> None:
        if int(num_dimensions) < 2:
            raise ValueError("A time series grid needs at least one spatial axis and a time axis.")
        super().__init__(num_dimensions)

    @property
    def time_axis(self) -> int:
        return self.num_dimensions - 1

    @property
    def spatial_dimensions(self) -> int:
        return self.num_dimensions - 1

    def coordinates(self, center: Sequence[float], timepoint: int, radius: int) -> np.ndarray:
        spatial = super().coordinates(center, timepoint, radius)
        time_column = np.full((spatial.shape[0], 1), int(timepoint), dtype=np.int64)
        return np.hstack([spatial, time_column])


PixelsGenerator = Union[NeighborhoodPixelsGenerator, TimeSeriesPixelsGenerator]


def make_pixels_generator(num_dimensions: int, time_series: bool) -> PixelsGenerator:
    """Pick the brush policy once, from whether the data is a time series."""
    if time_series:
        return TimeSeriesPixelsGenerator(num_dimensions)
    return NeighborhoodPixelsGenerator(num_dimensions)
