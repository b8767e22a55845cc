from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class Interval:
    """Axis-aligned integer extent, min and max inclusive on every axis."""

    min: Tuple[int, ...]
    max: Tuple[int, ...]

    def __post_init__(self) -> None:
        lo = tuple(int(v) for v in self.min)
        hi = tuple(int(v) for v in self.max)
        if len(lo) != len(hi):
            raise ValueError(f"Interval min {lo} and max {hi} differ in dimensionality.")
        if not lo:
            raise ValueError("Interval must have at least one dimension.")
        for a, b in zip(lo, hi):
            if b < a - 1:
                raise ValueError(f"Invalid interval bounds min={lo} max={hi}.")
        object.__setattr__(self, "min", lo)
        object.__setattr__(self, "max", hi)

    @classmethod
    def from_shape(cls, shape: Sequence[int]) -> "Interval":
        """Interval starting at the origin with the given size per axis."""
        dims = tuple(int(s) for s in shape)
        return cls(min=(0,) * len(dims), max=tuple(s - 1 for s in dims))

    @classmethod
    def coerce(cls, extent: "Interval | Sequence[int]") -> "Interval":
        if isinstance(extent, Interval):
            return extent
        return cls.from_shape(extent)

    @property
    def num_dimensions(self) -> int:
        return len(self.min)

    @property
    def shape(self) -> Tuple[int, ...]:
        return tuple(b - a + 1 for a, b in zip(self.min, self.max))

    def contains(self, coord: Iterable[int]) -> bool:
        point = tuple(int(c) for c in coord)
        if len(point) != self.num_dimensions:
            return False
        return all(a <= c <= b for a, c, b in zip(self.min, point, self.max))

    def inside_mask(self, coords: np.ndarray) -> np.ndarray:
        """Boolean mask over the rows of an (N, ndim) coordinate array."""
        coords = np.asarray(coords)
        lo = np.asarray(self.min)
        hi = np.asarray(self.max)
        return np.all((coords >= lo) & (coords <= hi), axis=1)

    def with_axis(self, lo: int, hi: int) -> "Interval":
        """Return a copy extended by one trailing axis [lo, hi]."""
        return Interval(min=self.min + (int(lo),), max=self.max + (int(hi),))
