"""Rasterisation d'un trait de pinceau : interpolation et écriture des touches."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from config.constants import STROKE_STEP
from models.interval import Interval
from services.neighborhood_service import PixelsGenerator

Bounds = Tuple[Tuple[int, ...], Tuple[int, ...]]


def interpolate_segment(start: Sequence[float], end: Sequence[float], step: float = STROKE_STEP) -> List[np.ndarray]:
    """
    Sample points along [start, end]: intermediate points every `step` grid
    units strictly inside the segment, then `end` itself.
    """
    p0 = np.asarray(start, dtype=np.float64)
    p1 = np.asarray(end, dtype=np.float64)
    if step <= 0:
        raise ValueError(f"Interpolation step must be positive, got {step}.")
    delta = p1 - p0
    length = float(np.linalg.norm(delta))
    if length == 0.0:
        return [p1.copy()]
    unit = delta / length * step
    samples: List[np.ndarray] = []
    i = 1
    while i * step < length:
        samples.append(p0 + unit * i)
        i += 1
    samples.append(p1.copy())
    return samples


def union_bounds(a: Optional[Bounds], b: Optional[Bounds]) -> Optional[Bounds]:
    if a is None:
        return b
    if b is None:
        return a
    lo = tuple(min(x, y) for x, y in zip(a[0], b[0]))
    hi = tuple(max(x, y) for x, y in zip(a[1], b[1]))
    return lo, hi


class StrokeService:
    """Écrit les touches du pinceau dans une région booléenne."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger(__name__)

    def footprint(
        self,
        generator: PixelsGenerator,
        interval: Interval,
        center: Sequence[float],
        timepoint: int,
        radius: int,
    ) -> np.ndarray:
        """In-extent coordinates of one dab; outside coordinates are clipped away."""
        coords = generator.coordinates(center, timepoint, radius)
        if coords.shape[1] != interval.num_dimensions:
            raise ValueError(
                f"Brush produces {coords.shape[1]}D coordinates for a {interval.num_dimensions}D grid."
            )
        return coords[interval.inside_mask(coords)]

    def write_footprint(self, region: np.ndarray, interval: Interval, coords: np.ndarray, value: bool) -> Optional[Bounds]:
        """Assign `value` at every coordinate; returns the written bounds or None."""
        if coords.shape[0] == 0:
            return None
        index = tuple((coords - np.asarray(interval.min)).T)
        region[index] = bool(value)
        lo = tuple(int(v) for v in coords.min(axis=0))
        hi = tuple(int(v) for v in coords.max(axis=0))
        return lo, hi
