from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np

from models.interval import Interval


@dataclass(frozen=True)
class Label:
    """A named category with a stable position in its labeling."""

    name: str
    index: int


class Labeling:
    """
    Fixed grid extent plus an ordered set of boolean masks, one per label.
    Masks may overlap; the labeling only stores them (no painting logic).
    """

    def __init__(self, labels: Sequence[Label], interval: Interval, regions: Dict[int, np.ndarray]) -> None:
        self._labels: List[Label] = list(labels)
        self._interval = interval
        self._regions: Dict[int, np.ndarray] = regions

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #
    @classmethod
    def create(cls, names: Sequence[str], extent: "Interval | Sequence[int]") -> "Labeling":
        """Allocate one all-false region per label name, each covering `extent`."""
        interval = Interval.coerce(extent)
        labels = cls._build_labels(names)
        regions = {lbl.index: np.zeros(interval.shape, dtype=bool) for lbl in labels}
        return cls(labels, interval, regions)

    @classmethod
    def from_regions(
        cls,
        names: Sequence[str],
        extent: "Interval | Sequence[int]",
        regions: Sequence[np.ndarray],
    ) -> "Labeling":
        """Wrap existing masks (copied as bool) into a labeling."""
        interval = Interval.coerce(extent)
        labels = cls._build_labels(names)
        if len(regions) != len(labels):
            raise ValueError(f"Got {len(regions)} regions for {len(labels)} labels.")
        owned: Dict[int, np.ndarray] = {}
        for lbl, region in zip(labels, regions):
            arr = np.array(region, dtype=bool, copy=True)
            if arr.shape != interval.shape:
                raise ValueError(
                    f"Region '{lbl.name}' shape {arr.shape} does not match extent shape {interval.shape}."
                )
            owned[lbl.index] = arr
        return cls(labels, interval, owned)

    @staticmethod
    def _build_labels(names: Sequence[str]) -> List[Label]:
        seen: set[str] = set()
        labels: List[Label] = []
        for idx, name in enumerate(names):
            key = str(name)
            if key in seen:
                raise ValueError(f"Duplicate label name '{key}'.")
            seen.add(key)
            labels.append(Label(name=key, index=idx))
        return labels

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #
    def regions(self) -> Mapping[int, np.ndarray]:
        """Ordered mapping label index -> region (mutable in place)."""
        return self._regions

    def labels(self) -> List[Label]:
        return list(self._labels)

    def label_names(self) -> List[str]:
        return [lbl.name for lbl in self._labels]

    def region_for(self, name: str) -> Optional[np.ndarray]:
        for lbl in self._labels:
            if lbl.name == name:
                return self._regions[lbl.index]
        return None

    @property
    def interval(self) -> Interval:
        return self._interval

    @property
    def num_dimensions(self) -> int:
        return self._interval.num_dimensions

    def __len__(self) -> int:
        return len(self._labels)

    def __repr__(self) -> str:
        return f"Labeling(labels={self.label_names()!r}, interval={self._interval!r})"
