from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class OverlayData:
    """Overlay payload: one composed RGBA plane and the label indices drawn into it."""

    rgba: np.ndarray  # uint8 (H, W, 4)
    labels_drawn: Tuple[int, ...] = ()


@dataclass(frozen=True)
class PaintEvent:
    """Repaint request emitted after a batch of brush writes."""

    label_index: int
    value: bool
    bounds_min: Tuple[int, ...]
    bounds_max: Tuple[int, ...]
