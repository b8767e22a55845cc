"""Attribution des couleurs de labels (BGRA), synchronisée avec le labeling courant."""

from __future__ import annotations

import colorsys
import logging
from typing import Dict, Mapping, Optional, Tuple

import numpy as np

from config.constants import GENERATED_ALPHA, LABEL_COLORS_BGRA
from models.holder import Holder, Notifier
from models.labeling import Labeling

Color = Tuple[int, int, int, int]

GOLDEN_RATIO_CONJUGATE = 0.618033988749895


def generated_color(index: int) -> Color:
    """Procedural colour for an index beyond the palette (golden-ratio hue spread)."""
    hue = (int(index) * GOLDEN_RATIO_CONJUGATE) % 1.0
    r, g, b = colorsys.hsv_to_rgb(hue, 0.85, 0.95)
    return (int(round(b * 255)), int(round(g * 255)), int(round(r * 255)), GENERATED_ALPHA)


class ColorProvider:
    """Maps label index to a BGRA colour; recomputed whenever the label set is replaced."""

    def __init__(
        self,
        holder: Holder[Labeling],
        palette: Optional[Mapping[int, Color]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self._palette: Dict[int, Color] = {
            int(k): tuple(int(c) for c in v) for k, v in (palette or LABEL_COLORS_BGRA).items()
        }
        self._labeling = holder.get()
        self._colors: Dict[int, Color] = {}
        self._changed: Notifier[Dict[int, Color]] = Notifier()
        self._recompute()
        holder.subscribe(self._on_labeling_replaced)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def color_of(self, label_index: int) -> Color:
        try:
            return self._colors[int(label_index)]
        except KeyError:
            raise ValueError(
                f"Unknown label index {label_index} (labeling has {len(self._colors)} labels)."
            ) from None

    def color_of_name(self, name: str) -> Color:
        for lbl in self._labeling.labels():
            if lbl.name == name:
                return self._colors[lbl.index]
        raise ValueError(f"Unknown label name '{name}'.")

    def colors(self) -> Dict[int, Color]:
        return dict(self._colors)

    def subscribe(self, callback) -> None:
        """Called with the new colour mapping after every recomputation."""
        self._changed.add(callback)

    def regenerate(self, seed: Optional[int] = None) -> None:
        """Draw a fresh random colour per label and publish it."""
        rng = np.random.default_rng(seed)
        count = len(self._labeling)
        packed = rng.choice(1 << 24, size=count, replace=False) if count else []
        self._colors = {
            idx: (int(v) & 0xFF, (int(v) >> 8) & 0xFF, (int(v) >> 16) & 0xFF, GENERATED_ALPHA)
            for idx, v in enumerate(packed)
        }
        self.logger.info("Label colours regenerated | labels=%d | seed=%s", count, seed)
        self._changed.notify(self.colors())

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _on_labeling_replaced(self, labeling: Labeling) -> None:
        self._labeling = labeling
        self._recompute()

    def _recompute(self) -> None:
        self._colors = {
            lbl.index: self._palette.get(lbl.index) or generated_color(lbl.index)
            for lbl in self._labeling.labels()
        }
        self.logger.debug("Label colours recomputed | labels=%d", len(self._colors))
        self._changed.notify(self.colors())
