from __future__ import annotations

from typing import Dict, Mapping, Optional, Tuple

import numpy as np

from config.constants import FALLBACK_COLOR_BGRA
from models.labeling import Labeling
from models.overlay_data import OverlayData


class OverlayService:
    """Construit l'overlay RGBA d'un plan 2D à partir des régions d'un labeling et d'une palette BGRA."""

    def compose_plane(
        self,
        labeling: Labeling,
        label_palette: Mapping[int, Tuple[int, int, int, int]],
        fixed_axes: Optional[Mapping[int, int]] = None,
        visible_labels: Optional[set[int]] = None,
    ) -> OverlayData:
        """
        Fix the given grid axes (axis -> grid coordinate) and paint every visible
        region of the remaining 2D plane. Rows of the result follow the second
        remaining axis (display y), columns the first (display x).
        """
        interval = labeling.interval
        fixed = {int(ax): int(v) for ax, v in (fixed_axes or {}).items()}
        free_axes = [ax for ax in range(interval.num_dimensions) if ax not in fixed]
        if len(free_axes) != 2:
            raise ValueError(
                f"Fixing axes {sorted(fixed)} of a {interval.num_dimensions}D grid does not leave a 2D plane."
            )

        slicer = []
        for ax in range(interval.num_dimensions):
            if ax in fixed:
                pos = fixed[ax] - interval.min[ax]
                if not 0 <= pos < interval.shape[ax]:
                    raise ValueError(f"Coordinate {fixed[ax]} outside axis {ax} of {interval}.")
                slicer.append(pos)
            else:
                slicer.append(slice(None))
        slicer = tuple(slicer)

        width, height = interval.shape[free_axes[0]], interval.shape[free_axes[1]]
        rgba = np.zeros((height, width, 4), dtype=np.uint8)
        palette: Dict[int, Tuple[int, int, int, int]] = dict(label_palette)
        drawn = []
        for idx, region in labeling.regions().items():
            if visible_labels is not None and idx not in visible_labels:
                continue
            plane = region[slicer].T
            if not np.any(plane):
                continue
            b, g, r, a = palette.get(idx, FALLBACK_COLOR_BGRA)
            rgba[plane] = (r, g, b, a)
            drawn.append(idx)

        return OverlayData(rgba=rgba, labels_drawn=tuple(drawn))
