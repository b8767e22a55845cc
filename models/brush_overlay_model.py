from __future__ import annotations

from typing import Optional, Tuple

from config.constants import DEFAULT_BRUSH_RADIUS, FALLBACK_COLOR_BGRA
from models.holder import Notifier


class BrushOverlayModel:
    """Cursor preview state (position in display space, radius, colour, visibility)."""

    def __init__(self, radius: int = DEFAULT_BRUSH_RADIUS) -> None:
        self.position: Optional[Tuple[float, float]] = None
        self.radius: int = int(radius)
        self.label_index: int = 0
        self.color: Tuple[int, int, int, int] = FALLBACK_COLOR_BGRA
        self.visible: bool = False
        self._changed: Notifier["BrushOverlayModel"] = Notifier()

    def subscribe(self, callback) -> None:
        self._changed.add(callback)

    def set_position(self, x: float, y: float) -> None:
        self.position = (float(x), float(y))
        self._changed.notify(self)

    def set_radius(self, radius: int) -> None:
        self.radius = int(radius)
        self._changed.notify(self)

    def set_label(self, label_index: int, color: Tuple[int, int, int, int]) -> None:
        self.label_index = int(label_index)
        self.color = tuple(int(c) for c in color)
        self._changed.notify(self)

    def set_visible(self, visible: bool) -> None:
        self.visible = bool(visible)
        self._changed.notify(self)
