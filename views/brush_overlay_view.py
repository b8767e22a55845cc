"""Brush cursor preview drawn on top of the label canvas."""

from __future__ import annotations

from PyQt6.QtGui import QColor, QPen
from PyQt6.QtWidgets import QGraphicsEllipseItem

from models.brush_overlay_model import BrushOverlayModel


class BrushOverlayItem(QGraphicsEllipseItem):
    """Hollow circle mirroring a BrushOverlayModel (scene coordinates = grid units)."""

    def __init__(self, model: BrushOverlayModel) -> None:
        super().__init__()
        self.setZValue(20)
        self.setVisible(False)
        model.subscribe(self.sync)
        self.sync(model)

    def sync(self, model: BrushOverlayModel) -> None:
        """Refresh position, radius, colour and visibility from the model."""
        b, g, r, a = model.color
        pen = QPen(QColor(r, g, b, a))
        pen.setWidth(2)
        pen.setCosmetic(True)
        self.setPen(pen)
        if model.position is None:
            self.setVisible(False)
            return
        # Radius 0 still shows a one-pixel dab.
        radius = max(float(model.radius), 0.5)
        x, y = model.position
        self.setRect(x - radius, y - radius, 2 * radius, 2 * radius)
        self.setVisible(model.visible)
