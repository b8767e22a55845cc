"""Label painting canvas using QGraphicsView (zoom, brush events, overlay)."""

from __future__ import annotations

from typing import Any, Optional, Tuple

import numpy as np
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QImage, QMouseEvent, QPixmap, QWheelEvent
from PyQt6.QtWidgets import (
    QFrame,
    QGraphicsPixmapItem,
    QGraphicsScene,
    QGraphicsView,
    QVBoxLayout,
)

from models.brush_overlay_model import BrushOverlayModel
from models.overlay_data import OverlayData
from views.brush_overlay_view import BrushOverlayItem


class LabelCanvasView(QFrame):
    """
    Displays the composed label overlay and forwards pointer input as brush events.
    Emitted coordinates are scene coordinates (one unit per grid cell).
    Left drag paints, right drag erases, Ctrl+wheel changes the radius,
    Shift+wheel cycles the label, plain wheel zooms.
    """

    moved = pyqtSignal(float, float)
    drag_started = pyqtSignal(float, float, bool)
    dragged = pyqtSignal(float, float)
    drag_ended = pyqtSignal(float, float)
    scrolled = pyqtSignal(float, bool, bool)  # amount (<0 = away), is_horizontal, cycle_label

    def __init__(self, brush_overlay: BrushOverlayModel, parent=None) -> None:
        super().__init__(parent)
        self._dragging: bool = False

        self._scene = QGraphicsScene(self)
        self._view = QGraphicsView(self._scene)
        self._view.setDragMode(QGraphicsView.DragMode.NoDrag)
        self._view.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorUnderMouse)
        self._view.viewport().installEventFilter(self)
        self._view.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self._view.setMouseTracking(True)

        self._overlay_item = QGraphicsPixmapItem()
        self._overlay_item.setOpacity(0.6)
        self._scene.addItem(self._overlay_item)

        self._brush_item = BrushOverlayItem(brush_overlay)
        self._brush_item.setPos(0.5, 0.5)
        self._scene.addItem(self._brush_item)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._view)

        self.setStyleSheet("background-color: #202020; color: #bbbbbb;")
        self.setFocusProxy(self._view)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def set_overlay(self, overlay: Optional[OverlayData]) -> None:
        """Display a composed overlay (None clears it)."""
        if overlay is None:
            self._overlay_item.setPixmap(QPixmap())
            return
        pixmap = self._rgba_to_pixmap(overlay.rgba)
        self._overlay_item.setPixmap(pixmap)
        self._scene.setSceneRect(self._overlay_item.boundingRect())

    def brush_item(self) -> BrushOverlayItem:
        return self._brush_item

    # ------------------------------------------------------------------ #
    # Events
    # ------------------------------------------------------------------ #
    def eventFilter(self, obj: Any, event) -> bool:
        if obj is self._view.viewport():
            if isinstance(event, QWheelEvent):
                return self._handle_wheel(event)
            if isinstance(event, QMouseEvent):
                if event.type() == QMouseEvent.Type.MouseButtonPress:
                    return self._handle_press(event)
                if event.type() == QMouseEvent.Type.MouseMove:
                    return self._handle_move(event)
                if event.type() == QMouseEvent.Type.MouseButtonRelease:
                    return self._handle_release(event)
        return super().eventFilter(obj, event)

    def _handle_press(self, event: QMouseEvent) -> bool:
        if event.button() not in (Qt.MouseButton.LeftButton, Qt.MouseButton.RightButton):
            return False
        x, y = self._scene_coords_from_event(event)
        self._view.setFocus(Qt.FocusReason.MouseFocusReason)
        self._dragging = True
        self.drag_started.emit(x, y, event.button() == Qt.MouseButton.RightButton)
        event.accept()
        return True

    def _handle_move(self, event: QMouseEvent) -> bool:
        x, y = self._scene_coords_from_event(event)
        if self._dragging:
            self.dragged.emit(x, y)
        else:
            self.moved.emit(x, y)
        return False

    def _handle_release(self, event: QMouseEvent) -> bool:
        if not self._dragging:
            return False
        x, y = self._scene_coords_from_event(event)
        self._dragging = False
        self.drag_ended.emit(x, y)
        event.accept()
        return True

    def _handle_wheel(self, event: QWheelEvent) -> bool:
        delta = event.angleDelta()
        modifiers = event.modifiers()
        cycle_label = bool(modifiers & Qt.KeyboardModifier.ShiftModifier)
        amount, is_horizontal = self.wheel_step(delta.x(), delta.y(), cycle_label)
        if modifiers & Qt.KeyboardModifier.ControlModifier:
            self.scrolled.emit(amount, is_horizontal, False)
        elif cycle_label:
            self.scrolled.emit(amount, is_horizontal, True)
        elif not is_horizontal:
            factor = 1.15 if amount < 0 else 1 / 1.15
            self._view.scale(factor, factor)
        event.accept()
        return True

    @staticmethod
    def wheel_step(dx: int, dy: int, cycle_label: bool) -> Tuple[float, bool]:
        """Signed scroll amount (<0 = away) and orientation of one wheel delta.

        Shift+wheel is reported on the horizontal axis on some platforms, so the
        label cycle reads whichever component is non-zero.
        """
        if cycle_label:
            return -float(dy or dx), False
        is_horizontal = dy == 0 and dx != 0
        return -float(dx if is_horizontal else dy), is_horizontal

    def _scene_coords_from_event(self, event: QMouseEvent) -> Tuple[float, float]:
        # Pixel centres sit on integer coordinates.
        scene_pos = self._view.mapToScene(event.position().toPoint())
        return float(scene_pos.x()) - 0.5, float(scene_pos.y()) - 0.5

    # ------------------------------------------------------------------ #
    # Rendering helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def _rgba_to_pixmap(rgba: np.ndarray) -> QPixmap:
        data = np.asarray(rgba)
        if data.size == 0 or data.ndim != 3 or data.shape[2] != 4:
            return QPixmap()
        h, w, _ = data.shape
        data = np.ascontiguousarray(data, dtype=np.uint8)
        qimage = QImage(
            data.data,
            w,
            h,
            w * 4,
            QImage.Format.Format_RGBA8888,
        )
        return QPixmap.fromImage(qimage.copy())
