"""Controller du pinceau : machine d'états drag/scroll et rasterisation des traits."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from config.constants import (
    BRUSH_MODES,
    DEFAULT_BRUSH_RADIUS,
    ERASE_MODE,
    FALLBACK_COLOR_BGRA,
    MIN_BRUSH_RADIUS,
    PAINT_MODE,
)
from models.brush_overlay_model import BrushOverlayModel
from models.holder import Holder, Notifier
from models.interval import Interval
from models.labeling import Labeling
from models.overlay_data import PaintEvent
from models.view_state_model import ViewStateModel
from services.color_provider import ColorProvider
from services.neighborhood_service import PixelsGenerator
from services.stroke_service import Bounds, StrokeService, interpolate_segment, union_bounds

IDLE = "idle"
STROKE = "stroke"


class BrushController:
    """Turns pointer and scroll events into paint/erase writes on the active region."""

    def __init__(
        self,
        *,
        holder: Holder[Labeling],
        pixels_generator: PixelsGenerator,
        view_state_model: ViewStateModel,
        color_provider: ColorProvider,
        brush_overlay: BrushOverlayModel,
        stroke_service: StrokeService,
        logger: logging.Logger,
        brush_radius: int = DEFAULT_BRUSH_RADIUS,
    ) -> None:
        self.pixels_generator = pixels_generator
        self.view_state_model = view_state_model
        self.brush_overlay = brush_overlay
        self.stroke_service = stroke_service
        self.logger = logger

        self._regions: List[np.ndarray] = []
        self._interval: Optional[Interval] = None
        self._current_label = 0
        self._brush_radius = MIN_BRUSH_RADIUS
        self._mode = PAINT_MODE
        self._state = IDLE
        self._anchor: Optional[Tuple[float, float]] = None
        self._colors: Dict[int, Tuple[int, int, int, int]] = color_provider.colors()
        self._repaint: Notifier[PaintEvent] = Notifier()

        self.set_brush_radius(brush_radius)
        self._update_labeling(holder.get())
        holder.subscribe(self._on_labeling_replaced)
        color_provider.subscribe(self._on_colors_changed)

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #
    @property
    def brush_radius(self) -> int:
        return self._brush_radius

    @property
    def current_label(self) -> int:
        return self._current_label

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def state(self) -> str:
        return self._state

    @property
    def anchor(self) -> Optional[Tuple[float, float]]:
        return self._anchor

    def repaint_notifier(self) -> Notifier[PaintEvent]:
        return self._repaint

    # ------------------------------------------------------------------ #
    # Setters (precondition checked)
    # ------------------------------------------------------------------ #
    def set_brush_radius(self, radius: int) -> None:
        radius = int(radius)
        if radius < MIN_BRUSH_RADIUS:
            raise ValueError(f"Brush radius must be >= {MIN_BRUSH_RADIUS}, got {radius}.")
        self._brush_radius = radius
        self.brush_overlay.set_radius(radius)

    def set_current_label(self, label_index: int) -> None:
        label_index = int(label_index)
        if not 0 <= label_index < len(self._regions):
            raise ValueError(f"Unknown label index {label_index} (labeling has {len(self._regions)} labels).")
        self._current_label = label_index
        self._sync_overlay_label()

    def set_mode(self, mode: str) -> None:
        if mode not in BRUSH_MODES:
            raise ValueError(f"Unknown brush mode '{mode}', expected one of {BRUSH_MODES}.")
        self._mode = mode

    # ------------------------------------------------------------------ #
    # Hover
    # ------------------------------------------------------------------ #
    def show_brush(self, x: float, y: float) -> None:
        self.brush_overlay.set_position(x, y)
        self.brush_overlay.set_visible(True)

    def hide_brush(self) -> None:
        self.brush_overlay.set_visible(False)

    def on_move(self, x: float, y: float) -> None:
        self.brush_overlay.set_position(x, y)

    # ------------------------------------------------------------------ #
    # Stroke
    # ------------------------------------------------------------------ #
    def on_drag_start(self, x: float, y: float, *, erase: Optional[bool] = None) -> None:
        if erase is not None:
            self.set_mode(ERASE_MODE if erase else PAINT_MODE)
        self._state = STROKE
        self._anchor = (float(x), float(y))
        self.brush_overlay.set_position(x, y)
        bounds = self._paint(self.view_state_model.display_to_grid(x, y))
        self._request_repaint(bounds)

    def on_drag(self, x: float, y: float) -> None:
        if self._state != STROKE or self._anchor is None:
            self.on_drag_start(x, y)
            return
        self.brush_overlay.set_position(x, y)

        start = self.view_state_model.display_to_grid(*self._anchor)
        end = self.view_state_model.display_to_grid(x, y)
        bounds: Optional[Bounds] = None
        for point in interpolate_segment(start, end):
            bounds = union_bounds(bounds, self._paint(point))

        self._anchor = (float(x), float(y))
        self._request_repaint(bounds)

    def on_drag_end(self, x: float, y: float) -> None:
        self._state = IDLE
        self._anchor = None

    # ------------------------------------------------------------------ #
    # Scroll
    # ------------------------------------------------------------------ #
    def on_scroll_radius(self, amount: float, is_horizontal: bool = False) -> None:
        """Negative amount (wheel away) grows the brush, positive shrinks it."""
        if is_horizontal:
            return
        if amount < 0:
            self._brush_radius += 1
        elif amount > 0:
            self._brush_radius = max(MIN_BRUSH_RADIUS, self._brush_radius - 1)
        self.brush_overlay.set_radius(self._brush_radius)

    def on_scroll_label(self, amount: float, is_horizontal: bool = False) -> None:
        """Negative amount (wheel away) selects the next label, positive the previous one."""
        if is_horizontal or not self._regions:
            return
        if amount < 0:
            self._current_label = min(self._current_label + 1, len(self._regions) - 1)
        elif amount > 0:
            self._current_label = max(self._current_label - 1, 0)
        self._sync_overlay_label()

    def on_scroll(self, amount: float, is_horizontal: bool = False, *, cycle_label: bool = False) -> None:
        if cycle_label:
            self.on_scroll_label(amount, is_horizontal)
        else:
            self.on_scroll_radius(amount, is_horizontal)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _paint(self, center: np.ndarray) -> Optional[Bounds]:
        """Write one dab at a grid-space center; the paint lock is held only for the write."""
        if not self._regions or self._interval is None:
            self.logger.debug("Paint ignored: labeling has no labels.")
            return None
        coords = self.stroke_service.footprint(
            self.pixels_generator,
            self._interval,
            center,
            self.view_state_model.current_timepoint,
            self._brush_radius,
        )
        region = self._regions[self._current_label]
        with self.view_state_model.paint_lock:
            return self.stroke_service.write_footprint(region, self._interval, coords, self._mode == PAINT_MODE)

    def _request_repaint(self, bounds: Optional[Bounds]) -> None:
        if bounds is None:
            return
        self._repaint.notify(
            PaintEvent(
                label_index=self._current_label,
                value=self._mode == PAINT_MODE,
                bounds_min=bounds[0],
                bounds_max=bounds[1],
            )
        )

    def _update_labeling(self, labeling: Labeling) -> None:
        self._regions = list(labeling.regions().values())
        self._interval = labeling.interval
        self._current_label = max(0, min(self._current_label, len(self._regions) - 1))
        self._sync_overlay_label()

    def _on_labeling_replaced(self, labeling: Labeling) -> None:
        self._update_labeling(labeling)
        self.logger.info(
            "Brush labeling replaced | labels=%d | active_label=%d",
            len(self._regions),
            self._current_label,
        )

    def _on_colors_changed(self, colors: Dict[int, Tuple[int, int, int, int]]) -> None:
        self._colors = dict(colors)
        self._sync_overlay_label()

    def _sync_overlay_label(self) -> None:
        color = self._colors.get(self._current_label, FALLBACK_COLOR_BGRA)
        self.brush_overlay.set_label(self._current_label, color)
