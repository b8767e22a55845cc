"""Session de labellisation : point d'entrée unique pour la couche GUI hôte."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple

import numpy as np

from config.constants import DEFAULT_BRUSH_RADIUS, DEFAULT_NORMAL_AXIS
from controllers.brush_controller import BrushController
from models.brush_overlay_model import BrushOverlayModel
from models.holder import Holder
from models.interval import Interval
from models.labeling import Labeling
from models.overlay_data import OverlayData, PaintEvent
from models.view_state_model import ViewStateModel
from services.color_provider import ColorProvider
from services.neighborhood_service import make_pixels_generator
from services.overlay_service import OverlayService
from services.stroke_service import StrokeService


class LabelingSession:
    """Coordinates the labeling holder, brush, colours and overlay without any UI code."""

    def __init__(
        self,
        label_names: Sequence[str],
        extent: "Interval | Sequence[int]",
        *,
        time_series: bool = False,
        num_timepoints: Optional[int] = None,
        brush_radius: int = DEFAULT_BRUSH_RADIUS,
        palette: Optional[Mapping[int, Tuple[int, int, int, int]]] = None,
        observer_error_handler: Optional[Callable[[Callable, Exception], None]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.time_series = bool(time_series)
        interval = self._resolve_extent(Interval.coerce(extent), self.time_series, num_timepoints)

        self.holder: Holder[Labeling] = Holder(
            Labeling.create(label_names, interval), error_handler=observer_error_handler
        )
        spatial_dims = interval.num_dimensions - (1 if self.time_series else 0)
        if spatial_dims not in (2, 3):
            raise ValueError(f"Only 2D or 3D spatial grids are supported, got {spatial_dims} spatial axes.")
        if self.time_series and interval.min[-1] != 0:
            raise ValueError(f"Time axis must start at timepoint 0, got {interval.min[-1]}.")

        self.view_state_model = ViewStateModel(normal_axis=DEFAULT_NORMAL_AXIS)
        if spatial_dims == 3:
            axis = self.view_state_model.normal_axis
            self.view_state_model.set_slice_bounds(interval.min[axis], interval.max[axis])
            self.view_state_model.set_slice(interval.min[axis])
        if self.time_series:
            self.view_state_model.set_timepoint_count(interval.shape[-1])

        self.overlay_service = OverlayService()
        self.stroke_service = StrokeService(logger=self.logger)
        self.brush_overlay = BrushOverlayModel(radius=brush_radius)
        # Colour provider must subscribe to the holder before the brush controller.
        self.color_provider = ColorProvider(self.holder, palette=palette, logger=self.logger)
        self.brush_controller = BrushController(
            holder=self.holder,
            pixels_generator=make_pixels_generator(interval.num_dimensions, self.time_series),
            view_state_model=self.view_state_model,
            color_provider=self.color_provider,
            brush_overlay=self.brush_overlay,
            stroke_service=self.stroke_service,
            logger=self.logger,
            brush_radius=brush_radius,
        )
        self.logger.info(
            "Labeling session ready | labels=%d | extent=%s | time_series=%s",
            len(self.holder.get()),
            interval.shape,
            self.time_series,
        )

    @staticmethod
    def _resolve_extent(interval: Interval, time_series: bool, num_timepoints: Optional[int]) -> Interval:
        """With `num_timepoints` the extent is spatial only and gets a trailing time axis."""
        if num_timepoints is None:
            return interval
        if not time_series:
            raise ValueError("num_timepoints is only meaningful for time series.")
        count = int(num_timepoints)
        if count <= 0:
            raise ValueError(f"num_timepoints must be positive, got {count}.")
        if interval.num_dimensions not in (2, 3):
            raise ValueError(
                f"With num_timepoints the extent must be spatial (2D or 3D), got {interval.num_dimensions} axes."
            )
        return interval.with_axis(0, count - 1)

    # ------------------------------------------------------------------ #
    # Event intake
    # ------------------------------------------------------------------ #
    def on_drag_start(self, x: float, y: float, *, erase: Optional[bool] = None) -> None:
        self.brush_controller.on_drag_start(x, y, erase=erase)

    def on_drag(self, x: float, y: float) -> None:
        self.brush_controller.on_drag(x, y)

    def on_drag_end(self, x: float, y: float) -> None:
        self.brush_controller.on_drag_end(x, y)

    def on_move(self, x: float, y: float) -> None:
        self.brush_controller.on_move(x, y)

    def on_scroll(self, amount: float, is_horizontal: bool = False, *, cycle_label: bool = False) -> None:
        self.brush_controller.on_scroll(amount, is_horizontal, cycle_label=cycle_label)

    # ------------------------------------------------------------------ #
    # Read accessors
    # ------------------------------------------------------------------ #
    def current_labeling(self) -> Labeling:
        return self.holder.get()

    def current_brush_radius(self) -> int:
        return self.brush_controller.brush_radius

    def current_label_index(self) -> int:
        return self.brush_controller.current_label

    def colors(self) -> Dict[int, Tuple[int, int, int, int]]:
        return self.color_provider.colors()

    # ------------------------------------------------------------------ #
    # Mutators
    # ------------------------------------------------------------------ #
    def replace_labeling(self, labeling: Labeling) -> None:
        """Swap in a new label set; its extent must equal the current one."""
        current = self.holder.get()
        if labeling.interval != current.interval:
            raise ValueError(
                f"Labeling extent {labeling.interval} differs from session extent {current.interval}."
            )
        self.view_state_model.reset_label_visibility()
        self.holder.set(labeling)
        self.logger.info("Labeling replaced | labels=%s", labeling.label_names())

    def set_brush_radius(self, radius: int) -> None:
        self.brush_controller.set_brush_radius(radius)

    def set_current_label(self, label_index: int) -> None:
        self.brush_controller.set_current_label(label_index)

    def set_timepoint(self, timepoint: int) -> None:
        self.view_state_model.set_timepoint(timepoint)

    def set_slice(self, index: int) -> None:
        self.view_state_model.set_slice(index)

    def set_zoom_pan(self, scale: float, pan: Tuple[float, float] = (0.0, 0.0)) -> None:
        self.view_state_model.set_zoom_pan(scale, pan)

    def toggle_labels_visible(self, visible: Optional[bool] = None) -> None:
        self.view_state_model.toggle_labels(visible)

    def set_label_visible(self, label_index: int, visible: bool) -> None:
        self.view_state_model.set_label_visibility(label_index, visible)

    def regenerate_colors(self, seed: Optional[int] = None) -> None:
        self.color_provider.regenerate(seed)

    # ------------------------------------------------------------------ #
    # Subscriptions
    # ------------------------------------------------------------------ #
    def subscribe_labeling(self, callback: Callable[[Labeling], None]) -> None:
        self.holder.subscribe(callback)

    def subscribe_repaint(self, callback: Callable[[PaintEvent], None]) -> None:
        self.brush_controller.repaint_notifier().add(callback)

    def subscribe_colors(self, callback: Callable[[Dict[int, Tuple[int, int, int, int]]], None]) -> None:
        self.color_provider.subscribe(callback)

    # ------------------------------------------------------------------ #
    # Render side
    # ------------------------------------------------------------------ #
    def snapshot_region(self, label_index: int) -> np.ndarray:
        """Copy of one region taken under the paint lock (never a torn dab)."""
        regions = self.holder.get().regions()
        if int(label_index) not in regions:
            raise ValueError(f"Unknown label index {label_index}.")
        with self.view_state_model.paint_lock:
            return regions[int(label_index)].copy()

    def render_plane(self) -> Optional[OverlayData]:
        """Compose the currently displayed plane, or None when the label layer is hidden."""
        if not self.view_state_model.show_labels:
            return None
        labeling = self.holder.get()
        visible = self.view_state_model.visible_labels(len(labeling))
        with self.view_state_model.paint_lock:
            return self.overlay_service.compose_plane(
                labeling,
                self.color_provider.colors(),
                fixed_axes=self._fixed_axes(labeling.interval),
                visible_labels=visible,
            )

    def _fixed_axes(self, interval: Interval) -> Dict[int, int]:
        fixed: Dict[int, int] = {}
        spatial_dims = interval.num_dimensions - (1 if self.time_series else 0)
        if spatial_dims == 3:
            fixed[self.view_state_model.normal_axis] = self.view_state_model.current_slice
        if self.time_series:
            fixed[interval.num_dimensions - 1] = self.view_state_model.current_timepoint
        return fixed
