import threading
from typing import Dict, Optional, Tuple

import numpy as np

from config.constants import DEFAULT_NORMAL_AXIS


class ViewStateModel:
    """
    Stores viewer-related state: display transform (zoom/pan), current slice
    and timepoint, label layer visibility.
    Pure model: no UI, no Qt, no services. Also owns the paint lock shared by
    the brush (writer) and the overlay renderer (reader).
    """

    def __init__(self, normal_axis: int = DEFAULT_NORMAL_AXIS) -> None:

        # --- Display transform ---
        self.scale: float = 1.0
        self.pan: Tuple[float, float] = (0.0, 0.0)
        self.normal_axis: int = int(normal_axis)

        # --- Navigation ---
        self.current_slice: int = 0
        self.slice_min: int = 0
        self.slice_max: int = 0
        self.current_timepoint: int = 0
        self.timepoint_max: int = 0

        # --- Overlay & Display ---
        self.show_labels: bool = True
        self.label_visibility: Dict[int, bool] = {}

        # --- Synchronisation ---
        self.paint_lock = threading.RLock()

    # ------------------------------------------------------------------ #
    # Display transform
    # ------------------------------------------------------------------ #
    def set_zoom_pan(self, scale: float, pan: Tuple[float, float] = (0.0, 0.0)) -> None:
        scale = float(scale)
        if scale <= 0.0:
            raise ValueError(f"Display scale must be positive, got {scale}.")
        self.scale = scale
        self.pan = (float(pan[0]), float(pan[1]))

    def display_to_grid_matrix(self) -> np.ndarray:
        """Affine 4x4 matrix mapping display (x, y, 0, 1) to grid (x, y, z, 1)."""
        matrix = np.zeros((4, 4), dtype=np.float64)
        matrix[3, 3] = 1.0
        in_plane = [ax for ax in range(3) if ax != self.normal_axis]
        inv = 1.0 / self.scale
        matrix[in_plane[0], 0] = inv
        matrix[in_plane[0], 3] = -self.pan[0] * inv
        matrix[in_plane[1], 1] = inv
        matrix[in_plane[1], 3] = -self.pan[1] * inv
        matrix[self.normal_axis, 3] = float(self.current_slice)
        return matrix

    def display_to_grid(self, x: float, y: float) -> np.ndarray:
        """Map a display position to a 3-component grid point."""
        point = np.array([float(x), float(y), 0.0, 1.0])
        return (self.display_to_grid_matrix() @ point)[:3]

    # ------------------------------------------------------------------ #
    # Slice / timepoint control
    # ------------------------------------------------------------------ #
    def set_slice_bounds(self, min_idx: int, max_idx: int) -> None:
        """Define valid slice range."""
        self.slice_min = int(min_idx)
        self.slice_max = int(max_idx)
        self.current_slice = self.clamp_slice(self.current_slice)

    def clamp_slice(self, index: int) -> int:
        """Clamp slice index inside defined bounds."""
        index = int(index)
        return max(self.slice_min, min(self.slice_max, index))

    def set_slice(self, index: int) -> None:
        """Update current slice using clamping rules."""
        self.current_slice = self.clamp_slice(index)

    def set_timepoint_count(self, count: int) -> None:
        self.timepoint_max = max(0, int(count) - 1)
        self.current_timepoint = min(self.current_timepoint, self.timepoint_max)

    def set_timepoint(self, timepoint: int) -> None:
        self.current_timepoint = max(0, min(self.timepoint_max, int(timepoint)))

    # ------------------------------------------------------------------ #
    # Visibility toggles
    # ------------------------------------------------------------------ #
    def toggle_labels(self, visible: Optional[bool] = None) -> None:
        self.show_labels = (not self.show_labels) if visible is None else bool(visible)

    def set_label_visibility(self, label_index: int, visible: bool) -> None:
        self.label_visibility[int(label_index)] = bool(visible)

    def reset_label_visibility(self) -> None:
        self.label_visibility = {}

    def visible_labels(self, count: int) -> Optional[set[int]]:
        """Return the set of labels currently marked visible (None = all)."""
        if not self.label_visibility or all(self.label_visibility.values()):
            return None
        return {idx for idx in range(count) if self.label_visibility.get(idx, True)}
