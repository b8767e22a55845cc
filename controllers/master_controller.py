import logging
from typing import Optional, Sequence

from PyQt6.QtCore import QTimer
from PyQt6.QtGui import QKeySequence, QShortcut
from PyQt6.QtWidgets import QMainWindow

from controllers.labeling_session import LabelingSession
from models.labeling import Labeling
from models.overlay_data import PaintEvent
from views.label_canvas_view import LabelCanvasView

REFRESH_INTERVAL_MS = 33


class MasterController:
    """Coordinates the labeling session and the canvas without embedding business logic."""

    def __init__(
        self,
        session: LabelingSession,
        main_window: Optional[QMainWindow] = None,
    ) -> None:
        self.logger = logging.getLogger(__name__)
        self.session = session
        self.main_window = main_window or QMainWindow()
        self.main_window.setWindowTitle("Label brush")
        self.canvas = LabelCanvasView(session.brush_overlay, parent=self.main_window)
        self.main_window.setCentralWidget(self.canvas)
        self._shortcuts: list[QShortcut] = []
        self._dirty = True

        # Render path: refreshed on its own timer, reads regions under the paint lock.
        self._refresh_timer = QTimer(self.main_window)
        self._refresh_timer.setInterval(REFRESH_INTERVAL_MS)
        self._refresh_timer.timeout.connect(self._refresh_if_dirty)

        self._connect_signals()
        self._install_shortcuts()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def run(self) -> None:
        self.refresh_overlay()
        self._refresh_timer.start()
        self.main_window.resize(900, 700)
        self.main_window.show()

    def refresh_overlay(self) -> None:
        """Recompose the displayed plane and push it to the canvas."""
        self._dirty = False
        overlay = self.session.render_plane()
        self.canvas.set_overlay(overlay)

    def request_refresh(self, *_args) -> None:
        self._dirty = True

    # ------------------------------------------------------------------ #
    # Wiring
    # ------------------------------------------------------------------ #
    def _connect_signals(self) -> None:
        canvas = self.canvas
        session = self.session
        canvas.moved.connect(session.on_move)
        canvas.drag_started.connect(lambda x, y, erase: session.on_drag_start(x, y, erase=erase))
        canvas.dragged.connect(session.on_drag)
        canvas.drag_ended.connect(session.on_drag_end)
        canvas.scrolled.connect(
            lambda amount, horizontal, cycle: session.on_scroll(amount, horizontal, cycle_label=cycle)
        )
        session.subscribe_repaint(self._on_paint)
        session.subscribe_labeling(self._on_labeling_replaced)
        session.subscribe_colors(self.request_refresh)
        session.brush_controller.show_brush(0.0, 0.0)

    def _install_shortcuts(self) -> None:
        bindings = (
            ("L", self._toggle_labels),
            ("Ctrl+Shift+C", self._regenerate_colors),
            ("Right", lambda: self._step_timepoint(+1)),
            ("Left", lambda: self._step_timepoint(-1)),
            ("Up", lambda: self._step_slice(+1)),
            ("Down", lambda: self._step_slice(-1)),
        )
        for keys, slot in bindings:
            shortcut = QShortcut(QKeySequence(keys), self.main_window)
            shortcut.activated.connect(slot)
            self._shortcuts.append(shortcut)

    # ------------------------------------------------------------------ #
    # Handlers
    # ------------------------------------------------------------------ #
    def _on_paint(self, event: PaintEvent) -> None:
        self.logger.debug(
            "Paint batch | label=%d | value=%s | bounds=%s..%s",
            event.label_index,
            event.value,
            event.bounds_min,
            event.bounds_max,
        )
        self.request_refresh()

    def _on_labeling_replaced(self, labeling: Labeling) -> None:
        self.logger.info("Label set changed: %s", ", ".join(labeling.label_names()))
        self.request_refresh()

    def _refresh_if_dirty(self) -> None:
        if self._dirty:
            self.refresh_overlay()

    def _toggle_labels(self) -> None:
        self.session.toggle_labels_visible()
        self.request_refresh()

    def _regenerate_colors(self) -> None:
        self.session.regenerate_colors()

    def _step_timepoint(self, delta: int) -> None:
        state = self.session.view_state_model
        self.session.set_timepoint(state.current_timepoint + delta)
        self.request_refresh()

    def _step_slice(self, delta: int) -> None:
        state = self.session.view_state_model
        self.session.set_slice(state.current_slice + delta)
        self.request_refresh()


def build_session(
    labels: Sequence[str],
    shape: Sequence[int],
    *,
    time_series: bool = False,
    num_timepoints: Optional[int] = None,
) -> LabelingSession:
    return LabelingSession(labels, tuple(shape), time_series=time_series, num_timepoints=num_timepoints)
