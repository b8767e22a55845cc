import threading

import numpy as np
import pytest

from controllers.labeling_session import LabelingSession
from models.interval import Interval
from models.labeling import Labeling


def test_accessors(session_2d):
    labeling = session_2d.current_labeling()
    assert labeling.label_names() == ["fg"]
    assert labeling.interval == Interval.from_shape((100, 100))
    assert session_2d.current_brush_radius() == 5
    assert session_2d.current_label_index() == 0


def test_replace_labeling_clamps_label_index(make_session):
    session = make_session(names=("a", "b", "c"))
    session.set_current_label(2)
    session.replace_labeling(Labeling.create(["only"], (100, 100)))
    assert session.current_label_index() == 0
    assert session.current_labeling().label_names() == ["only"]


def test_replace_labeling_keeps_index_when_still_valid(make_session):
    session = make_session(names=("a", "b", "c"))
    session.set_current_label(1)
    session.replace_labeling(Labeling.create(["x", "y", "z", "w"], (100, 100)))
    assert session.current_label_index() == 1


def test_replace_with_mismatched_extent_is_rejected(session_2d):
    previous = session_2d.current_labeling()
    with pytest.raises(ValueError):
        session_2d.replace_labeling(Labeling.create(["fg"], (50, 100)))
    assert session_2d.current_labeling() is previous


def test_paint_after_replace_targets_new_labeling(session_2d):
    old = session_2d.current_labeling()
    new = Labeling.create(["fg", "bg"], (100, 100))
    session_2d.replace_labeling(new)
    session_2d.set_brush_radius(0)
    session_2d.on_drag_start(4, 4)
    assert new.regions()[0][4, 4]
    assert not old.regions()[0].any()


def test_replace_notifies_subscribers_and_colors(session_2d):
    seen = []
    colors = []
    session_2d.subscribe_labeling(seen.append)
    session_2d.subscribe_colors(colors.append)
    new = Labeling.create(["a", "b"], (100, 100))
    session_2d.replace_labeling(new)
    assert seen == [new]
    assert sorted(colors[-1]) == [0, 1]


def test_time_series_paints_only_current_frame(make_session):
    session = make_session(names=("cell",), shape=(20, 20), time_series=True, num_timepoints=4, brush_radius=1)
    assert session.current_labeling().interval.shape == (20, 20, 4)
    session.set_timepoint(2)
    session.on_drag_start(5, 5)
    region = session.current_labeling().regions()[0]
    assert region[:, :, 2].sum() == 5
    assert region.sum() == 5


def test_time_series_timepoint_is_clamped(make_session):
    session = make_session(shape=(10, 10), time_series=True, num_timepoints=3)
    session.set_timepoint(10)
    assert session.view_state_model.current_timepoint == 2
    session.set_timepoint(-4)
    assert session.view_state_model.current_timepoint == 0


def test_time_series_extent_with_time_axis(make_session):
    session = make_session(shape=(8, 8, 5), time_series=True)
    assert session.view_state_model.timepoint_max == 4
    assert session.brush_controller.pixels_generator.time_series


def test_timepoint_count_appends_time_axis_to_volume():
    session = LabelingSession(["a"], (8, 8, 5), time_series=True, num_timepoints=3)
    assert session.current_labeling().interval.shape == (8, 8, 5, 3)
    assert session.view_state_model.timepoint_max == 2
    assert session.view_state_model.slice_max == 4


def test_timepoint_count_rejects_extent_with_time_axis():
    with pytest.raises(ValueError):
        LabelingSession(["a"], (8, 8, 5, 3), time_series=True, num_timepoints=3)


def test_timepoints_require_time_series():
    with pytest.raises(ValueError):
        LabelingSession(["a"], (10, 10), num_timepoints=3)


def test_unsupported_dimensionality():
    with pytest.raises(ValueError):
        LabelingSession(["a"], (10,))


def test_volume_paints_sphere_on_current_slice(make_session):
    session = make_session(shape=(10, 10, 6), brush_radius=1)
    session.set_slice(3)
    session.on_drag_start(5, 5)
    region = session.current_labeling().regions()[0]
    assert region.sum() == 7
    assert region[5, 5, 2] and region[5, 5, 3] and region[5, 5, 4]
    session.set_slice(99)
    assert session.view_state_model.current_slice == 5


def test_zoom_pan_maps_display_to_grid(session_2d):
    session_2d.set_zoom_pan(2.0, (10.0, 0.0))
    session_2d.set_brush_radius(0)
    session_2d.on_drag_start(30, 20)
    assert session_2d.current_labeling().regions()[0][10, 10]
    with pytest.raises(ValueError):
        session_2d.set_zoom_pan(0.0)


def test_render_plane_colors_painted_pixels(make_session):
    session = make_session(shape=(30, 20), brush_radius=0)
    session.on_drag_start(3, 4)
    overlay = session.render_plane()
    assert overlay.rgba.shape == (20, 30, 4)
    b, g, r, a = session.colors()[0]
    assert tuple(overlay.rgba[4, 3]) == (r, g, b, a)
    assert overlay.rgba[..., 3].astype(bool).sum() == 1
    assert overlay.labels_drawn == (0,)


def test_render_plane_visibility(session_2d):
    session_2d.on_drag_start(10, 10)
    session_2d.set_label_visible(0, False)
    assert session_2d.render_plane().labels_drawn == ()
    session_2d.toggle_labels_visible()
    assert session_2d.render_plane() is None
    session_2d.toggle_labels_visible()
    session_2d.set_label_visible(0, True)
    assert session_2d.render_plane().labels_drawn == (0,)


def test_render_plane_time_series_frame(make_session):
    session = make_session(shape=(10, 10), time_series=True, num_timepoints=2, brush_radius=0)
    session.set_timepoint(1)
    session.on_drag_start(2, 2)
    assert session.render_plane().labels_drawn == (0,)
    session.set_timepoint(0)
    assert session.render_plane().labels_drawn == ()


def test_snapshot_region_is_a_copy(session_2d):
    session_2d.on_drag_start(10, 10)
    snap = session_2d.snapshot_region(0)
    session_2d.on_drag_start(60, 60)
    assert snap.sum() < session_2d.current_labeling().regions()[0].sum()
    with pytest.raises(ValueError):
        session_2d.snapshot_region(3)


def test_paint_waits_for_paint_lock(session_2d):
    lock = session_2d.view_state_model.paint_lock
    lock.acquire()
    try:
        writer = threading.Thread(target=session_2d.on_drag_start, args=(20, 20))
        writer.start()
        writer.join(timeout=0.2)
        assert writer.is_alive()
        assert not session_2d.snapshot_region(0).any()
    finally:
        lock.release()
    writer.join(timeout=5)
    assert not writer.is_alive()
    assert session_2d.snapshot_region(0)[20, 20]


def test_reader_never_sees_partial_dab(session_2d):
    session_2d.set_brush_radius(1)
    centers = [(5 + 6 * k, 50) for k in range(15)]
    footprints = []
    for cx, cy in centers:
        footprints.append([(cx, cy), (cx - 1, cy), (cx + 1, cy), (cx, cy - 1), (cx, cy + 1)])

    checked = []
    torn = []
    done = threading.Event()

    def reader():
        while True:
            snap = session_2d.snapshot_region(0)
            for pixels in footprints:
                count = sum(bool(snap[x, y]) for x, y in pixels)
                if count not in (0, len(pixels)):
                    torn.append(count)
            checked.append(True)
            if done.is_set():
                break

    thread = threading.Thread(target=reader)
    thread.start()
    try:
        for _ in range(20):
            for cx, cy in centers:
                session_2d.on_drag_start(cx, cy)
            for cx, cy in centers:
                session_2d.on_drag_start(cx, cy, erase=True)
            session_2d.brush_controller.set_mode("paint")
    finally:
        done.set()
        thread.join(timeout=5)

    assert checked
    assert torn == []


def test_observer_error_handler_receives_failures():
    errors = []
    session = LabelingSession(["a"], (10, 10), observer_error_handler=lambda cb, exc: errors.append(exc))

    def broken(_labeling):
        raise RuntimeError("observer down")

    session.subscribe_labeling(broken)
    session.replace_labeling(Labeling.create(["a", "b"], (10, 10)))
    assert len(errors) == 1
    assert len(session.current_labeling()) == 2
    assert session.colors().keys() == {0, 1}


def test_regenerate_colors_is_published(make_session):
    session = make_session(names=("a", "b", "c"))
    seen = []
    session.subscribe_colors(seen.append)
    session.regenerate_colors(seed=3)
    assert seen[-1] == session.colors()
    assert len(set(session.colors().values())) == 3
    assert np.all([c[3] == 255 for c in session.colors().values()])
