import numpy as np
import pytest

from config.constants import ERASE_MODE, PAINT_MODE
from services.neighborhood_service import footprint_offsets


def painted(session, index=0):
    return session.current_labeling().regions()[index]


def stroke(session, points, **kwargs):
    session.on_drag_start(*points[0], **kwargs)
    for point in points[1:]:
        session.on_drag(*point)
    session.on_drag_end(*points[-1])


def test_single_pixel_dab(session_2d):
    session_2d.set_brush_radius(0)
    stroke(session_2d, [(10, 10), (10, 10)])
    region = painted(session_2d)
    assert region[10, 10]
    assert region.sum() == 1


def test_axis_aligned_stroke_has_no_gaps(session_2d):
    session_2d.set_brush_radius(0)
    stroke(session_2d, [(0, 0), (5, 0)])
    region = painted(session_2d)
    assert region[0:6, 0].all()
    assert region.sum() == 6


def test_scroll_away_grows_radius_used_for_paint(session_2d):
    assert session_2d.current_brush_radius() == 5
    for _ in range(3):
        session_2d.on_scroll(-1.0, False)
    assert session_2d.current_brush_radius() == 8

    stroke(session_2d, [(50, 50)])
    region = painted(session_2d)
    assert region.sum() == len(footprint_offsets(8, 2))
    assert region[58, 50]
    assert not region[59, 50]


def test_scroll_toward_clamps_at_zero(session_2d):
    session_2d.set_brush_radius(1)
    for _ in range(3):
        session_2d.on_scroll(1.0, False)
    assert session_2d.current_brush_radius() == 0


def test_horizontal_scroll_ignored(session_2d):
    session_2d.on_scroll(-1.0, True)
    session_2d.on_scroll(-1.0, True, cycle_label=True)
    assert session_2d.current_brush_radius() == 5
    assert session_2d.current_label_index() == 0


def test_radius_overlay_follows_scroll(session_2d):
    session_2d.on_scroll(-1.0, False)
    assert session_2d.brush_overlay.radius == 6


def test_label_cycling_is_clamped(make_session):
    session = make_session(names=("a", "b", "c"))
    for _ in range(5):
        session.on_scroll(-1.0, False, cycle_label=True)
    assert session.current_label_index() == 2
    assert session.brush_overlay.label_index == 2
    assert session.brush_overlay.color == session.colors()[2]
    for _ in range(5):
        session.on_scroll(1.0, False, cycle_label=True)
    assert session.current_label_index() == 0


def test_paint_targets_active_label(make_session):
    session = make_session(names=("a", "b"))
    session.set_current_label(1)
    session.set_brush_radius(0)
    stroke(session, [(3, 3)])
    assert not painted(session, 0).any()
    assert painted(session, 1)[3, 3]


def test_fast_motion_leaves_no_gaps(session_2d):
    session_2d.set_brush_radius(2)
    stroke(session_2d, [(5, 5), (65, 39)])
    region = painted(session_2d)
    for t in np.linspace(0.0, 1.0, 400):
        x, y = np.floor(np.array([5.0, 5.0]) + t * np.array([60.0, 34.0]) + 0.5).astype(int)
        assert region[x, y]


def test_axis_aligned_sampling_density_does_not_change_result(make_session):
    """Along a grid axis the sample count does not matter. Diagonal strokes may round differently."""
    coarse = make_session()
    fine = make_session()
    coarse.set_brush_radius(2)
    fine.set_brush_radius(2)

    stroke(coarse, [(10, 20), (40, 20)])
    stroke(fine, [(10, 20)] + [(x, 20) for x in range(13, 41, 3)] + [(40, 20)])

    assert np.array_equal(painted(coarse), painted(fine))


def test_diagonal_stroke_has_no_gaps(make_session):
    session = make_session()
    session.set_brush_radius(0)
    stroke(session, [(0, 0), (20, 10)])
    mask = painted(session)
    assert mask[0, 0] and mask[20, 10]
    assert all(mask[x, :].any() for x in range(21))


def test_erase_restores_footprint(session_2d):
    session_2d.set_brush_radius(4)
    stroke(session_2d, [(30, 30)])
    assert painted(session_2d).any()
    stroke(session_2d, [(30, 30)], erase=True)
    assert not painted(session_2d).any()


def test_erase_mode_only_clears(session_2d):
    session_2d.set_brush_radius(3)
    stroke(session_2d, [(20, 20), (40, 20)])
    before = painted(session_2d).sum()
    session_2d.set_brush_radius(0)
    stroke(session_2d, [(30, 20)], erase=True)
    assert session_2d.brush_controller.mode == ERASE_MODE
    assert painted(session_2d).sum() == before - 1
    assert not painted(session_2d)[30, 20]


def test_set_mode_validates(session_2d):
    session_2d.brush_controller.set_mode(PAINT_MODE)
    with pytest.raises(ValueError):
        session_2d.brush_controller.set_mode("smudge")


def test_boundary_dab_is_clipped(session_2d):
    session_2d.set_brush_radius(3)
    stroke(session_2d, [(0, 0)])
    expected = sum(1 for dx, dy in footprint_offsets(3, 2) if dx >= 0 and dy >= 0)
    assert painted(session_2d).sum() == expected


def test_drag_outside_grid_is_harmless(session_2d):
    stroke(session_2d, [(-500, -500), (-400, -450)])
    assert not painted(session_2d).any()


def test_negative_radius_rejected(session_2d):
    with pytest.raises(ValueError):
        session_2d.set_brush_radius(-1)
    assert session_2d.current_brush_radius() == 5


def test_unknown_label_rejected(session_2d):
    with pytest.raises(ValueError):
        session_2d.set_current_label(1)
    assert session_2d.current_label_index() == 0


def test_hover_moves_overlay_without_painting(session_2d):
    session_2d.brush_controller.show_brush(1, 2)
    session_2d.on_move(12.0, 15.0)
    assert session_2d.brush_overlay.position == (12.0, 15.0)
    assert session_2d.brush_overlay.visible
    assert not painted(session_2d).any()
    session_2d.brush_controller.hide_brush()
    assert not session_2d.brush_overlay.visible


def test_state_machine_transitions(session_2d):
    controller = session_2d.brush_controller
    assert controller.state == "idle"
    session_2d.on_drag_start(1, 1)
    assert controller.state == "stroke"
    session_2d.on_drag(4, 1)
    assert controller.anchor == (4.0, 1.0)
    session_2d.on_drag_end(4, 1)
    assert controller.state == "idle"
    assert controller.anchor is None


def test_drag_without_start_begins_stroke(session_2d):
    session_2d.set_brush_radius(0)
    session_2d.on_drag(7, 7)
    assert painted(session_2d)[7, 7]
    assert session_2d.brush_controller.state == "stroke"


def test_repaint_events_per_batch(session_2d):
    events = []
    session_2d.subscribe_repaint(events.append)
    session_2d.set_brush_radius(2)
    session_2d.on_drag_start(10, 10)
    session_2d.on_drag(14, 10)
    session_2d.on_drag_end(14, 10)

    assert len(events) == 2
    assert events[0].bounds_min == (8, 8)
    assert events[0].bounds_max == (12, 12)
    assert events[1].bounds_min == (9, 8)
    assert events[1].bounds_max == (16, 12)
    assert events[1].value is True
    assert events[1].label_index == 0


def test_no_repaint_when_everything_clipped(session_2d):
    events = []
    session_2d.subscribe_repaint(events.append)
    session_2d.on_drag_start(-100, -100)
    assert events == []
