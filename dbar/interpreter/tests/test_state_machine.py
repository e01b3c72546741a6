import pytest

from dbar.core.types import BarMode, EventType, Range
from dbar.interpreter.state_machine import InputStateMachine


W, H = 600, 50


def machine(initial=0.0, capture=True, exit_on_click=True, rng=Range(0, 100)):
    return InputStateMachine(rng, W, H, initial=initial, capture=capture, exit_on_click=exit_on_click)


def types(events):
    return [e.type for e in events]


def test_initial_position_is_clamped():
    assert machine(initial=2.0).position == 1.0
    assert machine(initial=-1.0).position == 0.0
    assert machine(initial=0.25).value == 25


@pytest.mark.parametrize("x,expected", [(-50, 0.0), (-1e9, 0.0), (W - 1, 1.0), (10_000, 1.0), (1e9, 1.0)])
def test_motion_clamps_position(x, expected):
    it = machine(initial=0.5)
    it.pointer_motion(x, 25, t_ms=0)
    assert it.position == expected


def test_motion_emits_only_on_value_change():
    it = machine()
    # 1px out of 599 is 0.17 -> still 0
    assert it.pointer_motion(1, 25, t_ms=0) == []
    out = it.pointer_motion(299.5, 25, t_ms=16)
    assert types(out) == [EventType.VALUE_CHANGED]
    assert out[0].value == 50
    assert it.pointer_motion(299.5, 25, t_ms=32) == []


def test_click_inside_emits_clicked_with_value_at_release():
    it = machine(exit_on_click=False)
    it.button_down(100, 25, t_ms=0)
    assert it.mode == BarMode.DRAGGING
    assert it.drag_origin_x == 100
    it.pointer_motion(400, 25, t_ms=20)
    out = it.button_up(400, 25, t_ms=40)

    clicks = [e for e in out if e.type == EventType.CLICKED]
    assert len(clicks) == 1
    assert clicks[0].value == 67  # 400/599 * 100 = 66.8
    assert it.mode == BarMode.IDLE
    assert not it.closed


def test_drag_leaving_bar_cancels_click():
    it = machine()
    it.button_down(300, 25, t_ms=0)
    it.pointer_motion(300, -10, t_ms=20)  # below the bar
    out = it.button_up(300, -10, t_ms=40)
    assert EventType.CLICKED not in types(out)
    assert EventType.EXIT_REQUESTED not in types(out)
    assert it.mode == BarMode.IDLE


def test_drag_out_and_back_still_cancels():
    it = machine()
    it.button_down(300, 25, t_ms=0)
    it.pointer_left(t_ms=10)
    it.pointer_motion(320, 25, t_ms=20)
    out = it.button_up(320, 25, t_ms=40)
    assert EventType.CLICKED not in types(out)


def test_release_outside_cancels():
    it = machine()
    it.button_down(300, 25, t_ms=0)
    assert it.button_up(W + 40, 25, t_ms=30) == []
    assert not it.closed


def test_press_outside_bar_is_ignored():
    it = machine()
    assert it.button_down(-5, 25, t_ms=0) == []
    assert not it.dragging
    assert it.button_up(10, 25, t_ms=10) == []


def test_captured_click_commits_and_exits():
    it = machine()
    it.button_down(150, 25, t_ms=0)
    out = it.button_up(150, 25, t_ms=30)
    assert types(out)[-2:] == [EventType.CLICKED, EventType.EXIT_REQUESTED]
    assert it.closed
    assert not it.captured


def test_no_mouse_capture_click_keeps_running():
    it = machine(capture=False)
    assert it.mode == BarMode.UNCAPTURED
    for t in (0, 100, 200):
        it.button_down(150, 25, t_ms=t)
        out = it.button_up(150, 25, t_ms=t + 30)
        assert EventType.CLICKED in types(out)
        assert EventType.EXIT_REQUESTED not in types(out)
    assert it.mode == BarMode.UNCAPTURED
    assert not it.closed


def test_escape_and_close_exit_from_any_state():
    it = machine(exit_on_click=False)
    it.button_down(150, 25, t_ms=0)
    assert types(it.key_escape(t_ms=10)) == [EventType.EXIT_REQUESTED]
    assert it.closed
    # terminal
    assert it.close_requested(t_ms=20) == []
    assert it.pointer_motion(500, 25, t_ms=30) == []
    assert it.button_up(150, 25, t_ms=40) == []

    it2 = machine(capture=False)
    assert types(it2.close_requested(t_ms=0)) == [EventType.EXIT_REQUESTED]
