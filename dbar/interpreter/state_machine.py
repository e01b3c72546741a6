from __future__ import annotations

from dbar.core.types import (
    BarEvent, BarMode, Number, Range,
    clamp01, clicked, exit_requested, value_changed,
)
from dbar.core.value_model import to_value


class InputStateMachine:
    """
    Deterministic dbar interpreter.
    Converts raw pointer / key / window input -> list[BarEvent].

    Pixel coordinates are window-relative with x growing to the right.
    Column 0 maps to position 0.0 and column width-1 to 1.0.
    """

    def __init__(
        self,
        rng: Range,
        width: int,
        height: int,
        *,
        initial: float = 0.0,
        capture: bool = True,
        exit_on_click: bool = True,
    ) -> None:
        self.range = rng
        self.width = int(width)
        self.height = int(height)
        self.capture = capture
        self.exit_on_click = exit_on_click

        self._rest_mode = BarMode.IDLE if capture else BarMode.UNCAPTURED
        self.mode: BarMode = self._rest_mode

        self.position: float = clamp01(initial)
        self.value: Number = to_value(self.position, rng)

        self.pointer_inside: bool = True
        # drag bookkeeping
        self._drag_origin_x: float | None = None
        self._drag_left_bar: bool = False

    # ---- properties ----

    @property
    def dragging(self) -> bool:
        return self.mode == BarMode.DRAGGING

    @property
    def closed(self) -> bool:
        return self.mode == BarMode.CLOSED

    @property
    def captured(self) -> bool:
        return self.capture and not self.closed

    @property
    def drag_origin_x(self) -> float | None:
        return self._drag_origin_x

    # ---- helpers ----

    def hit(self, x: float, y: float) -> bool:
        return 0.0 <= x < self.width and 0.0 <= y < self.height

    def x_to_position(self, x: float) -> float:
        if self.width <= 1:
            return 0.0
        return clamp01(float(x) / float(self.width - 1))

    def _set_position(self, x: float, t_ms: int) -> list[BarEvent]:
        self.position = self.x_to_position(x)
        new_value = to_value(self.position, self.range)
        if new_value == self.value:
            return []
        self.value = new_value
        return [value_changed(t_ms, new_value)]

    def _track_hit(self, x: float, y: float) -> None:
        self.pointer_inside = self.hit(x, y)
        if self.dragging and not self.pointer_inside:
            self._drag_left_bar = True

    # ---- input ----

    def pointer_motion(self, x: float, y: float, t_ms: int) -> list[BarEvent]:
        if self.closed:
            return []
        self._track_hit(x, y)
        return self._set_position(x, t_ms)

    def pointer_left(self, t_ms: int) -> list[BarEvent]:
        if self.closed:
            return []
        self.pointer_inside = False
        if self.dragging:
            self._drag_left_bar = True
        return []

    def button_down(self, x: float, y: float, t_ms: int) -> list[BarEvent]:
        if self.closed or self.dragging:
            return []
        if not self.hit(x, y):
            return []
        self.pointer_inside = True
        self.mode = BarMode.DRAGGING
        self._drag_origin_x = float(x)
        self._drag_left_bar = False
        return self._set_position(x, t_ms)

    def button_up(self, x: float, y: float, t_ms: int) -> list[BarEvent]:
        if not self.dragging:
            return []
        self._track_hit(x, y)
        cancelled = self._drag_left_bar
        self.mode = self._rest_mode
        self._drag_origin_x = None
        self._drag_left_bar = False
        if cancelled:
            return []

        out = self._set_position(x, t_ms)
        out.append(clicked(t_ms, self.value))
        if self.capture and self.exit_on_click:
            # releasing capture commits the selection
            out.extend(self._close(t_ms))
        return out

    def key_escape(self, t_ms: int) -> list[BarEvent]:
        return self._close(t_ms)

    def close_requested(self, t_ms: int) -> list[BarEvent]:
        return self._close(t_ms)

    def _close(self, t_ms: int) -> list[BarEvent]:
        if self.closed:
            return []
        self.mode = BarMode.CLOSED
        self._drag_origin_x = None
        return [exit_requested(t_ms)]
