"""
Presentation surface: a pyglet window that is the bar.

Draws the filled bar, the optional title and value readout, and forwards
raw input to the BarSession. With mouse capture the OS pointer is hidden and
relative motion drives a virtual pointer clamped to the bar.

    window = open_window(BarSession(config))
    code = run_window(window)
"""

from __future__ import annotations

import logging

import pyglet
from pyglet.window import key, mouse

from dbar.core.config import TICK_INTERVAL_S
from dbar.runtime.run_loop import BarSession

logger = logging.getLogger(__name__)

TEXT_COLOR = (255, 255, 255, 220)
FONT_SIZE = 11
TEXT_MARGIN_PX = 8


class BarWindow(pyglet.window.Window):
    def __init__(self, session: BarSession):
        style = session.config.style
        super().__init__(
            width=style.width,
            height=style.height,
            caption=style.caption,
            resizable=False,
        )
        self.session = session
        self._closing = False

        # center on the default screen
        screen = self.screen
        if screen is not None:
            self.set_location(
                screen.x + max(0, (screen.width - style.width) // 2),
                screen.y + max(0, (screen.height - style.height) // 2),
            )

        self._batch = pyglet.graphics.Batch()
        self._bg = pyglet.shapes.Rectangle(
            0, 0, style.width, style.height, color=style.bg_col, batch=self._batch
        )
        self._fill = pyglet.shapes.Rectangle(
            0, 0, 1, style.height, color=style.fg_col, batch=self._batch
        )
        self._title: pyglet.text.Label | None = None
        if style.title:
            self._title = pyglet.text.Label(
                style.title,
                font_size=FONT_SIZE,
                x=TEXT_MARGIN_PX,
                y=style.height // 2,
                anchor_x="left",
                anchor_y="center",
                color=TEXT_COLOR,
                batch=self._batch,
            )
        self._readout: pyglet.text.Label | None = None
        if style.value_readout:
            self._readout = pyglet.text.Label(
                "",
                font_size=FONT_SIZE,
                x=style.width - TEXT_MARGIN_PX,
                y=style.height // 2,
                anchor_x="right",
                anchor_y="center",
                color=TEXT_COLOR,
                batch=self._batch,
            )

        # virtual pointer used while the mouse is captured
        self._vx = session.position * (style.width - 1)
        self._vy = style.height / 2.0
        if session.captured:
            self.set_exclusive_mouse(True)

    # ---- pointer mapping ----

    def _pointer(self, x: float, y: float, dx: float) -> tuple[float, float]:
        if not self.session.captured:
            return float(x), float(y)
        self._vx = min(max(self._vx + dx, 0.0), float(self.width - 1))
        return self._vx, self._vy

    # ---- pyglet events ----

    def on_draw(self):
        self._fill.width = self.session.position * (self.width - 1) + 1
        if self._readout is not None:
            self._readout.text = self.session.value_text
        self.clear()
        self._batch.draw()

    def on_mouse_motion(self, x, y, dx, dy):
        px, py = self._pointer(x, y, dx)
        self.session.pointer_motion(px, py)

    def on_mouse_drag(self, x, y, dx, dy, buttons, modifiers):
        if buttons & mouse.LEFT:
            px, py = self._pointer(x, y, dx)
            self.session.pointer_motion(px, py)

    def on_mouse_leave(self, x, y):
        if not self.session.captured:
            self.session.pointer_left()

    def on_mouse_press(self, x, y, button, modifiers):
        if button == mouse.LEFT:
            px, py = self._pointer(x, y, 0.0)
            self.session.button_down(px, py)

    def on_mouse_release(self, x, y, button, modifiers):
        if button == mouse.LEFT:
            px, py = self._pointer(x, y, 0.0)
            self.session.button_up(px, py)

    def on_key_press(self, symbol, modifiers):
        if symbol == key.ESCAPE:
            self.session.key_escape()
            return pyglet.event.EVENT_HANDLED

    def on_close(self):
        self.session.close_requested()
        # a coalesced value may still be waiting for its window; tick closes then
        if self.session.finished:
            self.shutdown()
        return pyglet.event.EVENT_HANDLED

    # ---- loop ----

    def tick(self, dt: float) -> None:
        self.session.tick(dt)
        if self.session.finished:
            self.shutdown()

    def shutdown(self) -> None:
        if self._closing:
            return
        self._closing = True
        pyglet.clock.unschedule(self.tick)
        self.set_exclusive_mouse(False)
        self.close()
        pyglet.app.exit()


def open_window(session: BarSession) -> BarWindow:
    """Create the bar window. Display/config errors propagate (fatal at startup)."""
    window = BarWindow(session)
    pyglet.clock.schedule_interval(window.tick, TICK_INTERVAL_S)
    return window


def run_window(window: BarWindow) -> int:
    """Run the event loop until the bar closes, return the exit code."""
    session = window.session
    logger.debug("event loop started (%s)", session.config.dispatch.mode.value)
    pyglet.app.run()
    return session.finish()
