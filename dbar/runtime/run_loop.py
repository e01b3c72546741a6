from __future__ import annotations

import logging
import time
from typing import Callable, TextIO

from dbar.core.config import BarConfig
from dbar.core.control import ControlState
from dbar.core.types import BarEvent, DispatchMode, EventType, Number
from dbar.dispatch.engine import DispatchEngine
from dbar.interpreter.state_machine import InputStateMachine
from dbar.injector.process_runner import ProcessRunner
from dbar.runtime.kill_switch import KillSwitch

logger = logging.getLogger(__name__)


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class BarSession:
    """
    One run of the bar: the single owner of BarState.

    The window (or a test) feeds raw input in; events flow
    interpreter -> dispatch engine. Everything runs on the caller's thread.
    """

    def __init__(
        self,
        config: BarConfig,
        *,
        runner: ProcessRunner | None = None,
        control: ControlState | None = None,
        out: TextIO | None = None,
        clock: Callable[[], int] = monotonic_ms,
    ) -> None:
        self.config = config
        self.clock = clock
        self.control = control or ControlState()

        self.interp = InputStateMachine(
            config.range,
            config.style.width,
            config.style.height,
            initial=config.initial,
            capture=config.capture,
            exit_on_click=config.exit_on_click,
        )
        if runner is None:
            runner = ProcessRunner.for_terminal(
                keep_stdout=config.dispatch.mode == DispatchMode.ON_CLICK
            )
        self.runner = runner
        self.engine = DispatchEngine(
            config.dispatch,
            config.range,
            runner,
            initial_value=self.interp.value,
            precision=config.precision,
            out=out,
        )
        self.kill_switch = KillSwitch(state=self.control, interp=self.interp)
        self.exit_code: int | None = None

    # ---- state views (read by the presentation surface) ----

    @property
    def position(self) -> float:
        return self.interp.position

    @property
    def value(self) -> Number:
        return self.interp.value

    @property
    def value_text(self) -> str:
        return self.engine.format(self.interp.value)

    @property
    def captured(self) -> bool:
        return self.interp.captured

    @property
    def finished(self) -> bool:
        return self.engine.finished

    # ---- input ----

    def _now(self, t_ms: int | None) -> int:
        return self.clock() if t_ms is None else t_ms

    def feed(self, events: list[BarEvent]) -> None:
        for ev in events:
            if ev.type != EventType.VALUE_CHANGED:
                logger.debug("event %s value=%r", ev.type.value, ev.value)
            self.engine.handle(ev)

    def pointer_motion(self, x: float, y: float, t_ms: int | None = None) -> None:
        self.feed(self.interp.pointer_motion(x, y, self._now(t_ms)))

    def pointer_left(self, t_ms: int | None = None) -> None:
        self.feed(self.interp.pointer_left(self._now(t_ms)))

    def button_down(self, x: float, y: float, t_ms: int | None = None) -> None:
        self.feed(self.interp.button_down(x, y, self._now(t_ms)))

    def button_up(self, x: float, y: float, t_ms: int | None = None) -> None:
        self.feed(self.interp.button_up(x, y, self._now(t_ms)))

    def key_escape(self, t_ms: int | None = None) -> None:
        self.feed(self.interp.key_escape(self._now(t_ms)))

    def close_requested(self, t_ms: int | None = None) -> None:
        self.feed(self.interp.close_requested(self._now(t_ms)))

    # ---- loop ----

    def tick(self, dt: float | None = None, t_ms: int | None = None) -> None:
        """Called from pyglet.clock.schedule_interval (dt is ignored)."""
        now = self._now(t_ms)
        self.feed(self.kill_switch.guard(now))
        self.engine.tick(now)
        self.runner.reap()

    def finish(self) -> int:
        """Print the final value (mode permitting) once and return the exit code."""
        if self.exit_code is None:
            self.exit_code = self.engine.finish()
            if self.runner.pending:
                logger.debug("leaving %d command(s) running", len(self.runner.pending))
        return self.exit_code
