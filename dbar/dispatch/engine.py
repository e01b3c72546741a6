from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Optional, TextIO

from dbar.core.config import ConfigError, DispatchConfig
from dbar.core.types import BarEvent, DispatchMode, EventType, Number, Range
from dbar.core.value_model import format_value
from dbar.dispatch.template import CommandTemplate
from dbar.injector.process_runner import PendingInvocation, ProcessRunner

logger = logging.getLogger(__name__)


@dataclass
class RateLimiter:
    """
    Minimum-interval throttle with a single coalescing slot.

    The first offer after a quiet period fires at once. Offers inside the
    window overwrite the slot (latest wins); `due` releases it once the
    window has elapsed.
    """
    interval_ms: int

    _last_fire_ms: int | None = None
    _pending: Optional[Number] = None
    _has_pending: bool = False

    def _window_open(self, t_ms: int) -> bool:
        if self._last_fire_ms is None:
            return False
        return t_ms - self._last_fire_ms < self.interval_ms

    def offer(self, value: Number, t_ms: int) -> bool:
        """Returns True if `value` may fire right now."""
        if self._window_open(t_ms):
            self._pending = value
            self._has_pending = True
            return False
        self._last_fire_ms = t_ms
        self._pending = None
        self._has_pending = False
        return True

    def due(self, t_ms: int) -> tuple[bool, Optional[Number]]:
        if not self._has_pending or self._window_open(t_ms):
            return False, None
        value = self._pending
        self._last_fire_ms = t_ms
        self._pending = None
        self._has_pending = False
        return True, value

    @property
    def has_pending(self) -> bool:
        return self._has_pending

    def drop_pending(self) -> None:
        self._pending = None
        self._has_pending = False


class DispatchEngine:
    """
    Decides when a value turns into a spawned command.

    STATIC    print on exit, nothing else
    DYNAMIC   rate limited dispatch on value change, print on exit
    ON_CLICK  dispatch on every click, silent exit
    """

    def __init__(
        self,
        config: DispatchConfig,
        rng: Range,
        runner: ProcessRunner,
        *,
        initial_value: Number,
        precision: int = 2,
        out: TextIO | None = None,
    ) -> None:
        self.config = config
        self.range = rng
        self.runner = runner
        self.precision = precision
        self.out = out

        self.template: CommandTemplate | None = None
        if config.template is not None:
            self.template = CommandTemplate(config.template, config.placeholder)
        elif config.mode != DispatchMode.STATIC:
            raise ConfigError(f"{config.mode.value} mode requires a command template")
        self.limiter = RateLimiter(interval_ms=int(config.rate_ms))

        self.current: Number = initial_value
        # exiting: exit requested, a coalesced value still waits for its window
        self.exiting: bool = False
        self.finished: bool = False
        self.dispatch_count: int = 0
        self.last_command: str | None = None
        self._last_dispatched: Optional[Number] = None

    @property
    def mode(self) -> DispatchMode:
        return self.config.mode

    def format(self, value: Number) -> str:
        return format_value(value, self.range, self.precision)

    # ---- events ----

    def handle(self, ev: BarEvent, t_ms: int | None = None) -> None:
        if self.finished or self.exiting:
            return
        now = ev.t_ms if t_ms is None else t_ms

        if ev.type == EventType.EXIT_REQUESTED:
            if self.limiter.has_pending:
                self.exiting = True
            else:
                self.finished = True
            return

        if ev.value is not None:
            self.current = ev.value

        if self.mode == DispatchMode.DYNAMIC and ev.type == EventType.VALUE_CHANGED:
            if self.limiter.offer(self.current, now):
                self._dispatch(self.current)
        elif self.mode == DispatchMode.ON_CLICK and ev.type == EventType.CLICKED:
            self._dispatch(self.current)

    def tick(self, t_ms: int) -> None:
        if self.finished or self.mode != DispatchMode.DYNAMIC:
            return
        fire, value = self.limiter.due(t_ms)
        if fire and value is not None and value != self._last_dispatched:
            self._dispatch(value)
        if self.exiting and not self.limiter.has_pending:
            self.finished = True

    def finish(self) -> int:
        """Emit the final output once the loop has stopped. Returns the exit code."""
        self.finished = True
        if self.limiter.has_pending:
            # loop stopped before the window elapsed
            logger.debug("dropping coalesced value %r on exit", self.current)
            self.limiter.drop_pending()
        if self.mode in (DispatchMode.STATIC, DispatchMode.DYNAMIC):
            stream = self.out if self.out is not None else sys.stdout
            stream.write(self.format(self.current) + "\n")
            stream.flush()
        return 0

    # ---- dispatch ----

    def _dispatch(self, value: Number) -> PendingInvocation | None:
        template = self.template
        if template is None:
            raise ConfigError(f"{self.mode.value} mode has no command template")
        command = template.render(self.format(value))
        self.dispatch_count += 1
        self.last_command = command
        self._last_dispatched = value
        logger.debug("dispatch #%d: %s", self.dispatch_count, command)
        return self.runner.spawn(command)
