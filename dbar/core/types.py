"""
dbar — core contracts

Shared by the interpreter (input -> events), the dispatch engine
(events -> commands) and the presentation surface.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


Number = Union[int, float]


# ============================================================
# Value range
# ============================================================

class NumberMode(str, Enum):
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"


@dataclass(frozen=True)
class Range:
    """Inclusive bounds of the selectable value."""
    min: float = 0.0
    max: float = 100.0
    mode: NumberMode = NumberMode.INTEGER

    @property
    def span(self) -> float:
        return self.max - self.min

    @property
    def is_integer(self) -> bool:
        return self.mode == NumberMode.INTEGER


# ============================================================
# Interpreter -> Dispatch Engine
# ============================================================

class DispatchMode(str, Enum):
    STATIC = "STATIC"        # no command, print on exit
    DYNAMIC = "DYNAMIC"      # command on every (rate limited) value change
    ON_CLICK = "ON_CLICK"    # command on every completed click


class BarMode(str, Enum):
    IDLE = "IDLE"
    DRAGGING = "DRAGGING"
    UNCAPTURED = "UNCAPTURED"  # --no-mouse-capture, clicks never end the run
    CLOSED = "CLOSED"


class EventType(str, Enum):
    VALUE_CHANGED = "VALUE_CHANGED"
    CLICKED = "CLICKED"
    EXIT_REQUESTED = "EXIT_REQUESTED"


@dataclass(frozen=True)
class BarEvent:
    """
    A single output event from the interpreter.

    `value` is set for VALUE_CHANGED and CLICKED, None for EXIT_REQUESTED.
    """
    t_ms: int
    type: EventType
    value: Optional[Number] = None


def value_changed(t_ms: int, value: Number) -> BarEvent:
    return BarEvent(t_ms=t_ms, type=EventType.VALUE_CHANGED, value=value)


def clicked(t_ms: int, value: Number) -> BarEvent:
    return BarEvent(t_ms=t_ms, type=EventType.CLICKED, value=value)


def exit_requested(t_ms: int) -> BarEvent:
    return BarEvent(t_ms=t_ms, type=EventType.EXIT_REQUESTED)


def clamp01(x: float) -> float:
    if x != x:  # NaN
        return 0.0
    if x < 0.0:
        return 0.0
    if x > 1.0:
        return 1.0
    return x
