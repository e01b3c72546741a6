"""
dbar — run configuration

Built once from the command line, validated, then never mutated.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dbar.core.types import DispatchMode, NumberMode, Range


RGB = Tuple[int, int, int]

DEFAULT_MIN = 0.0
DEFAULT_MAX = 100.0
DEFAULT_WIDTH = 600
DEFAULT_HEIGHT = 50
DEFAULT_BG_COL = "#333355"
DEFAULT_FG_COL = "#aaaaff"
DEFAULT_TITLE = "dbar"
DEFAULT_RATE_MS = 50
DEFAULT_PRECISION = 2
DEFAULT_PLACEHOLDER = "{}"
TICK_INTERVAL_S = 0.010


class ConfigError(ValueError):
    """Invalid command line configuration, reported before any window exists."""


def parse_hex_color(text: str) -> RGB:
    """Parse '#rrggbb' into an (r, g, b) tuple of 0..255 ints."""
    s = text.strip()
    if len(s) != 7 or not s.startswith("#"):
        raise ConfigError(f"invalid colour {text!r}, expected #rrggbb")
    try:
        return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))
    except ValueError:
        raise ConfigError(f"invalid colour {text!r}, expected #rrggbb") from None


@dataclass(frozen=True)
class WindowStyle:
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    bg_col: RGB = (0x33, 0x33, 0x55)
    fg_col: RGB = (0xaa, 0xaa, 0xff)
    title: Optional[str] = None
    value_readout: bool = False

    @property
    def caption(self) -> str:
        return self.title or DEFAULT_TITLE


@dataclass(frozen=True)
class DispatchConfig:
    mode: DispatchMode = DispatchMode.STATIC
    template: Optional[str] = None
    rate_ms: int = DEFAULT_RATE_MS
    placeholder: str = DEFAULT_PLACEHOLDER


@dataclass(frozen=True)
class BarConfig:
    range: Range = Range()
    initial: float = 0.0
    precision: int = DEFAULT_PRECISION
    capture: bool = True
    exit_hotkey: bool = False
    style: WindowStyle = field(default_factory=WindowStyle)
    dispatch: DispatchConfig = field(default_factory=DispatchConfig)

    @property
    def exit_on_click(self) -> bool:
        # a click commits the selection unless clicks are the trigger themselves
        return self.dispatch.mode != DispatchMode.ON_CLICK

    def validate(self) -> "BarConfig":
        r = self.range
        if not (math.isfinite(r.min) and math.isfinite(r.max)):
            raise ConfigError("range bounds must be finite numbers")
        if r.min > r.max:
            raise ConfigError(f"invalid range: min {r.min:g} is greater than max {r.max:g}")
        if r.mode == NumberMode.INTEGER and math.ceil(r.min) > math.floor(r.max):
            raise ConfigError(f"range [{r.min:g}, {r.max:g}] contains no integer, use --float")
        if self.precision < 0:
            raise ConfigError("precision must not be negative")
        if self.style.width < 2 or self.style.height < 2:
            raise ConfigError("window width and height must be at least 2 pixels")

        d = self.dispatch
        if d.rate_ms < 0:
            raise ConfigError("rate must not be negative")
        if not d.placeholder:
            raise ConfigError("placeholder must not be empty")
        if d.mode == DispatchMode.STATIC and d.template is not None:
            raise ConfigError("a command template requires --command or --command-on-click")
        if d.mode != DispatchMode.STATIC and d.template is None:
            raise ConfigError(f"{d.mode.value} mode requires a command template")
        return self
