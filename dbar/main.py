from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from dbar.core.config import (
    DEFAULT_BG_COL, DEFAULT_FG_COL, DEFAULT_HEIGHT, DEFAULT_MAX, DEFAULT_MIN,
    DEFAULT_PLACEHOLDER, DEFAULT_PRECISION, DEFAULT_RATE_MS, DEFAULT_WIDTH,
    BarConfig, ConfigError, DispatchConfig, WindowStyle, parse_hex_color,
)
from dbar.core.control import ControlState
from dbar.core.logging import setup_default_logging
from dbar.core.types import DispatchMode, NumberMode, Range, clamp01
from dbar.runtime.run_loop import BarSession

logger = logging.getLogger("dbar")

DESCRIPTION = (
    "Move the pointer to select a value in the given (inclusive) range "
    "[min, max]. Left click to confirm, ESC to close."
)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="dbar", description=DESCRIPTION)
    p.add_argument("min", nargs="?", type=float, default=DEFAULT_MIN, help="lower bound (default 0)")
    p.add_argument("max", nargs="?", type=float, default=DEFAULT_MAX, help="upper bound (default 100)")
    p.add_argument("-f", "--float", action="store_true", help="do not round the value to an integer")
    p.add_argument("-i", "--initial", type=float, default=0.0, help="initial bar position, clamped to [0, 1]")
    p.add_argument("-t", "--title", help="title shown on the bar")
    p.add_argument("-v", "--value-readout", action="store_true", help="show the current value on the bar")

    cmd = p.add_mutually_exclusive_group()
    cmd.add_argument("-c", "--command", metavar="TEMPLATE",
                     help="run TEMPLATE whenever the value changes")
    cmd.add_argument("-C", "--command-on-click", metavar="TEMPLATE",
                     help="run TEMPLATE on every click; the bar stays open until ESC")

    p.add_argument("-r", "--rate", type=int, default=DEFAULT_RATE_MS, metavar="MS",
                   help=f"minimum milliseconds between --command runs (default {DEFAULT_RATE_MS})")
    p.add_argument("--placeholder", default=DEFAULT_PLACEHOLDER,
                   help=f"token replaced by the value in templates (default {DEFAULT_PLACEHOLDER!r})")
    p.add_argument("-p", "--precision", type=int, default=DEFAULT_PRECISION,
                   help=f"decimals printed in --float mode (default {DEFAULT_PRECISION})")
    p.add_argument("--no-mouse-capture", action="store_true",
                   help="do not grab the pointer; clicks never close the bar")
    p.add_argument("-x", "--width", type=int, default=DEFAULT_WIDTH, help="width of the window")
    p.add_argument("-y", "--height", type=int, default=DEFAULT_HEIGHT, help="height of the window")
    p.add_argument("--bg-col", default=DEFAULT_BG_COL, help="background colour in #rrggbb format")
    p.add_argument("--fg-col", default=DEFAULT_FG_COL, help="bar colour in #rrggbb format")
    p.add_argument("--exit-hotkey", action="store_true",
                   help="also close the bar with the global hotkey Ctrl+Alt+Esc")
    return p


def config_from_args(args: argparse.Namespace) -> BarConfig:
    if args.command is not None:
        mode, template = DispatchMode.DYNAMIC, args.command
    elif args.command_on_click is not None:
        mode, template = DispatchMode.ON_CLICK, args.command_on_click
    else:
        mode, template = DispatchMode.STATIC, None

    cfg = BarConfig(
        range=Range(
            min=args.min,
            max=args.max,
            mode=NumberMode.FLOAT if args.float else NumberMode.INTEGER,
        ),
        initial=clamp01(args.initial),
        precision=args.precision,
        capture=not args.no_mouse_capture,
        exit_hotkey=args.exit_hotkey,
        style=WindowStyle(
            width=args.width,
            height=args.height,
            bg_col=parse_hex_color(args.bg_col),
            fg_col=parse_hex_color(args.fg_col),
            title=args.title,
            value_readout=args.value_readout,
        ),
        dispatch=DispatchConfig(
            mode=mode,
            template=template,
            rate_ms=args.rate,
            placeholder=args.placeholder,
        ),
    )
    return cfg.validate()


def parse_config(argv: Sequence[str] | None = None) -> BarConfig:
    """Parse and validate; exits with status 2 on any configuration error."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return config_from_args(args)
    except ConfigError as e:
        parser.error(str(e))
        raise  # unreachable, parser.error exits


def start_hotkey(control: ControlState) -> None:
    try:
        from dbar.ui.hotkeys import start_exit_hotkey
    except Exception as e:
        # pynput picks its backend at import time
        logger.warning("global exit hotkey unavailable: %s", e)
        return
    start_exit_hotkey(control)


def main(argv: Sequence[str] | None = None) -> int:
    setup_default_logging()
    config = parse_config(argv)

    control = ControlState()
    session = BarSession(config, control=control)

    try:
        from dbar.ui.bar_window import open_window, run_window
        window = open_window(session)
    except Exception as e:
        logger.error("could not open the bar window: %s", e)
        return 1

    if config.exit_hotkey:
        start_hotkey(control)
    return run_window(window)


if __name__ == "__main__":
    sys.exit(main())
