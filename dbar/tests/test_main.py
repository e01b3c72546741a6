import sys
import types

import pytest

from dbar import main as cli
from dbar.core.types import DispatchMode, NumberMode


def test_defaults_are_static_integer_0_100():
    cfg = cli.parse_config([])
    assert cfg.range.min == 0 and cfg.range.max == 100
    assert cfg.range.mode == NumberMode.INTEGER
    assert cfg.dispatch.mode == DispatchMode.STATIC
    assert cfg.dispatch.template is None
    assert cfg.capture is True
    assert cfg.initial == 0.0


def test_full_option_set():
    cfg = cli.parse_config([
        "0.3", "1", "--float", "-i", "0.3", "-t", "Brightness", "-v",
        "-c", "light -S {}", "-r", "20", "-p", "3", "--no-mouse-capture",
        "-x", "400", "-y", "30", "--bg-col", "#000000", "--fg-col", "#ffffff",
    ])
    assert cfg.range.mode == NumberMode.FLOAT
    assert cfg.range.min == 0.3
    assert cfg.initial == 0.3
    assert cfg.precision == 3
    assert cfg.capture is False
    assert cfg.style.title == "Brightness"
    assert cfg.style.caption == "Brightness"
    assert cfg.style.value_readout is True
    assert (cfg.style.width, cfg.style.height) == (400, 30)
    assert cfg.style.bg_col == (0, 0, 0)
    assert cfg.style.fg_col == (255, 255, 255)
    assert cfg.dispatch.mode == DispatchMode.DYNAMIC
    assert cfg.dispatch.template == "light -S {}"
    assert cfg.dispatch.rate_ms == 20


def test_command_on_click_mode():
    cfg = cli.parse_config(["1", "6", "-C", "notify-send {}", "--placeholder", "{}"])
    assert cfg.dispatch.mode == DispatchMode.ON_CLICK
    assert cfg.exit_on_click is False


@pytest.mark.parametrize("raw,expected", [("1.5", 1.0), ("-0.2", 0.0), ("0.25", 0.25)])
def test_initial_position_is_clamped(raw, expected):
    cfg = cli.parse_config(["-i", raw])
    assert cfg.initial == expected


def test_negative_range_bounds():
    cfg = cli.parse_config(["-10", "-2"])
    assert (cfg.range.min, cfg.range.max) == (-10, -2)


@pytest.mark.parametrize("argv", [
    ["-c", "a {}", "-C", "b {}"],
    ["100", "0"],
    ["-i", "abc"],
    ["--bg-col", "blue"],
    ["-x", "0"],
    ["-r", "-5"],
    ["0.2", "0.8"],
])
def test_configuration_errors_exit_2(argv, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.parse_config(argv)
    assert exc.value.code == 2
    assert capsys.readouterr().out == ""


def test_help_exits_0(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--help"])
    assert exc.value.code == 0
    assert "--command-on-click" in capsys.readouterr().out


def test_window_failure_exits_1(monkeypatch, capsys):
    def open_window(session):
        raise RuntimeError("no display")

    fake = types.ModuleType("dbar.ui.bar_window")
    fake.open_window = open_window
    fake.run_window = lambda window: 0
    monkeypatch.setitem(sys.modules, "dbar.ui.bar_window", fake)

    assert cli.main(["-i", "0.5"]) == 1
    assert capsys.readouterr().out == ""


def test_main_runs_window_and_returns_code(monkeypatch):
    seen = {}

    def open_window(session):
        seen["session"] = session
        return "window"

    def run_window(window):
        seen["window"] = window
        return 0

    fake = types.ModuleType("dbar.ui.bar_window")
    fake.open_window = open_window
    fake.run_window = run_window
    monkeypatch.setitem(sys.modules, "dbar.ui.bar_window", fake)

    assert cli.main(["1", "6"]) == 0
    assert seen["window"] == "window"
    assert seen["session"].value == 1
