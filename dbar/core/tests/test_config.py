import pytest

from dbar.core.config import (
    BarConfig, ConfigError, DispatchConfig, WindowStyle, parse_hex_color,
)
from dbar.core.control import ControlState
from dbar.core.types import DispatchMode, NumberMode, Range


def test_defaults_validate():
    cfg = BarConfig().validate()
    assert cfg.range == Range(0, 100, NumberMode.INTEGER)
    assert cfg.dispatch.mode == DispatchMode.STATIC
    assert cfg.capture is True
    assert cfg.exit_on_click is True
    assert cfg.style.caption == "dbar"


def test_on_click_mode_keeps_window_open_on_click():
    cfg = BarConfig(dispatch=DispatchConfig(mode=DispatchMode.ON_CLICK, template="echo {}"))
    assert cfg.validate().exit_on_click is False


@pytest.mark.parametrize("cfg", [
    BarConfig(range=Range(10, 0)),
    BarConfig(range=Range(0.2, 0.8)),
    BarConfig(range=Range(0, float("inf"))),
    BarConfig(precision=-1),
    BarConfig(style=WindowStyle(width=1)),
    BarConfig(dispatch=DispatchConfig(mode=DispatchMode.DYNAMIC, template=None)),
    BarConfig(dispatch=DispatchConfig(mode=DispatchMode.STATIC, template="echo")),
    BarConfig(dispatch=DispatchConfig(mode=DispatchMode.DYNAMIC, template="x", rate_ms=-1)),
    BarConfig(dispatch=DispatchConfig(mode=DispatchMode.DYNAMIC, template="x", placeholder="")),
])
def test_invalid_configs_rejected(cfg):
    with pytest.raises(ConfigError):
        cfg.validate()


def test_float_range_without_integer_is_fine():
    BarConfig(range=Range(0.2, 0.8, NumberMode.FLOAT)).validate()


def test_parse_hex_color():
    assert parse_hex_color("#333355") == (0x33, 0x33, 0x55)
    assert parse_hex_color("#AAAAFF") == (0xaa, 0xaa, 0xff)
    for bad in ("333355", "#33335", "#zzzzzz", ""):
        with pytest.raises(ConfigError):
            parse_hex_color(bad)


def test_control_state_exit_flag():
    st = ControlState()
    assert not st.is_exit_requested()
    st.request_exit()
    assert st.is_exit_requested()
