from __future__ import annotations

import logging

from pynput import keyboard

from dbar.core.control import ControlState

logger = logging.getLogger(__name__)

CTRL_KEYS = {keyboard.Key.ctrl, keyboard.Key.ctrl_l, keyboard.Key.ctrl_r}
ALT_KEYS = {keyboard.Key.alt, keyboard.Key.alt_l, keyboard.Key.alt_r}


def start_exit_hotkey(state: ControlState) -> keyboard.Listener | None:
    """
    Global hotkey (X11), works even when the bar has lost focus:
    - Ctrl+Alt+Esc: close the bar

    The listener runs on its own daemon thread and only touches ControlState.
    Returns None when no listener backend is available.
    """

    pressed = set()

    def is_ctrl():
        return any(k in pressed for k in CTRL_KEYS)

    def is_alt():
        return any(k in pressed for k in ALT_KEYS)

    def on_press(k):
        pressed.add(k)
        if is_ctrl() and is_alt() and k == keyboard.Key.esc:
            logger.info("exit requested (Ctrl+Alt+Esc)")
            state.request_exit()

    def on_release(k):
        pressed.discard(k)

    try:
        listener = keyboard.Listener(on_press=on_press, on_release=on_release)
        listener.daemon = True
        listener.start()
    except Exception as e:
        # pynput backends depend on the session (X11, uinput, ...)
        logger.warning("global exit hotkey unavailable: %s", e)
        return None
    return listener
