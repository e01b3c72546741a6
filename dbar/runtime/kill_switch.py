from __future__ import annotations

from dataclasses import dataclass

from dbar.core.control import ControlState
from dbar.core.types import BarEvent
from dbar.interpreter.state_machine import InputStateMachine


@dataclass
class KillSwitch:
    """
    Central exit gate.
    If ControlState asks for exit (global hotkey), we close the interpreter
    on the loop thread so the exit goes through the normal event path.
    """
    state: ControlState
    interp: InputStateMachine

    _fired: bool = False

    def guard(self, t_ms: int) -> list[BarEvent]:
        if self._fired or not self.state.is_exit_requested():
            return []
        self._fired = True
        return self.interp.close_requested(t_ms)
