from __future__ import annotations
from dataclasses import dataclass, field
from threading import Lock


@dataclass
class ControlState:
    """
    Shared control plane between the event loop and the hotkey thread.
    exit_requested=True means the bar should close on the next tick.
    """
    _exit_requested: bool = False
    _lock: Lock = field(default_factory=Lock)

    def is_exit_requested(self) -> bool:
        with self._lock:
            return self._exit_requested

    def request_exit(self) -> None:
        with self._lock:
            self._exit_requested = True
