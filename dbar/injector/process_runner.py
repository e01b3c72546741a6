from __future__ import annotations

import logging
import os
import subprocess
import sys
import time
from dataclasses import dataclass, field
from typing import IO, Optional, Union

logger = logging.getLogger(__name__)

FALLBACK_SHELL = "/bin/sh"

# what a child's stdout is connected to: an fd/file, or None to inherit ours
StdoutTarget = Optional[Union[int, IO]]


def default_shell() -> str:
    return os.environ.get("SHELL") or FALLBACK_SHELL


@dataclass
class PendingInvocation:
    command: str
    process: subprocess.Popen
    started_ms: int

    @property
    def pid(self) -> int:
        return self.process.pid

    def poll(self) -> int | None:
        return self.process.poll()


@dataclass
class ProcessRunner:
    """
    Fire-and-forget command spawner.
    Keep it boring: spawn, reap, never wait, never kill.
    """
    shell: str = field(default_factory=default_shell)
    stdout: StdoutTarget = None

    pending: list[PendingInvocation] = field(default_factory=list)
    spawn_failures: int = 0

    @classmethod
    def for_terminal(cls, keep_stdout: bool) -> "ProcessRunner":
        """
        keep_stdout=False routes children's stdout to our stderr so the bar's
        own stdout carries only the final value.
        """
        return cls(stdout=None if keep_stdout else sys.stderr)

    def spawn(self, command: str) -> PendingInvocation | None:
        try:
            proc = subprocess.Popen([self.shell, "-c", command], stdout=self.stdout)
        except OSError as e:
            self.spawn_failures += 1
            logger.error("failed to run %r with %s: %s", command, self.shell, e)
            return None

        inv = PendingInvocation(
            command=command,
            process=proc,
            started_ms=int(time.monotonic() * 1000),
        )
        self.pending.append(inv)
        logger.debug("spawned pid %d: %s", proc.pid, command)
        return inv

    def reap(self) -> int:
        """Collect finished children. Returns how many were reaped."""
        alive: list[PendingInvocation] = []
        reaped = 0
        for inv in self.pending:
            code = inv.poll()
            if code is None:
                alive.append(inv)
                continue
            reaped += 1
            if code != 0:
                logger.warning("command exited with status %d: %s", code, inv.command)
        self.pending = alive
        return reaped
