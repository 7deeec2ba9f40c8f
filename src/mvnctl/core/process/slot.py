"""
Execution slots.

A slot owns at most one running process. Starting a second one while the
first is alive is refused; the caller must kill explicitly, so nothing is
ever replaced or orphaned silently.
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Mapping, Sequence

from mvnctl.core.process.executor import DEFAULT_GRACE_PERIOD, RunningProcess, spawn_process
from mvnctl.core.process.killer import KillBackend, select_kill_backend
from mvnctl.core.process.models import KillOutcome, ProcessState, SlotBusyError
from mvnctl.core.process.registry import PidRegistry

logger = logging.getLogger(__name__)


class ExecutionSlot:
    """
    One process at a time for a named consumer (typically a module session).

    Example:
        >>> slot = ExecutionSlot("app", registry)
        >>> handle = slot.start(["./mvnw", "-pl", "app", "test"], cwd=root)
        >>> slot.start(["./mvnw", "install"], cwd=root)
        Traceback (most recent call last):
        ...
        SlotBusyError: ...
    """

    def __init__(
        self,
        name: str,
        registry: PidRegistry | None = None,
        kill_backend: KillBackend | None = None,
        grace_period: float = DEFAULT_GRACE_PERIOD,
        queue_size: int = 1000,
    ) -> None:
        self.name = name
        self.registry = registry or PidRegistry()
        self.kill_backend = kill_backend or select_kill_backend()
        self.grace_period = grace_period
        self.queue_size = queue_size
        self._lock = threading.Lock()
        self._current: RunningProcess | None = None
        self._state = ProcessState.IDLE

    @property
    def current(self) -> RunningProcess | None:
        with self._lock:
            return self._current

    @property
    def state(self) -> ProcessState:
        with self._lock:
            if self._current is not None:
                return self._current.state
            return self._state

    @property
    def is_busy(self) -> bool:
        return self.state.is_active

    def start(
        self,
        argv: Sequence[str],
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> RunningProcess:
        """
        Spawn a process in this slot.

        Raises:
            SlotBusyError: If the slot's previous process is still running
            SpawnError: If the process could not be started
        """
        # A kill in flight must settle before the slot is reused. The check is
        # repeated under the lock because kill() marks its kill there.
        deadline = time.monotonic() + self.grace_period + 2.0
        while True:
            with self._lock:
                if (
                    not self.registry.kill_in_flight(self.name)
                    or time.monotonic() >= deadline
                ):
                    if self._current is not None and self._current.is_running:
                        raise SlotBusyError(self.name, self._current.pid)
                    if self._current is not None:
                        self.registry.unregister(self.name, self._current.pid)
                    self._current = None
                    self._state = ProcessState.SPAWNING
                    break
            self.registry.wait_for_kill(self.name, timeout=max(0.0, deadline - time.monotonic()))

        try:
            handle = spawn_process(
                argv,
                cwd,
                env=env,
                kill_backend=self.kill_backend,
                grace_period=self.grace_period,
                queue_size=self.queue_size,
            )
        except Exception:
            with self._lock:
                self._state = ProcessState.SPAWN_FAILED
            raise

        with self._lock:
            self._current = handle
            self._state = ProcessState.RUNNING
        self.registry.register(self.name, handle.pid)
        return handle

    def kill(self) -> KillOutcome | None:
        """
        Kill the slot's process, if any. The slot is not running afterwards.

        Returns:
            KillOutcome, or None when nothing was running
        """
        with self._lock:
            handle = self._current
            if handle is None or handle.state is not ProcessState.RUNNING:
                return None
            self.registry.begin_kill(self.name)

        try:
            outcome = handle.kill()
        finally:
            self.registry.unregister(self.name, handle.pid)
            self.registry.end_kill(self.name)
        return outcome
