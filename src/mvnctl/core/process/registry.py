"""
Process-wide registry of spawned PIDs.

The registry is the only mutable state shared between execution slots. It
lets the application kill everything it started on shutdown, and makes a new
spawn in a slot wait while that slot's previous process is still being
killed.
"""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)


class PidRegistry:
    """
    Thread-safe map of slot name -> running PID, plus kill-in-flight tracking.

    Example:
        >>> registry = PidRegistry()
        >>> registry.register("app", 4242)
        >>> registry.pid_for("app")
        4242
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pids: dict[str, int] = {}
        self._kills: dict[str, threading.Event] = {}

    def register(self, slot: str, pid: int) -> None:
        with self._lock:
            self._pids[slot] = pid
        logger.debug("Registered pid %d for slot %s", pid, slot)

    def unregister(self, slot: str, pid: int | None = None) -> None:
        """Forget a slot's PID (only if it still matches ``pid`` when given)."""
        with self._lock:
            if pid is None or self._pids.get(slot) == pid:
                self._pids.pop(slot, None)

    def pid_for(self, slot: str) -> int | None:
        with self._lock:
            return self._pids.get(slot)

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return dict(self._pids)

    def begin_kill(self, slot: str) -> None:
        """Mark a kill as in flight for a slot."""
        with self._lock:
            event = self._kills.get(slot)
            if event is None or event.is_set():
                self._kills[slot] = threading.Event()

    def end_kill(self, slot: str) -> None:
        with self._lock:
            event = self._kills.pop(slot, None)
        if event is not None:
            event.set()

    def kill_in_flight(self, slot: str) -> bool:
        with self._lock:
            event = self._kills.get(slot)
            return event is not None and not event.is_set()

    def wait_for_kill(self, slot: str, timeout: float | None = None) -> bool:
        """
        Block until a pending kill in ``slot`` resolves.

        Returns:
            True if no kill is pending anymore, False on timeout
        """
        with self._lock:
            event = self._kills.get(slot)
        if event is None:
            return True
        resolved = event.wait(timeout)
        if not resolved:
            logger.warning("Kill in slot %s still pending after %.1fs", slot, timeout or 0)
        return resolved
