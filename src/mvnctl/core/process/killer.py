"""
Process-group termination backends.

Maven forks JVMs (exec:java, spring-boot:run, surefire), so killing only the
launcher process leaves the application running. Both backends escalate from
a graceful signal to a forceful one after a grace period, group-wide.
"""

from __future__ import annotations

import logging
import os
import signal
import sys
from abc import ABC, abstractmethod
from typing import Callable

import psutil

from mvnctl.core.process.models import KillOutcome

logger = logging.getLogger(__name__)

IS_WINDOWS = sys.platform == "win32"
IS_UNIX = not IS_WINDOWS

# Waits up to the given seconds for the group leader; True once it exited
ExitWaiter = Callable[[float], bool]


class KillBackend(ABC):
    """Terminates a process together with everything it spawned."""

    name: str = "abstract"

    @abstractmethod
    def kill_group(self, pid: int, grace_period: float, wait_exit: ExitWaiter) -> KillOutcome:
        """
        Gracefully stop the group led by ``pid``, then force it.

        Implementations never raise; failures are reported in the outcome.
        """


class SignalKillBackend(KillBackend):
    """
    ``os.killpg`` based termination (Unix).

    Relies on the process having been started in its own session, so its
    process group id equals its pid.
    """

    name = "signal"

    def kill_group(self, pid: int, grace_period: float, wait_exit: ExitWaiter) -> KillOutcome:
        try:
            os.killpg(pid, signal.SIGTERM)
            logger.debug("Sent SIGTERM to process group %d", pid)
        except ProcessLookupError:
            logger.debug("Process group %d already gone", pid)
            return KillOutcome(pid=pid, method=self.name, graceful=True)
        except OSError as e:
            logger.warning("Failed to signal process group %d: %s", pid, e)
            return KillOutcome(pid=pid, method=self.name, error=str(e))

        graceful = wait_exit(grace_period)

        # Leader exiting does not mean its forks did
        try:
            os.killpg(pid, signal.SIGKILL)
            logger.debug("Sent SIGKILL to process group %d", pid)
        except ProcessLookupError:
            pass
        except OSError as e:
            logger.warning("Failed to force-kill process group %d: %s", pid, e)
            return KillOutcome(pid=pid, method=self.name, graceful=graceful, error=str(e))

        if not graceful:
            wait_exit(1.0)
        return KillOutcome(pid=pid, method=self.name, graceful=graceful)


class TreeKillBackend(KillBackend):
    """Portable termination of the process tree through psutil."""

    name = "tree"

    def kill_group(self, pid: int, grace_period: float, wait_exit: ExitWaiter) -> KillOutcome:
        try:
            parent = psutil.Process(pid)
            procs = [*parent.children(recursive=True), parent]
        except psutil.NoSuchProcess:
            logger.debug("Process %d already gone", pid)
            return KillOutcome(pid=pid, method=self.name, graceful=True)
        except psutil.Error as e:
            logger.warning("Failed to inspect process tree of %d: %s", pid, e)
            return KillOutcome(pid=pid, method=self.name, error=str(e))

        for proc in procs:
            try:
                proc.terminate()
            except psutil.NoSuchProcess:
                pass
            except psutil.Error as e:
                logger.debug("terminate() failed for %d: %s", proc.pid, e)

        _, alive = psutil.wait_procs(procs, timeout=grace_period)
        graceful = not alive

        errors: list[str] = []
        for proc in alive:
            try:
                proc.kill()
            except psutil.NoSuchProcess:
                pass
            except psutil.Error as e:
                errors.append(f"{proc.pid}: {e}")

        if alive:
            _, still_alive = psutil.wait_procs(alive, timeout=1.0)
            errors.extend(f"{p.pid}: still alive after kill" for p in still_alive)
        # Reap the leader so it does not linger as a zombie
        wait_exit(0.1)

        if errors:
            logger.warning("Process tree kill of %d incomplete: %s", pid, "; ".join(errors))
            return KillOutcome(pid=pid, method=self.name, graceful=graceful, error="; ".join(errors))
        return KillOutcome(pid=pid, method=self.name, graceful=graceful)


def select_kill_backend(name: str = "auto") -> KillBackend:
    """
    Pick a kill backend by configuration name.

    Args:
        name: ``signal``, ``tree`` or ``auto`` (signal on Unix, tree elsewhere)
    """
    if name == "signal":
        if not IS_UNIX:
            logger.warning("Signal kill backend is Unix-only, using tree backend")
            return TreeKillBackend()
        return SignalKillBackend()
    if name == "tree":
        return TreeKillBackend()
    if name != "auto":
        raise ValueError(f"Unknown kill backend '{name}' (expected auto, signal or tree)")
    return SignalKillBackend() if IS_UNIX else TreeKillBackend()
