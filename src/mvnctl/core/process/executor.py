"""
Spawning and streaming of external processes.

Each process gets one daemon worker thread that reads merged stdout/stderr
into a bounded OutputChannel. The caller polls the channel at its own pace
and never blocks on the process itself.
"""

from __future__ import annotations

import logging
import os
import subprocess
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Mapping, Sequence

from mvnctl.core.process.channel import OutputChannel
from mvnctl.core.process.killer import IS_WINDOWS, KillBackend, select_kill_backend
from mvnctl.core.process.models import (
    KillOutcome,
    ProcessState,
    ProcessUpdate,
    SpawnError,
    UpdateKind,
)

logger = logging.getLogger(__name__)

DEFAULT_GRACE_PERIOD = 2.0


def decode_line(raw: bytes) -> str:
    """Lossy UTF-8 decode with trailing CR/LF removed."""
    return raw.decode("utf-8", errors="replace").rstrip("\r\n")


class RunningProcess:
    """
    Handle to a spawned process.

    Exactly one terminal update is delivered through ``channel`` (EXITED,
    KILLED or FAILED) and no output line follows it.

    Attributes:
        pid: Process id (and process group id on Unix)
        argv: Argument vector the process was started with
        started_at: Spawn time
        channel: Output channel carrying lines and the terminal update
    """

    def __init__(
        self,
        popen: subprocess.Popen,
        argv: Sequence[str],
        channel: OutputChannel,
        kill_backend: KillBackend,
        grace_period: float = DEFAULT_GRACE_PERIOD,
    ) -> None:
        self._popen = popen
        self.pid: int = popen.pid
        self.argv = list(argv)
        self.started_at = datetime.now(timezone.utc)
        self.channel = channel
        self._kill_backend = kill_backend
        self._grace_period = grace_period
        self._lock = threading.Lock()
        self._state = ProcessState.RUNNING
        self._exit_code: int | None = None
        self._worker = threading.Thread(
            target=self._pump,
            name=f"mvnctl-output-{self.pid}",
            daemon=True,
        )

    def _start_worker(self) -> None:
        self._worker.start()

    @property
    def state(self) -> ProcessState:
        with self._lock:
            return self._state

    @property
    def exit_code(self) -> int | None:
        with self._lock:
            return self._exit_code

    @property
    def is_running(self) -> bool:
        return self.state is ProcessState.RUNNING

    def _finish(self, terminal: ProcessUpdate, state: ProcessState) -> None:
        with self._lock:
            if self._state is not ProcessState.RUNNING:
                return
            self._state = state
            if terminal.kind is UpdateKind.EXITED:
                self._exit_code = terminal.exit_code
        self.channel.close(terminal)

    def _pump(self) -> None:
        stream: IO[bytes] | None = self._popen.stdout
        try:
            if stream is not None:
                for raw in iter(stream.readline, b""):
                    # Keep draining after close so the child never blocks on a full pipe
                    if not self.channel.closed:
                        self.channel.put_line(decode_line(raw))
            exit_code = self._popen.wait()
        except (OSError, ValueError) as e:
            logger.warning("Output stream of process %d failed: %s", self.pid, e)
            self._finish(ProcessUpdate.failed(f"Output stream failed: {e}"), ProcessState.FAILED)
            return
        finally:
            if stream is not None:
                try:
                    stream.close()
                except OSError:
                    pass

        logger.info("Process %d exited with code %s", self.pid, exit_code)
        self._finish(ProcessUpdate.exited(exit_code), ProcessState.EXITED)

    def poll(self, max_items: int | None = None) -> list[ProcessUpdate]:
        """Take buffered updates without blocking."""
        return self.channel.poll(max_items)

    def _wait_exit(self, timeout: float) -> bool:
        try:
            self._popen.wait(timeout=timeout)
            return True
        except subprocess.TimeoutExpired:
            return False

    def kill(self) -> KillOutcome:
        """
        Terminate the whole process group.

        The handle leaves RUNNING before any signal is sent, so a failing
        backend never leaves it looking alive. Failures are logged, not raised.
        """
        with self._lock:
            was_running = self._state is ProcessState.RUNNING
            if was_running:
                self._state = ProcessState.KILLED
        if was_running:
            self.channel.close(ProcessUpdate.killed())
        logger.info("Killing process group %d (%s backend)", self.pid, self._kill_backend.name)

        try:
            outcome = self._kill_backend.kill_group(self.pid, self._grace_period, self._wait_exit)
        except Exception as e:
            logger.warning("Kill backend %s raised for %d: %s", self._kill_backend.name, self.pid, e)
            outcome = KillOutcome(pid=self.pid, method=self._kill_backend.name, error=str(e))

        if not outcome.success:
            logger.warning("Kill of process %d not confirmed: %s", self.pid, outcome.error)
        return outcome

    def wait(self, timeout: float | None = None) -> bool:
        """Wait for the worker to deliver the terminal update. True when done."""
        self._worker.join(timeout)
        return not self._worker.is_alive()


def spawn_process(
    argv: Sequence[str],
    cwd: Path | str | None = None,
    *,
    env: Mapping[str, str] | None = None,
    kill_backend: KillBackend | None = None,
    grace_period: float = DEFAULT_GRACE_PERIOD,
    queue_size: int = 1000,
) -> RunningProcess:
    """
    Start a process in its own process group and stream its output.

    Args:
        argv: Executable and arguments
        cwd: Working directory
        env: Variables added to (or overriding) the current environment
        kill_backend: Group kill mechanism (defaults to the platform choice)
        grace_period: Seconds between graceful and forceful kill
        queue_size: Output channel capacity

    Returns:
        RunningProcess handle whose worker is already streaming

    Raises:
        SpawnError: If the process could not be started
    """
    argv = list(argv)
    if not argv:
        raise SpawnError(argv, "empty command")

    process_env = None
    if env:
        process_env = os.environ.copy()
        process_env.update(env)

    kwargs: dict = {
        "stdout": subprocess.PIPE,
        "stderr": subprocess.STDOUT,
        "stdin": subprocess.DEVNULL,
        "cwd": str(cwd) if cwd is not None else None,
        "env": process_env,
    }
    if IS_WINDOWS:
        kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP
    else:
        kwargs["start_new_session"] = True

    logger.debug("Spawning: %s (cwd=%s)", " ".join(argv), cwd)
    try:
        popen = subprocess.Popen(argv, **kwargs)
    except OSError as e:
        raise SpawnError(argv, e.strerror or str(e)) from e

    handle = RunningProcess(
        popen,
        argv,
        OutputChannel(queue_size),
        kill_backend or select_kill_backend(),
        grace_period,
    )
    handle._start_worker()
    logger.info("Started process %d: %s", handle.pid, argv[0])
    return handle
