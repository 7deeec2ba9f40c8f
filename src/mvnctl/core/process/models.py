"""
Data models for process execution.

Defines the process lifecycle states, the updates delivered through an
output channel, and the process error hierarchy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Sequence


class ProcessError(Exception):
    """Base exception for process execution errors."""


class SpawnError(ProcessError):
    """The process could not be started. No handle was created."""

    def __init__(self, argv: Sequence[str], reason: str) -> None:
        self.argv = list(argv)
        self.reason = reason
        executable = self.argv[0] if self.argv else "<empty>"
        super().__init__(f"Failed to start '{executable}': {reason}")


class SlotBusyError(ProcessError):
    """An execution slot already owns a running process."""

    def __init__(self, slot: str, pid: int) -> None:
        self.slot = slot
        self.pid = pid
        super().__init__(
            f"Slot '{slot}' is already running process {pid}; kill it before starting another"
        )


class MavenQueryError(ProcessError):
    """A synchronous Maven query exited unsuccessfully."""

    def __init__(self, argv: Sequence[str], exit_code: int | None, output_tail: str = "") -> None:
        self.argv = list(argv)
        self.exit_code = exit_code
        self.output_tail = output_tail
        message = f"'{' '.join(self.argv[1:]) or self.argv[0]}' exited with code {exit_code}"
        if output_tail:
            message += f": {output_tail}"
        super().__init__(message)


class ProcessState(str, Enum):
    """Lifecycle state of an execution."""

    IDLE = "idle"
    SPAWNING = "spawning"
    RUNNING = "running"
    EXITED = "exited"  # Ended on its own (exit code known)
    KILLED = "killed"  # Cancelled by the user
    FAILED = "failed"  # Output stream broke mid-run
    SPAWN_FAILED = "spawn_failed"

    @property
    def is_active(self) -> bool:
        return self in (ProcessState.SPAWNING, ProcessState.RUNNING)


class UpdateKind(str, Enum):
    """Kind of message on an output channel."""

    OUTPUT = "output"  # One line of merged stdout/stderr
    EXITED = "exited"  # Terminal: process ended with an exit code
    KILLED = "killed"  # Terminal: process was cancelled
    FAILED = "failed"  # Terminal: reading output failed

    @property
    def is_terminal(self) -> bool:
        return self is not UpdateKind.OUTPUT


@dataclass(frozen=True)
class ProcessUpdate:
    """
    One message from a running process.

    Attributes:
        kind: Output line or terminal message
        line: Output text with line endings stripped (OUTPUT only)
        exit_code: Exit code (EXITED only, None if unknown)
        message: Human-readable detail for terminal messages
        timestamp: When the update was produced
    """

    kind: UpdateKind
    line: str | None = None
    exit_code: int | None = None
    message: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_terminal(self) -> bool:
        return self.kind.is_terminal

    @classmethod
    def output(cls, line: str) -> ProcessUpdate:
        return cls(UpdateKind.OUTPUT, line=line)

    @classmethod
    def exited(cls, exit_code: int | None) -> ProcessUpdate:
        return cls(UpdateKind.EXITED, exit_code=exit_code, message=f"Process exited with code {exit_code}")

    @classmethod
    def killed(cls, message: str = "Process killed") -> ProcessUpdate:
        return cls(UpdateKind.KILLED, message=message)

    @classmethod
    def failed(cls, message: str) -> ProcessUpdate:
        return cls(UpdateKind.FAILED, message=message)


@dataclass(frozen=True)
class KillOutcome:
    """
    Result of a group kill attempt.

    Attributes:
        pid: Process (group leader) that was targeted
        method: Backend name
        graceful: Whether the group ended before the forceful signal
        error: Failure detail when the kill could not be confirmed
    """

    pid: int
    method: str
    graceful: bool = False
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None
