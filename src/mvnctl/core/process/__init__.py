"""
Process execution: spawning, output streaming and group termination.
"""

from mvnctl.core.process.channel import OutputChannel
from mvnctl.core.process.executor import RunningProcess, decode_line, spawn_process
from mvnctl.core.process.killer import (
    KillBackend,
    SignalKillBackend,
    TreeKillBackend,
    select_kill_backend,
)
from mvnctl.core.process.models import (
    KillOutcome,
    MavenQueryError,
    ProcessError,
    ProcessState,
    ProcessUpdate,
    SlotBusyError,
    SpawnError,
    UpdateKind,
)
from mvnctl.core.process.query import (
    check_maven_availability,
    maven_query_for,
    run_maven_query,
)
from mvnctl.core.process.registry import PidRegistry
from mvnctl.core.process.slot import ExecutionSlot

__all__ = [
    "ExecutionSlot",
    "KillBackend",
    "KillOutcome",
    "MavenQueryError",
    "OutputChannel",
    "PidRegistry",
    "ProcessError",
    "ProcessState",
    "ProcessUpdate",
    "RunningProcess",
    "SignalKillBackend",
    "SlotBusyError",
    "SpawnError",
    "TreeKillBackend",
    "UpdateKind",
    "check_maven_availability",
    "decode_line",
    "maven_query_for",
    "run_maven_query",
    "select_kill_backend",
    "spawn_process",
]
