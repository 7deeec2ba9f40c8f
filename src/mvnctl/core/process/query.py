"""
Synchronous Maven queries.

Used for short read-only invocations (``help:effective-pom``,
``help:active-profiles``, ``--version``) whose whole output is needed at once.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Callable, Sequence

from mvnctl.core.command.builder import build_command
from mvnctl.core.command.executable import resolve_maven_executable
from mvnctl.core.command.models import BuildTarget
from mvnctl.core.process.models import MavenQueryError, SpawnError

logger = logging.getLogger(__name__)

DEFAULT_QUERY_TIMEOUT = 300.0


def run_maven_query(
    argv: Sequence[str],
    cwd: Path,
    timeout: float | None = DEFAULT_QUERY_TIMEOUT,
) -> list[str]:
    """
    Run a command to completion and return its merged output lines.

    Raises:
        SpawnError: If the command cannot be started
        MavenQueryError: On a non-zero exit or timeout
    """
    argv = list(argv)
    logger.debug("Running query: %s", " ".join(argv))
    try:
        result = subprocess.run(
            argv,
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            stdin=subprocess.DEVNULL,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise MavenQueryError(argv, None, f"timed out after {timeout}s") from e
    except OSError as e:
        raise SpawnError(argv, e.strerror or str(e)) from e

    lines = [
        line.rstrip("\r")
        for line in result.stdout.decode("utf-8", errors="replace").split("\n")
    ]
    if lines and lines[-1] == "":
        lines.pop()

    if result.returncode != 0:
        errors = [line for line in lines if "[ERROR]" in line]
        tail = (errors or lines)[-1] if (errors or lines) else ""
        raise MavenQueryError(argv, result.returncode, tail.strip())
    return lines


def maven_query_for(
    target: BuildTarget,
    settings_path: str | None = None,
    timeout: float | None = DEFAULT_QUERY_TIMEOUT,
    use_file_flag: bool = False,
) -> Callable[[Sequence[str]], list[str]]:
    """
    Bind a query callable to a build target.

    The returned callable takes goal tokens and returns output lines, which is
    the shape profile and launch detection expect.
    """

    def query(goals: Sequence[str]) -> list[str]:
        command = build_command(
            target,
            goals,
            settings_path=settings_path,
            use_file_flag=use_file_flag,
        )
        return run_maven_query(command.argv, command.cwd, timeout=timeout)

    return query


def check_maven_availability(project_root: Path, timeout: float | None = 60.0) -> str:
    """
    Run ``<executable> --version`` in the project.

    Returns:
        First line of the version banner

    Raises:
        SpawnError: If Maven cannot be started
        MavenQueryError: If it exits unsuccessfully
    """
    executable = resolve_maven_executable(project_root)
    lines = run_maven_query([executable, "--version"], project_root, timeout=timeout)
    return next((line for line in lines if line.strip()), "Unknown version")
