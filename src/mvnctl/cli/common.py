"""
Shared helpers for mvnctl commands.

Resolves the project and module a command works on, opens the module
session and streams process output to the terminal.
"""

import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from mvnctl.cli.errors import (
    ExitCode,
    print_error,
    print_maven_not_found_error,
    print_not_project_error,
)
from mvnctl.core.command import ROOT_MODULE
from mvnctl.core.config import ConfigError, load_config
from mvnctl.core.process import ProcessUpdate, RunningProcess, SlotBusyError, SpawnError, UpdateKind
from mvnctl.core.services import ModuleSession
from mvnctl.utils.project import find_project_root

console = Console()

POLL_INTERVAL = 0.2


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for mvnctl commands.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def resolve_project(ctx: typer.Context) -> Path:
    """Project root from ``--project`` or the working directory. Exits when none is found."""
    obj = ctx.obj or {}
    start = Path(obj.get("project") or Path.cwd())
    root = find_project_root(start)
    if root is None:
        print_not_project_error(str(start))
        raise typer.Exit(ExitCode.USER_ERROR)
    return root


def open_session(ctx: typer.Context, module: str | None) -> ModuleSession:
    """
    Open the session for a module of the current project.

    Exits with USER_ERROR on an unusable configuration.
    """
    root = resolve_project(ctx)
    module = module or ROOT_MODULE
    if module != ROOT_MODULE and not (root / module / "pom.xml").is_file():
        print_error(
            f"Module not found: {module}",
            reason=f"{root / module / 'pom.xml'} does not exist",
            solution="Pass the module directory relative to the project root",
        )
        raise typer.Exit(ExitCode.USER_ERROR)

    try:
        config = load_config(root)
    except ConfigError as e:
        print_error("Invalid configuration", reason=str(e), solution="Fix .mvnctl.json")
        raise typer.Exit(ExitCode.USER_ERROR) from e
    return ModuleSession.from_config(root, module, config)


def print_update(update: ProcessUpdate) -> None:
    if update.kind is UpdateKind.OUTPUT:
        console.print(escape(update.line or ""), highlight=False)
    elif update.kind is UpdateKind.EXITED:
        style = "green" if update.exit_code == 0 else "red"
        console.print(f"[{style}]{update.message}[/{style}]")
    elif update.kind is UpdateKind.KILLED:
        console.print(f"[yellow]{update.message}[/yellow]")
    else:
        console.print(f"[red]{escape(update.message or 'Process failed')}[/red]")


def stream_process(session: ModuleSession, handle: RunningProcess) -> int:
    """
    Print output until the process ends. Ctrl+C kills the process group.

    Returns:
        Exit code for the CLI
    """
    try:
        while True:
            update = handle.channel.get(timeout=POLL_INTERVAL)
            if update is None:
                continue
            print_update(update)
            if update.is_terminal:
                break
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted, stopping Maven...[/yellow]")
        outcome = session.kill()
        if outcome is not None and outcome.error:
            print_error("Process may still be running", reason=outcome.error)
        return ExitCode.SIGINT

    if update.kind is UpdateKind.EXITED:
        return ExitCode.SUCCESS if update.exit_code == 0 else ExitCode.GENERAL_ERROR
    if update.kind is UpdateKind.KILLED:
        return ExitCode.SIGINT
    return ExitCode.GENERAL_ERROR


def start_or_exit(start, *args, **kwargs) -> RunningProcess:
    """Call a session start method, turning spawn failures into CLI exits."""
    try:
        return start(*args, **kwargs)
    except SpawnError as e:
        print_maven_not_found_error(e.argv[0] if e.argv else "mvn", e.reason)
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e
    except SlotBusyError as e:
        print_error(str(e), solution="Wait for the running build or kill it first")
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e
