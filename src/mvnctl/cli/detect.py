"""
mvnctl CLI - Detect command.

Shows what the effective POM says about a module and which launch
strategy would be used.
"""

from typing import Annotated, Optional

import typer
from rich.table import Table

from mvnctl.cli.common import console, open_session, setup_logging
from mvnctl.cli.errors import ExitCode, print_undetectable_launch_error
from mvnctl.core.config import LaunchMode
from mvnctl.core.detection import (
    ExecPluginStrategy,
    LaunchStrategy,
    RunPluginStrategy,
    UndetectableStrategyError,
)


def describe_strategy(strategy: LaunchStrategy) -> str:
    """One-line summary of a launch strategy."""
    if isinstance(strategy, RunPluginStrategy):
        version = strategy.plugin_version or "unknown version"
        text = f"{strategy.goal_name} ({version}, {strategy.scheme.value} properties)"
        if strategy.main_class_override:
            text += f", main class {strategy.main_class_override}"
        return text
    assert isinstance(strategy, ExecPluginStrategy)
    text = f"{strategy.goal_name} (main class {strategy.main_class or 'from plugin configuration'}"
    if strategy.classpath_scope_override:
        text += f", classpath scope {strategy.classpath_scope_override}"
    return text + ")"


def detect(
    ctx: typer.Context,
    module: Annotated[
        Optional[str],
        typer.Option("--module", "-m", help="Module path relative to the project root"),
    ] = None,
    mode: Annotated[
        Optional[LaunchMode],
        typer.Option("--mode", help="Launch mode (defaults to the configured one)"),
    ] = None,
    main_class: Annotated[
        Optional[str],
        typer.Option("--main-class", help="Main class to launch"),
    ] = None,
    refresh: Annotated[
        bool,
        typer.Option("--refresh", help="Ignore cached POM analysis"),
    ] = False,
) -> None:
    """
    Show launch capabilities and the selected launch strategy.

    Examples:
        mvnctl detect
        mvnctl detect -m app --refresh
    """
    debug = ctx.obj.get("debug", False) if ctx.obj else False
    setup_logging(debug)

    session = open_session(ctx, module)
    capabilities = session.detector.capabilities(refresh=refresh)

    table = Table(title=f"Module {session.target.module}", show_header=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    if capabilities is None:
        table.add_row("Effective POM", "[yellow]unavailable[/yellow]")
    else:
        table.add_row("Packaging", capabilities.packaging)
        run_plugin = "yes" if capabilities.has_run_plugin else "no"
        if capabilities.run_plugin_version:
            run_plugin += f" ({capabilities.run_plugin_version})"
        table.add_row("Spring Boot plugin", run_plugin)
        table.add_row("Exec plugin", "yes" if capabilities.has_exec_plugin else "no")
        table.add_row("Main class", capabilities.main_class or "[dim]-[/dim]")
    console.print(table)

    try:
        strategy = session.detect_strategy(mode=mode, main_class=main_class)
    except UndetectableStrategyError as e:
        print_undetectable_launch_error(e.module, e.reason)
        raise typer.Exit(ExitCode.USER_ERROR) from e
    console.print(f"[green]Launch with:[/green] {describe_strategy(strategy)}")
