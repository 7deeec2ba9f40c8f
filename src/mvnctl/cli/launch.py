"""
mvnctl CLI - Launch command.

Starts a module's application with spring-boot:run or exec:java, with the
configured logging and property overrides applied.
"""

from typing import Annotated, Optional

import typer

from mvnctl.cli.common import console, open_session, setup_logging, start_or_exit, stream_process
from mvnctl.cli.detect import describe_strategy
from mvnctl.cli.errors import ExitCode, print_error, print_undetectable_launch_error
from mvnctl.core.config import LaunchMode
from mvnctl.core.detection import UndetectableStrategyError
from mvnctl.core.overrides import OverrideError


def launch(
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
    profile: Annotated[
        Optional[list[str]],
        typer.Option("--profile", "-P", help="Maven profile; prefix with ! to disable it"),
    ] = None,
    refresh: Annotated[
        bool,
        typer.Option("--refresh", help="Ignore cached POM analysis"),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Print the launch command without running it"),
    ] = False,
) -> None:
    """
    Launch the application of a module.

    Examples:
        mvnctl launch
        mvnctl launch -m api --mode force-exec --main-class com.example.Main
        mvnctl launch --dry-run
    """
    debug = ctx.obj.get("debug", False) if ctx.obj else False
    setup_logging(debug)

    session = open_session(ctx, module)
    session.load_saved_state()
    session.apply_profile_arguments(profile or [])

    try:
        plan = session.prepare_launch(mode=mode, main_class=main_class, refresh=refresh)
    except UndetectableStrategyError as e:
        print_undetectable_launch_error(e.module, e.reason)
        raise typer.Exit(ExitCode.USER_ERROR) from e
    except OverrideError as e:
        print_error("Could not write override files", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR) from e

    console.print(f"[green]Launch with:[/green] {describe_strategy(plan.strategy)}")
    for override in plan.override_files:
        console.print(f"[dim]{override.kind.value} overrides: {override.path}[/dim]")

    if dry_run:
        console.print(plan.command.display(), highlight=False, soft_wrap=True)
        raise typer.Exit(ExitCode.SUCCESS)

    console.print(f"[dim]$ {plan.command.display()}[/dim]", highlight=False, soft_wrap=True)
    handle = start_or_exit(session.slot.start, plan.command.argv, plan.command.cwd, env=plan.env)
    if main_class:
        session.remember_starter(main_class)
    raise typer.Exit(stream_process(session, handle))
