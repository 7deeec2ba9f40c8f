"""
mvnctl CLI - Overrides command.

Writes the logging and properties override files for the project and shows
the JVM arguments a launch would pass.
"""

from typing import Annotated

import typer

from mvnctl.cli.common import console, open_session, setup_logging
from mvnctl.cli.errors import ExitCode, print_error
from mvnctl.core.overrides import OverrideError, build_override_jvm_args


def overrides(
    ctx: typer.Context,
    show: Annotated[
        bool,
        typer.Option("--show", help="Print the generated file contents"),
    ] = False,
) -> None:
    """
    Generate override files from the configuration.

    Logging levels come from "logging.packages", properties from
    "spring.properties" in .mvnctl.json.

    Examples:
        mvnctl overrides
        mvnctl overrides --show
    """
    debug = ctx.obj.get("debug", False) if ctx.obj else False
    setup_logging(debug)

    session = open_session(ctx, None)
    try:
        logging_file, properties_file = session.generate_overrides()
    except OverrideError as e:
        print_error("Could not write override files", reason=str(e), solution="Fix .mvnctl.json")
        raise typer.Exit(ExitCode.USER_ERROR) from e

    written = [f for f in (logging_file, properties_file) if f is not None]
    if not written:
        console.print("[yellow]Nothing to override[/yellow]")
        return

    for override in written:
        console.print(f"[green]{override.kind.value}:[/green] {override.path}")
        if show:
            console.print(override.path.read_text(encoding="utf-8"), highlight=False, markup=False)

    jvm_args = build_override_jvm_args(
        logging_file, properties_file, session.config.logging.overrides()
    )
    if jvm_args:
        console.print("[dim]JVM arguments:[/dim]")
        for arg in jvm_args:
            console.print(f"  {arg}", highlight=False, markup=False)
