"""
mvnctl CLI - Check command.

Verifies that Maven can be started for the current project.
"""

import typer

from mvnctl.cli.common import console, resolve_project, setup_logging
from mvnctl.cli.errors import ExitCode, print_error, print_maven_not_found_error
from mvnctl.core.command import find_wrapper, resolve_maven_executable
from mvnctl.core.config import get_project_config_path, get_user_config_path
from mvnctl.core.process import MavenQueryError, SpawnError, check_maven_availability


def check(ctx: typer.Context) -> None:
    """
    Check the Maven installation used for this project.

    Examples:
        mvnctl check
        mvnctl --project ../shop check
    """
    debug = ctx.obj.get("debug", False) if ctx.obj else False
    setup_logging(debug)

    root = resolve_project(ctx)
    executable = resolve_maven_executable(root)
    source = "Maven wrapper" if find_wrapper(root) is not None else "system Maven"

    console.print(f"[bold]Project:[/bold] {root}")
    console.print(f"[bold]Maven:[/bold] {executable} [dim]({source})[/dim]")
    for label, path in (
        ("User config", get_user_config_path()),
        ("Project config", get_project_config_path(root)),
    ):
        state = "" if path.exists() else " [dim](not present)[/dim]"
        console.print(f"[bold]{label}:[/bold] {path}{state}")

    try:
        banner = check_maven_availability(root)
    except SpawnError as e:
        print_maven_not_found_error(executable, e.reason)
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e
    except MavenQueryError as e:
        print_error(f"{executable} --version failed", reason=str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e

    console.print(f"[green]✓[/green] {banner}", highlight=False)
