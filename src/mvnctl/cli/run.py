"""
mvnctl CLI - Run command.

Runs Maven goals for a module with the module's profile and flag state.
"""

from typing import Annotated, Optional

import typer

from mvnctl.cli.common import console, open_session, setup_logging, start_or_exit, stream_process
from mvnctl.cli.errors import ExitCode, print_error
from mvnctl.core.command import CommandError


def parse_properties(defines: list[str]) -> dict[str, str]:
    """Turn ``key=value`` entries into a mapping. A bare key maps to "true"."""
    properties: dict[str, str] = {}
    for entry in defines:
        key, sep, value = entry.partition("=")
        key = key.strip()
        if not key:
            raise typer.BadParameter(f"Invalid property: {entry!r}", param_hint="-D")
        properties[key] = value if sep else "true"
    return properties


def run(
    ctx: typer.Context,
    goals: Annotated[
        Optional[list[str]],
        typer.Argument(help="Goals or configured goal shortcuts (e.g. clean install)"),
    ] = None,
    module: Annotated[
        Optional[str],
        typer.Option("--module", "-m", help="Module path relative to the project root"),
    ] = None,
    profile: Annotated[
        Optional[list[str]],
        typer.Option("--profile", "-P", help="Enable a profile; prefix with ! to disable it"),
    ] = None,
    flag: Annotated[
        Optional[list[str]],
        typer.Option("--flag", "-F", help="Enable a flag by name (e.g. 'Skip tests')"),
    ] = None,
    no_flag: Annotated[
        Optional[list[str]],
        typer.Option("--no-flag", help="Disable a flag by name"),
    ] = None,
    define: Annotated[
        Optional[list[str]],
        typer.Option("--define", "-D", help="System property key=value"),
    ] = None,
    saved: Annotated[
        bool,
        typer.Option("--saved/--no-saved", help="Start from the module's saved profiles and flags"),
    ] = True,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Print the command without running it"),
    ] = False,
) -> None:
    """
    Run Maven goals for a module.

    Examples:
        mvnctl run clean install
        mvnctl run -m app -P dev -P '!slow' -F 'Skip tests' test
        mvnctl run --dry-run -D env=local verify
    """
    debug = ctx.obj.get("debug", False) if ctx.obj else False
    setup_logging(debug)

    session = open_session(ctx, module)
    if saved:
        session.load_saved_state()
    session.apply_profile_arguments(profile or [])

    for name, enabled in [(n, True) for n in flag or []] + [(n, False) for n in no_flag or []]:
        try:
            session.set_flag(name, enabled)
        except KeyError:
            known = ", ".join(f"{f.name} ({f.text})" for f in session.flags)
            print_error(f"Unknown flag: {name}", reason=f"Known flags: {known}")
            raise typer.Exit(ExitCode.USER_ERROR)

    try:
        command = session.build(goals or [], parse_properties(define or []))
    except CommandError as e:
        print_error(str(e), solution="mvnctl run clean install")
        raise typer.Exit(ExitCode.USER_ERROR) from e

    if dry_run:
        console.print(command.display(), highlight=False, soft_wrap=True)
        for name in command.filtered_flags:
            console.print(f"[dim]Dropped {name} (not supported by this goal)[/dim]")
        raise typer.Exit(ExitCode.SUCCESS)

    console.print(f"[dim]$ {command.display()}[/dim]", highlight=False, soft_wrap=True)
    handle = start_or_exit(session.slot.start, command.argv, command.cwd)
    raise typer.Exit(stream_process(session, handle))
