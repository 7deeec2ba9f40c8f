"""
mvnctl CLI - Profiles commands.

List a module's Maven profiles and change their saved states.
"""

from typing import Annotated, Optional

import typer
from rich.table import Table

from mvnctl.cli.common import console, open_session, setup_logging
from mvnctl.cli.errors import ExitCode, print_error
from mvnctl.core.process import ProcessError
from mvnctl.core.profiles import ProfileState
from mvnctl.core.services import ModuleSession

app = typer.Typer(
    name="profiles",
    help="List and toggle Maven profiles",
    no_args_is_help=False,
)

ModuleOption = Annotated[
    Optional[str],
    typer.Option("--module", "-m", help="Module path relative to the project root"),
]

STATE_STYLES = {
    ProfileState.DEFAULT: "dim",
    ProfileState.ENABLED: "green",
    ProfileState.DISABLED: "red",
}


def _load(ctx: typer.Context, module: str | None, refresh: bool = False) -> ModuleSession:
    debug = ctx.obj.get("debug", False) if ctx.obj else False
    setup_logging(debug)
    session = open_session(ctx, module)
    try:
        session.load_profiles(refresh=refresh)
    except ProcessError as e:
        print_error("Could not list Maven profiles", reason=str(e), solution="mvnctl check")
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e
    return session


def _print_profiles(session: ModuleSession) -> None:
    if not len(session.profiles):
        console.print("[yellow]No profiles found[/yellow]")
        return

    table = Table(title=f"Profiles of {session.target.module}")
    table.add_column("Profile", style="cyan")
    table.add_column("State")
    table.add_column("Auto-activated")
    table.add_column("Active")
    for profile in session.profiles:
        style = STATE_STYLES[profile.state]
        table.add_row(
            profile.name,
            f"[{style}]{profile.state.value}[/{style}]",
            "yes" if profile.auto_activated else "",
            "[green]✓[/green]" if profile.is_active else "",
        )
    console.print(table)

    flag = session.profiles.aggregate_flag()
    if flag:
        console.print(f"[dim]Maven argument: {flag}[/dim]", highlight=False)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    module: ModuleOption = None,
    refresh: Annotated[
        bool,
        typer.Option("--refresh", help="Query Maven again instead of using the cache"),
    ] = False,
) -> None:
    """
    List profiles with their saved states.

    Examples:
        mvnctl profiles
        mvnctl profiles -m api --refresh
        mvnctl profiles toggle dev
    """
    if ctx.invoked_subcommand is not None:
        return
    _print_profiles(_load(ctx, module, refresh))


@app.command()
def toggle(
    ctx: typer.Context,
    names: Annotated[list[str], typer.Argument(help="Profiles to toggle")],
    module: ModuleOption = None,
) -> None:
    """
    Toggle profiles and save the result.

    Auto-activated profiles switch between default and disabled, others
    between default and enabled.
    """
    session = _load(ctx, module)
    for name in names:
        try:
            session.toggle_profile(name)
        except KeyError:
            print_error(
                f"Unknown profile: {name}",
                solution="mvnctl profiles --refresh  # to rediscover profiles",
            )
            raise typer.Exit(ExitCode.USER_ERROR)
    _print_profiles(session)


@app.command()
def reset(
    ctx: typer.Context,
    module: ModuleOption = None,
) -> None:
    """Return every profile to its default state."""
    session = _load(ctx, module)
    session.profiles.reset()
    session.save_preferences()
    _print_profiles(session)
