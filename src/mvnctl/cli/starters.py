"""
mvnctl CLI - Starters commands.

Manage remembered entry points used when launching with exec:java.
"""

from typing import Annotated, Optional

import typer
from rich.table import Table

from mvnctl.cli.common import console, open_session, setup_logging
from mvnctl.cli.errors import ExitCode, print_error
from mvnctl.core.detection import StarterRegistry
from mvnctl.core.services import ModuleSession
from mvnctl.core.store import StoreError

app = typer.Typer(
    name="starters",
    help="Manage remembered main classes",
    no_args_is_help=False,
)

ModuleOption = Annotated[
    Optional[str],
    typer.Option("--module", "-m", help="Module path relative to the project root"),
]


def _session(ctx: typer.Context, module: str | None) -> ModuleSession:
    debug = ctx.obj.get("debug", False) if ctx.obj else False
    setup_logging(debug)
    return open_session(ctx, module)


def _registry(session: ModuleSession) -> StarterRegistry:
    return StarterRegistry(session.store)


def _save(registry: StarterRegistry) -> None:
    try:
        registry.save()
    except StoreError as e:
        print_error(str(e), solution="Check that the cache directory is writable")
        raise typer.Exit(ExitCode.GENERAL_ERROR)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context, module: ModuleOption = None) -> None:
    """
    List remembered starters.

    Examples:
        mvnctl starters
        mvnctl starters scan -m app
        mvnctl starters add com.example.Main --default
    """
    if ctx.invoked_subcommand is not None:
        return
    registry = _registry(_session(ctx, module))
    if not registry.starters:
        console.print("[yellow]No starters registered[/yellow]")
        console.print("[dim]Find candidates with: mvnctl starters scan[/dim]")
        return

    table = Table(title="Starters")
    table.add_column("Label", style="cyan")
    table.add_column("Main class")
    table.add_column("Default")
    table.add_column("Last used")
    for starter in registry.starters:
        table.add_row(
            starter.label,
            starter.fqcn,
            "[green]✓[/green]" if starter.is_default else "",
            "[green]✓[/green]" if starter.fqcn == registry.last_used else "",
        )
    console.print(table)


@app.command()
def scan(ctx: typer.Context, module: ModuleOption = None) -> None:
    """Search the module sources for classes with a main method."""
    session = _session(ctx, module)
    candidates = session.detector.main_class_candidates()
    if not candidates:
        console.print("[yellow]No main class candidates found[/yellow]")
        return
    for fqcn in candidates:
        console.print(fqcn, highlight=False)


@app.command()
def add(
    ctx: typer.Context,
    fqcn: Annotated[str, typer.Argument(help="Fully qualified main class")],
    label: Annotated[Optional[str], typer.Option("--label", help="Display name")] = None,
    default: Annotated[bool, typer.Option("--default", help="Make it the default")] = False,
    module: ModuleOption = None,
) -> None:
    """Remember a main class."""
    registry = _registry(_session(ctx, module))
    starter = registry.add(fqcn, label=label, is_default=default)
    _save(registry)
    console.print(f"[green]Added[/green] {starter.display_name()}")


@app.command()
def remove(
    ctx: typer.Context,
    fqcn: Annotated[str, typer.Argument(help="Fully qualified main class")],
    module: ModuleOption = None,
) -> None:
    """Forget a main class."""
    registry = _registry(_session(ctx, module))
    if not registry.remove(fqcn):
        print_error(f"Starter not found: {fqcn}", solution="mvnctl starters")
        raise typer.Exit(ExitCode.USER_ERROR)
    _save(registry)
    console.print(f"[green]Removed[/green] {fqcn}")


@app.command(name="default")
def set_default(
    ctx: typer.Context,
    fqcn: Annotated[str, typer.Argument(help="Fully qualified main class")],
    module: ModuleOption = None,
) -> None:
    """Make a remembered main class the default."""
    registry = _registry(_session(ctx, module))
    if not registry.set_default(fqcn):
        print_error(
            f"Starter not found: {fqcn}",
            solution=f"mvnctl starters add {fqcn} --default",
        )
        raise typer.Exit(ExitCode.USER_ERROR)
    _save(registry)
    console.print(f"[green]Default starter:[/green] {fqcn}")
