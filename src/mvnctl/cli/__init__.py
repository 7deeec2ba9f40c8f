"""
mvnctl CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from mvnctl import __version__
from mvnctl.cli import check, detect, launch, overrides, profiles, run, starters
from mvnctl.core.config.env import load_layered_env

# Help panel names for command grouping
PANEL_BUILD = "Build and Run"
PANEL_STATE = "Module State"
PANEL_INSTALL = "Setup"

# Create the main Typer app
app = typer.Typer(
    name="mvnctl",
    help="Run Maven goals and launch applications of multi-module projects",
    no_args_is_help=True,
    add_completion=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    project: Optional[Path] = typer.Option(
        None,
        "--project",
        "-C",
        help="Project directory (defaults to the enclosing Maven project)",
    ),
) -> None:
    """
    mvnctl - Maven process orchestration.

    Composes Maven command lines from per-module profile and flag state,
    decides how to launch an application (spring-boot:run or exec:java),
    and runs Maven with streamed output and clean process-group shutdown.

    Common Workflows:
        mvnctl run clean install              # Build with saved state
        mvnctl run -m api -P dev test         # One module, extra profile
        mvnctl profiles toggle dev            # Persist a profile choice
        mvnctl detect -m api                  # Show how api would start
        mvnctl launch -m api                  # Start the application
        mvnctl launch --dry-run               # Print the launch command
    """
    # Precedence: OS env > project .env > user .env
    load_layered_env(project_dir=project)

    ctx.obj = {"debug": debug, "project": project}


# =============================================================================
# Build and Run
# =============================================================================

app.command(name="run", rich_help_panel=PANEL_BUILD)(run.run)
app.command(name="launch", rich_help_panel=PANEL_BUILD)(launch.launch)
app.command(name="detect", rich_help_panel=PANEL_BUILD)(detect.detect)


# =============================================================================
# Module State
# =============================================================================

app.add_typer(profiles.app, name="profiles", rich_help_panel=PANEL_STATE)
app.add_typer(starters.app, name="starters", rich_help_panel=PANEL_STATE)
app.command(name="overrides", rich_help_panel=PANEL_STATE)(overrides.overrides)


# =============================================================================
# Setup
# =============================================================================


@app.command(rich_help_panel=PANEL_INSTALL)
def version() -> None:
    """Show mvnctl version and exit."""
    console.print(f"mvnctl version {__version__}")
    raise typer.Exit(0)


app.command(name="check", rich_help_panel=PANEL_INSTALL)(check.check)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
