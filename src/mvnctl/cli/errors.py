"""
Standardized error handling and exit codes for the mvnctl CLI.

This module provides consistent error messaging with actionable guidance
and standardized exit codes across all CLI commands.
"""

import logging
import sys
from enum import IntEnum

from rich.console import Console

logger = logging.getLogger(__name__)

console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for mvnctl operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Generic error, or the Maven process failed."""

    USER_ERROR = 2
    """User configuration or input error (actionable by user)."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
    doc_url: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it
        doc_url: Optional documentation URL for more help

    Example:
        >>> print_error(
        ...     "Maven not found",
        ...     reason="Neither ./mvnw nor mvn could be started",
        ...     solution="Install Maven or add the Maven wrapper (mvn wrapper:wrapper)",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")

    if doc_url:
        console.print(f"[dim]Docs: {doc_url}[/dim]")

    if sys.exc_info()[0] is not None:
        # Shown with --debug only
        logger.debug("%s", problem, exc_info=True)


def print_not_project_error(start: str) -> None:
    """Print error when no Maven project encloses the working directory."""
    print_error(
        "Not in a Maven project",
        reason=f"No pom.xml found in {start} or any parent directory",
        solution="cd to your project  # or pass --project <dir>",
    )


def print_maven_not_found_error(executable: str, reason: str) -> None:
    """Print error when Maven cannot be started."""
    print_error(
        f"Could not start Maven ({executable})",
        reason=reason,
        solution="Install Maven and put it on PATH, or add the Maven wrapper: mvn wrapper:wrapper",
        doc_url="https://maven.apache.org/wrapper/",
    )


def print_undetectable_launch_error(module: str, reason: str) -> None:
    """Print error when no launch strategy could be determined."""
    print_error(
        f"Cannot determine how to launch '{module}'",
        reason=reason,
        solution="mvnctl launch --main-class com.example.Main  # or --mode force-run",
    )
