"""
Maven executable resolution.

A project-local wrapper script wins over the system tool so builds use the
Maven version the project pins.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

UNIX_WRAPPERS = ("mvnw",)
WINDOWS_WRAPPERS = ("mvnw.bat", "mvnw.cmd", "mvnw")


def _is_windows() -> bool:
    return sys.platform == "win32"


def system_maven_command() -> str:
    """Name of the system Maven launcher for this platform."""
    return "mvn.cmd" if _is_windows() else "mvn"


def find_wrapper(project_root: Path) -> Path | None:
    """
    Locate a usable Maven wrapper in the project root.

    On Unix the script must also carry the executable bit.
    """
    candidates = WINDOWS_WRAPPERS if _is_windows() else UNIX_WRAPPERS
    for name in candidates:
        path = project_root / name
        if not path.is_file():
            continue
        if _is_windows() or os.access(path, os.X_OK):
            return path
    return None


def resolve_maven_executable(project_root: Path) -> str:
    """
    Resolve the executable used for every command in a project.

    Args:
        project_root: Reactor root directory

    Returns:
        Absolute wrapper path when a usable wrapper exists, otherwise the
        system tool name (``mvn`` or ``mvn.cmd``)

    Example:
        >>> resolve_maven_executable(Path("/work/shop"))
        '/work/shop/mvnw'
    """
    wrapper = find_wrapper(project_root)
    if wrapper is not None:
        return str(wrapper.absolute())
    return system_maven_command()
