"""
Layered ``.env`` loading.

Maven builds often need JAVA_HOME, MAVEN_OPTS or repository credentials that
differ per machine and per checkout. They can live in:

- ``$XDG_CONFIG_HOME/mvnctl/.env`` (per user)
- ``.env`` and ``.env.local`` in the Maven project root (per project)

Precedence: process environment > project files > user files. A variable
exported in the shell is never replaced.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values

from mvnctl.utils.project import find_project_root

from .loader import get_app_config_dir

logger = logging.getLogger(__name__)

PROJECT_ENV_FILES = (".env", ".env.local")


def read_env_file(path: Path) -> dict[str, str]:
    """Key/value pairs of one env file; empty when missing. Keys without a value are skipped."""
    if not path.is_file():
        return {}
    return {k: v for k, v in dotenv_values(path).items() if k and v is not None}


def default_project_env_paths(project_dir: Path | None = None) -> list[Path]:
    """Env files of the enclosing Maven project, or of ``project_dir`` outside one."""
    start = project_dir or Path.cwd()
    root = find_project_root(start) or start
    return [root / name for name in PROJECT_ENV_FILES]


def _apply(paths: Iterable[Path], replaceable: set[str], applied: dict[str, str]) -> None:
    for path in paths:
        values = read_env_file(Path(path))
        if values:
            logger.debug("Loading %d variables from %s", len(values), path)
        for key, value in values.items():
            if key in os.environ and key not in replaceable:
                continue
            os.environ[key] = value
            applied[key] = value


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> dict[str, str]:
    """
    Export user and project ``.env`` values into ``os.environ``.

    Args:
        project_dir: Directory inside the project (defaults to cwd)
        user_env_paths: Explicit user env files
        project_env_paths: Explicit project env files

    Returns:
        The variables set by this call, with their final values
    """
    if user_env_paths is None:
        user_env_paths = [get_app_config_dir() / ".env"]
    if project_env_paths is None:
        project_env_paths = default_project_env_paths(project_dir)

    applied: dict[str, str] = {}
    _apply(user_env_paths, set(), applied)
    # Project files may replace what the user files just set
    _apply(project_env_paths, set(applied), applied)
    return applied
