"""
Project root discovery utilities for mvnctl.

A Maven project root is the outermost directory of a contiguous chain of
directories that each contain a ``pom.xml``. Explicit markers (a Maven
wrapper, a ``.mvn/`` directory or a ``.mvnctl.json`` file) stop the search
early, since they only ever live at the reactor root.
"""

import hashlib
from pathlib import Path

# Markers that pin the reactor root, in order of priority
PROJECT_ROOT_MARKERS = [
    ".mvnctl.json",  # mvnctl project configuration
    ".mvn",  # Maven extensions/config directory
    "mvnw",  # Maven wrapper (Unix)
    "mvnw.cmd",  # Maven wrapper (Windows)
]

POM_FILE = "pom.xml"


def _has_marker(directory: Path) -> bool:
    return any((directory / marker).exists() for marker in PROJECT_ROOT_MARKERS)


def find_project_root(start: Path | None = None) -> Path | None:
    """
    Find the Maven project root by searching upward from ``start``.

    Args:
        start: Directory to start searching from. Defaults to current working directory.

    Returns:
        Path to the project root directory, or None if no pom.xml was found.

    Example:
        >>> find_project_root(Path("/project/app/src/main/java"))
        PosixPath('/project')
    """
    if start is None:
        start = Path.cwd()

    current = start.resolve()
    candidate: Path | None = None

    while True:
        has_pom = (current / POM_FILE).exists()
        if has_pom and _has_marker(current):
            return current
        if has_pom:
            candidate = current
        elif candidate is not None:
            # Left the contiguous chain of poms; the last one was the reactor root
            return candidate

        if current == current.parent:  # Filesystem root
            return candidate
        current = current.parent


def get_project_root(start: Path | None = None) -> Path:
    """
    Get the project root directory, raising an error if not found.

    Args:
        start: Directory to start searching from. Defaults to current working directory.

    Returns:
        Path to the project root directory.

    Raises:
        FileNotFoundError: If no pom.xml can be found above ``start``.
    """
    root = find_project_root(start)
    if root is None:
        start_dir = start.resolve() if start else Path.cwd()
        raise FileNotFoundError(
            f"Could not find a Maven project from {start_dir}. "
            f"Expected a {POM_FILE} in this directory or one of its parents"
        )
    return root


def project_hash(project_root: Path) -> str:
    """
    Stable short hash of a project root path.

    Used to key per-project caches and generated override files. Only the
    path string is hashed, so the same checkout always maps to the same key.

    Args:
        project_root: Project root directory

    Returns:
        First 8 hex characters of the MD5 digest of the path
    """
    digest = hashlib.md5(str(project_root).encode("utf-8")).hexdigest()
    return digest[:8]
