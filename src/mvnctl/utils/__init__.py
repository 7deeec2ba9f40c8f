"""Utility modules for mvnctl."""

from .project import find_project_root, get_project_root, project_hash

__all__ = [
    "find_project_root",
    "get_project_root",
    "project_hash",
]
