"""
Data models for generated override files.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path


class OverrideError(Exception):
    """Base exception for override generation errors."""


class InvalidOverrideError(OverrideError):
    """An override entry cannot be written as a flat key=value line."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid override '{key}': {reason}")


class OverrideKind(str, Enum):
    """Kind of generated override file."""

    LOGGING = "logging"  # log4j 1.x properties configuration
    PROPERTIES = "properties"  # Application properties (additional config location)

    @property
    def file_prefix(self) -> str:
        if self is OverrideKind.LOGGING:
            return "log4j-override"
        return "application-override"

    def file_name(self, hash_key: str) -> str:
        return f"{self.file_prefix}-{hash_key}.properties"


@dataclass(frozen=True)
class OverrideFile:
    """
    A generated override file.

    Attributes:
        kind: What the file configures
        path: Absolute file path
        hash_key: Project hash the file name derives from
        generated_at: When the file was last written
    """

    kind: OverrideKind
    path: Path
    hash_key: str
    generated_at: datetime

    @property
    def url(self) -> str:
        """``file://`` URL used in JVM reference arguments."""
        return self.path.absolute().as_uri()
