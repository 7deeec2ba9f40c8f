"""
Data models for Maven command construction.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from pathlib import Path

# Module id meaning "the reactor root itself"
ROOT_MODULE = "."

ALSO_MAKE_FLAGS = ("--also-make", "--also-make-dependents", "-am", "-amd")


class CommandError(Exception):
    """Base exception for command construction errors."""


class EmptyGoalsError(CommandError):
    """No goal tokens were given."""

    def __init__(self) -> None:
        super().__init__("At least one goal or phase is required")


@dataclass(frozen=True)
class BuildTarget:
    """
    What a command runs against.

    Attributes:
        project_root: Reactor root directory (holds the top-level pom.xml)
        module: Module path relative to the root, or ROOT_MODULE
        executable: Resolved Maven executable (wrapper path or tool name)
    """

    project_root: Path
    module: str = ROOT_MODULE
    executable: str = "mvn"

    @property
    def is_root(self) -> bool:
        return self.module in (ROOT_MODULE, "")

    @property
    def module_dir(self) -> Path:
        if self.is_root:
            return self.project_root
        return self.project_root / self.module

    @property
    def module_pom(self) -> Path:
        return self.module_dir / "pom.xml"


def split_flag_text(text: str) -> tuple[str, ...]:
    """
    Tokenize a user-authored flag string.

    Text after the first comma is an alias list and is dropped; the rest is
    split on whitespace.

    Examples:
        >>> split_flag_text("-U, --update-snapshots")
        ('-U',)
        >>> split_flag_text("-T 4")
        ('-T', '4')
    """
    return tuple(text.split(",", 1)[0].split())


@dataclass(frozen=True)
class FlagSpec:
    """
    A toggleable Maven flag.

    Attributes:
        name: Display name
        tokens: Argument tokens appended verbatim when enabled
        enabled_by_default: Initial toggle state at module load
    """

    name: str
    tokens: tuple[str, ...]
    enabled_by_default: bool = False

    @classmethod
    def from_string(cls, name: str, flag: str, enabled_by_default: bool = False) -> FlagSpec:
        return cls(name=name, tokens=split_flag_text(flag), enabled_by_default=enabled_by_default)

    @property
    def text(self) -> str:
        return " ".join(self.tokens)


DEFAULT_FLAGS: tuple[FlagSpec, ...] = (
    FlagSpec("Work offline", ("-o",)),
    FlagSpec("Force update snapshots", ("-U",)),
    FlagSpec("Debug output", ("-X",)),
    FlagSpec("Skip tests", ("-DskipTests",)),
    FlagSpec("Fail fast", ("--fail-fast",)),
    FlagSpec("Fail at end", ("--fail-at-end",)),
    FlagSpec("Build dependencies", ("--also-make",)),
    FlagSpec("Build dependents", ("--also-make-dependents",)),
)


@dataclass(frozen=True)
class MavenCommand:
    """
    A fully composed Maven invocation.

    Attributes:
        argv: Argument vector, ``argv[0]`` is the executable
        cwd: Working directory to spawn in (the project root)
        filtered_flags: Tokens dropped because the goals are incompatible with them
    """

    argv: tuple[str, ...]
    cwd: Path
    filtered_flags: tuple[str, ...] = field(default=())

    @property
    def executable(self) -> str:
        return self.argv[0]

    @property
    def args(self) -> tuple[str, ...]:
        return self.argv[1:]

    def display(self) -> str:
        """Shell-quoted command line for logs and dry runs."""
        return shlex.join(self.argv)
