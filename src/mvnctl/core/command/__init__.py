"""
Maven command construction.
"""

from mvnctl.core.command.builder import (
    aggregate_profile_flag,
    build_command,
    is_run_plugin_goal,
)
from mvnctl.core.command.executable import (
    find_wrapper,
    resolve_maven_executable,
    system_maven_command,
)
from mvnctl.core.command.models import (
    DEFAULT_FLAGS,
    ROOT_MODULE,
    BuildTarget,
    CommandError,
    EmptyGoalsError,
    FlagSpec,
    MavenCommand,
    split_flag_text,
)

__all__ = [
    "BuildTarget",
    "CommandError",
    "DEFAULT_FLAGS",
    "EmptyGoalsError",
    "FlagSpec",
    "MavenCommand",
    "ROOT_MODULE",
    "aggregate_profile_flag",
    "build_command",
    "find_wrapper",
    "is_run_plugin_goal",
    "resolve_maven_executable",
    "split_flag_text",
    "system_maven_command",
]
