"""
Maven argument vector composition.

Token order is fixed so identical inputs always produce byte-identical
commands:

    executable, --settings, -P<profiles>, -T <threads>, -pl/-f (+ also-make),
    enabled flags (configuration order), -Dkey=value (sorted by key), goals
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

from mvnctl.core.command.models import (
    ALSO_MAKE_FLAGS,
    BuildTarget,
    EmptyGoalsError,
    FlagSpec,
    MavenCommand,
)
from mvnctl.core.profiles.models import MavenProfile

logger = logging.getLogger(__name__)

EXEC_JAVA_GOAL = "exec:java"


def is_run_plugin_goal(goal: str) -> bool:
    """Whether a goal token runs the Spring Boot ``run`` goal."""
    return "spring-boot:run" in goal or ("spring-boot-maven-plugin" in goal and ":run" in goal)


def _is_also_make_token(token: str) -> bool:
    return token in ALSO_MAKE_FLAGS or "also-make" in token.lower()


def aggregate_profile_flag(profiles: Iterable[MavenProfile]) -> str | None:
    """Join explicit profile states into one ``-P`` token."""
    arguments = [arg for p in profiles if (arg := p.to_maven_argument()) is not None]
    if not arguments:
        return None
    return "-P" + ",".join(arguments)


def build_command(
    target: BuildTarget,
    goals: Sequence[str],
    profiles: Iterable[MavenProfile] = (),
    flags: Iterable[FlagSpec] = (),
    *,
    settings_path: str | None = None,
    threads: str | None = None,
    also_make: Sequence[str] = (),
    properties: Mapping[str, str] | None = None,
    use_file_flag: bool = False,
) -> MavenCommand:
    """
    Compose the argument vector for one Maven invocation.

    Args:
        target: Project root, module and resolved executable
        goals: Goal/phase tokens, appended verbatim
        profiles: Profiles with their explicit states
        flags: Enabled flags, in configuration order
        settings_path: Passed as ``--settings <path>``
        threads: Passed as ``-T <spec>``
        also_make: Also-make style tokens emitted next to the module scope
        properties: Extra ``-Dkey=value`` system properties
        use_file_flag: Scope the module with ``-f <module>/pom.xml`` instead of ``-pl``

    Returns:
        MavenCommand with argv and working directory

    Raises:
        EmptyGoalsError: If no goal tokens are given
    """
    goals = list(goals)
    if not goals:
        raise EmptyGoalsError()

    argv: list[str] = [target.executable]

    if settings_path:
        argv.extend(["--settings", settings_path])

    profile_flag = aggregate_profile_flag(profiles)
    if profile_flag:
        argv.append(profile_flag)

    if threads:
        argv.extend(["-T", threads])

    flag_tokens = [token for flag in flags for token in flag.tokens]
    also_make_tokens = list(also_make)

    if not target.is_root:
        if use_file_flag:
            argv.extend(["-f", str(target.module_pom)])
            has_also_make = any(_is_also_make_token(t) for t in also_make_tokens + flag_tokens)
            if EXEC_JAVA_GOAL in goals and not has_also_make:
                # -f alone would not build the module's reactor dependencies
                also_make_tokens.append("--also-make")
                logger.debug("Auto-adding --also-make for exec:java with -f flag")
        else:
            argv.extend(["-pl", target.module])

    filtered: list[str] = []
    if any(is_run_plugin_goal(goal) for goal in goals):
        # also-make would run the goal on every reactor module, parent included
        filtered = [t for t in also_make_tokens + flag_tokens if _is_also_make_token(t)]
        also_make_tokens = [t for t in also_make_tokens if not _is_also_make_token(t)]
        flag_tokens = [t for t in flag_tokens if not _is_also_make_token(t)]
        if filtered:
            logger.warning(
                "Dropped %s for spring-boot:run (would run on all reactor modules)",
                " ".join(filtered),
            )

    argv.extend(also_make_tokens)
    argv.extend(flag_tokens)

    if properties:
        for key in sorted(properties):
            argv.append(f"-D{key}={properties[key]}")

    argv.extend(goals)

    return MavenCommand(argv=tuple(argv), cwd=target.project_root, filtered_flags=tuple(filtered))
