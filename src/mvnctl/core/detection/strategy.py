"""
Launch strategy decision table and launch goal composition.
"""

from __future__ import annotations

import logging
import re
from typing import Sequence

from mvnctl.core.config.models import LaunchMode, SchemeCutoff
from mvnctl.core.detection.models import (
    ExecPluginStrategy,
    LaunchCapabilities,
    LaunchStrategy,
    PropertyScheme,
    RunPluginStrategy,
    UndetectableStrategyError,
)

logger = logging.getLogger(__name__)

WAR_CLASSPATH_SCOPE = "compile"

DEFAULT_SCHEME_CUTOFFS: tuple[SchemeCutoff, ...] = (
    SchemeCutoff(min_version="0", scheme="legacy"),
    SchemeCutoff(min_version="2.0.0", scheme="modern"),
)

_VERSION_PART_RE = re.compile(r"\d+")


def version_key(version: str) -> tuple[int, ...]:
    """
    Numeric components of a version string.

    Qualifiers are ignored: ``1.5.10.RELEASE`` and ``2.0.0-M1`` compare by
    their numeric prefix only.

    Examples:
        >>> version_key("1.5.10.RELEASE")
        (1, 5, 10)
    """
    parts: list[int] = []
    for piece in re.split(r"[.\-]", version.strip()):
        match = _VERSION_PART_RE.match(piece)
        if not match:
            break
        parts.append(int(match.group()))
        if match.end() != len(piece):
            break
    return tuple(parts)


def _compare_versions(left: tuple[int, ...], right: tuple[int, ...]) -> int:
    width = max(len(left), len(right))
    padded_left = left + (0,) * (width - len(left))
    padded_right = right + (0,) * (width - len(right))
    return (padded_left > padded_right) - (padded_left < padded_right)


def select_property_scheme(
    version: str | None,
    cutoffs: Sequence[SchemeCutoff] = DEFAULT_SCHEME_CUTOFFS,
) -> PropertyScheme:
    """
    Pick the property naming scheme for a run-plugin version.

    The row with the highest ``min_version`` not above ``version`` wins. An
    unknown or unparseable version uses the modern scheme.

    Examples:
        >>> select_property_scheme("1.5.22.RELEASE")
        <PropertyScheme.LEGACY: 'legacy'>
        >>> select_property_scheme("2.7.0")
        <PropertyScheme.MODERN: 'modern'>
    """
    if not version:
        return PropertyScheme.MODERN
    key = version_key(version)
    if not key:
        logger.debug("Unparseable run plugin version %r, using modern scheme", version)
        return PropertyScheme.MODERN

    best: SchemeCutoff | None = None
    best_key: tuple[int, ...] = ()
    for cutoff in cutoffs:
        cutoff_key = version_key(cutoff.min_version)
        if _compare_versions(cutoff_key, key) > 0:
            continue
        if best is None or _compare_versions(cutoff_key, best_key) >= 0:
            best = cutoff
            best_key = cutoff_key

    if best is None:
        return PropertyScheme.MODERN
    return PropertyScheme(best.scheme)


def _exec_strategy(
    capabilities: LaunchCapabilities | None, main_class: str | None
) -> ExecPluginStrategy:
    packaging = capabilities.packaging if capabilities else "jar"
    scope = WAR_CLASSPATH_SCOPE if packaging == "war" else None
    return ExecPluginStrategy(
        main_class=main_class,
        classpath_scope_override=scope,
        packaging=packaging,
    )


def _run_strategy(
    capabilities: LaunchCapabilities | None,
    main_class_override: str | None,
    cutoffs: Sequence[SchemeCutoff],
) -> RunPluginStrategy:
    version = capabilities.run_plugin_version if capabilities else None
    return RunPluginStrategy(
        main_class_override=main_class_override,
        plugin_version=version,
        scheme=select_property_scheme(version, cutoffs),
    )


def decide_launch_strategy(
    capabilities: LaunchCapabilities | None,
    mode: LaunchMode = LaunchMode.AUTO,
    *,
    module: str = ".",
    main_class_hint: str | None = None,
    cutoffs: Sequence[SchemeCutoff] = DEFAULT_SCHEME_CUTOFFS,
) -> LaunchStrategy:
    """
    Decide how to start a module's entry point.

    Args:
        capabilities: Parsed effective POM, or None when the query failed
        mode: Launch mode; the forced modes skip detection entirely
        module: Module id, used in error messages
        main_class_hint: Main class chosen by the user or found in sources
        cutoffs: Run-plugin version to property scheme table

    Returns:
        RunPluginStrategy or ExecPluginStrategy

    Raises:
        UndetectableStrategyError: If auto mode finds neither path
    """
    if mode is LaunchMode.FORCE_RUN:
        logger.info("Launch mode force-run: using spring-boot:run")
        return _run_strategy(capabilities, main_class_hint, cutoffs)

    if mode is LaunchMode.FORCE_EXEC:
        main_class = main_class_hint or (capabilities.main_class if capabilities else None)
        logger.info("Launch mode force-exec: using exec:java")
        return _exec_strategy(capabilities, main_class)

    if capabilities is not None and capabilities.can_use_run_plugin:
        logger.info(
            "Run plugin detected (packaging %s), using spring-boot:run", capabilities.packaging
        )
        return _run_strategy(capabilities, main_class_hint, cutoffs)

    main_class = main_class_hint or (capabilities.main_class if capabilities else None)
    has_exec_plugin = capabilities is not None and capabilities.has_exec_plugin
    if has_exec_plugin or main_class:
        logger.info("Using exec:java with main class %s", main_class)
        return _exec_strategy(capabilities, main_class)

    if capabilities is None:
        reason = "the effective POM could not be read and no main class was found"
    elif capabilities.has_run_plugin:
        reason = (
            f"spring-boot-maven-plugin cannot run '{capabilities.packaging}' packaging "
            "and no main class was found"
        )
    else:
        reason = "no spring-boot-maven-plugin, no exec-maven-plugin and no main class found"
    raise UndetectableStrategyError(module, reason)


def build_launch_goals(
    strategy: LaunchStrategy,
    profiles: Sequence[str] = (),
    jvm_args: Sequence[str] = (),
) -> list[str]:
    """
    Property flags and goal token for a launch.

    Args:
        strategy: Selected strategy
        profiles: Application profiles to activate (run plugin only)
        jvm_args: JVM arguments for the launched application

    Returns:
        Tokens to append after the generic Maven flags, goal last

    Example:
        >>> goals = build_launch_goals(ExecPluginStrategy("com.example.App", "compile", "war"))
        >>> goals[0], goals[-1]
        ('-Dexec.mainClass=com.example.App', 'exec:java')
    """
    tokens: list[str] = []

    if isinstance(strategy, RunPluginStrategy):
        scheme = strategy.scheme
        if profiles:
            tokens.append(f"-D{scheme.profiles_property}={','.join(profiles)}")
        if jvm_args:
            tokens.append(f"-D{scheme.jvm_arguments_property}={' '.join(jvm_args)}")
        if strategy.main_class_override:
            tokens.append(f"-D{scheme.main_class_property}={strategy.main_class_override}")
        if scheme is PropertyScheme.LEGACY and strategy.plugin_version:
            # Short prefix may resolve to a newer plugin than the one configured
            tokens.append(
                f"org.springframework.boot:spring-boot-maven-plugin:{strategy.plugin_version}:run"
            )
        else:
            tokens.append(strategy.goal_name)
        return tokens

    if strategy.main_class:
        tokens.append(f"-Dexec.mainClass={strategy.main_class}")
    if strategy.classpath_scope_override:
        tokens.append(f"-Dexec.classpathScope={strategy.classpath_scope_override}")
    tokens.append("-Dexec.cleanupDaemonThreads=false")
    if jvm_args:
        tokens.append(f"-Dexec.args={' '.join(jvm_args)}")
    tokens.append(strategy.goal_name)
    return tokens
