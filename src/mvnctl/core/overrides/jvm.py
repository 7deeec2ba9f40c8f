"""
JVM arguments referencing generated override files.

Both logging generations are covered at once: the log4j 1.x file reference
for legacy applications and ``-Dlogging.level.*`` for modern ones.
"""

from __future__ import annotations

from typing import Sequence

from mvnctl.core.overrides.models import OverrideFile

LOG4J_BOOTSTRAP_ARGS = (
    "-Dlog4j.ignoreTCL=true",
    "-Dlog4j.defaultInitOverride=true",
    "-Dlog4j.configuratorClass=org.apache.log4j.PropertyConfigurator",
)


def build_override_jvm_args(
    logging_file: OverrideFile | None = None,
    properties_file: OverrideFile | None = None,
    level_overrides: Sequence[tuple[str, str]] = (),
) -> list[str]:
    """
    Compose JVM arguments for a launch.

    Args:
        logging_file: Generated log4j file, if any
        properties_file: Generated application properties file, if any
        level_overrides: (package, level) pairs, emitted for both generations

    Returns:
        JVM arguments in a stable order
    """
    args: list[str] = []

    if logging_file is not None:
        args.extend(LOG4J_BOOTSTRAP_ARGS)
        args.append(f"-Dlog4j.configuration={logging_file.url}")

    for package, level in level_overrides:
        upper = level.upper()
        args.append(f"-Dlogging.level.{package}={upper}")
        args.append(f"-Dlog4j.logger.{package}={upper}")

    if properties_file is not None:
        args.append(f"-Dspring.config.additional-location={properties_file.url}")

    return args


def java_tool_options_env(logging_file: OverrideFile | None) -> dict[str, str]:
    """
    Environment for the launched process.

    ``JAVA_TOOL_OPTIONS`` is read by every JVM the build forks, which reaches
    applications whose own classloader would otherwise find a bundled
    log4j.properties first.
    """
    if logging_file is None:
        return {}
    options = [
        "-Dlog4j.ignoreTCL=true",
        "-Dlog4j.defaultInitOverride=true",
        f"-Dlog4j.configuration={logging_file.url}",
    ]
    return {"JAVA_TOOL_OPTIONS": " ".join(options)}
