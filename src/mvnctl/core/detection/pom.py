"""
Targeted field extraction from ``mvn help:effective-pom`` output.

This is a line scanner, not an XML parser: the effective POM is pretty-printed
by Maven with one element per line, and only a handful of fields matter.
"""

from __future__ import annotations

import logging
import re

from mvnctl.core.detection.models import (
    EXEC_PLUGIN_ARTIFACT,
    RUN_PLUGIN_ARTIFACT,
    LaunchCapabilities,
)

logger = logging.getLogger(__name__)

MAIN_CLASS_PROPERTIES = (
    "start-class",
    "spring-boot.run.mainClass",
    "spring-boot.main-class",
    "exec.mainClass",
)

_LOG_PREFIX_RE = re.compile(r"^\[(INFO|WARNING|DEBUG)\]\s?")


def extract_tag_content(line: str, tag: str) -> str | None:
    """
    Return the trimmed text of ``<tag>...</tag>`` on one line.

    Examples:
        >>> extract_tag_content("<packaging>war</packaging>", "packaging")
        'war'
        >>> extract_tag_content("<packaging>war", "packaging") is None
        True
    """
    open_tag = f"<{tag}>"
    close_tag = f"</{tag}>"
    start = line.find(open_tag)
    if start == -1:
        return None
    end = line.find(close_tag, start)
    if end == -1:
        return None
    return line[start + len(open_tag) : end].strip()


def parse_effective_pom(text: str) -> LaunchCapabilities:
    """
    Extract launch capabilities from an effective POM.

    Args:
        text: Raw output of ``help:effective-pom`` (log prefixes tolerated)

    Returns:
        LaunchCapabilities; packaging defaults to ``jar``
    """
    packaging: str | None = None
    has_run_plugin = False
    run_plugin_version: str | None = None
    has_exec_plugin = False
    config_main_class: str | None = None
    property_main_class: str | None = None

    in_plugins = False
    in_plugin = False
    in_configuration = False
    current_artifact = ""

    for raw in text.splitlines():
        line = _LOG_PREFIX_RE.sub("", raw.strip()).strip()
        if not line:
            continue

        if packaging is None and line.startswith("<packaging>"):
            packaging = extract_tag_content(line, "packaging")

        if line.startswith("<plugins>"):
            in_plugins = True
        elif line.startswith("</plugins>"):
            in_plugins = False
            in_plugin = False
            in_configuration = False

        if in_plugins:
            if line.startswith("<plugin>"):
                in_plugin = True
                current_artifact = ""
            elif line.startswith("</plugin>"):
                in_plugin = False
                in_configuration = False
                current_artifact = ""

            if in_plugin:
                if line.startswith("<artifactId>") and not current_artifact:
                    current_artifact = extract_tag_content(line, "artifactId") or ""
                    if current_artifact == RUN_PLUGIN_ARTIFACT:
                        has_run_plugin = True
                        logger.debug("Found %s", RUN_PLUGIN_ARTIFACT)
                    elif current_artifact == EXEC_PLUGIN_ARTIFACT:
                        has_exec_plugin = True
                        logger.debug("Found %s", EXEC_PLUGIN_ARTIFACT)

                if (
                    current_artifact == RUN_PLUGIN_ARTIFACT
                    and run_plugin_version is None
                    and line.startswith("<version>")
                    and not in_configuration
                ):
                    run_plugin_version = extract_tag_content(line, "version")

                if line.startswith("<configuration>"):
                    in_configuration = True
                elif line.startswith("</configuration>"):
                    in_configuration = False

                if in_configuration and current_artifact in (
                    RUN_PLUGIN_ARTIFACT,
                    EXEC_PLUGIN_ARTIFACT,
                ):
                    value = extract_tag_content(line, "mainClass") or extract_tag_content(
                        line, "main-class"
                    )
                    if value:
                        config_main_class = value
                        logger.debug("Found main class %s in %s", value, current_artifact)

        if property_main_class is None:
            for prop in MAIN_CLASS_PROPERTIES:
                if line.startswith(f"<{prop}>"):
                    value = extract_tag_content(line, prop)
                    if value:
                        property_main_class = value
                        logger.debug("Found main class %s from property %s", value, prop)
                    break

    return LaunchCapabilities(
        packaging=packaging or "jar",
        has_run_plugin=has_run_plugin,
        run_plugin_version=run_plugin_version or None,
        has_exec_plugin=has_exec_plugin,
        main_class=config_main_class or property_main_class,
    )
