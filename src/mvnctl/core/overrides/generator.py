"""
Override file generation.

Writes at most one file per (kind, project hash) into a dedicated directory.
Every call rewrites the whole file, so the result only ever reflects the
latest override set. Files are flat UTF-8 ``key=value`` with ``#`` comments,
no quoting, newline-terminated.
"""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from mvnctl.core.config.models import VALID_LOG_LEVELS
from mvnctl.core.overrides.models import InvalidOverrideError, OverrideFile, OverrideKind

logger = logging.getLogger(__name__)

DEFAULT_CONVERSION_PATTERN = "[%d{dd/MM/yyyy HH:mm:ss:SSS}] %5p %c{1} - %m%n"
LOG_PATTERN_PROPERTIES = ("logging.pattern.console", "logging.pattern.file")


def _check_entry(key: str, value: str) -> None:
    if not key or not key.strip():
        raise InvalidOverrideError(key, "empty key")
    for text in (key, value):
        if "\n" in text or "\r" in text:
            raise InvalidOverrideError(key, "line breaks are not allowed")
    if "=" in key:
        raise InvalidOverrideError(key, "'=' is not allowed in keys")


def normalize_level(package: str, level: str) -> str:
    """
    Upper-case and validate a log level.

    Raises:
        InvalidOverrideError: If the level is not a known log4j level
    """
    upper = level.strip().upper()
    if upper not in VALID_LOG_LEVELS:
        raise InvalidOverrideError(
            package, f"unknown level '{level}' (expected one of {', '.join(VALID_LOG_LEVELS)})"
        )
    return upper


def render_logging_config(
    overrides: Sequence[tuple[str, str]], log_format: str | None = None
) -> str:
    """
    Render a complete log4j 1.x properties configuration.

    log4j 1.x replaces its whole configuration when pointed at a file, so the
    output always carries a root logger and a console appender.
    """
    pattern = log_format or DEFAULT_CONVERSION_PATTERN
    lines = [
        "# mvnctl generated log4j 1.x configuration",
        "# Regenerated on every launch; edit the mvnctl config instead",
        "",
        "# Root logger",
        "log4j.rootLogger=INFO, CONSOLE",
        "",
        "# Console appender",
        "log4j.appender.CONSOLE=org.apache.log4j.ConsoleAppender",
        "log4j.appender.CONSOLE.layout=org.apache.log4j.PatternLayout",
        f"log4j.appender.CONSOLE.layout.ConversionPattern={pattern}",
        "",
        "# Logging level overrides",
    ]
    for package, level in overrides:
        _check_entry(package, level)
        lines.append(f"log4j.logger.{package}={normalize_level(package, level)}")
    return "\n".join(lines) + "\n"


def render_properties_config(
    properties: Sequence[tuple[str, str]],
    active_profiles: Sequence[str] = (),
    log_format: str | None = None,
) -> str:
    """Render application property overrides."""
    lines = [
        "# mvnctl generated application properties",
        "# Loaded as an additional config location, these values take precedence",
        "",
    ]
    if active_profiles:
        lines.extend(["# Active profiles", f"spring.profiles.active={','.join(active_profiles)}", ""])

    entries = list(properties)
    if log_format:
        # Pattern overrides replace any user-set value for the same keys
        entries = [(k, v) for k, v in entries if k not in LOG_PATTERN_PROPERTIES]
        entries.extend((key, log_format) for key in LOG_PATTERN_PROPERTIES)

    if entries:
        lines.append("# Property overrides")
        for key, value in entries:
            _check_entry(key, value)
            lines.append(f"{key}={value}")
    return "\n".join(lines) + "\n"


class OverrideGenerator:
    """
    Writes override files into one directory.

    Example:
        >>> generator = OverrideGenerator(Path("~/.config/mvnctl/overrides").expanduser())
        >>> generated = generator.generate_logging([("com.example", "DEBUG")], "1a2b3c4d")
        >>> generated.path.name
        'log4j-override-1a2b3c4d.properties'
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def path_for(self, kind: OverrideKind, hash_key: str) -> Path:
        return self.directory / kind.file_name(hash_key)

    def _write(self, kind: OverrideKind, hash_key: str, content: str) -> OverrideFile | None:
        path = self.path_for(kind, hash_key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                dir=self.directory, prefix=f".{kind.file_prefix}_", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                    f.write(content)
                os.replace(temp_path, path)
            except Exception:
                try:
                    os.unlink(temp_path)
                except OSError:
                    pass
                raise
        except OSError as e:
            logger.warning("Failed to write %s override file %s: %s", kind.value, path, e)
            return None

        logger.info("Generated %s override file at %s", kind.value, path)
        logger.debug("Override content:\n%s", content)
        return OverrideFile(
            kind=kind,
            path=path,
            hash_key=hash_key,
            generated_at=datetime.now(timezone.utc),
        )

    def generate_logging(
        self,
        overrides: Sequence[tuple[str, str]],
        hash_key: str,
        log_format: str | None = None,
    ) -> OverrideFile | None:
        """
        Write the log4j override file.

        Args:
            overrides: (package, level) pairs
            hash_key: Project hash the file name derives from
            log_format: Conversion pattern replacing the default one

        Returns:
            The written file, or None when there is nothing to override or the
            write failed

        Raises:
            InvalidOverrideError: If a level or package name is unusable
        """
        if not overrides and not log_format:
            return None
        content = render_logging_config(overrides, log_format)
        return self._write(OverrideKind.LOGGING, hash_key, content)

    def generate_properties(
        self,
        properties: Sequence[tuple[str, str]],
        hash_key: str,
        active_profiles: Sequence[str] = (),
        log_format: str | None = None,
    ) -> OverrideFile | None:
        """
        Write the application properties override file.

        Returns:
            The written file, or None when there is nothing to override or the
            write failed

        Raises:
            InvalidOverrideError: If a key or value cannot be written literally
        """
        if not properties and not active_profiles and not log_format:
            return None
        content = render_properties_config(properties, active_profiles, log_format)
        return self._write(OverrideKind.PROPERTIES, hash_key, content)

    def existing(self, hash_key: str) -> list[Path]:
        """Override files currently on disk for a project."""
        return [p for kind in OverrideKind if (p := self.path_for(kind, hash_key)).exists()]
