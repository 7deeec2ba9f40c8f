"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .models import LaunchMode, MvnctlConfig

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = ".mvnctl.json"

# Loaded configs keyed by resolved project directory
_config_cache: dict[Path, MvnctlConfig] = {}


class ConfigError(Exception):
    """Raised when the merged configuration fails validation."""

    def __init__(self, message: str, errors: ValidationError | None = None) -> None:
        self.errors = errors
        super().__init__(message)


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_app_config_dir() -> Path:
    """Directory holding mvnctl's user config, caches and override files."""
    return get_xdg_config_home() / "mvnctl"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/mvnctl/config.json (or XDG equivalent)
    """
    return get_app_config_dir() / "config.json"


def get_project_config_path(project_dir: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        project_dir: Project root (defaults to current directory)

    Returns:
        Path to .mvnctl.json in the project root
    """
    if project_dir is None:
        project_dir = Path.cwd()
    return project_dir / PROJECT_CONFIG_FILE


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`. Nested dicts
    are merged recursively; lists and scalars are replaced.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 30}})
        {'a': 1, 'b': {'x': 10, 'y': 30}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            logger.warning("Ignoring config at %s: top-level value is not an object", path)
            return None
    except (json.JSONDecodeError, OSError) as e:
        # Config system should be resilient to a broken file
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None


def _set_nested(result: dict[str, Any], section: str, key: str, value: Any) -> None:
    if not isinstance(result.get(section), dict):
        result[section] = {}
    result[section][key] = value


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Supported env vars:
        MVNCTL_MAVEN_SETTINGS - overrides maven_settings
        MVNCTL_LAUNCH_MODE - overrides launch.mode (auto, force-run, force-exec)
        MVNCTL_KILL_BACKEND - overrides process.kill_backend
        MVNCTL_KILL_GRACE_SECONDS - overrides process.grace_period_seconds

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if settings := os.environ.get("MVNCTL_MAVEN_SETTINGS"):
        result["maven_settings"] = settings

    if mode := os.environ.get("MVNCTL_LAUNCH_MODE"):
        valid_modes = [m.value for m in LaunchMode]
        if mode in valid_modes:
            _set_nested(result, "launch", "mode", mode)
        else:
            logger.warning(
                "Invalid MVNCTL_LAUNCH_MODE value '%s' (expected one of %s), ignoring",
                mode,
                ", ".join(valid_modes),
            )

    if backend := os.environ.get("MVNCTL_KILL_BACKEND"):
        if backend in ("auto", "signal", "tree"):
            _set_nested(result, "process", "kill_backend", backend)
        else:
            logger.warning("Invalid MVNCTL_KILL_BACKEND value '%s', ignoring", backend)

    if grace_str := os.environ.get("MVNCTL_KILL_GRACE_SECONDS"):
        try:
            grace = float(grace_str)
            if grace < 0:
                logger.warning(
                    "MVNCTL_KILL_GRACE_SECONDS must be >= 0, got %s, ignoring", grace_str
                )
            else:
                _set_nested(result, "process", "grace_period_seconds", grace)
        except ValueError:
            logger.warning("Invalid MVNCTL_KILL_GRACE_SECONDS value '%s', ignoring", grace_str)

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "launch": {"mode": LaunchMode.AUTO.value},
        "process": {"kill_backend": "auto", "grace_period_seconds": 2.0},
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> MvnctlConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (MVNCTL_*)
        2. Project config (.mvnctl.json)
        3. User config (~/.config/mvnctl/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Project root to load .mvnctl.json from (defaults to cwd)
        use_cache: If True, return cached config from a previous load

    Returns:
        Validated MvnctlConfig instance

    Raises:
        ConfigError: If the merged config fails validation
    """
    if project_dir is None:
        project_dir = Path.cwd()
    cache_key = project_dir.resolve()

    if use_cache and cache_key in _config_cache:
        return _config_cache[cache_key]

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    try:
        config = MvnctlConfig(**merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid mvnctl configuration: {e}", errors=e) from e

    _config_cache[cache_key] = config
    return config


def clear_cache() -> None:
    """
    Clear the cached configurations.

    Useful for testing or when config files change during execution.
    """
    _config_cache.clear()
