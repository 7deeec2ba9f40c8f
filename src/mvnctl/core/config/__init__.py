"""
Configuration models and loading.

This module provides Pydantic models for mvnctl configuration
with multi-layer merging: defaults < user < project < env vars.
"""

from .env import load_layered_env
from .loader import (
    ConfigError,
    clear_cache,
    get_app_config_dir,
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
)
from .models import (
    VALID_LOG_LEVELS,
    CustomFlag,
    CustomGoal,
    LaunchMode,
    LaunchSettings,
    LoggingConfig,
    MavenConfig,
    MvnctlConfig,
    OutputConfig,
    PackageLogLevel,
    ProcessConfig,
    SchemeCutoff,
    SpringConfig,
    SpringProperty,
)

__all__ = [
    # Models
    "CustomFlag",
    "CustomGoal",
    "LaunchMode",
    "LaunchSettings",
    "LoggingConfig",
    "MavenConfig",
    "MvnctlConfig",
    "OutputConfig",
    "PackageLogLevel",
    "ProcessConfig",
    "SchemeCutoff",
    "SpringConfig",
    "SpringProperty",
    "VALID_LOG_LEVELS",
    # Loader functions
    "ConfigError",
    "clear_cache",
    "get_app_config_dir",
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
    "load_layered_env",
]
