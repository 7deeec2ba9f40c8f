"""
Ephemeral override files consumed by launched applications.
"""

from mvnctl.core.overrides.generator import (
    DEFAULT_CONVERSION_PATTERN,
    OverrideGenerator,
    normalize_level,
    render_logging_config,
    render_properties_config,
)
from mvnctl.core.overrides.jvm import build_override_jvm_args, java_tool_options_env
from mvnctl.core.overrides.models import (
    InvalidOverrideError,
    OverrideError,
    OverrideFile,
    OverrideKind,
)

__all__ = [
    "DEFAULT_CONVERSION_PATTERN",
    "InvalidOverrideError",
    "OverrideError",
    "OverrideFile",
    "OverrideGenerator",
    "OverrideKind",
    "build_override_jvm_args",
    "java_tool_options_env",
    "normalize_level",
    "render_logging_config",
    "render_properties_config",
]
