"""
Configuration data models for mvnctl.

These models define the structure of .mvnctl.json and
~/.config/mvnctl/config.json files, with validation and type safety via
Pydantic.
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

VALID_LOG_LEVELS = ("OFF", "ERROR", "WARN", "INFO", "DEBUG", "TRACE", "ALL")


class LaunchMode(str, Enum):
    """How to start an application entry point."""

    AUTO = "auto"  # Detect from the effective POM
    FORCE_RUN = "force-run"  # Always use the run-capable plugin (spring-boot:run)
    FORCE_EXEC = "force-exec"  # Always use exec:java


class PackageLogLevel(BaseModel):
    """Log level override for one logger/package."""

    name: str = Field(min_length=1, description="Logger or package name (e.g. com.example.api)")
    level: str = Field(description="One of OFF, ERROR, WARN, INFO, DEBUG, TRACE, ALL")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize to upper case and reject unknown levels."""
        upper = v.strip().upper()
        if upper not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level '{v}'. Valid levels are: {', '.join(VALID_LOG_LEVELS)}"
            )
        return upper


class LoggingConfig(BaseModel):
    """
    Logging overrides injected into launched applications.

    Both logging generations are targeted: a generated log4j 1.x properties
    file and modern ``-Dlogging.level.*`` system properties.
    """

    log_format: Optional[str] = Field(
        default=None,
        description="Conversion pattern for console output (applies to both generations)",
    )
    packages: list[PackageLogLevel] = Field(
        default_factory=list,
        description="Per-package log level overrides",
    )

    def overrides(self) -> list[tuple[str, str]]:
        """Return (package, level) pairs in configuration order."""
        return [(pkg.name, pkg.level) for pkg in self.packages]

    def get_level(self, package_name: str) -> Optional[str]:
        """Get the configured level for a package, if any."""
        for pkg in self.packages:
            if pkg.name == package_name:
                return pkg.level
        return None

    @property
    def is_empty(self) -> bool:
        return not self.packages and self.log_format is None


class SpringProperty(BaseModel):
    """Application property override (e.g. server.port=8081)."""

    name: str = Field(min_length=1)
    value: str


class SpringConfig(BaseModel):
    """Application property overrides written to the properties override file."""

    properties: list[SpringProperty] = Field(default_factory=list)
    active_profiles: list[str] = Field(
        default_factory=list,
        description="Application profiles to activate (spring.profiles.active)",
    )


class CustomFlag(BaseModel):
    """User-defined toggleable Maven flag, typed as a shell fragment."""

    name: str
    flag: str = Field(description="Flag text, e.g. '-Dmy.property=value' or '-U, --update-snapshots'")
    enabled: bool = Field(default=False, description="Enabled when the module is loaded")


class CustomGoal(BaseModel):
    """User-defined goal shortcut (typically a fully qualified plugin goal)."""

    name: str
    goal: str


class MavenConfig(BaseModel):
    """Maven invocation settings."""

    custom_flags: list[CustomFlag] = Field(default_factory=list)
    custom_goals: list[CustomGoal] = Field(default_factory=list)
    threads: Optional[str] = Field(
        default=None,
        description="Thread spec passed as -T (e.g. '4' or '1C')",
    )
    use_file_flag: bool = Field(
        default=False,
        description="Scope modules with -f <module>/pom.xml instead of -pl",
    )


class SchemeCutoff(BaseModel):
    """
    One row of the run-plugin version cutoff table.

    Versions at or above ``min_version`` use ``scheme`` unless a later row
    with a higher ``min_version`` also matches.
    """

    min_version: str
    scheme: Literal["legacy", "modern"]


def _default_cutoffs() -> list[SchemeCutoff]:
    return [
        SchemeCutoff(min_version="0", scheme="legacy"),
        SchemeCutoff(min_version="2.0.0", scheme="modern"),
    ]


class LaunchSettings(BaseModel):
    """Launch strategy settings."""

    mode: LaunchMode = Field(default=LaunchMode.AUTO)
    scheme_cutoffs: list[SchemeCutoff] = Field(
        default_factory=_default_cutoffs,
        description="Run-plugin version -> property naming scheme table",
    )
    scan_sources: bool = Field(
        default=True,
        description="Scan module sources for main classes when the POM has none",
    )


class ProcessConfig(BaseModel):
    """Process execution and cancellation settings."""

    kill_backend: Literal["auto", "signal", "tree"] = Field(
        default="auto",
        description="Process-group kill mechanism (auto: signal on Unix, tree elsewhere)",
    )
    grace_period_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="Time between the graceful and the forceful kill signal",
    )
    queue_size: int = Field(
        default=1000,
        ge=1,
        description="Maximum buffered output lines per running process",
    )


class OutputConfig(BaseModel):
    """Output buffering for interactive consumers."""

    max_updates_per_poll: int = Field(default=100, ge=1)


class MvnctlConfig(BaseModel):
    """
    Top-level mvnctl configuration.

    Loaded from defaults, user config, project config, and env vars.

    Example:
        >>> config = MvnctlConfig(
        ...     maven_settings="/home/me/.m2/work-settings.xml",
        ...     launch=LaunchSettings(mode=LaunchMode.FORCE_EXEC),
        ... )
        >>> config.launch.mode
        <LaunchMode.FORCE_EXEC: 'force-exec'>
    """

    maven_settings: Optional[str] = Field(
        default=None,
        description="Path passed to Maven as --settings",
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    spring: SpringConfig = Field(default_factory=SpringConfig)
    maven: MavenConfig = Field(default_factory=MavenConfig)
    launch: LaunchSettings = Field(default_factory=LaunchSettings)
    process: ProcessConfig = Field(default_factory=ProcessConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    model_config = ConfigDict(
        extra="allow",  # Allow extra fields for forward compatibility
        validate_assignment=True,
    )

    @field_validator("launch", mode="before")
    @classmethod
    def validate_launch(cls, v: object) -> object:
        """Accept a bare mode string as shorthand for {"mode": ...}."""
        if isinstance(v, str):
            return {"mode": v}
        return v
