"""
Data models for launch strategy detection.

Defines the capabilities read from a module's effective POM and the two
strategies an application entry point can be started with.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Union

RUN_PLUGIN_ARTIFACT = "spring-boot-maven-plugin"
EXEC_PLUGIN_ARTIFACT = "exec-maven-plugin"
RUNNABLE_PACKAGINGS = ("jar", "war")


class DetectionError(Exception):
    """Base exception for launch detection errors."""


class UndetectableStrategyError(DetectionError):
    """Neither the run plugin nor an exec entry point could be resolved."""

    def __init__(self, module: str, reason: str) -> None:
        self.module = module
        self.reason = reason
        super().__init__(f"Cannot determine how to launch module '{module}': {reason}")


@dataclass(frozen=True)
class LaunchCapabilities:
    """
    What a module's effective POM allows.

    Attributes:
        packaging: Packaging kind (``jar`` when the POM declares none)
        has_run_plugin: Whether spring-boot-maven-plugin is configured
        run_plugin_version: Version of that plugin, if declared
        has_exec_plugin: Whether exec-maven-plugin is configured
        main_class: Main class from plugin configuration or properties
    """

    packaging: str = "jar"
    has_run_plugin: bool = False
    run_plugin_version: str | None = None
    has_exec_plugin: bool = False
    main_class: str | None = None

    @property
    def can_use_run_plugin(self) -> bool:
        return self.has_run_plugin and self.packaging in RUNNABLE_PACKAGINGS

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LaunchCapabilities:
        return cls(
            packaging=str(data.get("packaging") or "jar"),
            has_run_plugin=bool(data.get("has_run_plugin", False)),
            run_plugin_version=data.get("run_plugin_version"),
            has_exec_plugin=bool(data.get("has_exec_plugin", False)),
            main_class=data.get("main_class"),
        )


class PropertyScheme(str, Enum):
    """Property naming generation of the run plugin."""

    LEGACY = "legacy"  # run.profiles, run.jvmArguments (plugin 1.x)
    MODERN = "modern"  # spring-boot.run.profiles, spring-boot.run.jvmArguments

    @property
    def profiles_property(self) -> str:
        return "run.profiles" if self is PropertyScheme.LEGACY else "spring-boot.run.profiles"

    @property
    def jvm_arguments_property(self) -> str:
        if self is PropertyScheme.LEGACY:
            return "run.jvmArguments"
        return "spring-boot.run.jvmArguments"

    @property
    def main_class_property(self) -> str:
        if self is PropertyScheme.LEGACY:
            return "run.main-class"
        return "spring-boot.run.main-class"


@dataclass(frozen=True)
class RunPluginStrategy:
    """
    Start through ``spring-boot:run``.

    Attributes:
        main_class_override: Main class passed explicitly, None to let the plugin decide
        plugin_version: Detected plugin version (used for the legacy goal coordinates)
        scheme: Property naming scheme for the plugin version
    """

    main_class_override: str | None = None
    plugin_version: str | None = None
    scheme: PropertyScheme = PropertyScheme.MODERN

    @property
    def goal_name(self) -> str:
        return "spring-boot:run"


@dataclass(frozen=True)
class ExecPluginStrategy:
    """
    Start through ``exec:java``.

    Attributes:
        main_class: Entry point class, None only when the user forced exec mode
        classpath_scope_override: ``compile`` for war modules, else None
        packaging: Packaging kind the strategy was derived from
    """

    main_class: str | None = None
    classpath_scope_override: str | None = None
    packaging: str = "jar"

    @property
    def goal_name(self) -> str:
        return "exec:java"


LaunchStrategy = Union[RunPluginStrategy, ExecPluginStrategy]
