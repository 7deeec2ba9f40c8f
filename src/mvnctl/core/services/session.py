"""
Module session: one execution slot plus the profile and flag state of a module.

Ties the core packages together the way an interactive front end uses them:
toggle profiles and flags, run goals, launch the application, poll output,
kill.

Usage:
    >>> from mvnctl.core.services.session import ModuleSession
    >>> session = ModuleSession.from_config(Path.cwd(), module="app")
    >>> session.load_profiles()
    >>> session.toggle_profile("dev")
    >>> handle = session.run_goals(["clean", "install"])
    >>> for update in session.poll():
    ...     print(update.line)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence

from mvnctl.core.command import (
    DEFAULT_FLAGS,
    ROOT_MODULE,
    BuildTarget,
    FlagSpec,
    MavenCommand,
    build_command,
    resolve_maven_executable,
)
from mvnctl.core.config.loader import get_app_config_dir, load_config
from mvnctl.core.config.models import LaunchMode, MvnctlConfig
from mvnctl.core.detection import (
    LaunchStrategy,
    LaunchStrategyDetector,
    StarterRegistry,
    build_launch_goals,
)
from mvnctl.core.overrides import (
    OverrideFile,
    OverrideGenerator,
    build_override_jvm_args,
    java_tool_options_env,
)
from mvnctl.core.process import (
    ExecutionSlot,
    KillOutcome,
    PidRegistry,
    ProcessUpdate,
    RunningProcess,
    maven_query_for,
    select_kill_backend,
)
from mvnctl.core.profiles import (
    MavenProfile,
    MavenQuery,
    ProfileService,
    ProfileSet,
    parse_maven_argument,
)
from mvnctl.core.store import JsonKeyValueStore, KeyValueStore, StoreError
from mvnctl.utils.project import project_hash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaunchPlan:
    """
    Everything needed to start an application.

    Attributes:
        strategy: Selected launch strategy
        command: Maven command to spawn
        env: Extra environment for the process
        override_files: Override files written for this launch
    """

    strategy: LaunchStrategy
    command: MavenCommand
    env: dict[str, str] = field(default_factory=dict)
    override_files: tuple[OverrideFile, ...] = ()


class ModuleSession:
    """
    Profile/flag state and the execution slot of one module.

    Example:
        >>> session = ModuleSession.from_config(Path("/work/shop"), module="api")
        >>> session.toggle_flag("Skip tests")
        >>> session.build(["install"]).display()
        '/work/shop/mvnw -pl api -DskipTests install'
    """

    def __init__(
        self,
        config: MvnctlConfig,
        target: BuildTarget,
        store: KeyValueStore,
        *,
        query: MavenQuery | None = None,
        registry: PidRegistry | None = None,
        override_dir: Path | None = None,
    ) -> None:
        """
        Initialize session with dependencies.

        Args:
            config: Loaded configuration
            target: Project root, module and resolved executable
            store: Per-project cache
            query: Maven query callable (defaults to running Maven for the target)
            registry: Shared PID registry (one per application)
            override_dir: Directory for generated override files
        """
        self._config = config
        self._target = target
        self._store = store
        self._query = query or maven_query_for(
            target,
            settings_path=config.maven_settings,
            use_file_flag=config.maven.use_file_flag,
        )
        self._override_dir = override_dir or get_app_config_dir() / "overrides"
        self._profile_service = ProfileService(self._query, config.maven_settings, store)
        self._detector = LaunchStrategyDetector(
            target.project_root, target.module, self._query, store, config.launch
        )
        self.slot = ExecutionSlot(
            name=target.module,
            registry=registry,
            kill_backend=select_kill_backend(config.process.kill_backend),
            grace_period=config.process.grace_period_seconds,
            queue_size=config.process.queue_size,
        )
        self.profiles = ProfileSet()
        self.flags: list[FlagSpec] = list(DEFAULT_FLAGS) + [
            FlagSpec.from_string(f.name, f.flag, f.enabled) for f in config.maven.custom_flags
        ]
        self._enabled_flags: set[str] = {f.name for f in self.flags if f.enabled_by_default}

    @classmethod
    def from_config(
        cls,
        project_root: Path,
        module: str = ROOT_MODULE,
        config: MvnctlConfig | None = None,
        store: KeyValueStore | None = None,
        registry: PidRegistry | None = None,
    ) -> ModuleSession:
        """
        Create a session for a module of a project.

        Args:
            project_root: Reactor root directory
            module: Module path relative to the root, or "."
            config: Configuration (loaded for the project if None)
            store: Cache (the per-project JSON store if None)
            registry: Shared PID registry
        """
        if config is None:
            config = load_config(project_root)
        if store is None:
            store = JsonKeyValueStore.for_project(project_root)
        target = BuildTarget(
            project_root=project_root,
            module=module or ROOT_MODULE,
            executable=resolve_maven_executable(project_root),
        )
        return cls(config, target, store, registry=registry)

    @property
    def config(self) -> MvnctlConfig:
        return self._config

    @property
    def target(self) -> BuildTarget:
        return self._target

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def detector(self) -> LaunchStrategyDetector:
        return self._detector

    # ============================================================================
    # Profiles and flags
    # ============================================================================

    def load_profiles(self, names: Sequence[str] | None = None, refresh: bool = False) -> ProfileSet:
        """Discover profiles and restore this module's saved states."""
        self.profiles = self._profile_service.load_profile_set(names, refresh=refresh)
        self.load_preferences()
        return self.profiles

    def toggle_profile(self, name: str) -> None:
        state = self.profiles.toggle(name)
        logger.info("Profile %s -> %s", name, state.value)
        self.save_preferences()

    def flag(self, name: str) -> FlagSpec:
        for spec in self.flags:
            if spec.name == name:
                return spec
        raise KeyError(name)

    def toggle_flag(self, name: str) -> bool:
        """Toggle a flag by display name. Returns the new enabled state."""
        self.flag(name)
        if name in self._enabled_flags:
            self._enabled_flags.discard(name)
            enabled = False
        else:
            self._enabled_flags.add(name)
            enabled = True
        self.save_preferences()
        return enabled

    def set_flag(self, name: str, enabled: bool) -> None:
        self.flag(name)
        if enabled:
            self._enabled_flags.add(name)
        else:
            self._enabled_flags.discard(name)

    def enabled_flags(self) -> list[FlagSpec]:
        """Enabled flags in configuration order."""
        return [f for f in self.flags if f.name in self._enabled_flags]

    def apply_profile_arguments(self, arguments: Sequence[str]) -> None:
        """Set explicit states from ``-P`` style entries such as ``dev`` or ``!prod``."""
        for argument in arguments:
            name, state = parse_maven_argument(argument)
            if self.profiles.get(name) is None:
                self.profiles.profiles.append(MavenProfile(name=name))
            self.profiles.set_state(name, state)

    def load_saved_state(self) -> None:
        """Restore saved profile states and flags without querying Maven."""
        data = self._store.get(self._prefs_key())
        saved = data.get("profiles") if isinstance(data, dict) else None
        self.profiles = ProfileSet.from_names(saved if isinstance(saved, dict) else [])
        self.load_preferences()

    def _prefs_key(self) -> str:
        return f"prefs:{self._target.module}"

    def save_preferences(self) -> None:
        """Persist profile states and flags; a failed write only loses them for later runs."""
        try:
            self._store.set(
                self._prefs_key(),
                {"profiles": self.profiles.snapshot(), "flags": sorted(self._enabled_flags)},
            )
        except StoreError as e:
            logger.warning("Could not save preferences for %s: %s", self._target.module, e)

    def load_preferences(self) -> None:
        """Restore saved profile states and flags; defaults when nothing is saved."""
        data = self._store.get(self._prefs_key())
        if not isinstance(data, dict):
            return
        profiles = data.get("profiles")
        if isinstance(profiles, dict):
            self.profiles.restore(profiles)
        flags = data.get("flags")
        if isinstance(flags, list):
            known = {f.name for f in self.flags}
            self._enabled_flags = {str(name) for name in flags if name in known}

    # ============================================================================
    # Commands
    # ============================================================================

    def expand_goals(self, goals: Sequence[str]) -> list[str]:
        """Replace configured goal shortcuts with the goals they stand for."""
        shortcuts = {g.name: g.goal for g in self._config.maven.custom_goals}
        expanded: list[str] = []
        for goal in goals:
            expanded.extend(shortcuts[goal].split() if goal in shortcuts else [goal])
        return expanded

    def build(
        self,
        goals: Sequence[str],
        properties: Mapping[str, str] | None = None,
    ) -> MavenCommand:
        """Compose the Maven command for goals with the current state."""
        return build_command(
            self._target,
            self.expand_goals(goals),
            self.profiles,
            self.enabled_flags(),
            settings_path=self._config.maven_settings,
            threads=self._config.maven.threads,
            properties=properties,
            use_file_flag=self._config.maven.use_file_flag,
        )

    def run_goals(
        self,
        goals: Sequence[str],
        properties: Mapping[str, str] | None = None,
        env: Mapping[str, str] | None = None,
    ) -> RunningProcess:
        """
        Run goals in this session's slot.

        Raises:
            SlotBusyError: If a process is already running in the slot
            SpawnError: If Maven could not be started
        """
        command = self.build(goals, properties)
        logger.info("Running: %s", command.display())
        return self.slot.start(command.argv, command.cwd, env=env)

    # ============================================================================
    # Launch
    # ============================================================================

    def detect_strategy(
        self,
        mode: LaunchMode | None = None,
        main_class: str | None = None,
        refresh: bool = False,
    ) -> LaunchStrategy:
        return self._detector.detect(mode=mode, main_class=main_class, refresh=refresh)

    def generate_overrides(self) -> tuple[OverrideFile | None, OverrideFile | None]:
        """Write the logging and properties override files for this project."""
        generator = OverrideGenerator(self._override_dir)
        hash_key = project_hash(self._target.project_root)
        logging_config = self._config.logging
        spring = self._config.spring

        logging_file = generator.generate_logging(
            logging_config.overrides(), hash_key, logging_config.log_format
        )
        properties_file = generator.generate_properties(
            [(p.name, p.value) for p in spring.properties],
            hash_key,
            active_profiles=spring.active_profiles,
            log_format=logging_config.log_format,
        )
        return logging_file, properties_file

    def prepare_launch(
        self,
        mode: LaunchMode | None = None,
        main_class: str | None = None,
        refresh: bool = False,
    ) -> LaunchPlan:
        """
        Detect the strategy, write overrides and compose the launch command.

        Raises:
            UndetectableStrategyError: If no launch path can be resolved
            InvalidOverrideError: If configured overrides cannot be written
        """
        if main_class is None:
            preferred = StarterRegistry(self._store).preferred()
            if preferred is not None:
                main_class = preferred.fqcn

        strategy = self.detect_strategy(mode=mode, main_class=main_class, refresh=refresh)
        logging_file, properties_file = self.generate_overrides()
        jvm_args = build_override_jvm_args(
            logging_file, properties_file, self._config.logging.overrides()
        )
        launch_tokens = build_launch_goals(
            strategy, profiles=self._config.spring.active_profiles, jvm_args=jvm_args
        )
        command = self.build(launch_tokens)
        written = tuple(f for f in (logging_file, properties_file) if f is not None)
        return LaunchPlan(
            strategy=strategy,
            command=command,
            env=java_tool_options_env(logging_file),
            override_files=written,
        )

    def launch(
        self,
        mode: LaunchMode | None = None,
        main_class: str | None = None,
        refresh: bool = False,
    ) -> RunningProcess:
        """
        Start the module's application in this session's slot.

        Raises:
            UndetectableStrategyError: If no launch path can be resolved
            SlotBusyError: If a process is already running in the slot
            SpawnError: If Maven could not be started
        """
        plan = self.prepare_launch(mode=mode, main_class=main_class, refresh=refresh)
        logger.info("Launching with %s: %s", type(plan.strategy).__name__, plan.command.display())
        handle = self.slot.start(plan.command.argv, plan.command.cwd, env=plan.env)
        if main_class:
            self.remember_starter(main_class)
        return handle

    def remember_starter(self, main_class: str) -> None:
        """Record an explicitly chosen main class as the last used starter."""
        registry = StarterRegistry(self._store)
        if registry.get(main_class) is None:
            registry.add(main_class)
        registry.mark_used(main_class)
        try:
            registry.save()
        except StoreError as e:
            logger.warning("Could not remember starter %s: %s", main_class, e)

    # ============================================================================
    # Running process
    # ============================================================================

    def poll(self, max_items: int | None = None) -> list[ProcessUpdate]:
        """Take buffered output of the current process without blocking."""
        handle = self.slot.current
        if handle is None:
            return []
        if max_items is None:
            max_items = self._config.output.max_updates_per_poll
        return handle.poll(max_items)

    def kill(self) -> KillOutcome | None:
        return self.slot.kill()
