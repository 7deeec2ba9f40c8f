"""
Launch strategy detection for one module.

Wires the effective POM query, the capability cache, source scanning and the
decision table together. Nothing here writes to the project; the only side
effects are read-only Maven queries and cache updates.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Callable, Sequence

from mvnctl.core.config.models import LaunchMode, LaunchSettings
from mvnctl.core.detection.models import LaunchCapabilities, LaunchStrategy
from mvnctl.core.detection.pom import parse_effective_pom
from mvnctl.core.detection.starters import find_main_class_candidates
from mvnctl.core.detection.strategy import decide_launch_strategy
from mvnctl.core.store import KeyValueStore, StoreError

logger = logging.getLogger(__name__)

# Runs Maven for the module with the given goal tokens, returns output lines
DescriptorQuery = Callable[[Sequence[str]], list[str]]

EFFECTIVE_POM_GOAL = "help:effective-pom"


def descriptor_hash(project_root: Path, module: str) -> str:
    """
    Hash of the POM files that shape a module's effective POM.

    Covers the root pom.xml and the module's own pom.xml; a change to either
    invalidates cached capabilities.
    """
    digest = hashlib.md5()
    paths = [project_root / "pom.xml"]
    if module not in (".", ""):
        paths.append(project_root / module / "pom.xml")
    for path in paths:
        digest.update(str(path).encode("utf-8"))
        try:
            digest.update(path.read_bytes())
        except OSError:
            digest.update(b"<missing>")
    return digest.hexdigest()[:12]


class LaunchStrategyDetector:
    """
    Decides how to launch a module's entry point.

    Example:
        >>> detector = LaunchStrategyDetector(root, "app", query, store=store)
        >>> strategy = detector.detect()
        >>> build_launch_goals(strategy, profiles=["dev"])
    """

    def __init__(
        self,
        project_root: Path,
        module: str,
        query: DescriptorQuery,
        store: KeyValueStore | None = None,
        settings: LaunchSettings | None = None,
    ) -> None:
        self.project_root = project_root
        self.module = module
        self._query = query
        self._store = store
        self.settings = settings or LaunchSettings()

    @property
    def module_dir(self) -> Path:
        if self.module in (".", ""):
            return self.project_root
        return self.project_root / self.module

    def _cache_key(self) -> str:
        return f"capabilities:{self.module}:{descriptor_hash(self.project_root, self.module)}"

    def capabilities(self, refresh: bool = False) -> LaunchCapabilities | None:
        """
        Read the module's launch capabilities.

        Args:
            refresh: Skip the cache and query Maven again

        Returns:
            LaunchCapabilities, or None when the effective POM query failed
        """
        key = self._cache_key()
        if not refresh and self._store is not None:
            cached = self._store.get(key)
            if isinstance(cached, dict):
                logger.debug("Using cached capabilities for %s", self.module)
                return LaunchCapabilities.from_dict(cached)

        try:
            lines = self._query([EFFECTIVE_POM_GOAL])
        except Exception as e:
            logger.warning("Effective POM query failed for %s: %s", self.module, e)
            return None

        capabilities = parse_effective_pom("\n".join(lines))
        logger.info(
            "Detected for %s: packaging=%s run_plugin=%s (%s) exec_plugin=%s main_class=%s",
            self.module,
            capabilities.packaging,
            capabilities.has_run_plugin,
            capabilities.run_plugin_version or "no version",
            capabilities.has_exec_plugin,
            capabilities.main_class,
        )
        if self._store is not None:
            try:
                self._store.set(key, capabilities.to_dict())
            except StoreError as e:
                logger.warning("Could not cache capabilities for %s: %s", self.module, e)
        return capabilities

    def main_class_candidates(self) -> list[str]:
        return find_main_class_candidates(self.module_dir)

    def detect(
        self,
        mode: LaunchMode | None = None,
        main_class: str | None = None,
        refresh: bool = False,
    ) -> LaunchStrategy:
        """
        Select a launch strategy.

        Args:
            mode: Launch mode (defaults to the configured one)
            main_class: Explicit main class chosen by the user
            refresh: Ignore cached capabilities

        Returns:
            The selected LaunchStrategy

        Raises:
            UndetectableStrategyError: If no launch path can be resolved
        """
        mode = mode or self.settings.mode
        capabilities = self.capabilities(refresh=refresh)

        hint = main_class
        run_usable = capabilities is not None and capabilities.can_use_run_plugin
        pom_main_class = capabilities.main_class if capabilities else None
        # Sources are only scanned when exec:java will need a main class
        needs_scan = (
            hint is None
            and pom_main_class is None
            and self.settings.scan_sources
            and (
                mode is LaunchMode.FORCE_EXEC
                or (mode is LaunchMode.AUTO and not run_usable)
            )
        )
        if needs_scan:
            candidates = self.main_class_candidates()
            if candidates:
                hint = candidates[0]
                if len(candidates) > 1:
                    logger.info(
                        "Several main classes found, using %s (others: %s)",
                        hint,
                        ", ".join(candidates[1:]),
                    )

        return decide_launch_strategy(
            capabilities,
            mode,
            module=self.module,
            main_class_hint=hint,
            cutoffs=self.settings.scheme_cutoffs,
        )
