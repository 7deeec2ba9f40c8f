"""
Profile discovery service.

Queries Maven for available and auto-activated profiles through an injected
query callable, so the profile model never spawns processes itself.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Sequence

from mvnctl.core.profiles.models import ProfileSet
from mvnctl.core.profiles.parser import (
    extract_settings_profiles,
    parse_active_profiles,
    parse_all_profiles,
)
from mvnctl.core.store import KeyValueStore, StoreError

logger = logging.getLogger(__name__)

# Runs Maven with the given goal tokens and returns its output lines
MavenQuery = Callable[[Sequence[str]], list[str]]

AVAILABLE_PROFILES_KEY = "profiles:available"


class ProfileService:
    """
    Discovers profiles for one project.

    Auto-activation status is fetched at most once per service instance and
    kept as an immutable frozenset. A failing query degrades to "no profile is
    auto-activated", which only changes the toggle cycle.

    Example:
        >>> service = ProfileService(query, settings_path="/home/me/.m2/settings.xml")
        >>> profile_set = service.load_profile_set()
        >>> profile_set.aggregate_flag()
    """

    def __init__(
        self,
        query: MavenQuery,
        settings_path: str | None = None,
        store: KeyValueStore | None = None,
    ) -> None:
        self._query = query
        self._settings_path = settings_path
        self._store = store
        self._auto_activated: frozenset[str] | None = None

    def auto_activated(self) -> frozenset[str]:
        """Names of profiles Maven activates on its own (cached)."""
        if self._auto_activated is None:
            try:
                names = parse_active_profiles(self._query(["help:active-profiles"]))
            except Exception as e:
                logger.warning("Failed to query active profiles, treating all as manual: %s", e)
                names = []
            self._auto_activated = frozenset(names)
            logger.debug("Auto-activated profiles: %s", sorted(self._auto_activated))
        return self._auto_activated

    def settings_profiles(self) -> list[str]:
        """Profile ids declared in the configured settings.xml."""
        if not self._settings_path:
            return []
        path = Path(self._settings_path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.debug("Cannot read settings file %s: %s", path, e)
            return []
        return extract_settings_profiles(content)

    def available_profiles(self, refresh: bool = False) -> list[str]:
        """
        List every profile Maven knows about plus settings.xml profiles.

        Args:
            refresh: Ignore the cached listing and query Maven again

        Returns:
            Sorted, deduplicated profile names
        """
        if not refresh and self._store is not None:
            cached = self._store.get(AVAILABLE_PROFILES_KEY)
            if isinstance(cached, list):
                return [str(name) for name in cached]

        names = set(parse_all_profiles(self._query(["help:all-profiles"])))
        names.update(self.settings_profiles())
        profiles = sorted(names)
        logger.info("Discovered %d unique Maven profiles", len(profiles))

        if self._store is not None:
            try:
                self._store.set(AVAILABLE_PROFILES_KEY, profiles)
            except StoreError as e:
                logger.warning("Could not cache discovered profiles: %s", e)
        return profiles

    def load_profile_set(
        self, names: Sequence[str] | None = None, refresh: bool = False
    ) -> ProfileSet:
        """Build a ProfileSet with auto-activation flags filled in."""
        if names is None:
            names = self.available_profiles(refresh=refresh)
        return ProfileSet.from_names(names, auto_activated=self.auto_activated())
