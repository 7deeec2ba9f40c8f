"""
Tri-state Maven profile model.

A profile is either left to Maven's own activation rules (DEFAULT), forced on
(ENABLED) or forced off (DISABLED). Only explicit states reach the command
line, aggregated into a single ``-P`` token.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable


class ProfileState(str, Enum):
    """Explicit activation state of a profile."""

    DEFAULT = "default"  # Follow Maven's activation rules (omitted from -P)
    ENABLED = "enabled"  # Emitted as "name"
    DISABLED = "disabled"  # Emitted as "!name"


def parse_maven_argument(argument: str) -> tuple[str, ProfileState]:
    """
    Parse one entry of a ``-P`` list back into (name, state).

    Examples:
        >>> parse_maven_argument("dev")
        ('dev', <ProfileState.ENABLED: 'enabled'>)
        >>> parse_maven_argument("!dev")
        ('dev', <ProfileState.DISABLED: 'disabled'>)
    """
    argument = argument.strip()
    if argument.startswith("!") or argument.startswith("-"):
        return argument[1:], ProfileState.DISABLED
    return argument, ProfileState.ENABLED


@dataclass
class MavenProfile:
    """
    A profile and its activation state.

    Attributes:
        name: Profile id as declared in a POM or settings.xml
        state: Explicit state chosen by the user
        auto_activated: Whether Maven activates it on its own (file, JDK, OS...)
    """

    name: str
    state: ProfileState = ProfileState.DEFAULT
    auto_activated: bool = False

    def toggle(self) -> ProfileState:
        """
        Advance to the next state.

        Non-auto profiles cycle DEFAULT -> ENABLED -> DEFAULT. Auto-activated
        profiles are already on by default, so they cycle DEFAULT -> DISABLED
        -> DEFAULT. A profile found in the "other" explicit state (restored from
        a stale snapshot) goes back to DEFAULT.
        """
        if self.state is ProfileState.DEFAULT:
            self.state = ProfileState.DISABLED if self.auto_activated else ProfileState.ENABLED
        else:
            self.state = ProfileState.DEFAULT
        return self.state

    def to_maven_argument(self) -> str | None:
        """Return the ``-P`` list entry, or None when the state is DEFAULT."""
        if self.state is ProfileState.ENABLED:
            return self.name
        if self.state is ProfileState.DISABLED:
            return f"!{self.name}"
        return None

    @property
    def is_active(self) -> bool:
        """Whether Maven will activate this profile with the current state."""
        if self.state is ProfileState.DEFAULT:
            return self.auto_activated
        return self.state is ProfileState.ENABLED


@dataclass
class ProfileSet:
    """
    Ordered collection of profiles for one module.

    Example:
        >>> profiles = ProfileSet.from_names(["dev", "prod"], auto_activated={"prod"})
        >>> profiles.toggle("dev")
        <ProfileState.ENABLED: 'enabled'>
        >>> profiles.toggle("prod")
        <ProfileState.DISABLED: 'disabled'>
        >>> profiles.aggregate_flag()
        '-Pdev,!prod'
    """

    profiles: list[MavenProfile] = field(default_factory=list)

    @classmethod
    def from_names(
        cls, names: Iterable[str], auto_activated: Iterable[str] = ()
    ) -> ProfileSet:
        auto = frozenset(auto_activated)
        return cls([MavenProfile(name=name, auto_activated=name in auto) for name in names])

    def __iter__(self):
        return iter(self.profiles)

    def __len__(self) -> int:
        return len(self.profiles)

    def get(self, name: str) -> MavenProfile | None:
        for profile in self.profiles:
            if profile.name == name:
                return profile
        return None

    def toggle(self, name: str) -> ProfileState:
        """
        Toggle a profile by name.

        Raises:
            KeyError: If no profile has that name
        """
        profile = self.get(name)
        if profile is None:
            raise KeyError(name)
        return profile.toggle()

    def set_state(self, name: str, state: ProfileState) -> None:
        profile = self.get(name)
        if profile is None:
            raise KeyError(name)
        profile.state = state

    def maven_arguments(self) -> list[str]:
        """Explicit ``-P`` entries in collection order."""
        return [arg for p in self.profiles if (arg := p.to_maven_argument()) is not None]

    def aggregate_flag(self) -> str | None:
        """Single ``-P<a>,<b>`` token, or None when no profile is explicit."""
        arguments = self.maven_arguments()
        if not arguments:
            return None
        return "-P" + ",".join(arguments)

    def active_names(self) -> list[str]:
        return [p.name for p in self.profiles if p.is_active]

    def snapshot(self) -> dict[str, str]:
        """Explicit states keyed by profile name, for persistence."""
        return {
            p.name: p.state.value for p in self.profiles if p.state is not ProfileState.DEFAULT
        }

    def restore(self, snapshot: dict[str, str]) -> None:
        """
        Apply a snapshot taken by :meth:`snapshot`.

        Profiles absent from the snapshot go back to DEFAULT; names that no
        longer exist and unreadable states are ignored.
        """
        for profile in self.profiles:
            raw = snapshot.get(profile.name)
            try:
                profile.state = ProfileState(raw) if raw else ProfileState.DEFAULT
            except ValueError:
                profile.state = ProfileState.DEFAULT

    def reset(self) -> None:
        for profile in self.profiles:
            profile.state = ProfileState.DEFAULT
