"""
Pytest configuration and shared fixtures.

Provides fixtures for temporary Maven projects, an isolated config home,
in-memory stores and canned Maven query responses.
"""

import stat
from pathlib import Path
from typing import Sequence

import pytest

from mvnctl.core.config import clear_cache
from mvnctl.core.store import JsonKeyValueStore, MemoryKeyValueStore

ROOT_POM = """<project>
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.example</groupId>
  <artifactId>shop</artifactId>
  <packaging>pom</packaging>
  <modules>
    <module>app</module>
  </modules>
</project>
"""

MODULE_POM = """<project>
  <modelVersion>4.0.0</modelVersion>
  <artifactId>app</artifactId>
</project>
"""

# ==============================================================================
# Environment Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path, monkeypatch):
    """Point the user config directory at a temp dir and reset the config cache."""
    config_home = tmp_path / "xdg"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    for var in (
        "MVNCTL_MAVEN_SETTINGS",
        "MVNCTL_LAUNCH_MODE",
        "MVNCTL_KILL_BACKEND",
        "MVNCTL_KILL_GRACE_SECONDS",
    ):
        monkeypatch.delenv(var, raising=False)
    clear_cache()
    yield config_home
    clear_cache()


# ==============================================================================
# Project Fixtures
# ==============================================================================


def make_executable(path: Path, content: str = "#!/bin/sh\nexit 0\n") -> Path:
    path.write_text(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def maven_project(tmp_path):
    """
    Provide a two-level Maven project.

    Creates:
    - pom.xml (aggregator)
    - app/pom.xml (module)
    """
    root = tmp_path / "shop"
    root.mkdir()
    (root / "pom.xml").write_text(ROOT_POM)
    (root / "app").mkdir()
    (root / "app" / "pom.xml").write_text(MODULE_POM)
    return root


@pytest.fixture
def wrapper_project(maven_project):
    """Maven project with an executable ./mvnw wrapper."""
    make_executable(maven_project / "mvnw")
    return maven_project


@pytest.fixture
def memory_store():
    return MemoryKeyValueStore()


@pytest.fixture
def unwritable_store(tmp_path):
    """JSON store whose parent path is a regular file, so every write fails."""
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    return JsonKeyValueStore(blocker / "cache.json")


# ==============================================================================
# Maven Query Fixtures
# ==============================================================================


class FakeMavenQuery:
    """
    Canned responses keyed by the first goal token.

    Records every call; raises the configured exception for a goal when one
    is registered in ``failures``.
    """

    def __init__(self, responses: dict[str, list[str]] | None = None) -> None:
        self.responses = responses or {}
        self.failures: dict[str, Exception] = {}
        self.calls: list[list[str]] = []

    def __call__(self, goals: Sequence[str]) -> list[str]:
        goals = list(goals)
        self.calls.append(goals)
        key = goals[0] if goals else ""
        if key in self.failures:
            raise self.failures[key]
        return list(self.responses.get(key, []))

    def count(self, goal: str) -> int:
        return sum(1 for call in self.calls if call and call[0] == goal)


@pytest.fixture
def fake_query():
    return FakeMavenQuery()
