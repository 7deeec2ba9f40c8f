"""
Unit tests for configuration loader.

Tests multi-layer config merging, environment variable overrides,
caching, and XDG directory handling.
"""

import json
import os

import pytest

from mvnctl.core.config import (
    ConfigError,
    LaunchMode,
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    load_config,
)
from mvnctl.core.config.env import default_project_env_paths, load_layered_env
from mvnctl.core.config.loader import (
    apply_env_overrides,
    deep_merge,
    get_default_config,
    get_xdg_config_home,
    load_json_file,
)
from mvnctl.core.config.models import LoggingConfig, MvnctlConfig, PackageLogLevel

# ==============================================================================
# Helper Functions Tests
# ==============================================================================


class TestDeepMerge:
    """Test the deep_merge helper function."""

    def test_nested_merge(self):
        """Test merging nested dicts."""
        base = {"a": 1, "b": {"x": 10, "y": 20}}
        override = {"b": {"y": 30, "z": 40}, "c": 3}
        assert deep_merge(base, override) == {"a": 1, "b": {"x": 10, "y": 30, "z": 40}, "c": 3}

    def test_override_replaces_lists(self):
        """Test that lists are replaced, not merged."""
        assert deep_merge({"a": [1, 2]}, {"a": [3]}) == {"a": [3]}


class TestLoadJsonFile:
    """Test JSON file loading."""

    def test_load_existing_file(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"key": "value"}))
        assert load_json_file(config_file) == {"key": "value"}

    def test_load_nonexistent_file(self, tmp_path):
        assert load_json_file(tmp_path / "nonexistent.json") is None

    def test_load_invalid_json_logs_warning(self, tmp_path, caplog):
        """Test loading invalid JSON returns None and logs a warning."""
        config_file = tmp_path / "invalid.json"
        config_file.write_text("{ invalid json }")

        assert load_json_file(config_file) is None
        assert "Failed to parse config" in caplog.text

    def test_load_non_object(self, tmp_path):
        config_file = tmp_path / "list.json"
        config_file.write_text("[1, 2]")
        assert load_json_file(config_file) is None


class TestApplyEnvOverrides:
    """Test environment variable override logic."""

    def test_settings_path(self, monkeypatch):
        monkeypatch.setenv("MVNCTL_MAVEN_SETTINGS", "/home/me/.m2/work.xml")
        assert apply_env_overrides({})["maven_settings"] == "/home/me/.m2/work.xml"

    def test_launch_mode(self, monkeypatch):
        monkeypatch.setenv("MVNCTL_LAUNCH_MODE", "force-exec")
        result = apply_env_overrides({"launch": {"scan_sources": False}})
        assert result["launch"] == {"scan_sources": False, "mode": "force-exec"}

    def test_invalid_launch_mode_ignored(self, monkeypatch):
        monkeypatch.setenv("MVNCTL_LAUNCH_MODE", "sideways")
        assert "launch" not in apply_env_overrides({})

    def test_kill_settings(self, monkeypatch):
        monkeypatch.setenv("MVNCTL_KILL_BACKEND", "tree")
        monkeypatch.setenv("MVNCTL_KILL_GRACE_SECONDS", "0.5")
        result = apply_env_overrides({})
        assert result["process"] == {"kill_backend": "tree", "grace_period_seconds": 0.5}

    @pytest.mark.parametrize("value", ["-1", "soon"])
    def test_invalid_grace_ignored(self, monkeypatch, value):
        monkeypatch.setenv("MVNCTL_KILL_GRACE_SECONDS", value)
        assert "process" not in apply_env_overrides({})


class TestPaths:
    """Test XDG and project config paths."""

    def test_xdg_config_home(self, isolated_config_home):
        assert get_xdg_config_home() == isolated_config_home

    def test_user_config_path(self, isolated_config_home):
        assert get_user_config_path() == isolated_config_home / "mvnctl" / "config.json"

    def test_project_config_path(self, tmp_path):
        assert get_project_config_path(tmp_path) == tmp_path / ".mvnctl.json"


# ==============================================================================
# load_config Tests
# ==============================================================================


class TestLoadConfig:
    """Test the full layered load."""

    def test_defaults(self, tmp_path):
        config = load_config(tmp_path)
        assert config.launch.mode is LaunchMode.AUTO
        assert config.process.grace_period_seconds == 2.0
        assert config.maven.custom_flags == []
        assert get_default_config()["process"]["kill_backend"] == "auto"

    def test_precedence(self, tmp_path, isolated_config_home, monkeypatch):
        user_dir = isolated_config_home / "mvnctl"
        user_dir.mkdir()
        (user_dir / "config.json").write_text(
            json.dumps({"maven_settings": "/user.xml", "maven": {"threads": "2"}})
        )
        (tmp_path / ".mvnctl.json").write_text(
            json.dumps({"maven": {"threads": "1C"}, "launch": "force-run"})
        )
        monkeypatch.setenv("MVNCTL_MAVEN_SETTINGS", "/env.xml")

        config = load_config(tmp_path)

        assert config.maven_settings == "/env.xml"
        assert config.maven.threads == "1C"
        assert config.launch.mode is LaunchMode.FORCE_RUN

    def test_cache_and_clear(self, tmp_path):
        first = load_config(tmp_path)
        assert load_config(tmp_path) is first
        clear_cache()
        assert load_config(tmp_path) is not first

    def test_invalid_config_raises(self, tmp_path):
        (tmp_path / ".mvnctl.json").write_text(
            json.dumps({"logging": {"packages": [{"name": "com.example", "level": "LOUD"}]}})
        )
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestModels:
    """Test model helpers."""

    def test_log_level_normalized(self):
        assert PackageLogLevel(name="com.example", level="debug").level == "DEBUG"

    def test_logging_overrides(self):
        logging_config = LoggingConfig(
            packages=[PackageLogLevel(name="a", level="WARN"), PackageLogLevel(name="b", level="TRACE")]
        )
        assert logging_config.overrides() == [("a", "WARN"), ("b", "TRACE")]
        assert logging_config.get_level("b") == "TRACE"
        assert logging_config.get_level("c") is None
        assert not logging_config.is_empty
        assert LoggingConfig().is_empty

    def test_extra_fields_allowed(self):
        config = MvnctlConfig(future_option=True)
        assert config.model_extra == {"future_option": True}

    def test_output_only_bounds_poll_batches(self):
        config = MvnctlConfig(output={"max_lines": 5, "max_updates_per_poll": 20})
        assert config.output.max_updates_per_poll == 20
        assert not hasattr(config.output, "max_lines")


# ==============================================================================
# Layered .env Tests
# ==============================================================================


class TestLoadLayeredEnv:
    """Test user and project .env loading."""

    def test_project_overrides_user_but_not_os(self, tmp_path, monkeypatch):
        user_env = tmp_path / "user.env"
        user_env.write_text("MVNCTL_T_A=user\nMVNCTL_T_B=user\n")
        project_env = tmp_path / "project.env"
        project_env.write_text("MVNCTL_T_B=project\nMVNCTL_T_C=project\n")
        monkeypatch.setenv("MVNCTL_T_C", "os")
        for key in ("MVNCTL_T_A", "MVNCTL_T_B"):
            os.environ.pop(key, None)

        try:
            applied = load_layered_env(user_env_paths=[user_env], project_env_paths=[project_env])

            assert os.environ["MVNCTL_T_A"] == "user"
            assert os.environ["MVNCTL_T_B"] == "project"
            assert os.environ["MVNCTL_T_C"] == "os"
            assert "MVNCTL_T_C" not in applied
        finally:
            for key in ("MVNCTL_T_A", "MVNCTL_T_B"):
                os.environ.pop(key, None)

    def test_missing_files_apply_nothing(self, tmp_path):
        applied = load_layered_env(
            user_env_paths=[tmp_path / "none.env"], project_env_paths=[tmp_path / ".env"]
        )
        assert applied == {}

    def test_default_project_paths_use_maven_root(self, maven_project):
        paths = default_project_env_paths(maven_project / "app")
        assert paths == [maven_project.resolve() / ".env", maven_project.resolve() / ".env.local"]
