"""
Tests for Maven command composition and executable resolution.
"""

import pytest

from mvnctl.core.command import (
    DEFAULT_FLAGS,
    BuildTarget,
    EmptyGoalsError,
    FlagSpec,
    build_command,
    find_wrapper,
    is_run_plugin_goal,
    resolve_maven_executable,
    split_flag_text,
)
from mvnctl.core.command.executable import system_maven_command
from mvnctl.core.profiles import ProfileSet, ProfileState


def flag(name: str) -> FlagSpec:
    return next(f for f in DEFAULT_FLAGS if f.name == name)


# ==============================================================================
# Executable Resolution
# ==============================================================================


class TestResolveMavenExecutable:
    """Test wrapper detection."""

    def test_executable_wrapper_wins(self, wrapper_project):
        assert resolve_maven_executable(wrapper_project) == str(wrapper_project / "mvnw")

    def test_no_wrapper_uses_system_maven(self, maven_project):
        assert find_wrapper(maven_project) is None
        assert resolve_maven_executable(maven_project) == system_maven_command()

    def test_wrapper_without_exec_bit_is_ignored(self, maven_project):
        wrapper = maven_project / "mvnw"
        wrapper.write_text("#!/bin/sh\n")
        wrapper.chmod(0o644)
        assert find_wrapper(maven_project) is None

    def test_wrapper_in_module_is_not_used(self, maven_project):
        wrapper = maven_project / "app" / "mvnw"
        wrapper.write_text("#!/bin/sh\n")
        wrapper.chmod(0o755)
        assert find_wrapper(maven_project) is None


# ==============================================================================
# Flag Text
# ==============================================================================


class TestSplitFlagText:
    """Test tokenization of user-authored flags."""

    def test_alias_list_is_dropped(self):
        assert split_flag_text("-U, --update-snapshots") == ("-U",)

    def test_multiple_tokens(self):
        assert split_flag_text("  -T 4  ") == ("-T", "4")

    def test_from_string(self):
        spec = FlagSpec.from_string("Threads", "-T 1C", enabled_by_default=True)
        assert spec.tokens == ("-T", "1C")
        assert spec.enabled_by_default
        assert spec.text == "-T 1C"


# ==============================================================================
# Command Composition
# ==============================================================================


class TestBuildCommand:
    """Test argv composition and token order."""

    def test_root_module_with_profile_and_flag(self, wrapper_project):
        target = BuildTarget(wrapper_project, ".", resolve_maven_executable(wrapper_project))
        profiles = ProfileSet.from_names(["dev"])
        profiles.toggle("dev")

        command = build_command(target, ["clean", "install"], profiles, [flag("Skip tests")])

        assert command.argv[0] == str(wrapper_project / "mvnw")
        assert list(command.args) == ["-Pdev", "-DskipTests", "clean", "install"]
        assert command.cwd == wrapper_project

    def test_disabled_profile_in_submodule(self, maven_project):
        target = BuildTarget(maven_project, "app", "mvn")
        profiles = ProfileSet.from_names(["x"], auto_activated={"x"})
        profiles.toggle("x")

        command = build_command(target, ["test"], profiles)

        assert list(command.argv) == ["mvn", "-P!x", "-pl", "app", "test"]

    def test_full_token_order(self, maven_project):
        target = BuildTarget(maven_project, "app", "mvn")
        profiles = ProfileSet.from_names(["dev"])
        profiles.set_state("dev", ProfileState.ENABLED)

        command = build_command(
            target,
            ["verify"],
            profiles,
            [flag("Work offline"), flag("Skip tests")],
            settings_path="/s.xml",
            threads="4",
            also_make=["--also-make"],
            properties={"zeta": "1", "alpha": "2"},
        )

        assert list(command.argv) == [
            "mvn",
            "--settings",
            "/s.xml",
            "-Pdev",
            "-T",
            "4",
            "-pl",
            "app",
            "--also-make",
            "-o",
            "-DskipTests",
            "-Dalpha=2",
            "-Dzeta=1",
            "verify",
        ]

    def test_identical_inputs_give_identical_commands(self, maven_project):
        target = BuildTarget(maven_project, "app", "mvn")
        first = build_command(target, ["test"], properties={"b": "1", "a": "2"})
        second = build_command(target, ["test"], properties={"a": "2", "b": "1"})
        assert first.argv == second.argv

    def test_empty_goals_raise(self, maven_project):
        with pytest.raises(EmptyGoalsError):
            build_command(BuildTarget(maven_project), [])

    def test_run_plugin_goal_drops_also_make(self, maven_project):
        target = BuildTarget(maven_project, "app", "mvn")

        command = build_command(
            target,
            ["spring-boot:run"],
            flags=[flag("Build dependencies"), flag("Skip tests")],
        )

        assert "--also-make" not in command.argv
        assert "-DskipTests" in command.argv
        assert command.filtered_flags == ("--also-make",)

    def test_file_flag_scopes_by_pom_and_adds_also_make_for_exec(self, maven_project):
        target = BuildTarget(maven_project, "app", "mvn")

        command = build_command(target, ["exec:java"], use_file_flag=True)

        assert list(command.argv) == [
            "mvn",
            "-f",
            str(maven_project / "app" / "pom.xml"),
            "--also-make",
            "exec:java",
        ]

    def test_file_flag_does_not_duplicate_also_make(self, maven_project):
        target = BuildTarget(maven_project, "app", "mvn")
        command = build_command(
            target, ["exec:java"], flags=[flag("Build dependencies")], use_file_flag=True
        )
        assert command.argv.count("--also-make") == 1

    def test_root_module_has_no_scope(self, maven_project):
        command = build_command(BuildTarget(maven_project), ["package"])
        assert "-pl" not in command.argv
        assert "-f" not in command.argv

    def test_display_is_shell_quoted(self, maven_project):
        command = build_command(
            BuildTarget(maven_project), ["package"], properties={"msg": "hello world"}
        )
        assert command.display() == "mvn '-Dmsg=hello world' package"

    @pytest.mark.parametrize(
        "goal,expected",
        [
            ("spring-boot:run", True),
            ("org.springframework.boot:spring-boot-maven-plugin:1.5.22.RELEASE:run", True),
            ("exec:java", False),
            ("install", False),
        ],
    )
    def test_is_run_plugin_goal(self, goal, expected):
        assert is_run_plugin_goal(goal) is expected
