"""
Tests for the mvnctl CLI.

Commands run through typer's CliRunner against temporary projects. Maven
queries are replaced with canned responses so no build tool is needed.
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from mvnctl import __version__
from mvnctl.cli import app
from mvnctl.cli.errors import ExitCode
from mvnctl.cli.run import parse_properties

runner = CliRunner()

BOOT_POM_LINES = [
    "<project>",
    "  <packaging>jar</packaging>",
    "  <build>",
    "    <plugins>",
    "      <plugin>",
    "        <groupId>org.springframework.boot</groupId>",
    "        <artifactId>spring-boot-maven-plugin</artifactId>",
    "        <version>3.2.0</version>",
    "      </plugin>",
    "    </plugins>",
    "  </build>",
    "</project>",
]


@pytest.fixture(autouse=True)
def canned_maven(monkeypatch, fake_query):
    """Route every Maven query of a session to the fake."""
    monkeypatch.setattr(
        "mvnctl.core.services.session.maven_query_for", lambda *args, **kwargs: fake_query
    )
    return fake_query


def invoke(project: Path, *args: str):
    return runner.invoke(app, ["--project", str(project), *args])


# ==============================================================================
# Top Level
# ==============================================================================


class TestTopLevel:
    """Test global behaviour of the app."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_outside_project_is_user_error(self, tmp_path: Path) -> None:
        result = invoke(tmp_path, "run", "--dry-run", "install")
        assert result.exit_code == ExitCode.USER_ERROR

    def test_unknown_module_is_user_error(self, maven_project: Path) -> None:
        result = invoke(maven_project, "run", "-m", "nope", "--dry-run", "install")
        assert result.exit_code == ExitCode.USER_ERROR

    def test_invalid_config_is_user_error(self, maven_project: Path) -> None:
        (maven_project / ".mvnctl.json").write_text(json.dumps({"launch": "sideways"}))
        result = invoke(maven_project, "run", "--dry-run", "install")
        assert result.exit_code == ExitCode.USER_ERROR


# ==============================================================================
# run
# ==============================================================================


class TestRunCommand:
    """Test `mvnctl run`."""

    def test_dry_run_prints_command(self, wrapper_project: Path) -> None:
        result = invoke(
            wrapper_project, "run", "--dry-run", "-P", "dev", "-F", "Skip tests", "clean", "install"
        )
        assert result.exit_code == 0
        expected = f"{wrapper_project / 'mvnw'} -Pdev -DskipTests clean install"
        assert expected in result.output

    def test_module_and_properties(self, wrapper_project: Path) -> None:
        result = invoke(
            wrapper_project, "run", "--dry-run", "-m", "app", "-D", "env=local", "-P", "!slow", "test"
        )
        assert result.exit_code == 0
        assert "'-P!slow' -pl app -Denv=local test" in result.output

    def test_saved_profiles_apply_unless_disabled(self, wrapper_project: Path, canned_maven) -> None:
        canned_maven.responses["help:all-profiles"] = [
            "[INFO]   Profile Id: dev (Active: false , Source: pom)",
        ]
        assert invoke(wrapper_project, "profiles", "toggle", "dev").exit_code == 0

        result = invoke(wrapper_project, "run", "--dry-run", "install")
        assert "-Pdev install" in result.output

        result = invoke(wrapper_project, "run", "--dry-run", "--no-saved", "install")
        assert "-Pdev" not in result.output

    def test_unknown_flag(self, wrapper_project: Path) -> None:
        result = invoke(wrapper_project, "run", "--dry-run", "-F", "Go faster", "install")
        assert result.exit_code == ExitCode.USER_ERROR

    def test_no_goals(self, wrapper_project: Path) -> None:
        result = invoke(wrapper_project, "run", "--dry-run")
        assert result.exit_code == ExitCode.USER_ERROR

    def test_runs_wrapper_and_reports_exit_code(self, maven_project: Path) -> None:
        wrapper = maven_project / "mvnw"
        wrapper.write_text('#!/bin/sh\necho "BUILD $*"\nexit 4\n')
        wrapper.chmod(0o755)

        result = invoke(maven_project, "run", "install")

        assert "BUILD install" in result.output
        assert result.exit_code == ExitCode.GENERAL_ERROR

    def test_parse_properties(self) -> None:
        assert parse_properties(["a=1", "flag", "b=x=y"]) == {"a": "1", "flag": "true", "b": "x=y"}


# ==============================================================================
# Profiles
# ==============================================================================


class TestProfilesCommand:
    """Test `mvnctl profiles`."""

    def test_lists_discovered_profiles(self, maven_project: Path, canned_maven) -> None:
        canned_maven.responses["help:all-profiles"] = [
            "[INFO]   Profile Id: dev (Active: false , Source: pom)",
            "[INFO]   Profile Id: it (Active: false , Source: pom)",
        ]
        result = invoke(maven_project, "profiles")
        assert result.exit_code == 0
        assert "dev" in result.output
        assert "it" in result.output

    def test_toggle_unknown_profile(self, maven_project: Path) -> None:
        result = invoke(maven_project, "profiles", "toggle", "nope")
        assert result.exit_code == ExitCode.USER_ERROR

    def test_toggle_then_reset(self, maven_project: Path, canned_maven) -> None:
        canned_maven.responses["help:all-profiles"] = [
            "[INFO]   Profile Id: dev (Active: false , Source: pom)",
        ]
        result = invoke(maven_project, "profiles", "toggle", "dev")
        assert result.exit_code == 0
        assert "-Pdev" in result.output

        result = invoke(maven_project, "profiles", "reset")
        assert result.exit_code == 0
        assert "-Pdev" not in result.output


# ==============================================================================
# Launch and Detection
# ==============================================================================


class TestLaunchCommand:
    """Test `mvnctl detect` and `mvnctl launch`."""

    def test_detect_run_plugin(self, maven_project: Path, canned_maven) -> None:
        canned_maven.responses["help:effective-pom"] = BOOT_POM_LINES
        result = invoke(maven_project, "detect", "-m", "app")
        assert result.exit_code == 0
        assert "spring-boot:run" in result.output

    def test_detect_nothing_is_user_error(self, maven_project: Path, canned_maven) -> None:
        canned_maven.responses["help:effective-pom"] = ["<project>", "</project>"]
        result = invoke(maven_project, "detect", "-m", "app")
        assert result.exit_code == ExitCode.USER_ERROR

    def test_launch_dry_run_with_main_class(self, maven_project: Path) -> None:
        result = invoke(
            maven_project,
            "launch",
            "-m",
            "app",
            "--mode",
            "force-exec",
            "--main-class",
            "com.example.Main",
            "--dry-run",
        )
        assert result.exit_code == 0
        assert "-Dexec.mainClass=com.example.Main" in result.output
        assert "exec:java" in result.output

    def test_launch_dry_run_run_plugin(self, maven_project: Path, canned_maven) -> None:
        canned_maven.responses["help:effective-pom"] = BOOT_POM_LINES
        result = invoke(maven_project, "launch", "-m", "app", "--dry-run")
        assert result.exit_code == 0
        assert "spring-boot:run" in result.output


# ==============================================================================
# Overrides and Starters
# ==============================================================================


class TestOverridesCommand:
    """Test `mvnctl overrides`."""

    def test_nothing_configured(self, maven_project: Path) -> None:
        result = invoke(maven_project, "overrides")
        assert result.exit_code == 0
        assert "Nothing to override" in result.output

    def test_writes_files_and_prints_jvm_args(self, maven_project: Path) -> None:
        (maven_project / ".mvnctl.json").write_text(
            json.dumps({"logging": {"packages": [{"name": "com.example", "level": "debug"}]}})
        )
        result = invoke(maven_project, "overrides", "--show")
        assert result.exit_code == 0
        assert "log4j.logger.com.example=DEBUG" in result.output
        assert "-Dlogging.level.com.example=DEBUG" in result.output


class TestStartersCommand:
    """Test `mvnctl starters`."""

    def test_empty_listing(self, maven_project: Path) -> None:
        result = invoke(maven_project, "starters")
        assert result.exit_code == 0
        assert "No starters registered" in result.output

    def test_add_default_and_remove(self, maven_project: Path) -> None:
        assert invoke(maven_project, "starters", "add", "com.example.Main").exit_code == 0
        assert invoke(maven_project, "starters", "default", "com.example.Main").exit_code == 0

        listing = invoke(maven_project, "starters")
        assert "com.example.Main" in listing.output

        assert invoke(maven_project, "starters", "remove", "com.example.Main").exit_code == 0
        result = invoke(maven_project, "starters", "remove", "com.example.Main")
        assert result.exit_code == ExitCode.USER_ERROR

    def test_scan_finds_main_classes(self, maven_project: Path) -> None:
        sources = maven_project / "app" / "src" / "main" / "java" / "com" / "example"
        sources.mkdir(parents=True)
        (sources / "App.java").write_text(
            "package com.example;\n\n"
            "public class App {\n"
            "    public static void main(String[] args) {}\n"
            "}\n"
        )
        result = invoke(maven_project, "starters", "scan", "-m", "app")
        assert result.exit_code == 0
        assert "com.example.App" in result.output


# ==============================================================================
# check
# ==============================================================================


class TestCheckCommand:
    """Test `mvnctl check`."""

    def test_reports_wrapper_version(self, maven_project: Path) -> None:
        wrapper = maven_project / "mvnw"
        wrapper.write_text('#!/bin/sh\necho "Apache Maven 3.9.6"\necho "Java version: 21"\n')
        wrapper.chmod(0o755)

        result = invoke(maven_project, "check")

        assert result.exit_code == 0
        assert "Maven wrapper" in result.output
        assert "Apache Maven 3.9.6" in result.output

    def test_failing_wrapper_is_general_error(self, maven_project: Path) -> None:
        wrapper = maven_project / "mvnw"
        wrapper.write_text('#!/bin/sh\necho "[ERROR] JAVA_HOME is not set"\nexit 1\n')
        wrapper.chmod(0o755)

        result = invoke(maven_project, "check")

        assert result.exit_code == ExitCode.GENERAL_ERROR
