"""
Tests for override file generation and the JVM arguments referencing them.
"""

import pytest

from mvnctl.core.overrides import (
    DEFAULT_CONVERSION_PATTERN,
    InvalidOverrideError,
    OverrideGenerator,
    OverrideKind,
    build_override_jvm_args,
    java_tool_options_env,
    normalize_level,
    render_logging_config,
    render_properties_config,
)
from mvnctl.core.overrides.jvm import LOG4J_BOOTSTRAP_ARGS

# ==============================================================================
# Rendering
# ==============================================================================


class TestRenderLoggingConfig:
    """Test the log4j 1.x document."""

    def test_always_has_root_logger_and_appender(self):
        content = render_logging_config([])
        assert "log4j.rootLogger=INFO, CONSOLE\n" in content
        assert "log4j.appender.CONSOLE=org.apache.log4j.ConsoleAppender\n" in content
        assert f"ConversionPattern={DEFAULT_CONVERSION_PATTERN}\n" in content
        assert content.endswith("\n")

    def test_overrides_in_order_with_upper_case_levels(self):
        content = render_logging_config([("com.example", "debug"), ("org.hibernate", "WARN")])
        lines = content.splitlines()
        assert lines[-2:] == ["log4j.logger.com.example=DEBUG", "log4j.logger.org.hibernate=WARN"]

    def test_custom_pattern(self):
        content = render_logging_config([], log_format="%m%n")
        assert "log4j.appender.CONSOLE.layout.ConversionPattern=%m%n\n" in content

    def test_unknown_level_rejected(self):
        with pytest.raises(InvalidOverrideError):
            render_logging_config([("com.example", "LOUD")])

    def test_line_break_in_package_rejected(self):
        with pytest.raises(InvalidOverrideError):
            render_logging_config([("com.example\nlog4j.rootLogger", "DEBUG")])

    def test_normalize_level(self):
        assert normalize_level("p", " trace ") == "TRACE"


class TestRenderPropertiesConfig:
    """Test the application properties document."""

    def test_properties_and_profiles(self):
        content = render_properties_config(
            [("server.port", "8081"), ("app.name", "a=b")], active_profiles=["local", "h2"]
        )
        lines = content.splitlines()
        assert "spring.profiles.active=local,h2" in lines
        assert lines[-2:] == ["server.port=8081", "app.name=a=b"]

    def test_log_format_replaces_user_patterns(self):
        content = render_properties_config(
            [("logging.pattern.console", "old"), ("server.port", "1")], log_format="%msg%n"
        )
        lines = content.splitlines()
        assert "logging.pattern.console=old" not in lines
        assert "logging.pattern.console=%msg%n" in lines
        assert "logging.pattern.file=%msg%n" in lines

    def test_equals_in_key_rejected(self):
        with pytest.raises(InvalidOverrideError):
            render_properties_config([("a=b", "c")])


# ==============================================================================
# Generator
# ==============================================================================


class TestOverrideGenerator:
    """Test writing override files."""

    def test_file_names_derive_from_hash(self, tmp_path):
        generator = OverrideGenerator(tmp_path / "overrides")
        logging_file = generator.generate_logging([("com.example", "DEBUG")], "1a2b3c4d")
        properties_file = generator.generate_properties([("server.port", "8081")], "1a2b3c4d")

        assert logging_file.path.name == "log4j-override-1a2b3c4d.properties"
        assert properties_file.path.name == "application-override-1a2b3c4d.properties"
        assert logging_file.kind is OverrideKind.LOGGING
        assert generator.existing("1a2b3c4d") == [logging_file.path, properties_file.path]

    def test_regeneration_replaces_content(self, tmp_path):
        generator = OverrideGenerator(tmp_path)
        generator.generate_logging([("a", "DEBUG")], "h")
        generated = generator.generate_logging([("b", "WARN")], "h")

        content = generated.path.read_text(encoding="utf-8")
        assert "log4j.logger.b=WARN" in content
        assert "log4j.logger.a" not in content

    def test_nothing_to_write(self, tmp_path):
        generator = OverrideGenerator(tmp_path / "overrides")
        assert generator.generate_logging([], "h") is None
        assert generator.generate_properties([], "h") is None
        assert not (tmp_path / "overrides").exists()

    def test_unwritable_directory_returns_none(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        generator = OverrideGenerator(blocker / "overrides")
        assert generator.generate_logging([("a", "DEBUG")], "h") is None

    def test_url_is_file_uri(self, tmp_path):
        generated = OverrideGenerator(tmp_path).generate_logging([("a", "INFO")], "h")
        assert generated.url.startswith("file:")
        assert generated.url.endswith("log4j-override-h.properties")


# ==============================================================================
# JVM Arguments
# ==============================================================================


class TestJvmArgs:
    """Test arguments pointing the application at the override files."""

    def test_both_files_and_levels(self, tmp_path):
        generator = OverrideGenerator(tmp_path)
        logging_file = generator.generate_logging([("com.example", "DEBUG")], "h")
        properties_file = generator.generate_properties([("a", "b")], "h")

        args = build_override_jvm_args(logging_file, properties_file, [("com.example", "debug")])

        assert args[: len(LOG4J_BOOTSTRAP_ARGS)] == list(LOG4J_BOOTSTRAP_ARGS)
        assert f"-Dlog4j.configuration={logging_file.url}" in args
        assert "-Dlogging.level.com.example=DEBUG" in args
        assert "-Dlog4j.logger.com.example=DEBUG" in args
        assert args[-1] == f"-Dspring.config.additional-location={properties_file.url}"

    def test_no_files(self):
        assert build_override_jvm_args() == []

    def test_java_tool_options(self, tmp_path):
        logging_file = OverrideGenerator(tmp_path).generate_logging([("a", "INFO")], "h")
        env = java_tool_options_env(logging_file)
        assert f"-Dlog4j.configuration={logging_file.url}" in env["JAVA_TOOL_OPTIONS"]
        assert java_tool_options_env(None) == {}
