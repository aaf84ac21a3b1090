"""Tests for custom exception hierarchy."""

import pytest

from brewdeck.exceptions import (
    BrewCommandError,
    BrewDeckError,
    BrewError,
    BrewNotFoundError,
    BrewParseError,
    ConfigError,
    ConfigLoadError,
    ConfigSaveError,
    ConfigValidationError,
    ErrorStats,
    FavoritesError,
    error_stats,
    record_error,
)


class TestExceptionHierarchy:
    """Test that exceptions are properly organized in hierarchy."""

    def test_base_exception_properties(self):
        """BrewDeckError has expected properties."""
        exc = BrewDeckError("test message", context={"key": "value"})
        assert exc.message == "test message"
        assert exc.context == {"key": "value"}
        assert exc.timestamp is not None
        assert exc.cause is None

    def test_base_exception_with_cause(self):
        """BrewDeckError can have a cause exception."""
        cause = ValueError("original error")
        exc = BrewDeckError("wrapped error", cause=cause)
        assert exc.cause is cause

    def test_base_exception_str_with_context(self):
        """str() includes context when present."""
        exc = BrewDeckError("test", context={"file": "test.txt"})
        result = str(exc)
        assert "test" in result
        assert "file=test.txt" in result

    def test_base_exception_str_without_context(self):
        """str() is just message when no context."""
        exc = BrewDeckError("just a message")
        assert str(exc) == "just a message"

    @pytest.mark.parametrize(
        "exc_class",
        [BrewCommandError, BrewNotFoundError, BrewParseError],
    )
    def test_brew_errors_inherit_from_brew_error(self, exc_class):
        """All brew errors can be caught as BrewError."""
        assert issubclass(exc_class, BrewError)
        assert issubclass(exc_class, BrewDeckError)

    @pytest.mark.parametrize(
        "exc_class",
        [ConfigLoadError, ConfigSaveError, ConfigValidationError, FavoritesError],
    )
    def test_config_errors_inherit_from_config_error(self, exc_class):
        """All config errors can be caught as ConfigError."""
        assert issubclass(exc_class, ConfigError)
        assert not issubclass(exc_class, BrewError)


class TestBrewErrors:
    """Test Homebrew-related exceptions."""

    def test_command_error_str_is_operator_message(self):
        """BrewCommandError str() leaves out the debugging context."""
        exc = BrewCommandError(
            "brew upgrade failed: Error: wget not installed",
            command="upgrade wget",
            returncode=1,
            stderr="Error: wget not installed\n",
        )
        assert str(exc) == "brew upgrade failed: Error: wget not installed"
        assert exc.context["command"] == "upgrade wget"
        assert exc.context["returncode"] == 1

    def test_command_error_keeps_stderr(self):
        """BrewCommandError exposes raw stderr."""
        exc = BrewCommandError("failed", stderr="boom")
        assert exc.stderr == "boom"

    def test_command_error_stderr_defaults_empty(self):
        """Missing stderr becomes an empty string."""
        exc = BrewCommandError("failed")
        assert exc.stderr == ""
        assert exc.returncode is None

    def test_not_found_message_names_binary(self):
        """BrewNotFoundError names the missing executable."""
        exc = BrewNotFoundError("/opt/homebrew/bin/brew")
        assert exc.message == "/opt/homebrew/bin/brew not found in PATH"
        assert exc.context["brew_path"] == "/opt/homebrew/bin/brew"

    def test_parse_error_default_message(self):
        """BrewParseError has a default message."""
        exc = BrewParseError()
        assert "parse" in exc.message.lower()

    def test_parse_error_records_command(self):
        """BrewParseError stores the command in context."""
        exc = BrewParseError("bad json", command="info --json=v2 wget")
        assert exc.context["command"] == "info --json=v2 wget"


class TestConfigErrors:
    """Test configuration-related exceptions."""

    def test_config_load_error_with_file_path(self):
        """ConfigLoadError stores file path in context."""
        exc = ConfigLoadError(file_path="/path/to/config.json")
        assert exc.context["file_path"] == "/path/to/config.json"

    def test_config_validation_error_with_field(self):
        """ConfigValidationError stores field info."""
        exc = ConfigValidationError(field="log_capacity", value=0)
        assert exc.context["field"] == "log_capacity"
        assert exc.context["value"] == "0"

    def test_config_validation_error_truncates_value(self):
        """Long values are truncated to 100 characters."""
        exc = ConfigValidationError(field="brew_path", value="x" * 500)
        assert len(exc.context["value"]) == 100

    def test_config_save_error_default_message(self):
        """ConfigSaveError has a default message."""
        exc = ConfigSaveError()
        assert "save" in exc.message.lower()

    def test_favorites_error_with_file_path(self):
        """FavoritesError stores file path in context."""
        exc = FavoritesError("Failed to write favorites file", file_path="/tmp/favorites.json")
        assert exc.message == "Failed to write favorites file"
        assert exc.context["file_path"] == "/tmp/favorites.json"


class TestErrorStats:
    """Test error statistics tracking."""

    def test_record_counts_by_type(self):
        """Errors are counted in total and by type name."""
        stats = ErrorStats()
        stats.record(BrewCommandError("a"))
        stats.record(BrewCommandError("b"))
        stats.record(ValueError("c"))

        assert stats.total_count == 3
        assert stats.by_type == {"BrewCommandError": 2, "ValueError": 1}

    def test_recent_errors_are_bounded(self):
        """Only the most recent errors are kept."""
        stats = ErrorStats(max_recent=3)
        for i in range(5):
            stats.record(ValueError(f"error {i}"))

        assert len(stats.recent_errors) == 3
        assert stats.recent_errors[0][2] == "error 2"
        assert stats.recent_errors[-1][2] == "error 4"

    def test_recent_error_message_truncated(self):
        """Long messages are truncated in the recent list."""
        stats = ErrorStats()
        stats.record(ValueError("x" * 500))
        assert len(stats.recent_errors[0][2]) == 200

    def test_reset(self):
        """reset() clears everything."""
        stats = ErrorStats()
        stats.record(ValueError("x"))
        stats.reset()
        assert stats.total_count == 0
        assert stats.by_type == {}
        assert stats.recent_errors == []

    def test_record_error_updates_global_stats(self):
        """record_error() feeds the module-level tracker."""
        before = error_stats.total_count
        record_error(BrewParseError("bad"))
        assert error_stats.total_count == before + 1
        assert error_stats.by_type["BrewParseError"] >= 1
