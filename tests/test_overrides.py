"""Tests for environment variable overrides."""

import logging
import os
from unittest.mock import patch

from goedu_theta.config.defaults import default_config
from goedu_theta.config.loader import merge_document
from goedu_theta.config.overrides import (
    apply_environment_overrides,
    lookup_override,
    walk_fields,
)
from goedu_theta.config.schema import Source


def _base():
    return merge_document(default_config(), {"server": {"port": 8080}, "logger": {"level": "warn"}})


class TestLookupOverride:
    """Process environment first, then dotenv; empty counts as unset."""

    def test_process_environment_wins(self):
        found = lookup_override("SERVER_PORT", {"SERVER_PORT": "1"}, {"SERVER_PORT": "2"})

        assert found == ("1", Source.PROCESS_ENVIRONMENT)

    def test_dotenv_fallback(self):
        found = lookup_override("SERVER_PORT", {}, {"SERVER_PORT": "2"})

        assert found == ("2", Source.DOTENV_FILE)

    def test_empty_process_value_falls_back_to_dotenv(self):
        found = lookup_override("SERVER_PORT", {"SERVER_PORT": ""}, {"SERVER_PORT": "2"})

        assert found == ("2", Source.DOTENV_FILE)

    def test_nothing_found(self):
        assert lookup_override("SERVER_PORT", {"SERVER_PORT": ""}, {"SERVER_PORT": ""}) is None


class TestWalkFields:
    """The walker reaches every nested leaf."""

    def test_reaches_nested_leaves(self):
        paths = {field.path for field in walk_fields()}

        assert ("database", "password") in paths
        assert ("logger", "add_source") in paths

    def test_sections_are_not_yielded(self):
        assert all(len(field.path) == 2 for field in walk_fields())


class TestApplyEnvironmentOverrides:
    """Override application, coercion and logging."""

    def test_environment_beats_files(self):
        config = apply_environment_overrides(_base(), {}, environ={"SLOG_LEVEL": "error"})

        assert config.logger.level == "error"

    def test_dotenv_applies_when_environment_unset(self):
        config = apply_environment_overrides(_base(), {"SERVER_PORT": "9090"}, environ={})

        assert config.server.port == 9090

    def test_environment_beats_dotenv(self):
        config = apply_environment_overrides(
            _base(),
            {"SERVER_PORT": "9090"},
            environ={"SERVER_PORT": "7070"},
        )

        assert config.server.port == 7070

    def test_no_override_keeps_file_value(self, debug_caplog):
        config = apply_environment_overrides(_base(), {}, environ={})

        assert config == _base()
        assert "No override found for server.port (SERVER_PORT)" in debug_caplog.text

    def test_boolean_override(self):
        config = apply_environment_overrides(_base(), {}, environ={"SLOG_ADD_SOURCE": "false"})

        assert config.logger.add_source is False

    def test_bad_integer_keeps_previous_value(self, caplog):
        caplog.set_level(logging.WARNING, logger="goedu_theta")

        config = apply_environment_overrides(
            _base(),
            {},
            environ={"SERVER_PORT": "not-a-number", "SERVER_HOST": "example"},
        )

        assert config.server.port == 8080
        assert config.server.host == "example"
        assert "Ignoring override for server.port from environment" in caplog.text
        assert "'not-a-number'" in caplog.text

    def test_out_of_range_value_keeps_previous_value(self, caplog):
        caplog.set_level(logging.WARNING, logger="goedu_theta")

        config = apply_environment_overrides(_base(), {"SERVER_PORT": "70000"}, environ={})

        assert config.server.port == 8080
        assert "Ignoring override for server.port from .env" in caplog.text

    def test_log_format_is_normalized(self):
        config = apply_environment_overrides(_base(), {}, environ={"SLOG_FORMAT": "PRETTY"})

        assert config.logger.format == "pretty"

    def test_sensitive_values_are_masked(self, caplog):
        caplog.set_level(logging.INFO, logger="goedu_theta")

        config = apply_environment_overrides(
            _base(),
            {},
            environ={"DATABASE_PASSWORD": "hunter2", "DATABASE_USER": "admin"},
        )

        assert config.database.password == "hunter2"
        assert config.database.user == "admin"
        assert "hunter2" not in caplog.text
        assert "admin" not in caplog.text
        assert "Overriding database.password from environment (DATABASE_PASSWORD=***)" in caplog.text

    def test_info_log_names_source(self, caplog):
        caplog.set_level(logging.INFO, logger="goedu_theta")

        apply_environment_overrides(_base(), {"TEST_LABEL_OVERRIDE": "dotenv"}, environ={})

        assert "Overriding test.label_override from .env (TEST_LABEL_OVERRIDE=dotenv)" in caplog.text

    def test_records_provenance(self):
        provenance = {}

        apply_environment_overrides(
            _base(),
            {"SERVER_HOST": "dotenv-host"},
            environ={"SERVER_PORT": "9999", "SLOG_ADD_SOURCE": "maybe"},
            provenance=provenance,
        )

        assert provenance == {
            "server.port": Source.PROCESS_ENVIRONMENT,
            "server.host": Source.DOTENV_FILE,
        }

    def test_defaults_to_os_environ(self):
        with patch.dict(os.environ, {"SERVER_READ_TIMEOUT": "45"}):
            config = apply_environment_overrides(_base(), {})

        assert config.server.read_timeout == 45

    def test_input_is_not_mutated(self):
        base = _base()

        apply_environment_overrides(base, {}, environ={"SERVER_PORT": "9090"})

        assert base.server.port == 8080

    def test_idempotent(self):
        environ = {"SERVER_PORT": "9090", "SLOG_LEVEL": "info"}
        dotenv_map = {"DATABASE_NAME": "goedu"}

        once = apply_environment_overrides(_base(), dotenv_map, environ=environ)
        twice = apply_environment_overrides(once, dotenv_map, environ=environ)

        assert once == twice
