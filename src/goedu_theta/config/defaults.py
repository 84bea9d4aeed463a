# MIT License
#
# Copyright (c) 2025 Democratize Technology
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Default configuration values and field bindings for goedu-theta.

This module provides the compiled-in configuration that every resolution
starts from, the file naming convention of the configuration directory, and
the static binding tables that map each field to its JSON key and its
environment variable.
"""

from pathlib import Path

from .schema import (
    VALID_ENVIRONMENTS,
    AppConfig,
    DatabaseConfig,
    DiagnosticConfig,
    FieldBinding,
    FieldKind,
    LoggerConfig,
    SectionSchema,
    ServerConfig,
)

# Default configuration instance
DEFAULT_CONFIG = AppConfig()

DEFAULT_ENVIRONMENT = "development"
ENVIRONMENT_VARIABLE = "ENVIRONMENT"

# Configuration directory layout
DEFAULT_CONFIG_DIR = "configs"
DEFAULT_DOTENV_PATH = ".env"
CONFIG_FILE_NAME = "config"
CONFIG_FILE_EXTENSION = ".json"
LOCAL_CONFIG_SUFFIX = "local"

TEXT = FieldKind.TEXT
BOOLEAN = FieldKind.BOOLEAN
INTEGER = FieldKind.INTEGER

LOGGER_SCHEMA = SectionSchema(
    name="logger",
    model=LoggerConfig,
    fields=(
        FieldBinding("level", "level", "SLOG_LEVEL", TEXT),
        FieldBinding("format", "format", "SLOG_FORMAT", TEXT),
        FieldBinding("output", "output", "SLOG_OUTPUT", TEXT),
        FieldBinding("add_source", "add_source", "SLOG_ADD_SOURCE", BOOLEAN),
    ),
)

SERVER_SCHEMA = SectionSchema(
    name="server",
    model=ServerConfig,
    fields=(
        FieldBinding("port", "port", "SERVER_PORT", INTEGER),
        FieldBinding("host", "host", "SERVER_HOST", TEXT),
        FieldBinding("read_timeout", "read_timeout", "SERVER_READ_TIMEOUT", INTEGER),
        FieldBinding("write_timeout", "write_timeout", "SERVER_WRITE_TIMEOUT", INTEGER),
        FieldBinding("shutdown_timeout", "shutdown_timeout", "SERVER_SHUTDOWN_TIMEOUT", INTEGER),
    ),
)

DATABASE_SCHEMA = SectionSchema(
    name="database",
    model=DatabaseConfig,
    fields=(
        FieldBinding("host", "host", "DATABASE_HOST", TEXT),
        FieldBinding("port", "port", "DATABASE_PORT", INTEGER),
        FieldBinding("user", "user", "DATABASE_USER", TEXT, sensitive=True),
        FieldBinding("password", "password", "DATABASE_PASSWORD", TEXT, sensitive=True),
        FieldBinding("name", "name", "DATABASE_NAME", TEXT),
    ),
)

TEST_SCHEMA = SectionSchema(
    name="test",
    model=DiagnosticConfig,
    fields=(
        FieldBinding("label_def", "label_def", "TEST_LABEL_DEF", TEXT),
        FieldBinding("label_env", "label_env", "TEST_LABEL_ENV", TEXT),
        FieldBinding("label_override", "label_override", "TEST_LABEL_OVERRIDE", TEXT),
    ),
)

# The deployment mode is pinned by the resolver, so ``environment`` has no binding.
APP_SCHEMA = SectionSchema(
    name="",
    model=AppConfig,
    fields=(
        FieldBinding("logger", "logger", None, FieldKind.SECTION, section=LOGGER_SCHEMA),
        FieldBinding("server", "server", None, FieldKind.SECTION, section=SERVER_SCHEMA),
        FieldBinding("database", "database", None, FieldKind.SECTION, section=DATABASE_SCHEMA),
        FieldBinding("test", "test", None, FieldKind.SECTION, section=TEST_SCHEMA),
    ),
)


def default_config(environment: str = DEFAULT_ENVIRONMENT) -> AppConfig:
    """Get the compiled-in defaults with the deployment mode pinned."""
    if environment not in VALID_ENVIRONMENTS:
        raise ValueError(f"Unknown environment: {environment}")
    return DEFAULT_CONFIG.model_copy(update={"environment": environment})


def config_file_paths(config_dir: str | Path, environment: str) -> tuple[Path, Path, Path]:
    """Get the base, mode-specific and local file paths for a mode."""
    directory = Path(config_dir)
    return (
        directory / f"{CONFIG_FILE_NAME}{CONFIG_FILE_EXTENSION}",
        directory / f"{CONFIG_FILE_NAME}.{environment}{CONFIG_FILE_EXTENSION}",
        directory / f"{CONFIG_FILE_NAME}.{LOCAL_CONFIG_SUFFIX}{CONFIG_FILE_EXTENSION}",
    )


def env_var_mapping(schema: SectionSchema = APP_SCHEMA, prefix: str = "") -> dict[str, str]:
    """Map every bound environment variable to its dotted field path."""
    mapping: dict[str, str] = {}
    for binding in schema.fields:
        path = f"{prefix}{binding.attr}"
        if binding.section is not None:
            mapping.update(env_var_mapping(binding.section, f"{path}."))
        elif binding.env:
            mapping[binding.env] = path
    return mapping


def env_var_types(schema: SectionSchema = APP_SCHEMA) -> dict[str, FieldKind]:
    """Map every bound environment variable to the kind its value is coerced to."""
    types: dict[str, FieldKind] = {}
    for binding in schema.fields:
        if binding.section is not None:
            types.update(env_var_types(binding.section))
        elif binding.env:
            types[binding.env] = binding.kind
    return types


# Environment variable tables for help output
ENV_VAR_MAPPING = env_var_mapping()
ENV_VAR_TYPES = env_var_types()
