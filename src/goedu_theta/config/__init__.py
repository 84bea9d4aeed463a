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

"""Configuration resolution for goedu-theta.

This package builds the application configuration from layered sources:
- Compiled-in defaults
- A mandatory base JSON file and optional mode-specific and local files
- A .env file and the process environment, applied per field through an
  explicit binding schema
- Type coercion of override values with skip-and-warn on bad input
- Advisory validation of the result
"""

from .coercion import coerce, try_coerce
from .defaults import APP_SCHEMA, DEFAULT_CONFIG, default_config, env_var_mapping, env_var_types
from .dotenv_map import build_env_map
from .loader import load_into, merge_document
from .overrides import apply_environment_overrides, walk_fields
from .resolver import ConfigResolver, redacted_config, resolve_config
from .schema import (
    AppConfig,
    DatabaseConfig,
    DiagnosticConfig,
    FieldBinding,
    FieldKind,
    LoggerConfig,
    SectionSchema,
    ServerConfig,
    Source,
)
from .validation import ConfigValidationError, ConfigValidator

__all__ = [
    "APP_SCHEMA",
    "DEFAULT_CONFIG",
    "AppConfig",
    "ConfigResolver",
    "ConfigValidationError",
    "ConfigValidator",
    "DatabaseConfig",
    "DiagnosticConfig",
    "FieldBinding",
    "FieldKind",
    "LoggerConfig",
    "SectionSchema",
    "ServerConfig",
    "Source",
    "apply_environment_overrides",
    "build_env_map",
    "coerce",
    "default_config",
    "env_var_mapping",
    "env_var_types",
    "load_into",
    "merge_document",
    "redacted_config",
    "resolve_config",
    "try_coerce",
    "walk_fields",
]
