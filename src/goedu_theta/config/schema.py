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

"""Configuration schema definitions for goedu-theta.

This module defines the configuration tree as frozen Pydantic models plus the
static field-binding types that describe, for every field, where a value may
come from: a key in a JSON configuration document and, optionally, an
environment variable. The binding tables themselves live in ``defaults``.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, field_validator

VALID_ENVIRONMENTS = ("development", "test", "staging", "production")

# Unrecognised values fall back to "info" and "text" when logging is configured.
LOG_LEVEL_NAMES = ("debug", "info", "warn", "warning", "error")
LOG_FORMATS = ("text", "json", "pretty")


class FieldKind(str, Enum):
    """Semantic type of a configuration field."""

    TEXT = "text"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    SECTION = "section"


class Source(IntEnum):
    """Origins of configuration values, ordered by precedence (later wins)."""

    DEFAULT = 0
    BASE_FILE = 1
    ENVIRONMENT_FILE = 2
    LOCAL_FILE = 3
    DOTENV_FILE = 4
    PROCESS_ENVIRONMENT = 5


@dataclass(frozen=True)
class FieldBinding:
    """Static metadata for one configuration field.

    Attributes:
        attr: Attribute name on the section model
        key: Key of the field in a JSON configuration document
        env: Environment variable that overrides the field, if any
        kind: Semantic type used for coercion of override values
        section: Nested schema when ``kind`` is ``FieldKind.SECTION``
        sensitive: Never log the value of this field
    """

    attr: str
    key: str
    env: str | None
    kind: FieldKind
    section: "SectionSchema | None" = None
    sensitive: bool = False

    @property
    def is_section(self) -> bool:
        return self.kind is FieldKind.SECTION


@dataclass(frozen=True)
class SectionSchema:
    """Ordered field bindings for one section model."""

    name: str
    model: type[BaseModel]
    fields: tuple[FieldBinding, ...]

    def binding_for_key(self, key: str) -> FieldBinding | None:
        for binding in self.fields:
            if binding.key == key:
                return binding
        return None


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class LoggerConfig(_Section):
    """Configuration for the application logger."""

    level: StrictStr = Field(
        default="debug",
        description="debug, info, warn or error; anything else logs at info",
    )
    format: StrictStr = Field(
        default="text",
        description="text, json or pretty; anything else logs as text",
    )
    output: StrictStr = Field(
        default="stdout",
        min_length=1,
        description="stdout, stderr or a file path",
    )
    add_source: StrictBool = Field(
        default=True,
        description="Include source file and line number in log records",
    )

    @field_validator("level", "format", mode="before")
    @classmethod
    def normalize_case(cls, v: Any) -> Any:
        """Accept upper or mixed case spellings."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class ServerConfig(_Section):
    """Configuration for the HTTP server."""

    port: StrictInt = Field(default=8080, ge=1, le=65535, description="HTTP server port")
    host: StrictStr = Field(default="localhost", min_length=1, description="Bind address")
    read_timeout: StrictInt = Field(default=30, ge=1, le=3600, description="Read timeout in seconds")
    write_timeout: StrictInt = Field(
        default=30,
        ge=1,
        le=3600,
        description="Write timeout in seconds",
    )
    shutdown_timeout: StrictInt = Field(
        default=15,
        ge=1,
        le=3600,
        description="Graceful shutdown timeout in seconds",
    )

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


class DatabaseConfig(_Section):
    """Configuration for the MongoDB connection."""

    host: StrictStr = Field(default="localhost", min_length=1, description="Database host")
    port: StrictInt = Field(default=27017, ge=1, le=65535, description="Database port")
    user: StrictStr = Field(default="user", description="Authentication user")
    password: StrictStr = Field(default="pass", description="Authentication password")
    name: StrictStr = Field(default="database", min_length=1, description="Database name")

    def connection_uri(self, redact: bool = True) -> str:
        """Build the MongoDB connection string for this section.

        Credentials are only embedded when a user is configured. The password
        is replaced with ``***`` unless ``redact`` is False, so the default
        output is safe to log.
        """
        if not self.user:
            return f"mongodb://{self.host}:{self.port}/{self.name}"
        password = "***" if redact else self.password
        return f"mongodb://{self.user}:{password}@{self.host}:{self.port}/{self.name}"


class DiagnosticConfig(_Section):
    """Labels used to check which layer supplied a value."""

    label_def: StrictStr = Field(default="", description="Label expected from the base file")
    label_env: StrictStr = Field(default="", description="Label expected from the mode file")
    label_override: StrictStr = Field(default="", description="Label expected from an override")


class AppConfig(_Section):
    """Complete configuration tree for goedu-theta."""

    environment: StrictStr = Field(
        default="development",
        pattern="^(development|test|staging|production)$",
        description="Deployment mode",
    )
    logger: LoggerConfig = Field(default_factory=LoggerConfig, description="Logging section")
    server: ServerConfig = Field(default_factory=ServerConfig, description="HTTP server section")
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig,
        description="Database section",
    )
    test: DiagnosticConfig = Field(
        default_factory=DiagnosticConfig,
        description="Test and diagnostic labels",
    )
