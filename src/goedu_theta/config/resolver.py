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

"""Configuration resolver for goedu-theta.

This module provides the ConfigResolver class that builds the application
configuration once at startup by layering, from lowest to highest precedence:
- Compiled-in defaults
- ``config.json`` (mandatory)
- ``config.<environment>.json`` (optional)
- ``config.local.json`` (optional)
- The ``.env`` file and the process environment (per-field overrides)

Only a failure to apply the base file is fatal. Every other problem is logged
and the layer, or the single field, is skipped.
"""

from collections.abc import Mapping
import logging
import os
from pathlib import Path
from typing import Any

from ..exceptions import (
    ConfigFileError,
    ConfigFileNotFoundError,
    ConfigFilePermissionError,
    ConfigurationError,
)
from .defaults import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_DOTENV_PATH,
    DEFAULT_ENVIRONMENT,
    ENV_VAR_MAPPING,
    ENV_VAR_TYPES,
    ENVIRONMENT_VARIABLE,
    config_file_paths,
    default_config,
)
from .dotenv_map import build_env_map
from .loader import load_into
from .overrides import MASK, apply_environment_overrides, walk_fields
from .schema import VALID_ENVIRONMENTS, AppConfig, Source
from .validation import ConfigValidationError, ConfigValidator

logger = logging.getLogger(__name__)


def redacted_config(config: AppConfig) -> dict[str, Any]:
    """Dump ``config`` with every sensitive field masked, safe for logs."""
    data = config.model_dump()
    for field in walk_fields():
        if field.binding.sensitive:
            section = data
            for attr in field.path[:-1]:
                section = section[attr]
            section[field.path[-1]] = MASK
    return data


class ConfigResolver:
    """Layered configuration resolution.

    Features:
    - Deployment mode selection from the ENVIRONMENT variable
    - Mandatory base file, optional mode-specific and local files
    - Per-field overrides from the process environment and a .env file
    - Provenance tracking of the source that supplied every field
    - Advisory validation with warnings and recommendations

    The resolver reads its inputs only through its constructor arguments, so
    tests can point it at a temporary directory and a fake environment.
    """

    def __init__(
        self,
        config_dir: str | Path = DEFAULT_CONFIG_DIR,
        dotenv_path: str | Path = DEFAULT_DOTENV_PATH,
        environ: Mapping[str, str] | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            config_dir: Directory holding the JSON configuration files
            dotenv_path: Location of the dotenv file
            environ: Process environment, ``os.environ`` when omitted
            log: Logger that receives every resolution log record
        """
        self.config_dir = Path(config_dir)
        self.dotenv_path = Path(dotenv_path)
        self._environ = environ
        self._log = log or logger
        self._validator = ConfigValidator()
        self._config: AppConfig | None = None

        self.environment = DEFAULT_ENVIRONMENT
        self.loaded_files: list[str] = []
        self.skipped_files: dict[str, str] = {}
        self.provenance: dict[str, Source] = {}

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    @property
    def config(self) -> AppConfig:
        """Get the configuration produced by the last successful resolve()."""
        if self._config is None:
            raise ConfigurationError(
                "Configuration has not been resolved",
                recovery_suggestion="Call resolve() during startup",
            )
        return self._config

    def resolve_environment(self) -> str:
        """Read and validate the deployment mode."""
        environment = self.environ.get(ENVIRONMENT_VARIABLE, "")
        if environment in VALID_ENVIRONMENTS:
            self._log.debug("Valid environment detected: %s", environment)
            return environment

        self._log.warning(
            "Invalid or unset %s variable %r, defaulting to %s",
            ENVIRONMENT_VARIABLE,
            environment,
            DEFAULT_ENVIRONMENT,
        )
        return DEFAULT_ENVIRONMENT

    def resolve(self) -> AppConfig:
        """Build the configuration from every source.

        Returns:
            The fully merged, read-only configuration

        Raises:
            ConfigurationError: If the base configuration file cannot be applied
        """
        self._reset()
        self._log.debug("Loading configuration")

        self.environment = self.resolve_environment()
        base_file, environment_file, local_file = config_file_paths(
            self.config_dir,
            self.environment,
        )
        self._log.debug(
            "Configuration file paths: base=%s environment=%s local=%s dotenv=%s",
            base_file,
            environment_file,
            local_file,
            self.dotenv_path,
        )

        config = default_config(self.environment)
        self.provenance = {field.dotted: Source.DEFAULT for field in walk_fields()}

        config = self._apply_base_file(base_file, config)
        config = self._apply_optional_file(
            environment_file,
            config,
            Source.ENVIRONMENT_FILE,
            missing_level=logging.WARNING,
        )
        config = self._apply_optional_file(
            local_file,
            config,
            Source.LOCAL_FILE,
            missing_level=logging.DEBUG,
        )

        dotenv_map = build_env_map(self.dotenv_path, self._log)
        config = apply_environment_overrides(
            config,
            dotenv_map,
            environ=self.environ,
            log=self._log,
            provenance=self.provenance,
        )

        self._validate(config)
        self._config = config

        self._log.info(
            "Configuration loaded successfully (environment=%s, files=%s)",
            config.environment,
            self.loaded_files,
        )
        self._log.debug("Resolved configuration: %s", redacted_config(config))
        return config

    def _reset(self) -> None:
        self._config = None
        self.loaded_files = []
        self.skipped_files = {}
        self.provenance = {}

    def _apply_base_file(self, path: Path, config: AppConfig) -> AppConfig:
        """Apply the mandatory base file; any failure aborts resolution."""
        try:
            config = load_into(path, config, self._log, Source.BASE_FILE, self.provenance)
        except ConfigFileError as e:
            self._log.error("Error loading base configuration file %s: %s", path, e)  # noqa: TRY400
            raise ConfigurationError(
                f"Base configuration could not be loaded: {e}",
                user_message="Configuration could not be loaded",
                context={"path": str(path), "error_code": e.error_code},
                recovery_suggestion=e.recovery_suggestion,
            ) from e

        self.loaded_files.append(str(path))
        self._log.info("Loaded base configuration from %s", path)
        return config

    def _apply_optional_file(
        self,
        path: Path,
        config: AppConfig,
        source: Source,
        missing_level: int,
    ) -> AppConfig:
        """Apply an optional file, keeping ``config`` unchanged on any failure."""
        try:
            config = load_into(path, config, self._log, source, self.provenance)
        except ConfigFileNotFoundError as e:
            self._log.log(missing_level, "Optional configuration file %s not found, skipping", path)
            self.skipped_files[str(path)] = e.REASON
            return config
        except ConfigFilePermissionError as e:
            self._log.warning("Optional configuration file %s is not readable, skipping: %s", path, e)
            self.skipped_files[str(path)] = e.REASON
            return config
        except ConfigFileError as e:
            self._log.warning("Error loading configuration file %s, skipping: %s", path, e)
            self.skipped_files[str(path)] = e.REASON
            return config

        self.loaded_files.append(str(path))
        self._log.info("Loaded %s configuration from %s", source.name.lower(), path)
        return config

    def _validate(self, config: AppConfig) -> None:
        try:
            self._validator.validate_config(config)
        except ConfigValidationError as e:
            self._log.warning("Configuration validation could not complete: %s", e)
            return

        if self._validator.warnings:
            self._log.warning("Configuration warnings: %s", self._validator.warnings)
        if self._validator.recommendations:
            self._log.info("Configuration recommendations: %s", self._validator.recommendations)

    def get_config_summary(self) -> dict[str, Any]:
        """Get comprehensive configuration summary."""
        config = self.config
        return {
            "environment": config.environment,
            "loaded_files": list(self.loaded_files),
            "skipped_files": dict(self.skipped_files),
            "provenance": {path: source.name for path, source in self.provenance.items()},
            "validation": self._validator.get_validation_summary(),
            "config": redacted_config(config),
        }

    def get_env_var_help(self) -> dict[str, str]:
        """Get help text for all supported environment variables."""
        help_text = {
            ENVIRONMENT_VARIABLE: f"Type: text, One of: {', '.join(VALID_ENVIRONMENTS)}",
        }
        for env_var, config_path in ENV_VAR_MAPPING.items():
            var_type = ENV_VAR_TYPES[env_var]
            help_text[env_var] = f"Type: {var_type.value}, Path: {config_path}"
        return help_text


def resolve_config(
    config_dir: str | Path = DEFAULT_CONFIG_DIR,
    dotenv_path: str | Path = DEFAULT_DOTENV_PATH,
    environ: Mapping[str, str] | None = None,
    log: logging.Logger | None = None,
) -> AppConfig:
    """Resolve the application configuration in one call.

    Raises:
        ConfigurationError: If the base configuration file cannot be applied
    """
    return ConfigResolver(config_dir, dotenv_path, environ, log).resolve()
