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

"""Advisory validation of a resolved configuration.

Type and range checks are enforced by the schema while layers are merged.
This module adds cross-field and environment-aware checks whose findings are
reported as warnings and recommendations; they never stop the service from
starting.
"""

from typing import Any

import psutil  # type: ignore[import-untyped]

from .defaults import DEFAULT_CONFIG
from .schema import LOG_FORMATS, LOG_LEVEL_NAMES, AppConfig


class ConfigValidationError(Exception):
    """Configuration validation error with detailed context."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class ConfigValidator:
    """Cross-field, security and resource checks for a resolved configuration."""

    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.recommendations: list[str] = []

    def validate_config(self, config: AppConfig) -> None:
        """Collect warnings and recommendations for ``config``.

        Args:
            config: Configuration to check

        Raises:
            ConfigValidationError: If a check itself fails unexpectedly
        """
        self.warnings.clear()
        self.recommendations.clear()

        try:
            self._validate_logging(config)
            self._validate_security_constraints(config)
            self._validate_timeouts(config)
            self._validate_system_resources(config)
        except Exception as e:
            msg = f"Unexpected validation error: {e}"
            raise ConfigValidationError(msg) from e

    def _validate_logging(self, config: AppConfig) -> None:
        """Report logger settings that fall back to a default."""
        if config.logger.level not in LOG_LEVEL_NAMES:
            self.warnings.append(
                f"Unknown log level '{config.logger.level}', info is used instead.",
            )
        if config.logger.format not in LOG_FORMATS:
            self.warnings.append(
                f"Unknown log format '{config.logger.format}', text is used instead.",
            )

    def _validate_security_constraints(self, config: AppConfig) -> None:
        """Validate security-related configuration constraints."""
        if config.environment == "production":
            if config.logger.level == "debug":
                self.warnings.append(
                    "Debug logging is enabled in production environment. "
                    "This may expose sensitive information.",
                )
            if config.logger.add_source:
                self.recommendations.append(
                    "Source locations are included in production logs. "
                    "Consider disabling add_source for high-throughput services.",
                )

        if config.environment != "development":
            defaults = DEFAULT_CONFIG.database
            if (
                config.database.user == defaults.user
                and config.database.password == defaults.password
            ):
                self.warnings.append(
                    f"Database uses the placeholder credentials in {config.environment} "
                    f"environment. Set DATABASE_USER and DATABASE_PASSWORD.",
                )

        if config.environment == "development" and config.server.host == "0.0.0.0":  # noqa: S104
            self.warnings.append(
                "Server binds to all interfaces in development environment. "
                "Use localhost unless remote access is intended.",
            )

    def _validate_timeouts(self, config: AppConfig) -> None:
        """Validate the relationship between server timeouts."""
        server = config.server
        if server.write_timeout < server.read_timeout:
            self.recommendations.append(
                f"Write timeout ({server.write_timeout}s) is shorter than read timeout "
                f"({server.read_timeout}s). Responses may be cut off for slow requests.",
            )

        if server.shutdown_timeout > server.write_timeout:
            self.recommendations.append(
                f"Shutdown timeout ({server.shutdown_timeout}s) exceeds write timeout "
                f"({server.write_timeout}s). Deployments will wait longer than any request can run.",
            )

    def _validate_system_resources(self, config: AppConfig) -> None:
        """Check that the configured server port is not already taken."""
        try:
            for conn in psutil.net_connections(kind="inet"):
                if (
                    conn.status == psutil.CONN_LISTEN
                    and conn.laddr
                    and conn.laddr.port == config.server.port
                ):
                    self.warnings.append(
                        f"Server port {config.server.port} is already in use by another listener.",
                    )
                    break

        except (OSError, psutil.Error, AttributeError) as e:
            # System resource checks are best-effort
            self.warnings.append(f"Could not validate system resources: {e}")

    def get_validation_summary(self) -> dict[str, Any]:
        """Get summary of validation results including warnings and recommendations."""
        return {
            "status": "valid",
            "warnings": self.warnings,
            "recommendations": self.recommendations,
            "warning_count": len(self.warnings),
            "recommendation_count": len(self.recommendations),
        }
