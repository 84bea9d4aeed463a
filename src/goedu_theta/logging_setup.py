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

"""Process-wide logging setup.

Logging is configured twice during startup: a bootstrap configuration that
exists before any configuration file has been read, and a final one built
from the resolved ``logger`` section. Both replace the single handler this
module owns on the root logger.
"""

from collections.abc import Mapping
import logging
import os
import sys
import threading

from pythonjsonlogger.json import JsonFormatter

from .config.schema import LOG_FORMATS, LoggerConfig

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TEXT_SOURCE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s"
JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
JSON_SOURCE_FORMAT = "%(asctime)s %(name)s %(levelname)s %(pathname)s %(lineno)d %(message)s"

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_lock = threading.Lock()
_handler: logging.Handler | None = None


class PrettyFormatter(logging.Formatter):
    """Colored single-line console output for development."""

    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[31m",
    }
    RESET = "\033[0m"

    def __init__(self, add_source: bool = False) -> None:
        super().__init__(datefmt="%Y-%m-%d %H:%M:%S")
        self.add_source = add_source

    def format(self, record: logging.LogRecord) -> str:
        timestamp = f"{self.formatTime(record, self.datefmt)}.{int(record.msecs):03d}"
        color = self.COLORS.get(record.levelno, "")
        line = f"{timestamp} {color}{record.levelname:<7}{self.RESET} {record.name}: {record.getMessage()}"
        if self.add_source:
            line += f" ({record.pathname}:{record.lineno})"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _install(handler: logging.Handler, level: int) -> None:
    """Swap the owned root handler. Caller holds ``_lock``."""
    global _handler  # noqa: PLW0603

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
        _handler.close()
    root.addHandler(handler)
    root.setLevel(level)
    _handler = handler


def _build_handler(output: str) -> logging.Handler:
    """Open the configured output.

    Raises:
        OSError: The output is a file path that cannot be opened for writing
    """
    if output == "stdout":
        return logging.StreamHandler(sys.stdout)
    if output == "stderr":
        return logging.StreamHandler(sys.stderr)
    return logging.FileHandler(output, encoding="utf-8")


def _build_formatter(config: LoggerConfig) -> logging.Formatter:
    if config.format == "json":
        return JsonFormatter(JSON_SOURCE_FORMAT if config.add_source else JSON_FORMAT)
    if config.format == "pretty":
        return PrettyFormatter(add_source=config.add_source)
    return logging.Formatter(TEXT_SOURCE_FORMAT if config.add_source else TEXT_FORMAT)


def initialize_bootstrap_logging(environ: Mapping[str, str] | None = None) -> logging.Logger:
    """Configure logging before the configuration is available.

    Production processes only log errors until the real configuration is
    applied; every other environment logs at debug level.
    """
    environ = os.environ if environ is None else environ
    level = logging.ERROR if environ.get("ENVIRONMENT") == "production" else logging.DEBUG

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    with _lock:
        _install(handler, level)

    logger = get_logger(__name__)
    logger.debug(
        "Bootstrap logger initialized (environment=%s, level=%s)",
        environ.get("ENVIRONMENT", ""),
        logging.getLevelName(level),
    )
    return logger


def configure_logging(config: LoggerConfig) -> logging.Logger:
    """Reconfigure logging from the resolved ``logger`` section.

    An unknown level logs at info and an unknown format logs as text. When a
    file output cannot be opened, records go to stdout instead and a warning
    is logged; this never raises for a bad output.

    Args:
        config: Level, format, output and source-location settings

    Returns:
        The goedu-theta package logger
    """
    level = LOG_LEVELS.get(config.level, logging.INFO)

    output_error: OSError | None = None
    try:
        handler = _build_handler(config.output)
    except OSError as e:
        output_error = e
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter(config))

    with _lock:
        _install(handler, level)

    logger = get_logger(__name__)
    if output_error is not None:
        logger.warning(
            "Could not open log output %s, logging to stdout instead: %s",
            config.output,
            output_error,
        )
    if config.level not in LOG_LEVELS:
        logger.warning("Unknown log level %r, using info", config.level)
    if config.format not in LOG_FORMATS:
        logger.warning("Unknown log format %r, using text", config.format)

    logger.debug(
        "Logger reconfigured (level=%s, format=%s, output=%s, add_source=%s)",
        config.level,
        config.format,
        config.output,
        config.add_source,
    )
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger below the goedu-theta package logger."""
    if name is None or name == "goedu_theta" or name.startswith("goedu_theta."):
        return logging.getLogger(name or "goedu_theta")
    return logging.getLogger(f"goedu_theta.{name}")


def current_handler() -> logging.Handler | None:
    """Get the root handler installed by this module, if any."""
    with _lock:
        return _handler
