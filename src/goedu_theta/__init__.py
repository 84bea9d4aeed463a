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

"""goedu-theta service configuration.

The entry point for the rest of the service is ``resolve_config``, which
returns the read-only configuration consumed by the HTTP server, the logging
setup and the database manager.
"""

from .config import AppConfig, ConfigResolver, resolve_config
from .exceptions import (
    CoercionError,
    ConfigFileError,
    ConfigFileNotFoundError,
    ConfigFilePermissionError,
    ConfigFileReadError,
    ConfigParseError,
    ConfigurationError,
    GoeduThetaError,
)
from .logging_setup import configure_logging, get_logger, initialize_bootstrap_logging

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "CoercionError",
    "ConfigFileError",
    "ConfigFileNotFoundError",
    "ConfigFilePermissionError",
    "ConfigFileReadError",
    "ConfigParseError",
    "ConfigResolver",
    "ConfigurationError",
    "GoeduThetaError",
    "__version__",
    "configure_logging",
    "get_logger",
    "initialize_bootstrap_logging",
    "resolve_config",
]
