#!/usr/bin/env python3
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

"""Entry point: resolve the configuration and print its summary."""

import json
import os
import sys

from .config import ConfigResolver
from .config.defaults import DEFAULT_CONFIG_DIR, DEFAULT_DOTENV_PATH
from .exceptions import ConfigurationError
from .logging_setup import configure_logging, get_logger, initialize_bootstrap_logging

CONFIG_DIR_VARIABLE = "GOEDU_CONFIG_DIR"
DOTENV_PATH_VARIABLE = "GOEDU_DOTENV_PATH"


def main() -> int:
    """Resolve the configuration, apply its logging section and print the summary.

    Returns:
        Process exit code: 0 on success, 1 when the configuration cannot be resolved
    """
    initialize_bootstrap_logging()
    logger = get_logger(__name__)
    logger.debug("About to start configuration load")

    resolver = ConfigResolver(
        config_dir=os.environ.get(CONFIG_DIR_VARIABLE, DEFAULT_CONFIG_DIR),
        dotenv_path=os.environ.get(DOTENV_PATH_VARIABLE, DEFAULT_DOTENV_PATH),
        log=get_logger("goedu_theta.config"),
    )

    try:
        config = resolver.resolve()
    except ConfigurationError as e:
        logger.error("Error loading configuration: %s", e)  # noqa: TRY400
        if e.recovery_suggestion:
            logger.error("Recovery: %s", e.recovery_suggestion)  # noqa: TRY400
        return 1

    configure_logging(config.logger)
    logger.info("Configuration resolved for %s environment", config.environment)

    print(json.dumps(resolver.get_config_summary(), indent=2))  # noqa: T201
    return 0


if __name__ == "__main__":
    sys.exit(main())
