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

"""Reading of dotenv files into a plain mapping.

The dotenv file is only ever read, never exported into ``os.environ``: the
override resolver consults it as a separate, lower-precedence source.
"""

import logging
from pathlib import Path

from dotenv import dotenv_values

logger = logging.getLogger(__name__)


def build_env_map(path: str | Path, log: logging.Logger | None = None) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines from a dotenv file.

    Comments, blank lines, ``export`` prefixes and quoting follow the usual
    dotenv conventions. Keys declared without a value are dropped.

    Returns:
        The parsed mapping, or an empty mapping when the file is missing or
        unreadable
    """
    log = log or logger
    env_path = Path(path)

    if not env_path.is_file():
        log.warning("Could not find .env file %s, only process environment will be used", env_path)
        return {}

    try:
        values = dotenv_values(env_path, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.warning(
            "Could not read .env file %s, only process environment will be used: %s",
            env_path,
            e,
        )
        return {}

    env_map = {key: value for key, value in values.items() if value is not None}
    log.debug("Read %d entries from .env file %s", len(env_map), env_path)
    return env_map
