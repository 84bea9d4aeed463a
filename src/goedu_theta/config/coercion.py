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

"""Conversion of raw override strings into typed field values."""

import re
from typing import Any

from ..exceptions import CoercionError
from .schema import FieldKind

TRUE_VALUES = frozenset({"1", "t", "true"})
FALSE_VALUES = frozenset({"0", "f", "false"})

_INTEGER_PATTERN = re.compile(r"^[+-]?[0-9]+$")


def coerce(raw: str, kind: FieldKind) -> Any:
    """Convert a raw string to the semantic type of a field.

    Args:
        raw: Value as read from the environment or a dotenv file
        kind: Declared kind of the target field

    Returns:
        The converted value

    Raises:
        CoercionError: If the value cannot be converted or the kind is not a scalar
    """
    if kind is FieldKind.TEXT:
        return raw

    if kind is FieldKind.BOOLEAN:
        lowered = raw.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        raise CoercionError(raw, kind, "expected true/false, t/f or 1/0")

    if kind is FieldKind.INTEGER:
        text = raw.strip()
        if not _INTEGER_PATTERN.match(text):
            raise CoercionError(raw, kind, "expected a base-10 integer")
        return int(text, 10)

    raise CoercionError(raw, kind, "unsupported field kind")


def try_coerce(raw: str, kind: FieldKind) -> tuple[Any, bool]:
    """Convert a raw string, reporting failure as ``(None, False)``."""
    try:
        return coerce(raw, kind), True
    except CoercionError:
        return None, False
