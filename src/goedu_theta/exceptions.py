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

"""Custom exceptions for the goedu-theta configuration engine."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any


class GoeduThetaError(Exception):
    """Base exception for all goedu-theta errors."""

    ERROR_CATEGORY = "GENERAL"
    ERROR_CODE = "GDT_0000"

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
        recovery_suggestion: str | None = None,
    ) -> None:
        super().__init__(message)
        self.user_message = user_message or "An error occurred"
        self.error_code = error_code or self.ERROR_CODE
        self.error_category = self.ERROR_CATEGORY
        self.context = context or {}
        self.recovery_suggestion = recovery_suggestion
        self.timestamp = datetime.now(timezone.utc)


class ConfigurationError(GoeduThetaError):
    """Configuration could not be resolved; the process cannot start."""

    ERROR_CATEGORY = "SERVER_ERROR"
    ERROR_CODE = "GDT_4000"


class ConfigFileError(GoeduThetaError):
    """A configuration file could not be applied."""

    ERROR_CATEGORY = "SERVER_ERROR"
    ERROR_CODE = "GDT_4100"
    REASON = "could not be loaded"
    RECOVERY = "Check the configuration directory and file contents"

    def __init__(
        self,
        path: str | Path,
        message: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        self.path = Path(path)
        message = message or f"Configuration file {self.REASON}: {self.path}"
        context: dict[str, Any] = {"path": str(self.path)}
        if original_error:
            context["original_error"] = str(original_error)
        super().__init__(
            message,
            user_message=f"Configuration file {self.REASON}",
            context=context,
            recovery_suggestion=self.RECOVERY,
        )
        self.original_error = original_error


class ConfigFileNotFoundError(ConfigFileError):
    """The configuration file does not exist."""

    ERROR_CODE = "GDT_4101"
    REASON = "not found"
    RECOVERY = "Create the file or point the resolver at the right configuration directory"


class ConfigFilePermissionError(ConfigFileError):
    """The configuration file exists but cannot be read by this process."""

    ERROR_CODE = "GDT_4102"
    REASON = "is not readable (permission denied)"
    RECOVERY = "Grant the service user read access to the file"


class ConfigFileReadError(ConfigFileError):
    """Reading the configuration file failed for another I/O reason."""

    ERROR_CODE = "GDT_4103"
    REASON = "could not be read"


class ConfigParseError(ConfigFileError):
    """The configuration file is not a valid configuration document."""

    ERROR_CODE = "GDT_4104"
    REASON = "could not be parsed"
    RECOVERY = "Fix the JSON syntax or the offending value and restart"


class CoercionError(ValueError):
    """A raw override value cannot be converted to its field's kind."""

    def __init__(self, raw: str, kind: Any, reason: str | None = None) -> None:
        self.raw = raw
        self.kind = kind
        detail = f": {reason}" if reason else ""
        super().__init__(f"Cannot convert value to {getattr(kind, 'value', kind)}{detail}")
