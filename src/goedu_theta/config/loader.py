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

"""Loading of JSON configuration documents onto a configuration tree.

Merging follows key-presence semantics: a key present in the document
replaces the field, even when its value is empty, zero or false, and a key
absent from the document keeps whatever value the field already held. This
is what lets the base, mode-specific and local files layer on top of each
other. A JSON null counts as an absent key.
"""

from collections.abc import Mapping, MutableMapping
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from ..exceptions import (
    ConfigFileNotFoundError,
    ConfigFilePermissionError,
    ConfigFileReadError,
    ConfigParseError,
)
from .defaults import APP_SCHEMA
from .schema import AppConfig, SectionSchema, Source

logger = logging.getLogger(__name__)


def read_document(path: str | Path) -> dict[str, Any]:
    """Read and parse a JSON configuration document.

    Raises:
        ConfigFileNotFoundError: The file does not exist
        ConfigFilePermissionError: The file exists but is not readable
        ConfigFileReadError: Any other I/O failure
        ConfigParseError: The content is not a JSON object
    """
    path = Path(path)
    if not path.exists():
        raise ConfigFileNotFoundError(path)

    try:
        text = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigFilePermissionError(path, original_error=e) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileReadError(path, original_error=e) from e

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON in {path} at line {e.lineno} column {e.colno}: {e.msg}"
        raise ConfigParseError(path, msg, original_error=e) from e

    if not isinstance(document, dict):
        msg = f"Top level of {path} must be a JSON object, got {type(document).__name__}"
        raise ConfigParseError(path, msg)

    return document


def _select_known_keys(
    document: Mapping[str, Any],
    schema: SectionSchema,
    prefix: str,
    log: logging.Logger,
) -> dict[str, Any]:
    """Translate document keys to attribute names, dropping unknown keys."""
    selected: dict[str, Any] = {}
    for key, value in document.items():
        dotted = f"{prefix}{key}"
        binding = schema.binding_for_key(key)
        if binding is None:
            log.debug("Ignoring unknown configuration key %s", dotted)
            continue
        if value is None:
            log.debug("Keeping previous value of %s, document sets it to null", dotted)
            continue
        if binding.section is not None:
            if not isinstance(value, Mapping):
                raise ValueError(f"{dotted} must be an object, got {type(value).__name__}")
            selected[binding.attr] = _select_known_keys(value, binding.section, f"{dotted}.", log)
        else:
            selected[binding.attr] = value
    return selected


def _merge_config(base_config: dict[str, Any], new_config: dict[str, Any]) -> None:
    """Recursively merge configuration dictionaries."""
    for key, value in new_config.items():
        if key in base_config and isinstance(base_config[key], dict) and isinstance(value, dict):
            _merge_config(base_config[key], value)
        else:
            base_config[key] = value


def _describe_validation_error(error: ValidationError) -> str:
    # Input values are omitted; they may hold credentials.
    parts = []
    for detail in error.errors(include_input=False):
        location = ".".join(str(part) for part in detail["loc"])
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)


def merge_document(
    target: BaseModel,
    document: Mapping[str, Any],
    schema: SectionSchema = APP_SCHEMA,
    log: logging.Logger | None = None,
) -> Any:
    """Apply the keys present in ``document`` onto ``target``.

    Returns a new validated model; ``target`` is left untouched. Nothing is
    applied when any value in the document fails validation.

    Raises:
        ValueError: A section key does not hold an object, or a value fails
            type or range validation (``pydantic.ValidationError``)
    """
    log = log or logger
    config_data = target.model_dump()
    _merge_config(config_data, _select_known_keys(document, schema, "", log))
    return schema.model.model_validate(config_data)


def present_fields(
    document: Mapping[str, Any],
    schema: SectionSchema = APP_SCHEMA,
    prefix: str = "",
) -> list[str]:
    """List the dotted attribute paths of the known scalar keys in ``document``."""
    paths: list[str] = []
    for key, value in document.items():
        binding = schema.binding_for_key(key)
        if binding is None or value is None:
            continue
        dotted = f"{prefix}{binding.attr}"
        if binding.section is not None:
            if isinstance(value, Mapping):
                paths.extend(present_fields(value, binding.section, f"{dotted}."))
        else:
            paths.append(dotted)
    return paths


def load_into(
    path: str | Path,
    target: AppConfig,
    log: logging.Logger | None = None,
    source: Source | None = None,
    provenance: MutableMapping[str, Source] | None = None,
) -> AppConfig:
    """Load one JSON configuration file onto an existing configuration.

    Args:
        path: Location of the JSON document
        target: Configuration produced by the lower-precedence layers
        log: Logger to report progress to
        source: Layer the file belongs to, recorded in ``provenance``
        provenance: Optional map updated with the source of every field the
            document sets

    Returns:
        The merged configuration

    Raises:
        ConfigFileError: Any subclass describing why the file was not applied
    """
    log = log or logger
    path = Path(path)
    log.debug("Loading configuration from JSON file %s", path)

    document = read_document(path)

    try:
        merged: AppConfig = merge_document(target, document, APP_SCHEMA, log)
    except ValidationError as e:
        msg = f"Invalid configuration values in {path}: {_describe_validation_error(e)}"
        raise ConfigParseError(path, msg) from e
    except ValueError as e:
        raise ConfigParseError(path, f"Invalid configuration in {path}: {e}", original_error=e) from e

    if provenance is not None and source is not None:
        for dotted in present_fields(document):
            provenance[dotted] = source

    log.debug("Configuration file %s applied (%d top-level keys)", path, len(document))
    return merged
