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

"""Environment variable overrides for the configuration tree.

Every scalar field whose binding names an environment variable can be
overridden, regardless of how deeply its section is nested. Values are looked
up in the process environment first and in the dotenv mapping second; an
empty value counts as unset in both. A value that cannot be converted or that
fails range validation is logged and skipped, leaving the field as the file
layers left it.
"""

from collections.abc import Iterator, Mapping, MutableMapping
from dataclasses import dataclass
import logging
import os
from typing import Any

from pydantic import BaseModel, ValidationError

from ..exceptions import CoercionError
from .coercion import coerce
from .defaults import APP_SCHEMA
from .schema import AppConfig, FieldBinding, SectionSchema, Source

logger = logging.getLogger(__name__)

MASK = "***"

SOURCE_LABELS = {
    Source.PROCESS_ENVIRONMENT: "environment",
    Source.DOTENV_FILE: ".env",
}


@dataclass(frozen=True)
class ScalarField:
    """A leaf field reached by the walker, with its attribute path."""

    path: tuple[str, ...]
    binding: FieldBinding

    @property
    def dotted(self) -> str:
        return ".".join(self.path)


def walk_fields(
    schema: SectionSchema = APP_SCHEMA,
    path: tuple[str, ...] = (),
) -> Iterator[ScalarField]:
    """Visit every scalar field depth-first in declared order.

    Section fields are always descended into, whether or not they carry a
    binding of their own.
    """
    for binding in schema.fields:
        field_path = (*path, binding.attr)
        if binding.section is not None:
            yield from walk_fields(binding.section, field_path)
        else:
            yield ScalarField(field_path, binding)


def lookup_override(
    env_name: str,
    environ: Mapping[str, str],
    dotenv_map: Mapping[str, str],
) -> tuple[str, Source] | None:
    """Find the override value for one environment variable.

    Returns:
        The raw value and the source that supplied it, or None when neither
        source has a non-empty value
    """
    value = environ.get(env_name)
    if value:
        return value, Source.PROCESS_ENVIRONMENT

    value = dotenv_map.get(env_name)
    if value:
        return value, Source.DOTENV_FILE

    return None


def _replace_field(model: BaseModel, path: tuple[str, ...], value: Any) -> Any:
    """Return a copy of ``model`` with the field at ``path`` replaced and validated."""
    attr = path[0]
    if len(path) == 1:
        data = model.model_dump()
        data[attr] = value
        return type(model).model_validate(data)
    child = _replace_field(getattr(model, attr), path[1:], value)
    return model.model_copy(update={attr: child})


def apply_environment_overrides(
    config: AppConfig,
    dotenv_map: Mapping[str, str],
    environ: Mapping[str, str] | None = None,
    log: logging.Logger | None = None,
    provenance: MutableMapping[str, Source] | None = None,
    schema: SectionSchema = APP_SCHEMA,
) -> AppConfig:
    """Apply the highest-precedence layer onto ``config``.

    Args:
        config: Configuration produced by the file layers
        dotenv_map: Values read from the dotenv file
        environ: Process environment, ``os.environ`` when omitted
        log: Logger to report override decisions to
        provenance: Optional map updated with the source of every applied field
        schema: Binding schema of ``config``

    Returns:
        The configuration with every valid override applied. Never raises for
        a bad value; the field keeps its previous value instead.
    """
    log = log or logger
    environ = os.environ if environ is None else environ
    applied = 0

    log.debug("Overriding configuration from environment variables and .env file")

    for field in walk_fields(schema):
        binding = field.binding
        if not binding.env:
            continue

        found = lookup_override(binding.env, environ, dotenv_map)
        if found is None:
            log.debug("No override found for %s (%s)", field.dotted, binding.env)
            continue

        raw, source = found
        label = SOURCE_LABELS[source]

        try:
            value = coerce(raw, binding.kind)
        except CoercionError as e:
            if binding.sensitive:
                log.warning(
                    "Ignoring override for %s from %s (%s): %s",
                    field.dotted,
                    label,
                    binding.env,
                    e,
                )
            else:
                log.warning(
                    "Ignoring override for %s from %s (%s=%r): %s",
                    field.dotted,
                    label,
                    binding.env,
                    raw,
                    e,
                )
            continue

        try:
            config = _replace_field(config, field.path, value)
        except ValidationError as e:
            reason = e.errors(include_input=False)[0]["msg"]
            log.warning(
                "Ignoring override for %s from %s (%s): %s",
                field.dotted,
                label,
                binding.env,
                reason,
            )
            continue

        applied += 1
        if provenance is not None:
            provenance[field.dotted] = source
        log.info(
            "Overriding %s from %s (%s=%s)",
            field.dotted,
            label,
            binding.env,
            MASK if binding.sensitive else value,
        )

    log.debug("Override from environment and .env file complete, %d fields overridden", applied)
    return config
