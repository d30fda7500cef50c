# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loading form schemas and value maps from JSON or YAML records.

Records use the camelCase keys of the form builder (``defaultValue``,
``validationRules``, ``isDerived``, ``derivedLogic``, ``parentFields``,
``createdAt``); snake_case keys are accepted as well.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from formeval.model.fields import FormSchema, Value

# ###############
# Public Interface
# ###############

SUPPORTED_SUFFIXES: frozenset[str] = frozenset({".json", ".yaml", ".yml"})


class SchemaLoadError(Exception):
    """Raised when a schema or value file cannot be read or is invalid."""


def parse_schema(data: object, source_label: str = "<schema>") -> FormSchema:
    """Build a FormSchema from a decoded JSON/YAML mapping.

    A bare list is accepted as the field list of an unnamed schema.

    Raises:
        SchemaLoadError: If the data does not describe a valid schema.
    """
    if isinstance(data, list):
        data = {"fields": data}
    if not isinstance(data, dict):
        raise SchemaLoadError(f"{source_label}: schema must be a mapping or a list of fields")
    try:
        return FormSchema.model_validate(data)
    except ValidationError as exc:
        raise SchemaLoadError(f"Invalid schema in {source_label}: {exc}") from exc


def parse_values(data: object, source_label: str = "<values>") -> dict[str, Value]:
    """Build a value map from a decoded JSON/YAML mapping.

    Raises:
        SchemaLoadError: If the data is not a mapping of field ids to scalars.
    """
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SchemaLoadError(f"{source_label}: values must be a mapping of field ids to values")
    values: dict[str, Value] = {}
    for key, value in data.items():
        if not isinstance(value, (str, int, float, bool, date, type(None))):
            raise SchemaLoadError(f"{source_label}: value of '{key}' must be a scalar, got {type(value).__name__}")
        values[str(key)] = value
    return values


def load_schema(path: Path) -> FormSchema:
    """Load a form schema from a ``.json``, ``.yaml`` or ``.yml`` file.

    Raises:
        SchemaLoadError: If the file cannot be read, cannot be decoded, or
            does not describe a valid schema.
    """
    return parse_schema(_read_record(path), source_label=str(path))


def load_values(path: Path) -> dict[str, Value]:
    """Load a value map from a ``.json``, ``.yaml`` or ``.yml`` file.

    Raises:
        SchemaLoadError: If the file cannot be read or is not a value mapping.
    """
    return parse_values(_read_record(path), source_label=str(path))


def dump_schema(schema: FormSchema) -> dict[str, Any]:
    """Return the JSON-compatible camelCase record of a schema."""
    return schema.model_dump(mode="json", by_alias=True, exclude_none=True)


def dump_values(values: dict[str, Value]) -> dict[str, Any]:
    """Return a JSON-compatible copy of a value map with dates as ISO strings."""
    return {key: value.isoformat() if isinstance(value, (date, datetime)) else value for key, value in values.items()}


# ################
# Implementation
# ################


def _read_record(path: Path) -> object:
    """Read and decode a JSON or YAML file according to its suffix."""
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise SchemaLoadError(f"Unsupported file type '{suffix}' for '{path}': expected .json, .yaml or .yml")

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SchemaLoadError(f"File not found: {path}") from None
    except OSError as exc:
        raise SchemaLoadError(f"Cannot read '{path}': {exc}") from exc

    if suffix == ".json":
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise SchemaLoadError(f"Invalid JSON in '{path}': {exc}") from exc

    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise SchemaLoadError(f"Invalid YAML in '{path}': {exc}") from exc
