# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model for form schemas and field values."""

from formeval.model.fields import (
    OPTION_FIELD_TYPES,
    CalculationKind,
    DerivedLogic,
    Field,
    FieldOption,
    FieldType,
    FormSchema,
    RuleKind,
    ValidationRule,
    Value,
)
from formeval.model.values import is_blank, normalize_number, to_date, to_number

__all__ = [
    # Schema entities
    "FieldType",
    "OPTION_FIELD_TYPES",
    "RuleKind",
    "CalculationKind",
    "ValidationRule",
    "FieldOption",
    "DerivedLogic",
    "Field",
    "FormSchema",
    # Values
    "Value",
    "to_number",
    "to_date",
    "is_blank",
    "normalize_number",
]
