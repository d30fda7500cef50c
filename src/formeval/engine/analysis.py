# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Structural analysis of form schemas.

Checks that a schema is well formed before it is previewed: unique ids, a
contiguous ``order`` permutation, consistent options and derived logic,
resolvable derived parents without derived-from-derived chains or cycles,
parseable formulas, and type-compatible defaults. These are schema errors,
distinct from the per-field validation failures reported while a form is
filled in. Recomputation and validation never depend on this analysis.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass

from formeval.engine.dependencies import dependency_graph, detect_cycle
from formeval.formula.evaluator import formula_identifiers, parse_formula
from formeval.formula.lexer import FormulaError
from formeval.model.fields import (
    OPTION_FIELD_TYPES,
    CalculationKind,
    DerivedLogic,
    Field,
    FieldType,
    FormSchema,
    RuleKind,
)
from formeval.model.values import to_date

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class SchemaError:
    """A structural error detected in a form schema.

    Attributes:
        message: Human-readable description of the error.
        field_id: Id of the offending field, or None for schema-wide errors.
    """

    message: str
    field_id: str | None = None


def analyze_schema(schema: FormSchema) -> list[SchemaError]:
    """Perform structural analysis on a form schema.

    Checks performed:
    - Field ids are unique.
    - ``order`` values form a contiguous 0-based permutation.
    - ``options`` are present exactly for select and radio fields.
    - ``derived_logic`` is present exactly for derived fields.
    - Derived parents exist and are not derived themselves.
    - The derived dependency graph has no cycles.
    - Custom formulas parse and reference only the field's parents.
    - ``minLength``/``maxLength`` rules carry a numeric threshold.
    - Default values are compatible with the field type.

    Args:
        schema: The schema to analyze.

    Returns:
        A list of :class:`SchemaError` instances. An empty list means the
        schema is well formed.
    """
    return _SchemaAnalyzer(schema).analyze()


# ################
# Implementation
# ################

_LENGTH_RULES = (RuleKind.MIN_LENGTH, RuleKind.MAX_LENGTH)


class _SchemaAnalyzer:
    """Performs structural analysis on a single FormSchema."""

    def __init__(self, schema: FormSchema) -> None:
        self._schema = schema
        self._fields_by_id: dict[str, Field] = {f.id: f for f in schema.fields}

    def analyze(self) -> list[SchemaError]:
        """Run all structural checks and return collected errors."""
        errors: list[SchemaError] = []

        # 1. Schema-wide identity and ordering.
        errors.extend(_check_duplicate_ids(self._schema))
        errors.extend(_check_order_permutation(self._schema))

        # 2. Per-field consistency.
        for f in self._schema.fields:
            errors.extend(_check_options(f))
            errors.extend(_check_rules(f))
            errors.extend(_check_default_value(f))
            errors.extend(self._check_derived(f))

        # 3. Dependency cycles across derived fields.
        cycle = detect_cycle(dependency_graph(self._schema))
        if cycle is not None:
            errors.append(SchemaError(message=f"Derived field dependency cycle detected: {' -> '.join(cycle)}."))

        return errors

    def _check_derived(self, f: Field) -> list[SchemaError]:
        """Check derived flag, parent references, and custom formula of one field."""
        if f.is_derived and f.derived_logic is None:
            return [SchemaError(message=f"Derived field '{f.id}' has no derived logic.", field_id=f.id)]
        if not f.is_derived and f.derived_logic is not None:
            return [SchemaError(message=f"Field '{f.id}' has derived logic but is not derived.", field_id=f.id)]
        if f.derived_logic is None:
            return []

        errors: list[SchemaError] = []
        logic = f.derived_logic
        for parent_id in logic.parent_fields:
            parent = self._fields_by_id.get(parent_id)
            if parent is None:
                errors.append(
                    SchemaError(
                        message=f"Derived field '{f.id}' references unknown field '{parent_id}'.",
                        field_id=f.id,
                    )
                )
            elif parent.is_derived:
                errors.append(
                    SchemaError(
                        message=f"Derived field '{f.id}' depends on derived field '{parent_id}'.",
                        field_id=f.id,
                    )
                )

        if logic.type == CalculationKind.CUSTOM:
            errors.extend(_check_formula(f.id, logic))
        return errors


def _check_duplicate_ids(schema: FormSchema) -> list[SchemaError]:
    """Return errors for field ids used more than once."""
    counts = Counter(f.id for f in schema.fields)
    return [
        SchemaError(message=f"Duplicate field id '{field_id}'.", field_id=field_id)
        for field_id, count in counts.items()
        if count > 1
    ]


def _check_order_permutation(schema: FormSchema) -> list[SchemaError]:
    """Return an error if ``order`` values are not exactly 0..n-1."""
    orders = sorted(f.order for f in schema.fields)
    if orders != list(range(len(schema.fields))):
        return [SchemaError(message=f"Field order values {orders} are not a contiguous 0-based sequence.")]
    return []


def _check_options(f: Field) -> list[SchemaError]:
    """Return errors for options on non-choice fields or choice fields without options."""
    if f.type in OPTION_FIELD_TYPES and f.options is None:
        return [SchemaError(message=f"Field '{f.id}' of type '{f.type.value}' has no options.", field_id=f.id)]
    if f.type not in OPTION_FIELD_TYPES and f.options is not None:
        return [
            SchemaError(message=f"Field '{f.id}' of type '{f.type.value}' must not declare options.", field_id=f.id)
        ]
    return []


def _check_rules(f: Field) -> list[SchemaError]:
    """Return errors for length rules without a numeric threshold."""
    errors: list[SchemaError] = []
    for rule in f.validation_rules:
        if rule.type in _LENGTH_RULES and not (_is_numeric(rule.value) or _is_numeric_text(rule.value)):
            errors.append(
                SchemaError(
                    message=f"Rule '{rule.type.value}' on field '{f.id}' needs a numeric value, got {rule.value!r}.",
                    field_id=f.id,
                )
            )
    return errors


def _check_default_value(f: Field) -> list[SchemaError]:
    """Return an error if the default value does not fit the field type."""
    value = f.default_value
    if value is None:
        return []
    if f.type == FieldType.NUMBER:
        ok = _is_numeric(value) or _is_numeric_text(value)
    elif f.type == FieldType.CHECKBOX:
        ok = isinstance(value, bool)
    elif f.type == FieldType.DATE:
        ok = to_date(value) is not None
    elif f.type in OPTION_FIELD_TYPES:
        ok = isinstance(value, str) and (f.options is None or value in {o.value for o in f.options})
    else:
        ok = isinstance(value, str)
    if ok:
        return []
    return [
        SchemaError(
            message=f"Default value {value!r} of field '{f.id}' does not fit type '{f.type.value}'.",
            field_id=f.id,
        )
    ]


def _check_formula(field_id: str, logic: DerivedLogic) -> list[SchemaError]:
    """Return errors for custom formulas that do not parse or use non-parent ids."""
    formula = logic.formula
    try:
        parse_formula(formula)
        names = formula_identifiers(formula)
    except FormulaError as exc:
        return [SchemaError(message=f"Invalid formula for field '{field_id}': {exc}.", field_id=field_id)]
    parents = set(logic.parent_fields)
    return [
        SchemaError(
            message=f"Formula for field '{field_id}' references '{name}', which is not a parent.",
            field_id=field_id,
        )
        for name in names
        if name not in parents
    ]


def _is_numeric(value: object) -> bool:
    """Return True for ints and floats, excluding booleans."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_numeric_text(value: object) -> bool:
    """Return True for strings that parse as a number."""
    if not isinstance(value, str) or "_" in value:
        return False
    try:
        return math.isfinite(float(value))
    except ValueError:
        return False
