# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recomputation of derived fields to a fixed point.

Derived values are best-effort: a malformed formula, a missing parent, or a
value that cannot be coerced degrades the affected field to 0 instead of
raising. Recomputation repeats full passes over the derived fields until no
value changes or the pass cap is reached, in which case the last computed
values are kept.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date

from formeval.engine.dependencies import dependency_order
from formeval.formula.evaluator import evaluate
from formeval.model.fields import CalculationKind, DerivedLogic, FormSchema, Value
from formeval.model.values import normalize_number, to_date, to_number

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def recompute(
    schema: FormSchema,
    values: Mapping[str, Value],
    *,
    today: date | None = None,
    max_passes: int | None = None,
) -> dict[str, Value]:
    """Recompute every derived field of *schema* from *values*.

    Args:
        schema: The form schema.
        values: Current field values keyed by field id. May be partial.
            Never mutated.
        today: Reference date for ``age`` calculations. Defaults to
            ``date.today()``.
        max_passes: Upper bound on full passes over the derived fields.
            Defaults to the number of derived fields plus one.

    Returns:
        A new value map holding every input entry plus the recomputed
        derived values.
    """
    result: dict[str, Value] = dict(values)
    order = dependency_order(schema)
    if not order:
        return result

    logic_by_id = {f.id: f.derived_logic for f in schema.derived_fields() if f.derived_logic}
    reference_day = today or date.today()
    cap = max(1, max_passes if max_passes is not None else len(order) + 1)

    for pass_number in range(1, cap + 1):
        changed = False
        for field_id in order:
            logic = logic_by_id[field_id]
            new_value = derive(logic, [result.get(p) for p in logic.parent_fields], today=reference_day)
            if field_id not in result or not _same_value(result[field_id], new_value):
                result[field_id] = new_value
                changed = True
        if not changed:
            logger.debug("Derived fields converged after %d pass(es)", pass_number)
            return result

    logger.debug("Derived fields did not converge within %d pass(es); keeping last values", cap)
    return result


def derive(
    logic: DerivedLogic,
    parent_values: list[Value],
    *,
    today: date | None = None,
) -> int | float:
    """Compute one derived value from its parents' values, in declared order.

    ``sum`` adds all parents, ``difference`` subtracts the second parent from
    the first, ``age`` counts whole years from the first parent's date up to
    *today*, and ``custom`` evaluates the logic's formula with each parent id
    bound to its value. Non-numeric or missing inputs count as 0.
    """
    if logic.type in (CalculationKind.SUM, CalculationKind.DIFFERENCE):
        return _arithmetic(logic.type, [to_number(v) for v in parent_values])
    if logic.type == CalculationKind.AGE:
        if not parent_values:
            return 0
        return _age(parent_values[0], today or date.today())
    substitutions = dict(zip(logic.parent_fields, parent_values, strict=False))
    return evaluate(logic.formula, substitutions)


# ################
# Implementation
# ################


def _arithmetic(kind: CalculationKind, numbers: list[int | float]) -> int | float:
    """Return the sum or difference of *numbers*, or 0 if it leaves the float range."""
    if kind == CalculationKind.DIFFERENCE:
        if len(numbers) < 2:
            return 0
        numbers = [numbers[0], -numbers[1]]
    try:
        result = sum(numbers, 0)
    except OverflowError:
        logger.debug("Derived %s overflows; using 0", kind.value)
        return 0
    # An all-int result may exceed the float range; to_number maps it to 0.
    return normalize_number(to_number(result))


def _age(value: Value, today: date) -> int:
    """Return whole years between the birth date *value* and *today*, or 0."""
    birth = to_date(value)
    if birth is None:
        logger.debug("Age parent %r is not a date; using 0", value)
        return 0
    years = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        years -= 1
    return years


def _same_value(old: Value, new: Value) -> bool:
    """Return True if two values are equal and of the same kind."""
    return type(old) is type(new) and old == new
