# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for engine tests."""

import pytest

from formeval.model import CalculationKind, DerivedLogic, Field, FieldType, FormSchema


def _input(field_id: str, order: int) -> Field:
    return Field(id=field_id, type=FieldType.NUMBER, label=field_id.title(), order=order)


def _derived(field_id: str, order: int, kind: CalculationKind, formula: str = "") -> Field:
    return Field(
        id=field_id,
        type=FieldType.NUMBER,
        label=field_id.title(),
        order=order,
        is_derived=True,
        derived_logic=DerivedLogic(parent_fields=["a", "b"], type=kind, formula=formula),
    )


@pytest.fixture
def totals_schema() -> FormSchema:
    """Two number inputs ``a`` and ``b`` with sum, difference, and custom derived fields."""
    return FormSchema(
        id="form_1",
        name="Totals",
        fields=[
            _input("a", 0),
            _input("b", 1),
            _derived("total", 2, CalculationKind.SUM),
            _derived("delta", 3, CalculationKind.DIFFERENCE),
            _derived("score", 4, CalculationKind.CUSTOM, formula="a + b * 2"),
        ],
    )
