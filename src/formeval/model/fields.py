# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Form schema entities: fields, validation rules, and derived logic."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############

# A single field value. ``None`` means the field has no value.
Value = str | int | float | bool | datetime | date | None


class FieldType(Enum):
    """Widget type of a form field."""

    TEXT = "text"
    NUMBER = "number"
    TEXTAREA = "textarea"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    DATE = "date"


# Field types that carry a list of selectable options.
OPTION_FIELD_TYPES: frozenset[FieldType] = frozenset({FieldType.SELECT, FieldType.RADIO})


class RuleKind(Enum):
    """Kind of a declarative validation rule."""

    REQUIRED = "required"
    NOT_EMPTY = "notEmpty"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    EMAIL = "email"
    PASSWORD = "password"


class CalculationKind(Enum):
    """How a derived field computes its value from its parents."""

    SUM = "sum"
    DIFFERENCE = "difference"
    AGE = "age"
    CUSTOM = "custom"


class ValidationRule(BaseModel):
    """A single check attached to a field. ``value`` is the length threshold."""

    model_config = ConfigDict(populate_by_name=True)

    type: RuleKind
    value: int | float | str | None = None
    message: str


class FieldOption(BaseModel):
    """A selectable (label, value) pair of a select or radio field."""

    label: str
    value: str


class DerivedLogic(BaseModel):
    """Computation of a derived field from its parent fields."""

    model_config = ConfigDict(populate_by_name=True)

    parent_fields: list[str] = _Field(alias="parentFields", default_factory=list)
    type: CalculationKind
    formula: str = ""


class Field(BaseModel):
    """A typed form field with its validation rules and optional derived logic."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: FieldType
    label: str = ""
    required: bool = False
    # datetime precedes date: every datetime is also a date instance.
    default_value: str | bool | int | float | datetime | date | None = _Field(alias="defaultValue", default=None)
    validation_rules: list[ValidationRule] = _Field(alias="validationRules", default_factory=list)
    options: list[FieldOption] | None = None
    is_derived: bool = _Field(alias="isDerived", default=False)
    derived_logic: DerivedLogic | None = _Field(alias="derivedLogic", default=None)
    order: int = 0


class FormSchema(BaseModel):
    """A named, ordered collection of fields."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str = ""
    fields: list[Field] = _Field(default_factory=list)
    created_at: datetime = _Field(alias="createdAt", default_factory=datetime.now)

    def ordered_fields(self) -> list[Field]:
        """Return the fields sorted by their ``order`` position (stable on ties)."""
        return sorted(self.fields, key=lambda f: f.order)

    def field(self, field_id: str) -> Field | None:
        """Return the field with the given id, or None if absent."""
        for f in self.fields:
            if f.id == field_id:
                return f
        return None

    def derived_fields(self) -> list[Field]:
        """Return the derived fields that carry derived logic, in ``order``."""
        return [f for f in self.ordered_fields() if f.is_derived and f.derived_logic is not None]

    def without_field(self, field_id: str) -> FormSchema:
        """Return a copy with *field_id* removed.

        Remaining fields are renumbered 0..n-1 in their current order and
        the removed id is dropped from every derived field's parents.
        """
        remaining: list[Field] = []
        for index, f in enumerate(x for x in self.ordered_fields() if x.id != field_id):
            update: dict[str, object] = {"order": index}
            if f.derived_logic is not None and field_id in f.derived_logic.parent_fields:
                parents = [p for p in f.derived_logic.parent_fields if p != field_id]
                update["derived_logic"] = f.derived_logic.model_copy(update={"parent_fields": parents})
            remaining.append(f.model_copy(update=update))
        return self.model_copy(update={"fields": remaining})

    def reordered(self, field_ids: list[str]) -> FormSchema:
        """Return a copy whose fields follow *field_ids* with ``order`` reassigned.

        Raises:
            ValueError: If *field_ids* is not a permutation of the schema's ids.
        """
        by_id = {f.id: f for f in self.fields}
        if sorted(field_ids) != sorted(by_id):
            raise ValueError("Reordering must list every field id exactly once")
        fields = [by_id[fid].model_copy(update={"order": index}) for index, fid in enumerate(field_ids)]
        return self.model_copy(update={"fields": fields})
