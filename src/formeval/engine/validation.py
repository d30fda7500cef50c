# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Per-field validation of form values against declared rules.

Rules of a field run in declaration order and the first failing rule's
message is the field's error. Derived fields are computed rather than
entered, so they are exempt from their own rules whenever their value can
be computed. Validation failures are returned, never raised.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from formeval.model.fields import Field, FormSchema, RuleKind, ValidationRule, Value
from formeval.model.values import is_blank, to_number

# ###############
# Public Interface
# ###############


@dataclass
class ValidationOutcome:
    """Result of validating every field of a schema.

    Attributes:
        errors: Mapping from field id to the first failing rule's message.
            Fields without an entry are valid.
    """

    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        """Return True if no field has an error."""
        return len(self.errors) == 0


def validate_one(
    form_field: Field,
    value: Value,
    values: Mapping[str, Value] | None = None,
) -> str | None:
    """Validate a single field value.

    Args:
        form_field: The field whose rules are applied.
        value: The field's current value.
        values: The full value map. Needed to decide whether a derived field
            is computable; when omitted, derived fields are validated like
            any other field.

    Returns:
        The message of the first failing rule, or None if the value passes
        every rule.
    """
    # Every calculation kind yields a number, so a derived field with logic
    # is always computable once the value map is known.
    if form_field.is_derived and form_field.derived_logic is not None and values is not None:
        return None

    for rule in form_field.validation_rules:
        if not _passes(rule, value):
            return rule.message
    return None


def validate(
    schema: FormSchema,
    values: Mapping[str, Value],
) -> ValidationOutcome:
    """Validate every field of *schema* and collect a fresh error map.

    Derived values are read from *values* as given; call
    :func:`~formeval.engine.recompute.recompute` first so that derived
    fields hold their final values.
    """
    errors: dict[str, str] = {}
    for form_field in schema.ordered_fields():
        message = validate_one(form_field, values.get(form_field.id), values)
        if message is not None:
            errors[form_field.id] = message
    return ValidationOutcome(errors=errors)


# ################
# Implementation
# ################

_EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_PASSWORD_PATTERN = re.compile(r"(?=.*\d).{8,}")


def _passes(rule: ValidationRule, value: Value) -> bool:
    """Return True if *value* satisfies *rule*."""
    if rule.type in (RuleKind.REQUIRED, RuleKind.NOT_EMPTY):
        return not is_blank(value)
    if rule.type in (RuleKind.MIN_LENGTH, RuleKind.MAX_LENGTH):
        if not isinstance(value, str) or rule.value is None:
            return True
        limit = to_number(rule.value)
        return len(value) >= limit if rule.type == RuleKind.MIN_LENGTH else len(value) <= limit
    if rule.type == RuleKind.EMAIL:
        return is_blank(value) or _EMAIL_PATTERN.fullmatch(str(value)) is not None
    if rule.type == RuleKind.PASSWORD:
        return is_blank(value) or _PASSWORD_PATTERN.fullmatch(str(value)) is not None
    return True
