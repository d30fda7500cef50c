# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Caller-owned preview session for filling in a form.

A session holds the value map and error map of one preview of a schema and
runs recompute-then-validate in the order an interactive form needs. The
engine functions stay stateless; the session is the only place that keeps
values between calls.
"""

from __future__ import annotations

import logging
from datetime import date

from formeval.engine.recompute import recompute
from formeval.engine.validation import ValidationOutcome, validate, validate_one
from formeval.model.fields import FormSchema, Value

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class PreviewSession:
    """Live values and errors for one preview of a form schema.

    Not thread-safe: callers serialize updates per session.
    """

    def __init__(
        self,
        schema: FormSchema,
        *,
        today: date | None = None,
        max_passes: int | None = None,
    ) -> None:
        self._schema = schema
        self._today = today
        self._max_passes = max_passes
        self._values: dict[str, Value] = self.initial_values()
        self._errors: dict[str, str] = {}

    @property
    def schema(self) -> FormSchema:
        """Return the schema being previewed."""
        return self._schema

    @property
    def values(self) -> dict[str, Value]:
        """Return a copy of the current value map."""
        return dict(self._values)

    @property
    def errors(self) -> dict[str, str]:
        """Return a copy of the current error map."""
        return dict(self._errors)

    def initial_values(self) -> dict[str, Value]:
        """Return defaults of non-derived fields with the derived fields computed."""
        seeded: dict[str, Value] = {
            f.id: f.default_value
            for f in self._schema.ordered_fields()
            if not f.is_derived and f.default_value is not None
        }
        return self._recompute(seeded)

    def set_value(self, field_id: str, value: Value) -> None:
        """Store user input for one field and recompute the derived fields.

        Any error shown for the field is cleared until it is validated again.

        Raises:
            KeyError: If the schema has no field with this id.
        """
        if self._schema.field(field_id) is None:
            raise KeyError(field_id)
        updated = dict(self._values)
        updated[field_id] = value
        self._values = self._recompute(updated)
        self._errors.pop(field_id, None)

    def validate_field(self, field_id: str) -> str | None:
        """Validate one field against the current values and record the result.

        Raises:
            KeyError: If the schema has no field with this id.
        """
        form_field = self._schema.field(field_id)
        if form_field is None:
            raise KeyError(field_id)
        message = validate_one(form_field, self._values.get(field_id), self._values)
        if message is None:
            self._errors.pop(field_id, None)
        else:
            self._errors[field_id] = message
        return message

    def submit(self) -> ValidationOutcome:
        """Recompute derived fields, then validate the whole form."""
        self._values = self._recompute(self._values)
        outcome = validate(self._schema, self._values)
        self._errors = dict(outcome.errors)
        logger.debug("Submitted form '%s': %d error(s)", self._schema.name, len(outcome.errors))
        return outcome

    def reset(self) -> None:
        """Restore defaults, blanking non-derived fields without one, and clear errors."""
        seeded: dict[str, Value] = {}
        for f in self._schema.ordered_fields():
            if f.is_derived:
                continue
            seeded[f.id] = f.default_value if f.default_value is not None else ""
        self._values = self._recompute(seeded)
        self._errors = {}

    def _recompute(self, values: dict[str, Value]) -> dict[str, Value]:
        return recompute(self._schema, values, today=self._today, max_passes=self._max_passes)
