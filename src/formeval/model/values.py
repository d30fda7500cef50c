# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Coercion helpers shared by recomputation and validation.

Field values are dynamically typed scalars. These helpers define the single
set of rules used to read them as numbers, dates, or "blank".
"""

from __future__ import annotations

import math
import sys
from datetime import date, datetime

from formeval.model.fields import Value

# ###############
# Public Interface
# ###############


def to_number(value: Value) -> int | float:
    """Coerce a field value to a number.

    Numbers pass through (booleans count as 0 or 1), numeric strings are
    parsed, and everything else, including blank strings, NaN, infinities
    and integers too large for a float, becomes 0.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return _bounded_int(value)
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    if isinstance(value, str):
        return _parse_number(value.strip())
    return 0


def to_date(value: Value) -> date | None:
    """Interpret a field value as a calendar date.

    Accepts ``date`` and ``datetime`` objects and ISO 8601 strings
    (``YYYY-MM-DD``, optionally followed by a time part). Returns None for
    anything else.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def is_blank(value: Value) -> bool:
    """Return True if the value is absent or a whitespace-only string."""
    if value is None:
        return True
    return isinstance(value, str) and value.strip() == ""


def normalize_number(value: int | float) -> int | float:
    """Return whole floats as ints so ``2.0 + 3.0`` reads back as ``5``."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


# ################
# Implementation
# ################


def _parse_number(text: str) -> int | float:
    """Parse a stripped numeric string, returning 0 when it is not a finite number."""
    if not text or "_" in text:
        return 0
    try:
        return _bounded_int(int(text))
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return 0
    return number if math.isfinite(number) else 0


def _bounded_int(value: int) -> int:
    """Return *value*, or 0 if it cannot be converted to a float."""
    return value if abs(value) <= sys.float_info.max else 0
