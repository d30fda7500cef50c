# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""formeval: live recomputation and validation of form schemas."""

from formeval.engine import (
    PreviewSession,
    SchemaError,
    ValidationOutcome,
    analyze_schema,
    recompute,
    validate,
    validate_one,
)

__all__ = [
    "recompute",
    "validate",
    "validate_one",
    "ValidationOutcome",
    "analyze_schema",
    "SchemaError",
    "PreviewSession",
]
