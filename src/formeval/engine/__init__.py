# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Form evaluation engine: derived-field recomputation and validation."""

from formeval.engine.analysis import SchemaError, analyze_schema
from formeval.engine.dependencies import dependency_graph, dependency_order, detect_cycle
from formeval.engine.recompute import derive, recompute
from formeval.engine.session import PreviewSession
from formeval.engine.validation import ValidationOutcome, validate, validate_one

__all__ = [
    "recompute",
    "derive",
    "validate",
    "validate_one",
    "ValidationOutcome",
    "analyze_schema",
    "SchemaError",
    "dependency_graph",
    "dependency_order",
    "detect_cycle",
    "PreviewSession",
]
