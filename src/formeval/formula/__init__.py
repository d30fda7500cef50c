# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Restricted arithmetic formulas for custom derived fields."""

from formeval.formula.evaluator import (
    BinaryOp,
    Expression,
    Number,
    Reference,
    UnaryOp,
    evaluate,
    formula_identifiers,
    parse_formula,
)
from formeval.formula.lexer import FormulaError, Token, TokenType, tokenize

__all__ = [
    "evaluate",
    "parse_formula",
    "formula_identifiers",
    "tokenize",
    "FormulaError",
    "Token",
    "TokenType",
    "Expression",
    "Number",
    "Reference",
    "UnaryOp",
    "BinaryOp",
]
