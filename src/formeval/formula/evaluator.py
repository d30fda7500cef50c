# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser and evaluator for custom derived-field formulas.

Grammar::

    expr    := term (('+' | '-') term)*
    term    := unary (('*' | '/') unary)*
    unary   := ('+' | '-') unary | primary
    primary := NUMBER | IDENTIFIER | '(' expr ')'

Identifiers are whole field ids. They are replaced by the numeric value of
the corresponding field before evaluation, so the evaluated expression only
ever contains numbers, operators, and parentheses.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass

from formeval.formula.lexer import FormulaError, Token, TokenType, tokenize
from formeval.model.fields import Value
from formeval.model.values import normalize_number, to_number

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class Number:
    """A numeric literal."""

    value: float


@dataclass(frozen=True)
class Reference:
    """A reference to a field by id."""

    name: str
    column: int


@dataclass(frozen=True)
class UnaryOp:
    """A prefix ``+`` or ``-`` applied to an operand."""

    op: str
    operand: Expression


@dataclass(frozen=True)
class BinaryOp:
    """An infix arithmetic operation."""

    op: str
    left: Expression
    right: Expression


Expression = Number | Reference | UnaryOp | BinaryOp


def parse_formula(formula: str) -> Expression:
    """Parse formula text into an expression tree.

    Raises:
        FormulaError: If the formula is empty, contains characters outside
            the formula alphabet, or is syntactically invalid.
    """
    tokens = tokenize(formula)
    return _Parser(tokens).parse()


def formula_identifiers(formula: str) -> list[str]:
    """Return the distinct field ids referenced by a formula, in first-use order.

    Raises:
        FormulaError: If the formula cannot be tokenized.
    """
    seen: dict[str, None] = {}
    for tok in tokenize(formula):
        if tok.type == TokenType.IDENTIFIER:
            seen.setdefault(tok.value, None)
    return list(seen)


def evaluate(formula: str, substitutions: Mapping[str, Value]) -> int | float:
    """Evaluate a formula with each field id replaced by its numeric value.

    Substituted values are coerced with :func:`~formeval.model.values.to_number`,
    so non-numeric or absent values count as 0. Any failure (unknown
    identifier, syntax error, division by zero, overflow, non-finite result)
    yields 0; this function never raises.

    Args:
        formula: The formula text, e.g. ``"a + b * 2"``.
        substitutions: Mapping from field id to that field's current value.

    Returns:
        The numeric result, with whole floats returned as ints.
    """
    try:
        tree = parse_formula(formula)
        bound = {name: to_number(value) for name, value in substitutions.items()}
        result = _evaluate(tree, bound)
    except (FormulaError, OverflowError, RecursionError) as exc:
        logger.debug("Formula %r evaluates to 0: %s", formula, exc)
        return 0
    if not math.isfinite(result):
        logger.debug("Formula %r produced a non-finite result; using 0", formula)
        return 0
    return normalize_number(result)


# ################
# Implementation
# ################

_ADDITIVE = (TokenType.PLUS, TokenType.MINUS)
_MULTIPLICATIVE = (TokenType.STAR, TokenType.SLASH)


class _Parser:
    """Recursive-descent parser for formula token streams."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    def parse(self) -> Expression:
        """Parse the full token stream as a single expression."""
        if self._check(TokenType.EOF):
            raise FormulaError("Empty formula", self._current().column)
        expr = self._parse_expr()
        tok = self._current()
        if tok.type != TokenType.EOF:
            raise FormulaError(f"Unexpected token {tok.value!r}", tok.column)
        return expr

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        """Return the current (un-consumed) token."""
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        """Consume and return the current token, stopping at EOF."""
        tok = self._tokens[self._pos]
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
        return tok

    def _check(self, *types: TokenType) -> bool:
        """Return True if the current token matches any of the given types."""
        return self._current().type in types

    def _expect(self, token_type: TokenType) -> Token:
        """Consume the current token if it has the given type, else raise."""
        tok = self._current()
        if tok.type != token_type:
            found = tok.value or "end of formula"
            raise FormulaError(f"Expected {token_type.value!r}, got {found!r}", tok.column)
        return self._advance()

    # ------------------------------------------------------------------
    # Grammar rules
    # ------------------------------------------------------------------

    def _parse_expr(self) -> Expression:
        left = self._parse_term()
        while self._check(*_ADDITIVE):
            op = self._advance().value
            left = BinaryOp(op=op, left=left, right=self._parse_term())
        return left

    def _parse_term(self) -> Expression:
        left = self._parse_unary()
        while self._check(*_MULTIPLICATIVE):
            op = self._advance().value
            left = BinaryOp(op=op, left=left, right=self._parse_unary())
        return left

    def _parse_unary(self) -> Expression:
        if self._check(*_ADDITIVE):
            op = self._advance().value
            return UnaryOp(op=op, operand=self._parse_unary())
        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        tok = self._current()
        if tok.type == TokenType.NUMBER:
            self._advance()
            return Number(value=float(tok.value))
        if tok.type == TokenType.IDENTIFIER:
            self._advance()
            return Reference(name=tok.value, column=tok.column)
        if tok.type == TokenType.LPAREN:
            self._advance()
            expr = self._parse_expr()
            self._expect(TokenType.RPAREN)
            return expr
        found = tok.value or "end of formula"
        raise FormulaError(f"Expected a number, field id, or '(', got {found!r}", tok.column)


def _evaluate(expr: Expression, bound: Mapping[str, int | float]) -> float:
    """Evaluate an expression tree against already-coerced field values."""
    if isinstance(expr, Number):
        return expr.value
    if isinstance(expr, Reference):
        if expr.name not in bound:
            raise FormulaError(f"Unknown field {expr.name!r}", expr.column)
        return float(bound[expr.name])
    if isinstance(expr, UnaryOp):
        operand = _evaluate(expr.operand, bound)
        return -operand if expr.op == "-" else operand
    left = _evaluate(expr.left, bound)
    right = _evaluate(expr.right, bound)
    if expr.op == "+":
        return left + right
    if expr.op == "-":
        return left - right
    if expr.op == "*":
        return left * right
    if right == 0:
        raise FormulaError("Division by zero")
    return left / right
