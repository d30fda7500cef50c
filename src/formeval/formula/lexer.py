# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for custom derived-field formulas.

Converts formula text such as ``price * (1 + tax) / 100`` into a sequence of
tokens. Only numbers, field identifiers, the four arithmetic operators, and
parentheses are recognised.
"""

import enum
from dataclasses import dataclass

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token types produced by the formula lexer."""

    # Operators and grouping
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    LPAREN = "("
    RPAREN = ")"

    # Literals
    NUMBER = "NUMBER"

    # Field references
    IDENTIFIER = "IDENTIFIER"

    # End of formula
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexical token with its position in the formula.

    Attributes:
        type: The kind of token.
        value: The raw text of the token.
        column: 1-based column where the token starts.
    """

    type: TokenType
    value: str
    column: int


class FormulaError(Exception):
    """Raised when a formula cannot be tokenized, parsed, or evaluated.

    Attributes:
        column: 1-based column of the offending character, or 0 when the
            error is not tied to a position (e.g. division by zero).
    """

    def __init__(self, message: str, column: int = 0) -> None:
        if column:
            super().__init__(f"Column {column}: {message}")
        else:
            super().__init__(message)
        self.column = column


def tokenize(formula: str) -> list[Token]:
    """Tokenize formula text into a sequence of tokens.

    Whitespace is skipped. The final token is always an EOF token.

    Args:
        formula: The formula text.

    Returns:
        A list of Token objects ending with a single EOF token.

    Raises:
        FormulaError: On any character outside the formula alphabet or a
            malformed number literal.
    """
    return _Lexer(formula).tokenize()


# ################
# Implementation
# ################

_SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}


class _Lexer:
    """Internal scanner state machine."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Run the scanner and return all tokens including the terminal EOF."""
        while self._pos < len(self._source):
            if self._current() in " \t\r\n":
                self._pos += 1
                continue
            self._scan_token()
        self._tokens.append(Token(TokenType.EOF, "", self._pos + 1))
        return self._tokens

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _peek(self) -> str:
        """Return the character one position ahead, or '' at end of input."""
        if self._pos + 1 < len(self._source):
            return self._source[self._pos + 1]
        return ""

    def _scan_token(self) -> None:
        """Dispatch to the appropriate handler based on the current character."""
        ch = self._current()
        col = self._pos + 1

        if ch in _SINGLE_CHAR_TOKENS:
            self._pos += 1
            self._tokens.append(Token(_SINGLE_CHAR_TOKENS[ch], ch, col))
        elif _is_ascii_digit(ch) or (ch == "." and _is_ascii_digit(self._peek())):
            self._scan_number(col)
        elif _is_ident_start(ch):
            self._scan_identifier(col)
        else:
            raise FormulaError(f"Unexpected character: {ch!r}", col)

    def _scan_number(self, col: int) -> None:
        """Scan a decimal literal such as ``12``, ``3.5`` or ``.5``."""
        start = self._pos
        while _is_ascii_digit(self._current()):
            self._pos += 1
        if self._current() == ".":
            self._pos += 1
            while _is_ascii_digit(self._current()):
                self._pos += 1
            if self._current() == ".":
                raise FormulaError("Malformed number literal", col)
        self._tokens.append(Token(TokenType.NUMBER, self._source[start : self._pos], col))

    def _scan_identifier(self, col: int) -> None:
        """Scan a whole field identifier.

        Dots are allowed after the first character so that generated ids such
        as ``field_1712_0.53`` stay a single token.
        """
        start = self._pos
        while _is_ident_start(self._current()) or _is_ascii_digit(self._current()) or self._current() == ".":
            self._pos += 1
        self._tokens.append(Token(TokenType.IDENTIFIER, self._source[start : self._pos], col))


def _is_ascii_digit(ch: str) -> bool:
    return ch != "" and ch in "0123456789"


def _is_ident_start(ch: str) -> bool:
    return ch != "" and (ch == "_" or ("a" <= ch <= "z") or ("A" <= ch <= "Z"))
