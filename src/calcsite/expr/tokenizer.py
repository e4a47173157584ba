"""
Tokenizer (lexer) for calculator expressions.

Converts expression strings into a stream of tokens for the parser.
Whitespace of any kind is removed before scanning, so "1 2" reads as 12.
Constants are resolved to numbers here and unary minus is rewritten to
"0 - x", so the parser only ever sees numbers, binary operators, postfix
operators, functions and parentheses.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .errors import TokenizerError
from .grammar import (
    OPERATORS,
    PI_SYMBOL,
    SYMBOL_SYNONYMS,
    UNARY_MINUS,
    Associativity,
    Dialect,
    DialectRules,
    OperatorSpec,
    get_dialect_rules,
)
from .limits import ExpressionLimits, check_expression_length


class TokenType(Enum):
    """Token types produced by the tokenizer."""

    NUMBER = "NUMBER"
    OPERATOR = "OPERATOR"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    FUNCTION = "FUNCTION"
    POSTFIX = "POSTFIX"


@dataclass(frozen=True)
class Token:
    """A token produced by the tokenizer."""

    type: TokenType
    value: str
    position: int
    number: Optional[float] = None
    precedence: int = 0
    associativity: Optional[Associativity] = None

    @property
    def is_left_associative(self) -> bool:
        return self.associativity == Associativity.LEFT


def _is_digit(ch: str) -> bool:
    """Checks if a character is a digit."""
    return "0" <= ch <= "9"


class Tokenizer:
    """Tokenizer for expression strings."""

    def __init__(
        self,
        source: str,
        dialect: Dialect = Dialect.BASIC,
        limits: Optional[ExpressionLimits] = None,
    ):
        self._source = source
        self._rules: DialectRules = get_dialect_rules(dialect)
        self._limits = limits
        # Indices into source of every non-whitespace character
        self._offsets = [i for i, ch in enumerate(source) if not ch.isspace()]
        self._text = "".join(source[i] for i in self._offsets)
        self._position = 0
        self._tokens: List[Token] = []
        self._names = sorted(
            list(self._rules.functions) + list(self._rules.constants),
            key=len,
            reverse=True,
        )

    def tokenize(self) -> List[Token]:
        """Tokenizes the source expression and returns all tokens."""
        check_expression_length(self._source, self._limits)

        while not self._is_at_end():
            self._scan_token()

        return self._tokens

    def _is_at_end(self) -> bool:
        return self._position >= len(self._text)

    def _peek(self) -> str:
        if self._is_at_end():
            return "\0"
        return self._text[self._position]

    def _advance(self) -> str:
        ch = self._text[self._position]
        self._position += 1
        return ch

    def _source_position(self, index: int) -> int:
        """Maps an index in the stripped text back to the original source."""
        return self._offsets[index]

    def _add_token(self, token: Token) -> None:
        self._tokens.append(token)

    def _add_number(self, value: float, text: str, position: int) -> None:
        self._add_token(Token(TokenType.NUMBER, text, position, number=value))

    def _add_operator(self, spec: OperatorSpec, position: int) -> None:
        self._add_token(
            Token(
                TokenType.OPERATOR,
                spec.symbol,
                position,
                precedence=spec.precedence,
                associativity=spec.associativity,
            )
        )

    def _error(self, message: str, position: int) -> TokenizerError:
        return TokenizerError(message, position, self._source)

    def _scan_token(self) -> None:
        start = self._position
        start_position = self._source_position(start)
        ch = self._advance()
        ch = SYMBOL_SYNONYMS.get(ch, ch)

        if ch == "(":
            self._add_token(Token(TokenType.LPAREN, ch, start_position))
            return

        if ch == ")":
            self._add_token(Token(TokenType.RPAREN, ch, start_position))
            return

        if _is_digit(ch) or ch == ".":
            self._scan_number(start)
            return

        if ch in OPERATORS and ch in self._rules.operators:
            self._scan_operator(ch, start_position)
            return

        if ch in self._rules.postfix_operators:
            self._add_token(Token(TokenType.POSTFIX, ch, start_position))
            return

        if ch == PI_SYMBOL and self._rules.allows_pi_symbol():
            self._add_number(self._rules.constants["pi"], "pi", start_position)
            return

        if self._scan_name(start):
            return

        raise self._error(f"unsupported character '{ch}'", start_position)

    def _scan_number(self, start: int) -> None:
        start_position = self._source_position(start)
        # Back up to include the first character
        self._position = start

        value = ""
        dots = 0

        while _is_digit(self._peek()) or self._peek() == ".":
            ch = self._advance()
            if ch == ".":
                dots += 1
                if dots > 1:
                    raise self._error("invalid number format", start_position)
            value += ch

        try:
            number = float(value)
        except ValueError:
            raise self._error("invalid number", start_position) from None

        if not math.isfinite(number):
            raise self._error("invalid number", start_position)

        self._add_number(number, value, start_position)

    def _scan_operator(self, symbol: str, start_position: int) -> None:
        if symbol == "-" and self._is_unary_position():
            self._add_number(0.0, "0", start_position)
            self._add_operator(UNARY_MINUS, start_position)
            return

        self._add_operator(OPERATORS[symbol], start_position)

    def _is_unary_position(self) -> bool:
        """A minus is unary at the start, after an operator, '(' or a function."""
        if not self._tokens:
            return True
        return self._tokens[-1].type in (
            TokenType.OPERATOR,
            TokenType.LPAREN,
            TokenType.FUNCTION,
        )

    def _scan_name(self, start: int) -> bool:
        """Matches a function or constant name starting at index start."""
        start_position = self._source_position(start)
        for name in self._names:
            candidate = self._text[start : start + len(name)]
            if self._rules.case_insensitive_names:
                candidate = candidate.lower()
            if candidate != name:
                continue

            self._position = start + len(name)
            if name in self._rules.constants:
                self._add_number(self._rules.constants[name], name, start_position)
            else:
                self._add_token(Token(TokenType.FUNCTION, name, start_position))
            return True

        return False


def tokenize(
    source: str,
    dialect: Dialect = Dialect.BASIC,
    limits: Optional[ExpressionLimits] = None,
) -> List[Token]:
    """
    Tokenizes an expression string into tokens.

    Args:
        source: The expression string to tokenize
        dialect: Which tokens, functions and constants are legal
        limits: Optional expression limits

    Returns:
        List of tokens

    Raises:
        TokenizerError: If the expression contains invalid tokens
        LimitExceededError: If the expression is too long
    """
    tokenizer = Tokenizer(source, dialect, limits)
    return tokenizer.tokenize()
