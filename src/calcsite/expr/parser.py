"""
Parser for calculator expressions.

Converts an infix token stream into postfix (RPN) order with the
Shunting-Yard algorithm.

Precedence (lowest to highest):
1. Additive: +, -
2. Multiplicative: *, /
3. Power: ^ (right-associative), unary minus
4. Postfix: !, %
5. Functions: sin(...), sqrt(...), ...

Functions are not given a precedence. Every function must be followed by
one parenthesized argument and is popped to the output as soon as that
group closes, or before any operator that follows it is pushed.
"""

from typing import List, Optional

from .errors import ParseError
from .grammar import Dialect
from .limits import (
    ExpressionLimits,
    check_nesting_depth,
    check_token_count,
)
from .tokenizer import Token, TokenType, tokenize


class Parser:
    """Shunting-Yard parser producing an RPN output queue."""

    def __init__(
        self,
        tokens: List[Token],
        source: str = "",
        limits: Optional[ExpressionLimits] = None,
    ):
        self._tokens = tokens
        self._source = source
        self._limits = limits
        self._output: List[Token] = []
        self._stack: List[Token] = []
        self._depth = 0

    def parse(self) -> List[Token]:
        """Parses the token stream into RPN order."""
        if not self._tokens:
            raise ParseError("empty expression", 0, self._source)

        for index, token in enumerate(self._tokens):
            token_type = token.type

            if token_type in (TokenType.NUMBER, TokenType.POSTFIX):
                self._output.append(token)
            elif token_type == TokenType.FUNCTION:
                self._push_function(token, self._lookahead(index))
            elif token_type == TokenType.OPERATOR:
                self._push_operator(token)
            elif token_type == TokenType.LPAREN:
                self._open_group(token, self._lookahead(index))
            elif token_type == TokenType.RPAREN:
                self._close_group(token)

        while self._stack:
            top = self._stack.pop()
            if top.type == TokenType.LPAREN:
                raise ParseError("mismatched parentheses", top.position, self._source)
            self._output.append(top)

        check_token_count(len(self._output), self._limits)

        return self._output

    # ============================================================
    # Token Helpers
    # ============================================================

    def _lookahead(self, index: int) -> Optional[Token]:
        if index + 1 < len(self._tokens):
            return self._tokens[index + 1]
        return None

    def _top_is(self, token_type: TokenType) -> bool:
        return bool(self._stack) and self._stack[-1].type == token_type

    # ============================================================
    # Shunting-Yard Steps
    # ============================================================

    def _push_function(self, token: Token, following: Optional[Token]) -> None:
        if following is None or following.type != TokenType.LPAREN:
            raise ParseError(
                "function requires a parenthesized argument",
                token.position,
                self._source,
            )
        self._stack.append(token)

    def _push_operator(self, token: Token) -> None:
        while self._top_is(TokenType.OPERATOR):
            top = self._stack[-1]
            if top.precedence > token.precedence or (
                top.precedence == token.precedence and token.is_left_associative
            ):
                self._output.append(self._stack.pop())
            else:
                break

        # Functions always yield before an arithmetic operator is pushed
        if self._top_is(TokenType.FUNCTION):
            self._output.append(self._stack.pop())

        self._stack.append(token)

    def _open_group(self, token: Token, following: Optional[Token]) -> None:
        if following is not None and following.type == TokenType.RPAREN:
            raise ParseError("empty parentheses", token.position, self._source)

        self._depth += 1
        check_nesting_depth(self._depth, self._limits)
        self._stack.append(token)

    def _close_group(self, token: Token) -> None:
        while self._stack and self._stack[-1].type != TokenType.LPAREN:
            self._output.append(self._stack.pop())

        if not self._stack:
            raise ParseError("mismatched parentheses", token.position, self._source)

        # Discard the matching "("
        self._stack.pop()
        self._depth -= 1

        if self._top_is(TokenType.FUNCTION):
            self._output.append(self._stack.pop())


def parse(
    source: str,
    dialect: Dialect = Dialect.BASIC,
    limits: Optional[ExpressionLimits] = None,
) -> List[Token]:
    """
    Parses an expression string into an RPN token queue.

    Args:
        source: The expression string to parse
        dialect: Which tokens, functions and constants are legal
        limits: Optional expression limits

    Returns:
        The tokens in postfix order

    Raises:
        TokenizerError: If tokenization fails
        ParseError: If parsing fails
        LimitExceededError: If the expression is too large
    """
    tokens = tokenize(source, dialect, limits)
    parser = Parser(tokens, source, limits)
    return parser.parse()
