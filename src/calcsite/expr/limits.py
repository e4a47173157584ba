"""
Resource limits for expression tokenizing and parsing.

User input reaches the engine straight from a text box, so the size of
what it will look at is capped.
"""

from dataclasses import dataclass
from typing import Optional

from .errors import LimitExceededError


@dataclass(frozen=True)
class ExpressionLimits:
    """Expression limits configuration."""

    # Maximum expression string length in characters
    max_expression_length: int = 4096

    # Maximum parenthesis nesting level
    max_nesting_depth: int = 32

    # Maximum number of tokens in the RPN output queue
    max_tokens: int = 1024


DEFAULT_EXPRESSION_LIMITS = ExpressionLimits()


def check_expression_length(
    expression: str, limits: Optional[ExpressionLimits] = None
) -> None:
    """Validates that expression length is within limits."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if len(expression) > limits.max_expression_length:
        raise LimitExceededError(
            "max_expression_length", limits.max_expression_length, len(expression)
        )


def check_nesting_depth(
    depth: int, limits: Optional[ExpressionLimits] = None
) -> None:
    """Validates parenthesis nesting depth during parsing."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if depth > limits.max_nesting_depth:
        raise LimitExceededError("max_nesting_depth", limits.max_nesting_depth, depth)


def check_token_count(count: int, limits: Optional[ExpressionLimits] = None) -> None:
    """Validates the size of the RPN output queue."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if count > limits.max_tokens:
        raise LimitExceededError("max_tokens", limits.max_tokens, count)
