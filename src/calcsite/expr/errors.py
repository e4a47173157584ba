"""
Error types for the expression evaluation engine.

All expression errors extend ExpressionError for consistent handling.
Structural problems raise SyntaxError (or one of its stage-specific
subclasses), numeric problems raise DomainError.
"""

from typing import Optional


class ExpressionError(Exception):
    """
    Base error class for all expression-related errors.
    """

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.position = position
        self.expression = expression

    def format_with_context(self) -> str:
        """
        Returns a formatted error message with position context.
        """
        if self.expression is None or self.position is None:
            return self.message

        pointer = " " * self.position + "^"
        return f"{self.message}\n  {self.expression}\n  {pointer}"


class SyntaxError(ExpressionError):
    """
    Error thrown for structurally invalid expressions.
    """

    pass


class TokenizerError(SyntaxError):
    """
    Error thrown during tokenization (lexical analysis).
    """

    pass


class ParseError(SyntaxError):
    """
    Error thrown during infix to postfix conversion.
    """

    pass


class DomainError(ExpressionError):
    """
    Error thrown when a well-formed expression asks for an undefined
    numeric operation (division by zero, log of zero, ...).
    """

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        super().__init__(message, position, expression)
        self.operation = operation


class LimitExceededError(ExpressionError):
    """
    Error thrown when expression limits are exceeded.
    """

    def __init__(self, limit_name: str, limit: int, actual: int):
        message = f"Limit exceeded: {limit_name} (limit: {limit}, actual: {actual})"
        super().__init__(message)
        self.limit_name = limit_name
        self.limit = limit
        self.actual = actual
