"""
Expression evaluator.

Walks an RPN token queue with a numeric value stack and returns a finite
float.

Stack semantics:
- Numbers are pushed as they are read.
- Postfix operators and functions pop one value and push one result.
- Binary operators pop b (top) then a (next) and push "a op b".
- Exactly one finite value must remain once the queue is exhausted.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from .errors import DomainError, ExpressionError
from .errors import SyntaxError as ExprSyntaxError
from .grammar import AngleMode, Dialect
from .limits import ExpressionLimits
from .parser import parse
from .tokenizer import Token, TokenType

logger = logging.getLogger("calcsite.expr.evaluator")

# Largest n for which n! fits in a double
MAX_FACTORIAL_ARGUMENT = 170


@dataclass(frozen=True)
class EvaluationContext:
    """Per-call evaluation settings supplied by the caller."""

    angle_mode: AngleMode = AngleMode.DEG
    """Unit for trigonometric arguments (scientific dialect only)."""

    dialect: Dialect = Dialect.BASIC
    """Which tokens, functions and constants are legal."""

    limits: Optional[ExpressionLimits] = None
    """Expression limits."""

    source: Optional[str] = None
    """Source expression for error reporting."""

    def __post_init__(self) -> None:
        # Accepts enum members or their string values in any case
        dialect = self.dialect
        if isinstance(dialect, str):
            dialect = dialect.strip().lower()
        object.__setattr__(self, "dialect", Dialect(dialect))

        angle_mode = self.angle_mode
        if isinstance(angle_mode, str):
            angle_mode = angle_mode.strip().upper()
        object.__setattr__(self, "angle_mode", AngleMode(angle_mode))


@dataclass
class EvaluationResult:
    """Result of expression evaluation."""

    value: Optional[float]
    """The evaluated value, None on failure."""

    success: bool
    """Whether evaluation succeeded."""

    error: Optional[str] = None
    """Error message if evaluation failed."""

    exception: Optional[ExpressionError] = None
    """The typed error if evaluation failed."""


def factorial(n: float) -> float:
    """Iterative float factorial, matching 2 * 3 * ... * n."""
    result = 1.0
    for i in range(2, int(n) + 1):
        result *= i
    return result


class Evaluator:
    """Evaluates an RPN token queue and returns the result."""

    def __init__(self, context: EvaluationContext):
        self._context = context
        self._source = context.source or ""
        self._stack: List[float] = []

    def evaluate(self, queue: Sequence[Token]) -> float:
        """Evaluates an RPN queue and returns the final value."""
        self._stack = []

        for token in queue:
            token_type = token.type

            if token_type == TokenType.NUMBER:
                self._stack.append(token.number if token.number is not None else 0.0)
            elif token_type == TokenType.POSTFIX:
                self._stack.append(self._apply_postfix(token, self._pop_one(token)))
            elif token_type == TokenType.FUNCTION:
                self._stack.append(self._apply_function(token, self._pop_one(token)))
            elif token_type == TokenType.OPERATOR:
                b, a = self._pop_two(token)
                self._stack.append(self._apply_operator(token, a, b))
            else:
                raise ExprSyntaxError("malformed expression", token.position, self._source)

        if len(self._stack) != 1:
            raise ExprSyntaxError("malformed expression", None, self._source)

        result = self._stack[0]
        if not math.isfinite(result):
            raise DomainError("result overflow", None, self._source)
        return result

    def _pop_one(self, token: Token) -> float:
        if not self._stack:
            raise ExprSyntaxError("malformed expression", token.position, self._source)
        return self._stack.pop()

    def _pop_two(self, token: Token) -> Tuple[float, float]:
        if len(self._stack) < 2:
            raise ExprSyntaxError("malformed expression", token.position, self._source)
        b = self._stack.pop()
        a = self._stack.pop()
        return b, a

    def _domain_error(self, message: str, token: Token) -> DomainError:
        return DomainError(message, token.position, self._source, operation=token.value)

    def _apply_postfix(self, token: Token, a: float) -> float:
        if token.value == "%":
            return a / 100

        if a < 0 or not a.is_integer():
            raise self._domain_error("factorial requires a non-negative integer", token)
        if a > MAX_FACTORIAL_ARGUMENT:
            raise self._domain_error("factorial too large", token)
        return factorial(a)

    def _to_radians(self, a: float) -> float:
        if self._context.angle_mode == AngleMode.DEG:
            return (a * math.pi) / 180
        return a

    def _apply_function(self, token: Token, a: float) -> float:
        name = token.value

        if name == "sqrt":
            if a < 0:
                raise self._domain_error("negative radicand", token)
            return math.sqrt(a)

        if name in ("sin", "cos", "tan"):
            # math.sin(inf) raises instead of returning NaN
            if math.isinf(a):
                return math.nan
            angle = self._to_radians(a)
            if name == "sin":
                return math.sin(angle)
            if name == "cos":
                return math.cos(angle)
            return math.tan(angle)

        if name == "log":
            if a <= 0:
                raise self._domain_error("log domain error", token)
            return math.log10(a)

        if name == "ln":
            if a <= 0:
                raise self._domain_error("ln domain error", token)
            return math.log(a)

        raise ExprSyntaxError(f"unknown function '{name}'", token.position, self._source)

    def _apply_operator(self, token: Token, a: float, b: float) -> float:
        op = token.value

        if op == "+":
            return a + b
        if op == "-":
            return a - b
        if op == "*":
            return a * b
        if op == "/":
            if b == 0:
                raise self._domain_error("division by zero", token)
            return a / b
        if op == "^":
            try:
                return math.pow(a, b)
            except OverflowError:
                raise self._domain_error("result overflow", token) from None
            except ValueError:
                raise self._domain_error("power domain error", token) from None

        raise ExprSyntaxError(f"unknown operator '{op}'", token.position, self._source)


def evaluate_rpn(queue: Sequence[Token], context: EvaluationContext) -> float:
    """
    Evaluates an already parsed RPN queue.

    Raises:
        SyntaxError: If the queue does not reduce to exactly one value
        DomainError: If a numeric operation is undefined
    """
    return Evaluator(context).evaluate(queue)


def calculate(expression: str, context: Optional[EvaluationContext] = None) -> float:
    """
    Tokenizes, parses and evaluates an expression.

    Args:
        expression: Raw user-typed expression text
        context: Dialect and angle mode, basic dialect when omitted

    Returns:
        The finite numeric result

    Raises:
        ExpressionError: Any SyntaxError, DomainError or LimitExceededError
    """
    context = context or EvaluationContext()
    if context.source != expression:
        context = replace(context, source=expression)

    queue = parse(expression, context.dialect, context.limits)
    return evaluate_rpn(queue, context)


def evaluate(
    expression: str, context: Optional[EvaluationContext] = None
) -> EvaluationResult:
    """
    Evaluates an expression and returns the result.

    Args:
        expression: Raw user-typed expression text
        context: Dialect and angle mode, basic dialect when omitted

    Returns:
        The evaluation result with value and success status
    """
    context = context or EvaluationContext()
    try:
        value = calculate(expression, context)
    except ExpressionError as error:
        logger.debug(
            "expression_rejected",
            extra={
                "dialect": context.dialect.value,
                "error_type": type(error).__name__,
                "error_message": error.message,
                "error_position": error.position,
            },
        )
        return EvaluationResult(
            value=None, success=False, error=error.message, exception=error
        )

    logger.debug(
        "expression_evaluated",
        extra={
            "dialect": context.dialect.value,
            "angle_mode": context.angle_mode.value,
        },
    )
    return EvaluationResult(value=value, success=True)
