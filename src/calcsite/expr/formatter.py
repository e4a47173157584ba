"""
Display formatting for evaluation results.

Results are rounded to 10 decimal places so that binary floating point
noise ("0.1+0.2" -> 0.30000000000000004) never reaches the page, and are
always written positionally so the displayed text can be typed back in as
an expression.
"""

import math
from decimal import Decimal
from typing import List, Optional

from .evaluator import EvaluationContext
from .grammar import Dialect

DISPLAY_DECIMALS = 10

# Beyond this magnitude a double has no digits left at the 10th decimal
ROUNDING_LIMIT = 1e15

NON_FINITE_PLACEHOLDER = "—"

_SCALE = 10.0**DISPLAY_DECIMALS


def round_result(value: float) -> float:
    """Rounds half up to DISPLAY_DECIMALS places."""
    if not math.isfinite(value) or abs(value) >= ROUNDING_LIMIT:
        return value
    # Adding 0.0 turns -0.0 into 0.0
    return math.floor(value * _SCALE + 0.5) / _SCALE + 0.0


def format_result(value: float) -> str:
    """Returns the display text for a result, e.g. 0.3, 120 or -0.5."""
    if not math.isfinite(value):
        return NON_FINITE_PLACEHOLDER

    rounded = round_result(value)
    return format(Decimal(repr(rounded)).normalize(), "f")


def format_report(
    expression: str, value: float, context: Optional[EvaluationContext] = None
) -> str:
    """
    Builds the multi-line result block shown under the calculator input.

    The angle mode line is only shown for the scientific dialect.
    """
    context = context or EvaluationContext()
    lines: List[str] = [f"Expression: {expression}"]
    if context.dialect == Dialect.SCIENTIFIC:
        lines.append(f"Mode: {context.angle_mode.value}")
    lines.append(f"Result: {format_result(value)}")
    return "\n".join(lines)
