"""
Calculator expression engine.

This module provides a deterministic, side-effect-free evaluator for
user-typed arithmetic and scientific formulas, built on a tokenizer, a
Shunting-Yard parser and an RPN stack machine.
"""

from .config import (
    CalculatorSettings,
    load_settings,
    settings_from_env,
)
from .errors import (
    DomainError,
    ExpressionError,
    LimitExceededError,
    ParseError,
    SyntaxError,
    TokenizerError,
)

# Evaluator
from .evaluator import (
    EvaluationContext,
    EvaluationResult,
    Evaluator,
    calculate,
    evaluate,
    evaluate_rpn,
)

# Formatter
from .formatter import (
    format_report,
    format_result,
    round_result,
)

# Grammar tables
from .grammar import (
    OPERATORS,
    UNARY_MINUS,
    AngleMode,
    Associativity,
    Dialect,
    DialectRules,
    OperatorSpec,
    get_dialect_rules,
)
from .limits import (
    DEFAULT_EXPRESSION_LIMITS,
    ExpressionLimits,
    check_expression_length,
    check_nesting_depth,
    check_token_count,
)

# Parser
from .parser import (
    Parser,
    parse,
)

# Tokenizer
from .tokenizer import (
    Token,
    Tokenizer,
    TokenType,
    tokenize,
)

__all__ = [
    # Grammar
    "AngleMode",
    "Associativity",
    "Dialect",
    "DialectRules",
    "OperatorSpec",
    "OPERATORS",
    "UNARY_MINUS",
    "get_dialect_rules",
    # Errors
    "ExpressionError",
    "SyntaxError",
    "TokenizerError",
    "ParseError",
    "DomainError",
    "LimitExceededError",
    # Limits
    "ExpressionLimits",
    "DEFAULT_EXPRESSION_LIMITS",
    "check_expression_length",
    "check_nesting_depth",
    "check_token_count",
    # Tokenizer
    "Token",
    "TokenType",
    "Tokenizer",
    "tokenize",
    # Parser
    "Parser",
    "parse",
    # Evaluator
    "EvaluationContext",
    "EvaluationResult",
    "Evaluator",
    "calculate",
    "evaluate",
    "evaluate_rpn",
    # Formatter
    "round_result",
    "format_result",
    "format_report",
    # Settings
    "CalculatorSettings",
    "load_settings",
    "settings_from_env",
]
