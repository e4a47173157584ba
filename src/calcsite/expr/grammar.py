"""
Grammar tables shared by the tokenizer, parser and evaluator.

Both calculator dialects use the same precedence table; a dialect only
decides which symbols, functions and constants are legal.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Literal, Mapping, Tuple

# ============================================================
# Symbol Types
# ============================================================

BinaryOperator = Literal["+", "-", "*", "/", "^"]

FunctionName = Literal["sin", "cos", "tan", "sqrt", "log", "ln"]


class Dialect(str, Enum):
    """Named engine configurations."""

    BASIC = "basic"
    SCIENTIFIC = "scientific"


class AngleMode(str, Enum):
    """Unit used for trigonometric function arguments."""

    DEG = "DEG"
    RAD = "RAD"


class Associativity(Enum):
    LEFT = "left"
    RIGHT = "right"


# ============================================================
# Operator Precedence
# ============================================================


@dataclass(frozen=True)
class OperatorSpec:
    """Precedence and associativity of a binary operator."""

    symbol: BinaryOperator
    precedence: int
    associativity: Associativity


OPERATORS: Dict[str, OperatorSpec] = {
    "+": OperatorSpec("+", 1, Associativity.LEFT),
    "-": OperatorSpec("-", 1, Associativity.LEFT),
    "*": OperatorSpec("*", 2, Associativity.LEFT),
    "/": OperatorSpec("/", 2, Associativity.LEFT),
    "^": OperatorSpec("^", 3, Associativity.RIGHT),
}

# A leading or post-operator "-x" is rewritten to "0 - x". The rewritten
# subtraction binds as tightly as "^" and groups to the right, so "3*-2"
# is 3*(0-2), "--3" is 0-(0-3) and "-3^2" is 0-(3^2).
UNARY_MINUS = OperatorSpec("-", 3, Associativity.RIGHT)

# Input synonyms accepted by every dialect
SYMBOL_SYNONYMS: Dict[str, str] = {
    "×": "*",  # multiplication sign
    "÷": "/",  # division sign
}

PI_SYMBOL = "π"

CONSTANTS: Dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
}

# Longest names first so that prefix matching never stops short
FUNCTION_NAMES: Tuple[FunctionName, ...] = ("sqrt", "sin", "cos", "tan", "log", "ln")


# ============================================================
# Dialects
# ============================================================


@dataclass(frozen=True)
class DialectRules:
    """Which tokens a dialect accepts."""

    operators: FrozenSet[str]
    postfix_operators: FrozenSet[str] = frozenset()
    functions: Tuple[str, ...] = ()
    constants: Mapping[str, float] = field(default_factory=dict)
    case_insensitive_names: bool = False

    def allows_pi_symbol(self) -> bool:
        return "pi" in self.constants


DIALECT_RULES: Dict[Dialect, DialectRules] = {
    Dialect.BASIC: DialectRules(operators=frozenset("+-*/")),
    Dialect.SCIENTIFIC: DialectRules(
        operators=frozenset("+-*/^"),
        postfix_operators=frozenset("!%"),
        functions=FUNCTION_NAMES,
        constants=CONSTANTS,
        case_insensitive_names=True,
    ),
}


def get_dialect_rules(dialect: Dialect) -> DialectRules:
    """Returns the rules for a dialect, accepting its string value too."""
    return DIALECT_RULES[Dialect(dialect)]
