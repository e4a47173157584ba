"""
Calculator settings.

Settings can be built directly, loaded from JSON or YAML text, or read
from environment variables. Keys are accepted in snake_case or camelCase.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .evaluator import EvaluationContext
from .grammar import AngleMode, Dialect
from .limits import DEFAULT_EXPRESSION_LIMITS, ExpressionLimits

logger = logging.getLogger("calcsite.expr.config")

ENV_VAR_DIALECT = "CALC_DIALECT"
ENV_VAR_ANGLE_MODE = "CALC_ANGLE_MODE"
ENV_VAR_MAX_EXPRESSION_LENGTH = "CALC_MAX_EXPRESSION_LENGTH"

_LIMIT_ALIASES = {
    "maxExpressionLength": "max_expression_length",
    "maxNestingDepth": "max_nesting_depth",
    "maxTokens": "max_tokens",
}


def _limits_from_dict(data: Mapping[str, Any]) -> ExpressionLimits:
    """Builds ExpressionLimits from a snake_case or camelCase mapping."""
    values: dict[str, Any] = {}
    for key, value in data.items():
        name = _LIMIT_ALIASES.get(key, key)
        if name not in _LIMIT_ALIASES.values():
            raise ValueError(f"Unknown expression limit: {key}")
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f"{key} must be a positive integer")
        values[name] = value

    return ExpressionLimits(
        max_expression_length=values.get(
            "max_expression_length", DEFAULT_EXPRESSION_LIMITS.max_expression_length
        ),
        max_nesting_depth=values.get(
            "max_nesting_depth", DEFAULT_EXPRESSION_LIMITS.max_nesting_depth
        ),
        max_tokens=values.get("max_tokens", DEFAULT_EXPRESSION_LIMITS.max_tokens),
    )


class CalculatorSettings(BaseModel):
    """Configuration for one calculator page."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    dialect: Dialect = Dialect.BASIC

    # Only used by the scientific dialect
    angle_mode: AngleMode = Field(default=AngleMode.DEG, alias="angleMode")

    expression_limits: Optional[ExpressionLimits] = Field(
        default=None, alias="expressionLimits"
    )

    @field_validator("dialect", mode="before")
    @classmethod
    def _normalize_dialect(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("angle_mode", mode="before")
    @classmethod
    def _normalize_angle_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("expression_limits", mode="before")
    @classmethod
    def _parse_expression_limits(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return _limits_from_dict(value)
        return value

    def to_context(self, source: Optional[str] = None) -> EvaluationContext:
        """Creates a fresh evaluation context for one call."""
        return EvaluationContext(
            angle_mode=self.angle_mode,
            dialect=self.dialect,
            limits=self.expression_limits,
            source=source,
        )


def load_settings(content: str) -> CalculatorSettings:
    """
    Loads settings from JSON or YAML text.

    JSON is a subset of YAML, so both go through yaml.safe_load. Blank
    content yields the defaults.
    """
    parsed = yaml.safe_load(content or "")
    if parsed is None:
        return CalculatorSettings()
    if not isinstance(parsed, dict):
        raise ValueError("Calculator settings must be an object")
    return CalculatorSettings.model_validate(parsed)


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> CalculatorSettings:
    """Reads settings from CALC_* environment variables."""
    environ = os.environ if environ is None else environ

    data: dict[str, Any] = {}
    if environ.get(ENV_VAR_DIALECT):
        data["dialect"] = environ[ENV_VAR_DIALECT]
    if environ.get(ENV_VAR_ANGLE_MODE):
        data["angle_mode"] = environ[ENV_VAR_ANGLE_MODE]
    if environ.get(ENV_VAR_MAX_EXPRESSION_LENGTH):
        raw_length = environ[ENV_VAR_MAX_EXPRESSION_LENGTH]
        try:
            data["expression_limits"] = {"max_expression_length": int(raw_length)}
        except ValueError:
            raise ValueError(
                f"{ENV_VAR_MAX_EXPRESSION_LENGTH} must be an integer, got {raw_length!r}"
            ) from None

    settings = CalculatorSettings.model_validate(data)
    logger.debug(
        "settings_loaded_from_env",
        extra={
            "dialect": settings.dialect.value,
            "angle_mode": settings.angle_mode.value,
        },
    )
    return settings
