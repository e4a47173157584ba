"""
Tests for calculator settings loading.
"""

import pytest
from pydantic import ValidationError

from calcsite.expr import (
    AngleMode,
    CalculatorSettings,
    Dialect,
    ExpressionLimits,
    evaluate,
    load_settings,
    settings_from_env,
)


class TestCalculatorSettings:
    """Tests for the settings model."""

    def test_defaults(self):
        settings = CalculatorSettings()
        assert settings.dialect == Dialect.BASIC
        assert settings.angle_mode == AngleMode.DEG
        assert settings.expression_limits is None

    def test_accepts_snake_and_camel_case(self):
        assert CalculatorSettings(angle_mode="RAD").angle_mode == AngleMode.RAD
        assert CalculatorSettings(angleMode="RAD").angle_mode == AngleMode.RAD

    def test_normalizes_case(self):
        settings = CalculatorSettings(dialect="Scientific", angle_mode="rad")
        assert settings.dialect == Dialect.SCIENTIFIC
        assert settings.angle_mode == AngleMode.RAD

    def test_rejects_unknown_dialect(self):
        with pytest.raises(ValidationError):
            CalculatorSettings(dialect="graphing")

    def test_rejects_unknown_keys(self):
        with pytest.raises(ValidationError):
            CalculatorSettings.model_validate({"precision": 4})

    def test_limits_from_camel_case_dict(self):
        settings = CalculatorSettings.model_validate(
            {"expressionLimits": {"maxExpressionLength": 10, "maxNestingDepth": 2}}
        )
        assert settings.expression_limits == ExpressionLimits(
            max_expression_length=10, max_nesting_depth=2
        )

    def test_limits_instance_is_kept(self):
        limits = ExpressionLimits(max_tokens=8)
        assert CalculatorSettings(expression_limits=limits).expression_limits == limits

    def test_rejects_unknown_limit(self):
        with pytest.raises(ValidationError):
            CalculatorSettings(expression_limits={"maxAstDepth": 3})

    def test_rejects_non_positive_limit(self):
        with pytest.raises(ValidationError):
            CalculatorSettings(expression_limits={"max_tokens": 0})

    def test_settings_are_frozen(self):
        settings = CalculatorSettings()
        with pytest.raises(ValidationError):
            settings.dialect = Dialect.SCIENTIFIC

    def test_to_context_drives_evaluation(self):
        settings = CalculatorSettings(dialect="scientific", angle_mode="RAD")
        context = settings.to_context()
        assert context.dialect == Dialect.SCIENTIFIC
        assert context.angle_mode == AngleMode.RAD
        assert evaluate("cos(0)", context).value == 1

    def test_to_context_applies_limits(self):
        settings = CalculatorSettings(expression_limits={"max_expression_length": 3})
        result = evaluate("1+2+3", settings.to_context())
        assert result.success is False
        assert "max_expression_length" in result.error


class TestLoadSettings:
    """Tests for loading settings from text."""

    def test_loads_json(self):
        settings = load_settings('{"dialect": "scientific", "angleMode": "RAD"}')
        assert settings.dialect == Dialect.SCIENTIFIC
        assert settings.angle_mode == AngleMode.RAD

    def test_loads_yaml(self):
        settings = load_settings(
            "dialect: scientific\n"
            "angle_mode: deg\n"
            "expressionLimits:\n"
            "  maxTokens: 64\n"
        )
        assert settings.dialect == Dialect.SCIENTIFIC
        assert settings.angle_mode == AngleMode.DEG
        assert settings.expression_limits.max_tokens == 64

    def test_blank_content_gives_defaults(self):
        assert load_settings("") == CalculatorSettings()
        assert load_settings("   \n") == CalculatorSettings()

    def test_rejects_non_object(self):
        with pytest.raises(ValueError, match="must be an object"):
            load_settings("- basic\n- scientific\n")


class TestSettingsFromEnv:
    """Tests for environment variable settings."""

    def test_empty_environment_gives_defaults(self):
        assert settings_from_env({}) == CalculatorSettings()

    def test_reads_all_variables(self):
        settings = settings_from_env(
            {
                "CALC_DIALECT": "scientific",
                "CALC_ANGLE_MODE": "rad",
                "CALC_MAX_EXPRESSION_LENGTH": "128",
            }
        )
        assert settings.dialect == Dialect.SCIENTIFIC
        assert settings.angle_mode == AngleMode.RAD
        assert settings.expression_limits.max_expression_length == 128

    def test_rejects_non_integer_length(self):
        with pytest.raises(ValueError, match="CALC_MAX_EXPRESSION_LENGTH"):
            settings_from_env({"CALC_MAX_EXPRESSION_LENGTH": "lots"})

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("CALC_DIALECT", "scientific")
        monkeypatch.delenv("CALC_ANGLE_MODE", raising=False)
        monkeypatch.delenv("CALC_MAX_EXPRESSION_LENGTH", raising=False)
        assert settings_from_env().dialect == Dialect.SCIENTIFIC
