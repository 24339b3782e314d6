"""
Tests for JSON Schema Contract Validators

Тестирование валидатора metalog_distribution:
- Валидность самой схемы
- Валидация правильных данных
- Детекция нарушений required полей
- Детекция нарушений типов (SD59x18 только как десятичная строка)
- Детекция нарушений constraints (minItems/maxItems/enum/const)
- Условные требования границ носителя
"""

import copy

import pytest
from jsonschema import ValidationError

from src.core.contracts import (
    ContractValidator,
    MetalogDistributionValidator,
    SchemaLoader,
    validate_metalog_distribution,
)


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_distribution():
    """Валидный metalog_distribution для тестирования."""
    return {
        "schema_version": "1",
        "coefficients": [
            "996043875471054000",
            "51024209692504000",
            "-40340911286869100",
            "-181985469221972000",
            "89194887103685600",
            "-162518488572285000",
            "516451225277333000",
            "118180213813597000",
            "-261748715887528000",
        ],
        "bounds": {
            "bound_choice": "BOUNDED",
            "lower_bound": "0",
            "upper_bound": "10000000000000000000",
        },
    }


# =============================================================================
# ТЕСТЫ: SchemaLoader
# =============================================================================


class TestSchemaLoader:
    """Тесты загрузчика схем."""

    def test_load_schema(self):
        schema = SchemaLoader().load_schema("metalog_distribution")
        assert schema["title"] == "Metalog Distribution"
        assert "coefficients" in schema["required"]

    def test_schema_is_cached(self):
        loader = SchemaLoader()
        assert loader.load_schema("metalog_distribution") is loader.load_schema(
            "metalog_distribution"
        )

    def test_missing_schema(self):
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("coefficient_fit")

    def test_missing_directory(self, tmp_path):
        with pytest.raises(RuntimeError):
            SchemaLoader(tmp_path / "absent")

    def test_invalid_schema_rejected(self, tmp_path):
        """Файл, не проходящий meta-validation, не загружается."""
        (tmp_path / "broken.json").write_text('{"type": 12}', encoding="utf-8")
        with pytest.raises(ValueError, match="broken.json"):
            SchemaLoader(tmp_path).load_schema("broken")


# =============================================================================
# ТЕСТЫ: Валидные данные
# =============================================================================


class TestValidPayloads:
    """Валидные данные проходят без ошибок."""

    def test_full_payload(self, valid_distribution):
        validate_metalog_distribution(valid_distribution)

    def test_without_bounds(self, valid_distribution):
        del valid_distribution["bounds"]
        validate_metalog_distribution(valid_distribution)

    def test_one_sided_bounds(self, valid_distribution):
        valid_distribution["bounds"] = {"bound_choice": "BOUNDED_BELOW", "lower_bound": "-5"}
        validate_metalog_distribution(valid_distribution)

        valid_distribution["bounds"] = {"bound_choice": "BOUNDED_ABOVE", "upper_bound": "5"}
        validate_metalog_distribution(valid_distribution)

    def test_unbounded_without_values(self, valid_distribution):
        valid_distribution["bounds"] = {"bound_choice": "UNBOUNDED"}
        validate_metalog_distribution(valid_distribution)

    def test_validator_class(self, valid_distribution):
        MetalogDistributionValidator().validate(valid_distribution)


# =============================================================================
# ТЕСТЫ: Нарушения
# =============================================================================


class TestInvalidPayloads:
    """Нарушения схемы детектируются."""

    def test_missing_coefficients(self, valid_distribution):
        del valid_distribution["coefficients"]
        with pytest.raises(ValidationError, match="coefficients"):
            validate_metalog_distribution(valid_distribution)

    def test_missing_schema_version(self, valid_distribution):
        del valid_distribution["schema_version"]
        with pytest.raises(ValidationError):
            validate_metalog_distribution(valid_distribution)

    def test_wrong_schema_version(self, valid_distribution):
        valid_distribution["schema_version"] = "2"
        with pytest.raises(ValidationError):
            validate_metalog_distribution(valid_distribution)

    def test_numeric_coefficient(self, valid_distribution):
        """JSON number не допускается: только десятичная строка."""
        valid_distribution["coefficients"][0] = 0.996043875471054
        with pytest.raises(ValidationError):
            validate_metalog_distribution(valid_distribution)

    def test_decimal_point_in_string(self, valid_distribution):
        valid_distribution["coefficients"][0] = "0.996043875471054"
        with pytest.raises(ValidationError):
            validate_metalog_distribution(valid_distribution)

    def test_leading_zero(self, valid_distribution):
        valid_distribution["coefficients"][0] = "0123"
        with pytest.raises(ValidationError):
            validate_metalog_distribution(valid_distribution)

    def test_too_few_coefficients(self, valid_distribution):
        valid_distribution["coefficients"] = ["1"]
        with pytest.raises(ValidationError):
            validate_metalog_distribution(valid_distribution)

    def test_too_many_coefficients(self, valid_distribution):
        valid_distribution["coefficients"] = ["1"] * 17
        with pytest.raises(ValidationError):
            validate_metalog_distribution(valid_distribution)

    def test_bounded_without_upper(self, valid_distribution):
        del valid_distribution["bounds"]["upper_bound"]
        with pytest.raises(ValidationError):
            validate_metalog_distribution(valid_distribution)

    def test_bounded_below_without_lower(self, valid_distribution):
        valid_distribution["bounds"] = {"bound_choice": "BOUNDED_BELOW", "upper_bound": "5"}
        with pytest.raises(ValidationError):
            validate_metalog_distribution(valid_distribution)

    def test_unknown_bound_choice(self, valid_distribution):
        valid_distribution["bounds"]["bound_choice"] = "SEMI_BOUNDED"
        with pytest.raises(ValidationError):
            validate_metalog_distribution(valid_distribution)

    def test_additional_property(self, valid_distribution):
        valid_distribution["fitted_at"] = "2024-01-01"
        with pytest.raises(ValidationError):
            validate_metalog_distribution(valid_distribution)

    def test_payload_not_mutated(self, valid_distribution):
        """Валидация не изменяет payload."""
        snapshot = copy.deepcopy(valid_distribution)
        validate_metalog_distribution(valid_distribution)
        assert valid_distribution == snapshot


# =============================================================================
# ТЕСТЫ: ContractValidator
# =============================================================================


class TestContractValidator:
    """Базовый валидатор по имени схемы."""

    def test_by_name(self, valid_distribution):
        validator = ContractValidator("metalog_distribution")
        assert validator.schema_name == "metalog_distribution"
        validator.validate(valid_distribution)

    def test_unknown_schema(self):
        with pytest.raises(FileNotFoundError):
            ContractValidator("does_not_exist")
