"""
Тесты для Metalog Basis — Q(p) и q(p) в неограниченном пространстве

Проверяемые инварианты:
1. Порядок базисных функций (term_shape)
2. Percentile строго в (0, 1) с точным текстом ошибки
3. Q(0.5) == a_1 (logit и centered обнуляются)
4. Аналитическая производная согласована с конечной разностью
"""

import pytest

from src.core.math.fixed_point import HALF, ONE, div
from src.metalog.basis import (
    MAX_TERMS,
    MIN_TERMS,
    PERCENTILE_TOO_HIGH_MESSAGE,
    PERCENTILE_TOO_LOW_MESSAGE,
    BasisPoint,
    InvalidCoefficients,
    InvalidPercentile,
    MetalogError,
    basis_derivative,
    basis_value,
    evaluate_quantile,
    evaluate_quantile_density,
    term_shape,
    validate_coefficients,
    validate_percentile,
)

NINE_TERM_COEFFICIENTS = (
    996043875471054000,
    51024209692504000,
    -40340911286869100,
    -181985469221972000,
    89194887103685600,
    -162518488572285000,
    516451225277333000,
    118180213813597000,
    -261748715887528000,
)

# Q(p) = logit(p): стандартное логистическое распределение
LOGISTIC_COEFFICIENTS = (0, ONE)

# Q(p) = 1 + 2·(p - 0.5): равномерное на (0, 2)
LINEAR_COEFFICIENTS = (ONE, 0, 0, 2 * ONE)

LN_3 = 1098612288668109691


# =============================================================================
# ТЕСТЫ: Порядок базиса
# =============================================================================


class TestTermShape:
    """Тесты формы базисных функций."""

    def test_first_four_terms(self):
        assert term_shape(1) == (0, False)
        assert term_shape(2) == (0, True)
        assert term_shape(3) == (1, True)
        assert term_shape(4) == (1, False)

    def test_higher_terms(self):
        """k >= 5: нечётные — чистая степень centered, чётные — с logit."""
        assert term_shape(5) == (2, False)
        assert term_shape(6) == (2, True)
        assert term_shape(7) == (3, False)
        assert term_shape(8) == (3, True)
        assert term_shape(9) == (4, False)
        assert term_shape(16) == (7, True)

    def test_invalid_index(self):
        with pytest.raises(ValueError):
            term_shape(0)


# =============================================================================
# ТЕСТЫ: Валидация
# =============================================================================


class TestValidation:
    """Тесты validate_percentile / validate_coefficients."""

    def test_percentile_interior(self):
        assert validate_percentile(1) == 1
        assert validate_percentile(HALF) == HALF
        assert validate_percentile(ONE - 1) == ONE - 1

    def test_percentile_too_low(self):
        for p in (0, -1, -ONE):
            with pytest.raises(InvalidPercentile) as exc_info:
                validate_percentile(p)
            assert str(exc_info.value) == PERCENTILE_TOO_LOW_MESSAGE

    def test_percentile_too_high(self):
        for p in (ONE, ONE + 1, 2 * ONE):
            with pytest.raises(InvalidPercentile) as exc_info:
                validate_percentile(p)
            assert str(exc_info.value) == PERCENTILE_TOO_HIGH_MESSAGE

    def test_messages(self):
        assert PERCENTILE_TOO_LOW_MESSAGE == "percentile_ <= 0%"
        assert PERCENTILE_TOO_HIGH_MESSAGE == "percentile_ >= 100%"

    def test_invalid_percentile_hierarchy(self):
        assert issubclass(InvalidPercentile, MetalogError)
        assert issubclass(InvalidPercentile, ValueError)

    def test_coefficients_length(self):
        assert validate_coefficients([1, 2]) == (1, 2)
        assert len(validate_coefficients([0] * MAX_TERMS)) == MAX_TERMS

        with pytest.raises(InvalidCoefficients):
            validate_coefficients([ONE] * (MIN_TERMS - 1))

        with pytest.raises(InvalidCoefficients):
            validate_coefficients([0] * (MAX_TERMS + 1))

    def test_coefficients_values(self):
        with pytest.raises(InvalidCoefficients):
            validate_coefficients([ONE, 0.5])

        with pytest.raises(InvalidCoefficients):
            validate_coefficients([ONE, 2**255])


# =============================================================================
# ТЕСТЫ: BasisPoint
# =============================================================================


class TestBasisPoint:
    """Общие значения в точке p."""

    def test_center(self):
        point = BasisPoint.at(HALF)
        assert point.centered == 0
        assert point.logit == 0
        assert point.logit_slope == 4 * ONE

    def test_logit_antisymmetric(self):
        low = BasisPoint.at(ONE // 4)
        high = BasisPoint.at(3 * ONE // 4)
        assert low.logit == -high.logit
        assert low.centered == -high.centered

    def test_basis_values_at_center(self):
        point = BasisPoint.at(HALF)
        assert basis_value(point, 1) == ONE
        for k in range(2, 10):
            assert basis_value(point, k) == 0

    def test_basis_derivative_constant_term(self):
        point = BasisPoint.at(ONE // 3)
        assert basis_derivative(point, 1) == 0
        assert basis_derivative(point, 4) == ONE


# =============================================================================
# ТЕСТЫ: Q(p) и q(p)
# =============================================================================


class TestEvaluateQuantile:
    """Тесты квантильной функции."""

    def test_median_equals_first_coefficient(self):
        assert evaluate_quantile(HALF, NINE_TERM_COEFFICIENTS) == NINE_TERM_COEFFICIENTS[0]

    def test_logistic(self):
        q_75 = evaluate_quantile(3 * ONE // 4, LOGISTIC_COEFFICIENTS)
        q_25 = evaluate_quantile(ONE // 4, LOGISTIC_COEFFICIENTS)
        assert abs(q_75 - LN_3) <= 10**3
        assert q_25 == -q_75

    def test_linear(self):
        assert evaluate_quantile(3 * ONE // 4, LINEAR_COEFFICIENTS) == 3 * ONE // 2
        assert evaluate_quantile(ONE // 4, LINEAR_COEFFICIENTS) == ONE // 2

    def test_monotone_on_grid(self):
        grid = [ONE // 1000, ONE // 100, ONE // 10, ONE // 4, HALF, 3 * ONE // 4, 9 * ONE // 10]
        values = [evaluate_quantile(p, NINE_TERM_COEFFICIENTS) for p in grid]
        assert values == sorted(values)
        assert len(set(values)) == len(values)


class TestEvaluateQuantileDensity:
    """Тесты аналитической производной."""

    def test_logistic_center(self):
        """d logit / dp = 1/(p(1-p)) = 4 в p = 0.5."""
        assert evaluate_quantile_density(HALF, LOGISTIC_COEFFICIENTS) == 4 * ONE

    def test_linear(self):
        assert evaluate_quantile_density(ONE // 3, LINEAR_COEFFICIENTS) == 2 * ONE

    def test_positive_for_valid_set(self):
        for p in (ONE // 100, ONE // 4, HALF, 3 * ONE // 4, 99 * ONE // 100):
            assert evaluate_quantile_density(p, NINE_TERM_COEFFICIENTS) > 0

    @pytest.mark.parametrize("coefficients", [LOGISTIC_COEFFICIENTS, NINE_TERM_COEFFICIENTS])
    def test_matches_central_difference(self, coefficients):
        """q(p) ≈ (Q(p + h) - Q(p - h)) / 2h, h = 1e-6."""
        p = 3 * ONE // 10
        h = 10**12
        numeric = div(
            evaluate_quantile(p + h, coefficients) - evaluate_quantile(p - h, coefficients),
            2 * h,
        )
        analytic = evaluate_quantile_density(p, coefficients)
        assert abs(analytic - numeric) <= 10**9
