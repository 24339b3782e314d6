"""
Quantile — публичные операции metalog engine

- get_quantile(p, coefficients, bounds) = BoundTransform(Q(p))
- get_approximate_percentile(x, coefficients, bounds) = PercentileInverter(x)

Обе операции — чистые функции: без состояния, без побочных эффектов,
с ограниченным числом шагов.
"""

from typing import Optional, Sequence

from src.core.domain.metalog_params import MetalogBoundParameters
from src.core.math.fixed_point import FixedScalar
from src.metalog.basis import (
    evaluate_quantile,
    validate_coefficients,
    validate_percentile,
)
from src.metalog.bounds import apply_bound_transform
from src.metalog.inverter import InverterConfig, invert_percentile


def get_quantile(
    percentile: int,
    coefficients: Sequence[int],
    bound_parameters: Optional[MetalogBoundParameters] = None,
) -> FixedScalar:
    """
    Квантиль metalog распределения.

    Args:
        percentile: p ∈ (0, 1) в SD59x18
        coefficients: a_1..a_N (SD59x18)
        bound_parameters: носитель (default UNBOUNDED)

    Returns:
        Значение в носителе распределения (SD59x18)

    Raises:
        InvalidPercentile: "percentile_ <= 0%" / "percentile_ >= 100%"
        InvalidCoefficients: неподдерживаемый набор коэффициентов
        FixedPointOverflow: переполнение при вычислении
    """
    percentile = validate_percentile(percentile)
    terms = validate_coefficients(coefficients)
    bounds = bound_parameters or MetalogBoundParameters.unbounded()

    return apply_bound_transform(evaluate_quantile(percentile, terms), bounds)


def get_approximate_percentile(
    quantile_value: int,
    coefficients: Sequence[int],
    bound_parameters: Optional[MetalogBoundParameters] = None,
    config: Optional[InverterConfig] = None,
) -> FixedScalar:
    """
    Приближённый percentile наблюдаемого значения.

    Args:
        quantile_value: x в носителе распределения (SD59x18)
        coefficients: a_1..a_N (SD59x18)
        bound_parameters: носитель (default UNBOUNDED)
        config: параметры инвертора (default InverterConfig())

    Returns:
        p ∈ (0, 1) в SD59x18

    Raises:
        DomainError: x вне носителя
        NonConvergence: толерантность не достигнута за потолок итераций
    """
    return invert_percentile(quantile_value, coefficients, bound_parameters, config).percentile
