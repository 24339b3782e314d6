"""
Metalog Basis — квантильная функция metalog и её производная

Квантильная функция в неограниченном пространстве:

    logit(p)    = ln(p / (1 - p))
    centered(p) = p - 0.5
    Q(p)        = Σ_{k=1..N} a_k · basis_k(p)

Порядок базисных функций (Keelin):
    basis_1 = 1
    basis_2 = logit(p)
    basis_3 = centered(p) · logit(p)
    basis_4 = centered(p)
    k >= 5, нечётное: centered(p)^((k-1)/2)
    k >= 6, чётное:   centered(p)^(k/2 - 1) · logit(p)

Каждая базисная функция имеет вид centered^m · logit^j, j ∈ {0, 1}, поэтому
производная (quantile density) берётся аналитически по правилу произведения:

    d/dp centered^m          = m · centered^(m-1)
    d/dp centered^m · logit  = m · centered^(m-1) · logit + centered^m / (p(1-p))

Конечные разности не используются.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. percentile строго в (0, 1): иначе InvalidPercentile с точным текстом
   "percentile_ <= 0%" / "percentile_ >= 100%"
2. Индекс коэффициента определяет базисную функцию, N — набор термов
3. Количество термов ограничено [MIN_TERMS, MAX_TERMS]
"""

from dataclasses import dataclass
from typing import Final, Sequence

from src.core.math.fixed_point import (
    HALF,
    ONE,
    FixedPointOverflow,
    FixedScalar,
    ensure_in_range,
    inv,
    mul,
    powu,
)
from src.core.math.numerical_safeguards import validate_fixed
from src.core.math.transcendental import ln

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Минимальное и максимальное число термов metalog
MIN_TERMS: Final[int] = 2
MAX_TERMS: Final[int] = 16

# Тексты ошибок percentile — часть внешнего контракта
PERCENTILE_TOO_LOW_MESSAGE: Final[str] = "percentile_ <= 0%"
PERCENTILE_TOO_HIGH_MESSAGE: Final[str] = "percentile_ >= 100%"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class MetalogError(Exception):
    """Базовое исключение metalog engine."""


class InvalidPercentile(MetalogError, ValueError):
    """
    Percentile вне открытого интервала (0, 1).

    Текст сообщения совпадает с PERCENTILE_TOO_LOW_MESSAGE /
    PERCENTILE_TOO_HIGH_MESSAGE и используется вызывающим кодом.
    """


class InvalidCoefficients(MetalogError, ValueError):
    """Набор коэффициентов неподдерживаемой длины или с невалидным значением."""


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_percentile(percentile: int) -> FixedScalar:
    """
    Проверка percentile ∈ (0, 1) в единицах SD59x18.

    Raises:
        InvalidPercentile: percentile <= 0 или percentile >= ONE
        TypeError: если percentile не int
    """
    validate_fixed(percentile, "percentile")

    if percentile <= 0:
        raise InvalidPercentile(PERCENTILE_TOO_LOW_MESSAGE)
    if percentile >= ONE:
        raise InvalidPercentile(PERCENTILE_TOO_HIGH_MESSAGE)

    return FixedScalar(percentile)


def validate_coefficients(coefficients: Sequence[int]) -> tuple[FixedScalar, ...]:
    """
    Проверка набора коэффициентов a_1..a_N.

    Returns:
        Коэффициенты как неизменяемый tuple

    Raises:
        InvalidCoefficients: если N вне [MIN_TERMS, MAX_TERMS] или значение
            не является int в диапазоне SD59x18
    """
    terms = tuple(coefficients)

    if not MIN_TERMS <= len(terms) <= MAX_TERMS:
        raise InvalidCoefficients(
            f"metalog requires {MIN_TERMS}..{MAX_TERMS} coefficients, got {len(terms)}"
        )

    for index, value in enumerate(terms, start=1):
        try:
            validate_fixed(value, f"coefficient a_{index}")
        except (TypeError, FixedPointOverflow) as e:
            raise InvalidCoefficients(str(e)) from e

    return tuple(FixedScalar(value) for value in terms)


# =============================================================================
# БАЗИС
# =============================================================================


def term_shape(k: int) -> tuple[int, bool]:
    """
    Форма k-й базисной функции: (m, has_logit) для centered^m · logit^j.

    Examples:
        >>> term_shape(1)
        (0, False)
        >>> term_shape(3)
        (1, True)
        >>> term_shape(8)
        (3, True)
    """
    if k < 1:
        raise ValueError(f"basis index must be >= 1, got {k}")
    if k == 1:
        return (0, False)
    if k == 2:
        return (0, True)
    if k == 3:
        return (1, True)
    if k == 4:
        return (1, False)
    if k % 2 == 1:
        return ((k - 1) // 2, False)
    return (k // 2 - 1, True)


@dataclass(frozen=True)
class BasisPoint:
    """
    Значения, общие для всех базисных функций в точке p.

    logit = ln(p) - ln(1 - p): два логарифма от значений сетки SD59x18
    точнее, чем логарифм усечённого частного на краях интервала.
    logit_slope = d logit / dp = 1/p + 1/(1 - p).
    """

    percentile: FixedScalar
    centered: FixedScalar
    logit: FixedScalar
    logit_slope: FixedScalar

    @classmethod
    def at(cls, percentile: int) -> "BasisPoint":
        complement = ONE - percentile
        return cls(
            percentile=FixedScalar(percentile),
            centered=FixedScalar(percentile - HALF),
            logit=FixedScalar(ln(percentile) - ln(complement)),
            logit_slope=ensure_in_range(inv(percentile) + inv(complement), "logit_slope"),
        )


def basis_value(point: BasisPoint, k: int) -> FixedScalar:
    """Значение basis_k(p)."""
    power, has_logit = term_shape(k)
    value = powu(point.centered, power)
    if has_logit:
        value = mul(value, point.logit)
    return value


def basis_derivative(point: BasisPoint, k: int) -> FixedScalar:
    """Производная d basis_k / dp."""
    power, has_logit = term_shape(k)

    # d/dp centered^m = m · centered^(m-1)
    centered_slope = power * powu(point.centered, power - 1) if power > 0 else 0

    if not has_logit:
        return ensure_in_range(centered_slope, "basis_derivative")

    return ensure_in_range(
        mul(centered_slope, point.logit) + mul(powu(point.centered, power), point.logit_slope),
        "basis_derivative",
    )


# =============================================================================
# КВАНТИЛЬ И ПЛОТНОСТЬ
# =============================================================================


def evaluate_quantile(percentile: int, coefficients: Sequence[int]) -> FixedScalar:
    """
    Q(p) = Σ a_k · basis_k(p) в неограниченном пространстве.

    Вход не валидируется (см. validate_percentile / validate_coefficients):
    функция вызывается в цикле инвертора на уже проверенных значениях.

    Args:
        percentile: p ∈ (0, 1) в SD59x18
        coefficients: a_1..a_N

    Returns:
        Q(p) (SD59x18)
    """
    point = BasisPoint.at(percentile)
    total = 0
    for k, coefficient in enumerate(coefficients, start=1):
        total += mul(coefficient, basis_value(point, k))
    return ensure_in_range(total, "evaluate_quantile")


def evaluate_quantile_density(percentile: int, coefficients: Sequence[int]) -> FixedScalar:
    """
    q(p) = dQ/dp, аналитически по термам.

    Для валидного (монотонного) набора коэффициентов q(p) > 0.

    Args:
        percentile: p ∈ (0, 1) в SD59x18
        coefficients: a_1..a_N

    Returns:
        dQ/dp (SD59x18)
    """
    point = BasisPoint.at(percentile)
    total = 0
    for k, coefficient in enumerate(coefficients, start=1):
        total += mul(coefficient, basis_derivative(point, k))
    return ensure_in_range(total, "evaluate_quantile_density")
