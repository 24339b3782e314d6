"""
Numerical Safeguards — проверки и сравнения для SD59x18

Модуль обеспечивает:
- Валидацию значений SD59x18 (тип, диапазон, интервалы)
- Ограничение значения в диапазоне (clamp)
- Сравнения с абсолютной/относительной толерантностью без float
- Проверку относительной ошибки в базисных пунктах (bps)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все толерантности — целые SD59x18, float не используется
2. Все операции детерминированы и воспроизводимы
"""

from typing import Final

from src.core.math.fixed_point import (
    SCALE,
    FixedScalar,
    ensure_operand,
)

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Абсолютная толерантность сравнений по умолчанию: 1e-12
EPS_COMPARE_ABS: Final[FixedScalar] = FixedScalar(10**6)

# Относительная толерантность сравнений по умолчанию: 1e-12
EPS_COMPARE_REL: Final[FixedScalar] = FixedScalar(10**6)

# 1 bps = 1 / 10_000
BPS_DENOMINATOR: Final[int] = 10_000


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_fixed(value: int, name: str) -> FixedScalar:
    """
    Валидация значения SD59x18 на входе публичной операции.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Returns:
        value как FixedScalar

    Raises:
        TypeError: если value не int (bool и float отвергаются)
        FixedPointOverflow: если value вне диапазона SD59x18
    """
    ensure_operand(value, name)
    return FixedScalar(value)


def validate_in_range(
    value: int,
    name: str,
    min_value: int | None = None,
    max_value: int | None = None,
) -> None:
    """
    Валидация, что значение в заданном диапазоне (включительно).

    Raises:
        ValueError: если value вне диапазона
    """
    validate_fixed(value, name)

    if min_value is not None and value < min_value:
        raise ValueError(f"{name} must be >= {min_value}, got {value}")

    if max_value is not None and value > max_value:
        raise ValueError(f"{name} must be <= {max_value}, got {value}")


# =============================================================================
# УТИЛИТЫ
# =============================================================================


def clamp(
    value: int,
    min_value: int | None = None,
    max_value: int | None = None,
) -> FixedScalar:
    """
    Ограничение значения в заданном диапазоне.

    Examples:
        >>> clamp(5, 0, 10)
        5
        >>> clamp(-1, 0, 10)
        0
        >>> clamp(15, 0, 10)
        10
    """
    result = value

    if min_value is not None:
        result = max(result, min_value)

    if max_value is not None:
        result = min(result, max_value)

    return FixedScalar(result)


# =============================================================================
# СРАВНЕНИЯ С ТОЛЕРАНТНОСТЬЮ
# =============================================================================


def tolerance_for(
    reference: int,
    rel_tol: int = EPS_COMPARE_REL,
    abs_tol: int = EPS_COMPARE_ABS,
) -> FixedScalar:
    """
    Эффективная толерантность: max(abs_tol, rel_tol * |reference|).

    Args:
        reference: Опорное значение (SD59x18)
        rel_tol: Относительная толерантность (SD59x18, 10^6 == 1e-12)
        abs_tol: Абсолютная толерантность (SD59x18)
    """
    return FixedScalar(max(abs_tol, abs(reference) * rel_tol // SCALE))


def is_close(
    a: int,
    b: int,
    rel_tol: int = EPS_COMPARE_REL,
    abs_tol: int = EPS_COMPARE_ABS,
) -> bool:
    """
    Сравнение SD59x18 с учётом толерантности.

    Алгоритм (как math.isclose, но в целых):
        |a - b| <= max(rel_tol * max(|a|, |b|), abs_tol)

    Examples:
        >>> is_close(10**18, 10**18 + 1)
        True
        >>> is_close(10**18, 11 * 10**17)
        False
    """
    return abs(a - b) <= tolerance_for(max(abs(a), abs(b)), rel_tol, abs_tol)


def error_bps(actual: int, expected: int) -> int:
    """
    Относительная ошибка в целых базисных пунктах (округление вниз).

    Raises:
        ValueError: если expected == 0, а actual отличается

    Examples:
        >>> error_bps(10**18 + 10**15, 10**18)
        10
        >>> error_bps(5, 5)
        0
    """
    difference = abs(expected - actual)
    if difference == 0:
        return 0
    if expected == 0:
        raise ValueError(f"relative error undefined for expected=0, actual={actual}")

    return difference * BPS_DENOMINATOR // abs(expected)


def is_within_error_bps(actual: int, expected: int, tolerated_error_bps: int = 1) -> bool:
    """
    Проверка относительной ошибки в базисных пунктах.

    |expected - actual| / |expected| <= tolerated_error_bps / 10_000.
    Совпадающие значения принимаются всегда (в том числе expected == 0).

    Args:
        actual: Полученное значение (SD59x18)
        expected: Эталонное значение (SD59x18)
        tolerated_error_bps: Допустимая ошибка в bps (> 0)

    Raises:
        ValueError: если tolerated_error_bps <= 0

    Examples:
        >>> is_within_error_bps(2718281828459045235, 2718281828459045000)
        True
        >>> is_within_error_bps(10**18, 10**18 + 10**15)
        False
    """
    if tolerated_error_bps <= 0:
        raise ValueError(f"tolerated_error_bps must be positive, got {tolerated_error_bps}")

    difference = abs(expected - actual)
    if difference == 0:
        return True

    return abs(expected) * tolerated_error_bps >= BPS_DENOMINATOR * difference
