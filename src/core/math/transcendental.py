"""
Transcendental — exp / ln / pow на SD59x18 без float

Все функции построены на бинарной «лестнице» констант 2^(1/2^k):
- exp2(x): целая часть x — сдвиг, дробная часть раскладывается в двоичную
  дробь, и для каждого единичного бита результат домножается на
  соответствующую ступень лестницы
- log2(x): нормализация мантиссы в [1, 2), затем для каждой ступени
  (по убыванию) проверка y >= 2^(1/2^k); при успехе y делится на ступень,
  а в дробную часть log2 записывается бит 2^-k
- exp(x) = exp2(x * log2(e)), ln(x) = log2(x) * ln(2)
- pow(b, e) = exp2(e * log2(b)) — та же exp/ln композиция в основании 2,
  точная для степеней двойки

Лестница вычисляется один раз при импорте из целочисленных квадратных
корней (isqrt), поэтому таблица детерминирована и не зависит от платформы.

Промежуточная точность: мантисса Q128, дробная часть показателя — 64 бита.
Этого достаточно для относительной ошибки много ниже 1 bps.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. exp(0) == ONE, ln(ONE) == 0 точно
2. Фиксированное число итераций (длина лестницы), без циклов "до сходимости"
3. Переполнение → FixedPointOverflow, ln(x <= 0) → DomainError
"""

from math import isqrt
from typing import Final

from src.core.math.fixed_point import (
    ONE,
    SCALE,
    ZERO,
    DivisionByZero,
    DomainError,
    FixedPointOverflow,
    FixedScalar,
    div_toward_zero,
    ensure_in_range,
    ensure_operand,
    inv,
)

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Точность внутренней мантиссы (Q128)
_MANTISSA_BITS: Final[int] = 128

# Количество ступеней лестницы = бит дробной части показателя
LADDER_RUNGS: Final[int] = 64

# log2(e) и ln(2) с 36 знаками (масштаб 10^36)
_CONSTANT_SCALE: Final[int] = 10**36
LOG2_E_36: Final[int] = 1_442695040888963407359924681001892137
LN2_36: Final[int] = 693147180559945309417232121458176568

# log2(e) и ln(2) в SD59x18
LOG2_E: Final[FixedScalar] = FixedScalar(LOG2_E_36 // 10**18)
LN2: Final[FixedScalar] = FixedScalar(LN2_36 // 10**18)

# e в SD59x18
E: Final[FixedScalar] = FixedScalar(2_718281828459045235)

# exp2(x >= 192) не помещается в диапазон
EXP2_MAX_INPUT: Final[FixedScalar] = FixedScalar(192 * SCALE)

# exp2(x < log2(10^-18)) == 0 в SD59x18
EXP2_MIN_INPUT: Final[FixedScalar] = FixedScalar(-59_794705707972522261)

# exp(x) == exp2(x * log2(e)): те же границы, пересчитанные через ln(2)
EXP_MAX_INPUT: Final[FixedScalar] = FixedScalar(133_084258667509499441)
EXP_MIN_INPUT: Final[FixedScalar] = FixedScalar(-41_446531673892822322)


def _build_ladder() -> tuple[int, ...]:
    """Ступени 2^(1/2^k), k = 1..LADDER_RUNGS, в формате Q128."""
    rungs = []
    rung = 2 << _MANTISSA_BITS
    for _ in range(LADDER_RUNGS):
        rung = isqrt(rung << _MANTISSA_BITS)
        rungs.append(rung)
    return tuple(rungs)


_LADDER: Final[tuple[int, ...]] = _build_ladder()


# =============================================================================
# ВНУТРЕННИЕ ПРИМИТИВЫ
# =============================================================================


def _binary_power(numerator: int, denominator: int) -> FixedScalar:
    """2^(numerator / denominator) для numerator >= 0."""
    integer_part, remainder = divmod(numerator, denominator)
    fraction_bits = (remainder << LADDER_RUNGS) // denominator

    result = 1 << _MANTISSA_BITS
    for k, rung in enumerate(_LADDER):
        if fraction_bits & (1 << (LADDER_RUNGS - 1 - k)):
            result = (result * rung) >> _MANTISSA_BITS

    return ensure_in_range(((result * SCALE) << integer_part) >> _MANTISSA_BITS, "exp2")


def _exp2_ratio(numerator: int, denominator: int) -> FixedScalar:
    """
    2^(numerator / denominator) с проверкой границ.

    Отрицательные показатели: 2^-t = 1 / 2^t; ниже EXP2_MIN_INPUT
    результат меньше 10^-18 и округляется до нуля.
    """
    if numerator < 0:
        if numerator * SCALE < EXP2_MIN_INPUT * denominator:
            return ZERO
        return inv(_binary_power(-numerator, denominator))

    if numerator * SCALE >= EXP2_MAX_INPUT * denominator:
        raise FixedPointOverflow(
            f"exp2: exponent {numerator}/{denominator} >= {EXP2_MAX_INPUT} (scaled)"
        )
    return _binary_power(numerator, denominator)


def _log2_q64(x: int) -> int:
    """
    log2(x) в формате Q64 (знаковое целое) для x > 0.

    Мантисса нормализуется в [1, 2) в Q128; затем для каждой ступени
    лестницы, по убыванию, проверяется y >= 2^(1/2^k).
    """
    mantissa = (x << _MANTISSA_BITS) // SCALE
    integer_part = mantissa.bit_length() - 1 - _MANTISSA_BITS

    if integer_part >= 0:
        y = mantissa >> integer_part
    else:
        y = mantissa << -integer_part

    fraction_bits = 0
    for k, rung in enumerate(_LADDER):
        if y >= rung:
            y = (y << _MANTISSA_BITS) // rung
            fraction_bits |= 1 << (LADDER_RUNGS - 1 - k)

    return (integer_part << LADDER_RUNGS) + fraction_bits


# =============================================================================
# ЭКСПОНЕНТА
# =============================================================================


def exp2(x: int) -> FixedScalar:
    """
    Двоичная экспонента 2^x.

    Args:
        x: Показатель (SD59x18)

    Returns:
        2^x; для x < EXP2_MIN_INPUT — 0

    Raises:
        FixedPointOverflow: если x >= EXP2_MAX_INPUT

    Examples:
        >>> exp2(3 * ONE) == 8 * ONE
        True
    """
    ensure_operand(x, "x")
    return _exp2_ratio(x, SCALE)


def exp(x: int) -> FixedScalar:
    """
    Натуральная экспонента e^x = 2^(x * log2(e)).

    Произведение x * log2(e) берётся с 36 знаками, поэтому усечение
    log2(e) до 18 знаков не вносит ошибку в результат.

    Args:
        x: Показатель (SD59x18)

    Returns:
        e^x; для x < EXP_MIN_INPUT результат меньше 10^-18 и равен 0

    Raises:
        FixedPointOverflow: если x >= EXP_MAX_INPUT

    Examples:
        >>> exp(0) == ONE
        True
    """
    ensure_operand(x, "x")
    if x < EXP_MIN_INPUT:
        return ZERO
    if x >= EXP_MAX_INPUT:
        raise FixedPointOverflow(f"exp: x={x} >= EXP_MAX_INPUT={EXP_MAX_INPUT}")

    return _exp2_ratio(x * LOG2_E_36, SCALE * _CONSTANT_SCALE)


# =============================================================================
# ЛОГАРИФМ
# =============================================================================


def log2(x: int) -> FixedScalar:
    """
    Двоичный логарифм.

    Raises:
        DomainError: если x <= 0

    Examples:
        >>> log2(8 * ONE) == 3 * ONE
        True
    """
    ensure_operand(x, "x")
    if x <= 0:
        raise DomainError(f"log2: non-positive input {x}")

    return FixedScalar(div_toward_zero(_log2_q64(x) * SCALE, 1 << LADDER_RUNGS))


def ln(x: int) -> FixedScalar:
    """
    Натуральный логарифм ln(x) = log2(x) * ln(2).

    Args:
        x: Аргумент (SD59x18), строго положительный

    Returns:
        ln(x); ln(ONE) == 0 точно

    Raises:
        DomainError: если x <= 0

    Examples:
        >>> ln(ONE)
        0
        >>> ln(8 * ONE)
        2079441541679835928
    """
    ensure_operand(x, "x")
    if x <= 0:
        raise DomainError(f"ln: non-positive input {x}")
    if x == ONE:
        return ZERO

    return FixedScalar(
        div_toward_zero(_log2_q64(x) * LN2_36, (1 << LADDER_RUNGS) * 10**18)
    )


# =============================================================================
# СТЕПЕНЬ
# =============================================================================


def pow(base: int, exponent: int) -> FixedScalar:
    """
    Степень с дробным показателем: base^exponent = 2^(exponent * log2(base)).

    Отрицательный показатель: pow(b, -e) = inv(pow(b, e)).
    Для отрицательного основания используйте powu (целая степень).

    Args:
        base: Основание (SD59x18, >= 0)
        exponent: Показатель (SD59x18, любой знак)

    Returns:
        base^exponent

    Raises:
        DomainError: если base < 0
        DivisionByZero: если base == 0 и exponent < 0
        FixedPointOverflow: при переполнении

    Examples:
        >>> pow(2 * ONE, 3 * ONE) == 8 * ONE
        True
        >>> pow(2 * ONE, -2 * ONE) == ONE // 4
        True
    """
    ensure_operand(base, "base")
    ensure_operand(exponent, "exponent")

    if base == 0:
        if exponent == 0:
            return ONE
        if exponent > 0:
            return ZERO
        raise DivisionByZero("pow: zero base with negative exponent")
    if base < 0:
        raise DomainError(f"pow: negative base {base}, use powu for integer exponents")

    if exponent < 0:
        return inv(pow(base, -exponent))
    if exponent == 0 or base == ONE:
        return ONE

    return _exp2_ratio(_log2_q64(base) * exponent, (1 << LADDER_RUNGS) * SCALE)
