"""
Fixed Point — знаковая арифметика SD59x18

Знаковое число с фиксированной точкой: целое значение, интерпретируемое
как вещественное, умноженное на 10^18 (18 десятичных знаков дробной части).
Диапазон соответствует int256: [-2^255, 2^255 - 1].

Модуль обеспечивает:
- Базовые константы (SCALE, ONE, HALF) и границы диапазона
- Умножение/деление/обращение с округлением к нулю
- Целочисленную степень (exponentiation by squaring)
- Точные конверсии из/в int и десятичную строку (без float)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Любая операция либо возвращает значение в диапазоне, либо бросает
   типизированное исключение (FixedPointOverflow / DivisionByZero / DomainError)
2. Никакого silent wraparound
3. Float никогда не используется
4. Все операции детерминированы и воспроизводимы
"""

from math import isqrt
from typing import Final, NewType

# =============================================================================
# ТИП
# =============================================================================

# Значение SD59x18: int, масштабированный на 10^18
FixedScalar = NewType("FixedScalar", int)

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Количество десятичных знаков дробной части
DECIMALS: Final[int] = 18

# Масштаб: 1.0 == 10^18
SCALE: Final[int] = 10**DECIMALS

ONE: Final[FixedScalar] = FixedScalar(SCALE)
HALF: Final[FixedScalar] = FixedScalar(SCALE // 2)
ZERO: Final[FixedScalar] = FixedScalar(0)

# Границы диапазона (int256)
MIN_SD59x18: Final[FixedScalar] = FixedScalar(-(2**255))
MAX_SD59x18: Final[FixedScalar] = FixedScalar(2**255 - 1)


# =============================================================================
# EXCEPTIONS
# =============================================================================


class FixedPointError(ArithmeticError):
    """Базовое исключение арифметики с фиксированной точкой."""


class FixedPointOverflow(FixedPointError):
    """
    Результат (или вход) вне представимого диапазона SD59x18.

    Возникает вместо wraparound: вызывающий код никогда не получает
    значение, обрезанное по модулю 2^256.
    """


class DivisionByZero(FixedPointError, ZeroDivisionError):
    """Деление на ноль (div, inv, pow с отрицательной степенью нуля)."""


class DomainError(FixedPointError, ValueError):
    """
    Вход вне области определения.

    Используется для логарифма неположительного аргумента, отрицательного
    основания pow/sqrt и для значений вне носителя ограниченного metalog.
    """


# =============================================================================
# ПРОВЕРКИ ДИАПАЗОНА
# =============================================================================


def ensure_in_range(value: int, operation: str) -> FixedScalar:
    """Проверка результата на попадание в диапазон SD59x18."""
    if value < MIN_SD59x18 or value > MAX_SD59x18:
        raise FixedPointOverflow(f"{operation}: result {value} out of SD59x18 range")
    return FixedScalar(value)


def ensure_operand(value: int, name: str) -> None:
    # bool — подкласс int, но как SD59x18 не допускается
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int (SD59x18), got {type(value).__name__}")
    if value < MIN_SD59x18 or value > MAX_SD59x18:
        raise FixedPointOverflow(f"{name}={value} out of SD59x18 range")


def div_toward_zero(numerator: int, denominator: int) -> int:
    """Целочисленное деление с округлением к нулю (семантика int256)."""
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


# =============================================================================
# БАЗОВАЯ АРИФМЕТИКА
# =============================================================================


def mul(a: int, b: int) -> FixedScalar:
    """
    Умножение с фиксированной точкой.

    Полное произведение вычисляется без потери разрядов, затем делится на
    SCALE с округлением к нулю.

    Args:
        a: Первый множитель (SD59x18)
        b: Второй множитель (SD59x18)

    Returns:
        a * b / SCALE

    Raises:
        FixedPointOverflow: если результат (или MIN_SD59x18 на входе) вне диапазона

    Examples:
        >>> mul(ONE, ONE) == ONE
        True
        >>> mul(4 * ONE, HALF) == 2 * ONE
        True
        >>> mul(-ONE, -ONE) == ONE
        True
    """
    ensure_operand(a, "a")
    ensure_operand(b, "b")
    if a == MIN_SD59x18 or b == MIN_SD59x18:
        raise FixedPointOverflow("mul: MIN_SD59x18 operand cannot be negated")

    return ensure_in_range(div_toward_zero(a * b, SCALE), "mul")


def div(a: int, b: int) -> FixedScalar:
    """
    Деление с фиксированной точкой.

    Числитель масштабируется на SCALE до целочисленного деления, что
    сохраняет 18 знаков дробной части результата.

    Args:
        a: Делимое (SD59x18)
        b: Делитель (SD59x18)

    Returns:
        a * SCALE / b (округление к нулю)

    Raises:
        DivisionByZero: если b == 0
        FixedPointOverflow: если результат вне диапазона

    Examples:
        >>> div(ONE, 2 * ONE) == HALF
        True
        >>> div(4 * ONE, HALF) == 8 * ONE
        True
    """
    ensure_operand(a, "a")
    ensure_operand(b, "b")
    if b == 0:
        raise DivisionByZero("div: division by zero")
    if a == MIN_SD59x18 or b == MIN_SD59x18:
        raise FixedPointOverflow("div: MIN_SD59x18 operand cannot be negated")

    return ensure_in_range(div_toward_zero(a * SCALE, b), "div")


def inv(a: int) -> FixedScalar:
    """
    Обратное значение: 1 / a.

    Raises:
        DivisionByZero: если a == 0
    """
    ensure_operand(a, "a")
    if a == 0:
        raise DivisionByZero("inv: division by zero")

    return ensure_in_range(div_toward_zero(SCALE * SCALE, a), "inv")


def powu(base: int, exponent: int) -> FixedScalar:
    """
    Целочисленная неотрицательная степень (exponentiation by squaring).

    В отличие от pow допускает отрицательное основание: знак результата
    определяется чётностью степени. Каждое промежуточное умножение — mul,
    поэтому округление совпадает с последовательными mul.

    Args:
        base: Основание (SD59x18, может быть отрицательным)
        exponent: Степень (обычный int >= 0, не SD59x18)

    Returns:
        base ** exponent в SD59x18

    Raises:
        ValueError: если exponent < 0
        FixedPointOverflow: при переполнении

    Examples:
        >>> powu(-HALF, 2) == ONE // 4
        True
        >>> powu(7 * ONE, 0) == ONE
        True
    """
    ensure_operand(base, "base")
    if exponent < 0:
        raise ValueError(f"exponent must be non-negative, got {exponent}")

    result = ONE if exponent & 1 == 0 else FixedScalar(base)
    exponent >>= 1
    while exponent > 0:
        base = mul(base, base)
        if exponent & 1:
            result = mul(result, base)
        exponent >>= 1

    return result


def sqrt(x: int) -> FixedScalar:
    """
    Квадратный корень (floor) через целочисленный isqrt.

    Raises:
        DomainError: если x < 0
    """
    ensure_operand(x, "x")
    if x < 0:
        raise DomainError(f"sqrt: negative input {x}")

    return FixedScalar(isqrt(x * SCALE))


def abs_(x: int) -> FixedScalar:
    """Модуль значения; abs(MIN_SD59x18) не представим."""
    ensure_operand(x, "x")
    if x == MIN_SD59x18:
        raise FixedPointOverflow("abs: MIN_SD59x18 cannot be negated")
    return FixedScalar(abs(x))


# =============================================================================
# КОНВЕРСИИ
# =============================================================================


def from_int(n: int) -> FixedScalar:
    """Целое число → SD59x18 (3 → 3 * 10^18)."""
    return ensure_in_range(n * SCALE, "from_int")


def to_int(x: int) -> int:
    """SD59x18 → целое число с округлением к нулю."""
    return div_toward_zero(x, SCALE)


def from_decimal_str(text: str) -> FixedScalar:
    """
    Точный разбор десятичной строки в SD59x18.

    Знаки дробной части сверх 18 отбрасываются (округление к нулю).
    Float не используется на любом этапе.

    Examples:
        >>> from_decimal_str("0.5") == HALF
        True
        >>> from_decimal_str("-0.040340911286869100")
        -40340911286869100

    Raises:
        ValueError: если строка не является десятичным числом
    """
    raw = text.strip()
    negative = raw.startswith("-")
    if raw[:1] in ("-", "+"):
        raw = raw[1:]

    integer_part, _, fraction_part = raw.partition(".")
    if not integer_part:
        integer_part = "0"
    if not (integer_part.isdigit() and (fraction_part == "" or fraction_part.isdigit())):
        raise ValueError(f"Not a decimal number: {text!r}")

    fraction_part = fraction_part[:DECIMALS].ljust(DECIMALS, "0")
    value = int(integer_part) * SCALE + int(fraction_part)
    return ensure_in_range(-value if negative else value, "from_decimal_str")


def to_decimal_str(x: int) -> str:
    """
    SD59x18 → десятичная строка со всеми 18 знаками дробной части.

    Examples:
        >>> to_decimal_str(HALF)
        '0.500000000000000000'
    """
    sign = "-" if x < 0 else ""
    integer_part, fraction_part = divmod(abs(x), SCALE)
    return f"{sign}{integer_part}.{fraction_part:0{DECIMALS}d}"
