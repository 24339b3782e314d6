"""
Core math modules для fixed-point metalog

Арифметика SD59x18 и трансцендентные функции без float, с гарантией
детерминизма и ограниченного числа шагов.
"""

# Fixed Point (SD59x18)
from src.core.math.fixed_point import (
    DECIMALS,
    HALF,
    MAX_SD59x18,
    MIN_SD59x18,
    ONE,
    SCALE,
    ZERO,
    DivisionByZero,
    DomainError,
    FixedPointError,
    FixedPointOverflow,
    FixedScalar,
    abs_,
    div,
    from_decimal_str,
    from_int,
    inv,
    mul,
    powu,
    sqrt,
    to_decimal_str,
    to_int,
)

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    BPS_DENOMINATOR,
    EPS_COMPARE_ABS,
    EPS_COMPARE_REL,
    clamp,
    error_bps,
    is_close,
    is_within_error_bps,
    tolerance_for,
    validate_fixed,
    validate_in_range,
)

# Transcendental
from src.core.math.transcendental import (
    E,
    EXP2_MAX_INPUT,
    EXP2_MIN_INPUT,
    EXP_MAX_INPUT,
    EXP_MIN_INPUT,
    LN2,
    LOG2_E,
    exp,
    exp2,
    ln,
    log2,
    pow,
)

__all__ = [
    # Fixed Point — константы
    "DECIMALS",
    "SCALE",
    "ONE",
    "HALF",
    "ZERO",
    "MIN_SD59x18",
    "MAX_SD59x18",
    "FixedScalar",
    # Fixed Point — исключения
    "FixedPointError",
    "FixedPointOverflow",
    "DivisionByZero",
    "DomainError",
    # Fixed Point — арифметика
    "mul",
    "div",
    "inv",
    "powu",
    "sqrt",
    "abs_",
    # Fixed Point — конверсии
    "from_int",
    "to_int",
    "from_decimal_str",
    "to_decimal_str",
    # Numerical Safeguards
    "BPS_DENOMINATOR",
    "EPS_COMPARE_ABS",
    "EPS_COMPARE_REL",
    "clamp",
    "is_close",
    "error_bps",
    "is_within_error_bps",
    "tolerance_for",
    "validate_fixed",
    "validate_in_range",
    # Transcendental — константы
    "E",
    "LN2",
    "LOG2_E",
    "EXP_MAX_INPUT",
    "EXP_MIN_INPUT",
    "EXP2_MAX_INPUT",
    "EXP2_MIN_INPUT",
    # Transcendental — функции
    "exp",
    "exp2",
    "ln",
    "log2",
    "pow",
]
