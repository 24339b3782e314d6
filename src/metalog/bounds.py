"""
Bound Transform — отображение неограниченного квантиля в носитель

Прямое преобразование y → x и обратное x → y:

    UNBOUNDED:      x = y                                 y = x
    BOUNDED_BELOW:  x = lo + e^y                          y = ln(x - lo),       x > lo
    BOUNDED_ABOVE:  x = hi - e^(-y)                       y = -ln(hi - x),      x < hi
    BOUNDED:        x = (lo + hi·e^y) / (1 + e^y)         y = ln((x - lo) / (hi - x)), lo < x < hi

Для BOUNDED прямое преобразование считается через t = e^(-|y|) ∈ (0, 1]:
    y >= 0: x = (lo·t + hi) / (1 + t)
    y <  0: x = (lo + hi·t) / (1 + t)
что алгебраически тождественно формуле выше, но не переполняется при
больших |y|.

Ошибка round-trip ограничена только ошибкой exp/ln.
"""

from src.core.domain.metalog_params import MetalogBoundChoice, MetalogBoundParameters
from src.core.math.fixed_point import (
    ONE,
    DomainError,
    FixedScalar,
    div,
    ensure_in_range,
    mul,
)
from src.core.math.numerical_safeguards import validate_fixed
from src.core.math.transcendental import exp, ln


def apply_bound_transform(value: int, bound_parameters: MetalogBoundParameters) -> FixedScalar:
    """
    Прямое преобразование: неограниченный квантиль → значение в носителе.

    Args:
        value: y = Q(p) в неограниченном пространстве (SD59x18)
        bound_parameters: Вариант носителя и границы

    Returns:
        x в носителе распределения

    Raises:
        FixedPointOverflow: если e^y (или e^-y) вне диапазона

    Examples:
        >>> apply_bound_transform(0, MetalogBoundParameters.bounded_below(0)) == ONE
        True
    """
    validate_fixed(value, "value")
    choice = bound_parameters.bound_choice
    lower = bound_parameters.lower_bound
    upper = bound_parameters.upper_bound

    if choice == MetalogBoundChoice.UNBOUNDED:
        return FixedScalar(value)

    if choice == MetalogBoundChoice.BOUNDED_BELOW:
        return ensure_in_range(lower + exp(value), "bounded_below")

    if choice == MetalogBoundChoice.BOUNDED_ABOVE:
        return ensure_in_range(upper - exp(-value), "bounded_above")

    decay = exp(-abs(value))
    if value >= 0:
        numerator = mul(lower, decay) + upper
    else:
        numerator = lower + mul(upper, decay)
    return div(ensure_in_range(numerator, "bounded"), ONE + decay)


def invert_bound_transform(value: int, bound_parameters: MetalogBoundParameters) -> FixedScalar:
    """
    Обратное преобразование: значение в носителе → неограниченный квантиль.

    Args:
        value: x в носителе распределения (SD59x18)
        bound_parameters: Вариант носителя и границы

    Returns:
        y такой, что apply_bound_transform(y) ≈ x

    Raises:
        DomainError: если x вне открытого носителя
    """
    validate_fixed(value, "value")
    choice = bound_parameters.bound_choice
    lower = bound_parameters.lower_bound
    upper = bound_parameters.upper_bound

    if not bound_parameters.contains(value):
        raise DomainError(
            f"quantile value {value} outside {choice.value} support "
            f"(lower_bound={lower}, upper_bound={upper})"
        )

    if choice == MetalogBoundChoice.UNBOUNDED:
        return FixedScalar(value)

    if choice == MetalogBoundChoice.BOUNDED_BELOW:
        return ln(ensure_in_range(value - lower, "bounded_below"))

    if choice == MetalogBoundChoice.BOUNDED_ABOVE:
        return FixedScalar(-ln(ensure_in_range(upper - value, "bounded_above")))

    # ln((x - lo) / (hi - x)) как разность логарифмов, без усечения частного
    return FixedScalar(
        ln(ensure_in_range(value - lower, "bounded"))
        - ln(ensure_in_range(upper - value, "bounded"))
    )
