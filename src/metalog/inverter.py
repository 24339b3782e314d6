"""
Percentile Inverter — приближённый percentile по наблюдаемому значению

Обратная к metalog квантильной функции не имеет замкнутой формы, поэтому
p* находится итеративно из уравнения Q(p) = y*, где y* — значение,
переведённое в неограниченное пространство обратным bound transform
(один раз, до цикла).

Алгоритм: Newton–Raphson с защитой бисекцией.
- Старт: p_0 = 0.5, скобка [ε, 1 - ε]
- На каждой итерации знак невязки Q(p) - y* сужает скобку
- Шаг Newton p - (Q(p) - y*) / q(p) принимается, только если q(p) > 0,
  результат строго внутри скобки и шаг не больше половины
  предпредыдущего; иначе — бисекция скобки
- Стоп: is_close(Q(p), y*), т.е. |Q(p) - y*| <= max(abs_tol, rel_tol·max(|Q(p)|, |y*|))
  → CONVERGED
- Потолок итераций или остановка итерата на разрешении SD59x18 → NonConvergence

Состояния: INIT → ITERATING → {CONVERGED | NON_CONVERGENCE}.
Состояние не сохраняется между вызовами.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Final, Optional, Sequence

from src.core.domain.metalog_params import MetalogBoundParameters
from src.core.math.fixed_point import (
    HALF,
    ONE,
    SCALE,
    FixedScalar,
    div_toward_zero,
)
from src.core.math.numerical_safeguards import (
    clamp,
    is_close,
    validate_fixed,
    validate_in_range,
)
from src.metalog.basis import (
    MetalogError,
    evaluate_quantile,
    evaluate_quantile_density,
    validate_coefficients,
)
from src.metalog.bounds import invert_bound_transform

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Жёсткий потолок итераций (не retry): превышение → NonConvergence
MAX_ITERATIONS: Final[int] = 64

# Толерантность невязки |Q(p) - y*|: 1e-12 абсолютная и относительная
DEFAULT_ABSOLUTE_TOLERANCE: Final[FixedScalar] = FixedScalar(10**6)
DEFAULT_RELATIVE_TOLERANCE: Final[FixedScalar] = FixedScalar(10**6)

# Итерат удерживается в [ε, 1 - ε]: 1e-12
DEFAULT_PERCENTILE_EPSILON: Final[FixedScalar] = FixedScalar(10**6)

# Стартовая точка: центр симметрии неограниченного пространства
INITIAL_PERCENTILE: Final[FixedScalar] = HALF


# =============================================================================
# STATE / CONFIG / RESULT
# =============================================================================


class InversionState(str, Enum):
    """Состояние итерационного инвертора."""

    INIT = "INIT"
    ITERATING = "ITERATING"
    CONVERGED = "CONVERGED"
    NON_CONVERGENCE = "NON_CONVERGENCE"


@dataclass(frozen=True)
class InverterConfig:
    """Конфигурация инвертора.

    Все толерантности — SD59x18 (10^6 == 1e-12).
    """
    max_iterations: int = MAX_ITERATIONS
    absolute_tolerance: int = DEFAULT_ABSOLUTE_TOLERANCE
    relative_tolerance: int = DEFAULT_RELATIVE_TOLERANCE
    percentile_epsilon: int = DEFAULT_PERCENTILE_EPSILON
    initial_percentile: int = INITIAL_PERCENTILE

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        validate_in_range(self.absolute_tolerance, "absolute_tolerance", min_value=0)
        validate_in_range(self.relative_tolerance, "relative_tolerance", min_value=0)
        # ε ∈ (0, 0.5): скобка [ε, 1 - ε] непуста
        validate_in_range(self.percentile_epsilon, "percentile_epsilon", 1, HALF - 1)
        validate_in_range(
            self.initial_percentile,
            "initial_percentile",
            self.percentile_epsilon,
            ONE - self.percentile_epsilon,
        )


@dataclass(frozen=True)
class InversionResult:
    """Результат сошедшейся инверсии."""

    percentile: FixedScalar
    target: FixedScalar  # y* в неограниченном пространстве
    residual: FixedScalar  # Q(p*) - y*
    iterations: int
    newton_steps: int
    bisection_steps: int
    state: InversionState

    # Для отладки
    details: str


class NonConvergence(MetalogError, ArithmeticError):
    """
    Инвертор не достиг толерантности.

    Причины: исчерпан потолок итераций или итерат перестал двигаться на
    разрешении SD59x18 (например, y* вне значений Q на [ε, 1 - ε]).
    Приближённый результат не возвращается.
    """

    state = InversionState.NON_CONVERGENCE

    def __init__(
        self,
        message: str,
        *,
        last_percentile: int,
        residual: int,
        iterations: int,
    ):
        super().__init__(message)
        self.last_percentile = last_percentile
        self.residual = residual
        self.iterations = iterations


# =============================================================================
# INVERTER
# =============================================================================


class PercentileInverter:
    """Инвертор Q(p) = y* для фиксированного набора коэффициентов и носителя.

    Экземпляр хранит только неизменяемые входы; каждый вызов invert
    независим и не меняет состояние объекта.
    """

    def __init__(
        self,
        coefficients: Sequence[int],
        bound_parameters: Optional[MetalogBoundParameters] = None,
        config: Optional[InverterConfig] = None,
    ):
        """
        Args:
            coefficients: a_1..a_N (SD59x18)
            bound_parameters: носитель (default UNBOUNDED)
            config: параметры итераций
        """
        self.coefficients = validate_coefficients(coefficients)
        self.bound_parameters = bound_parameters or MetalogBoundParameters.unbounded()
        self.config = config or InverterConfig()

    def invert(self, quantile_value: int) -> InversionResult:
        """Поиск p ∈ (0, 1) такого, что BoundTransform(Q(p)) ≈ quantile_value.

        Args:
            quantile_value: наблюдаемое значение x (SD59x18)

        Returns:
            InversionResult в состоянии CONVERGED

        Raises:
            DomainError: x вне носителя bound_parameters
            NonConvergence: толерантность не достигнута
        """
        validate_fixed(quantile_value, "quantile_value")

        # INIT
        target = invert_bound_transform(quantile_value, self.bound_parameters)
        relative_tolerance = self.config.relative_tolerance
        absolute_tolerance = self.config.absolute_tolerance
        tolerance_text = f"max(abs={absolute_tolerance}, rel={relative_tolerance})"
        lower = self.config.percentile_epsilon
        upper = ONE - self.config.percentile_epsilon
        percentile = clamp(self.config.initial_percentile, lower, upper)

        step_before_last = upper - lower
        last_step = step_before_last
        newton_steps = 0
        bisection_steps = 0
        residual = 0
        upper_probed = False

        # ITERATING
        for iteration in range(1, self.config.max_iterations + 1):
            value = evaluate_quantile(percentile, self.coefficients)
            residual = value - target

            if is_close(value, target, relative_tolerance, absolute_tolerance):
                return InversionResult(
                    percentile=percentile,
                    target=target,
                    residual=FixedScalar(residual),
                    iterations=iteration,
                    newton_steps=newton_steps,
                    bisection_steps=bisection_steps,
                    state=InversionState.CONVERGED,
                    details=(
                        f"Converged after {iteration} iterations "
                        f"(newton={newton_steps}, bisection={bisection_steps}), "
                        f"|residual|={abs(residual)}"
                    ),
                )

            # Q возрастает: знак невязки указывает сторону корня
            if residual < 0:
                lower = percentile
            else:
                upper = percentile
            if percentile == upper:
                upper_probed = True

            density = evaluate_quantile_density(percentile, self.coefficients)
            candidate = self._newton_candidate(
                percentile, residual, density, lower, upper, step_before_last
            )
            step_before_last = last_step

            if candidate is None:
                candidate = FixedScalar(lower + (upper - lower) // 2)
                # Середина округляется вниз и не достигает верхнего конца скобки
                if candidate == percentile and not upper_probed:
                    candidate = FixedScalar(upper)
                bisection_steps += 1
            else:
                newton_steps += 1

            if candidate == percentile:
                raise NonConvergence(
                    f"Inverter stalled at percentile={percentile} after {iteration} "
                    f"iterations: bracket [{lower}, {upper}] at SD59x18 resolution, "
                    f"residual={residual}, tolerance={tolerance_text}",
                    last_percentile=percentile,
                    residual=residual,
                    iterations=iteration,
                )

            last_step = abs(candidate - percentile)
            percentile = candidate

        raise NonConvergence(
            f"Inverter reached max_iterations={self.config.max_iterations} "
            f"without convergence: percentile={percentile}, residual={residual}, "
            f"tolerance={tolerance_text}",
            last_percentile=percentile,
            residual=residual,
            iterations=self.config.max_iterations,
        )

    @staticmethod
    def _newton_candidate(
        percentile: int,
        residual: int,
        density: int,
        lower: int,
        upper: int,
        step_before_last: int,
    ) -> Optional[FixedScalar]:
        """Шаг Newton, если он допустим; иначе None (→ бисекция)."""
        if density <= 0:
            return None

        # Деление без проверки диапазона: недопустимо большой шаг
        # отбрасывается ниже, а не поднимает FixedPointOverflow
        step = div_toward_zero(residual * SCALE, density)
        candidate = percentile - step

        if not lower < candidate < upper:
            return None
        if 2 * abs(step) > step_before_last:
            return None

        return FixedScalar(candidate)


def invert_percentile(
    quantile_value: int,
    coefficients: Sequence[int],
    bound_parameters: Optional[MetalogBoundParameters] = None,
    config: Optional[InverterConfig] = None,
) -> InversionResult:
    """
    Инверсия с полной диагностикой.

    Удобная обёртка над PercentileInverter(...).invert(quantile_value).
    """
    return PercentileInverter(coefficients, bound_parameters, config).invert(quantile_value)
