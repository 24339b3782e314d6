"""
Metalog Distribution — неизменяемая модель распределения

Объединяет набор коэффициентов и параметры носителя в одну Pydantic модель
и делегирует вычисления публичным операциям (get_quantile,
get_approximate_percentile).

Внешний формат (contract metalog_distribution) передаёт SD59x18 как
десятичные строки масштабированного целого: JSON float не участвует.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from src.core.contracts.validators import validate_metalog_distribution
from src.core.domain.metalog_params import (
    MetalogBoundChoice,
    MetalogBoundParameters,
    SD59x18Int,
)
from src.core.math.fixed_point import FixedScalar
from src.metalog.basis import (
    MAX_TERMS,
    MIN_TERMS,
    evaluate_quantile_density,
    validate_percentile,
)
from src.metalog.inverter import InversionResult, InverterConfig, invert_percentile
from src.metalog.quantile import get_approximate_percentile, get_quantile

# Версия внешнего контракта
CONTRACT_SCHEMA_VERSION = "1"


class MetalogDistribution(BaseModel):
    """
    Metalog распределение: коэффициенты a_1..a_N + носитель.

    Immutable модель (frozen=True).
    """

    coefficients: tuple[SD59x18Int, ...] = Field(
        ...,
        min_length=MIN_TERMS,
        max_length=MAX_TERMS,
        description="Коэффициенты a_1..a_N (SD59x18)",
    )
    bound_parameters: MetalogBoundParameters = Field(
        default_factory=MetalogBoundParameters.unbounded,
        description="Носитель распределения",
    )

    model_config = {"frozen": True}

    @property
    def term_count(self) -> int:
        return len(self.coefficients)

    def quantile(self, percentile: int) -> FixedScalar:
        """Квантиль в точке percentile (см. get_quantile)."""
        return get_quantile(percentile, self.coefficients, self.bound_parameters)

    def quantile_density(self, percentile: int) -> FixedScalar:
        """dQ/dp в неограниченном пространстве."""
        return evaluate_quantile_density(validate_percentile(percentile), self.coefficients)

    def approximate_percentile(
        self, quantile_value: int, config: Optional[InverterConfig] = None
    ) -> FixedScalar:
        """Приближённый percentile (см. get_approximate_percentile)."""
        return get_approximate_percentile(
            quantile_value, self.coefficients, self.bound_parameters, config
        )

    def invert(
        self, quantile_value: int, config: Optional[InverterConfig] = None
    ) -> InversionResult:
        """Инверсия с диагностикой (итерации, невязка, число шагов)."""
        return invert_percentile(quantile_value, self.coefficients, self.bound_parameters, config)

    # =========================================================================
    # CONTRACT
    # =========================================================================

    @classmethod
    def from_contract(cls, data: Dict[str, Any]) -> "MetalogDistribution":
        """
        Построение модели из contract metalog_distribution.

        Raises:
            jsonschema.ValidationError: данные не соответствуют схеме
            pydantic.ValidationError: значения вне диапазона SD59x18 или
                нарушен инвариант носителя
        """
        validate_metalog_distribution(data)

        bounds = data.get("bounds", {})
        return cls(
            coefficients=tuple(int(value) for value in data["coefficients"]),
            bound_parameters=MetalogBoundParameters(
                bound_choice=MetalogBoundChoice(
                    bounds.get("bound_choice", MetalogBoundChoice.UNBOUNDED.value)
                ),
                lower_bound=int(bounds.get("lower_bound", "0")),
                upper_bound=int(bounds.get("upper_bound", "0")),
            ),
        )

    def to_contract(self) -> Dict[str, Any]:
        """Сериализация в contract metalog_distribution."""
        return {
            "schema_version": CONTRACT_SCHEMA_VERSION,
            "coefficients": [str(value) for value in self.coefficients],
            "bounds": {
                "bound_choice": self.bound_parameters.bound_choice.value,
                "lower_bound": str(self.bound_parameters.lower_bound),
                "upper_bound": str(self.bound_parameters.upper_bound),
            },
        }
