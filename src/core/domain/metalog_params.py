"""
Metalog Params — параметры носителя metalog распределения

Immutable Pydantic модели для выбора варианта metalog:
- UNBOUNDED: носитель — вся вещественная прямая
- BOUNDED_BELOW: носитель (lower_bound, +inf)
- BOUNDED_ABOVE: носитель (-inf, upper_bound)
- BOUNDED: носитель (lower_bound, upper_bound)

Все значения — SD59x18 (int, масштабированный на 10^18). Границы, не
используемые выбранным вариантом, игнорируются (по умолчанию 0).
"""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, Field, model_validator

from src.core.math.fixed_point import MAX_SD59x18, MIN_SD59x18

# Строгий int в диапазоне SD59x18: float/bool/str не принимаются
SD59x18Int = Annotated[int, Field(strict=True, ge=MIN_SD59x18, le=MAX_SD59x18)]


# =============================================================================
# ENUMS
# =============================================================================


class MetalogBoundChoice(str, Enum):
    """Вариант носителя metalog распределения."""

    UNBOUNDED = "UNBOUNDED"
    BOUNDED_BELOW = "BOUNDED_BELOW"
    BOUNDED_ABOVE = "BOUNDED_ABOVE"
    BOUNDED = "BOUNDED"

    @property
    def uses_lower_bound(self) -> bool:
        return self in (MetalogBoundChoice.BOUNDED_BELOW, MetalogBoundChoice.BOUNDED)

    @property
    def uses_upper_bound(self) -> bool:
        return self in (MetalogBoundChoice.BOUNDED_ABOVE, MetalogBoundChoice.BOUNDED)


# =============================================================================
# MODELS
# =============================================================================


class MetalogBoundParameters(BaseModel):
    """
    Параметры носителя: вариант + границы.

    Инвариант: для BOUNDED обязательно lower_bound < upper_bound.
    Для остальных вариантов неиспользуемые границы игнорируются.

    Immutable модель (frozen=True): каждый вызов получает одно и то же
    значение, изменения создают новый экземпляр.
    """

    bound_choice: MetalogBoundChoice = Field(
        MetalogBoundChoice.UNBOUNDED, description="Вариант носителя"
    )
    lower_bound: SD59x18Int = Field(0, description="Нижняя граница (SD59x18)")
    upper_bound: SD59x18Int = Field(0, description="Верхняя граница (SD59x18)")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_bound_order(self) -> "MetalogBoundParameters":
        """Для BOUNDED нижняя граница строго меньше верхней."""
        if (
            self.bound_choice == MetalogBoundChoice.BOUNDED
            and self.lower_bound >= self.upper_bound
        ):
            raise ValueError(
                f"lower_bound {self.lower_bound} must be < upper_bound {self.upper_bound} "
                f"for BOUNDED metalog"
            )
        return self

    @classmethod
    def unbounded(cls) -> "MetalogBoundParameters":
        return cls(bound_choice=MetalogBoundChoice.UNBOUNDED)

    @classmethod
    def bounded_below(cls, lower_bound: int) -> "MetalogBoundParameters":
        return cls(bound_choice=MetalogBoundChoice.BOUNDED_BELOW, lower_bound=lower_bound)

    @classmethod
    def bounded_above(cls, upper_bound: int) -> "MetalogBoundParameters":
        return cls(bound_choice=MetalogBoundChoice.BOUNDED_ABOVE, upper_bound=upper_bound)

    @classmethod
    def bounded(cls, lower_bound: int, upper_bound: int) -> "MetalogBoundParameters":
        return cls(
            bound_choice=MetalogBoundChoice.BOUNDED,
            lower_bound=lower_bound,
            upper_bound=upper_bound,
        )

    def contains(self, value: int) -> bool:
        """
        Принадлежит ли value открытому носителю распределения.

        Examples:
            >>> MetalogBoundParameters.bounded_below(0).contains(1)
            True
            >>> MetalogBoundParameters.bounded(0, 10).contains(10)
            False
        """
        if self.bound_choice.uses_lower_bound and value <= self.lower_bound:
            return False
        if self.bound_choice.uses_upper_bound and value >= self.upper_bound:
            return False
        return True
