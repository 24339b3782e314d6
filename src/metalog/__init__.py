"""Metalog engine — квантильная функция metalog и её приближённая инверсия.

Варианты носителя: UNBOUNDED, BOUNDED_BELOW, BOUNDED_ABOVE, BOUNDED.
Все значения — SD59x18 (int, масштабированный на 10^18).
"""

from .basis import (
    MAX_TERMS,
    MIN_TERMS,
    PERCENTILE_TOO_HIGH_MESSAGE,
    PERCENTILE_TOO_LOW_MESSAGE,
    BasisPoint,
    InvalidCoefficients,
    InvalidPercentile,
    MetalogError,
    evaluate_quantile,
    evaluate_quantile_density,
    term_shape,
    validate_coefficients,
    validate_percentile,
)
from .bounds import apply_bound_transform, invert_bound_transform
from .distribution import MetalogDistribution
from .inverter import (
    DEFAULT_ABSOLUTE_TOLERANCE,
    DEFAULT_PERCENTILE_EPSILON,
    DEFAULT_RELATIVE_TOLERANCE,
    MAX_ITERATIONS,
    InversionResult,
    InversionState,
    InverterConfig,
    NonConvergence,
    PercentileInverter,
    invert_percentile,
)
from .quantile import get_approximate_percentile, get_quantile

__all__ = [
    # Public operations
    "get_quantile",
    "get_approximate_percentile",
    "invert_percentile",
    # Basis
    "MIN_TERMS",
    "MAX_TERMS",
    "PERCENTILE_TOO_LOW_MESSAGE",
    "PERCENTILE_TOO_HIGH_MESSAGE",
    "BasisPoint",
    "evaluate_quantile",
    "evaluate_quantile_density",
    "term_shape",
    "validate_coefficients",
    "validate_percentile",
    # Bound transform
    "apply_bound_transform",
    "invert_bound_transform",
    # Inverter
    "MAX_ITERATIONS",
    "DEFAULT_ABSOLUTE_TOLERANCE",
    "DEFAULT_RELATIVE_TOLERANCE",
    "DEFAULT_PERCENTILE_EPSILON",
    "InverterConfig",
    "InversionResult",
    "InversionState",
    "PercentileInverter",
    # Model
    "MetalogDistribution",
    # Exceptions
    "MetalogError",
    "InvalidPercentile",
    "InvalidCoefficients",
    "NonConvergence",
]
