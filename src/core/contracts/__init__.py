"""
Contract Validation Module

Модуль для валидации JSON контрактов metalog engine.
"""

from .validators import (
    ContractValidator,
    MetalogDistributionValidator,
    SchemaLoader,
    validate_metalog_distribution,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "MetalogDistributionValidator",
    # Functions
    "validate_metalog_distribution",
]
