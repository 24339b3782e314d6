"""
Domain models and value objects.

Contains immutable value types shared by the metalog engine.
"""

from src.core.domain.metalog_params import (
    MetalogBoundChoice,
    MetalogBoundParameters,
    SD59x18Int,
)

__all__ = [
    "MetalogBoundChoice",
    "MetalogBoundParameters",
    "SD59x18Int",
]
