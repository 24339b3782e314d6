"""
Core math primitives, value types, and contracts.

This module contains the foundational building blocks of the metalog
engine: SD59x18 fixed-point arithmetic, immutable domain value types,
and JSON Schema contracts for coefficient sources.
"""
