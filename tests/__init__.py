"""
Test suite for fixed-metalog

Contains:
- tests/unit/          : Unit tests for individual modules
"""
