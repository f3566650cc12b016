"""
Test suite for numeric_hash

Contains:
- tests/unit/          : Unit tests for individual modules
"""
