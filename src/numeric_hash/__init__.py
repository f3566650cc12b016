"""
numeric_hash — рекурсивный числовой агрегат.

dict, значения которого — числа или вложенные агрегаты того же типа, с
поэлементной арифметикой, нормализацией, фильтрацией и структурным merge.
"""

from numeric_hash.errors import (
    EmptyAggregateError,
    InvalidArgumentError,
    NumericHashError,
    StructureMismatchError,
    TypeConversionError,
)
from numeric_hash.math import (
    DEFAULT_INITIAL_VALUE,
    BinaryOperator,
    UnaryOperator,
    coerce_numeric,
    is_zero,
)
from numeric_hash.domain import DEFAULT_CONFIG, NumericHash, NumericHashConfig

__version__ = "0.1.0"

__all__ = [
    # Errors
    "EmptyAggregateError",
    "InvalidArgumentError",
    "NumericHashError",
    "StructureMismatchError",
    "TypeConversionError",
    # Math
    "DEFAULT_INITIAL_VALUE",
    "BinaryOperator",
    "UnaryOperator",
    "coerce_numeric",
    "is_zero",
    # Domain
    "DEFAULT_CONFIG",
    "NumericHash",
    "NumericHashConfig",
]
