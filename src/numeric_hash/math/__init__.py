"""
Math modules для numeric_hash

Численные примитивы агрегата: приведение значений к числу, перечисление
операторов с диспетчеризацией и защитные функции для float.
"""

# Numerical Safeguards
from numeric_hash.math.numerical_safeguards import (
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    ZERO_TOTAL_SCALE_FACTOR,
    is_close,
    is_valid_float,
    is_zero,
    safe_scale_factor,
    sanitize_float,
)

# Coercion
from numeric_hash.math.coercion import (
    DEFAULT_INITIAL_VALUE,
    NumericAggregate,
    coerce_numeric,
    is_numeric,
)

# Operators
from numeric_hash.math.operators import (
    BinaryOperator,
    UnaryOperator,
    apply_binary,
    apply_unary,
)

__all__ = [
    # Numerical Safeguards — Epsilon constants
    "EPS_FLOAT_COMPARE_ABS",
    "EPS_FLOAT_COMPARE_REL",
    "ZERO_TOTAL_SCALE_FACTOR",
    # Numerical Safeguards — Functions
    "is_close",
    "is_valid_float",
    "is_zero",
    "safe_scale_factor",
    "sanitize_float",
    # Coercion
    "DEFAULT_INITIAL_VALUE",
    "NumericAggregate",
    "coerce_numeric",
    "is_numeric",
    # Operators — Types
    "BinaryOperator",
    "UnaryOperator",
    # Operators — Functions
    "apply_binary",
    "apply_unary",
]
