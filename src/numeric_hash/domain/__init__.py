"""
Domain model: рекурсивный числовой агрегат NumericHash и его конфигурация.
"""

from numeric_hash.domain.config import (
    DEFAULT_CONFIG,
    PERCENT_MAGNITUDE,
    RATIO_MAGNITUDE,
    NumericHashConfig,
)
from numeric_hash.domain.numeric_hash import NumericHash
from numeric_hash.domain.structure import (
    find_structure_mismatch,
    is_compatible_structure,
)

__all__ = [
    # Config
    "DEFAULT_CONFIG",
    "PERCENT_MAGNITUDE",
    "RATIO_MAGNITUDE",
    "NumericHashConfig",
    # Aggregate
    "NumericHash",
    # Structure
    "find_structure_mismatch",
    "is_compatible_structure",
]
