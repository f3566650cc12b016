"""
NumericHashConfig — конфигурация агрегатов

Immutable Pydantic модель с параметрами по умолчанию для NumericHash.
Экземпляр конфигурации привязан к классу (NumericHash.config), поэтому
подкласс может подменить значения по умолчанию, не затрагивая базовый класс.
"""

from typing import Final, Union

from pydantic import BaseModel, Field

from numeric_hash.math.coercion import DEFAULT_INITIAL_VALUE
from numeric_hash.math.numerical_safeguards import (
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
)

# =============================================================================
# ЗНАЧЕНИЯ ПО УМОЛЧАНИЮ
# =============================================================================

# Целевые суммы для to_ratio / to_percent
RATIO_MAGNITUDE: Final[float] = 1.0
PERCENT_MAGNITUDE: Final[float] = 100.0


# =============================================================================
# CONFIG MODEL
# =============================================================================


class NumericHashConfig(BaseModel):
    """
    Параметры поведения NumericHash.

    Immutable модель (frozen=True): для другой конфигурации создаётся новый
    экземпляр и назначается атрибуту класса config.
    """

    default_initial_value: Union[int, float] = Field(
        DEFAULT_INITIAL_VALUE,
        description="Значение для отсутствующих ключей и None при коэрсии",
    )
    ratio_magnitude: float = Field(
        RATIO_MAGNITUDE, gt=0, description="Целевая сумма для to_ratio()"
    )
    percent_magnitude: float = Field(
        PERCENT_MAGNITUDE, gt=0, description="Целевая сумма для to_percent()"
    )
    float_rel_tol: float = Field(
        EPS_FLOAT_COMPARE_REL, ge=0, description="Относительная толерантность approx_equal"
    )
    float_abs_tol: float = Field(
        EPS_FLOAT_COMPARE_ABS, ge=0, description="Абсолютная толерантность approx_equal"
    )

    model_config = {"frozen": True}


DEFAULT_CONFIG: Final[NumericHashConfig] = NumericHashConfig()
