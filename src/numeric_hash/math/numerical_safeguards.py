"""
Numerical Safeguards — защитные примитивы для агрегатов

Модуль отвечает за численную устойчивость операций NumericHash:
- Проверка конечности значений (NaN/Inf)
- Санитизация коэффициентов масштабирования
- Безопасный коэффициент нормализации (magnitude / total)
- Epsilon-сравнения float с учётом машинной точности

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Коэффициент нормализации всегда конечен (при total == 0 → 0.0)
2. Сравнения float выполняются только через is_close / is_zero
3. Все операции детерминированы и не имеют побочных эффектов
"""

import math
from numbers import Real
from typing import Final

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Относительная толерантность для сравнения float
# Используется в is_close и approx_equal агрегатов
EPS_FLOAT_COMPARE_REL: Final[float] = 1e-9

# Абсолютная толерантность для сравнения float
# Используется для значений, близких к нулю
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-12

# Коэффициент масштабирования, если нормализация невозможна (total == 0)
ZERO_TOTAL_SCALE_FACTOR: Final[float] = 0.0


# =============================================================================
# NaN/Inf САНИТИЗАЦИЯ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли значение конечным (не NaN, не Inf).

    Args:
        value: Проверяемое значение (int, float или Fraction)

    Returns:
        True если значение конечное
    """
    return math.isfinite(value)


def sanitize_float(value: float, fallback: float = 0.0) -> float:
    """
    Санитизация float: замена NaN/Inf на fallback значение.

    Args:
        value: Исходное значение
        fallback: Значение для замены NaN/Inf (default: 0.0)

    Returns:
        value если конечное, иначе fallback

    Examples:
        >>> sanitize_float(10.0)
        10.0
        >>> sanitize_float(float('nan'))
        0.0
        >>> sanitize_float(float('-inf'), fallback=-1.0)
        -1.0
    """
    if is_valid_float(value):
        return value
    return fallback


# =============================================================================
# КОЭФФИЦИЕНТ НОРМАЛИЗАЦИИ
# =============================================================================


def safe_scale_factor(
    magnitude: Real,
    total: Real,
    fallback: float = ZERO_TOTAL_SCALE_FACTOR,
) -> float:
    """
    Коэффициент масштабирования magnitude / total для нормализации.

    Деление выполняется во float. Нулевой total (или NaN/Inf в любом из
    аргументов) даёт fallback вместо бесконечности.

    Args:
        magnitude: Целевая сумма после нормализации
        total: Текущая сумма агрегата
        fallback: Коэффициент при невозможности деления (default: 0.0)

    Returns:
        Конечный коэффициент масштабирования

    Examples:
        >>> safe_scale_factor(120, 10)
        12.0
        >>> safe_scale_factor(1.0, 0)
        0.0
    """
    denominator = float(total)
    if denominator == 0.0:
        return fallback

    return sanitize_float(magnitude / denominator, fallback=fallback)


# =============================================================================
# EPSILON-СРАВНЕНИЯ FLOAT
# =============================================================================


def is_close(
    a: float,
    b: float,
    rel_tol: float = EPS_FLOAT_COMPARE_REL,
    abs_tol: float = EPS_FLOAT_COMPARE_ABS,
) -> bool:
    """
    Сравнение чисел с учётом машинной точности.

    Алгоритм:
        abs(a - b) <= max(rel_tol * max(abs(a), abs(b)), abs_tol)

    Examples:
        >>> is_close(0.1 + 0.2, 0.3)
        True
        >>> is_close(1.0, 1.1)
        False
    """
    return math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)


def is_zero(value: float, tol: float = EPS_FLOAT_COMPARE_ABS) -> bool:
    """
    Проверка, близко ли значение к нулю с учётом толерантности.

    Удобен как предикат для reject/select:
        >>> NumericHash({"a": 0.0, "b": 1}).reject(is_zero)  # doctest: +SKIP
        NumericHash({'b': 1})
    """
    return abs(value) <= tol
