"""
Operators — перечисление операторов и численная диспетчеризация

Каждый оператор агрегата задан тегом enum. Одна функция на арность
(apply_binary / apply_unary) отображает тег на замкнутую численную операцию
над двумя (одним) числами.

Деление/остаток на ноль ведут себя как нативная арифметика Python:
ZeroDivisionError для int, float и Fraction. Ошибки не оборачиваются.
"""

import math
import operator
from enum import Enum
from fractions import Fraction
from numbers import Rational, Real
from typing import Callable, Dict, Final, Optional


# =============================================================================
# ENUMS
# =============================================================================


class BinaryOperator(str, Enum):
    """Бинарные операторы, применяемые поэлементно."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    TRUEDIV = "/"
    MOD = "%"
    POW = "**"
    AND = "&"
    OR = "|"
    XOR = "^"
    DIV = "div"
    MODULO = "modulo"
    QUO = "quo"
    FDIV = "fdiv"
    REMAINDER = "remainder"


class UnaryOperator(str, Enum):
    """Унарные операторы, применяемые к каждому листу."""

    POS = "+@"
    NEG = "-@"
    INVERT = "~@"
    ABS = "abs"
    CEIL = "ceil"
    FLOOR = "floor"
    ROUND = "round"
    TRUNCATE = "truncate"


# =============================================================================
# ЧИСЛЕННЫЕ РЕАЛИЗАЦИИ
# =============================================================================


def _div(a: Real, b: Real) -> int:
    # Целочисленное деление: результат всегда int (7.5 div 2 → 3)
    return math.floor(a // b)


def _quo(a: Real, b: Real) -> Real:
    # Точное частное: для рациональных операндов результат Fraction
    if isinstance(a, Rational) and isinstance(b, Rational):
        return Fraction(a) / Fraction(b)
    return a / b


def _fdiv(a: Real, b: Real) -> float:
    return float(a) / b


def _remainder(a: Real, b: Real) -> Real:
    # Остаток со знаком делимого (в отличие от %, где знак делителя)
    result = abs(a) % abs(b)
    return -result if a < 0 else result


_BINARY_DISPATCH: Final[Dict[BinaryOperator, Callable[[Real, Real], Real]]] = {
    BinaryOperator.ADD: operator.add,
    BinaryOperator.SUB: operator.sub,
    BinaryOperator.MUL: operator.mul,
    BinaryOperator.TRUEDIV: operator.truediv,
    BinaryOperator.MOD: operator.mod,
    BinaryOperator.POW: operator.pow,
    BinaryOperator.AND: operator.and_,
    BinaryOperator.OR: operator.or_,
    BinaryOperator.XOR: operator.xor,
    BinaryOperator.DIV: _div,
    BinaryOperator.MODULO: operator.mod,
    BinaryOperator.QUO: _quo,
    BinaryOperator.FDIV: _fdiv,
    BinaryOperator.REMAINDER: _remainder,
}


_UNARY_DISPATCH: Final[Dict[UnaryOperator, Callable[[Real], Real]]] = {
    UnaryOperator.POS: operator.pos,
    UnaryOperator.NEG: operator.neg,
    UnaryOperator.INVERT: operator.invert,
    UnaryOperator.ABS: abs,
    UnaryOperator.CEIL: math.ceil,
    UnaryOperator.FLOOR: math.floor,
    UnaryOperator.ROUND: round,
    UnaryOperator.TRUNCATE: math.trunc,
}


# =============================================================================
# ДИСПЕТЧЕРИЗАЦИЯ
# =============================================================================


def apply_binary(op: BinaryOperator, left: Real, right: Real) -> Real:
    """
    Применение бинарного оператора к двум числам.

    Args:
        op: Тег оператора
        left: Левый операнд (число)
        right: Правый операнд (число)

    Returns:
        Результат нативной арифметики Python

    Raises:
        ZeroDivisionError: Деление на ноль (пропагирует без изменений)
        TypeError: Битовые операции над float (пропагирует без изменений)

    Examples:
        >>> apply_binary(BinaryOperator.ADD, 1.0, 3)
        4.0
        >>> apply_binary(BinaryOperator.QUO, 7, 2)
        Fraction(7, 2)
        >>> apply_binary(BinaryOperator.REMAINDER, -7, 3)
        -1
    """
    return _BINARY_DISPATCH[op](left, right)


def apply_unary(op: UnaryOperator, value: Real, ndigits: Optional[int] = None) -> Real:
    """
    Применение унарного оператора к числу.

    ndigits учитывается только для ROUND (как во встроенном round).
    """
    if op is UnaryOperator.ROUND and ndigits is not None:
        return round(value, ndigits)
    return _UNARY_DISPATCH[op](value)
