"""
Coercion — приведение произвольного значения к числу

Единственная точка, через которую любое значение попадает в арифметику
NumericHash. Ни одна операция агрегата не работает с нечисловым листом
напрямую.

Порядок проверок (фиксированный):
1. numbers.Real (int, float, Fraction, bool) → без изменений
2. Агрегат (подкласс NumericAggregate) → его рекурсивный total()
3. None → DEFAULT_INITIAL_VALUE
4. str / bytes → float(value)
5. __float__ → float(value)
6. __int__ → int(value)
7. __index__ → operator.index(value)
8. Иначе → TypeConversionError
"""

import operator
from abc import ABC, abstractmethod
from numbers import Real
from typing import Any, Final, SupportsFloat, SupportsIndex, SupportsInt

from numeric_hash.errors import TypeConversionError

# Начальное значение для ключей без явного значения.
# Используется int 0, а не float 0.0: int автоматически превращается во float
# при операциях с float, обратное неверно.
DEFAULT_INITIAL_VALUE: Final[int] = 0


class NumericAggregate(ABC):
    """
    Базовый класс вложенного агрегата, сворачиваемого в число через total().

    Проверка номинальная: объект с атрибутом total (например, Counter) не
    считается агрегатом и проходит обычные проверки конверсии.
    """

    @abstractmethod
    def total(self) -> Real:
        """Рекурсивная сумма значений агрегата."""


def is_numeric(value: Any) -> bool:
    """True если value уже является допустимым листом агрегата."""
    return isinstance(value, Real)


def coerce_numeric(value: Any, default: Real = DEFAULT_INITIAL_VALUE) -> Real:
    """
    Приведение значения к числу.

    Args:
        value: Произвольное значение (число, агрегат, None, строка, ...)
        default: Результат для None (default: DEFAULT_INITIAL_VALUE)

    Returns:
        Число (int, float или Fraction)

    Raises:
        TypeConversionError: Если у значения нет численной конверсии,
            либо конверсия завершилась ошибкой

    Examples:
        >>> coerce_numeric(2.5)
        2.5
        >>> coerce_numeric(None)
        0
        >>> coerce_numeric("1.5")
        1.5
        >>> coerce_numeric(Decimal("2"))  # doctest: +SKIP
        2.0
    """
    if isinstance(value, Real):
        return value

    if isinstance(value, NumericAggregate):
        return value.total()

    if value is None:
        return default

    try:
        if isinstance(value, (str, bytes)):
            return float(value)
        if isinstance(value, SupportsFloat):
            return float(value)
        if isinstance(value, SupportsInt):
            return int(value)
        if isinstance(value, SupportsIndex):
            return operator.index(value)
    except (ValueError, TypeError, OverflowError) as e:
        raise TypeConversionError(f"cannot convert to numeric: {value!r}") from e

    raise TypeConversionError(f"cannot convert to numeric: {value!r}")
