"""
Errors — иерархия исключений NumericHash

Все исключения пакета наследуют NumericHashError и одновременно встроенный
тип (TypeError / ValueError), чтобы вызывающий код мог ловить их привычным
образом.

Арифметические ошибки Python (ZeroDivisionError, OverflowError, TypeError
битовых операций над float) НЕ оборачиваются и пропагируют как есть.
"""


class NumericHashError(Exception):
    """Базовое исключение пакета numeric_hash."""

    pass


class TypeConversionError(NumericHashError, TypeError):
    """
    Значение нельзя привести к числу.

    Возникает в coerce_numeric, когда у значения нет ни одной возможности
    численной конверсии (__float__, __int__, __index__), либо конверсия
    завершилась ошибкой.
    """

    pass


class InvalidArgumentError(NumericHashError, ValueError):
    """
    Недопустимое содержимое для конструктора или merge.

    Конструктор принимает только None, плоскую последовательность ключей или
    mapping; deep_merge принимает только mapping.
    """

    pass


class StructureMismatchError(NumericHashError, TypeError):
    """
    Структура входного mapping несовместима со структурой агрегата.

    Возникает в deep_merge(..., match_structure=True) ДО любых изменений:
    ключ отсутствует в агрегате, либо скаляр заменяет вложенный агрегат
    (или наоборот).
    """

    pass


class EmptyAggregateError(NumericHashError, ValueError):
    """min()/max() вызваны на пустом агрегате."""

    pass
