"""
NumericHash — рекурсивный числовой агрегат

dict, значения которого — числа (int, float, Fraction) либо вложенные
NumericHash. Арифметика, нормализация, фильтрация и merge применяются ко
всем значениям сразу, без ручного обхода дерева.

    >>> budget = NumericHash({"rent": 1200, "food": {"home": 300, "out": 150}})
    >>> budget.total()
    1650
    >>> (budget * 2).compress()
    NumericHash({'rent': 2400, 'food': 900})

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Значение после присваивания — только число или NumericHash
   (любое другое значение приводится через coerce_numeric или отвергается)
2. total() пустого агрегата равен 0
3. Неизменяющие операции возвращают новый агрегат; исходный не меняется
4. *_inplace операции меняют агрегат только после успешного вычисления
   всего результата (all-or-nothing)
5. Вложенные агрегаты не разделяются между родителями (copy() глубокий)
"""

import functools
import logging
import operator
from collections.abc import Iterable, Mapping, Set
from fractions import Fraction
from typing import Any, Callable, ClassVar, Dict, Hashable, Optional, Tuple, Union

from numeric_hash.domain.config import DEFAULT_CONFIG, NumericHashConfig
from numeric_hash.domain.structure import (
    find_structure_mismatch,
    format_key_path,
    is_compatible_structure,
)
from numeric_hash.errors import (
    EmptyAggregateError,
    InvalidArgumentError,
    StructureMismatchError,
    TypeConversionError,
)
from numeric_hash.math.coercion import NumericAggregate, coerce_numeric, is_numeric
from numeric_hash.math.numerical_safeguards import is_close, safe_scale_factor
from numeric_hash.math.operators import (
    BinaryOperator,
    UnaryOperator,
    apply_binary,
    apply_unary,
)

logger = logging.getLogger(__name__)

Number = Union[int, float, Fraction]
Value = Union[Number, "NumericHash"]


def _is_key_sequence(value: Any) -> bool:
    # Плоская последовательность ключей; строки ключами не считаются
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return isinstance(value, (list, tuple, Set))


class NumericHash(dict, NumericAggregate):
    """
    Рекурсивный числовой агрегат.

    Конструктор принимает список ключей или (вложенный) mapping и
    необязательное начальное значение для ключей:

        >>> NumericHash()
        NumericHash({})
        >>> NumericHash(["a", "b"])
        NumericHash({'a': 0, 'b': 0})
        >>> NumericHash(["c", "d"], 1.0)
        NumericHash({'c': 1.0, 'd': 1.0})
        >>> NumericHash({"g": 4, "h": ["i", "j"]}, 5.0)
        NumericHash({'g': 4, 'h': NumericHash({'i': 5.0, 'j': 5.0})})
    """

    config: ClassVar[NumericHashConfig] = DEFAULT_CONFIG

    def __init__(self, initial_contents: Any = None, initial_value: Any = None) -> None:
        super().__init__()

        if initial_contents is None:
            return

        if isinstance(initial_contents, Mapping):
            self.apply_mapping(initial_contents, initial_value)
        elif _is_key_sequence(initial_contents):
            self.apply_sequence(initial_contents, initial_value)
        else:
            raise InvalidArgumentError(f"invalid initial data: {initial_contents!r}")

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    def apply_sequence(self, keys: Iterable[Hashable], initial_value: Any = None) -> "NumericHash":
        """
        Установка initial_value для каждого ключа последовательности.

        Существующие ключи перезаписываются.

        Returns:
            self
        """
        value = self._coerce(initial_value)
        for key in keys:
            dict.__setitem__(self, key, value)
        return self

    def apply_mapping(self, mapping: Mapping, initial_value: Any = None) -> "NumericHash":
        """
        Перенос пар ключ-значение из mapping.

        Значения-последовательности и значения-mapping превращаются во
        вложенные агрегаты (с тем же initial_value), остальные приводятся к
        числу. Все значения вычисляются до первой записи.

        Returns:
            self

        Raises:
            TypeConversionError: Если значение нельзя привести к числу
        """
        items = [
            (key, self._construct_value(value, initial_value))
            for key, value in mapping.items()
        ]
        for key, value in items:
            dict.__setitem__(self, key, value)
        return self

    def _construct_value(self, value: Any, initial_value: Any) -> Value:
        if isinstance(value, Mapping) or _is_key_sequence(value):
            return type(self)(value, initial_value)
        return self._coerce(value)

    # =========================================================================
    # ПРИСВАИВАНИЕ И КОПИРОВАНИЕ
    # =========================================================================

    def __setitem__(self, key: Hashable, value: Any) -> None:
        super().__setitem__(key, self._sanitize(value))

    def update(self, *args: Any, **kwargs: Any) -> None:
        items = [(key, self._sanitize(value)) for key, value in dict(*args, **kwargs).items()]
        for key, value in items:
            super().__setitem__(key, value)

    def setdefault(self, key: Hashable, default: Any = None) -> Value:
        if key not in self:
            self[key] = default
        return self[key]

    def copy(self) -> "NumericHash":
        """Глубокая копия: вложенные агрегаты тоже копируются."""
        duplicate = type(self)()
        for key, value in self.items():
            if isinstance(value, NumericHash):
                value = value.copy()
            dict.__setitem__(duplicate, key, value)
        return duplicate

    __copy__ = copy

    def __deepcopy__(self, memo: Dict[int, Any]) -> "NumericHash":
        return self.copy()

    def to_dict(self) -> Dict[Hashable, Any]:
        """Преобразование в обычный вложенный dict."""
        return {
            key: value.to_dict() if isinstance(value, NumericHash) else value
            for key, value in self.items()
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict.__repr__(self)})"

    # =========================================================================
    # АГРЕГАЦИЯ
    # =========================================================================

    def total(self) -> Number:
        """
        Сумма всех значений (вложенные агрегаты дают свой total).

            >>> NumericHash({"a": 1.0, "b": 2}).total()
            3.0
            >>> NumericHash({"c": 3, "d": {"e": 4, "f": 5}}).total()
            12
        """
        return sum(self._coerce(value) for value in self.values())

    def compress(self) -> "NumericHash":
        """
        Сворачивание одного уровня вложенности в числа.

            >>> NumericHash({"a": 1, "b": {"c": 2.0, "d": 3}}).compress()
            NumericHash({'a': 1, 'b': 5.0})
        """
        return self._map_values(self._coerce)

    def compress_inplace(self) -> "NumericHash":
        return self._replace_with(self.compress())

    def normalize(self, magnitude: Optional[Number] = None) -> "NumericHash":
        """
        Масштабирование значений так, чтобы total() стал равен magnitude.

        Args:
            magnitude: Целевая сумма (default: config.ratio_magnitude = 1.0)

        Returns:
            Новый агрегат. Если total() == 0, все значения равны 0.0

        Examples:
            >>> NumericHash({"a": 1, "b": 2, "c": 3, "d": 4}).normalize(120)
            NumericHash({'a': 12.0, 'b': 24.0, 'c': 36.0, 'd': 48.0})
        """
        if magnitude is None:
            magnitude = self.config.ratio_magnitude

        factor = safe_scale_factor(magnitude, self.total())
        return self._apply_binary(BinaryOperator.MUL, factor)

    def to_ratio(self) -> "NumericHash":
        return self.normalize(self.config.ratio_magnitude)

    def to_percent(self) -> "NumericHash":
        return self.normalize(self.config.percent_magnitude)

    def to_amount(self, amount: Number) -> "NumericHash":
        return self.normalize(amount)

    def min(self) -> Tuple[Hashable, Number]:
        """
        Пара (ключ, значение) с наименьшим значением в compress()-виде.

        Raises:
            EmptyAggregateError: Если агрегат пуст
        """
        items = self._compressed_items_sorted()
        if not items:
            raise EmptyAggregateError("min() of empty NumericHash")
        return items[0]

    def max(self) -> Tuple[Hashable, Number]:
        """
        Пара (ключ, значение) с наибольшим значением в compress()-виде.

        Raises:
            EmptyAggregateError: Если агрегат пуст
        """
        items = self._compressed_items_sorted()
        if not items:
            raise EmptyAggregateError("max() of empty NumericHash")
        return items[-1]

    def _compressed_items_sorted(self):
        return sorted(self.compress().items(), key=lambda item: item[1])

    # =========================================================================
    # БИНАРНЫЕ ОПЕРАТОРЫ
    # =========================================================================
    #
    #   >>> h1 = NumericHash({"a": 1.0, "b": 2})
    #   >>> h2 = NumericHash({"a": 3, "c": 4})
    #   >>> h1 + h2
    #   NumericHash({'a': 4.0, 'b': 2, 'c': 4})
    #   >>> h1 * 5
    #   NumericHash({'a': 5.0, 'b': 10})

    def __add__(self, other: Any) -> "NumericHash":
        return self._apply_binary(BinaryOperator.ADD, other)

    def __sub__(self, other: Any) -> "NumericHash":
        return self._apply_binary(BinaryOperator.SUB, other)

    def __mul__(self, other: Any) -> "NumericHash":
        return self._apply_binary(BinaryOperator.MUL, other)

    def __truediv__(self, other: Any) -> "NumericHash":
        return self._apply_binary(BinaryOperator.TRUEDIV, other)

    def __floordiv__(self, other: Any) -> "NumericHash":
        return self._apply_binary(BinaryOperator.DIV, other)

    def __mod__(self, other: Any) -> "NumericHash":
        return self._apply_binary(BinaryOperator.MOD, other)

    def __pow__(self, other: Any) -> "NumericHash":
        return self._apply_binary(BinaryOperator.POW, other)

    def __and__(self, other: Any) -> "NumericHash":
        return self._apply_binary(BinaryOperator.AND, other)

    def __or__(self, other: Any) -> "NumericHash":
        return self._apply_binary(BinaryOperator.OR, other)

    # dict определяет |= как merge; для агрегата это битовое ИЛИ
    def __ior__(self, other: Any) -> "NumericHash":
        return self._apply_binary(BinaryOperator.OR, other)

    def __xor__(self, other: Any) -> "NumericHash":
        return self._apply_binary(BinaryOperator.XOR, other)

    def power(self, other: Any) -> "NumericHash":
        return self._apply_binary(BinaryOperator.POW, other)

    def div(self, other: Any) -> "NumericHash":
        """Целочисленное деление (результат всегда int)."""
        return self._apply_binary(BinaryOperator.DIV, other)

    def modulo(self, other: Any) -> "NumericHash":
        return self._apply_binary(BinaryOperator.MODULO, other)

    def quo(self, other: Any) -> "NumericHash":
        """Точное частное: int / int даёт Fraction."""
        return self._apply_binary(BinaryOperator.QUO, other)

    def fdiv(self, other: Any) -> "NumericHash":
        return self._apply_binary(BinaryOperator.FDIV, other)

    def remainder(self, other: Any) -> "NumericHash":
        """Остаток со знаком делимого."""
        return self._apply_binary(BinaryOperator.REMAINDER, other)

    # Отражённые формы: скаляр слева (2 - h, 10 / h)

    def __radd__(self, other: Any) -> "NumericHash":
        return self._apply_reflected(BinaryOperator.ADD, other)

    def __rsub__(self, other: Any) -> "NumericHash":
        return self._apply_reflected(BinaryOperator.SUB, other)

    def __rmul__(self, other: Any) -> "NumericHash":
        return self._apply_reflected(BinaryOperator.MUL, other)

    def __rtruediv__(self, other: Any) -> "NumericHash":
        return self._apply_reflected(BinaryOperator.TRUEDIV, other)

    def __rfloordiv__(self, other: Any) -> "NumericHash":
        return self._apply_reflected(BinaryOperator.DIV, other)

    def __rmod__(self, other: Any) -> "NumericHash":
        return self._apply_reflected(BinaryOperator.MOD, other)

    def __rpow__(self, other: Any) -> "NumericHash":
        return self._apply_reflected(BinaryOperator.POW, other)

    def __rand__(self, other: Any) -> "NumericHash":
        return self._apply_reflected(BinaryOperator.AND, other)

    def __ror__(self, other: Any) -> "NumericHash":
        return self._apply_reflected(BinaryOperator.OR, other)

    def __rxor__(self, other: Any) -> "NumericHash":
        return self._apply_reflected(BinaryOperator.XOR, other)

    def _apply_reflected(self, op: BinaryOperator, other: Any) -> "NumericHash":
        # Mapping слева (dict | h) и неконвертируемые значения отдаются
        # стандартному протоколу операторов
        if isinstance(other, Mapping):
            return NotImplemented
        try:
            scalar = self._coerce(other)
        except TypeConversionError:
            return NotImplemented
        return self._broadcast_left(op, scalar)

    def _apply_binary(self, op: BinaryOperator, arg: Any) -> "NumericHash":
        """
        Применение бинарного оператора к агрегату.

        Скаляр применяется к каждому значению. Для агрегата-аргумента
        результат содержит объединение ключей; каждая пара значений
        комбинируется через _combine_values. Ключи, которых нет в arg,
        остаются без изменений.
        """
        if isinstance(arg, NumericHash):
            result = self.copy()._reconcile_traits_with(arg)
            for key, arg_value in arg.items():
                combined = result._combine_values(op, result.get(key), arg_value)
                dict.__setitem__(result, key, combined)
            return result

        scalar = self._coerce(arg)
        return self._map_leaves(lambda value: apply_binary(op, value, scalar))

    def _combine_values(self, op: BinaryOperator, current: Any, arg_value: Value) -> Value:
        if isinstance(current, NumericHash):
            # Вложенный агрегат: аргумент (число или агрегат) применяется к нему
            return current._apply_binary(op, arg_value)

        # Отсутствующий ключ даёт None → default initial value
        left = self._coerce(current)
        if isinstance(arg_value, NumericHash):
            return arg_value._broadcast_left(op, left)
        return apply_binary(op, left, self._coerce(arg_value))

    def _broadcast_left(self, op: BinaryOperator, scalar: Number) -> "NumericHash":
        # Скаляр — левый операнд для каждого листа
        return self._map_leaves(lambda value: apply_binary(op, scalar, value))

    def _reconcile_traits_with(self, other: "NumericHash") -> "NumericHash":
        """
        Hook для подклассов: согласование дополнительных атрибутов с other
        перед бинарной операцией. Базовый агрегат атрибутов не имеет.
        """
        return self

    # =========================================================================
    # УНАРНЫЕ ОПЕРАТОРЫ
    # =========================================================================

    def __pos__(self) -> "NumericHash":
        return self._apply_unary(UnaryOperator.POS)

    def __neg__(self) -> "NumericHash":
        return self._apply_unary(UnaryOperator.NEG)

    def __invert__(self) -> "NumericHash":
        return self._apply_unary(UnaryOperator.INVERT)

    def __abs__(self) -> "NumericHash":
        return self._apply_unary(UnaryOperator.ABS)

    def __ceil__(self) -> "NumericHash":
        return self._apply_unary(UnaryOperator.CEIL)

    def __floor__(self) -> "NumericHash":
        return self._apply_unary(UnaryOperator.FLOOR)

    def __round__(self, ndigits: Optional[int] = None) -> "NumericHash":
        return self._apply_unary(UnaryOperator.ROUND, ndigits)

    def __trunc__(self) -> "NumericHash":
        return self._apply_unary(UnaryOperator.TRUNCATE)

    def ceil(self) -> "NumericHash":
        return self._apply_unary(UnaryOperator.CEIL)

    def floor(self) -> "NumericHash":
        return self._apply_unary(UnaryOperator.FLOOR)

    def round(self, ndigits: Optional[int] = None) -> "NumericHash":
        return self._apply_unary(UnaryOperator.ROUND, ndigits)

    def truncate(self) -> "NumericHash":
        return self._apply_unary(UnaryOperator.TRUNCATE)

    def _apply_unary(self, op: UnaryOperator, ndigits: Optional[int] = None) -> "NumericHash":
        return self._map_leaves(lambda value: apply_unary(op, value, ndigits))

    # =========================================================================
    # ОТОБРАЖЕНИЕ ЗНАЧЕНИЙ
    # =========================================================================

    def map_numeric(self, func: Callable[[Number], Any]) -> Union["NumericHash", Dict[Hashable, Any]]:
        """
        Применение func к каждому листу (рекурсивно).

        Если все результаты — числа, возвращается NumericHash; иначе
        результат строится как обычный вложенный dict.

            >>> NumericHash({"a": 1, "b": {"c": 2}}).map_numeric(lambda v: v * 10)
            NumericHash({'a': 10, 'b': NumericHash({'c': 20})})
            >>> NumericHash({"a": 1, "b": {"c": 2}}).map_numeric(str)
            {'a': '1', 'b': {'c': '2'}}
        """
        mapped = self._map_leaves_to_dict(func)
        if self._leaves_numeric(mapped):
            return type(self)(mapped)
        return mapped

    def map_numeric_inplace(self, func: Callable[[Number], Number]) -> "NumericHash":
        """
        Применение func к каждому листу на месте.

        Raises:
            TypeConversionError: Если хотя бы один результат не число
                (агрегат при этом не изменяется)
        """
        mapped = self._map_leaves_to_dict(func)
        if not self._leaves_numeric(mapped):
            raise TypeConversionError(f"result is not numeric: {mapped!r}")
        return self._replace_with(type(self)(mapped))

    def map_to_float(self) -> "NumericHash":
        return self._map_leaves(float)

    def map_to_int(self) -> "NumericHash":
        return self._map_leaves(int)

    def _map_values(self, func: Callable[[Value], Value]) -> "NumericHash":
        # Один уровень: func получает и вложенные агрегаты
        result = type(self)()
        for key, value in self.items():
            dict.__setitem__(result, key, func(value))
        return result

    def _map_leaves(self, func: Callable[[Number], Number]) -> "NumericHash":
        result = type(self)()
        for key, value in self.items():
            if isinstance(value, NumericHash):
                value = value._map_leaves(func)
            else:
                value = func(value)
            dict.__setitem__(result, key, value)
        return result

    def _map_leaves_to_dict(self, func: Callable[[Number], Any]) -> Dict[Hashable, Any]:
        return {
            key: value._map_leaves_to_dict(func) if isinstance(value, NumericHash) else func(value)
            for key, value in self.items()
        }

    def _leaves_numeric(self, mapped: Dict[Hashable, Any]) -> bool:
        for key, value in self.items():
            if isinstance(value, NumericHash):
                if not value._leaves_numeric(mapped[key]):
                    return False
            elif not is_numeric(mapped[key]):
                return False
        return True

    # =========================================================================
    # ФИЛЬТРАЦИЯ
    # =========================================================================

    def reject(self, predicate: Callable[[Number], bool]) -> "NumericHash":
        """
        Удаление листьев, для которых predicate истинен.

        Вложенные агрегаты, ставшие пустыми, тоже удаляются.

            >>> h = NumericHash({"a": 1, "b": 0.0, "c": {"d": 0, "e": -2}, "f": {"g": 0.0}})
            >>> h.reject(lambda v: v == 0)
            NumericHash({'a': 1, 'c': NumericHash({'e': -2})})
            >>> h.reject(lambda v: v <= 0)
            NumericHash({'a': 1})
        """
        result = type(self)()
        for key, value in self.items():
            if isinstance(value, NumericHash):
                rejected = value.reject(predicate)
                if rejected:
                    dict.__setitem__(result, key, rejected)
                else:
                    logger.debug("Pruned empty branch %r", key)
            elif not predicate(value):
                dict.__setitem__(result, key, value)
        return result

    def reject_inplace(self, predicate: Callable[[Number], bool]) -> "NumericHash":
        return self._replace_with(self.reject(predicate))

    def select(self, predicate: Callable[[Number], bool]) -> "NumericHash":
        """
        Оставляет только листья, для которых predicate истинен.

            >>> h = NumericHash({"a": 1, "b": 0.0, "c": {"d": 0, "e": -2}, "f": {"g": 0.0}})
            >>> h.select(lambda v: v == 0)
            NumericHash({'b': 0.0, 'c': NumericHash({'d': 0}), 'f': NumericHash({'g': 0.0})})
        """
        return self.reject(lambda value: not predicate(value))

    def select_inplace(self, predicate: Callable[[Number], bool]) -> "NumericHash":
        return self._replace_with(self.select(predicate))

    # =========================================================================
    # MERGE
    # =========================================================================

    def deep_merge(self, other: Mapping, match_structure: bool = False) -> "NumericHash":
        """
        Merge с рекурсивным слиянием вложенных агрегатов.

        Args:
            other: Входной mapping (обычный dict или NumericHash)
            match_structure: Требовать, чтобы структура other была
                подмножеством структуры агрегата

        Returns:
            Новый агрегат; ключи, которых нет в other, сохраняются

        Raises:
            InvalidArgumentError: Если other не mapping
            StructureMismatchError: Если match_structure и структура
                несовместима (до любых изменений)

        Examples:
            >>> h = NumericHash({"a": 1, "b": {"c": 2}})
            >>> h.deep_merge({"b": 3})
            NumericHash({'a': 1, 'b': 3})
            >>> h.deep_merge({"d": 4})
            NumericHash({'a': 1, 'b': NumericHash({'c': 2}), 'd': 4})
        """
        if not isinstance(other, Mapping):
            raise InvalidArgumentError(f"mapping must be specified, got {other!r}")

        if match_structure:
            self._check_structure(other)

        result = self.copy()
        for key, value in other.items():
            current = result.get(key)
            if isinstance(current, NumericHash) and isinstance(value, Mapping):
                merged = current.deep_merge(value)
            else:
                merged = result._sanitize(value)
            dict.__setitem__(result, key, merged)
        return result

    def deep_merge_inplace(self, other: Mapping, match_structure: bool = False) -> "NumericHash":
        return self._replace_with(self.deep_merge(other, match_structure))

    def compatible_structure(self, other: Any) -> bool:
        """True если структура other является подмножеством структуры агрегата."""
        return is_compatible_structure(self, other)

    def _check_structure(self, other: Mapping) -> None:
        mismatch = find_structure_mismatch(self, other)
        if mismatch is not None:
            logger.debug("Structure mismatch at %s", format_key_path(mismatch))
            raise StructureMismatchError(
                f"structure of specified mapping is incompatible at "
                f"'{format_key_path(mismatch)}'"
            )

    # =========================================================================
    # СРАВНЕНИЕ
    # =========================================================================

    def approx_equal(
        self,
        other: Any,
        rel_tol: Optional[float] = None,
        abs_tol: Optional[float] = None,
    ) -> bool:
        """
        Сравнение с толерантностью float (одинаковые ключи и форма).

        Толерантности по умолчанию берутся из config.
        """
        if rel_tol is None:
            rel_tol = self.config.float_rel_tol
        if abs_tol is None:
            abs_tol = self.config.float_abs_tol

        if not isinstance(other, Mapping) or self.keys() != other.keys():
            return False

        for key, value in self.items():
            other_value = other[key]
            if isinstance(value, NumericHash):
                if not value.approx_equal(other_value, rel_tol, abs_tol):
                    return False
            elif not is_numeric(other_value):
                return False
            elif not is_close(value, other_value, rel_tol=rel_tol, abs_tol=abs_tol):
                return False
        return True

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _coerce(self, value: Any) -> Number:
        return coerce_numeric(value, default=self.config.default_initial_value)

    def _sanitize(self, value: Any) -> Value:
        # Значение для записи: агрегат копируется, mapping → агрегат, иначе число
        if isinstance(value, NumericHash):
            return value.copy()
        if isinstance(value, Mapping):
            return type(self)(value)
        return self._coerce(value)

    def _replace_with(self, other: "NumericHash") -> "NumericHash":
        dict.clear(self)
        dict.update(self, other)
        return self

    @classmethod
    def sum(cls, aggregates: Iterable["NumericHash"]) -> "NumericHash":
        """
        Сумма последовательности агрегатов (пустая → пустой агрегат).

            >>> NumericHash.sum([NumericHash({"a": 1.0, "b": 2}), NumericHash({"a": 3, "c": 4})])
            NumericHash({'a': 4.0, 'b': 2, 'c': 4})
            >>> NumericHash.sum([])
            NumericHash({})
        """
        aggregates = list(aggregates)
        if not aggregates:
            return cls()
        # Свёртка от копии: результат не совпадает ни с одним из аргументов
        return functools.reduce(operator.add, aggregates[1:], aggregates[0].copy())
