"""
Тесты для Coercion — приведение значений к числу

Проверяемые инварианты:
1. Числа возвращаются без изменений (тип сохраняется)
2. Агрегат сворачивается в свой total
3. None → DEFAULT_INITIAL_VALUE
4. Порядок возможностей конверсии: __float__, __int__, __index__
5. Неконвертируемые значения → TypeConversionError
"""

from collections import Counter
from decimal import Decimal
from fractions import Fraction

import pytest

from numeric_hash import NumericHash
from numeric_hash.errors import NumericHashError, TypeConversionError
from numeric_hash.math.coercion import (
    DEFAULT_INITIAL_VALUE,
    NumericAggregate,
    coerce_numeric,
    is_numeric,
)


# =============================================================================
# HELPERS
# =============================================================================


class FloatAndInt:
    """Значение с __float__ и __int__ (приоритет у __float__)."""

    def __float__(self) -> float:
        return 1.5

    def __int__(self) -> int:
        return 7


class IntOnly:
    def __int__(self) -> int:
        return 7


class IndexOnly:
    def __index__(self) -> int:
        return 3


class Reading:
    """Значение с атрибутом total (не методом) и __float__."""

    total = 3.0

    def __float__(self) -> float:
        return 7.5


class BrokenFloat:
    def __float__(self) -> float:
        raise ValueError("broken")


# =============================================================================
# ТЕСТЫ: Числа
# =============================================================================


class TestNumbers:
    """Числа проходят без изменений."""

    def test_default_initial_value(self) -> None:
        """Значение по умолчанию — int 0."""
        assert DEFAULT_INITIAL_VALUE == 0
        assert isinstance(DEFAULT_INITIAL_VALUE, int)

    def test_int_unchanged(self) -> None:
        """int сохраняет тип."""
        result = coerce_numeric(5)
        assert result == 5
        assert isinstance(result, int)

    def test_float_unchanged(self) -> None:
        """float сохраняет тип."""
        assert coerce_numeric(2.5) == 2.5

    def test_fraction_unchanged(self) -> None:
        """Fraction сохраняет тип."""
        result = coerce_numeric(Fraction(1, 3))
        assert result == Fraction(1, 3)
        assert isinstance(result, Fraction)

    def test_is_numeric(self) -> None:
        """is_numeric распознаёт допустимые листья."""
        assert is_numeric(1)
        assert is_numeric(1.0)
        assert is_numeric(Fraction(1, 2))
        assert not is_numeric("1")
        assert not is_numeric(None)
        assert not is_numeric(NumericHash())


# =============================================================================
# ТЕСТЫ: Агрегаты и None
# =============================================================================


class TestAggregatesAndNone:
    """Агрегат → total, None → default."""

    def test_aggregate_total(self) -> None:
        """Вложенный агрегат сворачивается в total."""
        nested = NumericHash({"a": 1, "b": {"c": 2, "d": 3.5}})
        assert coerce_numeric(nested) == 6.5

    def test_empty_aggregate_is_zero(self) -> None:
        """Пустой агрегат → 0."""
        assert coerce_numeric(NumericHash()) == 0

    def test_aggregate_is_numeric_aggregate(self) -> None:
        """NumericHash — подкласс NumericAggregate, dict и Counter — нет."""
        assert isinstance(NumericHash(), NumericAggregate)
        assert not isinstance({}, NumericAggregate)
        assert not isinstance(Counter(), NumericAggregate)

    def test_counter_total_not_used(self) -> None:
        """Counter имеет total(), но агрегатом не считается."""
        with pytest.raises(TypeConversionError):
            coerce_numeric(Counter({"x": 5}))

    def test_total_attribute_does_not_preempt_float(self) -> None:
        """Атрибут total не отменяет конверсию через __float__."""
        assert coerce_numeric(Reading()) == 7.5

    def test_none_gives_default(self) -> None:
        """None → DEFAULT_INITIAL_VALUE."""
        assert coerce_numeric(None) == 0

    def test_none_custom_default(self) -> None:
        """None → кастомный default."""
        assert coerce_numeric(None, default=1.0) == 1.0


# =============================================================================
# ТЕСТЫ: Возможности конверсии
# =============================================================================


class TestConversionCapabilities:
    """Порядок: __float__ → __int__ → __index__."""

    def test_float_has_priority(self) -> None:
        """__float__ имеет приоритет над __int__."""
        assert coerce_numeric(FloatAndInt()) == 1.5

    def test_int_conversion(self) -> None:
        """__int__ используется при отсутствии __float__."""
        result = coerce_numeric(IntOnly())
        assert result == 7
        assert isinstance(result, int)

    def test_index_conversion(self) -> None:
        """__index__ используется последним."""
        assert coerce_numeric(IndexOnly()) == 3

    def test_decimal_via_float(self) -> None:
        """Decimal не Real, конвертируется через __float__."""
        result = coerce_numeric(Decimal("2.5"))
        assert result == 2.5
        assert isinstance(result, float)

    def test_numeric_string(self) -> None:
        """Числовая строка парсится как float."""
        assert coerce_numeric("1.5") == 1.5
        assert coerce_numeric(" 42 ") == 42.0


# =============================================================================
# ТЕСТЫ: Ошибки
# =============================================================================


class TestConversionErrors:
    """Неконвертируемые значения → TypeConversionError."""

    def test_object_without_capability(self) -> None:
        """Объект без конверсии отвергается."""
        with pytest.raises(TypeConversionError, match="cannot convert to numeric"):
            coerce_numeric(object())

    def test_plain_list_rejected(self) -> None:
        """Список не число."""
        with pytest.raises(TypeConversionError):
            coerce_numeric([1, 2])

    def test_plain_dict_rejected(self) -> None:
        """Обычный dict не число (только NumericHash имеет total)."""
        with pytest.raises(TypeConversionError):
            coerce_numeric({"a": 1})

    def test_unparsable_string(self) -> None:
        """Нечисловая строка отвергается."""
        with pytest.raises(TypeConversionError, match="'abc'"):
            coerce_numeric("abc")

    def test_broken_capability_chained(self) -> None:
        """Ошибка конверсии оборачивается с сохранением причины."""
        with pytest.raises(TypeConversionError) as exc_info:
            coerce_numeric(BrokenFloat())
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_error_hierarchy(self) -> None:
        """TypeConversionError — это TypeError и NumericHashError."""
        with pytest.raises(TypeError):
            coerce_numeric(object())
        with pytest.raises(NumericHashError):
            coerce_numeric(object())
