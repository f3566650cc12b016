"""
Тесты для NumericHash — агрегация

Проверяемые инварианты:
1. total() пустого агрегата = 0; вложенные агрегаты дают свой total
2. compress() сворачивает ровно один уровень
3. normalize(m).total() == m при ненулевом total
4. normalize() при нулевом total → все значения 0.0
5. min()/max() по compress()-виду, стабильный порядок, пустой → ошибка
"""

from fractions import Fraction

import pytest

from numeric_hash import EmptyAggregateError, NumericHash


# =============================================================================
# ТЕСТЫ: total
# =============================================================================


class TestTotal:
    """Сумма значений."""

    def test_empty_total_is_int_zero(self) -> None:
        """total() пустого агрегата — int 0."""
        total = NumericHash().total()
        assert total == 0
        assert isinstance(total, int)

    def test_flat_total(self) -> None:
        """Сумма плоского агрегата."""
        assert NumericHash({"a": 1.0, "b": 2}).total() == 3.0

    def test_nested_total(self) -> None:
        """Вложенный агрегат даёт свой total."""
        assert NumericHash({"c": 3, "d": {"e": 4, "f": 5}}).total() == 12

    def test_deeply_nested_total(self) -> None:
        """Рекурсия на любую глубину."""
        h = NumericHash({"a": {"b": {"c": {"d": 1}}}, "e": 2})
        assert h.total() == 3

    def test_empty_nested_contributes_zero(self) -> None:
        """Пустой вложенный агрегат даёт 0."""
        assert NumericHash({"a": 1, "b": {}}).total() == 1

    def test_fraction_total(self) -> None:
        """Fraction суммируется точно."""
        h = NumericHash({"a": Fraction(1, 3), "b": Fraction(2, 3)})
        assert h.total() == 1


# =============================================================================
# ТЕСТЫ: compress
# =============================================================================


class TestCompress:
    """Сворачивание одного уровня."""

    def test_compress(self) -> None:
        """Один уровень вложенности сворачивается в числа."""
        h = NumericHash({"a": 1, "b": {"c": 2.0, "d": 3}})
        assert h.compress() == {"a": 1, "b": 5.0}

    def test_compress_collapses_all_depths_into_top_level(self) -> None:
        """Значение верхнего уровня — total всего поддерева."""
        h = NumericHash({"a": {"b": {"c": 1, "d": 2}}})
        compressed = h.compress()
        assert compressed == {"a": 3}
        assert not isinstance(compressed["a"], NumericHash)

    def test_compress_does_not_mutate(self) -> None:
        """compress не изменяет исходный агрегат."""
        h = NumericHash({"a": {"b": 1}})
        h.compress()
        assert isinstance(h["a"], NumericHash)

    def test_compress_inplace(self) -> None:
        """compress_inplace меняет агрегат и возвращает self."""
        h = NumericHash({"a": 1, "b": {"c": 2.0, "d": 3}})
        result = h.compress_inplace()
        assert result is h
        assert h == {"a": 1, "b": 5.0}


# =============================================================================
# ТЕСТЫ: normalize
# =============================================================================


class TestNormalize:
    """Нормализация к заданной сумме."""

    @pytest.fixture
    def weights(self) -> NumericHash:
        return NumericHash({"a": 1, "b": 2, "c": 3, "d": 4})

    def test_normalize_default_ratio(self, weights) -> None:
        """По умолчанию сумма нормализуется к 1.0."""
        result = weights.normalize()
        assert result == pytest.approx({"a": 0.1, "b": 0.2, "c": 0.3, "d": 0.4})

    def test_normalize_to_magnitude(self, weights) -> None:
        """Нормализация к произвольной сумме."""
        assert weights.normalize(120) == {"a": 12.0, "b": 24.0, "c": 36.0, "d": 48.0}

    def test_normalized_total_equals_magnitude(self, weights) -> None:
        """total() после normalize равен magnitude."""
        for magnitude in (1.0, 100.0, 120, 0.5, -3.0):
            assert weights.normalize(magnitude).total() == pytest.approx(magnitude)

    def test_normalize_nested(self) -> None:
        """Вложенные агрегаты масштабируются рекурсивно, форма сохраняется."""
        h = NumericHash({"a": 1, "b": {"c": 1, "d": 2}})
        result = h.normalize(100)
        assert result["a"] == pytest.approx(25.0)
        assert isinstance(result["b"], NumericHash)
        assert result["b"]["d"] == pytest.approx(50.0)
        assert result.total() == pytest.approx(100.0)

    def test_zero_total_gives_zeros(self) -> None:
        """Нулевой total → все значения ровно 0.0, без Inf/NaN."""
        h = NumericHash({"a": 0, "b": 0.0, "c": {"d": 0}})
        result = h.normalize(100)
        assert result == {"a": 0.0, "b": 0.0, "c": {"d": 0.0}}

    def test_zero_total_mixed_signs(self) -> None:
        """Нулевой total из разных знаков даёт нули."""
        h = NumericHash({"a": 1, "b": -1})
        assert h.normalize() == {"a": 0.0, "b": 0.0}

    def test_empty_normalize(self) -> None:
        """Пустой агрегат остаётся пустым."""
        assert NumericHash().normalize() == {}

    def test_shortcuts(self, weights) -> None:
        """to_ratio / to_percent / to_amount — частные случаи normalize."""
        assert weights.to_ratio() == weights.normalize(1.0)
        assert weights.to_percent() == pytest.approx({"a": 10.0, "b": 20.0, "c": 30.0, "d": 40.0})
        assert weights.to_amount(120) == weights.normalize(120)

    def test_normalize_does_not_mutate(self, weights) -> None:
        """normalize не изменяет исходный агрегат."""
        weights.normalize(1000)
        assert weights == {"a": 1, "b": 2, "c": 3, "d": 4}


# =============================================================================
# ТЕСТЫ: min / max
# =============================================================================


class TestMinMax:
    """Экстремумы по compress()-виду."""

    def test_min_max_flat(self) -> None:
        """Пары с наименьшим и наибольшим значением."""
        h = NumericHash({"a": 3, "b": -1.5, "c": 10})
        assert h.min() == ("b", -1.5)
        assert h.max() == ("c", 10)

    def test_min_max_use_compressed_values(self) -> None:
        """Вложенный агрегат сравнивается по своему total."""
        h = NumericHash({"a": 5, "b": {"c": 4, "d": 4}})
        assert h.max() == ("b", 8)
        assert h.min() == ("a", 5)

    def test_ties_stable_order(self) -> None:
        """При равенстве: min — первый, max — последний по порядку вставки."""
        h = NumericHash({"a": 1, "b": 1, "c": 1})
        assert h.min() == ("a", 1)
        assert h.max() == ("c", 1)

    def test_single_entry(self) -> None:
        """Единственная пара — и min, и max."""
        h = NumericHash({"only": 7})
        assert h.min() == h.max() == ("only", 7)

    def test_empty_raises(self) -> None:
        """Пустой агрегат → EmptyAggregateError."""
        with pytest.raises(EmptyAggregateError, match="min"):
            NumericHash().min()
        with pytest.raises(EmptyAggregateError, match="max"):
            NumericHash().max()

    def test_empty_error_is_value_error(self) -> None:
        """Как у встроенного min([])."""
        with pytest.raises(ValueError):
            NumericHash().min()
