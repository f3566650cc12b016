"""
Structure — проверка структурной совместимости вложенных mapping

Структура входного mapping совместима со структурой агрегата, если каждый
путь ключей входного mapping существует в агрегате и форма значений
совпадает:
- скаляр во входных данных ↔ скаляр в агрегате
- mapping во входных данных ↔ вложенный агрегат (проверяется рекурсивно)

Используется deep_merge(..., match_structure=True) до любых изменений.
"""

from collections.abc import Mapping
from typing import Any, Hashable, Optional, Tuple

KeyPath = Tuple[Hashable, ...]


def find_structure_mismatch(
    target: Mapping,
    other: Mapping,
    path: KeyPath = (),
) -> Optional[KeyPath]:
    """
    Поиск первого несовместимого пути ключей.

    Args:
        target: Агрегат, в который выполняется merge
        other: Входной mapping
        path: Префикс пути (для рекурсии)

    Returns:
        Путь ключей первого несовпадения, либо None если структура совместима

    Examples:
        >>> find_structure_mismatch({"a": 1, "b": {"c": 2}}, {"b": {"c": 5}})
        >>> find_structure_mismatch({"a": 1, "b": {"c": 2}}, {"b": 3})
        ('b',)
        >>> find_structure_mismatch({"a": 1}, {"d": 4})
        ('d',)
    """
    for key, value in other.items():
        key_path = path + (key,)

        if key not in target:
            return key_path

        current = target[key]
        if isinstance(value, Mapping):
            if not isinstance(current, Mapping):
                return key_path
            nested = find_structure_mismatch(current, value, key_path)
            if nested is not None:
                return nested
        elif isinstance(current, Mapping):
            return key_path

    return None


def is_compatible_structure(target: Mapping, other: Any) -> bool:
    """True если структура other является подмножеством структуры target."""
    if not isinstance(other, Mapping):
        return False
    return find_structure_mismatch(target, other) is None


def format_key_path(path: KeyPath) -> str:
    """Человекочитаемый путь ключей: ('b', 'c') → "b.c"."""
    return ".".join(str(key) for key in path)
