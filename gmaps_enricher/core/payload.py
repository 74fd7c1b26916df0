"""Typed access into the positional, schema-less arrays returned by Google Maps."""

from enum import Enum
from typing import Any, Sequence, Union


class FieldType(Enum):
    STRING = "string"
    STRING_LIST = "string_list"


def zero_value(kind: FieldType) -> Union[str, list]:
    if kind is FieldType.STRING:
        return ""
    return []


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _matches(value: Any, kind: FieldType) -> bool:
    if kind is FieldType.STRING:
        return isinstance(value, str)
    return is_array(value) and all(isinstance(item, str) for item in value)


def get_nth(arr: Sequence[Any], path: Sequence[int], kind: FieldType = FieldType.STRING) -> Any:
    """Walk ``path`` into nested arrays and return the value when it has type ``kind``.

    Any miss along the way (index out of range, null, a non-array where more
    descent is needed, or a terminal value of the wrong type) yields the zero
    value for ``kind`` instead of raising.
    """
    if not path:
        return zero_value(kind)

    current: Any = arr
    for idx in path:
        if not is_array(current) or idx < 0 or idx >= len(current):
            return zero_value(kind)
        current = current[idx]
        if current is None:
            return zero_value(kind)

    if not _matches(current, kind):
        return zero_value(kind)
    if kind is FieldType.STRING:
        return current
    return list(current)
