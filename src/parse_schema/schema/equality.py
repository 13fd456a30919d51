"""
Deep structural equality for schema documents.

Pure logic -- no I/O. Values are the JSON-like shapes produced by
``to_document()``: mappings, sequences and scalars.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from .models import ClassSchema


def deep_equals(left: Any, right: Any) -> bool:
    """Compare two JSON-like values without type coercion.

    ``None`` stands for an absent value: two absent values are equal, and
    an absent value never equals a present empty one.

    Examples:
        >>> deep_equals({"a": [1, {"b": None}]}, {"a": [1, {"b": None}]})
        True
        >>> deep_equals(None, {})
        False
        >>> deep_equals(True, 1)
        False
    """
    if left is None or right is None:
        return left is None and right is None

    if isinstance(left, Mapping) or isinstance(right, Mapping):
        if not (isinstance(left, Mapping) and isinstance(right, Mapping)):
            return False
        if left.keys() != right.keys():
            return False
        return all(deep_equals(left[key], right[key]) for key in left)

    if _is_sequence(left) or _is_sequence(right):
        if not (_is_sequence(left) and _is_sequence(right)):
            return False
        if len(left) != len(right):
            return False
        return all(deep_equals(a, b) for a, b in zip(left, right))

    # bool is an int subclass; keep True and 1 apart
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right

    if _is_number(left) and _is_number(right):
        return left == right

    return type(left) is type(right) and left == right


def classes_equal(local: ClassSchema, remote: ClassSchema) -> bool:
    """Whether two class schemas are identical, attribute for attribute."""
    return deep_equals(local.to_document(), remote.to_document())


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
