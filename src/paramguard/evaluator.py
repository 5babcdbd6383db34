"""Per-parameter constraint evaluation.

For every position, in order: type check, null coercion, non-empty check.
Evaluation stops at the first failing position. Coercions already applied to
earlier slots of the argument vector are kept when a later slot fails.
"""
from __future__ import annotations

import collections
import decimal
import logging
import math
import numbers
from collections.abc import Callable, MutableSequence, Sequence
from typing import Any

from paramguard.constants import (
    ABSENT,
    ABSENT_TYPE_NAME,
    NON_EMPTY_SEQUENCE,
    NON_EMPTY_TEXT,
    NULL_TYPE_NAME,
    UNKNOWN_TYPE_NAME,
    ConstraintTag,
)
from paramguard.descriptors import AnyType, NamedType, PrimitiveKind, PrimitiveType, TypeDescriptor
from paramguard.errors import ArgumentTypeMismatch, ConstraintViolation

logger = logging.getLogger(__name__)

_TEXT_VALUE_TYPES = (str, collections.UserString)
_NOT_SEQUENCE_TYPES = (str, bytes, bytearray, collections.UserString)


def type_name(value: Any) -> str:
    if value is ABSENT:
        return ABSENT_TYPE_NAME
    if value is None:
        return NULL_TYPE_NAME
    if isinstance(value, type):
        return value.__name__
    name = getattr(type(value), "__name__", None)
    if isinstance(name, str) and name:
        return name
    return UNKNOWN_TYPE_NAME


def is_text(value: Any) -> bool:
    return isinstance(value, _TEXT_VALUE_TYPES)


def is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, _NOT_SEQUENCE_TYPES)


def _is_number(value: Any, declared: type) -> bool:
    if isinstance(value, bool):
        return False
    if declared is int or declared is numbers.Integral:
        return isinstance(value, numbers.Integral)
    if isinstance(value, numbers.Integral):
        return True
    if isinstance(value, decimal.Decimal):
        return value.is_finite()
    if isinstance(value, numbers.Real):
        return math.isfinite(value)
    return False


def matches_primitive(descriptor: PrimitiveType, value: Any) -> bool:
    if descriptor.kind is PrimitiveKind.NUMERIC:
        return _is_number(value, descriptor.python_type)
    if descriptor.kind is PrimitiveKind.TEXT:
        return is_text(value)
    return is_sequence(value)


def check_type(
    value: Any,
    descriptor: TypeDescriptor,
    index: int,
    tags: frozenset[ConstraintTag],
    declaration: str | None = None,
) -> None:
    if (value is ABSENT or value is None) and ConstraintTag.OPTIONAL in tags:
        return
    if isinstance(descriptor, AnyType):
        return
    if isinstance(descriptor, PrimitiveType):
        matched = matches_primitive(descriptor, value)
    elif isinstance(descriptor, NamedType):
        matched = value is not ABSENT and isinstance(value, descriptor.python_type)
    else:
        matched = False
    if not matched:
        raise ArgumentTypeMismatch(
            position=index + 1,
            expected=descriptor.name,
            actual=type_name(value),
            declaration=declaration,
        )


def check_not_empty(value: Any, index: int, declaration: str | None = None) -> None:
    if is_text(value):
        if len(value) == 0:
            raise ConstraintViolation(position=index + 1, constraint=NON_EMPTY_TEXT, declaration=declaration)
        return
    if is_sequence(value) and len(value) == 0:
        raise ConstraintViolation(position=index + 1, constraint=NON_EMPTY_SEQUENCE, declaration=declaration)


def evaluate_position(
    arguments: MutableSequence[Any],
    index: int,
    descriptor: TypeDescriptor,
    tags: frozenset[ConstraintTag],
    declaration: str | None = None,
) -> None:
    value = arguments[index] if index < len(arguments) else ABSENT
    check_type(value, descriptor, index, tags, declaration)
    if ConstraintTag.NULL_TO_UNDEFINED in tags and value is None:
        value = ABSENT
        if index < len(arguments):
            arguments[index] = ABSENT
    if ConstraintTag.NOT_EMPTY in tags:
        check_not_empty(value, index, declaration)


def evaluate_arguments(
    arguments: MutableSequence[Any],
    descriptors: Sequence[TypeDescriptor],
    tags_for: Callable[[int], frozenset[ConstraintTag]],
    declaration: str | None = None,
) -> None:
    """Run every constraint over ``arguments`` left to right, rewriting slots in place."""
    for index, descriptor in enumerate(descriptors):
        try:
            evaluate_position(arguments, index, descriptor, tags_for(index), declaration)
        except (ArgumentTypeMismatch, ConstraintViolation) as exc:
            logger.debug("argument check failed for %s: %s", declaration or "<callable>", exc)
            raise


__all__ = [
    "check_not_empty",
    "check_type",
    "evaluate_arguments",
    "evaluate_position",
    "is_sequence",
    "is_text",
    "matches_primitive",
    "type_name",
]
