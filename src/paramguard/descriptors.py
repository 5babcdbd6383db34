from __future__ import annotations

import collections
import numbers
import types
import typing
from collections.abc import MutableSequence, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias, Union


class PrimitiveKind(str, Enum):
    NUMERIC = "numeric"
    TEXT = "text"
    SEQUENCE = "sequence"


@dataclass(slots=True, frozen=True)
class PrimitiveType:
    kind: PrimitiveKind
    python_type: type

    @property
    def name(self) -> str:
        return self.python_type.__name__


@dataclass(slots=True, frozen=True)
class NamedType:
    python_type: type

    @property
    def name(self) -> str:
        return self.python_type.__name__


@dataclass(slots=True, frozen=True)
class AnyType:
    @property
    def name(self) -> str:
        return "Any"


TypeDescriptor: TypeAlias = PrimitiveType | NamedType | AnyType

_NUMERIC_TYPES: tuple[type, ...] = (int, float, numbers.Number, numbers.Real, numbers.Integral)
_TEXT_TYPES: tuple[type, ...] = (str, collections.UserString)
_SEQUENCE_TYPES: tuple[type, ...] = (list, tuple, Sequence, MutableSequence, collections.UserList)
_UNION_ORIGINS: tuple[Any, ...] = (Union, types.UnionType)


def describe_annotation(annotation: Any) -> TypeDescriptor:
    """Map a resolved annotation onto the descriptor used by the evaluator.

    Element types of parameterised containers are not inspected; ``list[int]``
    describes the same way as ``list``.
    """
    if annotation is Any or annotation is object:
        return AnyType()

    origin = typing.get_origin(annotation)
    if origin in _UNION_ORIGINS:
        members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return describe_annotation(members[0])
        return AnyType()
    if origin is typing.Annotated:
        return describe_annotation(typing.get_args(annotation)[0])
    if origin is not None:
        annotation = origin

    supertype = getattr(annotation, "__supertype__", None)
    if supertype is not None:
        return describe_annotation(supertype)

    if not isinstance(annotation, type):
        return AnyType()
    # isinstance() rejects protocols that are not runtime checkable.
    if getattr(annotation, "_is_protocol", False) and not getattr(annotation, "_is_runtime_protocol", False):
        return AnyType()
    if annotation in _NUMERIC_TYPES:
        return PrimitiveType(PrimitiveKind.NUMERIC, annotation)
    if annotation in _TEXT_TYPES:
        return PrimitiveType(PrimitiveKind.TEXT, annotation)
    if annotation in _SEQUENCE_TYPES:
        return PrimitiveType(PrimitiveKind.SEQUENCE, annotation)
    return NamedType(annotation)


__all__ = [
    "AnyType",
    "NamedType",
    "PrimitiveKind",
    "PrimitiveType",
    "TypeDescriptor",
    "describe_annotation",
]
