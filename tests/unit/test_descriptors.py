from __future__ import annotations

import collections
import numbers
from collections.abc import Sequence
from typing import Any, Literal, NewType, Optional, Protocol, TypeVar, Union

import pytest

from paramguard.descriptors import AnyType, NamedType, PrimitiveKind, PrimitiveType, describe_annotation


class Animal:
    pass


class Walker(Protocol):
    def walk(self) -> None: ...


UserId = NewType("UserId", int)
T = TypeVar("T")


@pytest.mark.parametrize(
    ("annotation", "kind"),
    [
        (int, PrimitiveKind.NUMERIC),
        (float, PrimitiveKind.NUMERIC),
        (numbers.Real, PrimitiveKind.NUMERIC),
        (str, PrimitiveKind.TEXT),
        (collections.UserString, PrimitiveKind.TEXT),
        (list, PrimitiveKind.SEQUENCE),
        (tuple[int, ...], PrimitiveKind.SEQUENCE),
        (list[str], PrimitiveKind.SEQUENCE),
        (Sequence[Animal], PrimitiveKind.SEQUENCE),
    ],
)
def test_primitive_annotations(annotation: Any, kind: PrimitiveKind) -> None:
    descriptor = describe_annotation(annotation)

    assert isinstance(descriptor, PrimitiveType)
    assert descriptor.kind is kind


def test_optional_unwraps_to_the_inner_type() -> None:
    assert describe_annotation(Optional[Animal]) == NamedType(Animal)
    assert describe_annotation(Animal | None) == NamedType(Animal)
    assert describe_annotation(Union[str, None]) == PrimitiveType(PrimitiveKind.TEXT, str)


def test_newtype_describes_as_its_supertype() -> None:
    assert describe_annotation(UserId) == PrimitiveType(PrimitiveKind.NUMERIC, int)


@pytest.mark.parametrize("annotation", [Any, object, T, int | str, Literal["a"], Walker])
def test_open_annotations_describe_as_any(annotation: Any) -> None:
    assert describe_annotation(annotation) == AnyType()


def test_user_classes_and_other_builtins_are_named_types() -> None:
    assert describe_annotation(Animal) == NamedType(Animal)
    assert describe_annotation(bool) == NamedType(bool)
    assert describe_annotation(dict[str, int]) == NamedType(dict)


def test_descriptor_names() -> None:
    assert describe_annotation(float).name == "float"
    assert describe_annotation(Animal).name == "Animal"
    assert AnyType().name == "Any"
