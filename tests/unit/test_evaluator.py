from __future__ import annotations

import collections
from decimal import Decimal
from fractions import Fraction
from typing import Any

import pytest

from paramguard.constants import ABSENT, ConstraintTag
from paramguard.descriptors import AnyType, NamedType, PrimitiveKind, PrimitiveType
from paramguard.errors import ArgumentTypeMismatch, ConstraintViolation
from paramguard.evaluator import check_type, evaluate_arguments, evaluate_position, type_name

NUMBER = PrimitiveType(PrimitiveKind.NUMERIC, float)
INTEGER = PrimitiveType(PrimitiveKind.NUMERIC, int)
TEXT = PrimitiveType(PrimitiveKind.TEXT, str)
SEQUENCE = PrimitiveType(PrimitiveKind.SEQUENCE, list)
NO_TAGS: frozenset[ConstraintTag] = frozenset()
OPTIONAL = frozenset({ConstraintTag.OPTIONAL})
COERCIBLE = frozenset({ConstraintTag.OPTIONAL, ConstraintTag.NULL_TO_UNDEFINED})


class Animal:
    pass


class Dog(Animal):
    pass


class Rock:
    pass


def test_type_name_resolution_order() -> None:
    assert type_name(ABSENT) == "absent"
    assert type_name(None) == "None"
    assert type_name(Dog) == "Dog"
    assert type_name(Dog()) == "Dog"
    assert type_name(3) == "int"


@pytest.mark.parametrize("value", [3, 2.5, Fraction(1, 3), Decimal("1.5"), -0.0])
def test_numeric_accepts_real_numbers(value: Any) -> None:
    check_type(value, NUMBER, 0, NO_TAGS)


@pytest.mark.parametrize("value", [True, float("nan"), float("inf"), Decimal("NaN"), "3", 1j])
def test_numeric_rejects_non_finite_and_non_numbers(value: Any) -> None:
    with pytest.raises(ArgumentTypeMismatch):
        check_type(value, NUMBER, 0, NO_TAGS)


def test_integer_declaration_requires_integral_values() -> None:
    check_type(7, INTEGER, 0, NO_TAGS)
    with pytest.raises(ArgumentTypeMismatch, match="shall be of type int but is of type float"):
        check_type(7.5, INTEGER, 0, NO_TAGS)


def test_text_uses_value_semantics() -> None:
    check_type("dog", TEXT, 0, NO_TAGS)
    check_type(collections.UserString("dog"), TEXT, 0, NO_TAGS)
    with pytest.raises(ArgumentTypeMismatch):
        check_type(b"dog", TEXT, 0, NO_TAGS)


@pytest.mark.parametrize("value", [[], (1, 2), collections.UserList([1]), range(3)])
def test_sequence_accepts_ordered_sequences(value: Any) -> None:
    check_type(value, SEQUENCE, 0, NO_TAGS)


@pytest.mark.parametrize("value", ["abc", b"abc", {"a": 1}, {1, 2}])
def test_sequence_rejects_text_and_unordered_collections(value: Any) -> None:
    with pytest.raises(ArgumentTypeMismatch):
        check_type(value, SEQUENCE, 0, NO_TAGS)


def test_named_type_uses_isinstance() -> None:
    check_type(Dog(), NamedType(Animal), 0, NO_TAGS)
    with pytest.raises(ArgumentTypeMismatch) as excinfo:
        check_type(Rock(), NamedType(Animal), 3, NO_TAGS)
    assert excinfo.value.position == 4
    assert str(excinfo.value) == "parameter 4 shall be of type Animal but is of type Rock"


@pytest.mark.parametrize("value", [ABSENT, None])
def test_missing_values_need_the_optional_tag(value: Any) -> None:
    check_type(value, NamedType(Animal), 0, OPTIONAL)
    check_type(value, TEXT, 0, OPTIONAL)
    with pytest.raises(ArgumentTypeMismatch):
        check_type(value, NamedType(Animal), 0, NO_TAGS)
    with pytest.raises(ArgumentTypeMismatch):
        check_type(value, TEXT, 0, NO_TAGS)


def test_optional_still_rejects_wrong_types() -> None:
    with pytest.raises(ArgumentTypeMismatch):
        check_type(Rock(), NamedType(Animal), 0, OPTIONAL)


def test_any_type_always_passes() -> None:
    for value in (ABSENT, None, Rock(), 3):
        check_type(value, AnyType(), 0, NO_TAGS)


def test_null_is_rewritten_to_absent() -> None:
    arguments: list[Any] = ["rex", None]

    evaluate_position(arguments, 1, NamedType(Animal), COERCIBLE)

    assert arguments == ["rex", ABSENT]


def test_null_coercion_leaves_other_values_alone() -> None:
    dog = Dog()
    arguments: list[Any] = [dog]

    evaluate_position(arguments, 0, NamedType(Animal), COERCIBLE)

    assert arguments == [dog]


def test_null_on_a_coercible_but_required_parameter_still_fails() -> None:
    arguments: list[Any] = [None]

    with pytest.raises(ArgumentTypeMismatch):
        evaluate_position(arguments, 0, NamedType(Animal), frozenset({ConstraintTag.NULL_TO_UNDEFINED}))
    assert arguments == [None]


@pytest.mark.parametrize(
    ("descriptor", "value", "constraint"),
    [
        (TEXT, "", "non-empty string"),
        (SEQUENCE, [], "non-empty sequence"),
        (SEQUENCE, (), "non-empty sequence"),
    ],
)
def test_not_empty_rejects_empty_values(descriptor: PrimitiveType, value: Any, constraint: str) -> None:
    with pytest.raises(ConstraintViolation) as excinfo:
        evaluate_position([value], 0, descriptor, frozenset({ConstraintTag.NOT_EMPTY}))
    assert excinfo.value.constraint == constraint
    assert str(excinfo.value) == f"parameter 1 shall be a {constraint}"


def test_not_empty_accepts_non_empty_values() -> None:
    tags = frozenset({ConstraintTag.NOT_EMPTY})
    evaluate_position(["rex"], 0, TEXT, tags)
    evaluate_position([["rex"]], 0, SEQUENCE, tags)
    evaluate_position([0], 0, NUMBER, tags)


def test_not_empty_runs_after_the_type_check() -> None:
    with pytest.raises(ArgumentTypeMismatch):
        evaluate_position([[]], 0, TEXT, frozenset({ConstraintTag.NOT_EMPTY}))


def test_not_empty_skips_values_resolved_to_absent() -> None:
    tags = frozenset({ConstraintTag.OPTIONAL, ConstraintTag.NULL_TO_UNDEFINED, ConstraintTag.NOT_EMPTY})
    arguments: list[Any] = [None]

    evaluate_position(arguments, 0, TEXT, tags)
    evaluate_position([ABSENT], 0, TEXT, tags)

    assert arguments == [ABSENT]


def test_positions_past_the_argument_vector_are_absent() -> None:
    arguments: list[Any] = []

    evaluate_position(arguments, 2, NamedType(Animal), OPTIONAL)
    with pytest.raises(ArgumentTypeMismatch, match="parameter 3 .* absent"):
        evaluate_position(arguments, 2, NamedType(Animal), NO_TAGS)


def test_evaluation_fails_fast_on_the_first_bad_position() -> None:
    arguments: list[Any] = [Rock(), Dog(), Rock()]
    descriptors = [NamedType(Dog), NamedType(Dog), NamedType(Dog)]

    with pytest.raises(ArgumentTypeMismatch) as excinfo:
        evaluate_arguments(arguments, descriptors, lambda index: NO_TAGS)
    assert excinfo.value.position == 1


def test_coercions_before_a_failure_are_kept() -> None:
    arguments: list[Any] = [None, Rock()]
    tags = {0: COERCIBLE, 1: NO_TAGS}

    with pytest.raises(ArgumentTypeMismatch, match="parameter 2"):
        evaluate_arguments(arguments, [NamedType(Dog), NamedType(Dog)], tags.__getitem__)
    assert arguments[0] is ABSENT
