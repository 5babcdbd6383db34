"""Decorators that attach constraint tags to parameter positions.

Positions are zero-based and skip the ``self``/``cls`` receiver; a parameter
name may be given instead. The tags only take effect on callables that are
also decorated with ``@validate``, in either stacking order::

    @validate
    @optional("animal")
    @null_to_undefined("animal")
    def greet(name: str, animal: Dog | None = None) -> str:
        ...
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from paramguard.constants import ConstraintTag
from paramguard.errors import DeclarationError
from paramguard.introspection import CallLayout, call_layout
from paramguard.registry import DeclarationKey, get_registry

F = TypeVar("F", bound=Callable[..., Any])


def _resolve_position(layout: CallLayout, position: int | str, key: DeclarationKey) -> int:
    if isinstance(position, str):
        index = layout.position_of(position)
        if index is None:
            raise DeclarationError(f"unknown parameter {position!r}", declaration=str(key), parameter=position)
        return index
    if position < 0:
        raise DeclarationError(
            f"parameter position must be zero or positive, got {position}",
            declaration=str(key),
            parameter=position,
        )
    return position


def _tagging_decorator(tag: ConstraintTag, positions: tuple[int | str, ...]) -> Callable[[F], F]:
    if not positions:
        raise DeclarationError(f"@{tag.value} needs at least one parameter position or name")

    def decorator(func: F) -> F:
        key = DeclarationKey.for_callable(func)
        layout = call_layout(func)
        registry = get_registry()
        for position in positions:
            registry.tag(key, _resolve_position(layout, position, key), tag)
        return func

    return decorator


def optional(*positions: int | str) -> Callable[[F], F]:
    """Allow the parameters at ``positions`` to be absent or ``None``.

    The declared type is not checked for an absent or ``None`` value.
    """
    return _tagging_decorator(ConstraintTag.OPTIONAL, positions)


def null_to_undefined(*positions: int | str) -> Callable[[F], F]:
    """Treat an explicit ``None`` as if the argument was never supplied.

    The wrapped body then sees the parameter default. Pair it with
    ``optional``; a ``None`` on a parameter that is not optional still fails
    the type check before any coercion happens.
    """
    return _tagging_decorator(ConstraintTag.NULL_TO_UNDEFINED, positions)


def not_empty(*positions: int | str) -> Callable[[F], F]:
    """Reject empty strings and empty sequences once the type check passed."""
    return _tagging_decorator(ConstraintTag.NOT_EMPTY, positions)


__all__ = ["not_empty", "null_to_undefined", "optional"]
