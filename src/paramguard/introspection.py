from __future__ import annotations

import inspect
import typing
import weakref
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from paramguard.constants import RECEIVER_NAMES
from paramguard.descriptors import AnyType, TypeDescriptor, describe_annotation
from paramguard.errors import DeclarationError
from paramguard.registry import DeclarationKey

_POSITIONAL_KINDS = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_COLLECTOR_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


class TypeIntrospector(Protocol):
    def parameter_types(self, func: Callable[..., Any]) -> Sequence[TypeDescriptor]:
        """Declared types of the validated parameters of ``func``, in order."""
        ...


@dataclass(slots=True, frozen=True)
class CallLayout:
    receiver_count: int
    parameters: tuple[inspect.Parameter, ...]
    accepts_var_positional: bool
    accepts_var_keyword: bool

    @property
    def positional_count(self) -> int:
        return sum(1 for parameter in self.parameters if parameter.kind in _POSITIONAL_KINDS)

    def position_of(self, name: str) -> int | None:
        for index, parameter in enumerate(self.parameters):
            if parameter.name == name:
                return index
        return None


def _is_defined_in_class(func: Callable[..., Any]) -> bool:
    qualname = getattr(func, "__qualname__", "")
    parts = qualname.split(".")
    return len(parts) >= 2 and parts[-2] != "<locals>"


_LAYOUTS: weakref.WeakKeyDictionary[Callable[..., Any], CallLayout] = weakref.WeakKeyDictionary()


def call_layout(func: Callable[..., Any]) -> CallLayout:
    """Split the signature of ``func`` into receiver and validated parameters.

    The receiver is the leading ``self``/``cls`` of a function defined in a
    class body. ``*args`` and ``**kwargs`` collectors are never validated.
    Layouts are cached for as long as the function is alive.
    """
    target = inspect.unwrap(func)
    try:
        return _LAYOUTS[target]
    except (KeyError, TypeError):
        pass
    layout = _build_layout(target)
    try:
        _LAYOUTS[target] = layout
    except TypeError:
        pass
    return layout


def _build_layout(target: Callable[..., Any]) -> CallLayout:
    parameters = list(inspect.signature(target).parameters.values())
    receiver_count = 0
    if (
        parameters
        and parameters[0].kind in _POSITIONAL_KINDS
        and parameters[0].name in RECEIVER_NAMES
        and _is_defined_in_class(target)
    ):
        receiver_count = 1
    remaining = parameters[receiver_count:]
    return CallLayout(
        receiver_count=receiver_count,
        parameters=tuple(parameter for parameter in remaining if parameter.kind not in _COLLECTOR_KINDS),
        accepts_var_positional=any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in remaining),
        accepts_var_keyword=any(p.kind is inspect.Parameter.VAR_KEYWORD for p in remaining),
    )


class SignatureIntrospector:
    """Reads parameter annotations with ``typing.get_type_hints``.

    Hints are resolved on first use rather than at decoration time so that
    forward references to classes defined later in the module work. Results
    are cached per function without keeping the function alive.
    """

    def __init__(self) -> None:
        self._cache: weakref.WeakKeyDictionary[Callable[..., Any], tuple[TypeDescriptor, ...]] = (
            weakref.WeakKeyDictionary()
        )

    def parameter_types(self, func: Callable[..., Any]) -> Sequence[TypeDescriptor]:
        target = inspect.unwrap(func)
        try:
            return self._cache[target]
        except (KeyError, TypeError):
            pass
        try:
            hints = typing.get_type_hints(target)
        except (NameError, TypeError, AttributeError) as exc:
            raise DeclarationError(
                f"cannot resolve parameter annotations: {exc}",
                declaration=str(DeclarationKey.for_callable(target)),
            ) from exc
        descriptors = tuple(
            describe_annotation(hints[parameter.name]) if parameter.name in hints else AnyType()
            for parameter in call_layout(target).parameters
        )
        try:
            self._cache[target] = descriptors
        except TypeError:
            pass
        return descriptors


_INTROSPECTOR: TypeIntrospector = SignatureIntrospector()


def get_introspector() -> TypeIntrospector:
    return _INTROSPECTOR


def set_introspector(introspector: TypeIntrospector) -> TypeIntrospector:
    """Install ``introspector`` process-wide and return the previous one."""
    global _INTROSPECTOR
    previous = _INTROSPECTOR
    _INTROSPECTOR = introspector
    return previous


__all__ = [
    "CallLayout",
    "SignatureIntrospector",
    "TypeIntrospector",
    "call_layout",
    "get_introspector",
    "set_introspector",
]
