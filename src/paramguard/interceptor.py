from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast

from paramguard.constants import ABSENT, ConstraintTag
from paramguard.errors import DeclarationError
from paramguard.evaluator import evaluate_arguments
from paramguard.introspection import CallLayout, call_layout, get_introspector
from paramguard.registry import DeclarationKey, get_registry
from paramguard.settings import get_settings

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

WRAPPER_MARKER = "__paramguard_key__"


def _bind(
    layout: CallLayout,
    key: DeclarationKey,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> tuple[tuple[Any, ...], list[Any], tuple[Any, ...], dict[str, Any]]:
    receiver = args[: layout.receiver_count]
    positional = args[layout.receiver_count :]
    positional_count = layout.positional_count

    arguments: list[Any] = [ABSENT] * len(layout.parameters)
    for index, value in enumerate(positional[:positional_count]):
        arguments[index] = value
    extra_args = tuple(positional[positional_count:])

    bound_positionally = min(len(positional), positional_count)
    extra_kwargs = dict(kwargs)
    for index, parameter in enumerate(layout.parameters):
        if parameter.kind is inspect.Parameter.POSITIONAL_ONLY or parameter.name not in extra_kwargs:
            continue
        if parameter.kind is inspect.Parameter.POSITIONAL_OR_KEYWORD and index < bound_positionally:
            raise TypeError(f"{key.qualname}() got multiple values for argument '{parameter.name}'")
        arguments[index] = extra_kwargs.pop(parameter.name)
    return receiver, arguments, extra_args, extra_kwargs


def _default_for(parameter: inspect.Parameter) -> Any:
    if parameter.default is inspect.Parameter.empty:
        return None
    return parameter.default


def _forward_arguments(
    layout: CallLayout,
    receiver: tuple[Any, ...],
    arguments: list[Any],
    extra_args: tuple[Any, ...],
    extra_kwargs: dict[str, Any],
    optional_indices: frozenset[int] = frozenset(),
) -> tuple[list[Any], dict[str, Any]]:
    """Rebuild call arguments, omitting absent slots so the body sees their defaults.

    Slots that must stay positional (positional-only parameters, or anything
    in front of ``*args`` values) get the parameter default when absent.
    An absent optional slot without a default is forwarded as ``None``.
    """
    if extra_args:
        cut = layout.positional_count
    else:
        cut = max(
            (
                index + 1
                for index, (parameter, value) in enumerate(zip(layout.parameters, arguments))
                if parameter.kind is inspect.Parameter.POSITIONAL_ONLY and value is not ABSENT
            ),
            default=0,
        )

    call_args = list(receiver)
    call_kwargs: dict[str, Any] = {}
    for index, (parameter, value) in enumerate(zip(layout.parameters, arguments)):
        if index < cut:
            call_args.append(_default_for(parameter) if value is ABSENT else value)
        elif value is not ABSENT:
            call_kwargs[parameter.name] = value
        elif index in optional_indices and parameter.default is inspect.Parameter.empty:
            call_kwargs[parameter.name] = None
    call_args.extend(extra_args)
    call_kwargs.update(extra_kwargs)
    return call_args, call_kwargs


def _provided_count(arguments: list[Any]) -> int:
    return max((index + 1 for index, value in enumerate(arguments) if value is not ABSENT), default=0)


def validate(func: F) -> F:
    """Check every call of ``func`` against its annotations and constraint tags.

    Arguments are checked left to right before the body runs; the first
    failing parameter raises ``ArgumentTypeMismatch`` or
    ``ConstraintViolation`` and the body is not called. Return values and
    exceptions of the body pass through unchanged.

    Applying ``validate`` twice to the same function returns the first wrapper.
    """
    if getattr(func, WRAPPER_MARKER, None) is not None:
        return func

    key = DeclarationKey.for_callable(func)
    registry = get_registry()
    existing = registry.wrapper_for(key, func)
    if existing is not None:
        logger.debug("argument validation already installed on %s", key)
        return cast(F, existing)

    layout = call_layout(func)
    declaration = str(key)

    def checked_arguments(args: tuple[Any, ...], kwargs: dict[str, Any]) -> tuple[Any, dict[str, Any]]:
        settings = get_settings()
        if not settings.enabled:
            return args, kwargs
        store = get_registry()
        if settings.freeze_on_first_call:
            store.freeze()

        receiver, arguments, extra_args, extra_kwargs = _bind(layout, key, args, kwargs)
        descriptors = get_introspector().parameter_types(func)
        if len(descriptors) > len(arguments) or len(descriptors) < _provided_count(arguments):
            raise DeclarationError(
                f"introspection returned {len(descriptors)} parameter types for "
                f"{len(layout.parameters)} parameters",
                declaration=declaration,
                parameter_types=len(descriptors),
                parameters=len(layout.parameters),
            )
        evaluate_arguments(arguments, descriptors, lambda index: store.tags_for(key, index), declaration)
        optional_indices = frozenset(
            index
            for index in range(len(arguments))
            if ConstraintTag.OPTIONAL in store.tags_for(key, index)
        )
        return _forward_arguments(layout, receiver, arguments, extra_args, extra_kwargs, optional_indices)

    if inspect.iscoroutinefunction(func):

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            call_args, call_kwargs = checked_arguments(args, kwargs)
            return await func(*call_args, **call_kwargs)

        wrapper: Callable[..., Any] = async_wrapper
    else:

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            call_args, call_kwargs = checked_arguments(args, kwargs)
            return func(*call_args, **call_kwargs)

        wrapper = sync_wrapper

    setattr(wrapper, WRAPPER_MARKER, key)
    registry.mark_wrapped(key, func, wrapper)
    logger.debug("installed argument validation on %s", key)
    return cast(F, wrapper)


__all__ = ["WRAPPER_MARKER", "validate"]
