"""Process-wide side table of parameter constraint tags.

Entries are written while modules and classes are being defined and only read
once calls begin. Mutation is serialised with a lock so definitions happening
on several threads never lose a tag.
"""
from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from paramguard.constants import ConstraintTag
from paramguard.errors import DeclarationError

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True, order=True)
class DeclarationKey:
    module: str
    qualname: str
    # Separates callables sharing a qualname, such as a property getter and setter.
    line: int = 0

    @classmethod
    def for_callable(cls, func: Callable[..., Any]) -> DeclarationKey:
        target = inspect.unwrap(func)
        return cls(
            module=getattr(target, "__module__", None) or "<unknown>",
            qualname=getattr(target, "__qualname__", None) or repr(target),
            line=getattr(getattr(target, "__code__", None), "co_firstlineno", 0),
        )

    def __str__(self) -> str:
        return f"{self.module}:{self.qualname}"


class MetadataStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tags: dict[DeclarationKey, dict[int, set[ConstraintTag]]] = {}
        self._wrapped: dict[DeclarationKey, tuple[Callable[..., Any], Callable[..., Any]]] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        with self._lock:
            if not self._frozen:
                logger.debug("metadata store frozen with %d declarations", len(self._tags))
            self._frozen = True

    def tag(self, key: DeclarationKey, position: int, tag: ConstraintTag) -> None:
        with self._lock:
            if self._frozen:
                raise DeclarationError(
                    f"cannot tag parameter {position} as {tag.value}: metadata store is frozen",
                    declaration=str(key),
                )
            self._tags.setdefault(key, {}).setdefault(position, set()).add(tag)
        logger.debug("tagged %s position %d as %s", key, position, tag.value)

    def has_tag(self, key: DeclarationKey, position: int, tag: ConstraintTag) -> bool:
        return tag in self._tags.get(key, {}).get(position, ())

    def tags_for(self, key: DeclarationKey, position: int) -> frozenset[ConstraintTag]:
        return frozenset(self._tags.get(key, {}).get(position, ()))

    def positions(self, key: DeclarationKey) -> dict[int, frozenset[ConstraintTag]]:
        return {position: frozenset(tags) for position, tags in sorted(self._tags.get(key, {}).items())}

    def declarations(self) -> list[DeclarationKey]:
        return sorted(set(self._tags) | set(self._wrapped))

    def wrapper_for(self, key: DeclarationKey, func: Callable[..., Any]) -> Callable[..., Any] | None:
        """Return the wrapper already installed around ``func`` itself, if any.

        A different function under ``key`` (a module reload, or a factory
        creating a new closure) gets a fresh wrapper that replaces the entry.
        """
        entry = self._wrapped.get(key)
        if entry is None or entry[0] is not func:
            return None
        return entry[1]

    def mark_wrapped(self, key: DeclarationKey, func: Callable[..., Any], wrapper: Callable[..., Any]) -> None:
        with self._lock:
            self._wrapped[key] = (func, wrapper)

    def is_wrapped(self, key: DeclarationKey) -> bool:
        return key in self._wrapped

    def wrapped_callable(self, key: DeclarationKey) -> Callable[..., Any] | None:
        entry = self._wrapped.get(key)
        return entry[0] if entry is not None else None


_REGISTRY = MetadataStore()


def get_registry() -> MetadataStore:
    return _REGISTRY


__all__ = ["DeclarationKey", "MetadataStore", "get_registry"]
