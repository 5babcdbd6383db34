"""Declarative runtime argument validation.

Decorate a callable with ``@validate`` and tag individual parameters with
``@optional``, ``@null_to_undefined`` and ``@not_empty``; every call is then
checked against the parameter annotations before the body runs.
"""
from __future__ import annotations

import logging

from paramguard.annotators import not_empty, null_to_undefined, optional
from paramguard.constants import ABSENT, ConstraintTag
from paramguard.descriptors import AnyType, NamedType, PrimitiveKind, PrimitiveType, TypeDescriptor
from paramguard.errors import (
    ArgumentTypeMismatch,
    ConstraintViolation,
    DeclarationError,
    ParamguardError,
    ValidationIssue,
)
from paramguard.interceptor import validate
from paramguard.introspection import SignatureIntrospector, TypeIntrospector, get_introspector, set_introspector
from paramguard.registry import DeclarationKey, MetadataStore, get_registry
from paramguard.settings import Settings, configure, get_settings, reset_settings

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ABSENT",
    "AnyType",
    "ArgumentTypeMismatch",
    "ConstraintTag",
    "ConstraintViolation",
    "DeclarationError",
    "DeclarationKey",
    "MetadataStore",
    "NamedType",
    "ParamguardError",
    "PrimitiveKind",
    "PrimitiveType",
    "Settings",
    "SignatureIntrospector",
    "TypeDescriptor",
    "TypeIntrospector",
    "ValidationIssue",
    "__version__",
    "configure",
    "get_introspector",
    "get_registry",
    "get_settings",
    "not_empty",
    "null_to_undefined",
    "optional",
    "reset_settings",
    "set_introspector",
    "validate",
]
