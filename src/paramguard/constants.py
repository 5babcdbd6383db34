from __future__ import annotations

from enum import Enum


class ConstraintTag(str, Enum):
    OPTIONAL = "optional"
    NULL_TO_UNDEFINED = "null_to_undefined"
    NOT_EMPTY = "not_empty"


# Printable names used in mismatch messages.
ABSENT_TYPE_NAME = "absent"
NULL_TYPE_NAME = "None"
UNKNOWN_TYPE_NAME = "unknown type"

NON_EMPTY_TEXT = "non-empty string"
NON_EMPTY_SEQUENCE = "non-empty sequence"

# First positional parameter names treated as the method receiver.
RECEIVER_NAMES = ("self", "cls")

ENV_ENABLED = "PARAMGUARD_ENABLED"
ENV_FREEZE_ON_FIRST_CALL = "PARAMGUARD_FREEZE_ON_FIRST_CALL"

EXIT_SUCCESS = 0
EXIT_INTERNAL_ERROR = 2


class _Absent:
    """Marker for a parameter slot with no supplied value, distinct from ``None``."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "<absent>"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()
