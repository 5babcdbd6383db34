from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

ERROR_CODE_TYPE_MISMATCH = "TYPE_MISMATCH"
ERROR_CODE_CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
ERROR_CODE_DECLARATION_ERROR = "DECLARATION_ERROR"


@dataclass(slots=True, frozen=True)
class ValidationIssue:
    code: str
    message: str
    position: int | None = None
    declaration: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }
        if self.position is not None:
            payload["position"] = self.position
        if self.declaration is not None:
            payload["declaration"] = self.declaration
        return payload


class ParamguardError(Exception):
    """Base class for every error raised by paramguard.

    Catch ``ArgumentTypeMismatch``/``ConstraintViolation`` for bad caller input
    and ``DeclarationError`` for an incorrectly declared API.
    """

    def __init__(self, issue: ValidationIssue) -> None:
        super().__init__(issue.message)
        self.issue = issue

    @property
    def code(self) -> str:
        return self.issue.code


class ArgumentTypeMismatch(ParamguardError, TypeError):
    def __init__(self, position: int, expected: str, actual: str, declaration: str | None = None) -> None:
        super().__init__(
            ValidationIssue(
                code=ERROR_CODE_TYPE_MISMATCH,
                message=f"parameter {position} shall be of type {expected} but is of type {actual}",
                position=position,
                declaration=declaration,
                details={"expected": expected, "actual": actual},
            )
        )
        self.position = position
        self.expected = expected
        self.actual = actual


class ConstraintViolation(ParamguardError, ValueError):
    def __init__(self, position: int, constraint: str, declaration: str | None = None) -> None:
        super().__init__(
            ValidationIssue(
                code=ERROR_CODE_CONSTRAINT_VIOLATION,
                message=f"parameter {position} shall be a {constraint}",
                position=position,
                declaration=declaration,
                details={"constraint": constraint},
            )
        )
        self.position = position
        self.constraint = constraint


class DeclarationError(ParamguardError, RuntimeError):
    def __init__(self, message: str, declaration: str | None = None, **details: Any) -> None:
        super().__init__(
            ValidationIssue(
                code=ERROR_CODE_DECLARATION_ERROR,
                message=message,
                declaration=declaration,
                details=details,
            )
        )


__all__ = [
    "ERROR_CODE_CONSTRAINT_VIOLATION",
    "ERROR_CODE_DECLARATION_ERROR",
    "ERROR_CODE_TYPE_MISMATCH",
    "ArgumentTypeMismatch",
    "ConstraintViolation",
    "DeclarationError",
    "ParamguardError",
    "ValidationIssue",
]
