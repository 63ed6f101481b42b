"""Exception taxonomy shared by the registry, codec and config layers."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


class TypedQueryError(Exception):
    """Base class for every error raised by ``typed_query``."""


class SpecDefinitionError(TypedQueryError, ValueError):
    """Raised when a query specification declaration is malformed."""


class UnknownParameterError(TypedQueryError, LookupError):
    """Raised when a parameter name is not part of the specification."""

    def __init__(self, name: object, known: Sequence[str] = ()) -> None:
        self.name = name
        self.known = tuple(known)
        if self.known:
            hint = ", ".join(repr(item) for item in self.known)
            message = f"unknown query parameter {name!r}; expected one of: {hint}"
        else:
            message = f"unknown query parameter {name!r}; specification is empty"
        super().__init__(message)

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidParameterValueError(TypedQueryError, ValueError):
    """Raised when a value written through the codec is outside its kind."""

    def __init__(self, name: str, value: object, expected: str) -> None:
        self.name = name
        self.value = value
        self.expected = expected
        super().__init__(f"invalid value {value!r} for query parameter {name!r}: expected {expected}")


@dataclass(frozen=True, slots=True)
class ParamValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


class ParamValidationError(TypedQueryError, ValueError):
    """Raised when bulk parameter validation fails."""

    def __init__(self, issues: Sequence[ParamValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid query parameters:\n{rendered}")


__all__ = [
    "InvalidParameterValueError",
    "ParamValidationError",
    "ParamValidationIssue",
    "SpecDefinitionError",
    "TypedQueryError",
    "UnknownParameterError",
]
