"""
typed-query — value kinds.

File: src/typed_query/kinds.py
Last updated: 2026-10-18

Purpose
- Define the closed set of value domains a query parameter may declare.

What should be included in this file
- ``TextKind``, ``NumericKind`` and ``EnumKind`` variants and the ``ValueKind`` union.
- ``coerce_kind`` turning declaration shorthand (``str``, ``float``, literal lists,
  spec-file tags) into a variant.

Functional requirements
- Enumerations are non-empty, hold distinct ``str`` literals and keep declaration order.
- Malformed declarations raise ``SpecDefinitionError`` naming the offending parameter.

Non-functional requirements
- Variants are immutable and hashable so specifications can be shared freely.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Final, TypeAlias

from typed_query.constants import NUMERIC_KIND_TAGS, TEXT_KIND_TAGS
from typed_query.errors import SpecDefinitionError


@dataclass(frozen=True, slots=True)
class TextKind:
    """Free-form text: every ``str`` is a member."""

    @property
    def label(self) -> str:
        return "string"

    def describe(self) -> str:
        return "a string"


@dataclass(frozen=True, slots=True)
class NumericKind:
    """Real numbers, written in canonical decimal form on the wire."""

    @property
    def label(self) -> str:
        return "number"

    def describe(self) -> str:
        return "a number (NaN is rejected)"


@dataclass(frozen=True, slots=True)
class EnumKind:
    """Fixed, ordered set of text literals."""

    values: tuple[str, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.values, tuple):
            raise SpecDefinitionError("enumeration values must be a tuple of strings")
        if not self.values:
            raise SpecDefinitionError("enumeration must declare at least one value")
        seen: set[str] = set()
        for item in self.values:
            if not isinstance(item, str):
                raise SpecDefinitionError(
                    f"enumeration values must be strings, got {type(item).__name__}"
                )
            if item in seen:
                raise SpecDefinitionError(f"duplicate enumeration value {item!r}")
            seen.add(item)

    @classmethod
    def of(cls, values: Iterable[str]) -> EnumKind:
        return cls(tuple(values))

    @property
    def label(self) -> str:
        return "enum[" + ", ".join(self.values) + "]"

    def describe(self) -> str:
        return "one of " + ", ".join(repr(item) for item in self.values)

    def __contains__(self, candidate: object) -> bool:
        return isinstance(candidate, str) and candidate in self.values


ValueKind: TypeAlias = TextKind | NumericKind | EnumKind

TEXT: Final[TextKind] = TextKind()
NUMBER: Final[NumericKind] = NumericKind()


def coerce_kind(declaration: object, *, name: str = "<param>") -> ValueKind:
    """Turn a declaration shorthand into a ``ValueKind``.

    Accepted forms: a ``ValueKind`` instance, the ``str`` type, the ``int`` or
    ``float`` type, a kind tag such as ``"string"`` or ``"number"``, or a
    non-string sequence of string literals for an enumeration.
    """

    if isinstance(declaration, (TextKind, NumericKind, EnumKind)):
        return declaration
    if declaration is str:
        return TEXT
    if declaration is int or declaration is float:
        return NUMBER
    if isinstance(declaration, str):
        tag = declaration.strip().lower()
        if tag in TEXT_KIND_TAGS:
            return TEXT
        if tag in NUMERIC_KIND_TAGS:
            return NUMBER
        raise SpecDefinitionError(
            f"{name}: unknown kind tag {declaration!r}; "
            "use 'string', 'number' or a list of allowed values"
        )
    if isinstance(declaration, (set, frozenset)):
        raise SpecDefinitionError(
            f"{name}: enumeration values must be ordered (use a list or tuple)"
        )
    if isinstance(declaration, Sequence) and not isinstance(declaration, (bytes, bytearray)):
        try:
            return EnumKind(tuple(declaration))
        except SpecDefinitionError as exc:
            raise SpecDefinitionError(f"{name}: {exc}") from exc
    raise SpecDefinitionError(
        f"{name}: unsupported declaration {declaration!r}; "
        "expected str, float, a kind tag or a list of string literals"
    )


__all__ = [
    "NUMBER",
    "TEXT",
    "EnumKind",
    "NumericKind",
    "TextKind",
    "ValueKind",
    "coerce_kind",
]
