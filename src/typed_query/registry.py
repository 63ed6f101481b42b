"""
typed-query — query specification registry.

File: src/typed_query/registry.py
Last updated: 2026-10-18

Purpose
- Hold the immutable name -> kind declaration and every view derived from it.

What should be included in this file
- ``QuerySpec``: ordered names, name predicate/narrowing, value predicate, bound codec.
- ``ParamNames``: ordered names usable both as a sequence and as attributes.
- ``define_query_spec``: the public constructor.

Functional requirements
- Names keep declaration order and never change after construction.
- ``is_valid_name`` and ``is_valid_value`` never raise.
- ``resolve`` and ``kind`` raise ``UnknownParameterError`` for undeclared names.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import overload

from typed_query.codec import QueryCodec
from typed_query.config.schema import CodecSettings
from typed_query.errors import SpecDefinitionError, UnknownParameterError
from typed_query.kinds import ValueKind, coerce_kind
from typed_query.validator import is_valid_value


class ParamNames(Sequence[str]):
    """Declared parameter names in order, also reachable as attributes.

    ``names.amount == "amount"``; undeclared attributes raise ``AttributeError``.
    Names that collide with sequence methods (``index``, ``count``) are only
    reachable by iteration or ``QuerySpec.resolve``.
    """

    __slots__ = ("_lookup", "_names")

    def __init__(self, names: Sequence[str]) -> None:
        self._names = tuple(names)
        self._lookup = frozenset(self._names)

    @overload
    def __getitem__(self, index: int) -> str: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[str, ...]: ...

    def __getitem__(self, index: int | slice) -> str | tuple[str, ...]:
        return self._names[index]

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __contains__(self, candidate: object) -> bool:
        return candidate in self._lookup

    def __getattr__(self, attr: str) -> str:
        if not attr.startswith("_") and attr in self._lookup:
            return attr
        raise AttributeError(f"{attr!r} is not a declared query parameter")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ParamNames):
            return self._names == other._names
        if isinstance(other, (tuple, list)):
            return list(self._names) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._names)

    def __repr__(self) -> str:
        return f"ParamNames{self._names!r}"


class QuerySpec:
    """Immutable query-parameter specification and its derived helpers."""

    __slots__ = ("_codec", "_kinds", "_names", "_settings")

    def __init__(
        self,
        declaration: Mapping[str, object],
        *,
        settings: CodecSettings | None = None,
    ) -> None:
        if not isinstance(declaration, Mapping):
            raise SpecDefinitionError(
                f"query specification must be a mapping, got {type(declaration).__name__}"
            )
        kinds: dict[str, ValueKind] = {}
        for name, raw_kind in declaration.items():
            if not isinstance(name, str) or not name:
                raise SpecDefinitionError(
                    f"parameter names must be non-empty strings, got {name!r}"
                )
            kinds[name] = coerce_kind(raw_kind, name=name)

        self._kinds: Mapping[str, ValueKind] = MappingProxyType(kinds)
        self._names = ParamNames(list(kinds))
        self._settings = settings if settings is not None else CodecSettings()
        self._codec = QueryCodec(self, self._settings)

    @property
    def spec(self) -> Mapping[str, ValueKind]:
        """Read-only view of the declaration."""
        return self._kinds

    @property
    def names(self) -> ParamNames:
        return self._names

    @property
    def names_list(self) -> tuple[str, ...]:
        return tuple(self._names)

    @property
    def settings(self) -> CodecSettings:
        return self._settings

    @property
    def codec(self) -> QueryCodec:
        return self._codec

    def is_valid_name(self, candidate: object) -> bool:
        return isinstance(candidate, str) and candidate in self._kinds

    def resolve(self, name: object) -> str:
        """Narrow an arbitrary value to a declared name, or raise ``UnknownParameterError``."""

        if not self.is_valid_name(name):
            raise UnknownParameterError(name, self._names)
        return name  # type: ignore[return-value]

    def kind(self, name: str) -> ValueKind:
        try:
            return self._kinds[name]
        except (KeyError, TypeError):
            raise UnknownParameterError(name, self._names) from None

    def is_valid_value(self, name: object, value: object) -> bool:
        """Return whether ``value`` fits the kind of ``name``; ``False`` for unknown names."""

        if not self.is_valid_name(name):
            return False
        return is_valid_value(self._kinds[name], value)  # type: ignore[index]

    def with_settings(self, settings: CodecSettings) -> QuerySpec:
        return QuerySpec(self._kinds, settings=settings)

    def __len__(self) -> int:
        return len(self._kinds)

    def __contains__(self, candidate: object) -> bool:
        return self.is_valid_name(candidate)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __repr__(self) -> str:
        rendered = ", ".join(f"{name}: {kind.label}" for name, kind in self._kinds.items())
        return f"QuerySpec({{{rendered}}})"


def define_query_spec(
    declaration: Mapping[str, object],
    *,
    settings: CodecSettings | None = None,
) -> QuerySpec:
    """Build a ``QuerySpec``.

    >>> q = define_query_spec({"term": str, "amount": float, "direction": ["in", "out"]})
    >>> list(q.names)
    ['term', 'amount', 'direction']
    >>> q.is_valid_value("direction", "sideways")
    False
    """

    return QuerySpec(declaration, settings=settings)


__all__ = ["ParamNames", "QuerySpec", "define_query_spec"]
