"""
typed-query — query-string store contract and reference implementation.

File: src/typed_query/store.py
Last updated: 2026-10-18

Purpose
- Describe the ordered, multi-valued text store the codec reads and writes.
- Ship ``SearchParams``, a store with browser ``URLSearchParams`` semantics.

Functional requirements
- ``set`` replaces the first occurrence in place and drops later ones.
- ``delete`` removes every entry for a key, or only entries equal to a value.
- Parsing and serialization delegate percent-encoding to ``urllib.parse``.

Non-functional requirements
- Operations are linear in the number of stored pairs; no hidden indexing.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Protocol, runtime_checkable
from urllib.parse import parse_qsl, urlencode


@runtime_checkable
class QueryStore(Protocol):
    """Minimal store contract consumed by ``QueryCodec``."""

    def get(self, key: str) -> str | None: ...

    def get_all(self, key: str) -> list[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def append(self, key: str, value: str) -> None: ...

    def has(self, key: str) -> bool: ...

    def delete(self, key: str, value: str | None = None) -> None: ...


class SearchParams:
    """Ordered list of ``(key, value)`` text pairs."""

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        self._pairs: list[tuple[str, str]] = []
        for key, value in pairs:
            self._pairs.append((_require_text(key, "key"), _require_text(value, "value")))

    @classmethod
    def parse(cls, query: str) -> SearchParams:
        """Parse ``key=value&...`` text; a leading ``?`` is ignored, blank values are kept."""

        text = query[1:] if query.startswith("?") else query
        return cls(parse_qsl(text, keep_blank_values=True))

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> SearchParams:
        return cls(pairs)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str | Iterable[str]]) -> SearchParams:
        """Build a store from ``{key: value}`` or ``{key: [values...]}``, e.g. ``parse_qs`` output."""

        pairs: list[tuple[str, str]] = []
        for key, raw in mapping.items():
            if isinstance(raw, str):
                pairs.append((key, raw))
                continue
            pairs.extend((key, item) for item in raw)
        return cls(pairs)

    def get(self, key: str) -> str | None:
        for item_key, item_value in self._pairs:
            if item_key == key:
                return item_value
        return None

    def get_all(self, key: str) -> list[str]:
        return [item_value for item_key, item_value in self._pairs if item_key == key]

    def set(self, key: str, value: str) -> None:
        entry = (_require_text(key, "key"), _require_text(value, "value"))
        updated: list[tuple[str, str]] = []
        replaced = False
        for pair in self._pairs:
            if pair[0] != key:
                updated.append(pair)
            elif not replaced:
                updated.append(entry)
                replaced = True
        if not replaced:
            updated.append(entry)
        self._pairs = updated

    def append(self, key: str, value: str) -> None:
        self._pairs.append((_require_text(key, "key"), _require_text(value, "value")))

    def has(self, key: str) -> bool:
        return any(item_key == key for item_key, _ in self._pairs)

    def delete(self, key: str, value: str | None = None) -> None:
        if value is None:
            self._pairs = [pair for pair in self._pairs if pair[0] != key]
        else:
            self._pairs = [pair for pair in self._pairs if pair != (key, value)]

    def keys(self) -> list[str]:
        """Distinct keys in first-seen order."""

        seen: dict[str, None] = {}
        for key, _ in self._pairs:
            seen.setdefault(key, None)
        return list(seen)

    def items(self) -> list[tuple[str, str]]:
        return list(self._pairs)

    def copy(self) -> SearchParams:
        return SearchParams(self._pairs)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(list(self._pairs))

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SearchParams):
            return NotImplemented
        return self._pairs == other._pairs

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return urlencode(self._pairs)

    def __repr__(self) -> str:
        return f"SearchParams({self._pairs!r})"


def _require_text(value: object, field: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"query {field} must be str, got {type(value).__name__}")
    return value


__all__ = ["QueryStore", "SearchParams"]
