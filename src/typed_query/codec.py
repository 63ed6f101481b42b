"""
typed-query — typed accessors over a query-string store.

File: src/typed_query/codec.py
Last updated: 2026-10-18

Purpose
- Translate between kind-typed values and their text form on the wire.
- Read, write and delete declared parameters against a ``QueryStore``.

What should be included in this file
- ``encode_value`` / ``decode_text`` and the canonical number format.
- ``QueryCodec`` with get/get_all/set/append/has/delete/clear_all plus read/update.

Functional requirements
- Malformed stored text reads as absent (``get``) or is dropped (``get_all``); never raises.
- Unknown names follow ``CodecSettings.unknown_names``.
- Writes are validated unless ``CodecSettings.validate_writes`` is off.

Non-functional requirements
- Stateless beyond the bound spec and settings; safe to share across stores.
"""

from __future__ import annotations

import logging
import math
import numbers
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Final

from typed_query.config.schema import CodecSettings, UnknownNamePolicy
from typed_query.constants import (
    INTEGRAL_FLOAT_LIMIT,
    NEGATIVE_INFINITY_TEXT,
    POSITIVE_INFINITY_TEXT,
)
from typed_query.errors import InvalidParameterValueError, UnknownParameterError
from typed_query.kinds import EnumKind, NumericKind, TextKind, ValueKind
from typed_query.validator import is_number, is_valid_value

if TYPE_CHECKING:
    from typed_query.registry import QuerySpec
    from typed_query.store import QueryStore

_logger = logging.getLogger(__name__)

_INTEGER_RE: Final[re.Pattern[str]] = re.compile(r"[+-]?\d+", re.ASCII)
_DECIMAL_RE: Final[re.Pattern[str]] = re.compile(
    r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII
)
_PREFIXED_INTEGER_RE: Final[re.Pattern[str]] = re.compile(
    r"0(?:[xX][0-9a-fA-F]+|[bB][01]+|[oO][0-7]+)", re.ASCII
)
_INFINITIES: Final[dict[str, float]] = {
    POSITIVE_INFINITY_TEXT: math.inf,
    "+" + POSITIVE_INFINITY_TEXT: math.inf,
    NEGATIVE_INFINITY_TEXT: -math.inf,
}


def format_number(value: numbers.Real) -> str:
    """Render a number in canonical decimal form (``100.0`` -> ``"100"``)."""

    if isinstance(value, numbers.Integral):
        try:
            return str(int(value))
        except ValueError:
            # Past the int string-conversion limit, so also past float range.
            return POSITIVE_INFINITY_TEXT if value > 0 else NEGATIVE_INFINITY_TEXT
    number = float(value)
    if math.isinf(number):
        return POSITIVE_INFINITY_TEXT if number > 0 else NEGATIVE_INFINITY_TEXT
    if number.is_integer() and abs(number) < INTEGRAL_FLOAT_LIMIT:
        return str(int(number))
    return repr(number)


def parse_number(raw: str) -> int | float | None:
    """Parse number text the way a browser's ``Number()`` does; ``None`` for NaN.

    Blank text reads as ``0``; unsigned ``0x``/``0b``/``0o`` literals are accepted.
    """

    text = raw.strip()
    if not text:
        return 0
    if _PREFIXED_INTEGER_RE.fullmatch(text):
        return int(text, 0)
    if text in _INFINITIES:
        return _INFINITIES[text]
    if _INTEGER_RE.fullmatch(text):
        try:
            return int(text)
        except ValueError:
            # Beyond the interpreter's int string-conversion limit.
            return float(text)
    if _DECIMAL_RE.fullmatch(text):
        return float(text)
    return None


def encode_value(kind: ValueKind, value: object) -> str:
    """Encode ``value`` to wire text; does not validate."""

    if isinstance(kind, NumericKind) and is_number(value):
        return format_number(value)  # type: ignore[arg-type]
    if isinstance(value, str):
        return value
    return str(value)


def decode_text(kind: ValueKind, raw: str) -> Any | None:
    """Decode wire text per ``kind``; ``None`` when the text is not a member."""

    if isinstance(kind, TextKind):
        return raw
    if isinstance(kind, NumericKind):
        return parse_number(raw)
    if isinstance(kind, EnumKind):
        return raw if raw in kind.values else None
    return None


class QueryCodec:
    """Typed read/write helpers bound to one ``QuerySpec``."""

    __slots__ = ("_settings", "_spec")

    def __init__(self, spec: QuerySpec, settings: CodecSettings | None = None) -> None:
        self._spec = spec
        self._settings = settings if settings is not None else CodecSettings()

    @property
    def spec(self) -> QuerySpec:
        return self._spec

    @property
    def settings(self) -> CodecSettings:
        return self._settings

    def get(self, store: QueryStore, name: str) -> Any | None:
        """Return the first decoded value for ``name``, or ``None``."""

        if not self._accepts_name(name, "get"):
            return None
        raw = store.get(name)
        if raw is None:
            return None
        value = decode_text(self._spec.kind(name), raw)
        if value is None:
            _logger.debug(
                "ignoring malformed query value", extra={"param": name, "raw_value": raw}
            )
        return value

    def get_all(self, store: QueryStore, name: str) -> list[Any]:
        """Return every decodable value for ``name`` in store order."""

        if not self._accepts_name(name, "get_all"):
            return []
        kind = self._spec.kind(name)
        decoded: list[Any] = []
        for raw in store.get_all(name):
            value = decode_text(kind, raw)
            if value is None:
                _logger.debug(
                    "dropping malformed query value", extra={"param": name, "raw_value": raw}
                )
                continue
            decoded.append(value)
        return decoded

    def set(self, store: QueryStore, name: str, value: object) -> None:
        """Replace every value for ``name`` with ``value``."""

        if not self._accepts_name(name, "set"):
            return
        store.set(name, self._encode_for_write(name, value))

    def append(self, store: QueryStore, name: str, value: object) -> None:
        """Add ``value`` for ``name`` after any existing values."""

        if not self._accepts_name(name, "append"):
            return
        store.append(name, self._encode_for_write(name, value))

    def has(self, store: QueryStore, name: str) -> bool:
        if not self._accepts_name(name, "has"):
            return False
        return store.has(name)

    def delete(self, store: QueryStore, name: str, value: object | None = None) -> None:
        """Remove entries for ``name``: all of them, or only those equal to ``value``."""

        if not self._accepts_name(name, "delete"):
            return
        if value is None:
            store.delete(name)
        else:
            store.delete(name, encode_value(self._spec.kind(name), value))

    def clear_all(self, store: QueryStore) -> None:
        """Remove every declared parameter; undeclared keys are left alone."""

        for name in self._spec.names:
            store.delete(name)

    def read(self, store: QueryStore) -> dict[str, Any | None]:
        """Return ``get`` for every declared name, in declaration order."""

        return {name: self.get(store, name) for name in self._spec.names}

    def update(self, store: QueryStore, values: Mapping[str, object]) -> None:
        """Write several parameters; list/tuple values replace the key with each element.

        Every value is checked before the store is touched, so a rejected value
        leaves the store unchanged.
        """

        planned: list[tuple[str, list[str] | str]] = []
        for name, value in values.items():
            if not self._accepts_name(name, "update"):
                continue
            if isinstance(value, (list, tuple)):
                planned.append((name, [self._encode_for_write(name, item) for item in value]))
            else:
                planned.append((name, self._encode_for_write(name, value)))

        for name, encoded in planned:
            if isinstance(encoded, list):
                store.delete(name)
                for item in encoded:
                    store.append(name, item)
            else:
                store.set(name, encoded)

    def _accepts_name(self, name: object, operation: str) -> bool:
        if self._spec.is_valid_name(name):
            return True
        if self._settings.unknown_names is UnknownNamePolicy.IGNORE:
            _logger.warning(
                "ignoring unknown query parameter",
                extra={"param": repr(name), "operation": operation},
            )
            return False
        raise UnknownParameterError(name, self._spec.names)

    def _encode_for_write(self, name: str, value: object) -> str:
        kind = self._spec.kind(name)
        if self._settings.validate_writes and not is_valid_value(kind, value):
            raise InvalidParameterValueError(name, value, kind.describe())
        return encode_value(kind, value)

    def __repr__(self) -> str:
        return f"QueryCodec(names={list(self._spec.names)!r}, settings={self._settings!r})"


__all__ = [
    "QueryCodec",
    "decode_text",
    "encode_value",
    "format_number",
    "parse_number",
]
