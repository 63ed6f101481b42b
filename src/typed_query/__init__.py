"""
typed-query — schema-driven codec and validator for URL query parameters.

File: src/typed_query/__init__.py
Last updated: 2026-10-18

Purpose
- Package root. Re-exports the small public API: spec definition, kinds,
  validation, the codec and the reference query store.

Functional requirements
- Must not have side effects at import time (no config loading, no logging setup).
"""

from typed_query.codec import QueryCodec, decode_text, encode_value, format_number, parse_number
from typed_query.config.schema import CodecSettings, UnknownNamePolicy
from typed_query.errors import (
    InvalidParameterValueError,
    ParamValidationError,
    ParamValidationIssue,
    SpecDefinitionError,
    TypedQueryError,
    UnknownParameterError,
)
from typed_query.kinds import NUMBER, TEXT, EnumKind, NumericKind, TextKind, ValueKind, coerce_kind
from typed_query.registry import ParamNames, QuerySpec, define_query_spec
from typed_query.store import QueryStore, SearchParams
from typed_query.validator import (
    ParamValidationResult,
    assert_valid_params,
    is_valid_value,
    validate_params,
)

__version__ = "0.1.0"

__all__ = [
    "NUMBER",
    "TEXT",
    "CodecSettings",
    "EnumKind",
    "InvalidParameterValueError",
    "NumericKind",
    "ParamNames",
    "ParamValidationError",
    "ParamValidationIssue",
    "ParamValidationResult",
    "QueryCodec",
    "QuerySpec",
    "QueryStore",
    "SearchParams",
    "SpecDefinitionError",
    "TextKind",
    "TypedQueryError",
    "UnknownNamePolicy",
    "UnknownParameterError",
    "ValueKind",
    "__version__",
    "assert_valid_params",
    "coerce_kind",
    "decode_text",
    "define_query_spec",
    "encode_value",
    "format_number",
    "is_valid_value",
    "parse_number",
    "validate_params",
]
