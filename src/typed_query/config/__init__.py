"""
typed-query config package public API.

File: src/typed_query/config/__init__.py
Last updated: 2026-10-18

Purpose
- Export settings loading/validation entrypoints and public error types.

Functional requirements
- Support loading from ``typed_query.toml`` (or YAML/JSON) + ``TYPED_QUERY_`` env overrides.
- Fail fast with clear structured validation/load errors.
"""

from typed_query.config.loader import (
    ConfigLoadError,
    load_query_spec,
    load_settings,
)
from typed_query.config.schema import (
    SETTINGS_FIELDS,
    CodecSettings,
    ConfigValidationIssue,
    SettingsValidationError,
    SettingsValidationResult,
    SpecDocumentResult,
    UnknownNamePolicy,
    default_settings,
    extract_codec_table,
    merge_settings,
    settings_from_mapping,
    validate_settings,
    validate_spec_document,
)

__all__ = [
    "SETTINGS_FIELDS",
    "CodecSettings",
    "ConfigLoadError",
    "ConfigValidationIssue",
    "SettingsValidationError",
    "SettingsValidationResult",
    "SpecDocumentResult",
    "UnknownNamePolicy",
    "default_settings",
    "extract_codec_table",
    "load_query_spec",
    "load_settings",
    "merge_settings",
    "settings_from_mapping",
    "validate_settings",
    "validate_spec_document",
]
