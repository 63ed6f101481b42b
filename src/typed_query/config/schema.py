"""
typed-query — codec settings schema and spec-document validation.

File: src/typed_query/config/schema.py
Last updated: 2026-10-18

Purpose
- Define authoritative codec settings defaults and strict validation rules.
- Validate spec documents (``[params]`` + optional ``[codec]``) loaded from disk.

What should be included in this file
- ``CodecSettings`` and ``UnknownNamePolicy``.
- Validation rules for known keys, types and enum-valued fields.
- Structured issues carrying a dotted field path and a message.

Functional requirements
- Validate payloads and return every issue found, not only the first.
- Unknown keys are rejected explicitly.

Non-functional requirements
- Keep rules deterministic and easy to audit.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any, Final

from typed_query.constants import LOG_FORMATS, LOG_LEVELS, SPEC_CODEC_TABLE, SPEC_PARAMS_TABLE
from typed_query.errors import SpecDefinitionError
from typed_query.kinds import ValueKind, coerce_kind


class UnknownNamePolicy(StrEnum):
    """What the codec does with a parameter name outside the specification."""

    RAISE = "raise"
    IGNORE = "ignore"


@dataclass(frozen=True, slots=True)
class CodecSettings:
    """Runtime policy knobs for ``QueryCodec`` and the CLI."""

    validate_writes: bool = True
    unknown_names: UnknownNamePolicy = UnknownNamePolicy.RAISE
    log_level: str = "WARNING"
    log_format: str = "text"

    def __post_init__(self) -> None:
        result = validate_settings(self.to_dict())
        if result.settings is None:
            raise SettingsValidationError(result.issues)
        # Normalize accepted spellings ("ignore", "debug") to canonical values.
        object.__setattr__(
            self, "unknown_names", UnknownNamePolicy(result.settings["unknown_names"])
        )
        object.__setattr__(self, "log_level", result.settings["log_level"])

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["unknown_names"] = (
            str(self.unknown_names) if isinstance(self.unknown_names, str) else self.unknown_names
        )
        return payload


SETTINGS_FIELDS: Final[tuple[str, ...]] = (
    "validate_writes",
    "unknown_names",
    "log_level",
    "log_format",
)


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


class SettingsValidationError(ValueError):
    """Raised when settings or a spec document fail strict validation."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid settings:\n{rendered}")


@dataclass(frozen=True, slots=True)
class SettingsValidationResult:
    settings: dict[str, Any] | None
    issues: tuple[ConfigValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.settings is not None and not self.issues


@dataclass(frozen=True, slots=True)
class SpecDocumentResult:
    """Validated spec document: ordered params plus the optional codec table."""

    params: dict[str, ValueKind] | None
    codec: dict[str, Any] | None
    issues: tuple[ConfigValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.params is not None and not self.issues


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[ConfigValidationIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(ConfigValidationIssue(path=path, message=message))

    def items(self) -> tuple[ConfigValidationIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def default_settings() -> CodecSettings:
    return CodecSettings()


def validate_settings(payload: Mapping[str, object] | object) -> SettingsValidationResult:
    """Validate a settings mapping; missing keys keep their defaults."""

    issues = _IssueCollector()
    normalized = _validate_settings_table(payload, "", issues)
    if normalized is None or issues.has_issues:
        return SettingsValidationResult(settings=None, issues=issues.items())
    return SettingsValidationResult(settings=normalized, issues=())


def settings_from_mapping(payload: Mapping[str, object]) -> CodecSettings:
    """Build ``CodecSettings`` from a raw mapping, raising on any issue."""

    result = validate_settings(payload)
    if result.settings is None:
        raise SettingsValidationError(result.issues)
    values = result.settings
    return CodecSettings(
        validate_writes=values["validate_writes"],
        unknown_names=UnknownNamePolicy(values["unknown_names"]),
        log_level=values["log_level"],
        log_format=values["log_format"],
    )


def merge_settings(base: CodecSettings, overrides: Mapping[str, object]) -> CodecSettings:
    """Return ``base`` with ``overrides`` applied on top (validated)."""

    merged = base.to_dict()
    merged.update(overrides)
    return settings_from_mapping(merged)


def extract_codec_table(document: Mapping[str, object]) -> dict[str, Any]:
    """Return the validated ``[codec]`` overrides of a document (empty when absent)."""

    raw_codec = document.get(SPEC_CODEC_TABLE)
    if raw_codec is None:
        return {}
    issues = _IssueCollector()
    codec = _validate_settings_table(raw_codec, SPEC_CODEC_TABLE, issues, partial=True)
    if codec is None or issues.has_issues:
        raise SettingsValidationError(issues.items())
    return codec


def validate_spec_document(payload: Mapping[str, object] | object) -> SpecDocumentResult:
    """Validate a parsed spec file (TOML, YAML or JSON payload)."""

    issues = _IssueCollector()
    if not isinstance(payload, Mapping):
        issues.add("<root>", "spec document must be an object")
        return SpecDocumentResult(params=None, codec=None, issues=issues.items())

    for key in payload:
        if key not in (SPEC_PARAMS_TABLE, SPEC_CODEC_TABLE):
            issues.add(str(key), "unknown key")

    params: dict[str, ValueKind] = {}
    raw_params = payload.get(SPEC_PARAMS_TABLE)
    if raw_params is None:
        issues.add(SPEC_PARAMS_TABLE, "section is required")
    elif not isinstance(raw_params, Mapping):
        issues.add(SPEC_PARAMS_TABLE, "expected object mapping names to kinds")
    else:
        for name, declaration in raw_params.items():
            path = f"{SPEC_PARAMS_TABLE}.{name}"
            if not isinstance(name, str) or not name:
                issues.add(path, "parameter name must be a non-empty string")
                continue
            try:
                params[name] = coerce_kind(declaration, name=name)
            except SpecDefinitionError as exc:
                issues.add(path, _strip_name_prefix(str(exc), name))

    codec: dict[str, Any] | None = None
    raw_codec = payload.get(SPEC_CODEC_TABLE)
    if raw_codec is not None:
        codec = _validate_settings_table(raw_codec, SPEC_CODEC_TABLE, issues, partial=True)

    if issues.has_issues:
        return SpecDocumentResult(params=None, codec=None, issues=issues.items())
    return SpecDocumentResult(params=params, codec=codec, issues=())


def _validate_settings_table(
    payload: Mapping[str, object] | object,
    prefix: str,
    issues: _IssueCollector,
    *,
    partial: bool = False,
) -> dict[str, Any] | None:
    if not isinstance(payload, Mapping):
        issues.add(prefix or "<root>", "expected object")
        return None

    defaults = {
        "validate_writes": True,
        "unknown_names": str(UnknownNamePolicy.RAISE),
        "log_level": "WARNING",
        "log_format": "text",
    }
    normalized: dict[str, Any] = {} if partial else dict(defaults)

    for key, value in payload.items():
        path = _join(prefix, str(key))
        if key not in SETTINGS_FIELDS:
            issues.add(path, "unknown key")
            continue
        if key == "validate_writes":
            if not isinstance(value, bool):
                issues.add(path, f"expected boolean, got {type(value).__name__}")
                continue
            normalized[key] = value
        elif key == "unknown_names":
            allowed = tuple(str(item) for item in UnknownNamePolicy)
            if not isinstance(value, str) or value not in allowed:
                issues.add(path, f"expected one of {', '.join(allowed)}, got {value!r}")
                continue
            normalized[key] = value
        elif key == "log_level":
            if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
                issues.add(path, f"expected one of {', '.join(LOG_LEVELS)}, got {value!r}")
                continue
            normalized[key] = value.upper()
        elif key == "log_format":
            if not isinstance(value, str) or value not in LOG_FORMATS:
                issues.add(path, f"expected one of {', '.join(LOG_FORMATS)}, got {value!r}")
                continue
            normalized[key] = value

    return normalized


def _join(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def _strip_name_prefix(message: str, name: str) -> str:
    marker = f"{name}: "
    return message[len(marker) :] if message.startswith(marker) else message


__all__ = [
    "SETTINGS_FIELDS",
    "CodecSettings",
    "ConfigValidationIssue",
    "SettingsValidationError",
    "SettingsValidationResult",
    "SpecDocumentResult",
    "UnknownNamePolicy",
    "default_settings",
    "extract_codec_table",
    "merge_settings",
    "settings_from_mapping",
    "validate_settings",
    "validate_spec_document",
]
