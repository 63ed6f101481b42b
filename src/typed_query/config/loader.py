"""
typed-query — settings and spec-file loader.

File: src/typed_query/config/loader.py
Last updated: 2026-10-18

Purpose
- Load effective codec settings from defaults, a TOML/YAML/JSON file and env vars.
- Load a ``QuerySpec`` from a spec document on disk.

What should be included in this file
- Precedence logic: env (``TYPED_QUERY_``) > file ``[codec]`` table > defaults.
- TOML loading via ``tomllib``; YAML via ``yaml.safe_load``; JSON via ``json``.
- Deterministic environment variable coercion.

Functional requirements
- Reject malformed files and overrides with ``ConfigLoadError``.
- Reject invalid documents with structured ``SettingsValidationError`` issues.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

import yaml

from typed_query.config.schema import (
    CodecSettings,
    SettingsValidationError,
    default_settings,
    extract_codec_table,
    merge_settings,
    validate_spec_document,
)
from typed_query.constants import DEFAULT_CONFIG_FILE, ENV_PREFIX, SPEC_FILE_SUFFIXES

if TYPE_CHECKING:
    from typed_query.registry import QuerySpec

_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})

_ENV_BINDINGS: Final[dict[str, str]] = {
    f"{ENV_PREFIX}VALIDATE_WRITES": "validate_writes",
    f"{ENV_PREFIX}UNKNOWN_NAMES": "unknown_names",
    f"{ENV_PREFIX}LOG_LEVEL": "log_level",
    f"{ENV_PREFIX}LOG_FORMAT": "log_format",
}


class ConfigLoadError(ValueError):
    """Raised when a file cannot be read or an override cannot be coerced."""


def load_settings(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> CodecSettings:
    """Load effective settings with deterministic precedence: env > file > defaults.

    Without ``config_path`` the loader looks for ``typed_query.toml`` in the
    current directory and silently skips it when missing.
    """

    explicit_path = config_path is not None
    resolved_path = _resolve_config_path(config_path)
    env_map = dict(os.environ if environ is None else environ)

    settings = default_settings()
    payload = _load_document(resolved_path, required=explicit_path)
    codec_overrides = extract_codec_table(payload)
    if codec_overrides:
        settings = merge_settings(settings, codec_overrides)

    env_overrides = _collect_env_overrides(env_map)
    if env_overrides:
        settings = merge_settings(settings, env_overrides)
    return settings


def load_query_spec(
    spec_path: str | Path,
    *,
    settings: CodecSettings | None = None,
    environ: Mapping[str, str] | None = None,
) -> QuerySpec:
    """Load a ``QuerySpec`` from a TOML, YAML or JSON spec document.

    When ``settings`` is omitted the document's ``[codec]`` table (if any) and
    ``TYPED_QUERY_`` environment overrides decide the codec policy.
    """

    from typed_query.registry import define_query_spec

    path = Path(spec_path).expanduser().resolve()
    payload = _load_document(path, required=True)
    result = validate_spec_document(payload)
    if result.params is None:
        raise SettingsValidationError(result.issues)

    if settings is None:
        settings = default_settings()
        if result.codec:
            settings = merge_settings(settings, result.codec)
        env_overrides = _collect_env_overrides(dict(os.environ if environ is None else environ))
        if env_overrides:
            settings = merge_settings(settings, env_overrides)

    return define_query_spec(result.params, settings=settings)


def _resolve_config_path(config_path: str | Path | None) -> Path:
    if config_path is None:
        return (Path.cwd() / DEFAULT_CONFIG_FILE).resolve()
    return Path(config_path).expanduser().resolve()


def _load_document(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigLoadError(f"file not found: {path}")
        return {}

    suffix = path.suffix.lower()
    if suffix not in SPEC_FILE_SUFFIXES:
        raise ConfigLoadError(
            f"unsupported file type {suffix or '<none>'!r} for {path}; "
            f"expected one of {', '.join(SPEC_FILE_SUFFIXES)}"
        )

    try:
        if suffix == ".toml":
            with path.open("rb") as handle:
                parsed: object = tomllib.load(handle)
        elif suffix in {".yaml", ".yml"}:
            with path.open("r", encoding="utf-8") as handle:
                parsed = yaml.safe_load(handle)
        else:
            with path.open("r", encoding="utf-8") as handle:
                parsed = json.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"invalid YAML in {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigLoadError(f"invalid JSON in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read {path}: {exc}") from exc

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ConfigLoadError(f"document root must be an object: {path}")
    return parsed


def _collect_env_overrides(environ: Mapping[str, str]) -> dict[str, object]:
    overrides: dict[str, object] = {}
    for env_name in sorted(_ENV_BINDINGS):
        raw = environ.get(env_name)
        if raw is None:
            continue
        field = _ENV_BINDINGS[env_name]
        if field == "validate_writes":
            overrides[field] = _coerce_bool(raw, env_name)
        else:
            overrides[field] = raw.strip()
    return overrides


def _coerce_bool(raw: str, env_name: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _BOOLEAN_TRUE:
        return True
    if lowered in _BOOLEAN_FALSE:
        return False
    raise ConfigLoadError(f"{env_name} must be a boolean, got {raw!r}")


__all__ = [
    "ConfigLoadError",
    "load_query_spec",
    "load_settings",
]
