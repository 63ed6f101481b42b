"""
typed-query — unit tests for the settings and spec loader

File: tests/unit/config/test_loader.py
Last updated: 2026-10-18

Purpose
- Validate deterministic settings loading from defaults, files and env overrides.
- Validate spec documents loaded from TOML, YAML and JSON.

What this test file should cover
- Precedence: env > file > defaults.
- Env var coercion and rejection of malformed values.
- File errors surfaced as ``ConfigLoadError``; schema errors as ``SettingsValidationError``.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from typed_query.config.loader import ConfigLoadError, load_query_spec, load_settings
from typed_query.config.schema import CodecSettings, SettingsValidationError, UnknownNamePolicy
from typed_query.kinds import NUMBER, TEXT, EnumKind

REPO_ROOT = Path(__file__).resolve().parents[3]
SAMPLE_SPECS = REPO_ROOT / "samples" / "specs"


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.mark.unit
def test_defaults_when_no_file_is_present(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    assert load_settings(environ={}) == CodecSettings()


@pytest.mark.unit
def test_default_file_in_working_directory_is_used(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write(tmp_path / "typed_query.toml", '[codec]\nunknown_names = "ignore"\n')
    monkeypatch.chdir(tmp_path)

    assert load_settings(environ={}).unknown_names is UnknownNamePolicy.IGNORE


@pytest.mark.unit
def test_precedence_env_over_file_over_defaults(tmp_path: Path) -> None:
    config = _write(
        tmp_path / "settings.toml",
        '[codec]\nvalidate_writes = false\nunknown_names = "ignore"\nlog_level = "info"\n',
    )

    from_file = load_settings(config, environ={})
    assert from_file == CodecSettings(
        validate_writes=False, unknown_names=UnknownNamePolicy.IGNORE, log_level="INFO"
    )

    from_env = load_settings(
        config,
        environ={
            "TYPED_QUERY_VALIDATE_WRITES": "yes",
            "TYPED_QUERY_LOG_FORMAT": "json",
            "UNRELATED": "1",
        },
    )
    assert from_env.validate_writes is True
    assert from_env.unknown_names is UnknownNamePolicy.IGNORE
    assert from_env.log_level == "INFO"
    assert from_env.log_format == "json"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("raw", "expected"), [("1", True), (" Off ", False), ("TRUE", True), ("n", False)]
)
def test_env_boolean_coercion(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool
) -> None:
    monkeypatch.chdir(tmp_path)
    settings = load_settings(environ={"TYPED_QUERY_VALIDATE_WRITES": raw})
    assert settings.validate_writes is expected


@pytest.mark.unit
def test_env_rejects_malformed_boolean() -> None:
    with pytest.raises(ConfigLoadError, match="TYPED_QUERY_VALIDATE_WRITES must be a boolean"):
        load_settings(environ={"TYPED_QUERY_VALIDATE_WRITES": "maybe"})


@pytest.mark.unit
def test_env_rejects_unknown_policy() -> None:
    with pytest.raises(SettingsValidationError, match="unknown_names"):
        load_settings(environ={"TYPED_QUERY_UNKNOWN_NAMES": "warn"})


@pytest.mark.unit
def test_yaml_and_json_settings_files(tmp_path: Path) -> None:
    yaml_path = _write(tmp_path / "settings.yaml", "codec:\n  log_format: json\n")
    json_path = _write(tmp_path / "settings.json", '{"codec": {"validate_writes": false}}')

    assert load_settings(yaml_path, environ={}).log_format == "json"
    assert load_settings(json_path, environ={}).validate_writes is False


@pytest.mark.unit
def test_explicit_missing_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="file not found"):
        load_settings(tmp_path / "absent.toml", environ={})


@pytest.mark.unit
@pytest.mark.parametrize(
    ("filename", "text", "message"),
    [
        ("bad.toml", "[codec\n", "invalid TOML"),
        ("bad.yaml", "codec: [unterminated\n", "invalid YAML"),
        ("bad.json", "{", "invalid JSON"),
        ("list.yaml", "- a\n- b\n", "document root must be an object"),
        ("settings.ini", "[codec]\n", "unsupported file type"),
    ],
)
def test_malformed_files_raise_config_load_error(
    tmp_path: Path, filename: str, text: str, message: str
) -> None:
    path = _write(tmp_path / filename, text)

    with pytest.raises(ConfigLoadError, match=message):
        load_settings(path, environ={})


@pytest.mark.unit
def test_empty_yaml_document_means_defaults(tmp_path: Path) -> None:
    path = _write(tmp_path / "empty.yaml", "")

    assert load_settings(path, environ={}) == CodecSettings()


@pytest.mark.unit
def test_invalid_codec_table_is_a_schema_error(tmp_path: Path) -> None:
    path = _write(tmp_path / "settings.toml", '[codec]\nunknown_names = "warn"\n')

    with pytest.raises(SettingsValidationError) as exc_info:
        load_settings(path, environ={})
    assert exc_info.value.issues[0].path == "codec.unknown_names"


@pytest.mark.unit
@pytest.mark.parametrize("filename", ["transactions.toml", "transactions.yaml"])
def test_load_sample_specs(filename: str) -> None:
    spec = load_query_spec(SAMPLE_SPECS / filename, environ={})

    assert list(spec.names) == ["term", "direction", "account", "amount"]
    assert spec.kind("term") == TEXT
    assert spec.kind("direction") == EnumKind(("in", "out", "transfer"))
    assert spec.kind("amount") == NUMBER
    assert spec.settings == CodecSettings()


@pytest.mark.unit
def test_spec_codec_table_then_env_decide_settings(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "spec.toml",
        '[params]\nq = "string"\n\n[codec]\nunknown_names = "ignore"\nvalidate_writes = false\n',
    )

    spec = load_query_spec(path, environ={"TYPED_QUERY_VALIDATE_WRITES": "true"})

    assert spec.settings.unknown_names is UnknownNamePolicy.IGNORE
    assert spec.settings.validate_writes is True


@pytest.mark.unit
def test_explicit_settings_win_over_spec_codec_table(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "spec.json", '{"params": {"q": "string"}, "codec": {"validate_writes": false}}'
    )
    explicit = CodecSettings(log_level="DEBUG")

    spec = load_query_spec(path, settings=explicit, environ={"TYPED_QUERY_LOG_LEVEL": "ERROR"})

    assert spec.settings is explicit


@pytest.mark.unit
def test_invalid_spec_document_lists_issues(tmp_path: Path) -> None:
    path = _write(tmp_path / "spec.yaml", "params:\n  amount: decimal\n  role: []\n")

    with pytest.raises(SettingsValidationError) as exc_info:
        load_query_spec(path, environ={})
    assert [item.path for item in exc_info.value.issues] == ["params.amount", "params.role"]


@pytest.mark.unit
def test_missing_spec_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="file not found"):
        load_query_spec(tmp_path / "nope.toml", environ={})
