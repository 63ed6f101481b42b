"""
typed-query — end-to-end smoke test

File: tests/smoke/test_end_to_end.py
Last updated: 2026-10-18

Purpose
- Exercise the public API from a spec file on disk through a full read/write cycle.
"""

from __future__ import annotations

from pathlib import Path

import pytest

import typed_query
from typed_query import (
    CodecSettings,
    InvalidParameterValueError,
    ParamValidationError,
    SearchParams,
    UnknownParameterError,
    assert_valid_params,
    validate_params,
)
from typed_query.config import load_query_spec

SPEC_PATH = Path(__file__).resolve().parents[2] / "samples" / "specs" / "transactions.yaml"


@pytest.mark.smoke
def test_transactions_page_round_trip() -> None:
    spec = load_query_spec(SPEC_PATH, environ={})
    helpers = spec.codec

    incoming = SearchParams.parse("?page=3&direction=in&amount=250&direction=transfer&term=rent")
    state = helpers.read(incoming)
    assert state == {"term": "rent", "direction": "in", "account": None, "amount": 250}
    assert helpers.get_all(incoming, "direction") == ["in", "transfer"]

    candidate = {"account": "tax", "amount": 99.5, "direction": ["out"]}
    checked = assert_valid_params(spec, candidate)
    helpers.update(incoming, checked)
    assert str(incoming) == "page=3&amount=99.5&term=rent&direction=out&account=tax"

    incoming.set("account", "offshore")
    assert helpers.get(incoming, "account") is None

    helpers.clear_all(incoming)
    assert str(incoming) == "page=3"


@pytest.mark.smoke
def test_rejections_surface_as_typed_errors() -> None:
    spec = load_query_spec(SPEC_PATH, environ={})
    store = SearchParams()

    with pytest.raises(InvalidParameterValueError):
        spec.codec.set(store, spec.names.direction, "sideways")
    with pytest.raises(UnknownParameterError):
        spec.codec.set(store, "page", "1")
    with pytest.raises(ParamValidationError) as exc_info:
        assert_valid_params(spec, {"amount": float("nan"), "page": 1})

    assert [item.path for item in exc_info.value.issues] == ["amount", "page"]
    assert not validate_params(spec, {"direction": "up"}).is_valid
    assert len(store) == 0

    trusting = spec.with_settings(CodecSettings(validate_writes=False))
    trusting.codec.set(store, "direction", "sideways")
    assert str(store) == "direction=sideways"


@pytest.mark.smoke
def test_public_api_is_exported() -> None:
    for name in typed_query.__all__:
        assert hasattr(typed_query, name)
    assert typed_query.__version__ == "0.1.0"
