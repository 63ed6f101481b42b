"""Unit tests for value kinds and declaration coercion."""

from __future__ import annotations

import pytest

from typed_query.errors import SpecDefinitionError
from typed_query.kinds import NUMBER, TEXT, EnumKind, NumericKind, TextKind, coerce_kind


@pytest.mark.unit
@pytest.mark.parametrize(
    ("declaration", "expected"),
    [
        (str, TEXT),
        (float, NUMBER),
        (int, NUMBER),
        ("string", TEXT),
        ("Text", TEXT),
        (" number ", NUMBER),
        ("numeric", NUMBER),
        (TextKind(), TEXT),
        (NumericKind(), NUMBER),
    ],
)
def test_coerce_kind_accepts_scalar_shorthand(declaration: object, expected: object) -> None:
    assert coerce_kind(declaration) == expected


@pytest.mark.unit
def test_coerce_kind_builds_ordered_enumerations() -> None:
    kind = coerce_kind(["in", "out", "transfer"])

    assert isinstance(kind, EnumKind)
    assert kind.values == ("in", "out", "transfer")
    assert coerce_kind(("b", "a")) == EnumKind(("b", "a"))
    assert coerce_kind(kind) is kind


@pytest.mark.unit
@pytest.mark.parametrize(
    ("declaration", "fragment"),
    [
        ([], "at least one value"),
        (["a", "a"], "duplicate enumeration value 'a'"),
        (["a", 1], "must be strings"),
        ({"a", "b"}, "must be ordered"),
        ("boolean", "unknown kind tag"),
        (bool, "unsupported declaration"),
        (b"ab", "unsupported declaration"),
        ({"a": 1}, "unsupported declaration"),
        (None, "unsupported declaration"),
    ],
)
def test_coerce_kind_rejects_malformed_declarations(declaration: object, fragment: str) -> None:
    with pytest.raises(SpecDefinitionError, match="role") as exc_info:
        coerce_kind(declaration, name="role")
    assert fragment in str(exc_info.value)


@pytest.mark.unit
def test_enum_kind_validates_on_direct_construction() -> None:
    with pytest.raises(SpecDefinitionError):
        EnumKind(())
    with pytest.raises(SpecDefinitionError):
        EnumKind(["a"])  # type: ignore[arg-type]
    assert EnumKind.of(iter(["x", "y"])).values == ("x", "y")


@pytest.mark.unit
def test_kind_labels_and_membership() -> None:
    roles = EnumKind(("admin", "user"))

    assert TEXT.label == "string"
    assert NUMBER.label == "number"
    assert roles.label == "enum[admin, user]"
    assert roles.describe() == "one of 'admin', 'user'"
    assert "admin" in roles
    assert "Admin" not in roles
    assert 1 not in roles


@pytest.mark.unit
def test_kinds_are_hashable_and_compare_by_value() -> None:
    assert hash(EnumKind(("a",))) == hash(EnumKind(("a",)))
    assert {TEXT, TextKind(), NUMBER} == {TEXT, NUMBER}
