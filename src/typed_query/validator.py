"""Value-domain checks for declared query parameters."""

from __future__ import annotations

import math
import numbers
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from typed_query.errors import ParamValidationError, ParamValidationIssue
from typed_query.kinds import EnumKind, NumericKind, TextKind, ValueKind

if TYPE_CHECKING:
    from typed_query.registry import QuerySpec


def is_valid_value(kind: ValueKind, value: object) -> bool:
    """Return whether ``value`` belongs to the domain of ``kind``. Never raises."""

    if isinstance(kind, TextKind):
        return isinstance(value, str)
    if isinstance(kind, NumericKind):
        return is_number(value)
    if isinstance(kind, EnumKind):
        return isinstance(value, str) and value in kind.values
    return False


def is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    if isinstance(value, numbers.Integral):
        return True
    try:
        return not math.isnan(value)
    except OverflowError:
        # Rationals beyond float range have no wire form.
        return False


@dataclass(frozen=True, slots=True)
class ParamValidationResult:
    """Bulk validation result; ``values`` is set only when no issues were found."""

    values: dict[str, Any] | None
    issues: tuple[ParamValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.values is not None and not self.issues


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[ParamValidationIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(ParamValidationIssue(path=path, message=message))

    def items(self) -> tuple[ParamValidationIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def validate_params(spec: QuerySpec, values: Mapping[str, object]) -> ParamValidationResult:
    """Validate a name -> value mapping against ``spec``.

    List and tuple values are checked element-wise and reported as ``name[index]``.
    Issues are ordered by specification order, then unknown names in input order.
    """

    issues = _IssueCollector()
    normalized: dict[str, Any] = {}

    for name in spec.names:
        if name not in values:
            continue
        kind = spec.kind(name)
        value = values[name]
        if isinstance(value, (list, tuple)):
            for index, item in enumerate(value):
                if not is_valid_value(kind, item):
                    issues.add(f"{name}[{index}]", f"expected {kind.describe()}, got {item!r}")
            normalized[name] = list(value)
        else:
            if not is_valid_value(kind, value):
                issues.add(name, f"expected {kind.describe()}, got {value!r}")
            normalized[name] = value

    for name in values:
        if not spec.is_valid_name(name):
            issues.add(str(name), "unknown query parameter")

    if issues.has_issues:
        return ParamValidationResult(values=None, issues=issues.items())
    return ParamValidationResult(values=normalized, issues=())


def assert_valid_params(spec: QuerySpec, values: Mapping[str, object]) -> dict[str, Any]:
    """Validate values and raise ``ParamValidationError`` on failure."""

    result = validate_params(spec, values)
    if result.values is None:
        raise ParamValidationError(result.issues)
    return result.values


__all__ = [
    "ParamValidationResult",
    "assert_valid_params",
    "is_number",
    "is_valid_value",
    "validate_params",
]
