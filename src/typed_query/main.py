"""Process entrypoint for ``typed-query`` and ``python -m typed_query``."""

from __future__ import annotations

import sys
import traceback
from collections.abc import Iterator
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class ExitCode(IntEnum):
    """Exit statuses returned by the CLI."""

    SUCCESS = 0
    INPUT_REJECTED = 1
    CONFIG_ERROR = 2
    INTERNAL_ERROR = 3


def cli_entrypoint(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and map any escaping exception to an ``ExitCode``."""

    try:
        from typed_query.ui.cli import run_cli

        return _as_exit_status(run_cli(argv))
    except SystemExit as exc:
        # argparse: 2 for usage errors, 0 for --help.
        return _as_exit_status(exc.code)
    except Exception as exc:  # noqa: BLE001 - every failure becomes an exit status.
        code = classify_failure(exc)
        if code is ExitCode.INTERNAL_ERROR:
            traceback.print_exception(exc, file=sys.stderr)
        else:
            print(str(exc).strip() or type(exc).__name__, file=sys.stderr)
        return int(code)


def classify_failure(exc: BaseException) -> ExitCode:
    """Pick the exit status for ``exc`` from the first recognised error in its chain."""

    from typed_query.config import ConfigLoadError, SettingsValidationError
    from typed_query.errors import (
        InvalidParameterValueError,
        ParamValidationError,
        SpecDefinitionError,
        UnknownParameterError,
    )

    bad_setup = (
        ConfigLoadError,
        SettingsValidationError,
        SpecDefinitionError,
        FileNotFoundError,
        PermissionError,
    )
    bad_input = (UnknownParameterError, InvalidParameterValueError, ParamValidationError)

    for link in _causes(exc):
        if isinstance(link, bad_setup):
            return ExitCode.CONFIG_ERROR
        if isinstance(link, bad_input):
            return ExitCode.INPUT_REJECTED
    return ExitCode.INTERNAL_ERROR


def _causes(exc: BaseException) -> Iterator[BaseException]:
    visited: set[int] = set()
    link: BaseException | None = exc
    while link is not None and id(link) not in visited:
        visited.add(id(link))
        yield link
        if link.__cause__ is not None:
            link = link.__cause__
        elif not link.__suppress_context__:
            link = link.__context__
        else:
            link = None


def _as_exit_status(raw: object) -> int:
    if raw is None:
        return int(ExitCode.SUCCESS)
    if isinstance(raw, int) and raw in iter(ExitCode):
        return raw
    if isinstance(raw, str) and raw.strip():
        print(raw.strip(), file=sys.stderr)
    return int(ExitCode.INTERNAL_ERROR)


__all__ = ["ExitCode", "classify_failure", "cli_entrypoint"]
