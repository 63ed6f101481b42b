"""Command-line interface router for typed-query."""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Final, TextIO

from typed_query.codec import decode_text, encode_value
from typed_query.config import (
    CodecSettings,
    load_query_spec,
    load_settings,
    merge_settings,
)
from typed_query.constants import LOG_FORMATS, LOG_LEVELS
from typed_query.observability import setup_logging
from typed_query.registry import QuerySpec, define_query_spec
from typed_query.store import SearchParams
from typed_query.ui.render import CLIRenderer, create_renderer

_logger = logging.getLogger(__name__)

# Mirrors the declaration exercised by the ``demo`` command.
DEMO_DECLARATION: Final[dict[str, object]] = {
    "term": str,
    "direction": ["in", "out", "transfer"],
    "account": ["savings", "operational", "tax"],
    "amount": float,
}


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = 1

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router for all supported CLI workflows."""

    parser = argparse.ArgumentParser(
        prog="typed-query",
        description=(
            "typed-query — schema-driven codec and validator for URL query parameters.\n\n"
            "Common workflows:\n"
            "  typed-query names --spec spec.toml              List declared parameters\n"
            "  typed-query decode --spec spec.toml 'a=1&b=x'   Decode a query string\n"
            "  typed-query encode --spec spec.toml amount=100  Build a query string\n"
            "  typed-query demo                                Run the built-in walkthrough\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Settings file with a [codec] table (default: ./typed_query.toml if present).",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        default=None,
        help="Override the configured log level.",
    )
    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=None,
        help="Override the configured log format.",
    )

    spec_arg = argparse.ArgumentParser(add_help=False)
    spec_arg.add_argument(
        "--spec",
        dest="spec_path",
        required=True,
        help="Spec document (.toml, .yaml, .yml or .json) with a [params] table.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    names = subparsers.add_parser("names", parents=[spec_arg], help="List declared parameters.")
    names.set_defaults(handler=_cmd_names)

    check = subparsers.add_parser(
        "check", parents=[spec_arg], help="Check whether raw text decodes for a parameter."
    )
    check.add_argument("name")
    check.add_argument("text")
    check.set_defaults(handler=_cmd_check)

    decode = subparsers.add_parser(
        "decode", parents=[spec_arg], help="Decode declared parameters from a query string."
    )
    decode.add_argument("query")
    decode.add_argument(
        "--all",
        dest="all_values",
        action="store_true",
        help="Return every decodable value per parameter instead of the first.",
    )
    decode.set_defaults(handler=_cmd_decode)

    encode = subparsers.add_parser(
        "encode", parents=[spec_arg], help="Build a query string from NAME=TEXT assignments."
    )
    encode.add_argument("assignments", nargs="+", metavar="NAME=TEXT")
    encode.set_defaults(handler=_cmd_encode)

    clear = subparsers.add_parser(
        "clear", parents=[spec_arg], help="Remove declared parameters, keep all others."
    )
    clear.add_argument("query")
    clear.set_defaults(handler=_cmd_clear)

    demo = subparsers.add_parser("demo", help="Walk through the API with a sample spec.")
    demo.set_defaults(handler=_cmd_demo)

    return parser


def run_cli(argv: Sequence[str] | None = None, *, stdout: TextIO | None = None) -> int:
    """Parse ``argv`` and dispatch; returns the process exit code."""

    parser = build_parser()
    args = parser.parse_args(argv)
    renderer = create_renderer(stream=stdout)

    try:
        return int(args.handler(args, renderer))
    except CLIError as exc:
        _logger.info("command rejected", extra={"command": args.command})
        renderer.text(f"error: {exc.message}")
        return exc.exit_code


# ---------------------------------------------------------------------------
# Setup helpers
# ---------------------------------------------------------------------------


def _resolve_settings(args: argparse.Namespace, base: CodecSettings) -> CodecSettings:
    overrides: dict[str, object] = {}
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if args.log_format is not None:
        overrides["log_format"] = args.log_format
    return merge_settings(base, overrides) if overrides else base


def _load_spec(args: argparse.Namespace) -> QuerySpec:
    explicit = load_settings(args.config_path) if args.config_path is not None else None
    spec = load_query_spec(args.spec_path, settings=explicit)
    settings = _resolve_settings(args, spec.settings)
    setup_logging(settings.log_level, settings.log_format)
    _logger.debug("loaded query spec", extra={"spec_path": args.spec_path, "params": list(spec.names)})
    return spec.with_settings(settings) if settings != spec.settings else spec


def _require_name(spec: QuerySpec, name: str) -> str:
    if not spec.is_valid_name(name):
        known = ", ".join(spec.names) or "<none>"
        raise CLIError(f"unknown parameter {name!r} (declared: {known})", exit_code=1)
    return name


def _dump(payload: object) -> str:
    return json.dumps(payload, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_names(args: argparse.Namespace, renderer: CLIRenderer) -> int:
    spec = _load_spec(args)
    if not len(spec):
        renderer.text("no parameters declared")
        return 0
    rows = [[name, spec.kind(name).label] for name in spec.names]
    renderer.table(["NAME", "KIND"], rows)
    return 0


def _cmd_check(args: argparse.Namespace, renderer: CLIRenderer) -> int:
    spec = _load_spec(args)
    name = _require_name(spec, args.name)
    kind = spec.kind(name)
    value = decode_text(kind, args.text)
    if value is None:
        renderer.fail(f"{name}={args.text!r} (expected {kind.describe()})")
        return 1
    renderer.ok(f"{name}={_dump(value)}")
    return 0


def _cmd_decode(args: argparse.Namespace, renderer: CLIRenderer) -> int:
    spec = _load_spec(args)
    store = SearchParams.parse(args.query)
    payload: dict[str, Any]
    if args.all_values:
        payload = {name: spec.codec.get_all(store, name) for name in spec.names}
    else:
        payload = spec.codec.read(store)
    renderer.text(_dump(payload))
    return 0


def _cmd_encode(args: argparse.Namespace, renderer: CLIRenderer) -> int:
    spec = _load_spec(args)
    store = SearchParams()
    written: set[str] = set()
    for assignment in args.assignments:
        raw_name, separator, text = assignment.partition("=")
        if not separator:
            raise CLIError(f"expected NAME=TEXT, got {assignment!r}", exit_code=1)
        name = _require_name(spec, raw_name)
        kind = spec.kind(name)
        value = decode_text(kind, text)
        if value is None:
            raise CLIError(
                f"invalid value {text!r} for {name!r}: expected {kind.describe()}", exit_code=1
            )
        if name in written:
            spec.codec.append(store, name, value)
        else:
            spec.codec.set(store, name, value)
            written.add(name)
    renderer.text(str(store))
    return 0


def _cmd_clear(args: argparse.Namespace, renderer: CLIRenderer) -> int:
    spec = _load_spec(args)
    store = SearchParams.parse(args.query)
    spec.codec.clear_all(store)
    renderer.text(str(store))
    return 0


def _cmd_demo(args: argparse.Namespace, renderer: CLIRenderer) -> int:
    settings = _resolve_settings(args, load_settings(args.config_path))
    setup_logging(settings.log_level, settings.log_format)
    query = define_query_spec(DEMO_DECLARATION, settings=settings)
    helpers = query.codec

    renderer.heading("typed-query demo")
    renderer.table(
        ["NAME", "KIND"], [[name, query.kind(name).label] for name in query.names], title="Spec"
    )

    url_params = SearchParams()
    helpers.set(url_params, query.resolve("direction"), "in")

    user_input = "direction"
    if query.is_valid_name(user_input):
        helpers.set(url_params, user_input, "out")

    some_value: object = "transfer"
    renderer.section("Validation")
    if query.is_valid_value("direction", some_value):
        renderer.text(f"Valid direction: {some_value}")
    if not query.is_valid_value("direction", "sideways"):
        renderer.text("Rejected direction: sideways")

    renderer.section("Parameters")
    for name in query.names:
        renderer.text(f"Parameter: {name}")

    helpers.set(url_params, query.names.direction, "in")
    helpers.set(url_params, query.resolve("account"), "savings")

    params = SearchParams()
    helpers.set(params, "direction", "in")
    helpers.set(params, "account", "operational")
    helpers.set(params, "amount", 100)

    renderer.section("Decoded")
    for name, value in helpers.read(params).items():
        renderer.kv(name, _dump(value))
    renderer.kv("query", str(params))

    params.set("direction", "sideways")
    renderer.kv("direction after 'sideways'", _dump(helpers.get(params, "direction")))
    renderer.kv("wire amount", encode_value(query.kind("amount"), 100))
    return 0


__all__ = ["DEMO_DECLARATION", "CLIError", "build_parser", "run_cli"]
