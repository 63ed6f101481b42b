"""User-facing command-line surface."""

from typed_query.ui.cli import CLIError, build_parser, run_cli
from typed_query.ui.render import CLIRenderer, create_renderer

__all__ = ["CLIError", "CLIRenderer", "build_parser", "create_renderer", "run_cli"]
