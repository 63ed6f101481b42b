"""Module entrypoint for ``python -m typed_query``."""

from __future__ import annotations

from typed_query.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
