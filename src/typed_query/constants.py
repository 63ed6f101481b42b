"""Stable constants shared across the codec, config and CLI layers."""

from __future__ import annotations

from typing import Final

# Declaration tags accepted in spec files and ``coerce_kind``.
TEXT_KIND_TAGS: Final[frozenset[str]] = frozenset({"string", "str", "text"})
NUMERIC_KIND_TAGS: Final[frozenset[str]] = frozenset({"number", "numeric", "float", "int"})

# Canonical wire spellings for non-finite numbers.
POSITIVE_INFINITY_TEXT: Final[str] = "Infinity"
NEGATIVE_INFINITY_TEXT: Final[str] = "-Infinity"

# Integral floats at or above this magnitude keep exponent notation.
INTEGRAL_FLOAT_LIMIT: Final[float] = 1e21

# Config file and environment conventions.
DEFAULT_CONFIG_FILE: Final[str] = "typed_query.toml"
ENV_PREFIX: Final[str] = "TYPED_QUERY_"
SPEC_PARAMS_TABLE: Final[str] = "params"
SPEC_CODEC_TABLE: Final[str] = "codec"
SPEC_FILE_SUFFIXES: Final[tuple[str, ...]] = (".toml", ".yaml", ".yml", ".json")

# Logging.
ROOT_LOGGER_NAME: Final[str] = "typed_query"
LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR")
LOG_FORMATS: Final[tuple[str, ...]] = ("text", "json")

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "INTEGRAL_FLOAT_LIMIT",
    "LOG_FORMATS",
    "LOG_LEVELS",
    "NEGATIVE_INFINITY_TEXT",
    "NUMERIC_KIND_TAGS",
    "POSITIVE_INFINITY_TEXT",
    "ROOT_LOGGER_NAME",
    "SPEC_CODEC_TABLE",
    "SPEC_FILE_SUFFIXES",
    "SPEC_PARAMS_TABLE",
    "TEXT_KIND_TAGS",
]
