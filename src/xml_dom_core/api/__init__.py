"""Public entry points: parse documents and serialize node trees."""

from .parser import (
    DOMParser,
    parse,
    parse_file,
    parse_string,
    serialize,
    serialize_to_string,
    write,
)

__all__ = [
    "DOMParser",
    "parse",
    "parse_file",
    "parse_string",
    "serialize",
    "serialize_to_string",
    "write",
]
