"""Value decoders for encoded field payloads."""

from .coerce import TextOptions, text, integer, boolean, number, strip_html
from .dates import parse_date
from .decoders import (
    RefOptions,
    TypedRefOptions,
    ResolveMode,
    decode_text,
    decode_texts,
    decode_int,
    decode_bool,
    decode_refs,
    decode_typed_refs,
    decode_dates,
    decode_links,
    decode_formatted_text,
    decode_generic,
)

__all__ = [
    "TextOptions",
    "RefOptions",
    "TypedRefOptions",
    "ResolveMode",
    "text",
    "integer",
    "boolean",
    "number",
    "strip_html",
    "parse_date",
    "decode_text",
    "decode_texts",
    "decode_int",
    "decode_bool",
    "decode_refs",
    "decode_typed_refs",
    "decode_dates",
    "decode_links",
    "decode_formatted_text",
    "decode_generic",
]
