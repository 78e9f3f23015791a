"""
Coercion primitives for loosely typed JSON values.

These helpers turn whatever a source system put in a field (strings,
numbers, booleans, nested objects) into plain Python scalars. None of them
raise on unexpected input; they fall back to the type's zero value.
"""

import html
import json
import re
from dataclasses import dataclass
from typing import Any, List, Optional

_INT_PATTERN = re.compile(r"^[+-]?\d+$")
_HTML_COMMENT = re.compile(r"<!--[\s\S]*?-->")
_HTML_BLOCK_END = re.compile(r"</(?:p|div|li|h[1-6]|blockquote|tr)>|<br\s*/?>", re.IGNORECASE)
_HTML_TAG = re.compile(r"<[^>]*>")
_MULTI_SPACE = re.compile(r"\s+")

_TRUE_STRINGS = {"true", "1", "yes", "on"}


@dataclass
class TextOptions:
    """
    Options for multi-value text decoding.

    Attributes:
        limit: Keep only the first N values (None keeps all)
        locale: Keep only repetitions tagged with this langcode; untagged values are kept
        trim: Strip surrounding whitespace
        delimiter: Split delimited strings into separate values
        strip_html: Remove markup and decode entities
        collapse_whitespace: Collapse runs of whitespace to single spaces
    """
    limit: Optional[int] = None
    locale: Optional[str] = None
    trim: bool = True
    delimiter: str = ""
    strip_html: bool = False
    collapse_whitespace: bool = False


def text(value: Any) -> str:
    """Convert a JSON value to a string. None becomes ""."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError:
            return ""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, (dict, list)):
        try:
            return json.dumps(value, separators=(",", ":"), sort_keys=True)
        except (TypeError, ValueError, RecursionError):
            return ""
    return str(value)


def text_or(value: Any, default: str) -> str:
    """Convert to a string, substituting ``default`` for empty results."""
    return text(value) or default


def integer(value: Any) -> int:
    """Convert a JSON value to an int; unparseable input yields 0."""
    result = integer_or(value, None)
    return result if result is not None else 0


def integer_or(value: Any, default: Optional[int]) -> Optional[int]:
    """Convert to an int, substituting ``default`` when the value is not numeric."""
    if value is None:
        return default
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return default
        return int(value)
    if isinstance(value, str):
        stripped = value.strip()
        if _INT_PATTERN.match(stripped):
            try:
                return int(stripped)
            except ValueError:
                # Beyond the interpreter's int/str digit limit
                return default
        return default
    return default


def number(value: Any) -> float:
    """Convert a JSON value to a float; unparseable input yields 0.0."""
    if value is None or isinstance(value, bool):
        return float(value or 0)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return 0.0
    return 0.0


def boolean(value: Any) -> bool:
    """Convert a JSON value to a bool using native, 0/1 and yes/no conventions."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def strip_html(value: str) -> str:
    """Remove HTML tags and comments, decode entities and normalize whitespace."""
    if not value:
        return ""
    value = _HTML_COMMENT.sub("", value)
    value = _HTML_BLOCK_END.sub("\n", value)
    value = _HTML_TAG.sub("", value)
    value = html.unescape(value)
    return _MULTI_SPACE.sub(" ", value).strip()


def apply_text_options(value: str, options: TextOptions) -> str:
    """Apply per-string processing options."""
    if options.strip_html:
        value = strip_html(value)
    if options.collapse_whitespace:
        value = _MULTI_SPACE.sub(" ", value)
    if options.trim:
        value = value.strip()
    return value


def text_slice(values: List[Any], options: Optional[TextOptions] = None) -> List[str]:
    """
    Normalize a list of JSON values to a list of strings.

    Delimited strings are split when a delimiter is configured, processing
    options are applied, empty results are dropped and the limit is applied
    last.
    """
    options = options or TextOptions()
    result = []

    for value in values:
        s = text(value)
        if options.delimiter and options.delimiter in s:
            parts = [p.strip() for p in s.split(options.delimiter)]
        else:
            parts = [s]

        for part in parts:
            part = apply_text_options(part, options)
            if part:
                result.append(part)

    if options.limit is not None and options.limit >= 0:
        result = result[:options.limit]
    return result
