"""
Field value decoders.

Every decoder takes the still-encoded JSON payload of one field and returns
a value of a single semantic type. Payloads may be absent, a bare scalar, a
single object, or a list of repetitions (scalars or objects such as
``{"value": ...}``, ``{"target_id": ...}`` or ``{"uri": ...}``). All three
shapes are normalized first: scalar decoders read the first repetition,
sequence decoders return every repetition in source order.

Decoders are pure and never raise on malformed or missing data; they fall
back to the type's zero value ("", [], 0, False, None).
"""

import json
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, List, Optional, Union

from ..models.values import Date, Link, Ref, TypedRef
from .coerce import TextOptions, boolean, integer, text, text_slice
from .dates import parse_date

RawPayload = Union[bytes, bytearray, str, None]

# Keys that hold an object repetition's primary value, in priority order
PRIMARY_KEYS = ("value", "target_id", "uri")
REF_ID_KEYS = ("target_id", "id", "tid", "nid")
LOCALE_KEY = "langcode"

_UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)
_INTEGRAL_FLOAT = re.compile(r"^([+-]?\d+)\.0*$")


class ResolveMode(str, Enum):
    """How referenced IDs are emitted."""
    PASSTHROUGH = "passthrough"  # IDs exactly as found
    NORMALIZE = "normalize"  # Trimmed, "12.0" -> "12", UUIDs lowercased


Resolver = Callable[[str, str], Optional[str]]


@dataclass
class RefOptions:
    """
    Options for reference decoding.

    Attributes:
        resolve: Whether IDs pass through as-is or are normalized
        limit: Keep only the first N references (None keeps all)
        default_type: Target type used when a repetition carries none
        resolver: Callable ``(id, type) -> label`` filling ``Ref.resolved``
    """
    resolve: ResolveMode = ResolveMode.PASSTHROUGH
    limit: Optional[int] = None
    default_type: str = ""
    resolver: Optional[Resolver] = None


@dataclass
class TypedRefOptions(RefOptions):
    """Reference options plus the key holding the relationship type."""
    rel_type_key: str = "rel_type"


# =============================================================================
# PAYLOAD NORMALIZATION
# =============================================================================

def parse_payload(raw: RawPayload) -> Any:
    """Parse an encoded payload; returns None for empty, null or malformed input."""
    if raw is None or len(raw) == 0:
        return None
    if isinstance(raw, str) and raw.startswith("\ufeff"):
        raw = raw[1:]
    try:
        return json.loads(raw)
    except (ValueError, UnicodeDecodeError, RecursionError):
        return None


def repetitions(raw: RawPayload) -> List[Any]:
    """Normalize a payload to its list of repetitions (possibly empty)."""
    parsed = parse_payload(raw)
    if parsed is None:
        return []
    if isinstance(parsed, list):
        return [item for item in parsed if item is not None]
    return [parsed]


def primary_value(item: Any) -> Any:
    """Return the primary value of one repetition."""
    if isinstance(item, dict):
        for key in PRIMARY_KEYS:
            if key in item:
                return item[key]
        return item
    return item


def _apply_limit(values: List[Any], limit: Optional[int]) -> List[Any]:
    if limit is not None and limit >= 0:
        return values[:limit]
    return values


# =============================================================================
# SCALAR DECODERS
# =============================================================================

def decode_text(raw: RawPayload) -> str:
    """First (or only) value as text; "" when absent."""
    items = repetitions(raw)
    if not items:
        return ""
    return text(primary_value(items[0]))


def decode_int(raw: RawPayload) -> int:
    """First value as an integer; 0 when absent or not numeric."""
    items = repetitions(raw)
    if not items:
        return 0
    return integer(primary_value(items[0]))


def decode_bool(raw: RawPayload) -> bool:
    """First value as a boolean; False when absent."""
    items = repetitions(raw)
    if not items:
        return False
    return boolean(primary_value(items[0]))


def decode_formatted_text(raw: RawPayload, use_processed: bool = False) -> str:
    """
    Formatted (rich) text from the first repetition.

    Returns the rendered ``processed`` form when requested and present,
    otherwise the raw ``value``.
    """
    items = repetitions(raw)
    if not items:
        return ""
    first = items[0]
    if not isinstance(first, dict):
        return text(first)
    if use_processed and first.get("processed") is not None:
        return text(first["processed"])
    return text(first.get("value"))


# =============================================================================
# SEQUENCE DECODERS
# =============================================================================

def decode_texts(raw: RawPayload, options: Optional[TextOptions] = None) -> List[str]:
    """All values as text, in source order."""
    options = options or TextOptions()
    values = []
    for item in repetitions(raw):
        if options.locale and isinstance(item, dict):
            langcode = item.get(LOCALE_KEY)
            if langcode and langcode != options.locale:
                continue
        values.append(primary_value(item))
    return text_slice(values, options)


def decode_dates(raw: RawPayload) -> List[Date]:
    """Each value parsed as a date; unparseable values are dropped."""
    result = []
    for s in text_slice([primary_value(item) for item in repetitions(raw)]):
        parsed = parse_date(s)
        if not parsed.is_zero:
            result.append(parsed)
    return result


def decode_links(raw: RawPayload) -> List[Link]:
    """Link values (URI plus optional title); repetitions without a URI are dropped."""
    result = []
    for item in repetitions(raw):
        if isinstance(item, dict):
            uri = text(item.get("uri", item.get("url"))).strip()
            options = item.get("options")
            link = Link(
                uri=uri,
                title=text(item.get("title")),
                options=options if isinstance(options, dict) else {},
            )
        else:
            link = Link(uri=text(item).strip())
        if link.uri:
            result.append(link)
    return result


def normalize_ref_id(ref_id: str) -> str:
    """Canonical form of a reference ID."""
    ref_id = ref_id.strip()
    match = _INTEGRAL_FLOAT.match(ref_id)
    if match:
        try:
            return str(int(match.group(1)))
        except ValueError:
            return ref_id
    if _UUID_PATTERN.match(ref_id):
        return ref_id.lower()
    return ref_id


def _ref_from_item(item: Any, options: RefOptions, type_keys: tuple) -> Optional[Ref]:
    if isinstance(item, dict):
        ref_id = ""
        for key in REF_ID_KEYS:
            if key in item:
                ref_id = text(item[key])
                break
        ref_type = ""
        for key in type_keys:
            if item.get(key):
                ref_type = text(item[key])
                break
        uuid = text(item.get("target_uuid", item.get("uuid")))
    elif isinstance(item, (str, int, float)) and not isinstance(item, bool):
        ref_id, ref_type, uuid = text(item), "", ""
    else:
        return None

    if options.resolve == ResolveMode.NORMALIZE:
        ref_id = normalize_ref_id(ref_id)
    if not ref_id:
        return None

    ref_type = ref_type or options.default_type
    resolved = ""
    if options.resolver is not None:
        resolved = options.resolver(ref_id, ref_type) or ""

    return Ref(id=ref_id, type=ref_type, uuid=uuid, resolved=resolved)


def decode_refs(raw: RawPayload, options: Optional[RefOptions] = None) -> List[Ref]:
    """Entity references, one per repetition carrying an ID."""
    options = options or RefOptions()
    result = []
    for item in repetitions(raw):
        ref = _ref_from_item(item, options, ("target_type",))
        if ref is not None:
            result.append(ref)
    return _apply_limit(result, options.limit)


def decode_typed_refs(raw: RawPayload, options: Optional[TypedRefOptions] = None) -> List[TypedRef]:
    """
    Polymorphic references.

    The target type is decoded per repetition (``target_type`` or ``type``),
    so one field may point at different entity types. The relationship type
    is read from ``options.rel_type_key``.
    """
    options = options or TypedRefOptions()
    result = []
    for item in repetitions(raw):
        ref = _ref_from_item(item, options, ("target_type", "type"))
        if ref is None:
            continue
        rel_type = text(item.get(options.rel_type_key)) if isinstance(item, dict) else ""
        result.append(TypedRef(
            id=ref.id,
            type=ref.type,
            uuid=ref.uuid,
            resolved=ref.resolved,
            rel_type=rel_type,
        ))
    return _apply_limit(result, options.limit)


def with_default_type(options: Optional[RefOptions], ref_type: str) -> RefOptions:
    """Copy of ``options`` with ``default_type`` filled in when not already set."""
    options = options or RefOptions()
    if options.default_type or not ref_type:
        return options
    return replace(options, default_type=ref_type)


# =============================================================================
# GENERIC DECODER
# =============================================================================

def _is_scalar(value: Any) -> bool:
    return not isinstance(value, (dict, list))


def _collapsible(item: Any) -> bool:
    """A repetition that reduces to a single scalar."""
    if _is_scalar(item):
        return True
    if not isinstance(item, dict):
        return False
    keys = set(item) - {LOCALE_KEY}
    return len(keys) == 1 and keys <= set(PRIMARY_KEYS) and _is_scalar(primary_value(item))


def decode_generic(raw: RawPayload) -> Any:
    """
    Best-effort decode without schema knowledge.

    Returns None when absent, a string for a bare scalar, a list of strings
    when every repetition reduces to one scalar, and otherwise a list of
    dicts (a single object is wrapped in a list).
    """
    parsed = parse_payload(raw)
    if parsed is None:
        return None
    if _is_scalar(parsed):
        return text(parsed)

    items = parsed if isinstance(parsed, list) else [parsed]
    items = [item for item in items if item is not None]
    if not items:
        return None
    if all(_collapsible(item) for item in items):
        return [text(primary_value(item)) for item in items]
    return [item if isinstance(item, dict) else {"value": item} for item in items]
