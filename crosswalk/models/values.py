"""Decoded value models produced by the field decoders."""

from dataclasses import dataclass, field
from datetime import date
from enum import IntEnum
from typing import Any, Dict, Optional


class DatePrecision(IntEnum):
    """Granularity of a parsed date."""
    UNKNOWN = 0
    YEAR = 1
    MONTH = 2
    DAY = 3


class DateQualifier(IntEnum):
    """EDTF uncertainty/approximation qualifier."""
    NONE = 0
    APPROXIMATE = 1  # ~
    UNCERTAIN = 2  # ?
    BOTH = 3  # %


_QUALIFIER_SUFFIX = {
    DateQualifier.APPROXIMATE: "~",
    DateQualifier.UNCERTAIN: "?",
    DateQualifier.BOTH: "%",
}


@dataclass(frozen=True)
class Ref:
    """A reference to another entity."""
    id: str
    type: str = ""
    uuid: str = ""
    resolved: str = ""  # Human-readable value from a resolver, if any

    @property
    def is_zero(self) -> bool:
        """True if the reference carries no ID."""
        return self.id == ""

    def __str__(self) -> str:
        return self.resolved or self.id

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = {"id": self.id}
        if self.type:
            result["type"] = self.type
        if self.uuid:
            result["uuid"] = self.uuid
        if self.resolved:
            result["resolved"] = self.resolved
        return result


@dataclass(frozen=True)
class TypedRef(Ref):
    """A reference whose target type is recorded per value, plus a relationship type."""
    rel_type: str = ""  # e.g. "relators:aut"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = super().to_dict()
        if self.rel_type:
            result["rel_type"] = self.rel_type
        return result


@dataclass(frozen=True)
class Link:
    """A hyperlink field value."""
    uri: str
    title: str = ""
    options: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = {"uri": self.uri}
        if self.title:
            result["title"] = self.title
        if self.options:
            result["options"] = self.options
        return result


@dataclass(frozen=True)
class Date:
    """
    A parsed date with precision and qualifiers.

    Ranges keep the start in year/month/day and the end in the end_* fields.
    The original string is preserved in ``raw``.
    """
    year: int = 0
    month: int = 0
    day: int = 0
    end_year: int = 0
    end_month: int = 0
    end_day: int = 0
    precision: DatePrecision = DatePrecision.UNKNOWN
    qualifier: DateQualifier = DateQualifier.NONE
    is_range: bool = False
    raw: str = ""

    @property
    def is_zero(self) -> bool:
        """True if the date has no meaningful value."""
        return self.year == 0 and self.month == 0 and self.day == 0 and self.end_year == 0

    def __str__(self) -> str:
        if self.raw:
            return self.raw
        if self.is_zero:
            return ""

        result = _format_ymd(self.year, self.month, self.day)
        result += _QUALIFIER_SUFFIX.get(self.qualifier, "")
        if self.is_range and self.end_year:
            result += "/" + _format_ymd(self.end_year, self.end_month, self.end_day)
        return result

    def to_date(self) -> Optional[date]:
        """Return the start as a ``datetime.date``, filling missing parts with 1."""
        if not self.year:
            return None
        try:
            return date(self.year, self.month or 1, self.day or 1)
        except ValueError:
            return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = {
            "value": str(self),
            "year": self.year,
            "precision": self.precision.name.lower(),
        }
        if self.month:
            result["month"] = self.month
        if self.day:
            result["day"] = self.day
        if self.qualifier != DateQualifier.NONE:
            result["qualifier"] = self.qualifier.name.lower()
        if self.is_range:
            result["end"] = _format_ymd(self.end_year, self.end_month, self.end_day) if self.end_year else ""
        return result


def _format_ymd(year: int, month: int, day: int) -> str:
    result = f"{year:04d}"
    if month:
        result += f"-{month:02d}"
        if day:
            result += f"-{day:02d}"
    return result
