"""Date parsing with format auto-detection (EDTF, ISO 8601, free text)."""

import re
from datetime import datetime
from typing import Optional

from dateutil import parser as date_parser

from ..models.values import Date, DatePrecision, DateQualifier

_EDTF_DATE = re.compile(r"^(-?\d{4})(?:-(\d{2})(?:-(\d{2}))?)?([~?%])?$")
_ISO_TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}")
_YEAR_ANYWHERE = re.compile(r"\b(1[0-9]{3}|20[0-9]{2})\b")
_OPEN_END = {"", ".."}
_MAX_FREE_TEXT = 100  # Longer strings skip dateutil and only get the year scan

_QUALIFIERS = {
    "~": DateQualifier.APPROXIMATE,
    "?": DateQualifier.UNCERTAIN,
    "%": DateQualifier.BOTH,
}

# Two distinct defaults let us tell which components dateutil actually found
_DEFAULT_A = datetime(1, 1, 1)
_DEFAULT_B = datetime(2, 2, 2)


def parse_date(value: str) -> Date:
    """
    Parse a date string.

    Supports EDTF level 0/1 dates (``1984``, ``1984-05``, ``1984-05-12``,
    qualifiers ``~ ? %``, ranges ``a/b`` with open ends ``..``), ISO 8601
    timestamps, and human-readable dates. As a last resort a four-digit year
    is pulled from anywhere in the string.

    Returns a zero Date (``is_zero``) when nothing date-like is found.
    """
    s = (value or "").strip()
    if not s:
        return Date()

    if "/" in s:
        ranged = _parse_range(s)
        if ranged is not None:
            return ranged

    edtf = _parse_edtf(s)
    if edtf is not None:
        return edtf

    if _ISO_TIMESTAMP.match(s):
        try:
            parsed = date_parser.isoparse(s)
            return Date(
                year=parsed.year,
                month=parsed.month,
                day=parsed.day,
                precision=DatePrecision.DAY,
                raw=s,
            )
        except (ValueError, OverflowError):
            pass

    if len(s) <= _MAX_FREE_TEXT:
        free_text = _parse_free_text(s)
        if free_text is not None:
            return free_text

    match = _YEAR_ANYWHERE.search(s)
    if match:
        return Date(year=int(match.group(1)), precision=DatePrecision.YEAR, raw=s)

    return Date(raw=s)


def _parse_edtf(s: str) -> Optional[Date]:
    match = _EDTF_DATE.match(s)
    if not match:
        return None

    year_str, month_str, day_str, qualifier = match.groups()
    month = int(month_str) if month_str else 0
    day = int(day_str) if day_str else 0
    if month > 12 or (month_str and month == 0) or day > 31 or (day_str and day == 0):
        return None

    precision = DatePrecision.YEAR
    if month:
        precision = DatePrecision.MONTH
    if day:
        precision = DatePrecision.DAY

    return Date(
        year=int(year_str),
        month=month,
        day=day,
        precision=precision,
        qualifier=_QUALIFIERS.get(qualifier or "", DateQualifier.NONE),
        raw=s,
    )


def _parse_range(s: str) -> Optional[Date]:
    start_str, end_str = (part.strip() for part in s.split("/", 1))
    if start_str in _OPEN_END and end_str in _OPEN_END:
        return None

    start = Date() if start_str in _OPEN_END else _parse_edtf(start_str)
    end = Date() if end_str in _OPEN_END else _parse_edtf(end_str)
    if start is None or end is None:
        return None

    return Date(
        year=start.year,
        month=start.month,
        day=start.day,
        end_year=end.year,
        end_month=end.month,
        end_day=end.day,
        precision=start.precision if not start.is_zero else end.precision,
        qualifier=start.qualifier,
        is_range=True,
        raw=s,
    )


def _parse_free_text(s: str) -> Optional[Date]:
    try:
        first = date_parser.parse(s, default=_DEFAULT_A, ignoretz=True)
        second = date_parser.parse(s, default=_DEFAULT_B, ignoretz=True)
    except (ValueError, OverflowError):
        return None

    if first.year != second.year:
        return None  # No year in the string

    precision = DatePrecision.YEAR
    month = day = 0
    if first.month == second.month:
        month = first.month
        precision = DatePrecision.MONTH
        if first.day == second.day:
            day = first.day
            precision = DatePrecision.DAY

    return Date(year=first.year, month=month, day=day, precision=precision, raw=s)
