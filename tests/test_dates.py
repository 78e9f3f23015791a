"""
Unit tests for date parsing
"""
from datetime import date

import pytest

from crosswalk.models.values import Date, DatePrecision, DateQualifier
from crosswalk.values.dates import parse_date


class TestParseDate:
    """EDTF, ISO and free-text dates"""

    @pytest.mark.parametrize("value, expected", [
        ("1984", (1984, 0, 0, DatePrecision.YEAR)),
        ("1984-05", (1984, 5, 0, DatePrecision.MONTH)),
        ("1984-05-12", (1984, 5, 12, DatePrecision.DAY)),
        ("2021-03-04T10:20:30Z", (2021, 3, 4, DatePrecision.DAY)),
        ("2021-03-04 10:20", (2021, 3, 4, DatePrecision.DAY)),
        ("March 5, 2020", (2020, 3, 5, DatePrecision.DAY)),
        ("March 2020", (2020, 3, 0, DatePrecision.MONTH)),
        ("Photographs, circa 1890", (1890, 0, 0, DatePrecision.YEAR)),
    ])
    def test_components(self, value, expected):
        d = parse_date(value)
        assert (d.year, d.month, d.day, d.precision) == expected
        assert d.raw == value

    @pytest.mark.parametrize("value, qualifier", [
        ("1984~", DateQualifier.APPROXIMATE),
        ("1984-05?", DateQualifier.UNCERTAIN),
        ("1984%", DateQualifier.BOTH),
        ("1984", DateQualifier.NONE),
    ])
    def test_qualifiers(self, value, qualifier):
        assert parse_date(value).qualifier == qualifier

    def test_range(self):
        d = parse_date("1990-01/1995-06-30")
        assert d.is_range
        assert (d.year, d.month) == (1990, 1)
        assert (d.end_year, d.end_month, d.end_day) == (1995, 6, 30)

    def test_open_start_range(self):
        d = parse_date("../1995")
        assert d.is_range
        assert d.year == 0
        assert d.end_year == 1995
        assert not d.is_zero

    def test_slash_dates_are_not_ranges(self):
        d = parse_date("3/4/2020")
        assert not d.is_range
        assert d.year == 2020

    @pytest.mark.parametrize("value", ["", "   ", "unknown", "n.d."])
    def test_unparseable_is_zero(self, value):
        assert parse_date(value).is_zero

    def test_invalid_month_falls_back_to_year(self):
        d = parse_date("2020-13-45")
        assert d.year == 2020
        assert d.precision == DatePrecision.YEAR


class TestDateModel:
    """Rendering and conversion of Date values"""

    def test_str_without_raw(self):
        d = Date(year=1984, month=5, precision=DatePrecision.MONTH, qualifier=DateQualifier.APPROXIMATE)
        assert str(d) == "1984-05~"

    def test_str_range_without_raw(self):
        d = Date(year=1990, end_year=1995, end_month=6, is_range=True, precision=DatePrecision.YEAR)
        assert str(d) == "1990/1995-06"

    def test_to_date(self):
        assert parse_date("1984-05").to_date() == date(1984, 5, 1)
        assert Date().to_date() is None

    def test_to_dict(self):
        result = parse_date("1984-05-12").to_dict()
        assert result["value"] == "1984-05-12"
        assert result["precision"] == "day"
        assert result["month"] == 5


class TestParseDateIsQuiet:
    """Free-text parsing emits no warnings"""

    @pytest.mark.filterwarnings("error")
    @pytest.mark.parametrize("value", ["9 1a,68/T", "Jan 5 1999 10:00 XYZ"])
    def test_unknown_timezone_tokens(self, value):
        parse_date(value)

    def test_timezone_tokens_ignored(self):
        d = parse_date("Jan 5 1999 10:00 XYZ")
        assert (d.year, d.month, d.day) == (1999, 1, 5)

    def test_long_text_only_scanned_for_year(self):
        value = "Recorded at the harbour office during the winter season of 1923 " * 3
        d = parse_date(value)
        assert d.year == 1923
        assert d.precision == DatePrecision.YEAR
