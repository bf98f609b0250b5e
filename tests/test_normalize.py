import datetime as dt
from decimal import Decimal

import pytest

from orderdesk.data.normalize import is_blank, parse_datetime, parse_int, parse_price, parse_text
from orderdesk.errors import CellValueError, PriceParseError


def test_blank_detection():
    assert is_blank(None)
    assert is_blank("   ")
    assert is_blank(float("nan"))
    assert not is_blank(0)
    assert not is_blank("x")


def test_parse_text_trims_and_blanks_to_empty():
    assert parse_text("  ACME  ") == "ACME"
    assert parse_text(None) == ""
    assert parse_text(42) == "42"


@pytest.mark.parametrize("raw, expected", [(7, 7), (7.0, 7), (" 42 ", 42), ("-3", -3), (Decimal("5"), 5)])
def test_parse_int_accepts_integral_values(raw, expected):
    assert parse_int(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "abc", "4.5", 4.5, True])
def test_parse_int_rejects_everything_else(raw):
    with pytest.raises(CellValueError):
        parse_int(raw)


def test_price_numeric_cell_taken_directly():
    assert parse_price(12.5) == Decimal("12.50")
    assert parse_price(3) == Decimal("3")


def test_price_text_with_glyph_and_decimal_comma():
    assert parse_price("12,50 ₽") == Decimal("12.50")
    assert parse_price("1 250,75₽") == Decimal("1250.75")
    assert parse_price("$4.20") == Decimal("4.20")


@pytest.mark.parametrize("raw", ["abc", "", None, "-5", "NaN", True])
def test_price_failures_raise_price_parse_error(raw):
    with pytest.raises(PriceParseError):
        parse_price(raw)


def test_price_parse_error_is_a_cell_value_error():
    assert issubclass(PriceParseError, CellValueError)


def test_parse_datetime_variants():
    moment = dt.datetime(2023, 5, 2, 14, 30)
    assert parse_datetime(moment) is moment
    assert parse_datetime(dt.date(2023, 5, 2)) == dt.datetime(2023, 5, 2)
    assert parse_datetime("2023-05-02") == dt.datetime(2023, 5, 2)
    assert parse_datetime("02.05.2023 14:30") == moment
    assert parse_datetime(45000) == dt.datetime(2023, 3, 15)


@pytest.mark.parametrize("raw", [None, "yesterday", "2023-13-01", True])
def test_parse_datetime_rejects_invalid(raw):
    with pytest.raises(CellValueError):
        parse_datetime(raw)


@pytest.mark.parametrize("raw", ["01.01.2300", dt.datetime(1500, 1, 1), dt.date(2262, 4, 12)])
def test_parse_datetime_rejects_dates_outside_timestamp_range(raw):
    with pytest.raises(CellValueError, match="outside the supported range"):
        parse_datetime(raw)


def test_parse_datetime_accepts_range_edges():
    assert parse_datetime("22.09.1677") == dt.datetime(1677, 9, 22)
    assert parse_datetime("2262-04-10") == dt.datetime(2262, 4, 10)
