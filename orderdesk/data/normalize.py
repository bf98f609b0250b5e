"""
Cell parsers: strict integers and dates, lenient currency, trimmed text.

Every parser takes the raw openpyxl cell value and either returns the typed
value or raises CellValueError. Whether a failure aborts the load or is
replaced by a default is decided per field by the section schema, not here.
"""
from __future__ import annotations

import datetime as dt
import re
from decimal import Decimal, InvalidOperation

import pandas as pd
from openpyxl.utils.datetime import from_excel

from orderdesk.config import CURRENCY_GLYPHS, TEXT_DATE_FORMATS
from orderdesk.errors import CellValueError, PriceParseError


_INT_RE = re.compile(r"^[+-]?\d+$")
_WHITESPACE_RE = re.compile(r"\s+")

# Whole days inside pandas' nanosecond Timestamp range
_EARLIEST_DATE = dt.datetime(1677, 9, 22)
_LATEST_DATE = dt.datetime(2262, 4, 10, 23, 59, 59)


def is_blank(value) -> bool:
    """True for empty cells: None, NaN, or whitespace-only text."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return pd.api.types.is_scalar(value) and pd.isna(value)


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------

def parse_text(value) -> str:
    """Trimmed string; blank cells become ''."""
    if is_blank(value):
        return ""
    return str(value).strip()


# ---------------------------------------------------------------------------
# Integers (strict)
# ---------------------------------------------------------------------------

def parse_int(value) -> int:
    """Read an integer key/quantity cell.

    Accepts int cells, integral float cells, and digit-only text.
    """
    if is_blank(value):
        raise CellValueError("value is missing")
    if isinstance(value, bool):
        raise CellValueError(f"expected an integer, got boolean {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise CellValueError(f"expected an integer, got {value!r}")
        return int(value)
    if isinstance(value, Decimal):
        if value != value.to_integral_value():
            raise CellValueError(f"expected an integer, got {value!r}")
        return int(value)
    text = str(value).strip()
    if not _INT_RE.match(text):
        raise CellValueError(f"expected an integer, got {text!r}")
    return int(text)


# ---------------------------------------------------------------------------
# Dates (strict)
# ---------------------------------------------------------------------------

def _read_datetime(value) -> dt.datetime:
    if is_blank(value):
        raise CellValueError("date is missing")
    if isinstance(value, dt.datetime):
        return value
    if isinstance(value, dt.date):
        return dt.datetime.combine(value, dt.time())
    if isinstance(value, bool):
        raise CellValueError(f"expected a date, got boolean {value!r}")
    if isinstance(value, (int, float)):
        try:
            converted = from_excel(value)
        except (OverflowError, ValueError) as exc:
            raise CellValueError(f"expected a date, got serial {value!r}") from exc
        if isinstance(converted, dt.datetime):
            return converted
        raise CellValueError(f"expected a date, got serial {value!r}")

    text = str(value).strip()
    for fmt in TEXT_DATE_FORMATS:
        try:
            return dt.datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise CellValueError(f"expected a date, got {text!r}")


def parse_datetime(value) -> dt.datetime:
    """Read an order date cell as a datetime.

    Accepts datetime/date cells, Excel serial numbers, and text in one of
    TEXT_DATE_FORMATS. Dates pandas cannot hold as timestamps are rejected.
    """
    moment = _read_datetime(value)
    if not _EARLIEST_DATE <= moment.replace(tzinfo=None) <= _LATEST_DATE:
        raise CellValueError(
            f"date {moment:%Y-%m-%d} is outside the supported range "
            f"{_EARLIEST_DATE:%Y-%m-%d} to {_LATEST_DATE:%Y-%m-%d}"
        )
    return moment


# ---------------------------------------------------------------------------
# Currency (lenient at the schema level)
# ---------------------------------------------------------------------------

def _check_amount(amount: Decimal, raw) -> Decimal:
    if not amount.is_finite():
        raise PriceParseError(f"price is not a finite number: {raw!r}")
    if amount < 0:
        raise PriceParseError(f"price is negative: {raw!r}")
    return amount


def parse_price(value) -> Decimal:
    """Read a unit price.

    Numeric cells are taken directly. Text cells have currency glyphs and
    whitespace removed and a decimal comma turned into a point, then are
    parsed locale-invariantly: "12,50 ₽" -> Decimal("12.50").
    """
    if isinstance(value, bool):
        raise PriceParseError(f"price is a boolean: {value!r}")
    if isinstance(value, (int, float, Decimal)) and not is_blank(value):
        return _check_amount(Decimal(str(value)), value)

    text = "" if value is None else str(value)
    for glyph in CURRENCY_GLYPHS:
        text = text.replace(glyph, "")
    text = _WHITESPACE_RE.sub("", text).replace(",", ".")
    if not text:
        raise PriceParseError(f"price is missing: {value!r}")
    try:
        amount = Decimal(text)
    except InvalidOperation as exc:
        raise PriceParseError(f"cannot parse price {value!r}") from exc
    return _check_amount(amount, value)
