"""
Entity records, declared sheet layouts, and the period filter.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, fields
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional

from orderdesk.config import CATALOG_SHEET, ORGANIZATIONS_SHEET, RECORDS_SHEET
from orderdesk.data.normalize import parse_datetime, parse_int, parse_price, parse_text


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Organization:
    """A client organization. contact_person is the only field ever edited."""
    code: int
    name: str
    address: str
    contact_person: str


@dataclass(frozen=True)
class CatalogItem:
    """A product in the catalog."""
    code: int
    name: str
    unit: str
    unit_price: Decimal


@dataclass(frozen=True)
class PurchaseRecord:
    """One purchase request line. item_code/org_code may reference nothing."""
    record_id: int
    item_code: int
    org_code: int
    sequence_number: int
    quantity: int
    ordered_on: dt.datetime


# ---------------------------------------------------------------------------
# Sheet layouts
# ---------------------------------------------------------------------------

class ParsePolicy(str, Enum):
    STRICT = "strict"      # failure aborts the load
    LENIENT = "lenient"    # failure logs a warning and uses the field default


@dataclass(frozen=True)
class FieldSpec:
    """One positional column of a sheet."""
    name: str
    label: str
    parser: Callable[[Any], Any]
    policy: ParsePolicy = ParsePolicy.STRICT
    default: Any = None
    col_type: str = "text"   # formatting hint for the writer: text|number|currency|date


@dataclass(frozen=True)
class SectionSchema:
    """Ordered column layout of one worksheet and the entity it produces."""
    key: str
    sheet: str
    entity: type
    fields: tuple[FieldSpec, ...]

    def __post_init__(self) -> None:
        entity_fields = [f.name for f in fields(self.entity)]
        declared = [f.name for f in self.fields]
        if entity_fields != declared:
            raise ValueError(
                f"Schema for sheet {self.sheet!r} declares {declared}, "
                f"but {self.entity.__name__} has {entity_fields}"
            )

    @property
    def width(self) -> int:
        return len(self.fields)

    @property
    def labels(self) -> list[str]:
        return [f.label for f in self.fields]

    def values(self, entity) -> list:
        """Field values of an entity in column order."""
        return [getattr(entity, f.name) for f in self.fields]


ORGANIZATIONS_SCHEMA = SectionSchema(
    key="organizations",
    sheet=ORGANIZATIONS_SHEET,
    entity=Organization,
    fields=(
        FieldSpec("code", "Код клиента", parse_int, col_type="number"),
        FieldSpec("name", "Наименование организации", parse_text),
        FieldSpec("address", "Адрес", parse_text),
        FieldSpec("contact_person", "Контактное лицо (ФИО)", parse_text),
    ),
)

CATALOG_SCHEMA = SectionSchema(
    key="catalog",
    sheet=CATALOG_SHEET,
    entity=CatalogItem,
    fields=(
        FieldSpec("code", "Код товара", parse_int, col_type="number"),
        FieldSpec("name", "Наименование", parse_text),
        FieldSpec("unit", "Ед. измерения", parse_text),
        FieldSpec(
            "unit_price", "Цена товара за единицу", parse_price,
            policy=ParsePolicy.LENIENT, default=Decimal("0"), col_type="currency",
        ),
    ),
)

RECORDS_SCHEMA = SectionSchema(
    key="records",
    sheet=RECORDS_SHEET,
    entity=PurchaseRecord,
    fields=(
        FieldSpec("record_id", "Код заявки", parse_int, col_type="number"),
        FieldSpec("item_code", "Код товара", parse_int, col_type="number"),
        FieldSpec("org_code", "Код клиента", parse_int, col_type="number"),
        FieldSpec("sequence_number", "Номер заявки", parse_int, col_type="number"),
        FieldSpec("quantity", "Требуемое количество", parse_int, col_type="number"),
        FieldSpec("ordered_on", "Дата размещения", parse_datetime, col_type="date"),
    ),
)

SECTION_SCHEMAS = (ORGANIZATIONS_SCHEMA, CATALOG_SCHEMA, RECORDS_SCHEMA)


# ---------------------------------------------------------------------------
# Period filter
# ---------------------------------------------------------------------------

class PeriodType(str, Enum):
    MONTH = "month"
    YEAR = "year"


@dataclass
class PeriodFilter:
    """A calendar year or a single month of a year."""
    period_type: PeriodType
    year: int
    month: Optional[int] = None          # 1-12, MONTH only

    @classmethod
    def for_year_month(cls, year: int, month: Optional[int] = None) -> "PeriodFilter":
        if month is None:
            return cls(PeriodType.YEAR, year)
        if not 1 <= month <= 12:
            raise ValueError(f"month must be between 1 and 12, got {month}")
        return cls(PeriodType.MONTH, year, month)

    @property
    def label(self) -> str:
        """Human-readable label for the period."""
        if self.period_type == PeriodType.MONTH:
            return f"{dt.date(self.year, self.month, 1):%B %Y}"
        return str(self.year)
