import datetime as dt
import logging
from decimal import Decimal

import pytest
from openpyxl import load_workbook

from orderdesk.config import CATALOG_SHEET, ORGANIZATIONS_SHEET, RECORDS_SHEET
from orderdesk.data.loader import load_workbook_sections
from orderdesk.data.schemas import CatalogItem, Organization, PurchaseRecord
from orderdesk.data.store import DataStore
from orderdesk.errors import CellValueError, LoadError, SchemaError

from conftest import ITEMS, ORGS, RECORDS, write_workbook


def test_sections_have_one_entity_per_data_row_in_order(workbook_path):
    sections = load_workbook_sections(workbook_path)

    assert len(sections["organizations"]) == len(ORGS)
    assert len(sections["catalog"]) == len(ITEMS)
    assert len(sections["records"]) == len(RECORDS)
    assert [o.code for o in sections["organizations"]] == [1, 2, 3]
    assert [r.record_id for r in sections["records"]] == [r[0] for r in RECORDS]


def test_rows_are_typed(workbook_path):
    sections = load_workbook_sections(workbook_path)

    assert sections["organizations"][0] == Organization(1, "ACME", "1 Main St", "John Smith")
    assert sections["catalog"][0] == CatalogItem(10, "Widget", "pcs", Decimal("12.50"))
    assert sections["records"][0] == PurchaseRecord(100, 10, 1, 1, 5, dt.datetime(2023, 5, 2))


def test_lenient_prices(workbook_path, caplog):
    with caplog.at_level(logging.WARNING, logger="orderdesk.data.loader"):
        items = load_workbook_sections(workbook_path)["catalog"]

    assert [i.unit_price for i in items] == [Decimal("12.50"), Decimal("12.50"), Decimal("0")]
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "unit_price" in warnings[0].getMessage()
    assert "'abc'" in warnings[0].getMessage()


def test_blank_rows_are_skipped(tmp_path):
    orgs = [ORGS[0], (None, None, None, None), ORGS[1]]
    path = write_workbook(tmp_path / "gaps.xlsx", orgs=orgs)

    sections = load_workbook_sections(path)

    assert [o.code for o in sections["organizations"]] == [1, 2]


def test_header_only_sheets_give_empty_collections(tmp_path):
    path = write_workbook(tmp_path / "empty.xlsx", orgs=[], items=[], records=[])

    store = DataStore().load(path)

    assert store.organizations == ()
    assert store.list_catalog_items() == ()
    assert store.records == ()


def test_missing_sheet_is_schema_error(tmp_path):
    path = write_workbook(tmp_path / "partial.xlsx", sheets={ORGANIZATIONS_SHEET, CATALOG_SHEET})

    with pytest.raises(SchemaError, match=RECORDS_SHEET):
        load_workbook_sections(path)


def test_schema_error_is_a_load_error():
    assert issubclass(SchemaError, LoadError)


def test_narrow_header_is_schema_error(tmp_path):
    path = write_workbook(tmp_path / "narrow.xlsx")
    wb = load_workbook(path)
    wb[RECORDS_SHEET].cell(row=1, column=6).value = None
    wb.save(path)

    with pytest.raises(SchemaError, match="header has 5 column"):
        load_workbook_sections(path)


def test_bad_integer_fails_whole_load(tmp_path):
    records = list(RECORDS)
    records[1] = (101, "ten", 1, 2, 3, dt.datetime(2023, 5, 10))
    path = write_workbook(tmp_path / "bad.xlsx", records=records)

    with pytest.raises(LoadError, match=r"row 3, column B \(item_code\)") as excinfo:
        load_workbook_sections(path)
    assert isinstance(excinfo.value.__cause__, CellValueError)


def test_missing_date_fails_whole_load(tmp_path):
    records = [(100, 10, 1, 1, 5, None)]
    path = write_workbook(tmp_path / "nodate.xlsx", records=records)

    with pytest.raises(LoadError, match="ordered_on"):
        load_workbook_sections(path)


def test_missing_file_is_load_error(tmp_path):
    with pytest.raises(LoadError, match="not found"):
        DataStore().load(tmp_path / "nope.xlsx")


def test_not_a_workbook_is_load_error(tmp_path):
    path = tmp_path / "junk.xlsx"
    path.write_text("not a spreadsheet")

    with pytest.raises(LoadError):
        DataStore().load(path)


def test_failed_reload_keeps_previous_data(store, tmp_path):
    before = store.organizations

    with pytest.raises(LoadError):
        store.load(tmp_path / "nope.xlsx")

    assert store.organizations == before
    assert store.path is not None


def test_out_of_range_date_is_load_error_and_keeps_previous_data(store, tmp_path):
    before_orgs, before_records, before_path = store.organizations, store.records, store.path
    bad = write_workbook(
        tmp_path / "far_future.xlsx",
        orgs=[(7, "Umbrella", "7 Hill Rd", "Alice Abernathy")],
        records=[(200, 10, 7, 1, 1, "01.01.2300")],
    )

    with pytest.raises(LoadError, match=r"row 2, column F \(ordered_on\)"):
        store.load(bad)

    assert store.organizations == before_orgs
    assert store.records == before_records
    assert store.path == before_path
    assert store.counts()["organizations"] == len(ORGS)
