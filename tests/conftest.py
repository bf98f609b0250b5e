import datetime as dt

import pytest
from openpyxl import Workbook

from orderdesk.config import CATALOG_SHEET, ORGANIZATIONS_SHEET, RECORDS_SHEET

ORG_HEADER = ["Код клиента", "Наименование организации", "Адрес", "Контактное лицо (ФИО)"]
ITEM_HEADER = ["Код товара", "Наименование", "Ед. измерения", "Цена товара за единицу"]
RECORD_HEADER = ["Код заявки", "Код товара", "Код клиента", "Номер заявки", "Требуемое количество", "Дата размещения"]

ORGS = [
    (1, "ACME", "1 Main St", "John Smith"),
    (2, "Globex", "2 Side St", "Ann Lee"),
    (3, "Initech", "3 Back St", "Bill Lumbergh"),
]

ITEMS = [
    (10, "Widget", "pcs", 12.5),
    (11, "Gadget", "kg", "12,50 ₽"),
    (12, "Gizmo", "pcs", "abc"),
]

RECORDS = [
    (100, 10, 1, 1, 5, dt.datetime(2023, 5, 2)),
    (101, 10, 1, 2, 3, dt.datetime(2023, 5, 10)),
    (102, 11, 1, 3, 1, dt.datetime(2023, 5, 20)),
    (103, 10, 2, 4, 2, dt.datetime(2023, 5, 21)),
    (104, 11, 2, 5, 7, dt.datetime(2023, 6, 1)),
    (105, 11, 2, 6, 7, dt.datetime(2023, 6, 2)),
    (106, 11, 2, 7, 7, dt.datetime(2023, 6, 3)),
    (107, 10, 99, 8, 1, dt.datetime(2023, 5, 25)),
    (108, 11, 3, 9, 4, dt.datetime(2022, 5, 1)),
]


def write_workbook(path, orgs=ORGS, items=ITEMS, records=RECORDS, sheets=None):
    """Write an order workbook; `sheets` limits which sheets are created."""
    layout = [
        (ORGANIZATIONS_SHEET, ORG_HEADER, orgs),
        (CATALOG_SHEET, ITEM_HEADER, items),
        (RECORDS_SHEET, RECORD_HEADER, records),
    ]
    wb = Workbook()
    wb.remove(wb.active)
    for title, header, rows in layout:
        if sheets is not None and title not in sheets:
            continue
        ws = wb.create_sheet(title=title)
        ws.append(header)
        for row in rows:
            ws.append(list(row))
    wb.save(path)
    return path


@pytest.fixture
def workbook_path(tmp_path):
    return write_workbook(tmp_path / "orders.xlsx")


@pytest.fixture
def store(workbook_path):
    from orderdesk.data.store import DataStore
    return DataStore().load(workbook_path)
