"""
OrderDesk configuration: workbook location, sheet layout, display constants.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths (override with ORDERDESK_DATA_FILE env var)
# ---------------------------------------------------------------------------
DATA_FILE = Path(os.environ.get("ORDERDESK_DATA_FILE", "orders.xlsx"))

# ---------------------------------------------------------------------------
# Worksheet names (the workbook contract; data files are maintained in Russian)
# ---------------------------------------------------------------------------
ORGANIZATIONS_SHEET = "Клиенты"
CATALOG_SHEET = "Товары"
RECORDS_SHEET = "Заявки"

HEADER_ROW = 1
FIRST_DATA_ROW = 2

# ---------------------------------------------------------------------------
# Price parsing
# ---------------------------------------------------------------------------
CURRENCY_GLYPHS = ["₽", "$", "€"]
CURRENCY_SYMBOL = "₽"

# ---------------------------------------------------------------------------
# Date parsing & display
# ---------------------------------------------------------------------------
TEXT_DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%d.%m.%Y",
    "%d.%m.%Y %H:%M",
    "%d.%m.%Y %H:%M:%S",
]
DATE_DISPLAY_FORMAT = "%d.%m.%Y"

# Excel number formats applied to persisted cells
PRICE_NUMBER_FORMAT = "#,##0.00"
DATE_NUMBER_FORMAT = "DD.MM.YYYY"

# ---------------------------------------------------------------------------
# Placeholders for dangling references at display time
# ---------------------------------------------------------------------------
UNKNOWN_ORGANIZATION = "Unknown client"
