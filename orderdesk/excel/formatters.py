"""
Reusable cell/row formatting helpers for the order workbook.
"""
from __future__ import annotations

from decimal import Decimal

from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from orderdesk.config import DATE_NUMBER_FORMAT, PRICE_NUMBER_FORMAT
from orderdesk.excel.styles import (
    CENTER, LEFT, RIGHT,
    DATA_FONT, HEADER_BORDER, HEADER_FILL, HEADER_FONT, THIN_BORDER,
)


# ---------------------------------------------------------------------------
# Header row
# ---------------------------------------------------------------------------

def format_header_row(ws: Worksheet, row_num: int, num_cols: int) -> None:
    """Apply header styling to an entire row."""
    for col in range(1, num_cols + 1):
        cell = ws.cell(row=row_num, column=col)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = CENTER
        cell.border = HEADER_BORDER


# ---------------------------------------------------------------------------
# Data cell
# ---------------------------------------------------------------------------

def to_cell_value(value):
    """Convert an entity field value to something openpyxl stores natively.

    Decimal prices are written as float because Excel cells hold IEEE
    doubles. Currency amounts survive exactly; values with more than about
    15 significant digits are rounded in the saved workbook.
    """
    if isinstance(value, Decimal):
        return float(value)
    return value


def write_data_cell(ws: Worksheet, row_num: int, col_num: int, value, col_type: str = "text") -> None:
    """Write and format a single data cell."""
    cell = ws.cell(row=row_num, column=col_num)
    cell.value = to_cell_value(value)
    cell.font = DATA_FONT
    cell.border = THIN_BORDER
    cell.alignment = RIGHT if col_type in ("currency", "number", "date") else LEFT

    if col_type == "currency":
        cell.number_format = PRICE_NUMBER_FORMAT
    elif col_type == "date":
        cell.number_format = DATE_NUMBER_FORMAT
    elif col_type == "number":
        cell.number_format = "0"


# ---------------------------------------------------------------------------
# Column widths
# ---------------------------------------------------------------------------

def auto_column_width(ws: Worksheet, min_width: int = 8, max_width: int = 50) -> None:
    """Set each column's width from its longest value."""
    for col_cells in ws.columns:
        max_len = 0
        col_letter = get_column_letter(col_cells[0].column)
        for cell in col_cells:
            if cell.value is not None:
                max_len = max(max_len, len(str(cell.value)))
        ws.column_dimensions[col_letter].width = max(min_width, min(max_len + 2, max_width))
