"""Workbook styling, formatting, and writing utilities."""
from .formatters import format_header_row, write_data_cell, auto_column_width
from .writer import WorkbookWriter
