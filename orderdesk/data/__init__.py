"""Workbook loading, cell parsing, and the in-memory query engine."""
from .loader import load_workbook_sections
from .store import DataStore
from .schemas import CatalogItem, Organization, PurchaseRecord, PeriodFilter
from .normalize import parse_datetime, parse_int, parse_price, parse_text
