"""
Exception taxonomy for loading, parsing, and persisting the order workbook.
"""
from __future__ import annotations


class OrderDeskError(Exception):
    """Base class for all OrderDesk errors."""


class LoadError(OrderDeskError):
    """The workbook could not be loaded. Fatal: no partial store is exposed."""


class SchemaError(LoadError):
    """A required sheet is missing or its header does not fit the declared layout."""


class PersistError(OrderDeskError):
    """Writing the collections back to the workbook failed."""


class CellValueError(ValueError):
    """A single cell value was rejected by its parser."""


class PriceParseError(CellValueError):
    """A currency cell could not be read as a non-negative amount."""
