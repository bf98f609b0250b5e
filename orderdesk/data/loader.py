"""
Workbook reading: sheet discovery, header validation, row-to-entity parsing.
"""
from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from openpyxl import load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from orderdesk.config import FIRST_DATA_ROW, HEADER_ROW
from orderdesk.data.normalize import is_blank
from orderdesk.data.schemas import SECTION_SCHEMAS, ParsePolicy, SectionSchema
from orderdesk.errors import CellValueError, LoadError, SchemaError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Workbook access
# ---------------------------------------------------------------------------

def open_workbook(path: Path, data_only: bool = True) -> Workbook:
    """Open an .xlsx workbook, translating every failure into LoadError."""
    path = Path(path)
    if not path.is_file():
        raise LoadError(f"Data file not found: {path}")
    try:
        return load_workbook(path, data_only=data_only)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
        raise LoadError(f"Cannot open workbook {path}: {exc}") from exc


def require_sheets(wb: Workbook, schemas=SECTION_SCHEMAS) -> None:
    """Raise SchemaError listing every required sheet the workbook lacks."""
    missing = [s.sheet for s in schemas if s.sheet not in wb.sheetnames]
    if missing:
        raise SchemaError(
            "Required sheet(s) missing from workbook: " + ", ".join(repr(m) for m in missing)
        )


def _check_header(ws: Worksheet, schema: SectionSchema) -> None:
    header = next(
        ws.iter_rows(min_row=HEADER_ROW, max_row=HEADER_ROW, max_col=schema.width, values_only=True),
        (),
    )
    filled = sum(1 for v in header if not is_blank(v))
    if filled < schema.width:
        raise SchemaError(
            f"Sheet {schema.sheet!r}: header has {filled} column(s), "
            f"expected {schema.width} ({', '.join(schema.labels)})"
        )


# ---------------------------------------------------------------------------
# Section parsing
# ---------------------------------------------------------------------------

def parse_row(schema: SectionSchema, row_num: int, values: tuple):
    """Build one entity from a row's cell values, applying each field's policy."""
    kwargs = {}
    for col_num, spec in enumerate(schema.fields, 1):
        raw = values[col_num - 1] if col_num <= len(values) else None
        try:
            kwargs[spec.name] = spec.parser(raw)
        except CellValueError as exc:
            where = f"sheet {schema.sheet!r}, row {row_num}, column {get_column_letter(col_num)} ({spec.name})"
            if spec.policy == ParsePolicy.LENIENT:
                logger.warning("%s: %s; using %s", where, exc, spec.default)
                kwargs[spec.name] = spec.default
            else:
                raise LoadError(f"{where}: {exc}") from exc
    return schema.entity(**kwargs)


def load_section(ws: Worksheet, schema: SectionSchema) -> list:
    """Parse every non-blank data row of a sheet into entities, in row order."""
    _check_header(ws, schema)
    entities = []
    rows = ws.iter_rows(min_row=FIRST_DATA_ROW, max_col=schema.width, values_only=True)
    for row_num, values in enumerate(rows, FIRST_DATA_ROW):
        if all(is_blank(v) for v in values):
            continue
        entities.append(parse_row(schema, row_num, values))
    logger.debug("Sheet %r: %d row(s) parsed", schema.sheet, len(entities))
    return entities


def load_workbook_sections(path: Path, schemas=SECTION_SCHEMAS) -> dict[str, list]:
    """Load all sections of the workbook, keyed by schema key.

    Either every section parses or LoadError is raised; nothing partial
    is returned.
    """
    wb = open_workbook(path)
    try:
        require_sheets(wb, schemas)
        return {schema.key: load_section(wb[schema.sheet], schema) for schema in schemas}
    finally:
        wb.close()
