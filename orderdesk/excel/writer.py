"""
WorkbookWriter: creates empty order workbooks and rewrites their data rows.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Mapping

from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from orderdesk.config import FIRST_DATA_ROW, HEADER_ROW
from orderdesk.data.schemas import SECTION_SCHEMAS, SectionSchema
from orderdesk.errors import PersistError
from orderdesk.excel.formatters import auto_column_width, format_header_row, write_data_cell

logger = logging.getLogger(__name__)


class WorkbookWriter:
    """Writes the three order sheets laid out by their section schemas."""

    def __init__(self, schemas: Iterable[SectionSchema] = SECTION_SCHEMAS) -> None:
        self.schemas = tuple(schemas)

    # ------------------------------------------------------------------
    # Template
    # ------------------------------------------------------------------

    def create_template(self, path: str | Path) -> Path:
        """Save a workbook with one styled, empty sheet per section."""
        path = Path(path)
        wb = Workbook()
        for idx, schema in enumerate(self.schemas):
            if idx == 0:
                ws = wb.active
                ws.title = schema.sheet
            else:
                ws = wb.create_sheet(title=schema.sheet)
            for col_num, label in enumerate(schema.labels, 1):
                ws.cell(row=HEADER_ROW, column=col_num).value = label
            format_header_row(ws, HEADER_ROW, schema.width)
            auto_column_width(ws, min_width=14)
            ws.freeze_panes = f"A{FIRST_DATA_ROW}"

        path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(path)
        return path

    # ------------------------------------------------------------------
    # Persist
    # ------------------------------------------------------------------

    def write_section(self, ws: Worksheet, schema: SectionSchema, entities) -> int:
        """Overwrite the data rows of one sheet; rows past the last entity are deleted.

        Returns the number of stale rows removed.
        """
        row = FIRST_DATA_ROW
        for entity in entities:
            for col_num, (spec, value) in enumerate(zip(schema.fields, schema.values(entity)), 1):
                write_data_cell(ws, row, col_num, value, spec.col_type)
            row += 1

        stale = ws.max_row - row + 1
        if stale > 0:
            ws.delete_rows(row, stale)
            return stale
        return 0

    def rewrite_sections(self, path: str | Path, sections: Mapping[str, Iterable]) -> None:
        """Reopen the workbook and rewrite every section's data rows. Raises PersistError."""
        path = Path(path)
        try:
            wb = load_workbook(path)
        except Exception as exc:
            raise PersistError(f"Cannot open workbook {path} for writing: {exc}") from exc

        try:
            missing = [s.sheet for s in self.schemas if s.sheet not in wb.sheetnames]
            if missing:
                raise PersistError(
                    f"Workbook {path} lacks sheet(s): " + ", ".join(repr(m) for m in missing)
                )
            for schema in self.schemas:
                removed = self.write_section(wb[schema.sheet], schema, sections[schema.key])
                if removed:
                    logger.debug("Sheet %r: removed %d stale row(s)", schema.sheet, removed)
            wb.save(path)
        except PersistError:
            raise
        except Exception as exc:
            raise PersistError(f"Cannot write workbook {path}: {exc}") from exc
        finally:
            wb.close()
