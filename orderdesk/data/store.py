"""
DataStore: in-memory organizations, catalog, and purchase records.

Loaded once from the workbook, queried in memory, written back in full
whenever a contact person changes.
"""
from __future__ import annotations

import dataclasses
import datetime as dt
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from orderdesk.config import DATA_FILE, UNKNOWN_ORGANIZATION
from orderdesk.data.loader import load_workbook_sections
from orderdesk.data.schemas import (
    CatalogItem,
    Organization,
    PeriodFilter,
    PeriodType,
    PurchaseRecord,
)
from orderdesk.errors import PersistError

logger = logging.getLogger(__name__)

_RECORD_COLUMNS = ["record_id", "item_code", "org_code", "sequence_number", "quantity", "ordered_on"]


def _norm(name: str) -> str:
    return name.strip().casefold()


class DataStore:
    """Organizations, catalog items and purchase records with lookup and ranking queries."""

    def __init__(self) -> None:
        self.path: Optional[Path] = None
        self._organizations: tuple[Organization, ...] = ()
        self._items: tuple[CatalogItem, ...] = ()
        self._records: tuple[PurchaseRecord, ...] = ()
        self._records_df: pd.DataFrame = self._build_records_frame(())
        self.last_persist_error: Optional[PersistError] = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, path: Path = DATA_FILE) -> "DataStore":
        """Load all three sheets. Raises LoadError; on failure the store is unchanged."""
        path = Path(path)
        logger.info("Loading order data from %s", path)
        sections = load_workbook_sections(path)
        records = tuple(sections["records"])
        records_df = self._build_records_frame(records)

        self.path = path
        self._organizations = tuple(sections["organizations"])
        self._items = tuple(sections["catalog"])
        self._records = records
        self._records_df = records_df
        self.last_persist_error = None

        logger.info(
            "Loaded %d organizations, %d catalog items, %d purchase records",
            len(self._organizations), len(self._items), len(self._records),
        )
        return self

    @staticmethod
    def _build_records_frame(records) -> pd.DataFrame:
        """Records as a DataFrame with integer year/month columns for period filtering."""
        df = pd.DataFrame(
            [dataclasses.astuple(r) for r in records],
            columns=_RECORD_COLUMNS,
        )
        df["ordered_on"] = pd.to_datetime(df["ordered_on"])
        df["year"] = df["ordered_on"].dt.year
        df["month"] = df["ordered_on"].dt.month
        return df

    # ------------------------------------------------------------------
    # Collections (read-only views)
    # ------------------------------------------------------------------

    @property
    def organizations(self) -> tuple[Organization, ...]:
        return self._organizations

    @property
    def records(self) -> tuple[PurchaseRecord, ...]:
        return self._records

    def list_catalog_items(self) -> tuple[CatalogItem, ...]:
        return self._items

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_item_code_by_name(self, name: str) -> Optional[int]:
        """Code of the first catalog item whose name equals `name`, ignoring case and padding."""
        wanted = _norm(name)
        match = next((i for i in self._items if _norm(i.name) == wanted), None)
        return match.code if match else None

    def records_by_item_code(self, code: int) -> tuple[PurchaseRecord, ...]:
        """All records for an item in load order. Empty for non-positive or unknown codes."""
        if code <= 0:
            return ()
        return tuple(r for r in self._records if r.item_code == code)

    def organization_by_code(self, code: int) -> Optional[Organization]:
        return next((o for o in self._organizations if o.code == code), None)

    def item_by_code(self, code: int) -> Optional[CatalogItem]:
        return next((i for i in self._items if i.code == code), None)

    def organization_label(self, code: int) -> str:
        org = self.organization_by_code(code)
        return org.name if org else UNKNOWN_ORGANIZATION

    def item_order_lines(self, code: int) -> pd.DataFrame:
        """Records of one item joined with organization names for display.

        Dangling organization codes get the UNKNOWN_ORGANIZATION label; a
        dangling item code prices every line at zero.
        """
        item = self.item_by_code(code)
        price = item.unit_price if item else 0
        lines = [
            {
                "org_code": r.org_code,
                "organization": self.organization_label(r.org_code),
                "quantity": r.quantity,
                "unit_price": price,
                "ordered_on": r.ordered_on,
            }
            for r in self.records_by_item_code(code)
        ]
        return pd.DataFrame(
            lines, columns=["org_code", "organization", "quantity", "unit_price", "ordered_on"]
        )

    # ------------------------------------------------------------------
    # Mutation & persistence
    # ------------------------------------------------------------------

    def update_contact(self, organization_name: str, new_contact: str) -> bool:
        """Set the contact person of an organization and write the workbook.

        Returns False (nothing changed) for blank arguments or an unknown
        organization. Returns True once the in-memory change is made, even
        if saving fails; the failure is logged and kept in last_persist_error.
        """
        if not organization_name or not organization_name.strip():
            return False
        if not new_contact or not new_contact.strip():
            return False

        wanted = _norm(organization_name)
        idx = next(
            (i for i, o in enumerate(self._organizations) if _norm(o.name) == wanted),
            None,
        )
        if idx is None:
            return False

        orgs = list(self._organizations)
        orgs[idx] = dataclasses.replace(orgs[idx], contact_person=new_contact.strip())
        self._organizations = tuple(orgs)
        logger.info("Contact for %r (code %d) set to %r", orgs[idx].name, orgs[idx].code, orgs[idx].contact_person)

        self.last_persist_error = None
        try:
            self.save()
        except PersistError as exc:
            logger.error("Contact updated in memory but not saved: %s", exc)
            self.last_persist_error = exc
        return True

    def save(self) -> None:
        """Rewrite every data row of all three sheets. Raises PersistError."""
        from orderdesk.excel.writer import WorkbookWriter

        if self.path is None:
            raise PersistError("Store has no backing workbook; call load() first")
        WorkbookWriter().rewrite_sections(
            self.path,
            {
                "organizations": self._organizations,
                "catalog": self._items,
                "records": self._records,
            },
        )
        logger.info("Saved %s", self.path)

    # ------------------------------------------------------------------
    # Period filtering & aggregation
    # ------------------------------------------------------------------

    def _apply_period(self, df: pd.DataFrame, period: PeriodFilter) -> pd.DataFrame:
        """Filter records on the integer year/month columns."""
        if period.period_type == PeriodType.MONTH:
            return df[(df["year"] == period.year) & (df["month"] == period.month)]
        return df[df["year"] == period.year]

    def organization_activity(self, year: int, month: int | None = None) -> pd.DataFrame:
        """Organizations ranked by number of records in the period.

        Ordered by record count descending, ties broken by lowest org_code.
        """
        period = PeriodFilter.for_year_month(year, month)
        df = self._apply_period(self._records_df, period)
        ranked = (
            df.groupby("org_code")
            .agg(orders=("record_id", "count"), units=("quantity", "sum"))
            .reset_index()
            .sort_values(["orders", "org_code"], ascending=[False, True])
            .reset_index(drop=True)
        )
        ranked.insert(1, "organization", [self.organization_label(c) for c in ranked["org_code"]])
        return ranked

    def most_active_organization(self, year: int, month: int | None = None) -> Optional[Organization]:
        """The "golden client": organization with the most records in the period.

        None when the period has no records or the winning code matches no
        organization.
        """
        ranked = self.organization_activity(year, month)
        if ranked.empty:
            return None
        return self.organization_by_code(int(ranked.iloc[0]["org_code"]))

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def periods_available(self) -> list[dict]:
        """Return list of {year, month, label, orders} dicts for months with records."""
        if self._records_df.empty:
            return []
        counts = self._records_df.groupby(["year", "month"]).size().reset_index(name="orders")
        result = []
        for _, row in counts.iterrows():
            y, m = int(row["year"]), int(row["month"])
            label = f"{dt.date(y, m, 1):%B %Y}"
            result.append({"year": y, "month": m, "label": label, "orders": int(row["orders"])})
        return result

    def counts(self) -> dict[str, int]:
        return {
            "organizations": len(self._organizations),
            "catalog": len(self._items),
            "records": len(self._records),
        }
