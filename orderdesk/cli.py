#!/usr/bin/env python3
"""
OrderDesk CLI: query and edit the client / product / purchase-request workbook.

USAGE:
  python -m orderdesk.cli                                   # Interactive menu
  python -m orderdesk.cli --file orders.xlsx shell          # Same, explicit workbook

  python -m orderdesk.cli search "Widget"                   # Clients who ordered a product
  python -m orderdesk.cli contact "Acme" "Jane Doe"         # Change a contact person
  python -m orderdesk.cli golden --year 2023 --month 5      # Golden client of May 2023
  python -m orderdesk.cli golden --year 2023 --top 5        # Top 5 clients of 2023
  python -m orderdesk.cli products                          # List the catalog
  python -m orderdesk.cli periods                           # Months with purchase requests

  python -m orderdesk.cli init new_orders.xlsx              # Create an empty workbook
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from orderdesk.config import CURRENCY_SYMBOL, DATA_FILE, DATE_DISPLAY_FORMAT
from orderdesk.data.schemas import PeriodFilter
from orderdesk.data.store import DataStore
from orderdesk.errors import LoadError


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging; warnings only unless --verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _money(value) -> str:
    return f"{value:,.2f} {CURRENCY_SYMBOL}"


def _load_store(path: Path) -> DataStore:
    """Load the workbook or terminate: a partially loaded store is never used."""
    try:
        return DataStore().load(path)
    except LoadError as exc:
        print(f"Error loading data: {exc}")
        sys.exit(1)


# ---------------------------------------------------------------------------
# Actions (shared by subcommands and the interactive menu)
# ---------------------------------------------------------------------------

def search_clients_by_product(store: DataStore, product_name: str) -> None:
    if not product_name or not product_name.strip():
        print("Product name cannot be empty.")
        return

    code = store.find_item_code_by_name(product_name)
    if code is None:
        print("No product with that name was found.")
        return

    lines = store.item_order_lines(code)
    if lines.empty:
        print("There are no orders for this product.")
        return

    print(f"\n{'Client code':<12} {'Organization':<30} {'Quantity':>10} {'Unit price':>15}  {'Order date':<12}")
    for line in lines.itertuples(index=False):
        print(
            f"{line.org_code:<12} {str(line.organization)[:30]:<30} {line.quantity:>10} "
            f"{_money(line.unit_price):>15}  {line.ordered_on:{DATE_DISPLAY_FORMAT}}"
        )


def change_contact(store: DataStore, organization: str, contact: str) -> bool:
    if not organization or not organization.strip() or not contact or not contact.strip():
        print("Organization name and new contact person cannot be empty.")
        return False

    if not store.update_contact(organization, contact):
        print("No client with that organization name was found.")
        return False

    print("Contact person updated.")
    if store.last_persist_error is not None:
        print(f"  WARNING: change kept in memory but not saved: {store.last_persist_error}")
    return True


def show_golden_client(store: DataStore, year: int, month: int | None, top: int = 0) -> None:
    period = PeriodFilter.for_year_month(year, month)
    golden = store.most_active_organization(year, month)
    if golden is None:
        print(f"No orders for {period.label}.")
        return

    print(f"\nGolden client for {period.label}: {golden.name}")
    print(f"Contact person: {golden.contact_person}")

    if top:
        ranked = store.organization_activity(year, month).head(top)
        print(f"\n{'#':<4}{'Code':<8}{'Organization':<32}{'Orders':>8}{'Units':>10}")
        for i, row in enumerate(ranked.itertuples(index=False), 1):
            print(f"{i:<4}{row.org_code:<8}{str(row.organization)[:30]:<32}{row.orders:>8}{row.units:>10}")


def list_products(store: DataStore) -> None:
    items = store.list_catalog_items()
    print(f"\nPRODUCTS ({len(items)}):\n")
    for item in items:
        print(f"{item.code:<8}{item.name[:40]:<42}{item.unit:<10}{_money(item.unit_price):>15}")


def list_periods(store: DataStore) -> None:
    counts = store.counts()
    print(
        f"\n{counts['organizations']} client(s), {counts['catalog']} product(s), "
        f"{counts['records']} purchase request(s)\n"
    )
    periods = store.periods_available()
    if not periods:
        print("No purchase requests loaded.")
        return
    for p in periods:
        print(f"{p['label']:<20}{p['orders']:>6} order(s)")


# ---------------------------------------------------------------------------
# Interactive menu
# ---------------------------------------------------------------------------

MENU = """
Choose an action:
1. Search clients by product name
2. Change a client's contact person
3. Determine the golden client
4. Exit"""


def _read_int(prompt: str) -> int | None:
    text = input(prompt).strip()
    try:
        return int(text)
    except ValueError:
        return None


def run_shell(store: DataStore) -> None:
    print("Welcome to the order management system!")
    while True:
        print(MENU)
        try:
            choice = input("Enter the action number: ").strip()
            if choice == "1":
                search_clients_by_product(store, input("Enter the product name: "))
            elif choice == "2":
                organization = input("Enter the organization name: ")
                contact = input("Enter the new contact person's full name: ")
                change_contact(store, organization, contact)
            elif choice == "3":
                year = _read_int("Enter the year (e.g. 2023): ")
                if year is None:
                    print("Invalid year.")
                    continue
                month = _read_int("Enter the month (1-12): ")
                if month is None or not 1 <= month <= 12:
                    print("Invalid month.")
                    continue
                show_golden_client(store, year, month)
            elif choice == "4":
                print("Exiting. Goodbye!")
                return
            else:
                print("Invalid choice. Try again.")
        except EOFError:
            print()
            return


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------

def cmd_shell(args):
    """Run the interactive menu."""
    run_shell(_load_store(args.file))


def cmd_search(args):
    """Clients who ordered a product."""
    search_clients_by_product(_load_store(args.file), args.product)


def cmd_contact(args):
    """Change an organization's contact person."""
    ok = change_contact(_load_store(args.file), args.organization, args.person)
    if not ok:
        sys.exit(1)


def cmd_golden(args):
    """Most active client of a year or month."""
    if args.month is not None and not 1 <= args.month <= 12:
        print("Invalid month.")
        sys.exit(2)
    show_golden_client(_load_store(args.file), args.year, args.month, args.top)


def cmd_products(args):
    list_products(_load_store(args.file))


def cmd_periods(args):
    list_periods(_load_store(args.file))


def cmd_init(args):
    """Create an empty workbook with the three sheets."""
    from orderdesk.excel.writer import WorkbookWriter

    out = Path(args.path)
    if out.exists():
        print(f"Refusing to overwrite existing file: {out}")
        sys.exit(1)
    WorkbookWriter().create_template(out)
    print(f"Created {out}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orderdesk",
        description="OrderDesk: client, product and purchase-request workbook tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--file", type=Path, default=DATA_FILE,
                        help=f"Workbook path (default: {DATA_FILE}, or $ORDERDESK_DATA_FILE)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.set_defaults(func=cmd_shell)
    subparsers = parser.add_subparsers(dest="command", help="Command")

    shell_parser = subparsers.add_parser("shell", help="Interactive menu (default)")
    shell_parser.set_defaults(func=cmd_shell)

    search_parser = subparsers.add_parser("search", help="Clients who ordered a product")
    search_parser.add_argument("product", help="Product name (case-insensitive)")
    search_parser.set_defaults(func=cmd_search)

    contact_parser = subparsers.add_parser("contact", help="Change a contact person")
    contact_parser.add_argument("organization", help="Organization name (case-insensitive)")
    contact_parser.add_argument("person", help="New contact person")
    contact_parser.set_defaults(func=cmd_contact)

    golden_parser = subparsers.add_parser("golden", help="Most active client of a period")
    golden_parser.add_argument("--year", type=int, required=True, help="Year")
    golden_parser.add_argument("--month", type=int, help="Month (1-12); whole year if omitted")
    golden_parser.add_argument("--top", type=int, default=0, help="Also list the top N clients")
    golden_parser.set_defaults(func=cmd_golden)

    products_parser = subparsers.add_parser("products", help="List the catalog")
    products_parser.set_defaults(func=cmd_products)

    periods_parser = subparsers.add_parser("periods", help="Months with purchase requests")
    periods_parser.set_defaults(func=cmd_periods)

    init_parser = subparsers.add_parser("init", help="Create an empty workbook")
    init_parser.add_argument("path", help="Where to write the new .xlsx file")
    init_parser.set_defaults(func=cmd_init)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
