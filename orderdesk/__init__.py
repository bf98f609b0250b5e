"""OrderDesk: client, catalog and purchase-request workbook tooling."""
__version__ = "1.0.0"
