"""Grid storage: interfaces plus Google Sheets and in-memory adapters."""

from .base import Grid, GridError, Spreadsheet
from .client import GoogleSheetsClient, GoogleSheetGrid, GoogleSpreadsheet, open_spreadsheet
from .memory import InMemoryGrid, InMemorySpreadsheet
from .models import GridExtents, GridRange, SheetInfo

__all__ = [
    "Grid",
    "GridError",
    "Spreadsheet",
    "GoogleSheetsClient",
    "GoogleSheetGrid",
    "GoogleSpreadsheet",
    "open_spreadsheet",
    "InMemoryGrid",
    "InMemorySpreadsheet",
    "GridExtents",
    "GridRange",
    "SheetInfo",
]
