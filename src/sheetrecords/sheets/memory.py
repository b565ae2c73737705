"""In-memory grid store."""

import logging
from typing import Optional

from .base import Grid, GridError, Spreadsheet
from .models import CellValue, GridExtents

logger = logging.getLogger(__name__)


class InMemoryGrid(Grid):
    """
    A sheet held in a dict of cells.

    Behaves like a Sheets tab: reads outside the populated area return '',
    extents track the last row/column holding a non-empty cell, and writing
    '' to a cell clears it.
    """

    def __init__(self, spreadsheet: "InMemorySpreadsheet", name: str, sheet_id: int):
        self._spreadsheet = spreadsheet
        self._name = name
        self._sheet_id = sheet_id
        self._cells: dict[tuple[int, int], CellValue] = {}
        self.frozen_rows = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def sheet_id(self) -> int:
        return self._sheet_id

    @property
    def spreadsheet(self) -> "InMemorySpreadsheet":
        return self._spreadsheet

    def get_extents(self) -> GridExtents:
        if not self._cells:
            return GridExtents()
        return GridExtents(
            last_row=max(row for row, _ in self._cells),
            last_column=max(col for _, col in self._cells),
        )

    def read_region(
        self, row: int, column: int, num_rows: int, num_columns: int
    ) -> list[list[CellValue]]:
        self._check_origin(row, column)
        return [
            [self._cells.get((r, c), "") for c in range(column, column + num_columns)]
            for r in range(row, row + num_rows)
        ]

    def write_region(self, row: int, column: int, values: list[list[CellValue]]) -> None:
        self._check_origin(row, column)
        widths = {len(line) for line in values}
        if len(widths) > 1:
            raise GridError(f"Cannot write a ragged block to '{self._name}': row widths {sorted(widths)}")
        width = widths.pop() if widths else 0
        for r, line in enumerate(values, start=row):
            for c, value in enumerate(line, start=column):
                self.set_cell(r, c, value)
        logger.debug(
            f"Wrote {len(values)}x{width} block to "
            f"'{self._name}' at R{row}C{column}"
        )

    def clear_region(self, row: int, column: int, num_rows: int, num_columns: int) -> None:
        self._check_origin(row, column)
        for r in range(row, row + num_rows):
            for c in range(column, column + num_columns):
                self._cells.pop((r, c), None)

    def freeze_rows(self, count: int) -> None:
        self.frozen_rows = count

    def commit(self) -> None:
        pass

    def set_cell(self, row: int, column: int, value: CellValue) -> None:
        if value is None or value == "":
            self._cells.pop((row, column), None)
        else:
            self._cells[(row, column)] = value

    def get_values(self) -> list[list[CellValue]]:
        """Return the whole populated area, like a sheet's data range."""
        extents = self.get_extents()
        if extents.is_empty:
            return []
        return self.read_region(1, 1, extents.last_row, extents.last_column)

    def clear(self) -> None:
        self._cells.clear()

    def _check_origin(self, row: int, column: int) -> None:
        if row < 1 or column < 1:
            raise GridError(f"Invalid cell R{row}C{column} in '{self._name}': rows and columns start at 1")


class InMemorySpreadsheet(Spreadsheet):
    """A set of in-memory sheets."""

    def __init__(self, title: str = "Untitled spreadsheet"):
        self.title = title
        self._sheets: list[InMemoryGrid] = []
        self._next_sheet_id = 0

    def list_sheets(self) -> list[InMemoryGrid]:
        return list(self._sheets)

    def insert_sheet(self, name: str) -> InMemoryGrid:
        if self.get_sheet_by_name(name) is not None:
            raise GridError(f"A sheet with the name '{name}' already exists")
        sheet = InMemoryGrid(self, name, self._next_sheet_id)
        self._next_sheet_id += 1
        self._sheets.append(sheet)
        logger.info(f"Inserted sheet '{name}' (id {sheet.sheet_id})")
        return sheet

    def add_sheet(
        self, name: str, values: Optional[list[list[CellValue]]] = None
    ) -> InMemoryGrid:
        """Insert a sheet and optionally seed it with values starting at A1."""
        sheet = self.insert_sheet(name)
        if values:
            width = max(len(line) for line in values)
            sheet.write_region(1, 1, [list(line) + [""] * (width - len(line)) for line in values])
        return sheet
