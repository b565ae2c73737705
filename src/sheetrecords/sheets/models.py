"""Data models for grid operations."""

from typing import Any

from pydantic import BaseModel, Field


CellValue = Any


class GridRange(BaseModel):
    """A rectangular block of cells, 1-indexed."""

    row: int = Field(ge=1)
    column: int = Field(default=1, ge=1)
    num_rows: int = Field(default=1, ge=0)
    num_columns: int = Field(default=1, ge=0)

    @property
    def last_row(self) -> int:
        return self.row + self.num_rows - 1

    @property
    def last_column(self) -> int:
        return self.column + self.num_columns - 1

    @property
    def is_empty(self) -> bool:
        return self.num_rows == 0 or self.num_columns == 0

    def to_a1(self, sheet_name: str) -> str:
        """Render the range in A1 notation, e.g. 'Sheet1'!A2:F10."""
        start = f"{index_to_col_letter(self.column - 1)}{self.row}"
        end = f"{index_to_col_letter(self.last_column - 1)}{self.last_row}"
        return f"{quote_sheet_name(sheet_name)}!{start}:{end}"


class GridExtents(BaseModel):
    """Last populated row and column of a grid (0 when the grid is empty)."""

    last_row: int = 0
    last_column: int = 0

    @property
    def is_empty(self) -> bool:
        return self.last_row == 0 or self.last_column == 0


class SheetInfo(BaseModel):
    """Basic properties of one sheet in a spreadsheet."""

    sheet_id: int
    title: str
    index: int = 0
    frozen_row_count: int = 0


def col_letter_to_index(col: str) -> int:
    """Convert column letter(s) to 0-based index. A=0, B=1, ..., Z=25, AA=26, etc."""
    result = 0
    for char in col.upper():
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result - 1


def index_to_col_letter(index: int) -> str:
    """Convert 0-based index to column letter(s)."""
    result = ""
    index += 1
    while index > 0:
        index -= 1
        result = chr(ord("A") + (index % 26)) + result
        index //= 26
    return result


def quote_sheet_name(name: str) -> str:
    """Quote a sheet title for use in A1 notation."""
    return "'" + name.replace("'", "''") + "'"
