"""Grid storage interfaces used by the record layer."""

from abc import ABC, abstractmethod
from typing import Optional, Union

from .models import CellValue, GridExtents, GridRange


class GridError(RuntimeError):
    """Raised when the underlying grid store rejects a read or write."""

    pass


class Grid(ABC):
    """A single named sheet: a rectangular, 1-indexed store of scalar cells."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Sheet title."""
        pass

    @property
    @abstractmethod
    def sheet_id(self) -> int:
        """Immutable numeric id of the sheet."""
        pass

    @property
    @abstractmethod
    def spreadsheet(self) -> "Spreadsheet":
        """The spreadsheet this sheet belongs to."""
        pass

    @abstractmethod
    def get_extents(self) -> GridExtents:
        """Return the last populated row and column."""
        pass

    @abstractmethod
    def read_region(
        self, row: int, column: int, num_rows: int, num_columns: int
    ) -> list[list[CellValue]]:
        """Read an exact num_rows x num_columns block; empty cells read as ''."""
        pass

    @abstractmethod
    def write_region(self, row: int, column: int, values: list[list[CellValue]]) -> None:
        """Write a rectangular block with its top-left corner at (row, column)."""
        pass

    @abstractmethod
    def clear_region(self, row: int, column: int, num_rows: int, num_columns: int) -> None:
        """Clear the contents of a block."""
        pass

    @abstractmethod
    def freeze_rows(self, count: int) -> None:
        """Freeze the first `count` rows."""
        pass

    @abstractmethod
    def commit(self) -> None:
        """Flush pending writes so subsequent reads observe them."""
        pass

    def read_range(self, grid_range: GridRange) -> list[list[CellValue]]:
        return self.read_region(
            grid_range.row, grid_range.column, grid_range.num_rows, grid_range.num_columns
        )

    def clear_range(self, grid_range: GridRange) -> None:
        self.clear_region(
            grid_range.row, grid_range.column, grid_range.num_rows, grid_range.num_columns
        )

    def get_last_row(self) -> int:
        return self.get_extents().last_row

    def get_last_column(self) -> int:
        return self.get_extents().last_column


class Spreadsheet(ABC):
    """A collection of named sheets."""

    @abstractmethod
    def list_sheets(self) -> list[Grid]:
        """Return all sheets in display order."""
        pass

    @abstractmethod
    def insert_sheet(self, name: str) -> Grid:
        """Create a new, empty sheet."""
        pass

    def get_sheet_by_name(self, name: str) -> Optional[Grid]:
        for sheet in self.list_sheets():
            if sheet.name == name:
                return sheet
        return None

    def locate_or_create_sheet(self, name: str) -> Grid:
        """Return the sheet called `name`, creating it if it doesn't exist."""
        sheet = self.get_sheet_by_name(name)
        if sheet is None:
            sheet = self.insert_sheet(name)
        return sheet

    def get_sheet_by_id(self, sheet_id: Union[int, str]) -> Optional[Grid]:
        """
        Find a sheet by its immutable sheet id.

        Args:
            sheet_id: Numeric id, as an int or a numeric string

        Returns:
            The matching sheet, or None if no sheet has that id

        Raises:
            ValueError: If sheet_id is not numeric
        """
        try:
            wanted = int(str(sheet_id).strip())
        except ValueError:
            raise ValueError(
                f"get_sheet_by_id requires a numeric sheet id (got {sheet_id!r})"
            ) from None
        for sheet in self.list_sheets():
            if sheet.sheet_id == wanted:
                return sheet
        return None
