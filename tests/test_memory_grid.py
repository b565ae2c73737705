"""Tests for the in-memory grid store."""

import pytest

from sheetrecords.sheets import GridError, GridExtents, GridRange, InMemorySpreadsheet


class TestInMemoryGrid:
    """Test InMemoryGrid behaviour."""

    def test_empty_grid_extents(self, blank_sheet):
        assert blank_sheet.get_extents() == GridExtents(last_row=0, last_column=0)
        assert blank_sheet.get_extents().is_empty

    def test_extents_track_last_populated_cell(self, blank_sheet):
        blank_sheet.write_region(3, 2, [["x", ""], ["", "y"]])
        assert blank_sheet.get_extents() == GridExtents(last_row=4, last_column=3)

    def test_read_outside_data_returns_empty_strings(self, blank_sheet):
        assert blank_sheet.read_region(1, 1, 2, 2) == [["", ""], ["", ""]]

    def test_read_range(self, sheet):
        assert sheet.read_range(GridRange(row=2, column=1, num_rows=1, num_columns=2)) == [[12345, 123]]

    def test_clear_region(self, sheet):
        sheet.clear_range(GridRange(row=2, column=1, num_rows=3, num_columns=6))
        assert sheet.get_last_row() == 1

    def test_writing_empty_string_clears(self, blank_sheet):
        blank_sheet.write_region(1, 1, [["a"]])
        blank_sheet.write_region(1, 1, [[""]])
        assert blank_sheet.get_extents().is_empty

    def test_zero_is_kept(self, blank_sheet):
        blank_sheet.write_region(1, 1, [[0]])
        assert blank_sheet.get_values() == [[0]]

    def test_ragged_write_rejected(self, blank_sheet):
        with pytest.raises(GridError):
            blank_sheet.write_region(1, 1, [["a", "b"], ["c"]])

    def test_invalid_origin_rejected(self, blank_sheet):
        with pytest.raises(GridError):
            blank_sheet.read_region(0, 1, 1, 1)

    def test_freeze_rows(self, blank_sheet):
        blank_sheet.freeze_rows(2)
        assert blank_sheet.frozen_rows == 2


class TestInMemorySpreadsheet:
    """Test sheet lookup and creation."""

    def test_insert_and_lookup(self):
        spreadsheet = InMemorySpreadsheet()
        first = spreadsheet.insert_sheet("One")
        second = spreadsheet.insert_sheet("Two")

        assert spreadsheet.get_sheet_by_name("Two") is second
        assert spreadsheet.get_sheet_by_name("Three") is None
        assert [s.name for s in spreadsheet.list_sheets()] == ["One", "Two"]
        assert first.spreadsheet is spreadsheet

    def test_duplicate_name_rejected(self):
        spreadsheet = InMemorySpreadsheet()
        spreadsheet.insert_sheet("One")
        with pytest.raises(GridError):
            spreadsheet.insert_sheet("One")

    def test_locate_or_create(self):
        spreadsheet = InMemorySpreadsheet()
        created = spreadsheet.locate_or_create_sheet("Archive")
        assert spreadsheet.locate_or_create_sheet("Archive") is created
        assert len(spreadsheet.list_sheets()) == 1

    def test_get_sheet_by_id(self):
        spreadsheet = InMemorySpreadsheet()
        spreadsheet.insert_sheet("One")
        second = spreadsheet.insert_sheet("Two")

        assert spreadsheet.get_sheet_by_id(second.sheet_id) is second
        assert spreadsheet.get_sheet_by_id(str(second.sheet_id)) is second
        assert spreadsheet.get_sheet_by_id(99) is None

    def test_get_sheet_by_id_requires_number(self):
        spreadsheet = InMemorySpreadsheet()
        with pytest.raises(ValueError, match="numeric"):
            spreadsheet.get_sheet_by_id("Sheet1")
