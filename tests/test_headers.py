"""Tests for header row management."""

from unittest.mock import Mock

from sheetrecords.records import RecordOptions


class TestUpsertHeaders:
    """Test HeaderManager.upsert_headers."""

    def test_read_only_without_expected_headers(self, header_manager, sheet, headers):
        """Without expected headers the current header row is returned untouched."""
        assert header_manager.upsert_headers(sheet) == headers
        assert sheet.frozen_rows == 0

    def test_read_only_on_blank_sheet(self, header_manager, blank_sheet):
        assert header_manager.upsert_headers(blank_sheet) == []

    def test_blank_sheet_gets_all_headers(self, header_manager, blank_sheet, headers):
        """A sheet with no columns receives the expected headers verbatim."""
        result = header_manager.upsert_headers(blank_sheet, expected_headers=headers, freeze=True)

        assert result == headers
        assert blank_sheet.get_values() == [headers]
        assert blank_sheet.frozen_rows == 1

    def test_blank_sheet_single_bulk_write(self, header_manager, blank_sheet):
        """Headers on a blank sheet are written in one call."""
        blank_sheet.write_region = Mock(wraps=blank_sheet.write_region)
        header_manager.upsert_headers(blank_sheet, expected_headers=["A", "B", "C"])
        blank_sheet.write_region.assert_called_once_with(1, 1, [["A", "B", "C"]])

    def test_missing_headers_appended(self, header_manager, sheet, headers):
        """Only missing headers are appended, after the last column."""
        expected = ["Record ID 1", "Test 5", "Record ID 2", "test1", "Test 2", "Test2a", "Test 3", "Test 4"]
        result = header_manager.upsert_headers(sheet, expected_headers=expected, freeze=True)

        assert result == headers + ["Test 5", "Test 4"]
        assert sheet.read_region(1, 1, 1, 8)[0] == headers + ["Test 5", "Test 4"]
        assert sheet.frozen_rows == 1

    def test_existing_order_preserved(self, header_manager, spreadsheet):
        """Existing [A, B] with expected [B, C, A] becomes [A, B, C]."""
        grid = spreadsheet.add_sheet("Order", [["A", "B"]])
        assert header_manager.upsert_headers(grid, expected_headers=["B", "C", "A"]) == ["A", "B", "C"]
        assert grid.get_values() == [["A", "B", "C"]]

    def test_idempotent(self, header_manager, spreadsheet):
        """A second upsert with the same headers changes nothing."""
        grid = spreadsheet.add_sheet("Twice", [["A"]])
        first = header_manager.upsert_headers(grid, expected_headers=["A", "B"])
        grid.write_region = Mock(wraps=grid.write_region)
        second = header_manager.upsert_headers(grid, expected_headers=["A", "B"])

        assert first == second == ["A", "B"]
        grid.write_region.assert_not_called()

    def test_header_row_other_than_first(self, header_manager, spreadsheet):
        """Headers can live below row 1; freezing covers rows 1..header_row."""
        grid = spreadsheet.add_sheet("Offset", [["Title"], [""], ["A", "B"]])
        result = header_manager.upsert_headers(
            grid, expected_headers=["A", "C"], header_row=3, freeze=True
        )

        assert result == ["A", "B", "C"]
        assert grid.read_region(3, 1, 1, 3) == [["A", "B", "C"]]
        assert grid.frozen_rows == 3

    def test_commits_before_returning(self, header_manager, blank_sheet):
        blank_sheet.commit = Mock()
        header_manager.upsert_headers(blank_sheet, expected_headers=["A"])
        blank_sheet.commit.assert_called_once()

    def test_get_upsert_headers_with_options(self, header_manager, blank_sheet):
        """The options-driven form reads expected headers, row and freeze flag."""
        options = RecordOptions(expected_headers=["X", "Y"], freeze_headers=True)
        assert header_manager.get_upsert_headers(blank_sheet, options) == ["X", "Y"]
        assert blank_sheet.frozen_rows == 1
