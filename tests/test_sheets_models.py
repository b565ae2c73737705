"""Tests for sheets models."""

import pytest
from pydantic import ValidationError

from sheetrecords.sheets.models import (
    GridRange,
    col_letter_to_index,
    index_to_col_letter,
    quote_sheet_name,
)


class TestGridRange:
    """Test the GridRange model."""

    def test_grid_range_creation(self):
        grid_range = GridRange(row=2, column=3, num_rows=4, num_columns=5)

        assert grid_range.last_row == 5
        assert grid_range.last_column == 7
        assert not grid_range.is_empty

    def test_defaults(self):
        grid_range = GridRange(row=1)
        assert grid_range.column == 1
        assert grid_range.num_rows == 1
        assert grid_range.num_columns == 1

    def test_empty_range(self):
        assert GridRange(row=1, num_rows=0).is_empty

    def test_rows_start_at_one(self):
        with pytest.raises(ValidationError):
            GridRange(row=0)

    def test_to_a1(self):
        grid_range = GridRange(row=2, column=1, num_rows=9, num_columns=6)
        assert grid_range.to_a1("Sheet1") == "'Sheet1'!A2:F10"

    def test_to_a1_multi_letter_columns(self):
        grid_range = GridRange(row=1, column=26, num_rows=1, num_columns=3)
        assert grid_range.to_a1("Data") == "'Data'!Z1:AB1"


class TestColumnLetters:
    """Test column letter conversion."""

    def test_index_to_letter(self):
        assert index_to_col_letter(0) == "A"
        assert index_to_col_letter(25) == "Z"
        assert index_to_col_letter(26) == "AA"
        assert index_to_col_letter(701) == "ZZ"

    def test_letter_to_index(self):
        assert col_letter_to_index("A") == 0
        assert col_letter_to_index("aa") == 26
        assert col_letter_to_index("ZZ") == 701

    def test_quote_sheet_name(self):
        assert quote_sheet_name("Students") == "'Students'"
        assert quote_sheet_name("Bob's data") == "'Bob''s data'"
