"""Pytest configuration and shared fixtures."""

import copy
from unittest.mock import Mock

import pytest

from sheetrecords.records import HeaderManager, RecordReconciler, RecordWriter
from sheetrecords.sheets import InMemorySpreadsheet


HEADERS = ["Record ID 1", "Record ID 2", "test1", "Test 2", "Test2a", "Test 3"]

RECORDS = [
    {
        "Record ID 1": 12345,
        "Record ID 2": 123,
        "test1": 0,
        "Test 2": "Hello",
        "Test2a": "",
        "Test 3": "World",
    },
    {
        "Record ID 1": 12346,
        "Record ID 2": 123,
        "test1": 1,
        "Test 2": "",
        "Test2a": "Hello",
        "Test 3": "World",
    },
    {
        "Record ID 1": 12347,
        "Record ID 2": 125,
        "test1": 2,
        "Test 2": "Hello",
        "Test2a": "",
        "Test 3": "World",
    },
]

ROWS = [
    [12345, 123, 0, "Hello", "", "World"],
    [12346, 123, 1, "", "Hello", "World"],
    [12347, 125, 2, "Hello", "", "World"],
]


@pytest.fixture
def headers() -> list[str]:
    return list(HEADERS)


@pytest.fixture
def records() -> list[dict]:
    """Fresh copy of the sample records, safe to mutate."""
    return copy.deepcopy(RECORDS)


@pytest.fixture
def rows() -> list[list]:
    return copy.deepcopy(ROWS)


@pytest.fixture
def spreadsheet() -> InMemorySpreadsheet:
    return InMemorySpreadsheet("Records test")


@pytest.fixture
def sheet(spreadsheet):
    """A sheet holding the sample headers in row 1 and the sample rows below."""
    return spreadsheet.add_sheet("Students", [list(HEADERS)] + copy.deepcopy(ROWS))


@pytest.fixture
def blank_sheet(spreadsheet):
    return spreadsheet.add_sheet("Blank")


@pytest.fixture
def writer() -> RecordWriter:
    return RecordWriter()


@pytest.fixture
def header_manager() -> HeaderManager:
    return HeaderManager()


@pytest.fixture
def reconciler() -> RecordReconciler:
    return RecordReconciler(archive_suffix="_archive")


@pytest.fixture
def mock_sheets_service() -> Mock:
    """Create a mocked Sheets API service (spreadsheets() resource chain)."""
    service = Mock()
    spreadsheets = service.spreadsheets.return_value
    values = spreadsheets.values.return_value

    spreadsheets.get.return_value.execute.return_value = {
        "sheets": [
            {"properties": {"sheetId": 0, "title": "Sheet1", "index": 0}},
            {
                "properties": {
                    "sheetId": 1234,
                    "title": "Students",
                    "index": 1,
                    "gridProperties": {"frozenRowCount": 1},
                }
            },
        ]
    }
    values.get.return_value.execute.return_value = {"values": []}
    values.update.return_value.execute.return_value = {"updatedCells": 0}
    values.clear.return_value.execute.return_value = {}
    spreadsheets.batchUpdate.return_value.execute.return_value = {"replies": [{}]}
    return service
