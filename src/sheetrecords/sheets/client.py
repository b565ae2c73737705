"""Google Sheets API client and grid adapter."""

import logging
from typing import Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..config import settings
from .base import Grid, GridError, Spreadsheet
from .models import CellValue, GridExtents, GridRange, SheetInfo, quote_sheet_name

logger = logging.getLogger(__name__)


class GoogleSheetsClient:
    """Client for interacting with Google Sheets API."""

    def __init__(self, service=None):
        self._service = service
        self._credentials = None

    def _get_credentials(self) -> Credentials:
        """Get or refresh OAuth2 credentials."""
        creds = None
        scopes = settings.google_scopes

        if settings.google_token_path.exists():
            creds = Credentials.from_authorized_user_file(str(settings.google_token_path), scopes)

        if not creds or not creds.valid:
            if creds and creds.expired and creds.refresh_token:
                creds.refresh(Request())
            else:
                if not settings.google_credentials_path.exists():
                    raise FileNotFoundError(
                        f"Google credentials file not found at {settings.google_credentials_path}. "
                        "Please download it from Google Cloud Console."
                    )
                flow = InstalledAppFlow.from_client_secrets_file(
                    str(settings.google_credentials_path), scopes
                )
                creds = flow.run_local_server(port=0)

            # Save credentials for next run
            settings.google_token_path.parent.mkdir(parents=True, exist_ok=True)
            with open(settings.google_token_path, "w") as token:
                token.write(creds.to_json())

        return creds

    @property
    def service(self):
        """Get or create the Sheets API service."""
        if self._service is None:
            self._credentials = self._get_credentials()
            self._service = build("sheets", "v4", credentials=self._credentials)
        return self._service

    def open(self, spreadsheet_id: str) -> "GoogleSpreadsheet":
        """Return a handle on an existing spreadsheet."""
        return GoogleSpreadsheet(self, spreadsheet_id)

    def get_sheet_properties(self, spreadsheet_id: str) -> list[SheetInfo]:
        """List the sheets of a spreadsheet in display order."""
        try:
            result = (
                self.service.spreadsheets()
                .get(spreadsheetId=spreadsheet_id, fields="sheets.properties")
                .execute()
            )
        except HttpError as e:
            raise GridError(f"Failed to get spreadsheet info: {e}") from e

        sheets = []
        for sheet in result.get("sheets", []):
            props = sheet["properties"]
            sheets.append(
                SheetInfo(
                    sheet_id=props["sheetId"],
                    title=props["title"],
                    index=props.get("index", 0),
                    frozen_row_count=props.get("gridProperties", {}).get("frozenRowCount", 0),
                )
            )
        return sheets

    def get_values(self, spreadsheet_id: str, range_notation: str) -> list[list[CellValue]]:
        """Read raw values from a range. Trailing empty cells are omitted by the API."""
        try:
            result = (
                self.service.spreadsheets()
                .values()
                .get(
                    spreadsheetId=spreadsheet_id,
                    range=range_notation,
                    valueRenderOption=settings.value_render_option,
                    majorDimension="ROWS",
                )
                .execute()
            )
        except HttpError as e:
            raise GridError(f"Failed to read range {range_notation}: {e}") from e
        return result.get("values", [])

    def update_values(
        self, spreadsheet_id: str, range_notation: str, values: list[list[CellValue]]
    ) -> int:
        """Write values to a range and return the number of updated cells."""
        body = {"values": values}
        try:
            result = (
                self.service.spreadsheets()
                .values()
                .update(
                    spreadsheetId=spreadsheet_id,
                    range=range_notation,
                    valueInputOption=settings.value_input_option,
                    body=body,
                )
                .execute()
            )
        except HttpError as e:
            raise GridError(f"Failed to write range {range_notation}: {e}") from e
        return result.get("updatedCells", 0)

    def clear_values(self, spreadsheet_id: str, range_notation: str) -> None:
        try:
            (
                self.service.spreadsheets()
                .values()
                .clear(spreadsheetId=spreadsheet_id, range=range_notation, body={})
                .execute()
            )
        except HttpError as e:
            raise GridError(f"Failed to clear range {range_notation}: {e}") from e

    def batch_update(self, spreadsheet_id: str, requests: list[dict]) -> dict:
        """Send structural requests (add sheet, freeze rows, ...)."""
        try:
            return (
                self.service.spreadsheets()
                .batchUpdate(spreadsheetId=spreadsheet_id, body={"requests": requests})
                .execute()
            )
        except HttpError as e:
            raise GridError(f"Failed to update spreadsheet {spreadsheet_id}: {e}") from e


class GoogleSpreadsheet(Spreadsheet):
    """A Google spreadsheet, addressed by its id."""

    def __init__(self, client: GoogleSheetsClient, spreadsheet_id: str):
        self.client = client
        self.spreadsheet_id = spreadsheet_id

    def list_sheets(self) -> list["GoogleSheetGrid"]:
        return [
            GoogleSheetGrid(self, info.title, info.sheet_id)
            for info in self.client.get_sheet_properties(self.spreadsheet_id)
        ]

    def insert_sheet(self, name: str) -> "GoogleSheetGrid":
        result = self.client.batch_update(
            self.spreadsheet_id, [{"addSheet": {"properties": {"title": name}}}]
        )
        props = result["replies"][0]["addSheet"]["properties"]
        logger.info(f"Inserted sheet '{name}' (id {props['sheetId']}) in {self.spreadsheet_id}")
        return GoogleSheetGrid(self, props["title"], props["sheetId"])


class GoogleSheetGrid(Grid):
    """One tab of a Google spreadsheet."""

    def __init__(self, spreadsheet: GoogleSpreadsheet, name: str, sheet_id: int):
        self._spreadsheet = spreadsheet
        self._name = name
        self._sheet_id = sheet_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def sheet_id(self) -> int:
        return self._sheet_id

    @property
    def spreadsheet(self) -> GoogleSpreadsheet:
        return self._spreadsheet

    @property
    def _client(self) -> GoogleSheetsClient:
        return self._spreadsheet.client

    @property
    def _spreadsheet_id(self) -> str:
        return self._spreadsheet.spreadsheet_id

    def get_extents(self) -> GridExtents:
        # Reading the bare sheet title returns everything from A1 to the last populated cell
        values = self._client.get_values(self._spreadsheet_id, quote_sheet_name(self._name))
        last_column = max((len(row) for row in values), default=0)
        last_row = len(values) if last_column else 0
        return GridExtents(last_row=last_row, last_column=last_column)

    def read_region(
        self, row: int, column: int, num_rows: int, num_columns: int
    ) -> list[list[CellValue]]:
        if num_rows == 0 or num_columns == 0:
            return [[] for _ in range(num_rows)]
        grid_range = GridRange(row=row, column=column, num_rows=num_rows, num_columns=num_columns)
        range_notation = grid_range.to_a1(self._name)
        logger.debug(f"Reading {range_notation}")
        values = self._client.get_values(self._spreadsheet_id, range_notation)
        return _pad_block(values, num_rows, num_columns)

    def write_region(self, row: int, column: int, values: list[list[CellValue]]) -> None:
        if not values or not values[0]:
            return
        grid_range = GridRange(
            row=row, column=column, num_rows=len(values), num_columns=len(values[0])
        )
        range_notation = grid_range.to_a1(self._name)
        logger.debug(f"Writing {range_notation}")
        rows = [["" if value is None else value for value in line] for line in values]
        self._client.update_values(self._spreadsheet_id, range_notation, rows)

    def clear_region(self, row: int, column: int, num_rows: int, num_columns: int) -> None:
        if num_rows == 0 or num_columns == 0:
            return
        grid_range = GridRange(row=row, column=column, num_rows=num_rows, num_columns=num_columns)
        range_notation = grid_range.to_a1(self._name)
        logger.debug(f"Clearing {range_notation}")
        self._client.clear_values(self._spreadsheet_id, range_notation)

    def freeze_rows(self, count: int) -> None:
        self._client.batch_update(
            self._spreadsheet_id,
            [
                {
                    "updateSheetProperties": {
                        "properties": {
                            "sheetId": self._sheet_id,
                            "gridProperties": {"frozenRowCount": count},
                        },
                        "fields": "gridProperties.frozenRowCount",
                    }
                }
            ],
        )

    def commit(self) -> None:
        # Value writes through the API are applied before the call returns
        logger.debug(f"Commit on '{self._name}': nothing pending")


def _pad_block(
    values: list[list[CellValue]], num_rows: int, num_columns: int
) -> list[list[CellValue]]:
    """Fill the cells the API trims from a response with ''."""
    block = []
    for index in range(num_rows):
        line = list(values[index]) if index < len(values) else []
        block.append(line[:num_columns] + [""] * (num_columns - len(line)))
    return block


def open_spreadsheet(
    spreadsheet_id: str, client: Optional[GoogleSheetsClient] = None
) -> GoogleSpreadsheet:
    """Open a spreadsheet with a new or shared client."""
    return (client or GoogleSheetsClient()).open(spreadsheet_id)
