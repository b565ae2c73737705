"""Command-line interface for sheetrecords."""

import argparse
import json
import logging
import sys
from typing import Optional

from .config import settings
from .records import HeaderManager, RecordOptions, RecordReconciler, RecordWriter, RecordsError
from .sheets import Grid, GridError, open_spreadsheet


def main(argv: Optional[list[str]] = None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="sheetrecords - treat Google Sheets tabs as keyed records"
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level (default: from LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("auth", help="Authenticate with Google Sheets API")

    headers_parser = subparsers.add_parser("headers", help="Show or repair a sheet's header row")
    _add_sheet_arguments(headers_parser)
    headers_parser.add_argument(
        "--expect", action="append", default=None, metavar="HEADER",
        help="Header that must exist (repeatable); missing ones are appended",
    )
    headers_parser.add_argument("--freeze", action="store_true", help="Freeze the header row(s)")

    read_parser = subparsers.add_parser("read", help="Print a sheet's rows as JSON records")
    _add_sheet_arguments(read_parser)

    sync_parser = subparsers.add_parser(
        "sync", help="Reconcile a sheet against a JSON array of records"
    )
    _add_sheet_arguments(sync_parser)
    sync_parser.add_argument("records_file", help="Path to a JSON file holding a list of records ('-' for stdin)")
    sync_parser.add_argument(
        "--match", action="append", required=True, metavar="HEADER",
        help="Header forming the match key (repeatable, order matters)",
    )
    sync_parser.add_argument("--upsert", action="store_true", help="Insert records not found in the sheet")
    sync_parser.add_argument(
        "--archive", action="store_true",
        help="Move rows not found in the records to '<sheet>_archive'",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "auth":
        run_auth()
        return

    try:
        grid = _open_sheet(args.spreadsheet_id, args.sheet)
        options = RecordOptions(column_headers_row_index=args.header_row)
        if args.command == "headers":
            run_headers(grid, args.expect, args.header_row, args.freeze)
        elif args.command == "read":
            run_read(grid, options)
        elif args.command == "sync":
            records = _load_records(args.records_file)
            options = options.model_copy(
                update={
                    "upsert_new_records": args.upsert,
                    "remove_and_archive_non_matching_records": args.archive,
                }
            )
            run_sync(grid, records, args.match, options)
    except (RecordsError, GridError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _add_sheet_arguments(subparser: argparse.ArgumentParser):
    subparser.add_argument("spreadsheet_id", help="The ID of the Google Spreadsheet (from the URL)")
    subparser.add_argument("sheet", help="Sheet (tab) name")
    subparser.add_argument(
        "--header-row", type=int, default=settings.default_header_row,
        help="Row holding the column headers (default: 1)",
    )


def _open_sheet(spreadsheet_id: str, sheet_name: str) -> Grid:
    sheet = open_spreadsheet(spreadsheet_id).get_sheet_by_name(sheet_name)
    if sheet is None:
        raise ValueError(f"Sheet '{sheet_name}' not found in spreadsheet {spreadsheet_id}")
    return sheet


def _load_records(path: str) -> list[dict]:
    if path == "-":
        records = json.load(sys.stdin)
    else:
        with open(path) as f:
            records = json.load(f)
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise ValueError(f"{path} must contain a JSON array of objects")
    return records


def run_headers(grid: Grid, expected: Optional[list[str]], header_row: int, freeze: bool):
    """Print the header row, after upserting expected headers if given."""
    headers = HeaderManager().upsert_headers(
        grid, expected_headers=expected, header_row=header_row, freeze=freeze
    )
    print(json.dumps(headers))


def run_read(grid: Grid, options: RecordOptions):
    """Print the sheet's records as a JSON array."""
    records = RecordWriter().get_rows_data(grid, options)
    print(json.dumps(records, indent=2, default=str))


def run_sync(grid: Grid, records: list[dict], match: list[str], options: RecordOptions):
    """Reconcile and print the resulting update status."""
    status = RecordReconciler().update_rows_data(grid, records, match, options)
    print(status.model_dump_json())


def run_auth():
    """Run the Google authentication flow."""
    from .sheets import GoogleSheetsClient

    print("Authenticating with Google Sheets API...")
    try:
        client = GoogleSheetsClient()
        # Accessing the service property triggers auth
        _ = client.service
        print("Authentication successful!")
        print("Token saved. You can now use sheetrecords with Google Sheets.")
    except Exception as e:
        print(f"Authentication failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
