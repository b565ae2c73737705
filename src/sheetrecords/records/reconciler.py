"""Matching and reconciling incoming records against a sheet's existing rows."""

import logging
from typing import Any, Callable, Optional, Sequence, Union

from ..config import settings
from ..sheets import Grid, GridRange
from .codec import decode_rows
from .headers import HeaderManager
from .models import (
    HeaderMapping,
    Record,
    RecordConflictError,
    RecordInputError,
    RecordOptions,
    UpdateStatus,
)
from .writer import RecordWriter

logger = logging.getLogger(__name__)

MatchFields = Union[str, Sequence[str]]
Merge = Callable[[Record, Record], None]
Project = Callable[[Record], Record]

# Archive sheets are created here and always keep their headers in row 1
ARCHIVE_HEADER_ROW = 1


def key_part(value: Any) -> str:
    """String form of one field in a join key."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _has_value(value: Any) -> bool:
    return value is not None and value != ""


def _normalize_fields(match_fields: Optional[MatchFields]) -> list[str]:
    if match_fields is None:
        return []
    if isinstance(match_fields, str):
        return [match_fields]
    return list(match_fields)


def scan_join_key(record: Record, fields: Sequence[str], required: bool, label: str = "Record") -> str:
    """
    Concatenate the record's values for `fields`, in order.

    Missing, None and '' values contribute nothing; when `required` they raise
    instead. No delimiter is used, so ('1', '23') and ('12', '3') collide.
    """
    key = ""
    for field in fields:
        value = record.get(field)
        if _has_value(value):
            key += key_part(value)
        elif required:
            raise RecordInputError(f"{label} is missing a value for required match field {field!r}")
    return key


def bulk_join_key(record: Record, fields: Sequence[str], side: str) -> str:
    """Join key for bulk reconciliation: every field must be present (None counts as absent)."""
    key = ""
    for field in fields:
        value = record.get(field)
        if value is None:
            raise RecordInputError(
                f"Record {record!r} in {side} records is missing a value for match field {field!r}"
            )
        key += key_part(value)
    return key


class RecordReconciler:
    """
    Applies incoming records to a sheet by matching on key fields.

    Three granularities share the same join-key matching:

    - a single known row (update_single_row_in_place)
    - every row matching one source record, written row by row
      (update_rows_in_place / update_mapped_rows_in_place)
    - a whole source set against the whole sheet, with optional insert and
      archive, rewritten in one block (update_rows_data / update_mapped_rows_data)
    """

    def __init__(
        self,
        writer: Optional[RecordWriter] = None,
        header_manager: Optional[HeaderManager] = None,
        archive_suffix: Optional[str] = None,
    ):
        self.writer = writer or RecordWriter()
        self.header_manager = header_manager or HeaderManager()
        self.archive_suffix = (
            archive_suffix if archive_suffix is not None else settings.archive_sheet_suffix
        )

    def update_single_row_in_place(
        self,
        grid: Grid,
        record: Record,
        row_num: Optional[int],
        options: Optional[RecordOptions] = None,
    ) -> UpdateStatus:
        """
        Overwrite one row with a record, optionally checking it is the right row first.

        With `require_match`, the row's current `match_headers` values must
        equal the record's; if they don't (the row shifted), fall back to
        update_rows_in_place. The row is overwritten with the record as-is:
        headers the record lacks are blanked.

        Raises:
            RecordInputError: row_num missing, match_headers missing while
                require_match is set, or a match field missing on either side
        """
        if not row_num:
            raise RecordInputError("row_num parameter missing")
        options = options or RecordOptions()
        headers, column = self.writer.read_headers(grid, options)

        if options.require_match:
            match_headers = _normalize_fields(options.match_headers)
            if not match_headers:
                raise RecordInputError("Missing match_headers option. Required when require_match is set.")
            existing = {}
            if headers:
                decoded = decode_rows(grid.read_region(row_num, column, 1, len(headers)), headers)
                existing = decoded[0] if decoded else {}
            existing_key = scan_join_key(existing, match_headers, required=True, label="Existing data row")
            source_key = scan_join_key(record, match_headers, required=True, label="Source record")
            if existing_key != source_key:
                logger.info(
                    f"Row {row_num} of '{grid.name}' does not match key {source_key!r}, "
                    "falling back to a full scan"
                )
                return self.update_rows_in_place(
                    grid,
                    record,
                    match_headers,
                    options.model_copy(update={"require_unique": False}),
                )

        status = UpdateStatus()
        self._write_row(grid, record, headers, row_num, column, status)
        return status

    def update_rows_in_place(
        self,
        grid: Grid,
        record: Record,
        match_headers: MatchFields,
        options: Optional[RecordOptions] = None,
    ) -> UpdateStatus:
        """
        Merge a record into every row whose match-header values equal its own.

        Each matching row is read, updated with the record's fields (record
        wins) and written back individually. Write failures are counted in
        `errors` and don't stop the loop.

        Args:
            grid: Sheet to update
            record: Source record keyed by the sheet's headers
            match_headers: Header name or names forming the join key
            options: `require_unique` rejects the update when any row matches
                (matches > 0, not > 1); `headers_range` / `column_headers_row_index`
                locate the headers

        Raises:
            RecordInputError: match_headers missing, or the record lacks one
            RecordConflictError: require_unique is set and rows match
        """
        fields = _normalize_fields(match_headers)
        if not fields:
            raise RecordInputError("update_rows_in_place - missing match_headers argument")

        def merge(destination: Record, source: Record) -> None:
            destination.update(source)

        return self._scan_update(grid, record, fields, fields, merge, options)

    def update_mapped_rows_in_place(
        self,
        grid: Grid,
        record: Record,
        match_mapping: Any,
        update_mapping: Any,
        options: Optional[RecordOptions] = None,
    ) -> UpdateStatus:
        """
        update_rows_in_place for records keyed differently from the sheet.

        `match_mapping` maps destination headers to the source keys forming the
        join key; `update_mapping` maps destination headers to the source keys
        copied into matching rows. Only headers in `update_mapping` change.
        """
        if not match_mapping:
            raise RecordInputError("update_mapped_rows_in_place - missing match_mapping")
        if not update_mapping:
            raise RecordInputError("update_mapped_rows_in_place - missing update_mapping")
        match_mapping = HeaderMapping.coerce(match_mapping)
        update_mapping = HeaderMapping.coerce(update_mapping)

        def merge(destination: Record, source: Record) -> None:
            for dest_header, source_key in update_mapping:
                if source_key in source:
                    destination[dest_header] = source[source_key]

        return self._scan_update(
            grid,
            record,
            match_mapping.source_keys,
            match_mapping.destination_headers,
            merge,
            options,
        )

    def update_rows_data(
        self,
        grid: Grid,
        records: Sequence[Record],
        match_fields: MatchFields,
        options: Optional[RecordOptions] = None,
    ) -> UpdateStatus:
        """
        Reconcile the sheet's rows against a full set of source records.

        Source and destination rows are matched on `match_fields`; both sides
        must be unique on that key. Matched rows take the source's values.
        Unmatched destination rows are kept, or archived to
        '<sheet>_archive' with `remove_and_archive_non_matching_records`.
        Unmatched source records are added with `upsert_new_records`. The
        archive is written first, then the sheet's data block is cleared and
        rewritten.

        Raises:
            RecordInputError: match_fields missing, or a record on either side
                lacks a match field
            RecordConflictError: duplicate join key in source or destination
        """
        fields = _normalize_fields(match_fields)
        if not fields:
            raise RecordInputError("update_rows_data - missing match_fields string or list")

        def merge(destination: Record, source: Record) -> None:
            destination.update(source)

        return self._reconcile(grid, records, fields, fields, merge, dict, options)

    def update_mapped_rows_data(
        self,
        grid: Grid,
        records: Sequence[Record],
        match_mapping: Any,
        update_mapping: Any,
        options: Optional[RecordOptions] = None,
    ) -> UpdateStatus:
        """
        update_rows_data for records keyed differently from the sheet.

        Matched rows receive every `update_mapping` header, blanked when the
        source record lacks its key; other headers keep their values. Inserted
        records are projected through `update_mapping` the same way, so they
        carry those headers and nothing else.
        """
        if not match_mapping:
            raise RecordInputError("update_mapped_rows_data - missing match_mapping")
        if not update_mapping:
            raise RecordInputError("update_mapped_rows_data - missing update_mapping")
        match_mapping = HeaderMapping.coerce(match_mapping)
        update_mapping = HeaderMapping.coerce(update_mapping)

        def project(source: Record) -> Record:
            return {dest_header: source.get(source_key) for dest_header, source_key in update_mapping}

        def merge(destination: Record, source: Record) -> None:
            destination.update(project(source))

        return self._reconcile(
            grid,
            records,
            match_mapping.source_keys,
            match_mapping.destination_headers,
            merge,
            project,
            options,
        )

    def _scan_update(
        self,
        grid: Grid,
        record: Record,
        source_fields: Sequence[str],
        destination_fields: Sequence[str],
        merge: Merge,
        options: Optional[RecordOptions],
    ) -> UpdateStatus:
        options = options or RecordOptions()
        source_key = scan_join_key(record, source_fields, required=True, label="Source record")

        matches = [
            (row_num, existing)
            for row_num, existing in self.writer.get_numbered_rows_data(grid, options)
            if scan_join_key(existing, destination_fields, required=False) == source_key
        ]
        # TODO: decide with callers whether a single match should pass when require_unique is set
        if options.require_unique and matches:
            raise RecordConflictError(
                f"{len(matches)} record(s) in '{grid.name}' match key {source_key!r} "
                "while require_unique is set",
                key=source_key,
                side="destination",
            )

        status = UpdateStatus()
        headers, column = self.writer.read_headers(grid, options)
        for row_num, existing in matches:
            merge(existing, record)
            self._write_row(grid, existing, headers, row_num, column, status)
        logger.info(
            f"Updated {status.records_updated} row(s) in '{grid.name}' for key {source_key!r} "
            f"({status.errors} error(s))"
        )
        return status

    def _reconcile(
        self,
        grid: Grid,
        records: Sequence[Record],
        source_fields: Sequence[str],
        destination_fields: Sequence[str],
        merge: Merge,
        project: Project,
        options: Optional[RecordOptions],
    ) -> UpdateStatus:
        options = options or RecordOptions()
        header_row = options.header_row
        archive = options.remove_and_archive_non_matching_records

        extents = grid.get_extents()
        data_range = None
        existing: list[Record] = []
        if extents.last_row - header_row > 0:
            data_range = GridRange(
                row=header_row + 1,
                column=1,
                num_rows=extents.last_row - header_row,
                num_columns=extents.last_column,
            )
            existing = self.writer.get_rows_data(
                grid, options.model_copy(update={"data_range": data_range})
            )

        source_by_key = self._index(records, source_fields, "source")
        destination_by_key = self._index(existing, destination_fields, "destination")

        status = UpdateStatus()
        kept: list[Record] = []
        unmatched: list[Record] = []
        for key, destination in destination_by_key.items():
            if key in source_by_key:
                merge(destination, source_by_key[key])
                kept.append(destination)
                status.records_updated += 1
            elif not archive:
                kept.append(destination)
            else:
                unmatched.append(destination)

        if options.upsert_new_records:
            for key, source in source_by_key.items():
                if key not in destination_by_key:
                    kept.append(project(source))
                    status.records_inserted += 1

        # Archive before touching the live sheet
        if archive and unmatched:
            self._archive(grid, unmatched, header_row)
            status.records_archived = len(unmatched)

        if data_range is not None:
            grid.clear_range(data_range)
        headers, column = self.writer.read_headers(grid, options)
        self.writer.write_rows(grid, kept, headers, header_row + 1, column=column)
        grid.commit()

        logger.info(
            f"Reconciled '{grid.name}': {status.records_updated} updated, "
            f"{status.records_inserted} inserted, {status.records_archived} archived"
        )
        return status

    @staticmethod
    def _index(records: Sequence[Record], fields: Sequence[str], side: str) -> dict[str, Record]:
        indexed: dict[str, Record] = {}
        for record in records:
            key = bulk_join_key(record, fields, side)
            if key in indexed:
                raise RecordConflictError(
                    f"Duplicate record(s) in {side} data with key {key!r}", key=key, side=side
                )
            indexed[key] = record
        return indexed

    def _archive(self, grid: Grid, records: list[Record], header_row: int) -> None:
        archive_name = f"{grid.name}{self.archive_suffix}"
        archive = grid.spreadsheet.locate_or_create_sheet(archive_name)
        headers = self.header_manager.read_headers(grid, header_row)
        self.header_manager.upsert_headers(
            archive, expected_headers=headers, header_row=ARCHIVE_HEADER_ROW
        )
        self.writer.append_rows_data(
            archive, records, RecordOptions(column_headers_row_index=ARCHIVE_HEADER_ROW)
        )
        logger.info(f"Archived {len(records)} record(s) from '{grid.name}' to '{archive_name}'")

    def _write_row(
        self,
        grid: Grid,
        record: Record,
        headers: Sequence[Any],
        row_num: int,
        column: int,
        status: UpdateStatus,
    ) -> None:
        try:
            self.writer.write_rows(grid, [record], headers, row_num, column=column)
            status.records_updated += 1
        except Exception as e:
            logger.warning(f"Failed to write row {row_num} of '{grid.name}': {e}")
            status.errors += 1
