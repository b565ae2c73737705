"""Conversion between 2-D cell arrays and header-keyed records."""

from typing import Any, Optional, Sequence

from .models import HeaderMapping, Record


def is_cell_empty(value: Any) -> bool:
    """True if the cell the value was read from is empty."""
    return isinstance(value, str) and value == ""


def decode_rows(values: Sequence[Sequence[Any]], headers: Sequence[Any]) -> list[Record]:
    """
    Build one record per row, keyed by header.

    Empty cells become '' in the record. A row whose cells are all empty
    produces no record at all. Cells past the last header are ignored.

    Args:
        values: Rows of raw cell values, as read from a grid
        headers: Column names, one per column

    Returns:
        Records in row order
    """
    records = []
    for row in values:
        record: Record = {}
        has_data = False
        for header, cell in zip(headers, row):
            if is_cell_empty(cell):
                record[header] = ""
                continue
            record[header] = cell
            has_data = True
        if has_data:
            records.append(record)
    return records


convert_2d_array_to_objects = decode_rows


def _is_numeric_zero(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0


def encode_cell(header: Any, value: Any) -> Any:
    """Cell value to write for one header/value pair."""
    header_present = header is not None and header != ""
    if header_present and _is_numeric_zero(value):
        return 0
    if not header_present or value == "" or not value:
        return ""
    return value


def encode_rows(
    records: Sequence[Record],
    headers: Sequence[Any],
    mapping: Optional[HeaderMapping] = None,
) -> list[list[Any]]:
    """
    Turn records into rows of cell values, one column per header.

    A literal zero survives as 0; missing, None, False and '' values are all
    written as ''. With a mapping, each header's value is read from the record
    under its mapped source key, and unmapped headers are left blank.
    """
    rows = []
    for record in records:
        row = []
        for header in headers:
            if mapping is None:
                value = record.get(header)
            else:
                source_key = mapping.source_key_for(header)
                value = record.get(source_key) if source_key is not None else None
            row.append(encode_cell(header, value))
        rows.append(row)
    return rows
