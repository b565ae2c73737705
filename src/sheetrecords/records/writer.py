"""Reading records from and writing records to a grid."""

import logging
from typing import Any, Optional, Sequence

from ..sheets import Grid, GridRange
from .codec import decode_rows, encode_rows
from .models import HeaderMapping, Record, RecordOptions

logger = logging.getLogger(__name__)


class RecordWriter:
    """
    Moves records between a grid and memory.

    Reads decode every row below the header row into a dict keyed by header;
    writes encode records into a block exactly as tall as the record list and
    as wide as the header sequence.
    """

    def get_rows_data(self, grid: Grid, options: Optional[RecordOptions] = None) -> list[Record]:
        """
        Read the rows below the header row as records.

        Args:
            grid: Sheet holding the data
            options: `data_range` selects the exact data block (default: every
                row below the header row, every populated column);
                `headers_range` selects the header cells (default: the header
                row over the data block's columns)

        Returns:
            Records keyed by header, all-empty rows skipped
        """
        return [record for _, record in self.get_numbered_rows_data(grid, options)]

    def get_numbered_rows_data(
        self, grid: Grid, options: Optional[RecordOptions] = None
    ) -> list[tuple[int, Record]]:
        """Like get_rows_data, but pairs each record with the sheet row it came from."""
        options = options or RecordOptions()
        header_row = options.header_row
        data_range = options.data_range
        if data_range is None:
            extents = grid.get_extents()
            if extents.last_row < header_row + 1:
                return []
            data_range = GridRange(
                row=header_row + 1,
                column=1,
                num_rows=extents.last_row - header_row,
                num_columns=extents.last_column,
            )
        headers_range = options.headers_range or GridRange(
            row=header_row,
            column=data_range.column,
            num_rows=1,
            num_columns=data_range.num_columns,
        )
        headers = grid.read_range(headers_range)[0]
        numbered = []
        for offset, row in enumerate(grid.read_range(data_range)):
            decoded = decode_rows([row], headers)
            if decoded:
                numbered.append((data_range.row + offset, decoded[0]))
        return numbered

    def read_headers(self, grid: Grid, options: Optional[RecordOptions] = None) -> tuple[list[Any], int]:
        """Return the headers to write against and the column they start in."""
        options = options or RecordOptions()
        if options.headers_range is not None:
            return grid.read_range(options.headers_range)[0], options.headers_range.column
        last_column = grid.get_last_column()
        if last_column == 0:
            return [], 1
        return grid.read_region(options.header_row, 1, 1, last_column)[0], 1

    def write_rows(
        self,
        grid: Grid,
        records: Sequence[Record],
        headers: Sequence[Any],
        first_data_row: int,
        column: int = 1,
        mapping: Optional[HeaderMapping] = None,
    ) -> None:
        """Encode records and write them as one len(records) x len(headers) block."""
        if not records or not headers:
            logger.debug(f"Nothing to write to '{grid.name}' ({len(records)} records, {len(headers)} headers)")
            return
        values = encode_rows(records, headers, mapping)
        grid.write_region(first_data_row, column, values)
        logger.debug(f"Wrote {len(values)} row(s) to '{grid.name}' starting at row {first_data_row}")

    def set_rows_data(
        self, grid: Grid, records: Sequence[Record], options: Optional[RecordOptions] = None
    ) -> None:
        """
        Write one row per record, starting below the headers.

        Records are keyed by the sheet's headers; a header the record lacks is
        written as ''. `first_data_row_index` overrides the starting row.
        """
        self._set_rows(grid, records, options, mapping=None)

    def append_rows_data(
        self, grid: Grid, records: Sequence[Record], options: Optional[RecordOptions] = None
    ) -> None:
        """Write records after the sheet's current last row."""
        self.set_rows_data(grid, records, self._after_last_row(grid, options))

    def set_mapped_rows_data(
        self,
        grid: Grid,
        records: Sequence[Record],
        header_mapping: Any,
        options: Optional[RecordOptions] = None,
    ) -> None:
        """
        Write records whose keys differ from the sheet's headers.

        `header_mapping` maps destination headers to source keys, as a
        HeaderMapping or a dict; headers without a mapping are written as ''.
        """
        self._set_rows(grid, records, options, mapping=HeaderMapping.coerce(header_mapping))

    def append_mapped_rows_data(
        self,
        grid: Grid,
        records: Sequence[Record],
        header_mapping: Any,
        options: Optional[RecordOptions] = None,
    ) -> None:
        self.set_mapped_rows_data(grid, records, header_mapping, self._after_last_row(grid, options))

    def _set_rows(
        self,
        grid: Grid,
        records: Sequence[Record],
        options: Optional[RecordOptions],
        mapping: Optional[HeaderMapping],
    ) -> None:
        options = options or RecordOptions()
        headers, column = self.read_headers(grid, options)
        first_data_row = options.first_data_row_index or options.header_row + 1
        self.write_rows(grid, records, headers, first_data_row, column=column, mapping=mapping)

    @staticmethod
    def _after_last_row(grid: Grid, options: Optional[RecordOptions]) -> RecordOptions:
        options = options or RecordOptions()
        return options.model_copy(update={"first_data_row_index": grid.get_last_row() + 1})
