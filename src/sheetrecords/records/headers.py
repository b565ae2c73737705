"""Header row management."""

import logging
from typing import Any, Optional, Sequence

from ..sheets import Grid
from .models import RecordOptions

logger = logging.getLogger(__name__)


class HeaderManager:
    """Reads, repairs and freezes a sheet's header row."""

    def read_headers(self, grid: Grid, header_row: int = 1) -> list[Any]:
        """Return the header row as-is, or [] for a sheet with no columns."""
        last_column = grid.get_last_column()
        if last_column == 0:
            return []
        return grid.read_region(header_row, 1, 1, last_column)[0]

    def upsert_headers(
        self,
        grid: Grid,
        expected_headers: Optional[Sequence[Any]] = None,
        header_row: int = 1,
        freeze: bool = False,
    ) -> list[Any]:
        """
        Make sure the expected headers exist in the header row.

        Missing headers are appended after the last existing column, one by
        one; existing headers keep their position and order. A blank sheet
        receives all expected headers in a single write.

        Args:
            grid: Sheet to read and repair
            expected_headers: Headers that must exist (None: just read)
            header_row: Row holding the headers
            freeze: Freeze rows 1..header_row

        Returns:
            The header sequence after the upsert
        """
        last_column = grid.get_last_column()
        headers = grid.read_region(header_row, 1, 1, last_column)[0] if last_column else []
        if expected_headers is None:
            return headers

        if last_column > 0:
            added = []
            for header in expected_headers:
                if header in headers:
                    continue
                last_column += 1
                grid.write_region(header_row, last_column, [[header]])
                headers.append(header)
                added.append(header)
            if added:
                logger.info(f"Appended {len(added)} missing header(s) to '{grid.name}': {added}")
        else:
            headers = list(expected_headers)
            if headers:
                grid.write_region(header_row, 1, [headers])
            logger.info(f"Wrote {len(headers)} header(s) to blank sheet '{grid.name}'")

        if freeze:
            grid.freeze_rows(header_row)
        grid.commit()
        return headers

    def get_upsert_headers(self, grid: Grid, options: Optional[RecordOptions] = None) -> list[Any]:
        """upsert_headers driven by an options object."""
        options = options or RecordOptions()
        return self.upsert_headers(
            grid,
            expected_headers=options.expected_headers,
            header_row=options.column_headers_row_index,
            freeze=options.freeze_headers,
        )
