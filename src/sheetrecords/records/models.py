"""Data models for record operations."""

from typing import Any, Iterator, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field

from ..config import settings
from ..sheets.models import GridRange


Record = dict[str, Any]


class RecordOptions(BaseModel):
    """Options recognised by the record read/write/reconcile operations."""

    expected_headers: Optional[list[Any]] = None
    column_headers_row_index: int = Field(default_factory=lambda: settings.default_header_row, ge=1)
    freeze_headers: bool = False
    data_range: Optional[GridRange] = None  # Exact block holding the data rows
    headers_range: Optional[GridRange] = None  # Limits which columns are read/written
    first_data_row_index: Optional[int] = Field(default=None, ge=1)
    require_match: bool = False
    match_headers: Optional[list[str]] = None
    require_unique: bool = False
    upsert_new_records: bool = False
    remove_and_archive_non_matching_records: bool = False

    @property
    def header_row(self) -> int:
        """Row holding the headers: the headers range if given, else the configured index."""
        if self.headers_range is not None:
            return self.headers_range.row
        return self.column_headers_row_index


class HeaderMapping(BaseModel):
    """
    Ordered (destination header, source key) pairs.

    Used by the mapped variants, where records coming in are keyed differently
    from the destination sheet's headers. Order matters: join keys are built by
    walking the pairs in sequence.
    """

    pairs: list[tuple[str, str]] = Field(default_factory=list)

    @classmethod
    def coerce(cls, value: Union["HeaderMapping", Mapping[str, str], Sequence[tuple[str, str]]]) -> "HeaderMapping":
        if isinstance(value, HeaderMapping):
            return value
        if isinstance(value, Mapping):
            return cls(pairs=list(value.items()))
        return cls(pairs=[tuple(pair) for pair in value])

    @property
    def destination_headers(self) -> list[str]:
        return [dest for dest, _ in self.pairs]

    @property
    def source_keys(self) -> list[str]:
        return [source for _, source in self.pairs]

    def source_key_for(self, destination_header: Any) -> Optional[str]:
        for dest, source in self.pairs:
            if dest == destination_header:
                return source
        return None

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)


class UpdateStatus(BaseModel):
    """Counters returned by every mutating record operation."""

    records_updated: int = 0
    records_inserted: int = 0
    records_archived: int = 0
    errors: int = 0


class RecordsError(Exception):
    """Base class for record operation errors."""

    pass


class RecordInputError(RecordsError, ValueError):
    """Raised when a required argument or match field is missing or malformed."""

    pass


class RecordConflictError(RecordsError):
    """Raised when join keys collide or a match is not unique."""

    def __init__(self, message: str, key: Optional[str] = None, side: Optional[str] = None):
        self.key = key
        self.side = side
        super().__init__(message)
