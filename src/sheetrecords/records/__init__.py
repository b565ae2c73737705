"""Header-keyed records on top of grid storage."""

from .codec import convert_2d_array_to_objects, decode_rows, encode_rows
from .headers import HeaderManager
from .models import (
    HeaderMapping,
    Record,
    RecordConflictError,
    RecordInputError,
    RecordOptions,
    RecordsError,
    UpdateStatus,
)
from .reconciler import RecordReconciler
from .writer import RecordWriter

__all__ = [
    "convert_2d_array_to_objects",
    "decode_rows",
    "encode_rows",
    "HeaderManager",
    "HeaderMapping",
    "Record",
    "RecordConflictError",
    "RecordInputError",
    "RecordOptions",
    "RecordsError",
    "UpdateStatus",
    "RecordReconciler",
    "RecordWriter",
]
