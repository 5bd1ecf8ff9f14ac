"""Data models for the Maginhawa places directory."""

from maginhawa.models.place import (
    PRICE_RANGES,
    Contributor,
    DayHours,
    Place,
    PlaceIndexEntry,
    PlaceStats,
    index_of,
)
from maginhawa.models.validation import BatchReport, FieldError, ValidationResult

__all__ = [
    "PRICE_RANGES",
    "BatchReport",
    "Contributor",
    "DayHours",
    "FieldError",
    "Place",
    "PlaceIndexEntry",
    "PlaceStats",
    "ValidationResult",
    "index_of",
]
