"""Validation of place records, one at a time or as a collection."""

from maginhawa.validation.batch import (
    check_files,
    list_record_files,
    validate_directory,
    validate_files,
)
from maginhawa.validation.report import format_report, format_summary_json
from maginhawa.validation.schema import (
    check_place,
    check_place_file,
    validate_place,
    validate_place_file,
    validate_place_json,
)

__all__ = [
    "check_files",
    "check_place",
    "check_place_file",
    "format_report",
    "format_summary_json",
    "list_record_files",
    "validate_directory",
    "validate_files",
    "validate_place",
    "validate_place_file",
    "validate_place_json",
]
