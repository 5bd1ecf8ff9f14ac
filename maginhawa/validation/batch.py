"""Batch validation of a whole collection of place records."""

import logging
from collections import defaultdict
from collections.abc import Iterable
from pathlib import Path

from maginhawa.errors import CollectionError
from maginhawa.models.place import Place
from maginhawa.models.validation import BatchReport, FieldError, ValidationResult
from maginhawa.validation.schema import check_place_file

logger = logging.getLogger(__name__)

RECORD_SUFFIX = ".json"


def list_record_files(directory: Path) -> list[Path]:
    """List record files in a directory in deterministic (sorted) order.

    Raises:
        CollectionError: If the directory is missing or cannot be listed
    """
    directory = Path(directory)
    if not directory.exists():
        raise CollectionError(f"Places directory not found: {directory}")
    if not directory.is_dir():
        raise CollectionError(f"Not a directory: {directory}")
    try:
        return sorted(
            path
            for path in directory.iterdir()
            if path.suffix == RECORD_SUFFIX and path.is_file()
        )
    except OSError as e:
        raise CollectionError(f"Cannot read places directory {directory}: {e}") from e


def _flag_slug_mismatch(path: Path, place: Place, result: ValidationResult) -> None:
    if path.stem != place.slug:
        result.errors.append(
            FieldError(
                path="slug",
                message=f"File name must match slug (expected {place.slug}{RECORD_SUFFIX})",
                code="slug_mismatch",
            )
        )


def _flag_duplicates(
    field: str,
    code: str,
    keyed: dict[str, list[Path]],
    results: dict[Path, ValidationResult],
) -> None:
    for value, paths in keyed.items():
        if len(paths) < 2:
            continue
        for path in paths:
            others = ", ".join(other.name for other in paths if other != path)
            results[path].errors.append(
                FieldError(
                    path=field,
                    message=f"Duplicate {field} '{value}' also used by {others}",
                    code=code,
                )
            )


def check_files(paths: Iterable[Path]) -> tuple[BatchReport, list[Place]]:
    """Validate record files independently, then check identity across them.

    A failure in one record never stops the others from being checked.
    Records that pass their own schema are then compared for duplicate ids
    and slugs and for file names that do not match their slug.

    Args:
        paths: Record files in processing order

    Returns:
        The batch report and the valid places, in input order
    """
    paths = list(paths)
    results: dict[Path, ValidationResult] = {}
    places: dict[Path, Place] = {}
    by_id: dict[str, list[Path]] = defaultdict(list)
    by_slug: dict[str, list[Path]] = defaultdict(list)

    for path in paths:
        place, result = check_place_file(path)
        results[path] = result
        if place is None:
            logger.warning(f"Invalid record {path.name}: {len(result.errors)} error(s)")
            continue
        places[path] = place
        by_id[place.id].append(path)
        by_slug[place.slug].append(path)
        _flag_slug_mismatch(path, place, result)

    _flag_duplicates("id", "duplicate_id", by_id, results)
    _flag_duplicates("slug", "duplicate_slug", by_slug, results)

    report = BatchReport(results=[results[path] for path in paths])
    valid_places = [places[path] for path in paths if path in places and results[path].valid]
    return report, valid_places


def validate_files(paths: Iterable[Path]) -> BatchReport:
    """Validate the given record files."""
    return check_files(paths)[0]


def validate_directory(directory: Path) -> BatchReport:
    """Validate all place files in a directory."""
    paths = list_record_files(directory)
    logger.info(f"Validating {len(paths)} place file(s) in {directory}")
    report = validate_files(paths)
    logger.info(f"Validation finished: {report.valid} valid, {report.invalid} invalid")
    return report
