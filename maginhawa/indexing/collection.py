"""Loading the place collection that the builders publish from."""

import logging
from pathlib import Path

from maginhawa.errors import CollectionError
from maginhawa.models.place import Place
from maginhawa.validation.batch import check_files, list_record_files

logger = logging.getLogger(__name__)


def load_collection(places_dir: Path) -> list[Place]:
    """Read and validate every record in the places directory.

    Builders only ever publish from a fully valid collection, so any
    invalid record aborts the load.

    Args:
        places_dir: Directory holding one JSON file per place

    Returns:
        Valid places in file-name order

    Raises:
        CollectionError: If the directory is missing, empty or unreadable,
            or if any record fails validation
    """
    paths = list_record_files(places_dir)
    if not paths:
        raise CollectionError(f"No place files found in {places_dir}")

    logger.info(f"Processing {len(paths)} place files from {places_dir}")
    report, places = check_files(paths)

    if not report.all_valid:
        failures = {
            Path(result.file).name: [f"{e.path}: {e.message}" for e in result.errors]
            for result in report.invalid_results()
        }
        for name, messages in failures.items():
            logger.error(f"{name}: {'; '.join(messages)}")
        raise CollectionError(
            f"Failed to process {report.invalid} file(s) in {places_dir}",
            failures=failures,
        )

    return places
