"""Builds the places index: the reduced listing view of every place."""

import logging
from pathlib import Path

from maginhawa.indexing.artifacts import write_json_artifact
from maginhawa.indexing.collection import load_collection
from maginhawa.models.place import Place, PlaceIndexEntry, index_of

logger = logging.getLogger(__name__)


def build_index(places: list[Place]) -> list[PlaceIndexEntry]:
    """Project every place onto its index entry, keeping input order."""
    return [index_of(place) for place in places]


def serialize_index(entries: list[PlaceIndexEntry]) -> list[dict]:
    return [entry.model_dump(by_alias=True) for entry in entries]


def publish_index(entries: list[PlaceIndexEntry], output_path: Path) -> int:
    """Write the index artifact, returning its size in bytes."""
    size = write_json_artifact(output_path, serialize_index(entries))
    logger.info(f"Index built: {len(entries)} places, {size / 1024:.2f} KB")
    return size


def run_index_build(places_dir: Path, output_path: Path) -> list[PlaceIndexEntry]:
    """Regenerate the published index from the places directory.

    Raises:
        CollectionError: If the collection is missing, empty or invalid
        ArtifactWriteError: If the index cannot be written
    """
    logger.info(f"Building index: {places_dir} -> {output_path}")

    entries = build_index(load_collection(places_dir))
    publish_index(entries, output_path)
    return entries
