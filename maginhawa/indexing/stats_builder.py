"""Builds collection-wide statistics for the filtering UI."""

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from pathlib import Path

from maginhawa.indexing.artifacts import write_json_artifact
from maginhawa.indexing.collection import load_collection
from maginhawa.models.place import Place, PlaceStats

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


def format_timestamp(moment: datetime) -> str:
    """Render a timestamp as ISO 8601 UTC with millisecond precision."""
    moment = moment.astimezone(UTC)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def _distinct(values: Iterable[str | None]) -> list[str]:
    return sorted({value for value in values if value is not None})


def build_stats(
    places: list[Place], now: Callable[[], datetime] = utc_now
) -> PlaceStats:
    """Aggregate distinct categorical values across all places.

    Values keep their original casing; duplicates collapse and each list is
    sorted so the artifact is reproducible.
    """
    cuisine_types = _distinct(c for place in places for c in place.cuisine_types or [])
    amenities = _distinct(a for place in places for a in place.amenities or [])
    tags = _distinct(t for place in places for t in place.tags or [])

    return PlaceStats(
        total_places=len(places),
        unique_cuisines=len(cuisine_types),
        unique_amenities=len(amenities),
        unique_tags=len(tags),
        price_ranges=_distinct(place.price_range for place in places),
        payment_methods=_distinct(
            m for place in places for m in place.payment_methods or []
        ),
        cuisine_types=cuisine_types,
        amenities=amenities,
        tags=tags,
        generated_at=format_timestamp(now()),
    )


def publish_stats(stats: PlaceStats, output_path: Path) -> int:
    """Write the stats artifact, returning its size in bytes."""
    size = write_json_artifact(output_path, stats.model_dump(by_alias=True))
    logger.info(
        f"Statistics built: {stats.total_places} places, "
        f"{stats.unique_cuisines} cuisines, {stats.unique_amenities} amenities, "
        f"{stats.unique_tags} tags, price ranges {', '.join(stats.price_ranges)}, "
        f"{size / 1024:.2f} KB"
    )
    return size


def run_stats_build(
    places_dir: Path, output_path: Path, now: Callable[[], datetime] = utc_now
) -> PlaceStats:
    """Regenerate the published stats from the places directory.

    Raises:
        CollectionError: If the collection is missing, empty or invalid
        ArtifactWriteError: If the stats cannot be written
    """
    logger.info(f"Building statistics: {places_dir} -> {output_path}")

    stats = build_stats(load_collection(places_dir), now=now)
    publish_stats(stats, output_path)
    return stats
