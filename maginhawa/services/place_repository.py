"""Read access to the local place records."""

import logging
from pathlib import Path

from maginhawa.models.place import SLUG_PATTERN, Place
from maginhawa.validation.schema import check_place_file

logger = logging.getLogger(__name__)


class PlaceRepository:
    """Looks up place records stored as one JSON file per slug."""

    def __init__(self, places_dir: Path) -> None:
        self.places_dir = Path(places_dir)

    def path_for(self, slug: str) -> Path:
        """File holding the record for slug.

        Raises:
            ValueError: If slug is not a valid kebab-case slug
        """
        if not SLUG_PATTERN.fullmatch(slug):
            msg = f"Invalid slug: {slug!r}"
            raise ValueError(msg)
        return self.places_dir / f"{slug}.json"

    def exists(self, slug: str) -> bool:
        return self.path_for(slug).is_file()

    def get_by_slug(self, slug: str) -> Place | None:
        """Load a place by slug.

        Returns:
            The place, or None if no valid record exists for slug
        """
        path = self.path_for(slug)
        if not path.is_file():
            logger.info(f"No place found for slug {slug}")
            return None

        place, result = check_place_file(path)
        if place is None:
            logger.error(
                f"Stored record {path.name} is invalid: "
                + "; ".join(f"{e.path}: {e.message}" for e in result.errors)
            )
        return place
