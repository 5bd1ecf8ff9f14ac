"""Turns form submissions into reviewed change proposals.

A submission never writes to the places collection. It is assembled into a
full record, checked against the place schema, and offered as a pull request
for the maintainers to review.
"""

import json
import logging
import re
import uuid
from collections.abc import Callable
from datetime import datetime

from maginhawa.errors import SubmissionRejected
from maginhawa.indexing.stats_builder import format_timestamp, utc_now
from maginhawa.models.place import Place
from maginhawa.models.submission import (
    CreatePlaceRequest,
    DeletePlaceRequest,
    ProposalResult,
    UpdatePlaceRequest,
)
from maginhawa.services.github_service import GitHubService
from maginhawa.services.place_repository import PlaceRepository
from maginhawa.validation.schema import check_place

logger = logging.getLogger(__name__)

ANONYMOUS = "Anonymous"
INDEX_NOTE = (
    "⚠️ **Note:** The `places.json` and `stats.json` index files will be "
    "auto-generated after merge.\n"
)


def generate_slug(name: str) -> str:
    """Generate a URL-friendly slug from a place name."""
    slug = name.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug, flags=re.ASCII)
    slug = re.sub(r"[\s_]+", "-", slug, flags=re.ASCII)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def _drop_empty(entry: dict) -> None:
    for key in [key for key, value in entry.items() if value is None]:
        del entry[key]


def _contributor_section(
    heading: str, name: str | None, email: str | None, github: str | None = None
) -> str:
    if not (name or email or github):
        return ""
    section = f"---\n\n### {heading}\n\n"
    if name:
        section += f"**Name:** {name}\n"
    if github:
        section += f"**GitHub:** @{github}\n"
    if email:
        section += f"**Email:** {email}\n"
    return section + "\n"


def render_place_body(
    heading: str, place: Place, request: CreatePlaceRequest | UpdatePlaceRequest
) -> str:
    """Markdown description for an add or update pull request."""
    body = f"## {heading}\n\n"
    body += f"**Place Name:** {place.name}\n"
    body += f"**Address:** {place.address}\n"
    body += f"**Cuisine:** {', '.join(place.cuisine_types)}\n"
    body += f"**Price Range:** {place.price_range}\n\n"
    body += _contributor_section(
        "Contributor Information",
        request.contributor_name,
        request.contributor_email,
        request.contributor_github,
    )
    body += "---\n\n"
    body += "This PR was automatically created via the Where In Maginhawa web form.\n"
    body += "The place file will be validated automatically before review.\n\n"
    return body + INDEX_NOTE


def render_removal_body(request: DeletePlaceRequest) -> str:
    """Markdown description for a closure report pull request."""
    body = "## Place Closure Report\n\n"
    body += f"**Place Name:** {request.name}\n"
    body += "**Action:** Remove from directory\n\n"
    if request.reason:
        body += f"**Reason:** {request.reason}\n\n"
    body += _contributor_section(
        "Reporter Information", request.contributor_name, request.contributor_email
    )
    body += "---\n\n"
    body += "This PR was automatically created via the Where In Maginhawa web form "
    body += "to report a place closure.\nPlease verify the closure before merging.\n\n"
    return body + INDEX_NOTE


def serialize_place(place: Place) -> str:
    return json.dumps(place.to_record(), indent=2, ensure_ascii=False) + "\n"


class SubmissionService:
    """Builds, validates and proposes place creations, updates and removals."""

    def __init__(
        self,
        github: GitHubService,
        repository: PlaceRepository,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self.github = github
        self.repository = repository
        self._clock = clock
        self._id_factory = id_factory

    def _branch(self, action: str, slug: str, now: datetime) -> str:
        return f"{action}-place-{slug}-{int(now.timestamp() * 1000)}"

    def _validated(self, record: dict) -> Place:
        place, result = check_place(record, file=f"{record.get('slug', '')}.json")
        if place is None:
            logger.warning(
                f"Rejected submission for {record.get('name')!r}: "
                f"{len(result.errors)} validation error(s)"
            )
            raise SubmissionRejected(
                400,
                "Validation failed",
                details=[error.model_dump() for error in result.errors],
            )
        return place

    def build_new_place(self, request: CreatePlaceRequest) -> Place:
        """Assemble a brand-new record from a create request.

        Raises:
            SubmissionRejected: If the assembled record fails validation
        """
        now = format_timestamp(self._clock())
        contributor = request.contributor_name or ANONYMOUS
        record = {
            "id": self._id_factory(),
            "slug": generate_slug(request.name),
            **request.place_fields(),
            "createdAt": now,
            "updatedAt": now,
            "createdBy": contributor,
            "contributors": [
                {
                    "name": contributor,
                    "email": request.contributor_email or None,
                    "github": request.contributor_github or None,
                    "contributedAt": now,
                    "action": "created",
                }
            ],
        }
        _drop_empty(record["contributors"][0])
        return self._validated(record)

    def build_updated_place(self, request: UpdatePlaceRequest, existing: Place) -> Place:
        """Apply an update request on top of the stored record.

        The id, creation time and creator are carried over and one
        "updated" contribution is appended to the log.

        Raises:
            SubmissionRejected: If the ids disagree or the result is invalid
        """
        if existing.id != request.id:
            raise SubmissionRejected(
                409, f"Place id does not match the stored record for {request.slug}"
            )

        now = format_timestamp(self._clock())
        contribution = {
            "name": request.contributor_name,
            "email": request.contributor_email or None,
            "github": request.contributor_github or None,
            "contributedAt": now,
            "action": "updated",
        }
        _drop_empty(contribution)
        history = [
            c.model_dump(by_alias=True, exclude_none=True)
            for c in existing.contributors or []
        ]

        record = {
            **request.place_fields(),
            "id": existing.id,
            "slug": existing.slug,
            "createdAt": existing.created_at,
            "updatedAt": now,
            "createdBy": existing.created_by or ANONYMOUS,
            "contributors": [*history, contribution],
        }
        return self._validated(record)

    def submit_new_place(self, request: CreatePlaceRequest) -> ProposalResult:
        """Propose a new place.

        Raises:
            SubmissionRejected: If the place is invalid or already listed
            ValueError: If GitHub is not configured
            GitHubError: If the pull request cannot be opened
        """
        place = self.build_new_place(request)
        if self.repository.exists(place.slug):
            raise SubmissionRejected(409, f"A place with slug '{place.slug}' already exists")

        logger.info(f"Proposing new place {place.slug}")
        return self.github.propose_file(
            place.slug,
            serialize_place(place),
            branch=self._branch("add", place.slug, self._clock()),
            title=f"Add {place.name}",
            body=render_place_body("New Place Submission", place, request),
            commit_message=f"Add {place.name} to places directory\n\nSubmitted via web form",
        )

    def submit_update(self, request: UpdatePlaceRequest) -> ProposalResult:
        """Propose changes to an existing place.

        Raises:
            SubmissionRejected: If the place is unknown, mismatched or invalid
            ValueError: If GitHub is not configured
            GitHubError: If the pull request cannot be opened
        """
        existing = self.repository.get_by_slug(request.slug)
        if existing is None:
            raise SubmissionRejected(404, "Place not found. Cannot update a non-existent place.")

        place = self.build_updated_place(request, existing)

        logger.info(f"Proposing update to {place.slug}")
        return self.github.propose_file(
            place.slug,
            serialize_place(place),
            branch=self._branch("update", place.slug, self._clock()),
            title=f"Update {place.name}",
            body=render_place_body("Place Update Submission", place, request),
            commit_message=f"Update {place.name} information\n\nSubmitted via web form",
        )

    def submit_removal(self, request: DeletePlaceRequest) -> ProposalResult:
        """Propose removing a place that has closed.

        Raises:
            SubmissionRejected: If the place is unknown
            ValueError: If GitHub is not configured
            GitHubError: If the pull request cannot be opened
        """
        if not self.repository.exists(request.slug):
            raise SubmissionRejected(404, "Place not found. Cannot remove a non-existent place.")

        logger.info(f"Proposing removal of {request.slug}")
        return self.github.propose_deletion(
            request.slug,
            branch=self._branch("delete", request.slug, self._clock()),
            title=f"Remove {request.name} (Closure Report)",
            body=render_removal_body(request),
            commit_message=(
                f"Remove {request.name} from places directory\n\n"
                "Place reported as closed via web form"
            ),
        )

