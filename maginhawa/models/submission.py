"""Request and response models for place change proposals."""

from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from maginhawa.models.place import OptionalEmail, PlaceId, Slug, non_empty


class PlaceSubmission(BaseModel):
    """Fields a contributor fills in on the add/edit forms.

    Only the shape is checked here; the assembled record goes through the
    full place schema before any change is proposed.
    """

    model_config = ConfigDict(strict=True, alias_generator=to_camel)

    name: str
    description: str
    address: str
    operating_hours: dict[str, Any]
    price_range: str
    cuisine_types: list[str]

    phone: str | None = None
    email: str | None = None
    website: str | None = None
    logo_url: str | None = None
    cover_image_url: str | None = None
    photos_urls: list[str] = Field(default_factory=list)
    payment_methods: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    amenities: list[str] = Field(default_factory=list)
    specialties: list[str] = Field(default_factory=list)
    latitude: float | None = None
    longitude: float | None = None

    contributor_email: OptionalEmail | None = None
    contributor_github: str | None = None

    def place_fields(self) -> dict[str, Any]:
        """Record fields in on-disk layout, empty optionals dropped."""
        data = self.model_dump(
            by_alias=True,
            exclude_none=True,
            exclude={"contributor_name", "contributor_email", "contributor_github"},
        )
        for key in ("email", "website", "logoUrl", "coverImageUrl"):
            if data.get(key) == "":
                del data[key]
        return data


class CreatePlaceRequest(PlaceSubmission):
    """A new place; id, slug and timestamps are assigned on submission."""

    contributor_name: str | None = None


class UpdatePlaceRequest(PlaceSubmission):
    """Edits to an existing place, identified by id and slug."""

    id: PlaceId
    slug: Slug
    contributor_name: Annotated[
        str, AfterValidator(non_empty("Contributor name is required"))
    ]


class DeletePlaceRequest(BaseModel):
    """Report that a place has closed and should be removed."""

    model_config = ConfigDict(strict=True, alias_generator=to_camel)

    slug: Slug
    name: Annotated[str, AfterValidator(non_empty("Name is required"))]
    reason: str | None = None
    contributor_name: str | None = None
    contributor_email: OptionalEmail | None = None


class ProposalResult(BaseModel):
    """A change proposal opened against the places repository."""

    pr_url: str
    pr_number: int
    branch: str
