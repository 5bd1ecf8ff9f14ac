"""Place record data models.

Field names are snake_case in Python and camelCase on disk; every model
uses a camelCase alias generator so records round-trip unchanged.
"""

import re
from datetime import datetime
from typing import Annotated, Literal

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    TypeAdapter,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

PRICE_RANGES = ("$", "$$", "$$$", "$$$$")
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
TIME_PATTERN = re.compile(r"^[0-9]{2}:[0-9]{2}$")
UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
ISO_DATETIME_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:\d{2})$"
)

FRACTION_PATTERN = re.compile(r"(\.\d{6})\d+")

_url_adapter = TypeAdapter(AnyUrl)
_email_adapter = TypeAdapter(EmailStr)


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO 8601 date-time with an explicit offset, or return None."""
    if not isinstance(value, str) or not ISO_DATETIME_PATTERN.fullmatch(value):
        return None
    try:
        # datetime keeps microseconds only
        value = FRACTION_PATTERN.sub(r"\1", value)
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _check_uuid(value: str) -> str:
    if not UUID_PATTERN.fullmatch(value):
        raise PydanticCustomError(
            "uuid_format",
            "ID must be a valid UUID (e.g., 550e8400-e29b-41d4-a716-446655440000)",
        )
    return value


def _check_slug(value: str) -> str:
    if not value:
        raise PydanticCustomError("slug_required", "Slug is required")
    if not SLUG_PATTERN.fullmatch(value):
        raise PydanticCustomError("slug_format", "Slug must be kebab-case")
    return value


def _check_description(value: str) -> str:
    if len(value) < 10:
        raise PydanticCustomError(
            "too_short", "Description must be at least 10 characters"
        )
    return value


def _check_price_range(value: str) -> str:
    if value not in PRICE_RANGES:
        raise PydanticCustomError(
            "price_range", "Price range must be $, $$, $$$, or $$$$"
        )
    return value


def _check_time(value: str) -> str:
    if not TIME_PATTERN.fullmatch(value):
        raise PydanticCustomError("time_format", "Time must be in HH:MM format")
    return value


def _check_cuisines(value: list[str]) -> list[str]:
    if not value:
        raise PydanticCustomError(
            "too_short", "At least one cuisine type is required"
        )
    return value


def _check_email(value: str) -> str:
    if value == "":
        return value
    try:
        _email_adapter.validate_python(value)
    except ValidationError:
        raise PydanticCustomError("email_format", "Invalid email format") from None
    return value


def non_empty(message: str):
    def check(value: str) -> str:
        if not value:
            raise PydanticCustomError("required", message)
        return value

    return check


def _url(message: str, allow_empty: bool = True):
    def check(value: str) -> str:
        if value == "" and allow_empty:
            return value
        try:
            _url_adapter.validate_python(value)
        except ValidationError:
            raise PydanticCustomError("url_format", message) from None
        return value

    return check


def _timestamp(message: str):
    def check(value: str) -> str:
        if parse_timestamp(value) is None:
            raise PydanticCustomError("datetime_format", message)
        return value

    return check


PlaceId = Annotated[str, AfterValidator(_check_uuid)]
Slug = Annotated[str, AfterValidator(_check_slug)]
HourMinute = Annotated[str, AfterValidator(_check_time)]
PriceRange = Annotated[str, AfterValidator(_check_price_range)]
OptionalEmail = Annotated[str, AfterValidator(_check_email)]


class DayHours(BaseModel):
    """Opening hours for one day of the week."""

    model_config = ConfigDict(strict=True)

    open: HourMinute | None = None
    close: HourMinute | None = None
    closed: bool | None = None

    @model_validator(mode="after")
    def _times_unless_closed(self) -> "DayHours":
        if self.closed:
            return self
        missing = [name for name in ("open", "close") if getattr(self, name) is None]
        if missing:
            raise PydanticCustomError(
                "hours_required",
                "Open and close times are required unless the day is closed "
                "(missing: {missing})",
                {"missing": ", ".join(missing)},
            )
        return self


class Contributor(BaseModel):
    """One entry in a place's append-only contribution log."""

    model_config = ConfigDict(strict=True, alias_generator=to_camel)

    name: Annotated[str, AfterValidator(non_empty("Contributor name is required"))]
    email: OptionalEmail | None = None
    github: str | None = None
    contributed_at: Annotated[
        str, AfterValidator(_timestamp("Invalid contributedAt timestamp"))
    ]
    action: Literal["created", "updated"]


class Place(BaseModel):
    """A single place in the directory: the source-of-truth record."""

    model_config = ConfigDict(strict=True, alias_generator=to_camel)

    # Identity
    id: PlaceId
    slug: Slug

    # Descriptive
    name: Annotated[str, AfterValidator(non_empty("Name is required"))]
    description: Annotated[str, AfterValidator(_check_description)]
    address: Annotated[str, AfterValidator(non_empty("Address is required"))]

    # Contact Information
    phone: str | None = None
    email: OptionalEmail | None = None
    website: Annotated[str, AfterValidator(_url("Invalid URL format"))] | None = None

    # Media
    logo_url: Annotated[str, AfterValidator(_url("Invalid logo URL"))] | None = None
    cover_image_url: (
        Annotated[str, AfterValidator(_url("Invalid cover image URL"))] | None
    ) = None
    photos_urls: list[
        Annotated[str, AfterValidator(_url("Invalid photo URL", allow_empty=False))]
    ]

    # Business Details
    operating_hours: dict[str, DayHours]
    price_range: PriceRange
    payment_methods: list[str]

    # Categorization & Search
    tags: list[str]
    amenities: list[str]
    cuisine_types: Annotated[list[str], AfterValidator(_check_cuisines)]
    specialties: list[str]

    # Location
    latitude: Annotated[float, Field(ge=-90, le=90)] | None = None
    longitude: Annotated[float, Field(ge=-180, le=180)] | None = None

    # Metadata
    created_at: Annotated[str, AfterValidator(_timestamp("Invalid createdAt timestamp"))]
    updated_at: Annotated[str, AfterValidator(_timestamp("Invalid updatedAt timestamp"))]
    created_by: str | None = None
    contributors: list[Contributor] | None = None

    # Optional future fields
    rating: Annotated[float, Field(ge=0, le=5)] | None = None
    review_count: Annotated[int, Field(ge=0)] | None = None
    verified: bool | None = None

    def to_record(self) -> dict:
        """Serialize to the on-disk camelCase record layout."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class PlaceIndexEntry(BaseModel):
    """Reduced projection of a place used for listing and search."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    slug: str
    name: str
    description: str
    address: str
    price_range: str
    payment_methods: list[str] = Field(default_factory=list)
    cuisine_types: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    amenities: list[str] = Field(default_factory=list)
    specialties: list[str] = Field(default_factory=list)


def index_of(place: Place) -> PlaceIndexEntry:
    """Project a full place record onto its index entry."""
    return PlaceIndexEntry(
        id=place.id,
        slug=place.slug,
        name=place.name,
        description=place.description,
        address=place.address,
        price_range=place.price_range,
        payment_methods=list(place.payment_methods),
        cuisine_types=list(place.cuisine_types),
        tags=list(place.tags),
        amenities=list(place.amenities),
        specialties=list(place.specialties),
    )


class PlaceStats(BaseModel):
    """Collection-wide summary of categorical values."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_places: int
    unique_cuisines: int
    unique_amenities: int
    unique_tags: int
    price_ranges: list[str]
    payment_methods: list[str]
    cuisine_types: list[str]
    amenities: list[str]
    tags: list[str]
    generated_at: str
