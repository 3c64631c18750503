"""Pydantic models for listings, filters, favorites and viewing requests."""

from collections.abc import Mapping
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any, Final, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


class PropertyType(StrEnum):
    """Kinds of residential property in the catalog."""

    HOUSE = "House"
    CONDO = "Condo"
    TOWNHOUSE = "Townhouse"
    APARTMENT = "Apartment"


class ListingStatus(StrEnum):
    """Sale status of a listing."""

    AVAILABLE = "Available"
    PENDING = "Pending"
    SOLD = "Sold"


class ViewingStatus(StrEnum):
    """Lifecycle of a viewing request."""

    SCHEDULED = "Scheduled"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"
    COMPLETED = "Completed"


class ContactStatus(StrEnum):
    """Whether the agent has answered an inquiry."""

    PENDING = "pending"
    RESPONDED = "responded"


class _Record(BaseModel):
    """Immutable record serialized with camelCase keys.

    Accepts both snake_case field names and their camelCase aliases on input.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @classmethod
    def field_lookup(cls) -> dict[str, str]:
        """Map every accepted input key (name or alias) to its field name."""
        lookup: dict[str, str] = {}
        for name, info in cls.model_fields.items():
            lookup[name] = name
            if info.alias:
                lookup[info.alias] = name
        return lookup

    @classmethod
    def normalize_keys(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        """Rewrite alias keys to field names, leaving unknown keys untouched."""
        lookup = cls.field_lookup()
        return {lookup.get(key, key): value for key, value in data.items()}


def _as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Agent(_Record):
    """Listing agent contact details."""

    name: str
    email: str
    phone: str
    image: str | None = None


DEFAULT_AGENT: Final = Agent(
    name="John Smith",
    email="john.smith@propertyvue.com",
    phone="(555) 123-4567",
)


class Property(_Record):
    """A property listing in the catalog."""

    id: str = Field(min_length=1)
    title: str
    address: str
    city: str
    state: str = ""
    zip_code: str = ""
    price: float = Field(ge=0)
    property_type: PropertyType = Field(alias="type")
    bedrooms: int = Field(ge=0)
    bathrooms: float = Field(ge=0)
    square_feet: int = Field(ge=0)
    lot_size: float | None = Field(default=None, ge=0)
    year_built: int | None = None
    status: ListingStatus = ListingStatus.AVAILABLE
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    description: str = ""
    images: tuple[str, ...] = ()
    features: tuple[str, ...] = ()
    listed_date: datetime
    agent: Agent | None = None

    @field_validator("listed_date")
    @classmethod
    def normalize_listed_date(cls, v: datetime) -> datetime:
        return _as_utc(v)

    @model_validator(mode="after")
    def check_coordinates(self) -> Self:
        """Ensure both lat and lon are present or both are absent."""
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("Both latitude and longitude must be provided, or neither")
        return self


PropertyListAdapter = TypeAdapter(list[Property])


class FilterSpec(BaseModel):
    """Constraints used to narrow the catalog.

    Every field defaults to "no constraint". ``price_max=None`` leaves the
    price unbounded above. Inverted price bounds are accepted and simply
    match nothing.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    price_min: float = Field(default=0, ge=0)
    price_max: float | None = Field(default=None, ge=0)
    property_types: frozenset[PropertyType] = frozenset()
    bedrooms_min: int = Field(default=0, ge=0)
    bathrooms_min: float = Field(default=0, ge=0)
    square_feet_min: int = Field(default=0, ge=0)
    keywords: str = ""

    @property
    def keyword(self) -> str:
        """Lower-cased keyword, empty when the search box is blank.

        Surrounding whitespace is kept and takes part in the match.
        """
        return self.keywords.lower() if self.keywords.strip() else ""

    @property
    def active_count(self) -> int:
        """Number of constraints that actually narrow the catalog."""
        return sum(
            (
                self.price_min > 0,
                self.price_max is not None,
                bool(self.property_types),
                self.bedrooms_min > 0,
                self.bathrooms_min > 0,
                self.square_feet_min > 0,
                bool(self.keyword),
            )
        )


class QuickSearch(BaseModel):
    """Search-page query: free text plus optional quick filters."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    query: str
    price_range: str | None = Field(default=None, description='"min-max" or "min-"')
    bedrooms_min: int | None = Field(default=None, ge=0)
    property_type: PropertyType | None = None


class Favorite(_Record):
    """A user-saved reference to one property."""

    id: str = Field(min_length=1)
    property_id: str = Field(min_length=1)
    saved_date: datetime

    @field_validator("saved_date")
    @classmethod
    def normalize_saved_date(cls, v: datetime) -> datetime:
        return _as_utc(v)


FavoriteListAdapter = TypeAdapter(list[Favorite])


class Viewing(_Record):
    """A request to view a property."""

    id: str = Field(min_length=1)
    property_id: str
    property_title: str = ""
    property_address: str = ""
    viewing_date: date = Field(alias="date")
    viewing_time: str = Field(alias="time")
    name: str
    email: str
    phone: str
    message: str = ""
    status: ViewingStatus = ViewingStatus.SCHEDULED
    scheduled_at: datetime
    updated_at: datetime | None = None


ViewingListAdapter = TypeAdapter(list[Viewing])


class ContactInquiry(_Record):
    """A message from a prospective buyer to the listing agent."""

    property_ref: str
    property_title: str
    property_price: float = Field(ge=0)
    agent_email: str
    name: str
    email: str
    phone: str
    message: str = ""


class ContactReceipt(_Record):
    """Acknowledgement returned once an inquiry has been sent."""

    contact_id: str
    success: bool = True
    message: str = "Contact form submitted successfully"
    subject: str
    body: str
    sent_at: datetime


class ContactHistoryEntry(_Record):
    """An inquiry previously sent about a property."""

    id: str
    property_id: str
    name: str
    email: str
    phone: str
    message: str = ""
    sent_date: datetime
    status: ContactStatus = ContactStatus.PENDING
