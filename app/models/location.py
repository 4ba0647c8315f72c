"""Venue location model."""

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.event import Event


class Location(SQLModel, table=True):
    """A venue address, as picked from a places search or typed by hand.

    Attributes:
        id: Unique identifier (UUID).
        place_id: Places provider id, None for custom locations.
        description: Full address text.
        main_text: Short venue name.
        secondary_text: Address line under the venue name.
        location_additional_details: Free-form directions.
        latitude: Latitude, if known.
        longitude: Longitude, if known.
        is_custom: True if typed by the organizer instead of looked up.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    place_id: str | None = None
    description: str
    main_text: str | None = None
    secondary_text: str | None = None
    location_additional_details: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    is_custom: bool = Field(default=False)

    events: list["Event"] = Relationship(back_populates="location")
