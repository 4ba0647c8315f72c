"""Event model and its configuration enums.

This module defines the Event model which represents an event users can
register for. The fields that drive registration are ``capacity``,
``require_approval`` and ``location_type``; everything else is descriptive
and passed through to clients unchanged.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.attendee import Attendee
    from app.models.contact import ContactPerson
    from app.models.location import Location
    from app.models.team import EventTeam


class LocationType(str, Enum):
    VENUE = "VENUE"
    ONLINE = "ONLINE"


class PriceType(str, Enum):
    FREE = "FREE"
    PAID = "PAID"


class VisibilityType(str, Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


class Event(SQLModel, table=True):
    """An event that users can register for.

    Events are created by an organizer, who becomes the CREATOR on the
    event's team. Only VENUE events issue admission tickets and support
    check-in; ONLINE events share a meeting link instead.

    Attributes:
        id: Internal unique identifier (UUID).
        event_id: Short public identifier used in URLs (unique).
        name: Event title.
        description: Rich-text document serialized as JSON. Opaque here.
        organizer: Organizer name shown to attendees.
        start_date: When the event starts.
        end_date: When the event ends. Always after start_date.
        location_type: VENUE or ONLINE.
        location_id: Venue location, only set for VENUE events.
        meeting_link: Link for ONLINE events.
        cover_image: Cover image URL.
        capacity: Upper bound on approved attendees, None for unlimited.
        price: Ticket price, if any.
        price_type: FREE or PAID.
        visibility: PUBLIC events are listed on the explore page.
        require_approval: If True, registrations wait for organizer approval.
        website_url: External website.
        created_at: Creation timestamp.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: str = Field(index=True, unique=True)
    name: str
    description: str
    organizer: str
    start_date: datetime
    end_date: datetime
    location_type: LocationType
    location_id: UUID | None = Field(default=None, foreign_key="location.id")
    meeting_link: str | None = None
    cover_image: str | None = None
    capacity: int | None = None
    price: float | None = None
    price_type: PriceType = Field(default=PriceType.FREE)
    visibility: VisibilityType = Field(default=VisibilityType.PUBLIC)
    require_approval: bool = Field(default=False)
    website_url: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationships
    location: Optional["Location"] = Relationship(back_populates="events")
    attendees: list["Attendee"] = Relationship(back_populates="event")
    contact_persons: list["ContactPerson"] = Relationship(back_populates="event")
    team: list["EventTeam"] = Relationship(back_populates="event")

    @property
    def is_venue(self) -> bool:
        return self.location_type == LocationType.VENUE
