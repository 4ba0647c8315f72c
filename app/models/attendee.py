"""Attendee model for event registrations.

This module defines the Attendee model which represents one user's
registration for one event, together with its approval state, the venue
admission ticket (if any) and the check-in timestamp.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.event import Event
    from app.models.user import User

NOT_CHECKED_IN = "Not checked in"


class Attendee(SQLModel, table=True):
    """A user's registration for an event.

    A ticket (``ticket_id`` plus ``ticket_code``) is only ever present on an
    approved attendee of a VENUE event, and the two fields are always set or
    cleared together. There is at most one row per (event, user).

    Attributes:
        id: Unique identifier (UUID).
        event_id: Foreign key to the Event.
        user_id: Foreign key to the registered User.
        is_approved: Whether the registration is confirmed.
        ticket_id: Opaque ticket identifier used in ticket URLs.
        ticket_code: Code printed on the ticket and scanned at the door.
        check_in_date: ISO timestamp of the last check-in, or
            "Not checked in".
        registration_date: When the row was created.
    """
    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_attendee_event_user"),
        UniqueConstraint("event_id", "ticket_code", name="uq_attendee_event_ticket_code"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="event.id", index=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    is_approved: bool = Field(default=False)
    ticket_id: str | None = Field(default=None, unique=True)
    ticket_code: str | None = Field(default=None, index=True)
    check_in_date: str = Field(default=NOT_CHECKED_IN)
    registration_date: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationships
    event: Optional["Event"] = Relationship(back_populates="attendees")
    user: Optional["User"] = Relationship(back_populates="registrations")

    @property
    def has_ticket(self) -> bool:
        return self.ticket_id is not None

    @property
    def is_checked_in(self) -> bool:
        return self.check_in_date != NOT_CHECKED_IN
