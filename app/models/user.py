"""User model mirroring accounts from the identity provider.

Authentication happens upstream; this table only keeps the profile fields the
registration flows need (email lookup at check-in, names on tickets and
attendee lists).
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.attendee import Attendee
    from app.models.team import EventTeam


class User(SQLModel, table=True):
    """A user known to the identity provider.

    Attributes:
        id: The provider's opaque user id, used as primary key.
        email: Unique email address.
        full_name: Display name, if the provider supplied one.
        phone_number: Optional phone number.
        profile_picture: Optional avatar URL.
        created_at: When the user was first seen by this service.
        registrations: Attendee rows for events the user registered for.
        team_memberships: Organizer roles the user holds.
    """
    id: str = Field(primary_key=True)
    email: str = Field(index=True, unique=True)
    full_name: str | None = None
    phone_number: str | None = None
    profile_picture: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationships
    registrations: list["Attendee"] = Relationship(back_populates="user")
    team_memberships: list["EventTeam"] = Relationship(back_populates="user")
