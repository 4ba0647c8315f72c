"""Event team model for organizer roles.

Every event has exactly one CREATOR (the user who created it) and any number
of ADMINs added by the creator. Both roles may edit the event and manage
attendees; only the creator may manage admins or delete the event.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.event import Event
    from app.models.user import User


class TeamRole(str, Enum):
    CREATOR = "CREATOR"
    ADMIN = "ADMIN"


ORGANIZER_ROLES = (TeamRole.CREATOR, TeamRole.ADMIN)


class EventTeam(SQLModel, table=True):
    """A user's organizer role on an event.

    Attributes:
        id: Unique identifier (UUID).
        event_id: Foreign key to the Event.
        user_id: Foreign key to the User.
        role: CREATOR or ADMIN.
    """
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_team_event_user"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="event.id", index=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    role: TeamRole

    event: Optional["Event"] = Relationship(back_populates="team")
    user: Optional["User"] = Relationship(back_populates="team_memberships")
