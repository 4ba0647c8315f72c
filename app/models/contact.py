"""Contact person model for event inquiries."""

from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.event import Event


class ContactPerson(SQLModel, table=True):
    """Someone attendees can contact about an event.

    Contact persons are replaced as a whole every time the event is edited.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="event.id", index=True)
    name: str
    email: str
    phone: str | None = None

    event: Optional["Event"] = Relationship(back_populates="contact_persons")
