"""Request bodies for the HTTP API."""
import json
from datetime import UTC, datetime
from uuid import UUID

from pydantic import EmailStr, field_validator, model_validator
from sqlmodel import Field, SQLModel

from app.models import LocationType, PriceType, VisibilityType


class ContactPersonIn(SQLModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str | None = None


class LocationIn(SQLModel):
    place_id: str | None = None
    description: str
    main_text: str | None = None
    secondary_text: str | None = None
    location_additional_details: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    is_custom: bool = False


class EventIn(SQLModel):
    """Body of both create and edit requests."""

    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    organizer: str = Field(min_length=1)
    start_date: datetime
    end_date: datetime
    location_type: LocationType
    location_id: UUID | None = None
    location: LocationIn | None = None
    meeting_link: str | None = None
    cover_image: str | None = None
    capacity: int | None = Field(default=None, gt=0)
    price: float | None = Field(default=None, ge=0)
    price_type: PriceType = PriceType.FREE
    visibility: VisibilityType = VisibilityType.PUBLIC
    require_approval: bool = False
    website_url: str | None = None
    contact_persons: list[ContactPersonIn] = []

    @field_validator("start_date", "end_date")
    @classmethod
    def to_utc(cls, value: datetime) -> datetime:
        return value.astimezone(UTC) if value.tzinfo else value.replace(tzinfo=UTC)

    @field_validator("description")
    @classmethod
    def normalize_description(cls, value: str) -> str:
        """Store descriptions as a rich-text JSON document.

        Plain text is wrapped in a single-paragraph document.
        """
        try:
            json.loads(value)
            return value
        except ValueError:
            return json.dumps(
                {
                    "type": "doc",
                    "content": [
                        {"type": "paragraph", "content": [{"type": "text", "text": value}]}
                    ],
                }
            )

    @model_validator(mode="after")
    def check_schedule_and_location(self):
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        if self.location_type == LocationType.VENUE and not (self.location_id or self.location):
            raise ValueError("Location information is required for venue events")
        return self


class AttendeeIdsIn(SQLModel):
    attendee_ids: list[UUID]


class AddAttendeeIn(SQLModel):
    user_id: str


class CheckInIn(SQLModel):
    attendee_id: UUID | None = None
    ticket_code: str | None = None
    email: str | None = None


class UncheckInIn(SQLModel):
    ticket_code: str


class TeamMemberIn(SQLModel):
    user_id: str


class UserUpdateIn(SQLModel):
    full_name: str = Field(min_length=1)
    phone_number: str | None = Field(default=None, min_length=10, max_length=10)
    profile_picture: str | None = None
