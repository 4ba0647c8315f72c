from app.models.attendee import NOT_CHECKED_IN, Attendee
from app.models.contact import ContactPerson
from app.models.event import Event, LocationType, PriceType, VisibilityType
from app.models.location import Location
from app.models.team import ORGANIZER_ROLES, EventTeam, TeamRole
from app.models.user import User

__all__ = [
    "Attendee",
    "ContactPerson",
    "Event",
    "EventTeam",
    "Location",
    "LocationType",
    "NOT_CHECKED_IN",
    "ORGANIZER_ROLES",
    "PriceType",
    "TeamRole",
    "User",
    "VisibilityType",
]
