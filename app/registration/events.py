"""Event management and the read models behind the organizer dashboard.

Creating an event makes the caller its CREATOR. Editing runs the attendee
reconciliation from ``app.registration.engine`` in the same transaction as the
event update, so clients never see the new configuration with attendees still
in the old state.
"""
import logging
from datetime import UTC, datetime
from math import ceil
from uuid import UUID

from sqlalchemy import func, or_
from sqlmodel import Session, select

from app.models import (
    NOT_CHECKED_IN,
    Attendee,
    ContactPerson,
    Event,
    EventTeam,
    Location,
    LocationType,
    TeamRole,
    User,
    VisibilityType,
)
from app.registration.engine import reconcile_event_edit, spots_left, spots_used
from app.registration.errors import (
    AttendeeNotFoundError,
    EventNotFoundError,
    InvalidEventDataError,
    TicketNotFoundError,
)
from app.registration.team import check_event_permissions, get_team_role, require_creator
from app.registration.tickets import new_event_id
from app.schemas import EventIn

logger = logging.getLogger(__name__)

EVENT_FIELDS_EXCLUDED = {"location", "location_id", "contact_persons"}


def get_event(session: Session, event_id: str) -> Event:
    """Look up an event by its public id."""
    event = session.exec(select(Event).where(Event.event_id == event_id)).first()
    if not event:
        raise EventNotFoundError()
    return event


def _location_shared(session: Session, location: Location, event: Event) -> bool:
    statement = (
        select(Event)
        .where(Event.location_id == location.id)
        .where(Event.id != event.id)
    )
    return session.exec(statement).first() is not None


def _resolve_location(
    session: Session, data: EventIn, event: Event | None = None
) -> UUID | None:
    """Return the location id a venue event should point at.

    An explicit ``location_id`` must exist. An inline location updates the
    event's current location in place, unless another event uses it too, in
    which case a new location is created.
    """
    if data.location_id:
        if not session.get(Location, data.location_id):
            raise InvalidEventDataError("Invalid location ID")
        return data.location_id

    if data.location:
        current = event.location if event else None
        if current and not _location_shared(session, current, event):
            for key, value in data.location.model_dump().items():
                setattr(current, key, value)
            session.add(current)
            return current.id
        location = Location(**data.location.model_dump())
        session.add(location)
        session.flush()
        return location.id

    raise InvalidEventDataError("Location information is required for venue events")


def create_event(session: Session, data: EventIn, user: User) -> Event:
    """Create an event with its location, contacts and CREATOR team row."""
    location_id = None
    if data.location_type == LocationType.VENUE:
        location_id = _resolve_location(session, data)

    event = Event(
        event_id=new_event_id(),
        location_id=location_id,
        **data.model_dump(exclude=EVENT_FIELDS_EXCLUDED),
    )
    session.add(event)
    session.flush()  # Get event.id

    for contact in data.contact_persons:
        session.add(ContactPerson(event_id=event.id, **contact.model_dump()))
    session.add(EventTeam(event_id=event.id, user_id=user.id, role=TeamRole.CREATOR))

    session.commit()
    session.refresh(event)

    logger.info(f"User {user.id} created event {event.event_id} ({event.location_type.value})")
    return event


def edit_event(session: Session, event: Event, data: EventIn, user: User) -> Event:
    """Update an event and reconcile its attendees with the new settings."""
    check_event_permissions(session, event, user.id)

    if data.location_type == LocationType.VENUE:
        location_id = _resolve_location(session, data, event)
    else:
        location_id = None

    # Attendee changes are computed against the pre-edit configuration
    reconcile_event_edit(session, event, data.location_type, data.require_approval)

    for contact in list(event.contact_persons):
        session.delete(contact)
    for contact in data.contact_persons:
        session.add(ContactPerson(event_id=event.id, **contact.model_dump()))

    for key, value in data.model_dump(exclude=EVENT_FIELDS_EXCLUDED).items():
        setattr(event, key, value)
    event.location_id = location_id
    session.add(event)

    session.commit()
    session.refresh(event)

    logger.info(f"User {user.id} edited event {event.event_id}")
    return event


def delete_event(session: Session, event: Event, user: User) -> None:
    """Delete an event with its attendees, team, contacts and location."""
    require_creator(session, event, user.id, "Only the creator can delete the event")

    location = event.location
    for attendee in event.attendees:
        session.delete(attendee)
    for member in event.team:
        session.delete(member)
    for contact in event.contact_persons:
        session.delete(contact)
    session.delete(event)
    session.flush()

    # Locations can be reused by id; keep them while another event points at one
    if location is not None:
        in_use = session.exec(select(Event).where(Event.location_id == location.id)).first()
        if not in_use:
            session.delete(location)

    session.commit()
    logger.info(f"User {user.id} deleted event {event.event_id}")


# Read models


def location_to_dict(location: Location | None) -> dict | None:
    return location.model_dump() if location else None


def event_to_dict(event: Event) -> dict:
    return {
        **event.model_dump(),
        "location": location_to_dict(event.location),
        "contact_persons": [contact.model_dump() for contact in event.contact_persons],
    }


def user_summary(user: User | None) -> dict | None:
    if user is None:
        return None
    return {
        "id": user.id,
        "full_name": user.full_name,
        "email": user.email,
        "profile_picture": user.profile_picture,
    }


def check_in_result(attendee: Attendee) -> dict:
    """Response body for check-in and uncheck-in."""
    return {
        "user": user_summary(attendee.user),
        "ticket_code": attendee.ticket_code,
        "check_in_date": attendee.check_in_date,
    }


def get_event_detail(session: Session, event: Event) -> dict:
    """Public event page, including remaining capacity."""
    return {**event_to_dict(event), "spots_left": spots_left(session, event)}


def _public_upcoming():
    now = datetime.now(UTC)
    return (Event.visibility == VisibilityType.PUBLIC, Event.end_date >= now)


def list_public_events(session: Session, page: int, limit: int) -> dict:
    """Public events that have not ended, soonest first."""
    page = max(page, 1)
    limit = max(limit, 1)
    conditions = _public_upcoming()

    statement = (
        select(Event)
        .where(*conditions)
        .order_by(Event.start_date)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    events = session.exec(statement).all()
    total = session.exec(select(func.count()).select_from(Event).where(*conditions)).one()

    return {
        "events": [
            {
                "event_id": event.event_id,
                "cover_image": event.cover_image,
                "name": event.name,
                "start_date": event.start_date,
                "end_date": event.end_date,
                "location_type": event.location_type,
                "location": {"main_text": event.location.main_text} if event.location else None,
            }
            for event in events
        ],
        "pagination": {
            "total": total,
            "pages": ceil(total / limit),
            "page": page,
            "limit": limit,
        },
    }


def list_user_events(session: Session, user: User) -> list[dict]:
    """Events the user organizes or is registered for, newest first."""
    organizing = select(EventTeam.event_id).where(EventTeam.user_id == user.id)
    attending = select(Attendee.event_id).where(Attendee.user_id == user.id)
    statement = (
        select(Event)
        .where(or_(Event.id.in_(organizing), Event.id.in_(attending)))
        .order_by(Event.start_date.desc())
    )

    results = []
    for event in session.exec(statement).all():
        registration = session.exec(
            select(Attendee)
            .where(Attendee.event_id == event.id)
            .where(Attendee.user_id == user.id)
        ).first()
        role = get_team_role(session, event, user.id)
        results.append(
            {
                "id": event.id,
                "event_id": event.event_id,
                "name": event.name,
                "start_date": event.start_date,
                "end_date": event.end_date,
                "cover_image": event.cover_image,
                "location_type": event.location_type,
                # Venues show an address, online events a meeting link
                "location": location_to_dict(event.location) if event.is_venue else None,
                "meeting_link": None if event.is_venue else event.meeting_link,
                "user_role": role,
                "registration": (
                    {"is_approved": registration.is_approved, "ticket_id": registration.ticket_id}
                    if registration
                    else None
                ),
                "approved_attendees_count": spots_used(session, event),
            }
        )
    return results


def registration_status(session: Session, event: Event, user: User) -> dict:
    registration = session.exec(
        select(Attendee)
        .where(Attendee.event_id == event.id)
        .where(Attendee.user_id == user.id)
    ).first()
    return {
        "is_registered": registration is not None,
        "registration": (
            {
                "id": registration.id,
                "is_approved": registration.is_approved,
                "ticket_id": registration.ticket_id,
            }
            if registration
            else None
        ),
    }


def event_counts(session: Session, event: Event) -> dict:
    """Approved and checked-in totals for the check-in screen."""
    checked_in = session.exec(
        select(func.count())
        .select_from(Attendee)
        .where(Attendee.event_id == event.id)
        .where(Attendee.is_approved == True)  # noqa: E712
        .where(Attendee.check_in_date != NOT_CHECKED_IN)
    ).one()
    return {
        "name": event.name,
        "event_id": event.event_id,
        "total_attendees": spots_used(session, event),
        "checked_in_count": checked_in,
        "location_type": event.location_type,
    }


def list_check_ins(session: Session, event: Event) -> list[dict]:
    statement = (
        select(Attendee)
        .where(Attendee.event_id == event.id)
        .where(Attendee.check_in_date != NOT_CHECKED_IN)
        .order_by(Attendee.check_in_date.desc())
    )
    return [
        {
            "id": attendee.id,
            "check_in_date": attendee.check_in_date,
            "user": {"full_name": attendee.user.full_name, "email": attendee.user.email},
        }
        for attendee in session.exec(statement).all()
    ]


def list_attendees(session: Session, event: Event) -> dict:
    """All registrations, most recent first."""
    statement = (
        select(Attendee)
        .where(Attendee.event_id == event.id)
        .order_by(Attendee.registration_date.desc())
    )
    attendees = [
        {
            "id": attendee.id,
            "name": attendee.user.full_name or "Anonymous",
            "email": attendee.user.email,
            "phone": attendee.user.phone_number,
            "image_url": attendee.user.profile_picture,
            "date_added": attendee.registration_date,
            "check_in_time": attendee.check_in_date if attendee.is_checked_in else None,
            "is_approved": attendee.is_approved,
        }
        for attendee in session.exec(statement).all()
    ]
    return {"attendees": attendees, "requires_approval": event.require_approval}


def attendee_ticket(session: Session, event: Event, attendee_id: UUID) -> dict:
    attendee = session.exec(
        select(Attendee)
        .where(Attendee.id == attendee_id)
        .where(Attendee.event_id == event.id)
        .where(Attendee.is_approved == True)  # noqa: E712
    ).first()
    if not attendee:
        raise AttendeeNotFoundError()
    return {"ticket_code": attendee.ticket_code, "check_in_date": attendee.check_in_date}


def event_overview(session: Session, event: Event, user: User) -> dict:
    """Settings page header. Organizers only."""
    check_event_permissions(session, event, user.id)
    return {
        "event_id": event.event_id,
        "name": event.name,
        "start_date": event.start_date,
        "end_date": event.end_date,
        "cover_image": event.cover_image,
        "location_type": event.location_type,
        "meeting_link": event.meeting_link,
        "location": location_to_dict(event.location),
    }


def get_ticket(session: Session, ticket_id: str) -> dict:
    """Ticket page for an attendee."""
    attendee = session.exec(select(Attendee).where(Attendee.ticket_id == ticket_id)).first()
    if not attendee:
        raise TicketNotFoundError("Ticket not found")

    event = attendee.event
    return {
        "ticket_code": attendee.ticket_code,
        "event": {
            "event_id": event.event_id,
            "name": event.name,
            "start_date": event.start_date,
            "end_date": event.end_date,
            "location": {"main_text": event.location.main_text} if event.location else None,
        },
        "user": {"full_name": attendee.user.full_name, "email": attendee.user.email},
    }


def verify_ticket(session: Session, ticket_code: str) -> dict:
    """Check whether a scanned code belongs to an approved attendee."""
    attendee = session.exec(
        select(Attendee)
        .where(Attendee.ticket_code == ticket_code)
        .where(Attendee.is_approved == True)  # noqa: E712
    ).first()
    if not attendee:
        raise TicketNotFoundError()

    result = {
        "valid": True,
        "user": user_summary(attendee.user),
        "event_id": attendee.event.event_id,
        "is_checked_in": attendee.is_checked_in,
    }
    if attendee.is_checked_in:
        result["check_in_date"] = attendee.check_in_date
    return result
