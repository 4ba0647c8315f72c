"""Registration and approval engine.

This module owns every write to attendee rows. The rules it enforces:

    - At most one attendee row per (event, user).
    - When an event has a capacity, registrations stop once it is reached.
      Without approval every registration counts immediately; with approval
      only approved attendees count.
    - A ticket (``ticket_id`` plus ``ticket_code``) exists only on an approved
      attendee of a VENUE event. Tickets are issued when an attendee becomes
      approved on a venue event and are never rotated afterwards.
    - Check-in is only possible at VENUE events, and only for approved
      attendees.

Each public operation runs as one transaction: all checks happen first, then
the writes, then a single commit. Nothing is retried.

Attendee lifecycle::

    UNREGISTERED -> PENDING_APPROVAL -> APPROVED -> CHECKED_IN
    UNREGISTERED ------------------->  APPROVED       (no approval required)
    any state    -> UNREGISTERED                       (removed by organizer)
"""
import logging
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.models import NOT_CHECKED_IN, Attendee, Event, LocationType, User
from app.registration.errors import (
    AlreadyRegisteredError,
    AttendeeNotApprovedError,
    AttendeeNotFoundError,
    EventFullError,
    InvalidEventDataError,
    InvalidEventTypeError,
    UserNotFoundError,
)
from app.registration.tickets import new_ticket

logger = logging.getLogger(__name__)


class AttendeeState(str, Enum):
    UNREGISTERED = "UNREGISTERED"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    CHECKED_IN = "CHECKED_IN"


def attendee_state(attendee: Attendee | None) -> AttendeeState:
    """Map an attendee row (or its absence) to its lifecycle state."""
    if attendee is None:
        return AttendeeState.UNREGISTERED
    if not attendee.is_approved:
        return AttendeeState.PENDING_APPROVAL
    if attendee.is_checked_in:
        return AttendeeState.CHECKED_IN
    return AttendeeState.APPROVED


def _now_iso() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def _issue_ticket(attendee: Attendee) -> None:
    attendee.ticket_id, attendee.ticket_code = new_ticket()


def _clear_ticket(attendee: Attendee) -> None:
    attendee.ticket_id = None
    attendee.ticket_code = None


def _find_registration(session: Session, event: Event, user_id: str) -> Attendee | None:
    statement = (
        select(Attendee)
        .where(Attendee.event_id == event.id)
        .where(Attendee.user_id == user_id)
    )
    return session.exec(statement).first()


def _lock_event(session: Session, event: Event) -> Event:
    """Re-read the event row under a write lock.

    Holds concurrent registrations for the same event until this transaction
    ends. SQLite ignores FOR UPDATE; there the transaction already holds the
    database write lock from BEGIN IMMEDIATE (see ``app.core.database``).
    """
    statement = (
        select(Event)
        .where(Event.id == event.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return session.exec(statement).one()


def spots_used(session: Session, event: Event, approved_only: bool = True) -> int:
    """Count attendee rows that take up capacity."""
    statement = select(func.count()).select_from(Attendee).where(Attendee.event_id == event.id)
    if approved_only:
        statement = statement.where(Attendee.is_approved == True)  # noqa: E712
    return session.exec(statement).one()


def spots_left(session: Session, event: Event) -> int | None:
    """Remaining capacity, or None when the event is unbounded."""
    if event.capacity is None:
        return None
    return event.capacity - spots_used(session, event)


def register(session: Session, event: Event, user: User) -> Attendee:
    """Register a user for an event.

    Raises:
        AlreadyRegisteredError: The user already has a row for this event.
        EventFullError: The event's capacity is exhausted.
    """
    event = _lock_event(session, event)

    if _find_registration(session, event, user.id):
        logger.warning(f"User {user.id} already registered for event {event.event_id}")
        raise AlreadyRegisteredError()

    if event.capacity is not None:
        # Without approval every registration is approved on the spot,
        # so every existing row already holds a spot.
        used = spots_used(session, event, approved_only=event.require_approval)
        if used >= event.capacity:
            logger.warning(f"Event {event.event_id} is full ({used}/{event.capacity})")
            raise EventFullError()

    is_approved = not event.require_approval
    attendee = Attendee(event_id=event.id, user_id=user.id, is_approved=is_approved)
    if is_approved and event.is_venue:
        _issue_ticket(attendee)

    session.add(attendee)
    try:
        session.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration of the same user
        session.rollback()
        raise AlreadyRegisteredError() from None
    session.refresh(attendee)

    logger.info(
        f"Registered user {user.id} for event {event.event_id} "
        f"(approved={attendee.is_approved}, ticket={attendee.has_ticket})"
    )
    return attendee


def add_attendee(session: Session, event: Event, user_id: str) -> Attendee:
    """Organizer-initiated registration.

    The attendee is approved immediately and gets a ticket on venue events.
    Capacity is not enforced.
    """
    user = session.get(User, user_id)
    if not user:
        raise UserNotFoundError()

    if _find_registration(session, event, user_id):
        raise AlreadyRegisteredError("User is already an attendee")

    attendee = Attendee(event_id=event.id, user_id=user_id, is_approved=True)
    if event.is_venue:
        _issue_ticket(attendee)

    session.add(attendee)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise AlreadyRegisteredError("User is already an attendee") from None
    session.refresh(attendee)

    logger.info(f"Organizer added user {user_id} to event {event.event_id}")
    return attendee


def _attendees_by_id(session: Session, event: Event, attendee_ids: list[UUID]) -> list[Attendee]:
    """Load the given attendees of this event, all or nothing."""
    unique_ids = list(dict.fromkeys(attendee_ids))
    statement = (
        select(Attendee)
        .where(Attendee.event_id == event.id)
        .where(Attendee.id.in_(unique_ids))
    )
    attendees = session.exec(statement).all()
    if len(attendees) != len(unique_ids):
        raise AttendeeNotFoundError()
    return list(attendees)


def approve(session: Session, event: Event, attendee_ids: list[UUID]) -> list[Attendee]:
    """Approve attendees in one batch.

    Attendees of venue events get a ticket on approval. Attendees that are
    already approved are left as they are, so their ticket stays valid.

    Raises:
        InvalidEventDataError: No attendee ids were given.
        AttendeeNotFoundError: Some id does not belong to this event.
            Nothing is approved in that case.
    """
    if not attendee_ids:
        raise InvalidEventDataError("No attendees specified for approval")

    attendees = _attendees_by_id(session, event, attendee_ids)

    approved = 0
    for attendee in attendees:
        if attendee.is_approved:
            continue
        attendee.is_approved = True
        if event.is_venue:
            _issue_ticket(attendee)
        session.add(attendee)
        approved += 1

    session.commit()
    for attendee in attendees:
        session.refresh(attendee)

    logger.info(f"Approved {approved} attendee(s) for event {event.event_id}")
    return attendees


def remove(session: Session, event: Event, attendee_ids: list[UUID]) -> int:
    """Delete registrations. Ids not belonging to the event are ignored."""
    if not attendee_ids:
        raise InvalidEventDataError("No attendees specified for removal")

    statement = (
        select(Attendee)
        .where(Attendee.event_id == event.id)
        .where(Attendee.id.in_(attendee_ids))
    )
    attendees = session.exec(statement).all()
    for attendee in attendees:
        session.delete(attendee)
    session.commit()

    logger.info(f"Removed {len(attendees)} attendee(s) from event {event.event_id}")
    return len(attendees)


def reconcile_event_edit(
    session: Session,
    event: Event,
    location_type: LocationType,
    require_approval: bool,
) -> int:
    """Bring attendees in line with an event's new configuration.

    Must be called while ``event`` still holds its pre-edit values. Changes
    are staged on the session, not committed, so the caller can commit them
    together with the event update.

    - ONLINE -> VENUE: approved attendees without a ticket get one.
    - require_approval True -> False: pending attendees are approved, with a
      ticket if the event is (now) a venue event.
    - VENUE -> ONLINE: tickets are withdrawn.

    Returns the number of attendees changed.
    """
    was_venue = event.is_venue
    will_be_venue = location_type == LocationType.VENUE
    opens_approval = event.require_approval and not require_approval

    if was_venue == will_be_venue and not opens_approval:
        return 0

    attendees = session.exec(select(Attendee).where(Attendee.event_id == event.id)).all()

    changed = 0
    for attendee in attendees:
        updated = False

        if not was_venue and will_be_venue and attendee.is_approved and not attendee.has_ticket:
            _issue_ticket(attendee)
            updated = True

        if opens_approval and not attendee.is_approved:
            attendee.is_approved = True
            if will_be_venue:
                _issue_ticket(attendee)
            updated = True

        if was_venue and not will_be_venue and attendee.has_ticket:
            _clear_ticket(attendee)
            updated = True

        if updated:
            session.add(attendee)
            changed += 1

    if changed:
        logger.info(f"Edit of event {event.event_id} updated {changed} attendee(s)")
    return changed


def check_in(
    session: Session,
    event: Event,
    attendee_id: UUID | None = None,
    ticket_code: str | None = None,
    email: str | None = None,
) -> Attendee:
    """Check an attendee in at the door.

    Exactly one lookup is used, in priority order: attendee id, ticket code,
    email. Checking in again overwrites the previous timestamp.
    """
    if not attendee_id and not ticket_code and not email:
        raise InvalidEventDataError("Either ticket code, email, or attendee ID is required")

    if not event.is_venue:
        raise InvalidEventTypeError()

    if attendee_id:
        statement = (
            select(Attendee)
            .where(Attendee.id == attendee_id)
            .where(Attendee.event_id == event.id)
            .where(Attendee.is_approved == True)  # noqa: E712
        )
        attendee = session.exec(statement).first()
        if not attendee:
            raise AttendeeNotFoundError("Valid attendee not found")
    elif ticket_code:
        statement = (
            select(Attendee)
            .where(Attendee.ticket_code == ticket_code)
            .where(Attendee.event_id == event.id)
            .where(Attendee.is_approved == True)  # noqa: E712
            .where(Attendee.ticket_id.is_not(None))
        )
        attendee = session.exec(statement).first()
        if not attendee:
            raise AttendeeNotFoundError("Valid ticket not found")
    else:
        user = session.exec(select(User).where(User.email == email)).first()
        if not user:
            raise UserNotFoundError()
        attendee = _find_registration(session, event, user.id)
        if not attendee:
            raise AttendeeNotFoundError("User is not registered for this event")
        if not attendee.is_approved:
            raise AttendeeNotApprovedError()

    attendee.check_in_date = _now_iso()
    session.add(attendee)
    session.commit()
    session.refresh(attendee)

    logger.info(f"Checked in attendee {attendee.id} at event {event.event_id}")
    return attendee


def uncheck_in(session: Session, event: Event, ticket_code: str) -> Attendee:
    """Reverse a check-in. No approval check is needed to undo one."""
    if not ticket_code:
        raise InvalidEventDataError("Event ID and ticket code are required")

    statement = (
        select(Attendee)
        .where(Attendee.ticket_code == ticket_code)
        .where(Attendee.event_id == event.id)
    )
    attendee = session.exec(statement).first()
    if not attendee:
        raise AttendeeNotFoundError()

    attendee.check_in_date = NOT_CHECKED_IN
    session.add(attendee)
    session.commit()
    session.refresh(attendee)

    logger.info(f"Unchecked attendee {attendee.id} at event {event.event_id}")
    return attendee
