"""Attendee routes: registration, approval and check-in."""
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import get_current_user
from app.core.database import get_session
from app.models import Attendee, User
from app.registration import engine
from app.registration import events as event_service
from app.registration.team import check_event_permissions
from app.schemas import AddAttendeeIn, AttendeeIdsIn, CheckInIn, UncheckInIn

router = APIRouter(prefix="/event", tags=["attendees"])


def attendee_to_dict(attendee: Attendee) -> dict:
    return {
        "id": attendee.id,
        "is_approved": attendee.is_approved,
        "ticket_id": attendee.ticket_id,
        "ticket_code": attendee.ticket_code,
        "check_in_date": attendee.check_in_date,
        "registration_date": attendee.registration_date,
        "state": engine.attendee_state(attendee),
        "user": event_service.user_summary(attendee.user),
    }


@router.post("/{event_id}/register")
async def register(
    event_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """
    Register the caller for an event.

    Returns the registration. Fails with 400 if the caller is already
    registered or the event is full.
    """
    event = event_service.get_event(session, event_id)
    attendee = engine.register(session, event, user)
    return {**attendee_to_dict(attendee), "require_approval": event.require_approval}


@router.get("/{event_id}/registration-status")
async def registration_status(
    event_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """Whether the caller is registered, and the registration if so."""
    event = event_service.get_event(session, event_id)
    return event_service.registration_status(session, event, user)


@router.post("/{event_id}/check-in")
async def check_in(
    event_id: str,
    body: CheckInIn,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """
    Check an attendee in. Organizers only, venue events only.

    Looks the attendee up by attendee id, ticket code or email, in that
    order of preference.
    """
    event = event_service.get_event(session, event_id)
    check_event_permissions(session, event, user.id)
    attendee = engine.check_in(
        session,
        event,
        attendee_id=body.attendee_id,
        ticket_code=body.ticket_code,
        email=body.email,
    )
    return event_service.check_in_result(attendee)


@router.get("/{event_id}/check-ins")
async def check_ins(
    event_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """List checked-in attendees, latest first. Organizers only."""
    event = event_service.get_event(session, event_id)
    check_event_permissions(session, event, user.id)
    return event_service.list_check_ins(session, event)


@router.post("/{event_id}/uncheck-in")
async def uncheck_in(
    event_id: str,
    body: UncheckInIn,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """Undo a check-in by ticket code. Organizers only."""
    event = event_service.get_event(session, event_id)
    check_event_permissions(session, event, user.id)
    attendee = engine.uncheck_in(session, event, body.ticket_code)
    return event_service.check_in_result(attendee)


@router.get("/{event_id}/counts")
async def counts(
    event_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """Approved and checked-in totals. Organizers only."""
    event = event_service.get_event(session, event_id)
    check_event_permissions(session, event, user.id)
    return event_service.event_counts(session, event)


@router.get("/{event_id}/attendees")
async def attendees(
    event_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """List all registrations. Organizers only."""
    event = event_service.get_event(session, event_id)
    check_event_permissions(session, event, user.id)
    return event_service.list_attendees(session, event)


@router.post("/{event_id}/attendees/add", status_code=201)
async def add_attendee(
    event_id: str,
    body: AddAttendeeIn,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """Add a user as an approved attendee. Organizers only."""
    event = event_service.get_event(session, event_id)
    check_event_permissions(session, event, user.id)
    attendee = engine.add_attendee(session, event, body.user_id)
    return {"message": "Attendee added successfully", "attendee": attendee_to_dict(attendee)}


@router.get("/{event_id}/attendee/{attendee_id}/ticket")
async def attendee_ticket(
    event_id: str,
    attendee_id: UUID,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """Ticket code and check-in state of an approved attendee. Organizers only."""
    event = event_service.get_event(session, event_id)
    check_event_permissions(session, event, user.id)
    return event_service.attendee_ticket(session, event, attendee_id)


@router.post("/{event_id}/approve-attendees")
async def approve_attendees(
    event_id: str,
    body: AttendeeIdsIn,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """
    Approve pending attendees in one batch. Organizers only.

    Either every listed attendee is approved or none is.
    """
    event = event_service.get_event(session, event_id)
    check_event_permissions(session, event, user.id)
    approved = engine.approve(session, event, body.attendee_ids)
    return {"attendees": [attendee_to_dict(attendee) for attendee in approved]}


@router.post("/{event_id}/remove-attendees")
async def remove_attendees(
    event_id: str,
    body: AttendeeIdsIn,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """Delete registrations. Organizers only."""
    event = event_service.get_event(session, event_id)
    check_event_permissions(session, event, user.id)
    removed = engine.remove(session, event, body.attendee_ids)
    return {"message": "Attendees removed successfully", "removed": removed}
