"""Event routes for creating, editing and browsing events."""
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import get_current_user
from app.core.config import settings
from app.core.database import get_session
from app.models import User
from app.registration import events as event_service
from app.registration.team import get_team_role
from app.schemas import EventIn

router = APIRouter(prefix="/event", tags=["events"])


@router.post("/create", status_code=201)
async def create_event(
    body: EventIn,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """
    Create an event.

    The caller becomes the event's CREATOR. Venue events need either an
    existing location id or an inline location.
    """
    event = event_service.create_event(session, body, user)
    return event_service.event_to_dict(event)


@router.patch("/{event_id}/edit")
async def edit_event(
    event_id: str,
    body: EventIn,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """
    Edit an event. Organizers only.

    Switching an online event to a venue issues tickets to approved
    attendees; turning approval off approves everyone still pending.
    """
    event = event_service.get_event(session, event_id)
    event = event_service.edit_event(session, event, body, user)
    return event_service.event_to_dict(event)


@router.get("/events")
async def public_events(
    page: int = 1,
    limit: int = settings.default_page_size,
    session: Session = Depends(get_session),
):
    """List public events that have not ended yet, soonest first."""
    return event_service.list_public_events(session, page, limit)


@router.get("/user-events")
async def user_events(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """List events the caller organizes or is registered for."""
    return event_service.list_user_events(session, user)


@router.get("/{event_id}")
async def event_detail(event_id: str, session: Session = Depends(get_session)):
    """Get a single event with its remaining capacity."""
    event = event_service.get_event(session, event_id)
    return event_service.get_event_detail(session, event)


@router.get("/{event_id}/userRole")
async def user_role(
    event_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """Get the caller's team role for the event, or null."""
    event = event_service.get_event(session, event_id)
    return {"role": get_team_role(session, event, user.id)}
