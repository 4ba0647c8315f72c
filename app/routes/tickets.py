"""Public ticket routes used by ticket pages and door scanners."""
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.database import get_session
from app.registration import events as event_service

router = APIRouter(prefix="/ticket", tags=["tickets"])


@router.get("/verify/{ticket_code}")
async def verify_ticket(ticket_code: str, session: Session = Depends(get_session)):
    """
    Verify a scanned ticket code.

    Returns the holder and whether they are already checked in. Unknown codes
    and codes of attendees that are not approved get a 404.
    """
    return event_service.verify_ticket(session, ticket_code)


@router.get("/{ticket_id}")
async def get_ticket(ticket_id: str, session: Session = Depends(get_session)):
    """Ticket details for the attendee's ticket page."""
    return event_service.get_ticket(session, ticket_id)
