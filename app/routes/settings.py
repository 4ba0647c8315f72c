"""Event settings routes: overview, team administration and deletion."""
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import get_current_user
from app.core.database import get_session
from app.models import EventTeam, User
from app.registration import events as event_service
from app.registration import team
from app.schemas import TeamMemberIn

router = APIRouter(prefix="/settings", tags=["settings"])


def member_to_dict(member: EventTeam) -> dict:
    return {
        "id": member.user.id,
        "name": member.user.full_name,
        "email": member.user.email,
        "image": member.user.profile_picture,
        "role": member.role.value.lower(),
    }


@router.get("/{event_id}/overview")
async def overview(
    event_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """Event summary for the settings page. Organizers only."""
    event = event_service.get_event(session, event_id)
    return event_service.event_overview(session, event, user)


@router.get("/{event_id}/more")
async def team_members(
    event_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """List the event's creator and admins. Organizers only."""
    event = event_service.get_event(session, event_id)
    return [member_to_dict(member) for member in team.list_team(session, event, user.id)]


@router.post("/{event_id}/more/addAdmin", status_code=201)
async def add_admin(
    event_id: str,
    body: TeamMemberIn,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """Add an admin to the event team. Creator only."""
    event = event_service.get_event(session, event_id)
    member = team.add_admin(session, event, user.id, body.user_id)
    return member_to_dict(member)


@router.post("/{event_id}/more/removeAdmin")
async def remove_admin(
    event_id: str,
    body: TeamMemberIn,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """Remove an admin from the event team. Creator only."""
    event = event_service.get_event(session, event_id)
    team.remove_admin(session, event, user.id, body.user_id)
    return {"message": "Admin removed successfully"}


@router.post("/{event_id}/more/deleteEvent")
async def delete_event(
    event_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """Delete the event and everything attached to it. Creator only."""
    event = event_service.get_event(session, event_id)
    event_service.delete_event(session, event, user)
    return {"message": "Event deleted successfully"}
