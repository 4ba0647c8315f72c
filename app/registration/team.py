"""Organizer permissions and team administration."""
import logging

from sqlmodel import Session, select

from app.models import ORGANIZER_ROLES, Event, EventTeam, TeamRole, User
from app.registration.errors import (
    AdminNotFoundError,
    AlreadyTeamMemberError,
    UnauthorizedError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)


def get_team_role(session: Session, event: Event, user_id: str) -> TeamRole | None:
    """Return the user's role on the event's team, if any."""
    statement = (
        select(EventTeam)
        .where(EventTeam.event_id == event.id)
        .where(EventTeam.user_id == user_id)
    )
    member = session.exec(statement).first()
    return member.role if member else None


def check_event_permissions(session: Session, event: Event, user_id: str) -> TeamRole:
    """Require the user to be a CREATOR or ADMIN of the event."""
    role = get_team_role(session, event, user_id)
    if role not in ORGANIZER_ROLES:
        logger.warning(f"User {user_id} denied organizer access to event {event.event_id}")
        raise UnauthorizedError()
    return role


def require_creator(
    session: Session, event: Event, user_id: str, message: str | None = None
) -> None:
    """Require the user to be the event's CREATOR."""
    if get_team_role(session, event, user_id) != TeamRole.CREATOR:
        logger.warning(f"User {user_id} is not the creator of event {event.event_id}")
        raise UnauthorizedError(message)


def list_team(session: Session, event: Event, user_id: str) -> list[EventTeam]:
    """List the event's organizers, creator first."""
    check_event_permissions(session, event, user_id)
    members = session.exec(select(EventTeam).where(EventTeam.event_id == event.id)).all()
    # CREATOR sorts before ADMIN
    return sorted(members, key=lambda m: m.role != TeamRole.CREATOR)


def add_admin(session: Session, event: Event, user_id: str, target_user_id: str) -> EventTeam:
    """Add a user as ADMIN. Only the creator may do this."""
    require_creator(session, event, user_id, "Only the creator can add admins")

    if not session.get(User, target_user_id):
        raise UserNotFoundError()

    if get_team_role(session, event, target_user_id) is not None:
        raise AlreadyTeamMemberError()

    member = EventTeam(event_id=event.id, user_id=target_user_id, role=TeamRole.ADMIN)
    session.add(member)
    session.commit()
    session.refresh(member)

    logger.info(f"Added admin {target_user_id} to event {event.event_id}")
    return member


def remove_admin(session: Session, event: Event, user_id: str, target_user_id: str) -> None:
    """Remove an ADMIN from the team. The creator cannot be removed."""
    require_creator(session, event, user_id, "Only the creator can remove admins")

    statement = (
        select(EventTeam)
        .where(EventTeam.event_id == event.id)
        .where(EventTeam.user_id == target_user_id)
        .where(EventTeam.role == TeamRole.ADMIN)
    )
    member = session.exec(statement).first()
    if not member:
        raise AdminNotFoundError()

    session.delete(member)
    session.commit()
    logger.info(f"Removed admin {target_user_id} from event {event.event_id}")
