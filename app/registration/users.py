"""Account management for mirrored users."""
import logging

from sqlalchemy import func
from sqlmodel import Session, select

from app.models import User
from app.registration.errors import InvalidEventDataError
from app.schemas import UserUpdateIn

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 5


def update_profile(session: Session, user: User, data: UserUpdateIn) -> User:
    """Update the profile fields present in the request."""
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(user, key, value)
    session.add(user)
    session.commit()
    session.refresh(user)

    logger.info(f"User {user.id} updated their profile")
    return user


def search_users(session: Session, email: str | None, limit: int = SEARCH_LIMIT) -> list[User]:
    """Find users whose email contains ``email``, ignoring case.

    Used by organizers to look up the user id of a new admin or attendee.
    """
    if not email or not email.strip():
        raise InvalidEventDataError("Email query parameter is required")

    statement = (
        select(User)
        .where(func.lower(User.email).contains(email.strip().lower(), autoescape=True))
        .order_by(User.email)
        .limit(limit)
    )
    return list(session.exec(statement).all())


def delete_account(session: Session, user: User) -> None:
    """Delete the user with their registrations and team memberships."""
    for attendee in user.registrations:
        session.delete(attendee)
    for member in user.team_memberships:
        session.delete(member)
    session.delete(user)
    session.commit()

    logger.info(f"Deleted account {user.id}")
