"""Caller identity from the identity provider.

The service runs behind a gateway that authenticates the session with the
identity provider and forwards the user as request headers. Those headers are
trusted as-is; this module only mirrors the user into the local ``user``
table so registrations and team rows can reference it.
"""
import logging

from fastapi import Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.core.config import settings
from app.core.database import get_session
from app.models import User

logger = logging.getLogger(__name__)


def _save_user(session: Session, user: User) -> User:
    """Commit the mirrored user. Emails are unique across accounts."""
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        logger.warning(f"Email of user {user.id} already belongs to another account")
        raise HTTPException(
            status_code=409, detail="Email is already in use by another account"
        ) from None
    session.refresh(user)
    return user


def get_current_user(request: Request, session: Session = Depends(get_session)) -> User:
    """Dependency returning the authenticated caller.

    First-time callers must supply an email so the mirrored row can be
    created; later requests only need the user id.
    """
    user_id = request.headers.get(settings.user_id_header)
    if not user_id:
        raise HTTPException(status_code=401, detail="No session found")

    email = request.headers.get(settings.user_email_header)
    full_name = request.headers.get(settings.user_name_header)

    user = session.get(User, user_id)
    if user is None:
        if not email:
            raise HTTPException(status_code=401, detail="Invalid session")
        user = _save_user(session, User(id=user_id, email=email, full_name=full_name))
        logger.info(f"Mirrored new user {user_id} from identity provider")
        return user

    changed = False
    if email and email != user.email:
        user.email = email
        changed = True
    if full_name and full_name != user.full_name:
        user.full_name = full_name
        changed = True
    if changed:
        user = _save_user(session, user)

    return user
