"""Account routes for the signed-in user."""
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import get_current_user
from app.core.database import get_session
from app.models import User
from app.registration import users as user_service
from app.registration.events import user_summary
from app.schemas import UserUpdateIn

router = APIRouter(prefix="/user", tags=["users"])


@router.patch("/edit")
async def edit_account(
    body: UserUpdateIn,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """Update the caller's name, phone number or picture."""
    user = user_service.update_profile(session, user, body)
    return {"id": user.id, "full_name": user.full_name, "phone_number": user.phone_number}


@router.get("/search")
async def search_users(
    email: str | None = None,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """
    Search users by email.

    Case-insensitive substring match, at most five results. Organizers use
    it to find the user id of an admin or attendee to add.
    """
    return [user_summary(found) for found in user_service.search_users(session, email)]


@router.delete("/delete")
async def delete_account(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """Delete the caller's account, registrations and team memberships."""
    user_service.delete_account(session, user)
    return {"message": "Account deleted successfully"}
