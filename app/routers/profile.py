# app/routers/profile.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_auth
from app.core.session import AuthSession
from app.database import get_session
from app.repositories.profile_repo import ProfileRepository
from app.schemas.profile import ProfileRead, ProfileUpdate
from app.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["Profile"])

repo = ProfileRepository()
service = ProfileService(repo)


@router.get("/me", response_model=ProfileRead)
def read_me(
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_auth),
):
    """
    Return the authenticated user's profile.

    The profile row is created on the first authenticated request from
    the sign-up metadata.
    """
    return service.get_me(session, auth.user_id)


@router.patch("/me", response_model=ProfileRead)
def update_me(
    payload: ProfileUpdate,
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_auth),
):
    """
    Update the authenticated user's profile (partial update).

    Role and approval cannot be changed here.
    """
    return service.update_me(session, auth.user_id, payload)
