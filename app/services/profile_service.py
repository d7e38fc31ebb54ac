# app/services/profile_service.py
import logging
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.profile import Profile
from app.repositories.profile_repo import ProfileRepository
from app.schemas.profile import ProfileRoleUpdate, ProfileUpdate

logger = logging.getLogger(__name__)


class ProfileService:
    """
    Business logic for Profile.

    Responsibilities:
      - self-service edits (role / approval are never editable here)
      - admin role changes
      - map domain errors to HTTP errors
    """

    def __init__(self, repo: ProfileRepository):
        self.repo = repo

    # ----- Self profile -----

    def get_me(self, session: Session, user_id: uuid.UUID) -> Profile:
        """
        Return the stored profile of the caller.

        The session may hold an unsaved fallback profile when the store
        was unreachable at sign-in; this always reads the row.
        """
        return self.get_profile(session, user_id)

    def update_me(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: ProfileUpdate,
    ) -> Profile:
        """Partial update of the caller's editable fields."""
        profile = self.get_profile(session, user_id)

        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(profile, field, value)

        profile.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, profile)

    # ----- Admin operations -----

    def list_profiles(
        self,
        session: Session,
        skip: int,
        limit: int,
        role: str | None = None,
    ) -> list[Profile]:
        """List profiles with pagination (admin only)."""
        return self.repo.list(session, skip=skip, limit=limit, role=role)

    def get_profile(self, session: Session, user_id: uuid.UUID) -> Profile:
        """
        Raises:
            HTTPException(404): if not found.
        """
        profile = self.repo.get_by_id(session, user_id)
        if not profile:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Profile not found",
            )
        return profile

    def update_role(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: ProfileRoleUpdate,
    ) -> Profile:
        """
        Change a user's role (admin only).

        An admin granting a role also approves the account.
        """
        profile = self.get_profile(session, user_id)
        profile.role = payload.role
        profile.is_approved = True
        profile.updated_at = datetime.now(timezone.utc)
        logger.info("Profile %s role set to %s", profile.id, payload.role)
        return self.repo.update(session, profile)
