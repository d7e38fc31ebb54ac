# app/repositories/profile_repo.py
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from app.core.errors import FetchError, WriteError
from app.models.profile import Profile


class ProfileRepository:
    """
    Data access layer for Profile.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    # ----- Basic CRUD -----

    def get_by_id(self, session: Session, profile_id: uuid.UUID) -> Profile | None:
        """Return a Profile by primary key, or None if not found."""
        return session.get(Profile, profile_id)

    def fetch(self, session: Session, profile_id: uuid.UUID) -> Profile | None:
        """
        Like get_by_id, but store failures surface as FetchError
        instead of a raw SQLAlchemy exception.
        """
        try:
            return session.get(Profile, profile_id)
        except SQLAlchemyError as exc:
            session.rollback()
            raise FetchError("Could not load profile", cause=exc) from exc

    def list(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        role: str | None = None,
    ) -> list[Profile]:
        """
        Paginated profile listing, newest first.

        Args:
            skip: offset rows (for paging)
            limit: max number of rows returned
            role: optional role filter
        """
        stmt = select(Profile)
        if role:
            stmt = stmt.where(Profile.role == role)
        stmt = stmt.order_by(col(Profile.created_at).desc()).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def upsert(self, session: Session, profile: Profile) -> Profile:
        """
        Insert or overwrite a Profile keyed by id.

        Raises:
            WriteError: the row could not be written.
        """
        try:
            merged = session.merge(profile)
            session.commit()
            session.refresh(merged)
            return merged
        except SQLAlchemyError as exc:
            session.rollback()
            raise WriteError("Could not save profile", cause=exc) from exc

    def update(self, session: Session, profile: Profile) -> Profile:
        """Persist changes to an existing Profile."""
        session.add(profile)
        session.commit()
        session.refresh(profile)
        return profile
