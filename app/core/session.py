# app/core/session.py
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable

from sqlmodel import Session

from app.core.errors import RemoteStoreError
from app.models.profile import Profile
from app.repositories.profile_repo import ProfileRepository

logger = logging.getLogger(__name__)

VALID_ROLES = ("consumer", "vendor", "admin")


class AuthSession:
    """
    The authenticated identity of one request, plus its resolved profile.

    Passed explicitly to whatever needs it instead of living in module
    state. Lifecycle:

        auth = AuthSession(session, user_id=..., email=..., metadata=...)
        auth.init()      # resolves the profile
        ...
        auth.dispose()   # forgets identity and profile

    An AuthSession without a user_id represents an anonymous visitor.
    """

    def __init__(
        self,
        db: Session,
        user_id: uuid.UUID | None = None,
        email: str | None = None,
        metadata: dict[str, Any] | None = None,
        repo: ProfileRepository | None = None,
    ):
        self.db = db
        self.user_id = user_id
        self.email = email
        self.metadata = metadata or {}
        self.repo = repo or ProfileRepository()
        self.profile: Profile | None = None
        self._initialized = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def role(self) -> str | None:
        return self.profile.role if self.profile else None

    def has_role(self, roles: str | Iterable[str]) -> bool:
        if self.profile is None or not self.profile.role:
            return False
        if isinstance(roles, str):
            roles = [roles]
        return self.profile.role in roles

    def init(self) -> "AuthSession":
        """
        Resolve the profile for the current identity.

        1. Fetch the profile row.
        2. If missing, create it from the auth metadata (role defaults to
           consumer; only consumers are auto-approved).
        3. If the store fails, fall back to an unsaved profile built from
           the metadata so the request can still proceed.
        """
        if self._initialized:
            return self
        self._initialized = True

        if self.user_id is None:
            return self

        try:
            profile = self.repo.fetch(self.db, self.user_id)
            if profile is None:
                logger.info("No profile for %s, creating one from auth metadata", self.user_id)
                profile = self.repo.upsert(self.db, self._profile_from_metadata())
        except RemoteStoreError as exc:
            logger.warning("Profile resolution failed for %s: %s", self.user_id, exc)
            profile = self._profile_from_metadata()

        self.profile = profile
        return self

    def dispose(self) -> None:
        self.user_id = None
        self.email = None
        self.metadata = {}
        self.profile = None
        self._initialized = False

    def _profile_from_metadata(self) -> Profile:
        role = self.metadata.get("role")
        if role not in VALID_ROLES or role == "admin":
            # admin is never granted from self-declared metadata
            role = "consumer"
        return Profile(
            id=self.user_id,
            email=self.email,
            full_name=self.metadata.get("full_name"),
            role=role,
            is_approved=role == "consumer",
            updated_at=datetime.now(timezone.utc),
        )
