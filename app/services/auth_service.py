# app/services/auth_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from supabase import AuthError, Client

from app.core.errors import WriteError
from app.models.profile import Profile
from app.models.vendor import VendorApplication
from app.repositories.profile_repo import ProfileRepository
from app.repositories.vendor_repo import VendorApplicationRepository
from app.schemas.auth import AuthResult, SignInRequest, SignUpRequest
from app.schemas.cart import Notice

logger = logging.getLogger(__name__)


class AuthService:
    """
    Sign-up / sign-in on top of Supabase Auth.

    Supabase owns credentials and tokens; this service keeps the
    profiles table and vendor applications in step with it.
    """

    def __init__(
        self,
        profile_repo: ProfileRepository,
        vendor_repo: VendorApplicationRepository,
    ):
        self.profile_repo = profile_repo
        self.vendor_repo = vendor_repo

    @staticmethod
    def _result(response, notices: list[Notice] | None = None) -> AuthResult:
        user = response.user
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Authentication failed",
            )
        auth_session = response.session
        return AuthResult(
            user_id=uuid.UUID(str(user.id)),
            email=user.email,
            access_token=auth_session.access_token if auth_session else None,
            refresh_token=auth_session.refresh_token if auth_session else None,
            expires_in=auth_session.expires_in if auth_session else None,
            notices=notices or [],
        )

    def sign_up(self, session: Session, client: Client, payload: SignUpRequest) -> AuthResult:
        """
        Register a consumer or vendor.

        Steps:
          1. Create the Supabase auth user (full_name / role as metadata).
          2. Upsert the profile; vendors start unapproved.
          3. Vendors: file a pending VendorApplication.

        Failures after step 1 do not undo the account; they come back as
        notices and the profile is provisioned again on first request.
        """
        try:
            response = client.auth.sign_up(
                {
                    "email": payload.email,
                    "password": payload.password,
                    "options": {
                        "data": {"full_name": payload.full_name, "role": payload.role}
                    },
                }
            )
        except AuthError as exc:
            logger.info("Sign-up rejected for %s: %s", payload.email, exc)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(exc),
            )

        result = self._result(response)

        try:
            self.profile_repo.upsert(
                session,
                Profile(
                    id=result.user_id,
                    email=payload.email,
                    full_name=payload.full_name,
                    role=payload.role,
                    is_approved=payload.role == "consumer",
                ),
            )
        except WriteError as exc:
            logger.warning("Profile creation failed for %s: %s", result.user_id, exc)
            result.notices.append(
                Notice(level="warning", message="Account created, but your profile could not be saved yet.")
            )
            return result

        if payload.role == "vendor" and payload.business_info is not None:
            info = payload.business_info
            try:
                self.vendor_repo.create(
                    session,
                    VendorApplication(
                        user_id=result.user_id,
                        business_name=info.business_name,
                        business_license=info.business_license,
                        business_address=info.business_address,
                        business_description=info.business_description,
                        contact_person=info.contact_person,
                        email=payload.email,
                    ),
                )
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("Vendor application failed for %s: %s", result.user_id, exc)
                result.notices.append(
                    Notice(
                        level="warning",
                        message="Account created, but the vendor application could not be submitted. Please contact support.",
                    )
                )
            else:
                result.notices.append(
                    Notice(level="info", message="Your vendor application is pending admin approval.")
                )

        logger.info("Signed up %s as %s", result.user_id, payload.role)
        return result

    def sign_in(self, client: Client, payload: SignInRequest) -> AuthResult:
        try:
            response = client.auth.sign_in_with_password(
                {"email": payload.email, "password": payload.password}
            )
        except AuthError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )
        return self._result(response)

    def refresh(self, client: Client, refresh_token: str) -> AuthResult:
        try:
            response = client.auth.refresh_session(refresh_token)
        except AuthError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired refresh token",
            )
        return self._result(response)
