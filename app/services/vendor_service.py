# app/services/vendor_service.py
import logging
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.vendor import VendorApplication
from app.repositories.profile_repo import ProfileRepository
from app.repositories.vendor_repo import VendorApplicationRepository

logger = logging.getLogger(__name__)


class VendorApplicationService:
    """
    Admin review of pharmacy vendor applications.

    Approving copies the business details onto the applicant's profile
    and lifts the pending-approval gate.
    """

    def __init__(
        self,
        repo: VendorApplicationRepository,
        profile_repo: ProfileRepository,
    ):
        self.repo = repo
        self.profile_repo = profile_repo

    def list_applications(
        self,
        session: Session,
        status_filter: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[VendorApplication]:
        return self.repo.list(session, status=status_filter, skip=skip, limit=limit)

    def _get_pending(self, session: Session, application_id: uuid.UUID) -> VendorApplication:
        application = self.repo.get_by_id(session, application_id)
        if not application:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Application not found",
            )
        if application.status != "pending":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Application already {application.status}",
            )
        return application

    def approve(self, session: Session, application_id: uuid.UUID) -> VendorApplication:
        application = self._get_pending(session, application_id)

        profile = self.profile_repo.get_by_id(session, application.user_id)
        if not profile:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Applicant profile not found",
            )

        now = datetime.now(timezone.utc)
        profile.role = "vendor"
        profile.is_approved = True
        profile.business_name = application.business_name
        profile.business_license = application.business_license
        profile.contact_person = application.contact_person
        profile.updated_at = now
        session.add(profile)

        application.status = "approved"
        application.updated_at = now
        application = self.repo.update(session, application)
        logger.info("Vendor application %s approved", application.id)
        return application

    def reject(self, session: Session, application_id: uuid.UUID) -> VendorApplication:
        application = self._get_pending(session, application_id)
        application.status = "rejected"
        application.updated_at = datetime.now(timezone.utc)
        application = self.repo.update(session, application)
        logger.info("Vendor application %s rejected", application.id)
        return application
