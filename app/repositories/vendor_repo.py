# app/repositories/vendor_repo.py
import uuid

from sqlmodel import Session, col, select

from app.models.vendor import VendorApplication


class VendorApplicationRepository:
    """Data access layer for vendor_applications."""

    def get_by_id(
        self, session: Session, application_id: uuid.UUID
    ) -> VendorApplication | None:
        return session.get(VendorApplication, application_id)

    def list(
        self,
        session: Session,
        status: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[VendorApplication]:
        stmt = select(VendorApplication)
        if status:
            stmt = stmt.where(VendorApplication.status == status)
        stmt = (
            stmt.order_by(col(VendorApplication.created_at).desc())
            .offset(skip)
            .limit(limit)
        )
        return session.exec(stmt).all()

    def create(self, session: Session, application: VendorApplication) -> VendorApplication:
        session.add(application)
        session.commit()
        session.refresh(application)
        return application

    def update(self, session: Session, application: VendorApplication) -> VendorApplication:
        session.add(application)
        session.commit()
        session.refresh(application)
        return application
