# app/models/vendor.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class VendorApplication(SQLModel, table=True):
    """
    Application submitted by a pharmacy signing up as a vendor.

    status: pending | approved | rejected
    """

    __tablename__ = "vendor_applications"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="profiles.id",
        index=True,
    )

    business_name: str
    business_license: str
    business_address: str
    business_description: str | None = None
    contact_person: str
    email: str

    status: str = Field(default="pending", index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime | None = None
