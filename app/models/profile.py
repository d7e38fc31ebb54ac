# app/models/profile.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Profile(SQLModel, table=True):
    """
    Durable record of a user's role and approval status.

    Identity:
      - id: MUST match Supabase auth.users.id (UUID from JWT "sub")

    Role:
      - "consumer" | "vendor" | "admin"
      - visitors without a token have no row.

    Vendors stay gated behind `is_approved` until an admin approves
    their application. Consumers are approved on creation.
    Passwords live in Supabase Auth, never here.
    """

    __tablename__ = "profiles"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches Supabase auth.users.id",
    )

    email: str | None = Field(
        default=None,
        index=True,
        description="Email from Supabase auth.users",
    )

    full_name: str | None = Field(default=None, max_length=100)

    role: str = Field(
        default="consumer",
        index=True,
        description="Application role: consumer | vendor | admin",
    )

    is_approved: bool = Field(
        default=True,
        description="False for vendors awaiting admin approval",
    )

    # Vendor business details (copied from the approved application)
    business_name: str | None = None
    business_license: str | None = None
    contact_person: str | None = None
    phone: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime | None = None
