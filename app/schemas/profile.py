# app/schemas/profile.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.core.malaysia import MalaysianPhone

Role = Literal["consumer", "vendor", "admin"]


class ProfileRead(SQLModel):
    """Response schema returned to clients."""

    id: uuid.UUID
    email: str | None
    full_name: str | None
    role: Role
    is_approved: bool
    business_name: str | None
    business_license: str | None
    contact_person: str | None
    phone: str | None
    created_at: datetime


class ProfileUpdate(SQLModel):
    """
    Partial profile update for authenticated users.
    Role and approval are admin-controlled and not editable here.
    """

    model_config = ConfigDict(extra="forbid")

    full_name: str | None = Field(default=None, max_length=100)
    phone: MalaysianPhone | None = None
    business_name: str | None = None
    business_license: str | None = None
    contact_person: str | None = None

    @field_validator("full_name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("full_name cannot be empty")
        return v


class ProfileRoleUpdate(SQLModel):
    """
    Admin-only role update schema.
    """

    model_config = ConfigDict(extra="forbid")
    role: Role
