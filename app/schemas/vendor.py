# app/schemas/vendor.py
import uuid
from datetime import datetime
from typing import Literal

from sqlmodel import SQLModel

ApplicationStatus = Literal["pending", "approved", "rejected"]


class VendorApplicationRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    business_name: str
    business_license: str
    business_address: str
    business_description: str | None
    contact_person: str
    email: str
    status: ApplicationStatus
    created_at: datetime
    updated_at: datetime | None
