# app/schemas/auth.py
import uuid
from typing import Literal

from pydantic import ConfigDict, EmailStr, field_validator, model_validator
from sqlmodel import SQLModel, Field

from app.core.malaysia import validate_pharmacy_license
from app.schemas.cart import Notice


class BusinessInfo(SQLModel):
    """
    Vendor business details submitted with a vendor sign-up.
    """

    business_name: str = Field(min_length=1, max_length=200)
    business_license: str
    business_address: str = Field(min_length=1)
    business_description: str | None = None
    contact_person: str = Field(min_length=1, max_length=100)

    @field_validator("business_license")
    @classmethod
    def license_format(cls, v: str) -> str:
        v = v.strip().upper()
        if not validate_pharmacy_license(v):
            raise ValueError("pharmacy license must be 1-2 letters followed by 4-5 digits")
        return v


class SignUpRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1, max_length=100)
    role: Literal["consumer", "vendor"] = "consumer"
    business_info: BusinessInfo | None = None

    @model_validator(mode="after")
    def vendor_needs_business_info(self) -> "SignUpRequest":
        if self.role == "vendor" and self.business_info is None:
            raise ValueError("business_info is required for vendor sign-up")
        return self


class SignInRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1)


class RefreshRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    refresh_token: str = Field(min_length=1)


class AuthResult(SQLModel):
    """
    Result of a sign-up / sign-in / refresh.

    Tokens are None when Supabase requires email confirmation first.
    """

    user_id: uuid.UUID
    email: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None
    notices: list[Notice] = []
