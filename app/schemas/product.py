# app/schemas/product.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.core.malaysia import MalNumber

ProductSort = Literal["newest", "price_asc", "price_desc", "name"]


class CategoryCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class CategoryRead(SQLModel):
    id: uuid.UUID
    name: str
    description: str | None
    created_at: datetime


class ProductCreate(SQLModel):
    """
    Payload for a vendor listing a new product.

    pharmacy_name / pharmacy_license come from the vendor profile,
    is_verified always starts False.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=200)
    brand: str = Field(max_length=100)
    description: str | None = None
    price: float = Field(gt=0)
    original_price: float | None = Field(default=None, gt=0)
    stock_quantity: int = Field(default=0, ge=0)
    mal_number: MalNumber
    category_id: uuid.UUID
    image_url: str | None = None

    @field_validator("name", "brand")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=200)
    brand: str | None = Field(default=None, max_length=100)
    description: str | None = None
    price: float | None = Field(default=None, gt=0)
    original_price: float | None = Field(default=None, gt=0)
    stock_quantity: int | None = Field(default=None, ge=0)
    mal_number: MalNumber | None = None
    category_id: uuid.UUID | None = None
    image_url: str | None = None
    is_active: bool | None = None

    @field_validator("name", "brand")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    vendor_id: uuid.UUID
    category_id: uuid.UUID | None
    name: str
    brand: str
    description: str | None
    price: float
    original_price: float | None
    stock_quantity: int
    mal_number: str
    pharmacy_name: str | None
    pharmacy_license: str | None
    image_url: str | None
    is_active: bool
    is_verified: bool
    created_at: datetime
    updated_at: datetime | None


class ProductVerificationUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    is_verified: bool
