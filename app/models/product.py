# app/models/product.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Category(SQLModel, table=True):
    """
    Product category (e.g. "Vitamins & Supplements", "Pain Relief").
    """

    __tablename__ = "categories"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        unique=True,
        index=True,
    )

    description: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class Product(SQLModel, table=True):
    """
    Catalog entry listed by a vendor pharmacy.

    A product is only shown on the storefront when it is active AND has
    been verified by an admin. `mal_number` is the Malaysian drug
    registration number; only its format is checked.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    vendor_id: uuid.UUID = Field(
        foreign_key="profiles.id",
        index=True,
        description="Owning vendor profile",
    )

    category_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="categories.id",
        index=True,
    )

    name: str = Field(
        max_length=200,
        index=True,
        description="Display name of the product",
    )

    brand: str = Field(max_length=100)

    description: str | None = None

    price: float = Field(
        gt=0,
        description="Unit price in RM",
    )

    original_price: float | None = Field(
        default=None,
        description="Pre-discount price in RM, if discounted",
    )

    stock_quantity: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    mal_number: str = Field(
        max_length=11,
        index=True,
        description="MAL drug registration number, e.g. MAL12345678",
    )

    pharmacy_name: str | None = None
    pharmacy_license: str | None = None

    image_url: str | None = Field(
        default=None,
        description="Public URL in Supabase Storage",
    )

    is_active: bool = Field(default=True, index=True)

    is_verified: bool = Field(
        default=False,
        index=True,
        description="Set by an admin; unverified products are hidden",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime | None = None
