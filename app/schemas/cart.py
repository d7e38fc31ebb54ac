# app/schemas/cart.py
import uuid
from typing import Literal

from sqlmodel import SQLModel, Field


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.
    """

    product_id: uuid.UUID
    quantity: int = Field(default=1, gt=0)


class CartItemUpdate(SQLModel):
    """
    Payload for setting the quantity of a cart line.

    0 removes the line.
    """

    quantity: int = Field(ge=0)


class Notice(SQLModel):
    """
    Non-fatal message for the client to show (e.g. as a toast).
    """

    level: Literal["info", "warning", "error"] = "error"
    message: str


class CartLineRead(SQLModel):
    """
    One cart line joined with the live product data.
    """

    product_id: uuid.UUID
    quantity: int
    product_name: str | None = None
    product_brand: str | None = None
    image_url: str | None = None
    mal_number: str | None = None
    pharmacy_name: str | None = None
    unit_price: float | None = None
    line_total: float


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartLineRead]
    total_items: int
    total_price: float
    notices: list[Notice] = []
