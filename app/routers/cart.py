# app/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_auth
from app.core.session import AuthSession
from app.database import get_session
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import CartSummary, CartItemCreate, CartItemUpdate
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

product_repo = ProductRepository()
service = CartService(product_repo)


@router.get("", response_model=CartSummary)
def get_my_cart(
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_auth),
):
    """
    Get current user's cart summary.

    Totals use live product prices. If the cart cannot be loaded the
    response is an empty cart with an error notice.
    """
    return service.get_cart(session, auth.user_id)


@router.post("", response_model=CartSummary)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_auth),
):
    """
    Add product to the current user's cart.

    Adding a product already in the cart increases its quantity.
    """
    return service.add_item(session, auth.user_id, payload.product_id, payload.quantity)


@router.patch("/{product_id}", response_model=CartSummary)
def update_cart_item(
    product_id: uuid.UUID,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_auth),
):
    """
    Set the quantity of a product in the cart. Quantity 0 removes it.
    """
    return service.update_quantity(session, auth.user_id, product_id, payload.quantity)


@router.delete("/{product_id}", response_model=CartSummary)
def remove_cart_item(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_auth),
):
    return service.remove_item(session, auth.user_id, product_id)


@router.delete("", response_model=CartSummary)
def clear_cart(
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_auth),
):
    """
    Clear the entire cart.
    """
    return service.clear(session, auth.user_id)
