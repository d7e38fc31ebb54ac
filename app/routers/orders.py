# app/routers/orders.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_auth, require_admin
from app.core.session import AuthSession
from app.database import get_session
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.order import (
    CheckoutRequest,
    OrderCancel,
    OrderRead,
    OrderStatus,
    OrderStatusUpdate,
    OrderWithItemsRead,
    PaymentRequest,
)
from app.services.cart_service import CartService
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
product_repo = ProductRepository()
service = OrderService(order_repo, product_repo, CartService(product_repo))


# -------- User-facing endpoints --------


@router.post(
    "/checkout",
    response_model=OrderWithItemsRead,
)
def checkout(
    payload: CheckoutRequest,
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_auth),
):
    """
    Create an order from the current user's cart.

    Unit prices, names and brands are frozen on the order items. The
    delivery fee depends on the destination state and the subtotal.
    """
    return service.checkout(session, auth.user_id, payload)


@router.get(
    "/me",
    response_model=list[OrderRead],
)
def list_my_orders(
    status: OrderStatus | None = None,
    skip: int = 0,
    limit: int = 50,
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_auth),
):
    """
    List the authenticated user's orders (without items).
    """
    return service.list_user_orders(session, auth.user_id, status, skip, limit)


@router.get(
    "/me/{order_id}",
    response_model=OrderWithItemsRead,
)
def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_auth),
):
    return service.get_user_order(session, auth.user_id, order_id)


@router.post(
    "/{order_id}/pay",
    response_model=OrderRead,
)
def pay_order(
    order_id: uuid.UUID,
    payload: PaymentRequest,
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_auth),
):
    """
    Pay for a pending order. A successful payment confirms the order.
    """
    return service.pay(session, auth.user_id, order_id, payload)


@router.post(
    "/{order_id}/cancel",
    response_model=OrderRead,
)
def cancel_order(
    order_id: uuid.UUID,
    payload: OrderCancel,
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_auth),
):
    """
    Cancel an own order while it is pending or confirmed.
    Stock is returned to the products.
    """
    return service.cancel(session, auth.user_id, order_id, payload.reason)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[OrderRead],
    dependencies=[Depends(require_admin)],
)
def list_all_orders(
    status: OrderStatus | None = None,
    skip: int = 0,
    limit: int = 50,
    session: Session = Depends(get_session),
):
    """
    List all orders (admin only).
    """
    return service.list_all_orders(session, status, skip, limit)


@router.get(
    "/{order_id}",
    response_model=OrderWithItemsRead,
    dependencies=[Depends(require_admin)],
)
def get_order_admin(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get any order with items (admin only).
    """
    return service.get_order_admin(session, order_id)


@router.patch(
    "/{order_id}/status",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Update order status (admin only) with the order state machine.

      pending    -> confirmed, cancelled

      confirmed  -> processing, cancelled

      processing -> shipped

      shipped    -> delivered

      delivered / cancelled -> (no change)

    """
    return service.update_status(session, order_id, payload)
