# app/services/order_service.py
import logging
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.errors import WriteError
from app.core.malaysia import delivery_charge
from app.models.order import Order, OrderItem
from app.models.product import Product
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import Notice
from app.schemas.order import (
    CheckoutRequest,
    OrderItemRead,
    OrderRead,
    OrderStatusUpdate,
    OrderWithItemsRead,
    PaymentRequest,
    VendorOrderLine,
)
from app.services.cart_service import CartService

logger = logging.getLogger(__name__)

# Allowed status transitions
ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"processing", "cancelled"},
    "processing": {"shipped"},
    "shipped": {"delivered"},
    "delivered": set(),
    "cancelled": set(),
}

CANCELLABLE_STATUSES = {"pending", "confirmed"}


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create order from cart (frozen price / name snapshot)
      - Validate cart items against products (stock, active, verified)
      - Compute subtotal, delivery fee and total
      - Deduct stock on checkout, restore it on cancellation
      - Clear cart after success
      - Payment confirmation and status state machine
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        cart_service: CartService,
    ):
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.cart_service = cart_service

    # -------- User-facing operations --------

    def checkout(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CheckoutRequest,
    ) -> OrderWithItemsRead:
        """
        Convert the current user's cart into an Order.

        Steps:
          1. Load cart; error if it cannot be loaded or is empty.
          2. For each line: product exists, is active + verified,
             quantity <= stock_quantity.
          3. Subtotal from live prices, delivery fee from the state.
          4. Create Order (status='pending') and frozen OrderItems.
          5. Deduct stock and commit.
          6. Clear the cart (a failure here only yields a notice).
        """
        # 1) Load cart
        sync, load_notices = self.cart_service.open(session, user_id)
        if load_notices:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Could not load cart, please try again",
            )
        lines = sync.lines
        if not lines:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        # 2) Validate each line vs product
        errors: list[dict[str, str]] = []
        product_map: dict[uuid.UUID, Product] = {}

        for line in lines:
            product = self.product_repo.get_by_id(session, line.product_id)

            if not product:
                errors.append(
                    {"product_id": str(line.product_id), "reason": "Product not found"}
                )
                continue

            if not product.is_active or not product.is_verified:
                errors.append(
                    {"product_id": str(line.product_id), "reason": "Product is not available"}
                )
                continue

            if line.quantity > product.stock_quantity:
                errors.append(
                    {
                        "product_id": str(line.product_id),
                        "reason": f"Insufficient stock (have {product.stock_quantity}, requested {line.quantity})",
                    }
                )
                continue

            product_map[line.product_id] = product

        if errors:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": "Cart validation failed", "items": errors},
            )

        # 3) Totals
        subtotal = round(
            sum(line.quantity * product_map[line.product_id].price for line in lines), 2
        )
        delivery_fee = delivery_charge(
            payload.state_code, subtotal, express=payload.express_delivery
        )

        # 4) Order + frozen items
        order = Order(
            user_id=user_id,
            status="pending",
            total_amount=round(subtotal + delivery_fee, 2),
            delivery_fee=delivery_fee,
            recipient_name=payload.recipient_name,
            phone=payload.phone,
            shipping_address=payload.shipping_address,
            city=payload.city,
            state_code=payload.state_code,
            postal_code=payload.postal_code,
            notes=payload.notes,
        )
        order = self.order_repo.create_order(session, order)

        order_items = [
            OrderItem(
                order_id=order.id,
                product_id=line.product_id,
                quantity=line.quantity,
                price=product_map[line.product_id].price,
                product_name=product_map[line.product_id].name,
                product_brand=product_map[line.product_id].brand,
            )
            for line in lines
        ]
        order_items = self.order_repo.create_items(session, order_items)

        # 5) Deduct stock and commit
        for line in lines:
            product_map[line.product_id].stock_quantity -= line.quantity
            session.add(product_map[line.product_id])

        session.commit()
        session.refresh(order)
        logger.info("Order %s created for user %s (RM %.2f)", order.id, user_id, order.total_amount)

        # 6) Clear cart
        notices: list[Notice] = []
        try:
            sync.clear()
        except WriteError:
            notices.append(
                Notice(level="warning", message="Order placed, but your cart could not be cleared.")
            )

        return self._build_order_with_items_dto(order, order_items, notices)

    def pay(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
        payload: PaymentRequest,
    ) -> OrderRead:
        """
        Record payment for a pending order and confirm it.
        """
        order = self._get_owned_order(session, user_id, order_id)

        if order.status != "pending":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Only pending orders can be paid (order is {order.status})",
            )

        now = datetime.now(timezone.utc)
        order.payment_method = payload.method
        order.paid_at = now
        order.status = "confirmed"
        order.updated_at = now
        self.order_repo.update_order(session, order)
        session.commit()
        session.refresh(order)
        logger.info("Order %s paid via %s", order.id, payload.method)
        return order  # type: ignore[return-value]

    def cancel(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
        reason: str,
    ) -> OrderRead:
        """
        Cancel one of the user's own orders.

        Only pending / confirmed orders can be cancelled.
        """
        order = self._get_owned_order(session, user_id, order_id)

        if order.status not in CANCELLABLE_STATUSES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Order can no longer be cancelled (status: {order.status})",
            )

        self._mark_cancelled(session, order, reason)
        session.commit()
        session.refresh(order)
        return order  # type: ignore[return-value]

    def list_user_orders(
        self,
        session: Session,
        user_id: uuid.UUID,
        status_filter: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderRead]:
        orders = self.order_repo.list_for_user(session, user_id, status_filter, skip, limit)
        return orders  # type: ignore[return-value]

    def get_user_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderWithItemsRead:
        order = self._get_owned_order(session, user_id, order_id)
        items = self.order_repo.list_items_for_order(session, order.id)
        return self._build_order_with_items_dto(order, items)

    # -------- Vendor operations --------

    def list_vendor_order_lines(
        self,
        session: Session,
        vendor_id: uuid.UUID,
    ) -> list[VendorOrderLine]:
        rows = self.order_repo.list_items_for_vendor(session, vendor_id)
        return [
            VendorOrderLine(
                order_id=order.id,
                order_status=order.status,
                ordered_at=order.created_at,
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                price=item.price,
                line_total=round(item.quantity * item.price, 2),
            )
            for item, order in rows
        ]

    # -------- Admin operations --------

    def list_all_orders(
        self,
        session: Session,
        status_filter: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderRead]:
        orders = self.order_repo.list_all(session, status_filter, skip, limit)
        return orders  # type: ignore[return-value]

    def get_order_admin(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> OrderWithItemsRead:
        order = self._get_order(session, order_id)
        items = self.order_repo.list_items_for_order(session, order.id)
        return self._build_order_with_items_dto(order, items)

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> OrderRead:
        """
        Admin-only status update with the order state machine:

          pending    -> confirmed, cancelled
          confirmed  -> processing, cancelled
          processing -> shipped
          shipped    -> delivered
          delivered / cancelled -> (terminal)

        Keeping the same status is allowed and only updates
        tracking_number / notes. Any other transition raises 400.
        """
        order = self._get_order(session, order_id)

        current = order.status
        new = payload.status

        if current != new and new not in ALLOWED_TRANSITIONS.get(current, set()):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status transition: {current} -> {new}",
            )

        if payload.tracking_number:
            order.tracking_number = payload.tracking_number
        if payload.notes:
            order.notes = payload.notes

        if current != new and new == "cancelled":
            self._mark_cancelled(session, order, payload.notes or "Cancelled by admin")
        else:
            order.status = new
            order.updated_at = datetime.now(timezone.utc)

        self.order_repo.update_order(session, order)
        session.commit()
        session.refresh(order)
        return order  # type: ignore[return-value]

    # -------- Helpers --------

    def _get_order(self, session: Session, order_id: uuid.UUID) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return order

    def _get_owned_order(
        self, session: Session, user_id: uuid.UUID, order_id: uuid.UUID
    ) -> Order:
        """404 if the order does not exist or belongs to someone else."""
        order = self.order_repo.get_by_id(session, order_id)
        if not order or order.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return order

    def _mark_cancelled(self, session: Session, order: Order, reason: str) -> None:
        """Set cancellation fields and put the items back in stock."""
        now = datetime.now(timezone.utc)
        order.status = "cancelled"
        order.cancellation_reason = reason
        order.cancelled_at = now
        order.updated_at = now

        for item in self.order_repo.list_items_for_order(session, order.id):
            product = self.product_repo.get_by_id(session, item.product_id)
            if product is not None:
                product.stock_quantity += item.quantity
                session.add(product)

        self.order_repo.update_order(session, order)

    def _build_order_with_items_dto(
        self,
        order: Order,
        items: list[OrderItem],
        notices: list[Notice] | None = None,
    ) -> OrderWithItemsRead:
        """
        Compose OrderWithItemsRead from ORM models, including subtotal.
        """
        item_dtos: list[OrderItemRead] = []
        subtotal = 0.0

        for it in items:
            line_total = round(it.quantity * it.price, 2)
            subtotal += line_total
            item_dtos.append(
                OrderItemRead(
                    id=it.id,
                    order_id=it.order_id,
                    product_id=it.product_id,
                    quantity=it.quantity,
                    price=it.price,
                    product_name=it.product_name,
                    product_brand=it.product_brand,
                    line_total=line_total,
                )
            )

        return OrderWithItemsRead(
            **OrderRead.model_validate(order, from_attributes=True).model_dump(),
            items=item_dtos,
            subtotal=round(subtotal, 2),
            notices=notices or [],
        )
