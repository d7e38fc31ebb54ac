# app/services/cart_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.errors import FetchError, WriteError
from app.models.cart import CartLine
from app.models.product import Product
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import CartLineRead, CartSummary, Notice
from app.services.cart_sync import CartSynchronizer

logger = logging.getLogger(__name__)


class LiveCatalog:
    """
    Product lookups for the cart, always against current rows.

    Prices are never cached: every read goes to the session.
    """

    def __init__(self, session: Session, product_repo: ProductRepository):
        self.session = session
        self.product_repo = product_repo

    def get_product(self, product_id: uuid.UUID) -> Product | None:
        try:
            return self.product_repo.get_by_id(self.session, product_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise FetchError("Could not load product", cause=exc) from exc

    def price_of(self, product_id: uuid.UUID) -> float | None:
        product = self.get_product(product_id)
        return product.price if product else None


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - build a CartSynchronizer for the caller and load it
      - validate product existence / active flag / stock before mutating
      - turn remote store failures into notices instead of errors
      - compute line totals from live prices
    """

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    # ---- internal helpers ----

    def open(self, session: Session, user_id: uuid.UUID) -> tuple[CartSynchronizer, list[Notice]]:
        """
        Create and load the synchronizer for `user_id`.

        A failed load leaves the cart empty and yields a notice.
        """
        sync = CartSynchronizer(
            user_id,
            store=CartRepository(session),
            catalog=LiveCatalog(session, self.product_repo),
        )
        notices: list[Notice] = []
        try:
            sync.load()
        except FetchError:
            notices.append(Notice(message="Could not load your cart. Please try again."))
        return sync, notices

    def _get_available_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        if not product.is_active or not product.is_verified:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product is not available",
            )
        return product

    def _check_stock(self, product: Product, quantity: int) -> None:
        if quantity > product.stock_quantity:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Only {product.stock_quantity} items available in stock",
            )

    def summarize(
        self,
        sync: CartSynchronizer,
        notices: list[Notice] | None = None,
    ) -> CartSummary:
        """
        Build the response from the synchronizer's current lines.

        Totals come from the synchronizer so they always reflect the
        live product prices. If the catalog cannot be read, the lines are
        returned without product data and a notice is added.
        """
        notices = list(notices or [])
        try:
            items = [self._line_read(sync.catalog, line) for line in sync.lines]
            total_price = sync.total_price
        except FetchError:
            logger.warning("Product lookup failed for cart of user %s", sync.user_id)
            items = [
                CartLineRead(product_id=line.product_id, quantity=line.quantity, line_total=0.0)
                for line in sync.lines
            ]
            total_price = 0.0
            notices.append(Notice(message="Could not load current product prices."))

        return CartSummary(
            items=items,
            total_items=sync.total_items,
            total_price=total_price,
            notices=notices,
        )

    def _line_read(self, catalog: LiveCatalog, line: CartLine) -> CartLineRead:
        product = catalog.get_product(line.product_id)
        price = product.price if product else None
        return CartLineRead(
            product_id=line.product_id,
            quantity=line.quantity,
            product_name=product.name if product else None,
            product_brand=product.brand if product else None,
            image_url=product.image_url if product else None,
            mal_number=product.mal_number if product else None,
            pharmacy_name=product.pharmacy_name if product else None,
            unit_price=price,
            line_total=round(line.quantity * price, 2) if price is not None else 0.0,
        )

    # ---- public operations ----

    def get_cart(self, session: Session, user_id: uuid.UUID) -> CartSummary:
        sync, notices = self.open(session, user_id)
        return self.summarize(sync, notices)

    def add_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int = 1,
    ) -> CartSummary:
        """
        Add a product to the cart; an existing line is incremented.

        Rules:
          - product must exist, be active and verified
          - resulting quantity <= stock_quantity
        """
        product = self._get_available_product(session, product_id)
        sync, notices = self.open(session, user_id)

        line = sync.get_line(product_id)
        current = line.quantity if line else 0
        self._check_stock(product, current + quantity)

        try:
            sync.add_item(product_id, quantity)
        except WriteError:
            notices.append(Notice(message="Could not add the item to your cart."))
        return self.summarize(sync, notices)

    def update_quantity(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int,
    ) -> CartSummary:
        """
        Set the quantity of a cart line. 0 removes the line.
        """
        sync, notices = self.open(session, user_id)
        if sync.get_line(product_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not in cart",
            )

        if quantity > 0:
            self._check_stock(self._get_available_product(session, product_id), quantity)

        try:
            sync.update_quantity(product_id, quantity)
        except WriteError:
            notices.append(Notice(message="Could not update the item quantity."))
        return self.summarize(sync, notices)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> CartSummary:
        sync, notices = self.open(session, user_id)
        try:
            sync.remove_item(product_id)
        except WriteError:
            notices.append(Notice(message="Could not remove the item from your cart."))
        return self.summarize(sync, notices)

    def clear(self, session: Session, user_id: uuid.UUID) -> CartSummary:
        sync, notices = self.open(session, user_id)
        try:
            sync.clear()
        except WriteError:
            notices.append(Notice(message="Could not clear your cart."))
        return self.summarize(sync, notices)
