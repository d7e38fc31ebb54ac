# app/repositories/cart_repo.py
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.core.errors import FetchError, WriteError
from app.models.cart import CartItem, CartLine


class CartRepository:
    """
    Remote item store for carts, keyed by (user_id, product_id).

    Last write wins: rows carry no version, so two sessions writing the
    same row simply overwrite each other.

    Every SQLAlchemy failure is rolled back and re-raised as
    FetchError / WriteError so the cart synchronizer can react to it.
    """

    def __init__(self, session: Session):
        self.session = session

    def list_lines(self, user_id: uuid.UUID) -> list[CartLine]:
        try:
            rows = self._list_rows(user_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise FetchError("Could not load cart items", cause=exc) from exc
        return [CartLine(product_id=r.product_id, quantity=r.quantity) for r in rows]

    def upsert(self, user_id: uuid.UUID, product_id: uuid.UUID, quantity: int) -> None:
        """Insert the row or overwrite its quantity."""
        try:
            item = self._get_row(user_id, product_id)
            if item is None:
                item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
            else:
                item.quantity = quantity
            self.session.add(item)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise WriteError("Could not save cart item", cause=exc) from exc

    def delete(self, user_id: uuid.UUID, product_id: uuid.UUID) -> None:
        try:
            item = self._get_row(user_id, product_id)
            if item is not None:
                self.session.delete(item)
                self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise WriteError("Could not remove cart item", cause=exc) from exc

    def delete_all(self, user_id: uuid.UUID) -> None:
        try:
            for row in self._list_rows(user_id):
                self.session.delete(row)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise WriteError("Could not clear cart", cause=exc) from exc

    # ---- internal helpers ----

    def _list_rows(self, user_id: uuid.UUID) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at)
        )
        return self.session.exec(stmt).all()

    def _get_row(self, user_id: uuid.UUID, product_id: uuid.UUID) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
        return self.session.exec(stmt).first()
