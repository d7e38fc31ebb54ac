# app/repositories/product_repo.py
import uuid

from sqlmodel import Session, col, or_, select

from app.models.cart import CartItem
from app.models.order import OrderItem
from app.models.product import Category, Product


class ProductRepository:
    """
    Data access layer for Product & Category.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def list_storefront(
        self,
        session: Session,
        *,
        category_id: uuid.UUID | None = None,
        search: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        sort: str = "newest",
        skip: int = 0,
        limit: int = 50,
    ) -> list[Product]:
        """
        Active + verified products with optional filters.

        `search` matches name, brand or MAL number, case-insensitive.
        """
        stmt = select(Product).where(
            Product.is_active == True,  # noqa: E712
            Product.is_verified == True,  # noqa: E712
        )
        if category_id is not None:
            stmt = stmt.where(Product.category_id == category_id)
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(
                or_(
                    col(Product.name).ilike(pattern),
                    col(Product.brand).ilike(pattern),
                    col(Product.mal_number).ilike(pattern),
                )
            )
        if min_price is not None:
            stmt = stmt.where(Product.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(Product.price <= max_price)

        order_by = {
            "price_asc": col(Product.price).asc(),
            "price_desc": col(Product.price).desc(),
            "name": col(Product.name).asc(),
            "newest": col(Product.created_at).desc(),
        }[sort]
        stmt = stmt.order_by(order_by).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def list_for_vendor(self, session: Session, vendor_id: uuid.UUID) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.vendor_id == vendor_id)
            .order_by(col(Product.created_at).desc())
        )
        return session.exec(stmt).all()

    def list_all(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        is_verified: bool | None = None,
    ) -> list[Product]:
        stmt = select(Product)
        if is_verified is not None:
            stmt = stmt.where(Product.is_verified == is_verified)
        stmt = stmt.order_by(col(Product.created_at).desc()).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def has_orders(self, session: Session, product_id: uuid.UUID) -> bool:
        stmt = select(OrderItem).where(OrderItem.product_id == product_id)
        return session.exec(stmt).first() is not None

    def delete(self, session: Session, product: Product) -> None:
        """Delete a product together with any cart rows pointing at it."""
        rows = session.exec(select(CartItem).where(CartItem.product_id == product.id)).all()
        for row in rows:
            session.delete(row)
        session.delete(product)
        session.commit()

    # ----- Categories -----

    def list_categories(self, session: Session) -> list[Category]:
        return session.exec(select(Category).order_by(Category.name)).all()

    def get_category(self, session: Session, category_id: uuid.UUID) -> Category | None:
        return session.get(Category, category_id)

    def get_category_by_name(self, session: Session, name: str) -> Category | None:
        stmt = select(Category).where(col(Category.name).ilike(name))
        return session.exec(stmt).first()

    def create_category(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category
