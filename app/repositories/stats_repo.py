# app/repositories/stats_repo.py
from sqlalchemy import func
from sqlmodel import Session, select

from app.models.order import Order
from app.models.product import Product
from app.models.profile import Profile
from app.models.vendor import VendorApplication


class StatsRepository:
    """
    Read-only aggregated queries for admin dashboard.
    """

    def count_products(self, session: Session, is_verified: bool | None = None) -> int:
        stmt = select(func.count()).select_from(Product)
        if is_verified is not None:
            stmt = stmt.where(Product.is_verified == is_verified)
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_orders(self, session: Session, status: str | None = None) -> int:
        stmt = select(func.count()).select_from(Order)
        if status:
            stmt = stmt.where(Order.status == status)
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_profiles(self, session: Session, role: str | None = None) -> int:
        stmt = select(func.count()).select_from(Profile)
        if role:
            stmt = stmt.where(Profile.role == role)
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_pending_applications(self, session: Session) -> int:
        stmt = (
            select(func.count())
            .select_from(VendorApplication)
            .where(VendorApplication.status == "pending")
        )
        value = session.exec(stmt).one()
        return int(value or 0)

    def total_revenue(self, session: Session) -> float:
        """Sum of total_amount over orders that were not cancelled."""
        stmt = select(func.coalesce(func.sum(Order.total_amount), 0.0)).where(
            Order.status != "cancelled"
        )
        value = session.exec(stmt).one()
        return float(value or 0.0)
