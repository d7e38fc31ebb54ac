# app/services/stats_service.py
from sqlmodel import Session

from app.repositories.stats_repo import StatsRepository
from app.schemas.stats import AdminDashboardStats


class StatsService:
    """
    Orchestrates aggregated admin dashboard statistics.
    """

    def __init__(self, repo: StatsRepository):
        self.repo = repo

    def get_admin_dashboard_stats(self, session: Session) -> AdminDashboardStats:
        return AdminDashboardStats(
            total_products=self.repo.count_products(session),
            unverified_products=self.repo.count_products(session, is_verified=False),
            total_orders=self.repo.count_orders(session),
            pending_orders=self.repo.count_orders(session, status="pending"),
            total_users=self.repo.count_profiles(session),
            total_vendors=self.repo.count_profiles(session, role="vendor"),
            pending_vendor_applications=self.repo.count_pending_applications(session),
            total_revenue=round(self.repo.total_revenue(session), 2),
        )
