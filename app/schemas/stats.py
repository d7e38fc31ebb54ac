# app/schemas/stats.py
from sqlmodel import SQLModel


class AdminDashboardStats(SQLModel):
    """
    Headline numbers for the admin dashboard.
    """

    total_products: int
    unverified_products: int
    total_orders: int
    pending_orders: int
    total_users: int
    total_vendors: int
    pending_vendor_applications: int
    total_revenue: float
