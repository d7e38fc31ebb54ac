# app/routers/admin.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.product_repo import ProductRepository
from app.repositories.profile_repo import ProfileRepository
from app.repositories.stats_repo import StatsRepository
from app.repositories.vendor_repo import VendorApplicationRepository
from app.schemas.product import (
    CategoryCreate,
    CategoryRead,
    ProductRead,
    ProductVerificationUpdate,
)
from app.schemas.profile import ProfileRead, ProfileRoleUpdate, Role
from app.schemas.stats import AdminDashboardStats
from app.schemas.vendor import ApplicationStatus, VendorApplicationRead
from app.services.product_service import ProductService
from app.services.profile_service import ProfileService
from app.services.stats_service import StatsService
from app.services.vendor_service import VendorApplicationService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)

profile_repo = ProfileRepository()
profile_service = ProfileService(profile_repo)
product_service = ProductService(ProductRepository())
vendor_service = VendorApplicationService(VendorApplicationRepository(), profile_repo)
stats_service = StatsService(StatsRepository())


# -------- Users --------


@router.get("/users", response_model=list[ProfileRead])
def list_users(
    role: Role | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
    session: Session = Depends(get_session),
):
    """
    List all profiles, optionally filtered by role.
    """
    return profile_service.list_profiles(session, skip, limit, role)


@router.patch("/users/{user_id}/role", response_model=ProfileRead)
def change_role(
    user_id: uuid.UUID,
    payload: ProfileRoleUpdate,
    session: Session = Depends(get_session),
):
    """
    Update a user's role. The account is marked approved.

    Allowed roles: consumer, vendor, admin.
    """
    return profile_service.update_role(session, user_id, payload)


# -------- Vendor applications --------


@router.get("/vendor-applications", response_model=list[VendorApplicationRead])
def list_vendor_applications(
    status: ApplicationStatus | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
    session: Session = Depends(get_session),
):
    return vendor_service.list_applications(session, status, skip, limit)


@router.post(
    "/vendor-applications/{application_id}/approve",
    response_model=VendorApplicationRead,
)
def approve_vendor_application(
    application_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Approve a pending application: the applicant becomes an approved vendor.
    """
    return vendor_service.approve(session, application_id)


@router.post(
    "/vendor-applications/{application_id}/reject",
    response_model=VendorApplicationRead,
)
def reject_vendor_application(
    application_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return vendor_service.reject(session, application_id)


# -------- Products & categories --------


@router.get("/products", response_model=list[ProductRead])
def list_all_products(
    is_verified: bool | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
    session: Session = Depends(get_session),
):
    """
    All products regardless of status. `is_verified=false` lists the
    verification queue.
    """
    return product_service.list_all_products(session, skip, limit, is_verified)


@router.patch("/products/{product_id}/verification", response_model=ProductRead)
def set_product_verification(
    product_id: uuid.UUID,
    payload: ProductVerificationUpdate,
    session: Session = Depends(get_session),
):
    """
    Verify (or un-verify) a product. Only verified products are sold.
    """
    return product_service.set_verification(session, product_id, payload.is_verified)


@router.delete(
    "/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    product_service.admin_delete_product(session, product_id)
    return None


@router.post(
    "/categories",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    payload: CategoryCreate,
    session: Session = Depends(get_session),
):
    return product_service.create_category(session, payload)


# -------- Dashboard --------


@router.get("/stats", response_model=AdminDashboardStats)
def get_admin_dashboard_stats(session: Session = Depends(get_session)):
    """
    Aggregated statistics for the admin dashboard.

    Revenue excludes cancelled orders.
    """
    return stats_service.get_admin_dashboard_stats(session)
