# app/routers/vendor.py
import uuid

from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    UploadFile,
    status,
)
from sqlmodel import Session

from app.core.auth import require_vendor
from app.core.session import AuthSession
from app.database import get_session
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.order import VendorOrderLine
from app.schemas.product import ProductCreate, ProductRead, ProductUpdate
from app.services.cart_service import CartService
from app.services.order_service import OrderService
from app.services.product_service import ProductService

router = APIRouter(prefix="/vendor", tags=["Vendor"])

product_repo = ProductRepository()
service = ProductService(product_repo)
order_service = OrderService(OrderRepository(), product_repo, CartService(product_repo))


@router.get("/products", response_model=list[ProductRead])
def list_my_products(
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_vendor),
):
    """
    All products of the calling vendor, verified or not.
    """
    return service.list_vendor_products(session, auth.profile)


@router.post(
    "/products",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_vendor),
):
    """
    List a new product.

    - MAL registration number must look like MAL12345678.
    - The product stays hidden until an admin verifies it.
    """
    return service.create_product(session, auth.profile, payload)


@router.patch("/products/{product_id}", response_model=ProductRead)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_vendor),
):
    return service.update_product(session, auth.profile, product_id, payload)


@router.delete(
    "/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_vendor),
):
    """
    Delete one of the vendor's products and its image.
    """
    service.delete_product(session, auth.profile, product_id)
    return None


@router.post(
    "/products/{product_id}/image",
    response_model=ProductRead,
    summary="Upload or replace the image of a product",
)
def upload_product_image(
    product_id: uuid.UUID,
    file: UploadFile = File(...),
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_vendor),
):
    """
    Upload a new image for the product.

    - Accepts JPEG, PNG, WEBP, GIF up to 10MB.
    - Replaces any previous image.
    """
    if not file.content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing content-type for uploaded file",
        )

    file_bytes = file.file.read()
    return service.set_image(
        session=session,
        vendor=auth.profile,
        product_id=product_id,
        content_type=file.content_type,
        file_bytes=file_bytes,
    )


@router.get("/orders", response_model=list[VendorOrderLine])
def list_my_order_lines(
    session: Session = Depends(get_session),
    auth: AuthSession = Depends(require_vendor),
):
    """
    Order lines containing the vendor's products, newest first.
    """
    return order_service.list_vendor_order_lines(session, auth.user_id)
