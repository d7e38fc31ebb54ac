# app/services/product_service.py
import logging
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.storage_utils import (
    delete_public_url,
    generate_object_path,
    upload_to_storage,
)
from app.models.product import Category, Product
from app.models.profile import Profile
from app.repositories.product_repo import ProductRepository
from app.schemas.product import CategoryCreate, ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


# --- Image config ---

MAX_IMAGE_BYTES = 10 * 1024 * 1024  # 10MB per image

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


class ProductService:
    """
    Business logic for Product & Category.

    Responsibilities:
      - storefront visibility (only active + verified products)
      - vendor ownership checks on create / update / delete
      - image upload/delete orchestration with Supabase Storage
      - admin verification and removal (enforced at router via require_admin)
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    # ----- Helpers -----

    @staticmethod
    def _validate_and_get_ext(content_type: str, file_bytes: bytes) -> str:
        if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unsupported image type. Allowed: JPEG, PNG, WEBP, GIF.",
            )

        if len(file_bytes) > MAX_IMAGE_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="Image too large (max 10MB).",
            )

        return ALLOWED_IMAGE_CONTENT_TYPES[content_type]

    def _get_any_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def _get_owned_product(
        self, session: Session, vendor: Profile, product_id: uuid.UUID
    ) -> Product:
        product = self._get_any_product(session, product_id)
        if product.vendor_id != vendor.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only manage your own products",
            )
        return product

    def _ensure_category(self, session: Session, category_id: uuid.UUID) -> None:
        if self.repo.get_category(session, category_id) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Category does not exist",
            )

    # ----- Storefront -----

    def list_products(
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
        if min_price is not None and max_price is not None and min_price > max_price:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="min_price cannot be greater than max_price",
            )
        return self.repo.list_storefront(
            session,
            category_id=category_id,
            search=search,
            min_price=min_price,
            max_price=max_price,
            sort=sort,
            skip=skip,
            limit=limit,
        )

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        """
        Public product detail. Inactive or unverified products are hidden.
        """
        product = self.repo.get_by_id(session, product_id)
        if not product or not product.is_active or not product.is_verified:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    # ----- Vendor -----

    def list_vendor_products(self, session: Session, vendor: Profile) -> list[Product]:
        return self.repo.list_for_vendor(session, vendor.id)

    def create_product(
        self,
        session: Session,
        vendor: Profile,
        payload: ProductCreate,
    ) -> Product:
        """
        Create a listing for the vendor. New listings wait for admin
        verification before they show on the storefront.
        """
        self._ensure_category(session, payload.category_id)

        product = Product(
            vendor_id=vendor.id,
            category_id=payload.category_id,
            name=payload.name,
            brand=payload.brand,
            description=payload.description,
            price=payload.price,
            original_price=payload.original_price,
            stock_quantity=payload.stock_quantity,
            mal_number=payload.mal_number,
            pharmacy_name=vendor.business_name or vendor.full_name,
            pharmacy_license=vendor.business_license,
            image_url=payload.image_url,
            is_active=True,
            is_verified=False,
        )
        product = self.repo.create(session, product)
        logger.info("Vendor %s listed product %s", vendor.id, product.id)
        return product

    def update_product(
        self,
        session: Session,
        vendor: Profile,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update of one of the vendor's products.

        Changing the MAL number sends the product back for verification.
        """
        product = self._get_owned_product(session, vendor, product_id)
        data = payload.model_dump(exclude_unset=True)

        if data.get("category_id") is not None:
            self._ensure_category(session, data["category_id"])

        if "mal_number" in data and data["mal_number"] != product.mal_number:
            product.is_verified = False

        for field, value in data.items():
            if value is not None:
                setattr(product, field, value)

        product.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, product)

    def delete_product(
        self,
        session: Session,
        vendor: Profile,
        product_id: uuid.UUID,
    ) -> None:
        product = self._get_owned_product(session, vendor, product_id)
        self._delete(session, product)

    def set_image(
        self,
        session: Session,
        vendor: Profile,
        product_id: uuid.UUID,
        content_type: str,
        file_bytes: bytes,
    ) -> Product:
        """
        Upload or replace the product image.

        - Validates content type + size.
        - Deletes the old image from Storage if it lives in our bucket.
        - Uploads the new image under the vendor's folder.
        """
        product = self._get_owned_product(session, vendor, product_id)
        ext = self._validate_and_get_ext(content_type, file_bytes)

        if product.image_url:
            delete_public_url(product.image_url)

        path = generate_object_path(vendor.id, ext, product_id=product.id)
        product.image_url = upload_to_storage(path, file_bytes, content_type)
        product.updated_at = datetime.now(timezone.utc)

        return self.repo.update(session, product)

    # ----- Admin -----

    def list_all_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        is_verified: bool | None = None,
    ) -> list[Product]:
        return self.repo.list_all(session, skip=skip, limit=limit, is_verified=is_verified)

    def set_verification(
        self,
        session: Session,
        product_id: uuid.UUID,
        is_verified: bool,
    ) -> Product:
        product = self._get_any_product(session, product_id)
        product.is_verified = is_verified
        product.updated_at = datetime.now(timezone.utc)
        logger.info("Product %s verification set to %s", product.id, is_verified)
        return self.repo.update(session, product)

    def admin_delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        product = self._get_any_product(session, product_id)
        self._delete(session, product)

    def _delete(self, session: Session, product: Product) -> None:
        """
        Delete a product row and its Storage image.

        Products that appear in orders are kept; deactivate them instead.
        """
        if self.repo.has_orders(session, product.id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Product has orders and cannot be deleted; deactivate it instead",
            )

        if product.image_url:
            delete_public_url(product.image_url)

        self.repo.delete(session, product)

    # ----- Categories -----

    def list_categories(self, session: Session) -> list[Category]:
        return self.repo.list_categories(session)

    def create_category(self, session: Session, payload: CategoryCreate) -> Category:
        if self.repo.get_category_by_name(session, payload.name) is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Category already exists",
            )
        return self.repo.create_category(
            session,
            Category(name=payload.name, description=payload.description),
        )
