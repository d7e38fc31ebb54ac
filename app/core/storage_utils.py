# app/core/storage_utils.py
import time
import uuid

from app.core.config import get_settings
from app.core.supabase_client import supabase_admin

settings = get_settings()


def _bucket():
    return supabase_admin().storage.from_(settings.PRODUCT_IMAGE_BUCKET)


def upload_to_storage(path: str, file_bytes: bytes, content_type: str) -> str:
    """
    Upload raw bytes to Supabase Storage and return a public URL.

    Args:
        path: Full object path inside the bucket.
              Example: "<vendor_id>/<product_id>_<ts>_<rand>.png"
        file_bytes: File content in bytes.
        content_type: MIME type stored with the object.

    Returns:
        Public URL to the uploaded file.

    Raises:
        Any exception raised by Supabase client if upload fails.
    """
    _bucket().upload(
        path,
        file_bytes,
        {"content-type": content_type, "cache-control": "3600", "upsert": "false"},
    )
    return _bucket().get_public_url(path)


def delete_from_storage(path: str) -> None:
    """
    Delete a file from Supabase Storage by its object path
    (relative to the bucket).
    """
    _bucket().remove([path])


def extract_path_from_public_url(url: str) -> str | None:
    """
    Given a public URL, extract the object path relative to the bucket.

    Example:
        https://<proj>.supabase.co/storage/v1/object/public/product-images/v/p.png
        -> 'v/p.png'
    """
    marker = f"/storage/v1/object/public/{settings.PRODUCT_IMAGE_BUCKET}/"
    idx = url.find(marker)
    if idx == -1:
        return None
    return url[idx + len(marker) :] or None


def delete_public_url(url: str) -> bool:
    """
    Convenience helper: delete a file by its public URL.

    Returns False (no-op) if the URL does not belong to this bucket.
    """
    path = extract_path_from_public_url(url)
    if not path:
        return False
    delete_from_storage(path)
    return True


def generate_object_path(vendor_id: uuid.UUID, ext: str, product_id: uuid.UUID | None = None) -> str:
    """
    Build a unique object path for a product image.

    Pattern:
        <vendor_id>/<product_id>_<ms timestamp>_<random>.<ext>
        <vendor_id>/temp_<ms timestamp>_<random>.<ext>   (no product yet)
    """
    stamp = int(time.time() * 1000)
    suffix = uuid.uuid4().hex[:6]
    prefix = str(product_id) if product_id else "temp"
    return f"{vendor_id}/{prefix}_{stamp}_{suffix}.{ext}"
