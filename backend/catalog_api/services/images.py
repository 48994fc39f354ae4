from __future__ import annotations

import logging
import os
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from catalog_api.core.config import settings
from catalog_api.models.image import Image
from catalog_api.models.product import Product
from catalog_api.services.s3 import StorageError, delete_object, put_image

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tiff", ".webp"}
ALLOWED_CONTENT_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/bmp",
    "image/tiff",
    "image/webp",
}


def require_filename(raw: str | None) -> str:
    filename = os.path.basename((raw or "").replace("\\", "/")).strip()
    if not filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No image file provided")
    return filename


def require_image_type(filename: str, content_type: str | None) -> str:
    ext = os.path.splitext(filename)[1].lower()
    ctype = (content_type or "").strip().lower()
    if ext not in ALLOWED_EXTENSIONS or ctype not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Only JPEG, JPG, PNG, GIF, BMP, TIFF, and WEBP images are allowed.",
        )
    return ctype


def enforce_max_upload_bytes(size_bytes: int) -> None:
    if size_bytes == 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Image file is empty")
    if size_bytes > settings.MAX_UPLOAD_BYTES:
        max_mb = settings.MAX_UPLOAD_BYTES / (1024 * 1024)
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Max allowed size is {max_mb:.1f} MB.",
        )


def get_image_or_404(db: Session, product: Product, image_id: str) -> Image:
    image = (
        db.query(Image)
        .filter(Image.image_id == image_id, Image.product_id == product.id)
        .first()
    )
    if not image:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    return image


def store_image(
    db: Session,
    *,
    product: Product,
    owner_user_id: str,
    filename: str,
    content_type: str,
    body: bytes,
) -> Image:
    """
    Upload the bytes, then record the row. If the row cannot be written the
    uploaded object is removed again.
    """
    try:
        stored = put_image(
            user_id=owner_user_id,
            product_id=product.id,
            filename=filename,
            content_type=content_type,
            body=body,
        )
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e

    image = Image(
        product_id=product.id,
        owner_user_id=owner_user_id,
        file_name=filename,
        s3_bucket_path=stored.s3_key,
        file_size=len(body),
        content_type=content_type,
        etag=stored.etag,
        version_id=stored.version_id,
        server_side_encryption=stored.server_side_encryption,
        upload_metadata={
            "original_filename": filename,
            "upload_timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )
    db.add(image)
    try:
        db.commit()
    except Exception:
        db.rollback()
        try:
            delete_object(stored.s3_key)
        except StorageError:
            logger.warning("Orphaned image object left in storage: key=%s", stored.s3_key)
        raise

    db.refresh(image)
    logger.info("Image stored: image_id=%s product_id=%s size=%s", image.image_id, product.id, len(body))
    return image


def delete_image(db: Session, image: Image) -> None:
    """
    Delete the row first; the stored object is removed only once the delete
    is committed. Object-store failures are logged, not raised.
    """
    key = image.s3_bucket_path
    image_id = image.image_id
    db.delete(image)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Image deleted: image_id=%s", image_id)

    try:
        delete_object(key)
    except StorageError:
        logger.warning("Orphaned image object left in storage: key=%s", key)
