from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catalog_api.models.product import Product
from catalog_api.services.s3 import StorageError, delete_object

logger = logging.getLogger(__name__)


def get_product_or_404(db: Session, product_id: str) -> Product:
    product = db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


def ensure_sku_available(db: Session, sku: str, *, current: Product | None = None) -> None:
    if current is not None and current.sku == sku:
        return
    existing = db.query(Product).filter(Product.sku == sku).first()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Product with this SKU already exists")


def apply_product_changes(product: Product, changes: dict) -> None:
    for field, value in changes.items():
        setattr(product, field, value)
    product.touch_updated_at()


def delete_product(db: Session, product: Product) -> None:
    """
    Delete the product row (images cascade) and best-effort remove the
    stored image objects.
    """
    keys = [img.s3_bucket_path for img in product.images]
    db.delete(product)
    db.commit()

    for key in keys:
        try:
            delete_object(key)
        except StorageError:
            logger.warning("Orphaned image object left in storage: key=%s", key)


def create_product(db: Session, *, owner_user_id: str, data: dict) -> Product:
    ensure_sku_available(db, data["sku"])
    product = Product(owner_user_id=owner_user_id, **data)
    db.add(product)
    _commit_or_conflict(db)
    db.refresh(product)
    logger.info("Product created: product_id=%s owner=%s", product.id, owner_user_id)
    return product


def update_product(db: Session, product: Product, changes: dict) -> Product:
    if "sku" in changes:
        ensure_sku_available(db, changes["sku"], current=product)
    apply_product_changes(product, changes)
    db.add(product)
    _commit_or_conflict(db)
    db.refresh(product)
    logger.info("Product updated: product_id=%s fields=%s", product.id, sorted(changes))
    return product


def _commit_or_conflict(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        # Concurrent writer took the SKU between the check and the commit.
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Product with this SKU already exists")
