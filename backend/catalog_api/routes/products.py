# catalog_api/routes/products.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from catalog_api.auth.identity import Identity
from catalog_api.auth.ownership import require_owner
from catalog_api.core.database import get_db
from catalog_api.core.validation import require_uuid
from catalog_api.dependencies.auth import get_current_user
from catalog_api.dependencies.request_shape import require_no_body
from catalog_api.models.product import Product
from catalog_api.schemas.product import ProductCreateIn, ProductOut, ProductPatchIn, ProductPutIn
from catalog_api.services.products import create_product, delete_product, get_product_or_404, update_product

router = APIRouter(prefix="/v1/product", tags=["products"])


def _load_own_product(db: Session, identity: Identity, product_id: str, action: str) -> Product:
    # 404 for a missing product wins over 403 for someone else's.
    product = get_product_or_404(db, require_uuid(product_id, "product"))
    require_owner(identity, product, f"You do not have permission to {action} this product")
    return product


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create(
    payload: ProductCreateIn,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_user),
) -> Product:
    return create_product(db, owner_user_id=identity.id, data=payload.model_dump())


@router.get("/{product_id}", response_model=ProductOut, dependencies=[Depends(require_no_body)])
def get_product(product_id: str, db: Session = Depends(get_db)) -> Product:
    return get_product_or_404(db, require_uuid(product_id, "product"))


@router.put("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def replace_product(
    product_id: str,
    payload: ProductPutIn,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_user),
) -> Response:
    product = _load_own_product(db, identity, product_id, "update")
    update_product(db, product, payload.model_dump())
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def patch_product(
    product_id: str,
    payload: ProductPatchIn,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_user),
) -> Response:
    product = _load_own_product(db, identity, product_id, "update")

    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No valid fields to update")

    update_product(db, product, changes)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_no_body)])
def remove_product(
    product_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_user),
) -> Response:
    product = _load_own_product(db, identity, product_id, "delete")
    delete_product(db, product)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
