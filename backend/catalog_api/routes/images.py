# catalog_api/routes/images.py
"""
Product images.

Listing and fetching are public. Upload and delete belong to the product's
owner; the object lives in S3 and the row records where.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from sqlalchemy.orm import Session

from catalog_api.auth.identity import Identity
from catalog_api.auth.ownership import require_owner
from catalog_api.core.config import settings
from catalog_api.core.database import get_db
from catalog_api.core.validation import require_uuid
from catalog_api.dependencies.auth import get_current_user
from catalog_api.dependencies.request_shape import require_no_body
from catalog_api.models.image import Image
from catalog_api.schemas.image import ImageOut
from catalog_api.services.images import (
    delete_image,
    enforce_max_upload_bytes,
    get_image_or_404,
    require_filename,
    require_image_type,
    store_image,
)
from catalog_api.services.products import get_product_or_404

router = APIRouter(prefix="/v1/product/{product_id}/image", tags=["images"])


@router.post("", response_model=ImageOut, status_code=status.HTTP_201_CREATED)
def upload_image(
    product_id: str,
    image: UploadFile | None = File(None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_user),
) -> Image:
    product = get_product_or_404(db, require_uuid(product_id, "product"))
    require_owner(identity, product, "You do not have permission to upload images to this product")

    filename = require_filename(image.filename if image is not None else None)
    content_type = require_image_type(filename, image.content_type)

    # Read one byte past the limit so oversize uploads are detected without buffering them whole.
    body = image.file.read(settings.MAX_UPLOAD_BYTES + 1)
    enforce_max_upload_bytes(len(body))

    return store_image(
        db,
        product=product,
        owner_user_id=identity.id,
        filename=filename,
        content_type=content_type,
        body=body,
    )


@router.get("", response_model=list[ImageOut], dependencies=[Depends(require_no_body)])
def list_images(product_id: str, db: Session = Depends(get_db)) -> list[Image]:
    product = get_product_or_404(db, require_uuid(product_id, "product"))
    return list(product.images)


@router.get("/{image_id}", response_model=ImageOut, dependencies=[Depends(require_no_body)])
def get_image(product_id: str, image_id: str, db: Session = Depends(get_db)) -> Image:
    product = get_product_or_404(db, require_uuid(product_id, "product"))
    return get_image_or_404(db, product, require_uuid(image_id, "image"))


@router.delete("/{image_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_no_body)])
def remove_image(
    product_id: str,
    image_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_user),
) -> Response:
    product = get_product_or_404(db, require_uuid(product_id, "product"))
    image = get_image_or_404(db, product, require_uuid(image_id, "image"))
    require_owner(identity, product, "You do not have permission to delete images of this product")

    delete_image(db, image)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
