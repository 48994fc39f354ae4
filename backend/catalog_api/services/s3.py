import logging
import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from catalog_api.core.config import settings

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    pass


@dataclass(frozen=True)
class StoredObject:
    s3_key: str
    etag: str | None
    version_id: str | None
    server_side_encryption: str


def _client():
    return boto3.client("s3", region_name=settings.AWS_REGION)


def build_s3_key(user_id: str, product_id: str, original_filename: str) -> str:
    # Partitioned by owner, then product.
    ext = os.path.splitext(original_filename)[1].lower()
    key = f"users/{user_id}/products/{product_id}/{uuid.uuid4()}{ext}"
    if settings.S3_PREFIX:
        key = f"{settings.S3_PREFIX}/{key}"
    return key


def put_image(
    *,
    user_id: str,
    product_id: str,
    filename: str,
    content_type: str,
    body: bytes,
) -> StoredObject:
    s3 = _client()
    key = build_s3_key(user_id, product_id, filename)

    try:
        res = s3.put_object(
            Bucket=settings.S3_BUCKET_NAME,
            Key=key,
            Body=body,
            ContentType=content_type,
            ServerSideEncryption="AES256",
            Metadata={
                "user-id": user_id,
                "product-id": product_id,
                "original-filename": filename,
                "uploaded-at": datetime.now(timezone.utc).isoformat(),
            },
        )
    except (ClientError, BotoCoreError) as e:
        logger.exception("S3 upload failed: key=%s", key)
        raise StorageError("Failed to upload image to storage") from e

    etag = res.get("ETag")
    logger.info("S3 upload completed: key=%s etag=%s", key, etag)
    return StoredObject(
        s3_key=key,
        etag=etag.strip('"') if etag else None,
        version_id=res.get("VersionId"),
        server_side_encryption=res.get("ServerSideEncryption") or "AES256",
    )


def delete_object(s3_key: str) -> None:
    s3 = _client()
    try:
        s3.delete_object(Bucket=settings.S3_BUCKET_NAME, Key=s3_key)
    except (ClientError, BotoCoreError) as e:
        logger.exception("S3 delete failed: key=%s", s3_key)
        raise StorageError("Failed to delete image from storage") from e
