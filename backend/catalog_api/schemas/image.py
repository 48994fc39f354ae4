from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ImageOut(BaseModel):
    image_id: str
    product_id: str
    file_name: str
    date_created: datetime
    s3_bucket_path: str

    model_config = ConfigDict(from_attributes=True)
