from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictInt, model_validator

from catalog_api.schemas._fields import Name255, NonEmptyText, reject_explicit_nulls

QUANTITY_MIN = 0
QUANTITY_MAX = 100


class ProductCreateIn(BaseModel):
    name: Name255
    description: NonEmptyText
    sku: Name255
    manufacturer: Name255
    quantity: StrictInt = Field(default=0, ge=QUANTITY_MIN, le=QUANTITY_MAX)

    model_config = ConfigDict(extra="forbid")


class ProductPutIn(BaseModel):
    name: Name255
    description: NonEmptyText
    sku: Name255
    manufacturer: Name255
    quantity: StrictInt = Field(ge=QUANTITY_MIN, le=QUANTITY_MAX)

    model_config = ConfigDict(extra="forbid")


class ProductPatchIn(BaseModel):
    name: Name255 | None = None
    description: NonEmptyText | None = None
    sku: Name255 | None = None
    manufacturer: Name255 | None = None
    quantity: StrictInt | None = Field(default=None, ge=QUANTITY_MIN, le=QUANTITY_MAX)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def reject_nulls(cls, data):
        return reject_explicit_nulls(data)


class ProductOut(BaseModel):
    id: str
    name: str
    description: str
    sku: str
    manufacturer: str
    quantity: int
    date_added: datetime
    date_last_updated: datetime
    owner_user_id: str

    model_config = ConfigDict(from_attributes=True)
