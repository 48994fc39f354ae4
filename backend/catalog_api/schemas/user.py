from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from catalog_api.core.password_policy import PASSWORD_MAX_LENGTH
from catalog_api.schemas._fields import Name255, reject_explicit_nulls


class UserCreateIn(BaseModel):
    email: EmailStr
    # Strength rules are enforced by core.password_policy so the error carries violation codes.
    password: str = Field(max_length=PASSWORD_MAX_LENGTH)
    first_name: Name255
    last_name: Name255

    model_config = ConfigDict(extra="forbid")


class UserPutIn(BaseModel):
    password: str = Field(max_length=PASSWORD_MAX_LENGTH)
    first_name: Name255
    last_name: Name255

    model_config = ConfigDict(extra="forbid")


class UserPatchIn(BaseModel):
    password: str | None = Field(default=None, max_length=PASSWORD_MAX_LENGTH)
    first_name: Name255 | None = None
    last_name: Name255 | None = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def reject_nulls(cls, data):
        return reject_explicit_nulls(data)


class UserOut(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    email_verified: bool
    account_created: datetime
    account_updated: datetime

    model_config = ConfigDict(from_attributes=True)
