from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel

from utils.timeliness import as_utc

# datetimes leave the api with an explicit utc offset, sqlite hands them back naive
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]

BCRYPT_MAX_BYTES = 72


class SuccessResponse(BaseModel):
    success: bool = True


class MessageResponse(SuccessResponse):
    message: str


def not_blank(value, field_name: str):
    #strip surrounding whitespace and refuse empty strings
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError(f"{field_name} must not be blank")
    return value


def check_password(value):
    if value is None:
        return value
    if len(value) < 6:
        raise ValueError("Password must be at least 6 characters")
    # bcrypt only reads the first 72 bytes
    if len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
    return value


def reject_explicit_nulls(model: BaseModel, *fields: str):
    #partial updates may omit a required field but never null it out
    for name in fields:
        if name in model.model_fields_set and getattr(model, name) is None:
            raise ValueError(f"{name} can not be null")
    return model


class RateLimitStatus(SuccessResponse):
    limit: int
    remaining: int
    used: int
    reset_at: Optional[str] = None
