from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional

from models.user import UserRole
from schemas.common import SuccessResponse, UtcDatetime, check_password, not_blank, reject_explicit_nulls


class UserSummary(BaseModel):
    #the populated form of a user reference
    id: UUID
    name: str
    email: EmailStr

    class Config:
        from_attributes = True


class UserResponse(UserSummary):
    role: UserRole
    created_at: UtcDatetime
    updated_at: UtcDatetime

    class Config:
        from_attributes = True


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = None

    @field_validator('name')
    def validate_name(cls, v):
        return not_blank(v, "name")

    @field_validator('password')
    def validate_password(cls, v):
        return check_password(v)

    @model_validator(mode="after")
    def validate_nulls(self):
        return reject_explicit_nulls(self, "name", "email", "password")


class UserEnvelope(SuccessResponse):
    user: UserResponse


class DeveloperListResponse(SuccessResponse):
    developers: list[UserResponse]
