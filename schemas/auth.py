from pydantic import BaseModel, EmailStr, Field, field_validator

from models.user import UserRole
from schemas.common import SuccessResponse, check_password, not_blank
from schemas.user import UserResponse


class RegisterUser(BaseModel):
    name: str = Field(..., max_length=255)
    email: EmailStr
    password: str
    role: UserRole

    @field_validator('password')
    def validate_password(cls, v) -> str:
        return check_password(v)

    @field_validator('name')
    def validate_name(cls, v):
        return not_blank(v, "name")


class Login(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthResponse(SuccessResponse):
    token: str
    user: UserResponse
