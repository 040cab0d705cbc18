import json
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_user, get_token
from core.config import settings
from core.database import get_db
from core.logger import get_logger
from core.security import ACCESS_TOKEN_EXPIRE_MINUTES, TOKEN_COOKIE, USER_COOKIE
from models.user import User
from schemas.auth import RegisterUser, AuthResponse, Login
from schemas.common import MessageResponse
from schemas.user import UserEnvelope, UserResponse, DeveloperListResponse
from services.auth import AuthService
from services.user import UserService


auth_router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = get_logger(__name__)


def user_cookie_value(user: User) -> str:
    #what page scripts and the page guard read back, URL-encoded JSON
    return quote(json.dumps({
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
    }))


def set_session_cookies(response: Response, token: str, user: User):
    max_age = ACCESS_TOKEN_EXPIRE_MINUTES * 60
    response.set_cookie(TOKEN_COOKIE, token, max_age=max_age, httponly=True,
                        secure=settings.is_production, samesite="strict", path="/")
    response.set_cookie(USER_COOKIE, user_cookie_value(user), max_age=max_age, httponly=False,
                        secure=settings.is_production, samesite="strict", path="/")


def clear_session_cookies(response: Response):
    response.delete_cookie(TOKEN_COOKIE, path="/")
    response.delete_cookie(USER_COOKIE, path="/")


@auth_router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user: RegisterUser, db: AsyncSession = Depends(get_db) ):
    new_user = await AuthService.register_user(db, user)
    return {"token": AuthService.create_token(new_user), "user": UserResponse.model_validate(new_user)}

@auth_router.post("/login", response_model = AuthResponse )
async def login(login_data: Login, response: Response, db: AsyncSession = Depends(get_db)):
    user = await AuthService.authenticate_user(db, login_data)
    token = AuthService.create_token(user)
    set_session_cookies(response, token, user)
    logger.info(f"User logged in: {user.email}")
    return {"token": token, "user": UserResponse.model_validate(user)}

@auth_router.post("/logout", response_model=MessageResponse)
async def logout(response: Response, token: Optional[str] = Depends(get_token)):
    if token:
        await AuthService.logout(token)
    clear_session_cookies(response)
    return {"message": "Logged out successfully"}

@auth_router.get("/user", response_model=UserEnvelope)
async def get_user(current_user: User = Depends(get_current_user)):
    return {"user": UserResponse.model_validate(current_user)}

@auth_router.post("/user", response_model=DeveloperListResponse)
async def list_developers(current_user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    developers = await UserService.list_developers(db)
    return {"developers": [UserResponse.model_validate(dev) for dev in developers]}
