from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession


from core.logger import get_logger
from core.database import get_db
from schemas.user import UserEnvelope, UserResponse, UserUpdate, DeveloperListResponse
from services.user import UserService
from app.api.dependencies import rate_limited_user
from models.user import User



user_router = APIRouter(prefix="/users", tags=["User"])
logger = get_logger(__name__)

@user_router.get("/me", response_model=UserEnvelope, status_code=status.HTTP_200_OK)
async def get_current_user_profile(current_user: User = Depends(rate_limited_user)):
    return {"user": UserResponse.model_validate(current_user)}

@user_router.patch("/me", response_model=UserEnvelope, status_code=status.HTTP_200_OK)
async def update_current_user_profile(update:UserUpdate, db: AsyncSession = Depends(get_db), current_user: User= Depends(rate_limited_user)):
    updated = await UserService.update_user(db,current_user,update)
    return {"user": UserResponse.model_validate(updated)}

@user_router.get("/developers", response_model=DeveloperListResponse, status_code=status.HTTP_200_OK)
async def list_developers(current_user: User = Depends(rate_limited_user), db: AsyncSession = Depends(get_db)):
    developers = await UserService.list_developers(db)
    return {"developers": [UserResponse.model_validate(dev) for dev in developers]}
