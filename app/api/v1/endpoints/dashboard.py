from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import require_developer, require_manager
from core.database import get_db
from models.user import User
from schemas.dashboard import DeveloperDashboard, ManagerDashboard
from services.dashboard import DashboardService

dashboard_router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@dashboard_router.get("/manager", response_model=ManagerDashboard, status_code=status.HTTP_200_OK)
async def manager_dashboard(current_user: User = Depends(require_manager), db: AsyncSession = Depends(get_db)):
    return await DashboardService.manager_dashboard(db, current_user)


@dashboard_router.get("/developer", response_model=DeveloperDashboard, status_code=status.HTTP_200_OK)
async def developer_dashboard(current_user: User = Depends(require_developer), db: AsyncSession = Depends(get_db)):
    return await DashboardService.developer_dashboard(db, current_user)
