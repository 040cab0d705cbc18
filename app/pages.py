from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_user
from core.config import settings
from core.database import get_db
from core.security import TOKEN_COOKIE
from models.user import User, UserRole
from services.dashboard import DashboardService

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

page_router = APIRouter(include_in_schema=False)


async def get_page_user(request: Request, db: AsyncSession = Depends(get_db)) -> Optional[User]:
    #the signed-in user for a page request, None when the session cookie is missing or stale
    try:
        return await get_current_user(request.cookies.get(TOKEN_COOKIE), db)
    except HTTPException:
        return None


def dashboard_path(user: User) -> str:
    return f"/{user.role.value}"


def _to_login() -> RedirectResponse:
    response = RedirectResponse("/login", status_code=303)
    response.delete_cookie(TOKEN_COOKIE, path="/")
    return response


@page_router.get("/", response_class=HTMLResponse)
async def home(user: Optional[User] = Depends(get_page_user)):
    if user is None:
        return _to_login()
    return RedirectResponse(dashboard_path(user), status_code=303)


@page_router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {
        "project_name": settings.project_name,
        "api_prefix": settings.api_v1_prefix,
    })


@page_router.get("/manager", response_class=HTMLResponse)
async def manager_page(request: Request, user: Optional[User] = Depends(get_page_user),
                       db: AsyncSession = Depends(get_db)):
    if user is None:
        return _to_login()
    if user.role != UserRole.MANAGER:
        return RedirectResponse(dashboard_path(user), status_code=303)

    dashboard = await DashboardService.manager_dashboard(db, user)
    return templates.TemplateResponse(request, "manager.html", {
        "project_name": settings.project_name,
        "api_prefix": settings.api_v1_prefix,
        "user": user,
        "dashboard": dashboard,
    })


@page_router.get("/developer", response_class=HTMLResponse)
async def developer_page(request: Request, user: Optional[User] = Depends(get_page_user),
                         db: AsyncSession = Depends(get_db)):
    if user is None:
        return _to_login()
    if user.role != UserRole.DEVELOPER:
        return RedirectResponse(dashboard_path(user), status_code=303)

    dashboard = await DashboardService.developer_dashboard(db, user)
    return templates.TemplateResponse(request, "developer.html", {
        "project_name": settings.project_name,
        "api_prefix": settings.api_v1_prefix,
        "user": user,
        "dashboard": dashboard,
    })
