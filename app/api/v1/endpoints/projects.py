from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import rate_limited_user, require_manager
from core.database import get_db
from models.user import User
from schemas.common import MessageResponse
from schemas.project import ProjectCreate, ProjectUpdate, ProjectEnvelope, ProjectListResponse, ProjectResponse
from services.project import ProjectService

project_router = APIRouter(prefix="/projects", tags=["Project"])


@project_router.get("", response_model=ProjectListResponse, status_code=status.HTTP_200_OK)
async def get_projects(created_by: Optional[UUID] = Query(None, description="only projects created by this user"),
                       current_user: User = Depends(rate_limited_user),
                       db: AsyncSession = Depends(get_db)):
    projects = await ProjectService.list_projects(db, created_by=created_by)
    return {"projects": [ProjectResponse.model_validate(project) for project in projects]}

@project_router.post("", response_model=ProjectEnvelope, status_code=status.HTTP_201_CREATED)
async def create_project(project: ProjectCreate, current_user: User = Depends(require_manager),
                         db: AsyncSession = Depends(get_db)):
    new_project = await ProjectService.create_project(db, project, current_user)
    return {"project": ProjectResponse.model_validate(new_project)}

@project_router.get("/{project_id}", response_model=ProjectEnvelope, status_code=status.HTTP_200_OK)
async def get_project(project_id: UUID, current_user: User = Depends(rate_limited_user),
                      db: AsyncSession = Depends(get_db)):
    project = await ProjectService.get_project(db, project_id)
    return {"project": ProjectResponse.model_validate(project)}

@project_router.put("/{project_id}", response_model=ProjectEnvelope, status_code=status.HTTP_200_OK)
async def update_project(project_id: UUID, update: ProjectUpdate, current_user: User = Depends(require_manager),
                         db: AsyncSession = Depends(get_db)):
    project = await ProjectService.update_project(db, project_id, update)
    return {"project": ProjectResponse.model_validate(project)}

@project_router.delete("/{project_id}", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def delete_project(project_id: UUID, current_user: User = Depends(require_manager),
                         db: AsyncSession = Depends(get_db)):
    await ProjectService.delete_project(db, project_id)
    return {"message": "Project deleted successfully"}
