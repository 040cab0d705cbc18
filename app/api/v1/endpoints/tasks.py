from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from models.task import TaskPriority, TaskStatus
from models.user import User
from schemas.common import MessageResponse
from schemas.task import TaskCreate, TaskUpdate, TaskResponse, TaskEnvelope, TaskListResponse
from app.api.dependencies import rate_limited_user, require_manager
from services.task import TaskService

task_router = APIRouter(prefix="/tasks", tags=["Task"])


@task_router.post("",response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
async def create_task(task: TaskCreate, current_user: User= Depends(require_manager), db: AsyncSession = Depends(get_db)):
    new_task = await TaskService.create_task(db, task, current_user)
    return {"task": TaskResponse.model_validate(new_task)}

@task_router.get("", response_model=TaskListResponse, status_code=status.HTTP_200_OK)
async def get_tasks(project_id: Optional[UUID] = Query(None, description="project whose tasks to list"),
                    status: Optional[TaskStatus] = Query(None, description="filter by status"),
                    priority: Optional[TaskPriority] = Query(None, description="filter by priority"),
                    current_user: User = Depends (rate_limited_user),
                    db: AsyncSession = Depends(get_db)
                    ):
    if project_id is None:
        raise HTTPException(status_code=400, detail="Project ID is required")

    tasks = await TaskService.list_tasks(db, project_id, status=status, priority=priority)
    return {"tasks": [TaskResponse.model_validate(task) for task in tasks]}

@task_router.get("/my-tasks", response_model=TaskListResponse, status_code=status.HTTP_200_OK)
async def get_my_tasks(current_user: User = Depends(rate_limited_user), db: AsyncSession = Depends(get_db)):
    tasks = await TaskService.list_assigned_tasks(db, current_user)
    return {"tasks": [TaskResponse.model_validate(task) for task in tasks]}

@task_router.get("/{task_id}", response_model=TaskEnvelope, status_code=status.HTTP_200_OK)
async def get_task(task_id: UUID, current_user: User= Depends(rate_limited_user), db: AsyncSession = Depends(get_db)):
    task = await TaskService.get_task(db, task_id)
    return {"task": TaskResponse.model_validate(task)}

@task_router.put("/{task_id}", response_model=TaskEnvelope, status_code=status.HTTP_200_OK)
async def update_task(task_id: UUID, update: TaskUpdate, current_user: User = Depends(rate_limited_user),
                      db: AsyncSession = Depends(get_db)):
    task = await TaskService.update_task(db, task_id, update, current_user)
    return {"task": TaskResponse.model_validate(task)}

@task_router.delete("/{task_id}", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def delete_task(task_id: UUID, current_user: User = Depends(require_manager), db: AsyncSession = Depends(get_db)):
    await TaskService.delete_task(db, task_id)
    return {"message": "Task deleted successfully"}
