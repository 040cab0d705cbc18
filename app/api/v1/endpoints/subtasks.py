from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import rate_limited_user
from core.database import get_db
from models.user import User
from schemas.common import MessageResponse
from schemas.subtask import SubTaskCreate, SubTaskUpdate, SubTaskResponse, SubTaskEnvelope, SubTaskListResponse
from services.subtask import SubTaskService

subtask_router = APIRouter(prefix="/subtasks", tags=["SubTask"])


@subtask_router.get("", response_model=SubTaskListResponse, status_code=status.HTTP_200_OK)
async def get_subtasks(task_id: Optional[UUID] = Query(None, description="task whose subtasks to list"),
                       current_user: User = Depends(rate_limited_user),
                       db: AsyncSession = Depends(get_db)):
    if task_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Task ID is required")

    subtasks = await SubTaskService.list_subtasks(db, task_id)
    return {"subtasks": [SubTaskResponse.model_validate(subtask) for subtask in subtasks]}

@subtask_router.post("", response_model=SubTaskEnvelope, status_code=status.HTTP_201_CREATED)
async def create_subtask(subtask: SubTaskCreate, current_user: User = Depends(rate_limited_user),
                         db: AsyncSession = Depends(get_db)):
    new_subtask = await SubTaskService.create_subtask(db, subtask, current_user)
    return {"subtask": SubTaskResponse.model_validate(new_subtask)}

@subtask_router.put("/{subtask_id}", response_model=SubTaskEnvelope, status_code=status.HTTP_200_OK)
async def update_subtask(subtask_id: UUID, update: SubTaskUpdate, current_user: User = Depends(rate_limited_user),
                         db: AsyncSession = Depends(get_db)):
    subtask = await SubTaskService.update_subtask(db, subtask_id, update)
    return {"subtask": SubTaskResponse.model_validate(subtask)}

@subtask_router.delete("/{subtask_id}", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def delete_subtask(subtask_id: UUID, current_user: User = Depends(rate_limited_user),
                         db: AsyncSession = Depends(get_db)):
    await SubTaskService.delete_subtask(db, subtask_id)
    return {"message": "Subtask deleted successfully"}
