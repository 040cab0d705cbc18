from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from core.logger import get_logger
from models.comment import CommentTarget
from models.subtask import SubTask
from models.user import User
from schemas.subtask import SubTaskCreate, SubTaskUpdate
from services.task import TaskService, apply_status

logger = get_logger(__name__)


class SubTaskService:
    @staticmethod
    async def get_subtask(db: AsyncSession, subtask_id: UUID) -> SubTask:
        query = select(SubTask).where(SubTask.id == subtask_id).execution_options(populate_existing=True)
        result = await db.execute(query)
        subtask = result.scalar_one_or_none()

        if not subtask:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Subtask not found"
            )
        return subtask

    @staticmethod
    async def list_subtasks(db: AsyncSession, task_id: UUID) -> list[SubTask]:
        query = select(SubTask).where(SubTask.task_id == task_id).order_by(SubTask.created_at.desc())
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def create_subtask(db: AsyncSession, data: SubTaskCreate, current_user: User) -> SubTask:
        task = await TaskService.get_task(db, data.task_id)

        new_subtask = SubTask(
            task_id=task.id,
            title=data.title,
            description=data.description,
            deadline=data.deadline,
            created_by=current_user.id
        )
        db.add(new_subtask)
        await db.commit()

        logger.info(f"Subtask {new_subtask.id} created on task {task.id} by user {current_user.id}")
        return await SubTaskService.get_subtask(db, new_subtask.id)

    @staticmethod
    async def update_subtask(db: AsyncSession, subtask_id: UUID, data: SubTaskUpdate) -> SubTask:
        subtask = await SubTaskService.get_subtask(db, subtask_id)
        changes = data.model_dump(exclude_unset=True)

        new_status = changes.pop("status", None)
        if new_status is not None:
            apply_status(subtask, new_status)

        for field, value in changes.items():
            setattr(subtask, field, value)

        await db.commit()
        logger.info(f"Subtask {subtask_id} updated")
        return await SubTaskService.get_subtask(db, subtask_id)

    @staticmethod
    async def delete_subtask(db: AsyncSession, subtask_id: UUID):
        from services.comment import CommentService

        subtask = await SubTaskService.get_subtask(db, subtask_id)
        await CommentService.purge_comments(db, CommentTarget.SUBTASK, [subtask.id])
        await db.execute(delete(SubTask).where(SubTask.id == subtask.id))
        await db.commit()
        logger.info(f"Subtask {subtask_id} deleted")
