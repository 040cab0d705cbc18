from datetime import datetime, timezone
from uuid import UUID
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from models.comment import CommentTarget
from models.subtask import SubTask
from models.task import Task, TaskStatus, TaskPriority
from schemas.task import TaskCreate, TaskUpdate
from core.logger import get_logger
from models.user import User, UserRole
from services.project import ProjectService
from services.user import UserService
from tasks.email import send_task_assigned_email

logger = get_logger(__name__)


def apply_status(item, new_status: TaskStatus):
    """Move a task or subtask to new_status, keeping completed_at consistent.

    Entering completed stamps the time, leaving it clears the stamp and
    re-saving completed keeps the original stamp.
    """
    if new_status == TaskStatus.COMPLETED:
        if item.status != TaskStatus.COMPLETED or item.completed_at is None:
            item.completed_at = datetime.now(timezone.utc)
    else:
        item.completed_at = None
    item.status = new_status


def _queue_assignment_email(task: Task, assigned_by: User):
    try:
        send_task_assigned_email.delay(
            user_email=task.assignee.email,
            task_title=task.title,
            project_title=task.project.title,
            assigned_by=assigned_by.name,
            deadline=task.deadline.isoformat()
        )
    except Exception as e:
        logger.error(f"Failed to queue assignment email for task {task.id}: {e}")


class TaskService:
    @staticmethod
    async def get_task(db: AsyncSession, task_id: UUID) -> Task:
        query = select(Task).where(Task.id == task_id).execution_options(populate_existing=True)
        result = await db.execute(query)
        task = result.scalar_one_or_none()

        if not task:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Task not found"
            )
        return task

    @staticmethod
    async def create_task(db: AsyncSession, data: TaskCreate, current_user: User) -> Task:
        project = await ProjectService.get_project(db, data.project_id)
        await UserService.get_developer(db, data.assigned_to)

        new_task = Task(
            project_id=project.id,
            title=data.title,
            description=data.description,
            priority=data.priority,
            deadline=data.deadline,
            assigned_to=data.assigned_to,
            created_by=current_user.id
        )

        db.add(new_task)
        await db.commit()

        task = await TaskService.get_task(db, new_task.id)
        logger.info(f"Task created with id {task.id} in project {project.id}")

        _queue_assignment_email(task, current_user)
        return task

    @staticmethod
    async def list_tasks(db: AsyncSession, project_id: UUID, status: Optional[TaskStatus] = None,
                         priority: Optional[TaskPriority] = None) -> list[Task]:

        query = select(Task).where(Task.project_id == project_id)

        if status:
            query = query.where(Task.status == status)

        if priority:
            query = query.where(Task.priority == priority)

        query = query.order_by(Task.created_at.desc())
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def list_assigned_tasks(db: AsyncSession, user: User) -> list[Task]:
        query = select(Task).where(Task.assigned_to == user.id).order_by(Task.deadline.asc())
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def update_task(db: AsyncSession, task_id: UUID, data: TaskUpdate, current_user: User) -> Task:
        task = await TaskService.get_task(db, task_id)
        changes = data.model_dump(exclude_unset=True)

        if current_user.role == UserRole.DEVELOPER:
            if task.assigned_to != current_user.id:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="You can only update tasks assigned to you"
                )
            if set(changes) - {"status"}:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Developers can only update task status"
                )

        reassigned = "assigned_to" in changes and changes["assigned_to"] != task.assigned_to
        if reassigned:
            await UserService.get_developer(db, changes["assigned_to"])

        new_status = changes.pop("status", None)
        if new_status is not None:
            apply_status(task, new_status)

        for field, value in changes.items():
            setattr(task, field, value)

        await db.commit()
        task = await TaskService.get_task(db, task_id)
        logger.info(f"Task {task_id} updated by user {current_user.id}")

        if reassigned:
            _queue_assignment_email(task, current_user)
        return task

    @staticmethod
    async def purge_tasks(db: AsyncSession, task_ids: list[UUID]):
        """Delete tasks with their subtasks and every comment on either. Does not commit."""
        from services.comment import CommentService

        if not task_ids:
            return

        result = await db.execute(select(SubTask.id).where(SubTask.task_id.in_(task_ids)))
        subtask_ids = list(result.scalars().all())

        await CommentService.purge_comments(db, CommentTarget.SUBTASK, subtask_ids)
        await CommentService.purge_comments(db, CommentTarget.TASK, task_ids)
        await db.execute(delete(SubTask).where(SubTask.task_id.in_(task_ids)))
        await db.execute(delete(Task).where(Task.id.in_(task_ids)))

    @staticmethod
    async def delete_task(db: AsyncSession, task_id: UUID):
        task = await TaskService.get_task(db, task_id)
        await TaskService.purge_tasks(db, [task.id])
        await db.commit()
        logger.info(f"Task {task_id} deleted")
