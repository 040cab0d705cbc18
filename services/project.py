from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from core.logger import get_logger
from models.project import Project
from models.task import Task
from models.user import User
from schemas.project import ProjectCreate, ProjectUpdate
from utils.timeliness import as_utc

logger = get_logger(__name__)


class ProjectService:
    @staticmethod
    async def get_project(db: AsyncSession, project_id: UUID) -> Project:
        query = select(Project).where(Project.id == project_id).execution_options(populate_existing=True)
        result = await db.execute(query)
        project = result.scalar_one_or_none()

        if not project:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Project not found"
            )
        return project

    @staticmethod
    async def list_projects(db: AsyncSession, created_by: Optional[UUID] = None) -> list[Project]:
        query = select(Project).order_by(Project.created_at.desc())
        if created_by:
            query = query.where(Project.created_by == created_by)

        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def create_project(db: AsyncSession, data: ProjectCreate, current_user: User) -> Project:
        new_project = Project(
            title=data.title,
            description=data.description,
            status=data.status,
            deadline=data.deadline,
            created_by=current_user.id
        )
        if data.start_date:
            new_project.start_date = data.start_date

        db.add(new_project)
        await db.commit()

        logger.info(f"Project created with id {new_project.id} by manager {current_user.id}")
        return await ProjectService.get_project(db, new_project.id)

    @staticmethod
    async def update_project(db: AsyncSession, project_id: UUID, data: ProjectUpdate) -> Project:
        project = await ProjectService.get_project(db, project_id)

        changes = data.model_dump(exclude_unset=True)
        start_date = changes.get("start_date", project.start_date)
        deadline = changes.get("deadline", project.deadline)
        if as_utc(deadline) < as_utc(start_date):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="deadline can not be before start_date"
            )

        for field, value in changes.items():
            setattr(project, field, value)

        await db.commit()
        logger.info(f"Project {project_id} updated: {sorted(changes)}")
        return await ProjectService.get_project(db, project_id)

    @staticmethod
    async def delete_project(db: AsyncSession, project_id: UUID):
        from services.task import TaskService

        project = await ProjectService.get_project(db, project_id)

        result = await db.execute(select(Task.id).where(Task.project_id == project.id))
        task_ids = list(result.scalars().all())
        await TaskService.purge_tasks(db, task_ids)

        await db.execute(delete(Project).where(Project.id == project.id))
        await db.commit()

        logger.info(f"Project {project_id} deleted along with {len(task_ids)} tasks")
