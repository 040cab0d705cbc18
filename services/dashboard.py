from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from core.logger import get_logger
from models.comment import Comment, CommentTarget
from models.subtask import SubTask
from models.task import Task, TaskStatus
from models.user import User
from schemas.dashboard import (
    DeveloperDashboard,
    DeveloperStats,
    DeveloperTask,
    ManagerDashboard,
    ManagerStats,
    ProjectProgress,
)
from services.project import ProjectService
from services.task import TaskService
from utils.timeliness import is_overdue, percentage

logger = get_logger(__name__)


def _completed_count(status_column):
    return func.sum(case((status_column == TaskStatus.COMPLETED, 1), else_=0))


class DashboardService:
    @staticmethod
    async def manager_dashboard(db: AsyncSession, manager: User) -> ManagerDashboard:
        projects = await ProjectService.list_projects(db, created_by=manager.id)

        counts = {}
        if projects:
            query = (
                select(Task.project_id, func.count(Task.id), _completed_count(Task.status))
                .where(Task.project_id.in_([project.id for project in projects]))
                .group_by(Task.project_id)
            )
            result = await db.execute(query)
            counts = {project_id: (total, completed or 0) for project_id, total, completed in result.all()}

        rows = []
        for project in projects:
            total, completed = counts.get(project.id, (0, 0))
            rows.append(ProjectProgress.model_validate(project).model_copy(update={
                "task_count": total,
                "completed_task_count": completed,
                "progress": percentage(completed, total),
            }))

        total_tasks = sum(row.task_count for row in rows)
        completed_tasks = sum(row.completed_task_count for row in rows)

        return ManagerDashboard(
            stats=ManagerStats(
                total_projects=len(rows),
                total_tasks=total_tasks,
                completed_tasks=completed_tasks,
                completion_rate=percentage(completed_tasks, total_tasks),
            ),
            projects=rows,
        )

    @staticmethod
    async def developer_dashboard(db: AsyncSession, developer: User) -> DeveloperDashboard:
        tasks = await TaskService.list_assigned_tasks(db, developer)
        task_ids = [task.id for task in tasks]

        subtask_counts = {}
        comment_counts = {}
        if task_ids:
            result = await db.execute(
                select(SubTask.task_id, func.count(SubTask.id), _completed_count(SubTask.status))
                .where(SubTask.task_id.in_(task_ids))
                .group_by(SubTask.task_id)
            )
            subtask_counts = {task_id: (total, completed or 0) for task_id, total, completed in result.all()}

            result = await db.execute(
                select(Comment.target_id, func.count(Comment.id))
                .where(Comment.target_type == CommentTarget.TASK, Comment.target_id.in_(task_ids))
                .group_by(Comment.target_id)
            )
            comment_counts = dict(result.all())

        rows = []
        for task in tasks:
            total, completed = subtask_counts.get(task.id, (0, 0))
            rows.append(DeveloperTask.model_validate(task).model_copy(update={
                "subtask_count": total,
                "completed_subtask_count": completed,
                "comment_count": comment_counts.get(task.id, 0),
            }))

        stats = DeveloperStats(
            total_tasks=len(tasks),
            completed_tasks=sum(1 for task in tasks if task.status == TaskStatus.COMPLETED),
            in_progress_tasks=sum(1 for task in tasks if task.status == TaskStatus.IN_PROGRESS),
            pending_tasks=sum(1 for task in tasks if task.status == TaskStatus.PENDING),
            overdue_tasks=sum(1 for task in tasks if is_overdue(task.status, task.deadline)),
        )
        logger.debug(f"Developer dashboard for {developer.id}: {stats.total_tasks} tasks")
        return DeveloperDashboard(stats=stats, tasks=rows)
