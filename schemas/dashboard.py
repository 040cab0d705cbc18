from pydantic import BaseModel

from schemas.common import SuccessResponse
from schemas.project import ProjectResponse
from schemas.task import TaskResponse


class ProjectProgress(ProjectResponse):
    task_count: int = 0
    completed_task_count: int = 0
    progress: int = 0


class ManagerStats(BaseModel):
    total_projects: int
    total_tasks: int
    completed_tasks: int
    completion_rate: int


class ManagerDashboard(SuccessResponse):
    stats: ManagerStats
    projects: list[ProjectProgress]


class DeveloperTask(TaskResponse):
    subtask_count: int = 0
    completed_subtask_count: int = 0
    comment_count: int = 0


class DeveloperStats(BaseModel):
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    pending_tasks: int
    overdue_tasks: int


class DeveloperDashboard(SuccessResponse):
    stats: DeveloperStats
    tasks: list[DeveloperTask]
