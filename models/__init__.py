from models.user import User, UserRole
from models.project import Project, ProjectStatus
from models.task import Task, TaskStatus, TaskPriority
from models.subtask import SubTask
from models.comment import Comment, CommentTarget

__all__ = [
    "User",
    "UserRole",
    "Project",
    "ProjectStatus",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "SubTask",
    "Comment",
    "CommentTarget",
]
