from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator
from typing import Optional
from models.task import TaskStatus, TaskPriority
from schemas.common import SuccessResponse, UtcDatetime, not_blank, reject_explicit_nulls
from schemas.project import ProjectSummary
from schemas.user import UserSummary
from utils.timeliness import Timeliness, as_utc, derive_timeliness


class TaskBase(BaseModel):
    title: str = Field(..., max_length=200)
    description: str
    priority: TaskPriority = TaskPriority.MEDIUM
    deadline: datetime

    @field_validator('title', 'description')
    def validate_text(cls, v, info):
        return not_blank(v, info.field_name)

    @field_validator('deadline')
    def normalize_deadline(cls, v):
        return as_utc(v)


class TaskCreate(TaskBase):
    project_id: UUID
    assigned_to: UUID


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    deadline: Optional[datetime] = None
    assigned_to: Optional[UUID] = None

    @field_validator('title', 'description')
    def validate_text(cls, v, info):
        return not_blank(v, info.field_name)

    @field_validator('deadline')
    def normalize_deadline(cls, v):
        return as_utc(v)

    @model_validator(mode="after")
    def validate_nulls(self):
        return reject_explicit_nulls(self, *self.model_fields_set)


class TaskResponse(BaseModel):
    id: UUID
    project_id: UUID
    project: ProjectSummary
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    deadline: UtcDatetime
    completed_at: Optional[UtcDatetime]
    created_by: UUID
    creator: UserSummary
    assigned_to: UUID
    assignee: UserSummary
    created_at: UtcDatetime
    updated_at: UtcDatetime

    class Config:
        from_attributes = True

    @computed_field
    @property
    def timeliness(self) -> Timeliness:
        return derive_timeliness(self.status, self.deadline, self.completed_at)


class TaskEnvelope(SuccessResponse):
    task: TaskResponse


class TaskListResponse(SuccessResponse):
    tasks: list[TaskResponse]
