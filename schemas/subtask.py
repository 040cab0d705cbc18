from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from models.task import TaskStatus
from schemas.common import SuccessResponse, UtcDatetime, not_blank, reject_explicit_nulls
from schemas.user import UserSummary
from utils.timeliness import Timeliness, as_utc, derive_timeliness


class SubTaskCreate(BaseModel):
    task_id: UUID
    title: str = Field(..., max_length=200)
    description: Optional[str] = None
    deadline: datetime

    @field_validator('title')
    def validate_title(cls, v):
        return not_blank(v, "title")

    @field_validator('deadline')
    def normalize_deadline(cls, v):
        return as_utc(v)


class SubTaskUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    deadline: Optional[datetime] = None

    @field_validator('title')
    def validate_title(cls, v):
        return not_blank(v, "title")

    @field_validator('deadline')
    def normalize_deadline(cls, v):
        return as_utc(v)

    @model_validator(mode="after")
    def validate_nulls(self):
        # description is the one field that may be cleared
        return reject_explicit_nulls(self, "title", "status", "deadline")


class SubTaskResponse(BaseModel):
    id: UUID
    task_id: UUID
    title: str
    description: Optional[str]
    status: TaskStatus
    deadline: UtcDatetime
    completed_at: Optional[UtcDatetime]
    created_by: UUID
    creator: UserSummary
    created_at: UtcDatetime
    updated_at: UtcDatetime

    class Config:
        from_attributes = True

    @computed_field
    @property
    def timeliness(self) -> Timeliness:
        return derive_timeliness(self.status, self.deadline, self.completed_at)


class SubTaskEnvelope(SuccessResponse):
    subtask: SubTaskResponse


class SubTaskListResponse(SuccessResponse):
    subtasks: list[SubTaskResponse]
