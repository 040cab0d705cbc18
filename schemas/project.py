from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from models.project import ProjectStatus
from schemas.common import SuccessResponse, UtcDatetime, not_blank, reject_explicit_nulls
from schemas.user import UserSummary
from utils.timeliness import as_utc


class ProjectBase(BaseModel):
    title: str = Field(..., max_length=200)
    description: str
    deadline: datetime

    @field_validator('title', 'description')
    def validate_text(cls, v, info):
        return not_blank(v, info.field_name)

    @field_validator('deadline')
    def normalize_deadline(cls, v):
        return as_utc(v)


class ProjectCreate(ProjectBase):
    start_date: Optional[datetime] = None
    status: ProjectStatus = ProjectStatus.PLANNING

    @field_validator('start_date')
    def normalize_start_date(cls, v):
        return as_utc(v)

    @model_validator(mode="after")
    def validate_dates(self):
        if self.start_date and as_utc(self.deadline) < as_utc(self.start_date):
            raise ValueError("deadline can not be before start_date")
        return self


class ProjectUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    start_date: Optional[datetime] = None
    deadline: Optional[datetime] = None

    @field_validator('title', 'description')
    def validate_text(cls, v, info):
        return not_blank(v, info.field_name)

    @field_validator('start_date', 'deadline')
    def normalize_dates(cls, v):
        return as_utc(v)

    @model_validator(mode="after")
    def validate_nulls(self):
        return reject_explicit_nulls(self, "title", "description", "status", "start_date", "deadline")


class ProjectSummary(BaseModel):
    id: UUID
    title: str

    class Config:
        from_attributes = True


class ProjectResponse(ProjectSummary):
    description: str
    status: ProjectStatus
    start_date: UtcDatetime
    deadline: UtcDatetime
    created_by: UUID
    creator: UserSummary
    created_at: UtcDatetime
    updated_at: UtcDatetime

    class Config:
        from_attributes = True


class ProjectEnvelope(SuccessResponse):
    project: ProjectResponse


class ProjectListResponse(SuccessResponse):
    projects: list[ProjectResponse]
