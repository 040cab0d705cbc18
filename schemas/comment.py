from pydantic import BaseModel, Field, field_validator
from uuid import UUID

from models.comment import CommentTarget
from schemas.common import SuccessResponse, UtcDatetime, not_blank
from schemas.user import UserSummary


class CommentCreate(BaseModel):
    content: str = Field(..., max_length=5000)
    target_id: UUID
    target_type: CommentTarget

    @field_validator('content')
    def validate_content(cls, v):
        return not_blank(v, "content")


class CommentResponse(BaseModel):
    id: UUID
    content: str
    author_id: UUID
    author: UserSummary
    target_id: UUID
    target_type: CommentTarget
    created_at: UtcDatetime
    updated_at: UtcDatetime

    class Config:
        from_attributes = True


class CommentEnvelope(SuccessResponse):
    comment: CommentResponse


class CommentListResponse(SuccessResponse):
    comments: list[CommentResponse]
