from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from models.comment import CommentTarget
from models.user import User
from schemas.common import MessageResponse
from schemas.comment import (
    CommentCreate,
    CommentResponse,
    CommentEnvelope,
    CommentListResponse
)
from app.api.dependencies import rate_limited_user
from services.comment import CommentService


comment_router = APIRouter(prefix="/comments", tags=["Comments"])


@comment_router.post("", response_model=CommentEnvelope, status_code= status.HTTP_201_CREATED)
async def create_comment(
        comment: CommentCreate,
        current_user: User = Depends(rate_limited_user),
        db: AsyncSession = Depends(get_db)
):

    new_comment = await CommentService.create_comment(db, comment, current_user)

    return {"comment": CommentResponse.model_validate(new_comment)}

@comment_router.get("", response_model=CommentListResponse, status_code = status.HTTP_200_OK)
async def get_comments(
        target_id: Optional[UUID] = Query(None, description="task or subtask id"),
        target_type: Optional[CommentTarget] = Query(None, description="Task or SubTask"),
        current_user: User = Depends(rate_limited_user),
        db: AsyncSession = Depends(get_db)
):
    if target_id is None or target_type is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                            detail="Task ID and task type are required")

    comments = await CommentService.list_comments(db, target_type, target_id)

    return {"comments": [CommentResponse.model_validate(comment) for comment in comments]}

@comment_router.delete(
    "/{comment_id}",
    response_model = MessageResponse,
    status_code = status.HTTP_200_OK
)
async def delete_comment(
        comment_id: UUID,
        current_user: User = Depends(rate_limited_user),
        db: AsyncSession = Depends(get_db)
):

    await CommentService.delete_comment(db, comment_id, current_user)
    return {"message": "Comment deleted successfully"}
