from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from models.comment import Comment, CommentTarget
from models.task import Task
from models.user import User
from schemas.comment import CommentCreate
from core.logger import get_logger
from services.subtask import SubTaskService
from services.task import TaskService
from tasks.email import send_comment_notification

logger = get_logger(__name__)


class CommentService:
    @staticmethod
    async def _resolve_task(db: AsyncSession, target_type: CommentTarget, target_id: UUID) -> Task:
        #the task a comment thread belongs to, 404 if the target is gone
        if target_type == CommentTarget.TASK:
            return await TaskService.get_task(db, target_id)
        subtask = await SubTaskService.get_subtask(db, target_id)
        return await TaskService.get_task(db, subtask.task_id)

    @staticmethod
    async def get_comment(db: AsyncSession, comment_id: UUID) -> Comment:
        query = select(Comment).where(Comment.id == comment_id)
        result = await db.execute(query)
        comment = result.scalar_one_or_none()

        if not comment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Comment not found"
            )
        return comment

    @staticmethod
    async def create_comment(db: AsyncSession, comment_data: CommentCreate, current_user: User) -> Comment:
        task = await CommentService._resolve_task(db, comment_data.target_type, comment_data.target_id)

        new_comment = Comment(
            content=comment_data.content,
            target_id=comment_data.target_id,
            target_type=comment_data.target_type,
            author_id=current_user.id
        )

        db.add(new_comment)
        await db.commit()

        logger.info(f"Comment created on {comment_data.target_type.value} {comment_data.target_id} "
                    f"by user {current_user.id}")

        CommentService._notify_participants(task, current_user, comment_data.content)
        return await CommentService.get_comment(db, new_comment.id)

    @staticmethod
    def _notify_participants(task: Task, author: User, content: str):
        # the task's creator and assignee hear about comments they did not write
        recipients = {user.id: user for user in (task.creator, task.assignee) if user.id != author.id}
        for user in recipients.values():
            try:
                send_comment_notification.delay(
                    user_email=user.email,
                    task_title=task.title,
                    commenter_name=author.name,
                    comment_text=content
                )
            except Exception as e:
                logger.error(f"failed to queue comment notification for {user.email}: {e}")

    @staticmethod
    async def list_comments(db: AsyncSession, target_type: CommentTarget, target_id: UUID) -> list[Comment]:
        query = select(Comment).where(
            Comment.target_type == target_type,
            Comment.target_id == target_id
        ).order_by(Comment.created_at.asc())

        result = await db.execute(query)
        comments = list(result.scalars().all())

        logger.debug(f"Retrieved {len(comments)} comments for {target_type.value} {target_id}")
        return comments

    @staticmethod
    async def delete_comment(db: AsyncSession, comment_id: UUID, current_user: User):
        comment = await CommentService.get_comment(db, comment_id)

        # Permission check: only the author can delete
        if comment.author_id != current_user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only delete your own comments"
            )

        await db.execute(delete(Comment).where(Comment.id == comment.id))
        await db.commit()

        logger.info(f"Comment {comment_id} deleted by user {current_user.id}")

    @staticmethod
    async def purge_comments(db: AsyncSession, target_type: CommentTarget, target_ids: list[UUID]):
        """Delete every comment on the given targets. Does not commit."""
        if not target_ids:
            return
        await db.execute(delete(Comment).where(
            Comment.target_type == target_type,
            Comment.target_id.in_(target_ids)
        ))
