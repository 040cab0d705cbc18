import asyncio
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.celery_app import celery_app
from core.logger import get_logger
from core.database import async_session_maker
from models.task import Task, TaskStatus
from tasks.email import send_task_reminder_email

logger = get_logger(__name__)


async def find_overdue_tasks(db: AsyncSession, now: datetime | None = None) -> list[Task]:
    """Open tasks whose deadline has passed, oldest deadline first."""
    now = now or datetime.now(timezone.utc)
    query = (
        select(Task)
        .where(Task.status.in_([TaskStatus.PENDING, TaskStatus.IN_PROGRESS]))
        .where(Task.deadline < now)
        .order_by(Task.deadline.asc())
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def _notify_overdue_tasks_async() -> dict:
    async with async_session_maker() as db:
        overdue = await find_overdue_tasks(db)

        queued = 0
        for task in overdue:
            send_task_reminder_email.delay(
                user_email=task.assignee.email,
                task_title=task.title,
                deadline=task.deadline.isoformat()
            )
            queued += 1

        return {"status": "complete", "overdue": len(overdue), "notifications_sent": queued}


@celery_app.task(
    bind=True,
    name='tasks.reminders.notify_overdue_tasks'
)
def notify_overdue_tasks(self):

    try:
        logger.info("Checking for overdue tasks")

        result = asyncio.run(_notify_overdue_tasks_async())

        logger.info(f"Overdue tasks check complete: {result['notifications_sent']} reminders queued")
        return result

    except Exception as exc:
        logger.error(f"Failed to notify overdue tasks: {exc}", exc_info=True)
        raise
