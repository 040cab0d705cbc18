import asyncio
from concurrent.futures import ThreadPoolExecutor
from email.mime.text import MIMEText

import aiosmtplib

from core.celery_app import celery_app
from core.logger import get_logger
from core.config import settings

logger = get_logger(__name__)

# eager tasks run inside the api event loop, smtp then gets its own loop on a worker thread
_smtp_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="smtp")


async def _send_via_smtp(to_email: str, subject: str, body: str):
    message = MIMEText(body, "plain")
    message["From"] = settings.email_from
    message["To"] = to_email
    message["Subject"] = subject

    await aiosmtplib.send(
        message,
        hostname=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_user,
        password=settings.smtp_password,
        start_tls=bool(settings.smtp_user),
    )


def _run_send(to_email: str, subject: str, body: str):
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_send_via_smtp(to_email, subject, body))
    future = _smtp_executor.submit(asyncio.run, _send_via_smtp(to_email, subject, body))
    return future.result()


def deliver_email(to_email: str, subject: str, body: str) -> dict:
    """Send one plain-text email, or skip when no SMTP server is configured."""
    if not settings.smtp_configured:
        logger.info(f"SMTP not configured, skipping email to {to_email}: {subject}")
        return {"status": "skipped", "email": to_email}

    _run_send(to_email, subject, body)
    logger.info(f"Email sent to {to_email}: {subject}")
    return {"status": "sent", "email": to_email}


@celery_app.task(
    bind=True,
    name='tasks.email.send_task_assigned_email',
    max_retries=3,
    default_retry_delay=60
)
def send_task_assigned_email(self, user_email: str, task_title: str, project_title: str,
                             assigned_by: str, deadline: str):
    try:
        logger.info(f"Sending assignment email to {user_email}")
        subject = f"New task assigned: {task_title}"
        body = (f"{assigned_by} assigned you '{task_title}' in project '{project_title}'.\n"
                f"Deadline: {deadline}")
        return deliver_email(user_email, subject, body)

    except Exception as exc:
        logger.error(f"Failed to send email to {user_email}: {exc}")
        raise self.retry(exc=exc)


@celery_app.task(
    bind=True,
    name='tasks.email.send_task_reminder_email',
    max_retries=3,
    default_retry_delay=60
)
def send_task_reminder_email(self, user_email: str, task_title: str, deadline: str):
    try:
        logger.info(f"Sending overdue reminder to {user_email}")
        subject = f"Overdue: {task_title}"
        body = f"Your task '{task_title}' was due on {deadline} and is not completed yet."
        return deliver_email(user_email, subject, body)

    except Exception as exc:
        logger.error(f"Failed to send reminder to {user_email}: {exc}")
        raise self.retry(exc=exc)


@celery_app.task(
    bind=True,
    name='tasks.email.send_comment_notification',
    max_retries=3
)
def send_comment_notification(self, user_email: str, task_title: str,
                              commenter_name: str, comment_text: str):
    try:
        logger.info(f"Sending comment notification to {user_email}")
        subject = f"New comment on: {task_title}"
        body = f"{commenter_name} commented:\n\n{comment_text}"
        return deliver_email(user_email, subject, body)

    except Exception as exc:
        logger.error(f"Failed to send notification to {user_email}: {exc}")
        raise self.retry(exc=exc)


@celery_app.task(
    bind=True,
    name='tasks.email.send_welcome_email',
    max_retries=3
)
def send_welcome_email(self, user_email: str, user_name: str):

    try:
        logger.info(f"Sending welcome email to {user_email}")
        subject = "Welcome to the project tracker!"
        body = f"Hi {user_name}, your account is ready."
        return deliver_email(user_email, subject, body)

    except Exception as exc:
        logger.error(f"Failed to send welcome email to {user_email}: {exc}")
        raise self.retry(exc=exc)
