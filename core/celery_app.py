from celery import Celery
from celery.schedules import crontab
from core.config import settings
from core.logger import get_logger

logger = get_logger(__name__)

celery_app = Celery("project_management",
                    broker=settings.celery_broker_url or settings.redis_url,

                    backend=settings.celery_result_backend or settings.redis_url,

                    include=[
                        "tasks.email",
                        "tasks.reminders",
                    ])

celery_app.conf.update(
    task_time_limit=600,

    task_soft_time_limit=540,

    task_serializer='json',

    result_serializer='json',

    accept_content=['json'],

    timezone='UTC',

    enable_utc=True,

    result_expires=86400,

    task_always_eager=settings.celery_task_always_eager,

    worker_max_tasks_per_child=1000,

    worker_prefetch_multiplier=4,

    worker_hijack_root_logger=False,

    worker_log_format='[%(asctime)s: %(levelname)s/%(processName)s] %(message)s',
    worker_task_log_format='[%(asctime)s: %(levelname)s/%(processName)s][%(task_name)s(%(task_id)s)] %(message)s',

)

celery_app.conf.beat_schedule = {
    'notify-overdue-tasks-daily': {
        'task': 'tasks.reminders.notify_overdue_tasks',
        'schedule': crontab(hour=9, minute=0),
        'options': {'expires': 86400}
    },
}

celery_app.conf.task_routes = {
    # Email tasks: High priority queue
    'tasks.email.*': {'queue': 'priority'},

    'tasks.reminders.*': {'queue': 'default'},
}


logger.debug(f"Celery app configured (broker={settings.celery_broker_url or settings.redis_url}, "
             f"eager={settings.celery_task_always_eager})")
