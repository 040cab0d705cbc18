import math
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from models.task import TaskStatus


class Timeliness(str, Enum):
    ON_TIME = "on-time"
    LATE = "late"
    OVERDUE = "overdue"
    ON_TRACK = "on-track"
    UNKNOWN = "unknown"


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # sqlite hands back naive datetimes; they were written as UTC
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def derive_timeliness(status: TaskStatus, deadline: datetime, completed_at: Optional[datetime] = None,
                      now: Optional[datetime] = None) -> Timeliness:
    """Label a task or subtask relative to its deadline.

    Completed work is judged by when it was finished, open work by the
    current time. A completed item without a completion stamp cannot be
    judged and is reported as unknown.
    """
    deadline = as_utc(deadline)
    now = as_utc(now) or datetime.now(timezone.utc)

    if status == TaskStatus.COMPLETED:
        if completed_at is None:
            return Timeliness.UNKNOWN
        return Timeliness.ON_TIME if as_utc(completed_at) <= deadline else Timeliness.LATE

    if status in (TaskStatus.PENDING, TaskStatus.IN_PROGRESS):
        return Timeliness.OVERDUE if now > deadline else Timeliness.ON_TRACK

    return Timeliness.UNKNOWN


def is_overdue(status: TaskStatus, deadline: datetime, now: Optional[datetime] = None) -> bool:
    return derive_timeliness(status, deadline, None, now) == Timeliness.OVERDUE


def percentage(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    # half rounds up, 1 of 8 is 13 percent
    return math.floor(part * 100 / whole + 0.5)
