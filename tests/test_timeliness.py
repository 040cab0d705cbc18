from datetime import datetime, timedelta, timezone

import pytest

from models import TaskStatus
from utils.timeliness import Timeliness, as_utc, derive_timeliness, is_overdue, percentage

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
DEADLINE = datetime(2026, 3, 12, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize('status,completed_at,now,expected', [
    (TaskStatus.COMPLETED, DEADLINE - timedelta(hours=1), NOW, Timeliness.ON_TIME),
    (TaskStatus.COMPLETED, DEADLINE, NOW, Timeliness.ON_TIME),
    (TaskStatus.COMPLETED, DEADLINE + timedelta(minutes=1), NOW, Timeliness.LATE),
    (TaskStatus.COMPLETED, None, NOW, Timeliness.UNKNOWN),
    (TaskStatus.PENDING, None, NOW, Timeliness.ON_TRACK),
    (TaskStatus.IN_PROGRESS, None, DEADLINE + timedelta(seconds=1), Timeliness.OVERDUE),
    (TaskStatus.PENDING, None, DEADLINE, Timeliness.ON_TRACK),
])
def test_derive_timeliness(status, completed_at, now, expected):
    assert derive_timeliness(status, DEADLINE, completed_at, now) == expected


def test_naive_datetimes_are_utc():
    naive_deadline = DEADLINE.replace(tzinfo=None)
    assert derive_timeliness(TaskStatus.PENDING, naive_deadline, now=NOW) == Timeliness.ON_TRACK
    assert as_utc(naive_deadline) == DEADLINE


def test_as_utc_converts_offsets():
    plus_two = timezone(timedelta(hours=2))
    assert as_utc(datetime(2026, 3, 12, 14, 0, tzinfo=plus_two)) == DEADLINE
    assert as_utc(None) is None


def test_completed_task_is_never_overdue():
    late_now = DEADLINE + timedelta(days=5)
    assert is_overdue(TaskStatus.IN_PROGRESS, DEADLINE, late_now)
    assert not is_overdue(TaskStatus.COMPLETED, DEADLINE, late_now)


@pytest.mark.parametrize('part,whole,expected', [
    (0, 0, 0),
    (1, 3, 33),
    (2, 3, 67),
    (1, 8, 13),
    (1, 2, 50),
    (4, 4, 100),
])
def test_percentage(part, whole, expected):
    assert percentage(part, whole) == expected
