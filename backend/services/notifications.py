"""Due-date notification classification.

Everything in this module is a pure function of a snapshot of a user's
incomplete tasks and a reference instant ``now``. When ``now`` is omitted it
is captured exactly once at the top of the call and threaded through every
boundary computation, so a task can never straddle two buckets.

Datetimes are naive local wall-clock values, matching how due dates and
``HH:MM`` due times are entered by users.
"""
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional, Union

from backend.models.task_model import Task

DUE_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
END_OF_DAY = time(23, 59, 59, 999000)

UPCOMING_HORIZON = timedelta(days=3)
DUE_SOON_DEFAULT_HOURS = 24
URGENT_WINDOW_MINUTES = 60
MOST_URGENT_MINUTES = 30

ONE_MINUTE = timedelta(minutes=1)


class Bucket(str, Enum):
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    DUE_TOMORROW = "due_tomorrow"
    UPCOMING = "upcoming"


# Buckets that count towards total_notifications; upcoming is informational.
ACTIONABLE_BUCKETS = (Bucket.OVERDUE, Bucket.DUE_TODAY, Bucket.DUE_TOMORROW)


class Urgency(str, Enum):
    WITHIN_30_MIN = "within_30_min"
    WITHIN_1_HOUR = "within_1_hour"


# ---------------------------------------------------------------------------
# Due-instant resolution
# ---------------------------------------------------------------------------
def parse_due_time(value) -> Optional[time]:
    """Parse an ``HH:MM`` string, returning None for anything malformed."""
    if not isinstance(value, str):
        return None
    match = DUE_TIME_PATTERN.match(value)
    if not match:
        return None
    return time(int(match.group(1)), int(match.group(2)))


def resolve_due_instant(due_date: Union[date, datetime], due_time: Optional[str] = None) -> datetime:
    """Combine a calendar due date with an optional time of day.

    Without a (well-formed) due time the task is due at the very end of its
    calendar day, 23:59:59.999.
    """
    day = due_date.date() if isinstance(due_date, datetime) else due_date
    parsed = parse_due_time(due_time)
    return datetime.combine(day, parsed if parsed is not None else END_OF_DAY)


def minutes_until(resolved: datetime, now: datetime) -> int:
    # timedelta floor division floors towards negative infinity
    return (resolved - now) // ONE_MINUTE


def capture_now(now: Optional[datetime] = None) -> datetime:
    if now is None:
        return datetime.now()
    if now.tzinfo is not None:
        return now.astimezone().replace(tzinfo=None)
    return now


@dataclass(frozen=True)
class AnnotatedTask:
    task: Task
    resolved_due: datetime
    minutes_until_due: int

    def to_dict(self) -> dict:
        data = self.task.to_dict()
        data["resolved_due"] = self.resolved_due.isoformat(timespec="milliseconds")
        data["minutes_until_due"] = self.minutes_until_due
        return data


def annotate(tasks: Iterable[Task], now: datetime) -> List[AnnotatedTask]:
    """Resolve every incomplete task with a due date, keeping input order."""
    annotated = []
    for task in tasks:
        if task.completed or task.due_date is None:
            continue
        resolved = resolve_due_instant(task.due_date, task.due_time)
        annotated.append(AnnotatedTask(task, resolved, minutes_until(resolved, now)))
    return annotated


def _by_due(items: List[AnnotatedTask]) -> List[AnnotatedTask]:
    # sorted() is stable, so equal instants keep retrieval order
    return sorted(items, key=lambda item: item.resolved_due)


def _bucket_payload(items: List[AnnotatedTask]) -> dict:
    return {"count": len(items), "tasks": [item.to_dict() for item in items]}


# ---------------------------------------------------------------------------
# Bucket classification
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class DayBounds:
    now: datetime
    today_start: datetime
    today_end: datetime
    tomorrow_start: datetime
    tomorrow_end: datetime
    horizon_end: datetime

    @classmethod
    def from_now(cls, now: datetime) -> "DayBounds":
        today = now.date()
        tomorrow = today + timedelta(days=1)
        return cls(
            now=now,
            today_start=datetime.combine(today, time.min),
            today_end=datetime.combine(today, END_OF_DAY),
            tomorrow_start=datetime.combine(tomorrow, time.min),
            tomorrow_end=datetime.combine(tomorrow, END_OF_DAY),
            horizon_end=now + UPCOMING_HORIZON,
        )

    def classify(self, resolved: datetime) -> Optional[Bucket]:
        """First match wins; None means beyond the upcoming horizon."""
        if resolved < self.now:
            return Bucket.OVERDUE
        if self.today_start <= resolved <= self.today_end:
            return Bucket.DUE_TODAY
        if self.tomorrow_start <= resolved <= self.tomorrow_end:
            return Bucket.DUE_TOMORROW
        if resolved <= self.horizon_end:
            return Bucket.UPCOMING
        return None


@dataclass
class NotificationSummary:
    buckets: Dict[Bucket, List[AnnotatedTask]] = field(
        default_factory=lambda: {bucket: [] for bucket in Bucket}
    )

    def __getitem__(self, bucket: Bucket) -> List[AnnotatedTask]:
        return self.buckets[bucket]

    def count(self, bucket: Bucket) -> int:
        return len(self.buckets[bucket])

    @property
    def total_notifications(self) -> int:
        return sum(self.count(bucket) for bucket in ACTIONABLE_BUCKETS)

    def to_dict(self) -> dict:
        data = {bucket.value: _bucket_payload(self.buckets[bucket]) for bucket in Bucket}
        data["total_notifications"] = self.total_notifications
        return data


def classify_tasks(tasks: Iterable[Task], now: Optional[datetime] = None) -> NotificationSummary:
    """Partition incomplete tasks into overdue / today / tomorrow / upcoming."""
    now = capture_now(now)
    bounds = DayBounds.from_now(now)
    summary = NotificationSummary()
    for item in _by_due(annotate(tasks, now)):
        bucket = bounds.classify(item.resolved_due)
        if bucket is not None:
            summary.buckets[bucket].append(item)
    return summary


# ---------------------------------------------------------------------------
# Overdue counter
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class OverdueSummary:
    overdue_count: int

    @property
    def has_overdue_tasks(self) -> bool:
        return self.overdue_count > 0

    def to_dict(self) -> dict:
        return {"overdue_count": self.overdue_count, "has_overdue_tasks": self.has_overdue_tasks}


def count_overdue(tasks: Iterable[Task], now: Optional[datetime] = None) -> OverdueSummary:
    now = capture_now(now)
    return OverdueSummary(sum(1 for item in annotate(tasks, now) if item.resolved_due < now))


# ---------------------------------------------------------------------------
# Due-soon window
# ---------------------------------------------------------------------------
def sanitize_hours(raw, default: Union[int, float] = DUE_SOON_DEFAULT_HOURS) -> Union[int, float]:
    """Coerce a query-string hours value; non-numeric or non-positive -> default."""
    if raw is None or isinstance(raw, bool):
        return default
    try:
        hours = float(raw)
    except (TypeError, ValueError):
        return default
    # NaN fails the comparison, inf is rejected explicitly
    if not hours > 0 or hours == float("inf"):
        return default
    return int(hours) if hours.is_integer() else hours


@dataclass(frozen=True)
class DueSoonResult:
    hours: Union[int, float]
    tasks: List[AnnotatedTask]

    @property
    def count(self) -> int:
        return len(self.tasks)

    def to_dict(self) -> dict:
        return {
            "hours": self.hours,
            "count": self.count,
            "tasks": [item.to_dict() for item in self.tasks],
        }


def tasks_due_soon(
    tasks: Iterable[Task],
    now: Optional[datetime] = None,
    hours: Union[int, float] = DUE_SOON_DEFAULT_HOURS,
) -> DueSoonResult:
    """Tasks whose resolved due instant lies in ``[now, now + hours]``."""
    now = capture_now(now)
    window_end = now + timedelta(hours=hours)
    selected = [item for item in annotate(tasks, now) if now <= item.resolved_due <= window_end]
    return DueSoonResult(hours=hours, tasks=_by_due(selected))


# ---------------------------------------------------------------------------
# Urgency sub-classification
# ---------------------------------------------------------------------------
ALL_CLEAR_MESSAGE = "No urgent tasks. You're all caught up."


def urgency_message(within_30: int, within_60: int) -> str:
    if within_30:
        return f"{within_30} task(s) due within 30 minutes. Act now!"
    if within_60:
        return f"{within_60} task(s) due within the next hour."
    return ALL_CLEAR_MESSAGE


@dataclass(frozen=True)
class UrgencyReport:
    within_30_min: List[AnnotatedTask]
    within_1_hour: List[AnnotatedTask]

    @property
    def total_urgent(self) -> int:
        return len(self.within_30_min) + len(self.within_1_hour)

    @property
    def message(self) -> str:
        return urgency_message(len(self.within_30_min), len(self.within_1_hour))

    def to_dict(self) -> dict:
        return {
            Urgency.WITHIN_30_MIN.value: _bucket_payload(self.within_30_min),
            Urgency.WITHIN_1_HOUR.value: _bucket_payload(self.within_1_hour),
            "total_urgent": self.total_urgent,
            "message": self.message,
        }


def urgency_of(item: AnnotatedTask) -> Optional[Urgency]:
    if not 0 < item.minutes_until_due <= URGENT_WINDOW_MINUTES:
        return None
    if item.minutes_until_due <= MOST_URGENT_MINUTES:
        return Urgency.WITHIN_30_MIN
    return Urgency.WITHIN_1_HOUR


def classify_urgency(tasks: Iterable[Task], now: Optional[datetime] = None) -> UrgencyReport:
    now = capture_now(now)
    within_30, within_60 = [], []
    for item in _by_due(annotate(tasks, now)):
        level = urgency_of(item)
        if level is Urgency.WITHIN_30_MIN:
            within_30.append(item)
        elif level is Urgency.WITHIN_1_HOUR:
            within_60.append(item)
    return UrgencyReport(within_30_min=within_30, within_1_hour=within_60)


# ---------------------------------------------------------------------------
# Per-task derived flags
# ---------------------------------------------------------------------------
def task_status(task: Task, now: Optional[datetime] = None) -> dict:
    """Derived, never-persisted flags attached to task responses."""
    now = capture_now(now)
    if task.completed or task.due_date is None:
        return {
            "is_overdue": False,
            "is_due_soon": False,
            "is_urgent": False,
            "minutes_until_due": None,
        }
    resolved = resolve_due_instant(task.due_date, task.due_time)
    return {
        "is_overdue": now > resolved,
        "is_due_soon": now <= resolved <= now + timedelta(hours=DUE_SOON_DEFAULT_HOURS),
        "is_urgent": (
            parse_due_time(task.due_time) is not None
            and now <= resolved <= now + timedelta(minutes=URGENT_WINDOW_MINUTES)
        ),
        "minutes_until_due": minutes_until(resolved, now),
    }
