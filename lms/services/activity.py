"""
Activity feed: relative time and message rendering
"""

from datetime import datetime
from typing import Iterable, Optional

from lms.config import config
from lms.models import ActivityEvent
from lms.services.grades import format_number
from lms.states import ActivityType

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR


def _ago(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count != 1 else ''} ago"


def relative_time(timestamp: datetime, now: datetime) -> str:
    """'Just now', 'N minutes ago', 'N hours ago' or 'N days ago'"""
    seconds = int((now - timestamp).total_seconds())

    if seconds < MINUTE:
        return "Just now"
    if seconds < HOUR:
        return _ago(seconds // MINUTE, "minute")
    if seconds < DAY:
        return _ago(seconds // HOUR, "hour")
    return _ago(seconds // DAY, "day")


def render(event: ActivityEvent) -> str:
    """Human message for an event"""
    kind = event.kind

    if kind is ActivityType.COURSE_ENROLLED:
        return f'Enrolled in "{event.course_name}"'
    if kind is ActivityType.MODULE_COMPLETED:
        return f'Completed module "{event.module_name}" in "{event.course_name}"'
    if kind is ActivityType.ASSIGNMENT_SUBMITTED:
        return f'Submitted assignment "{event.assignment_name}"'
    if kind is ActivityType.ASSIGNMENT_GRADED:
        grade = format_number(event.grade) if isinstance(event.grade, (int, float)) else event.grade
        return f'Assignment "{event.assignment_name}" graded: {grade}%'
    if kind is ActivityType.VIDEO_WATCHED:
        return f'Watched "{event.video_name}" in "{event.course_name}"'
    if kind is ActivityType.DUE_SOON:
        return f'Assignment "{event.assignment_name}" due soon'

    # Types this client does not know yet
    return event.message or "Activity completed"


class ActivityLog:
    """Append-only event log"""

    def __init__(self, events: Optional[Iterable[ActivityEvent]] = None):
        self._events: list[ActivityEvent] = list(events or [])

    def __len__(self) -> int:
        return len(self._events)

    def append(self, event: ActivityEvent):
        self._events.append(event)

    def extend(self, events: Iterable[ActivityEvent]):
        self._events.extend(events)

    def recent(self, limit: Optional[int] = None) -> list[ActivityEvent]:
        """Most recent first, sliced for summary views"""
        if limit is None:
            limit = config.ACTIVITY_FEED_LIMIT
        ordered = sorted(self._events, key=lambda e: e.created_at, reverse=True)
        return ordered[:limit]

    def feed(self, now: datetime, limit: Optional[int] = None) -> list[dict]:
        """Rendered entries: message, relative time and type"""
        return [
            {
                "type": event.kind.value,
                "message": render(event),
                "time": relative_time(event.created_at, now),
            }
            for event in self.recent(limit)
        ]
