"""
Due-date urgency
"""

import math
from datetime import datetime, timedelta
from typing import Optional

from lms.services.grades import display_percentage, round_half_up
from lms.states import SubmissionStatus, UrgencyTier

DAY = timedelta(days=1)


def days_until_due(due_date: datetime, now: datetime) -> int:
    """Whole days left, partial days round up; negative means overdue"""
    return math.ceil((due_date - now) / DAY)


def urgency_tier(days: int) -> UrgencyTier:
    if days < 0:
        return UrgencyTier.OVERDUE
    if days <= 1:
        return UrgencyTier.DUE_SOON
    if days <= 3:
        return UrgencyTier.WARNING
    return UrgencyTier.NORMAL


def due_label(days: int) -> str:
    tier = urgency_tier(days)
    if tier is UrgencyTier.OVERDUE:
        return "Overdue"
    if days == 0:
        return "Due today"
    if days == 1:
        return "Due tomorrow"
    return f"Due in {days} days"


def status_label(status: Optional[str], due_date: datetime, now: datetime,
                 grade_percentage: Optional[float] = None) -> str:
    """Status labels win over date labels: submitted work never reads 'Overdue'"""
    if status == SubmissionStatus.SUBMITTED.value:
        return "Submitted"
    if status == SubmissionStatus.GRADED.value:
        if grade_percentage is None:
            return "Graded"
        return f"Graded: {round_half_up(grade_percentage)}%"
    return due_label(days_until_due(due_date, now))


def assignment_status_label(assignment, now: datetime) -> str:
    """Label for an UpcomingAssignment row"""
    return status_label(assignment.status, assignment.due_date, now, assignment.grade)


def submission_status_label(submission) -> str:
    """Label for a Submission"""
    if submission.status is SubmissionStatus.RETURNED:
        return f"Returned: {display_percentage(submission.grade, submission.assignment.max_points)}"
    if submission.status is SubmissionStatus.GRADED:
        return f"Graded: {display_percentage(submission.grade, submission.assignment.max_points)}"
    # Submitted work carries no date label
    return "Submitted"


def _due_date(item) -> Optional[datetime]:
    if hasattr(item, "assignment"):
        return item.assignment.due_date
    return item.due_date


def sort_by_urgency(items: list, now: datetime) -> list:
    """Most urgent first (earliest due date), items without a due date last"""
    def key(item):
        due = _due_date(item)
        return (due is None, days_until_due(due, now) if due else 0, due or now)

    return sorted(items, key=key)
