"""
Edge cases

Boundary times, boundary grades and odd server data.
"""

from datetime import timedelta

import pytest

pytestmark = [pytest.mark.edge]

from conftest import NOW, make_submission
from lms.models import Submission
from lms.services import gradebook as gb
from lms.services.activity import relative_time
from lms.services.grades import band, percentage
from lms.services.urgency import days_until_due, status_label, urgency_tier
from lms.states import GradeBand, SubmissionStatus, UrgencyTier
from lms.workflows.grading import SubmissionWorkflow


# ============================================
# Edge Cases: Time Boundaries
# ============================================

def test_edge_exactly_24_hours_until_due():
    """
    Edge Case: due exactly one day from now -> 1 day, 'Due tomorrow'
    """
    due = NOW + timedelta(hours=24)
    assert days_until_due(due, NOW) == 1
    assert status_label(None, due, NOW) == "Due tomorrow"


def test_edge_24_hours_1_second_until_due():
    """
    Edge Case: one second past a day rounds up to 2 -> warning tier
    """
    days = days_until_due(NOW + timedelta(hours=24, seconds=1), NOW)
    assert days == 2
    assert urgency_tier(days) is UrgencyTier.WARNING


def test_edge_one_second_overdue():
    """
    Edge Case: one second past the due date is still 'Due today' (ceil of -0.00001 is 0)
    """
    due = NOW - timedelta(seconds=1)
    assert days_until_due(due, NOW) == 0
    assert status_label(None, due, NOW) == "Due today"


def test_edge_submitted_exactly_at_deadline_not_late():
    sub = make_submission(due_in=timedelta(0), submitted_ago=timedelta(0))
    assert sub.is_late is False


def test_edge_59_minutes_59_seconds():
    assert relative_time(NOW - timedelta(minutes=59, seconds=59), NOW) == "59 minutes ago"


def test_edge_sub_second_difference():
    assert relative_time(NOW - timedelta(milliseconds=999), NOW) == "Just now"


# ============================================
# Edge Cases: Grade Boundaries
# ============================================

def test_edge_band_just_below_threshold():
    """
    Edge Case: 89.5/100 stays 'good' even though it displays as 90%
    """
    assert band(89.5, 100) is GradeBand.GOOD


def test_edge_fractional_max_points():
    assert percentage(0.5, 2.5) == 100 * 0.5 / 2.5


@pytest.mark.asyncio
async def test_edge_grade_equal_to_max_points(mock_api):
    sub = make_submission(max_points=7)
    workflow = SubmissionWorkflow(gb.SubmissionCollection([sub]), api=mock_api)

    updated = await workflow.grade_submission(sub, 7, None)

    assert updated.grade == 7
    assert band(updated.grade, 7) is GradeBand.EXCELLENT


@pytest.mark.asyncio
async def test_edge_zero_grade_is_a_grade(mock_api):
    """
    Edge Case: 0 is a valid grade, not 'no grade'
    """
    sub = make_submission()
    workflow = SubmissionWorkflow(gb.SubmissionCollection([sub]), api=mock_api)

    updated = await workflow.grade_submission(sub, 0, None)

    assert updated.status is SubmissionStatus.GRADED
    assert updated.grade == 0
    assert gb.csv_row(updated)[3] == "0"


# ============================================
# Edge Cases: Data
# ============================================

def test_edge_search_with_unicode_names():
    sub = make_submission(first_name="Zoë", last_name="Ørsted")
    assert gb.filter_submissions([sub], search="ØRSTED") == [sub]


def test_edge_empty_names_csv():
    sub = make_submission(first_name="", last_name="")
    assert gb.csv_row(sub)[0] == ""


def test_edge_submission_without_due_date():
    sub = Submission.from_api({
        "_id": "x",
        "student": {"firstName": "A", "lastName": "B"},
        "assignment": {"title": "Open task", "course": "C"},
        "submittedAt": "2026-03-10T10:00:00Z",
    })

    assert sub.assignment.due_date is None
    assert sub.assignment.max_points == 100
    assert sub.is_late is False
    assert sub.status is SubmissionStatus.SUBMITTED


def test_edge_unknown_server_status_falls_back():
    sub = Submission.from_api({
        "_id": "x",
        "student": {"firstName": "A", "lastName": "B"},
        "assignment": {"title": "T", "course": "C", "maxPoints": 10},
        "submittedAt": "2026-03-10T10:00:00Z",
        "status": "pending_review",
        "grade": 8,
    })

    assert sub.status is SubmissionStatus.GRADED
    assert sub.grade == 8
