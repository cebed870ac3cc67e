"""
Pytest configuration and fixtures
"""

import os
from datetime import datetime, timedelta, timezone

import pytest
from unittest.mock import AsyncMock

# Test settings must be in place before lms is imported
os.environ.update({
    "API_URL": "http://lms.test/api",
    "API_TOKEN": "test_token",
    "API_TIMEOUT": "5",
    "GUARD_TERMINAL_CERTIFICATES": "true",
    "CSV_QUOTE_FIELDS": "false",
    "ACTIVITY_FEED_LIMIT": "10",
})

from lms.api import client as api_client
from lms.models import (
    Assignment,
    CertificateRequest,
    CertificateStudent,
    Feedback,
    Student,
    Submission,
)
from lms.services.gradebook import SubmissionCollection
from lms.states import CertificateStatus, SubmissionStatus
from lms.workflows.certificates import CertificateRequestCollection


NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


# ============================================
# Submission Fixtures
# ============================================

def make_submission(
    id="1",
    first_name="John",
    last_name="Doe",
    title="React Components Assignment",
    course="Full-Stack React Development",
    max_points=100,
    due_in=timedelta(days=-2),
    submitted_ago=timedelta(hours=2),
    status=SubmissionStatus.SUBMITTED,
    grade=None,
    feedback=None,
    **kwargs
) -> Submission:
    """Build a submission relative to NOW"""
    return Submission(
        id=id,
        student=Student(first_name, last_name, f"{first_name.lower()}.{last_name.lower()}@example.com"),
        assignment=Assignment(
            title=title,
            course=course,
            max_points=max_points,
            due_date=NOW + due_in,
            instructions="Build the thing.",
        ),
        submitted_at=NOW - submitted_ago,
        status=status,
        grade=grade,
        feedback=feedback,
        **kwargs
    )


@pytest.fixture
def submission():
    """An ungraded on-time submission"""
    return make_submission(due_in=timedelta(days=1))


@pytest.fixture
def sample_submissions():
    """One submission per status"""
    return [
        make_submission(id="1"),
        make_submission(
            id="2",
            first_name="Jane",
            last_name="Smith",
            title="CSS Grid Layout",
            course="Web Development Basics",
            max_points=50,
            due_in=timedelta(days=1),
            status=SubmissionStatus.GRADED,
            grade=42.5,
            feedback=Feedback(general="Solid layout", strengths=["Clean markup"]),
        ),
        make_submission(
            id="3",
            first_name="Mike",
            last_name="Johnson",
            title="JavaScript Fundamentals Quiz",
            course="JavaScript Basics",
            max_points=25,
            due_in=timedelta(days=-7),
            submitted_ago=timedelta(days=8),
            status=SubmissionStatus.RETURNED,
            grade=20,
            feedback=Feedback(),
        ),
    ]


@pytest.fixture
def gradebook(sample_submissions):
    return SubmissionCollection(sample_submissions)


# ============================================
# Certificate Fixtures
# ============================================

def make_certificate_request(id="c1", status=CertificateStatus.PENDING, **kwargs) -> CertificateRequest:
    return CertificateRequest(
        id=id,
        student=CertificateStudent("Jane", "Smith"),
        course_title="Web Development Basics",
        status=status,
        completed_at=NOW - timedelta(days=3),
        requested_at=NOW - timedelta(days=2),
        **kwargs
    )


@pytest.fixture
def certificate_requests():
    return CertificateRequestCollection([
        make_certificate_request("c1"),
        make_certificate_request("c2"),
        make_certificate_request("c3", status=CertificateStatus.APPROVED, approved_at=NOW - timedelta(days=1)),
    ])


# ============================================
# Mock Fixtures
# ============================================

@pytest.fixture
def mock_api():
    """Mock of lms.api.endpoints"""
    api = AsyncMock()
    api.grade_submission = AsyncMock(return_value={})
    api.return_submission = AsyncMock(return_value={})
    api.approve_certificate = AsyncMock(return_value={})
    api.reject_certificate = AsyncMock(return_value={})
    return api


@pytest.fixture
def reset_client():
    """Drop the shared HTTP client after the test"""
    yield
    api_client.set_client(None)
