"""
Gradebook: filtering, summary counts and CSV export over submissions
"""

import csv
import io
import logging
from collections import Counter
from pathlib import Path
from typing import Iterable, Optional

from lms.config import config
from lms.errors import RecordNotFoundError
from lms.models import Submission
from lms.services.grades import format_number
from lms.states import SubmissionStatus

logger = logging.getLogger(__name__)

CSV_HEADER = ["Student Name", "Course", "Assignment", "Grade", "Status", "Submitted Date"]
CSV_FILENAME = "gradebook.csv"
DATE_FORMAT = "%d/%m/%Y"


# ============================================
# Pure helpers
# ============================================

def matches(
    submission: Submission,
    status: Optional[str] = None,
    course: Optional[str] = None,
    assignment: Optional[str] = None,
    search: Optional[str] = None,
) -> bool:
    """All given filters must match; empty filters match everything"""
    if status and submission.status != status:
        return False
    # Course and assignment filters are case-sensitive
    if course and course not in submission.assignment.course:
        return False
    if assignment and assignment not in submission.assignment.title:
        return False
    if search:
        term = search.lower()
        if not (
            term in submission.student.first_name.lower()
            or term in submission.student.last_name.lower()
            or term in submission.assignment.title.lower()
        ):
            return False
    return True


def filter_submissions(submissions: Iterable[Submission], **filters) -> list[Submission]:
    return [s for s in submissions if matches(s, **filters)]


def csv_row(submission: Submission) -> list[str]:
    grade = submission.grade
    return [
        submission.student.full_name,
        submission.assignment.course,
        submission.assignment.title,
        "Not graded" if grade is None else format_number(grade),
        submission.status.value,
        submission.submitted_at.strftime(DATE_FORMAT),
    ]


def to_csv(submissions: Iterable[Submission], quote_fields: Optional[bool] = None) -> str:
    """
    Gradebook export: header plus one row per submission, in input order.

    Fields are joined with bare commas unless `quote_fields` (default:
    CSV_QUOTE_FIELDS) is on, in which case fields holding commas, quotes or
    newlines are quoted.
    """
    if quote_fields is None:
        quote_fields = config.CSV_QUOTE_FIELDS

    rows = [CSV_HEADER] + [csv_row(s) for s in submissions]

    if not quote_fields:
        return "\n".join(",".join(row) for row in rows)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue().rstrip("\n")


def count_by_status(submissions: Iterable[Submission]) -> dict[str, int]:
    counts = Counter(s.status.value for s in submissions)
    return {status.value: counts.get(status.value, 0) for status in SubmissionStatus}


def count_late(submissions: Iterable[Submission]) -> int:
    return sum(1 for s in submissions if s.is_late)


# ============================================
# Collection
# ============================================

class SubmissionCollection:
    """Submissions owned by the grading workflow, kept in load order"""

    def __init__(self, submissions: Optional[Iterable[Submission]] = None):
        self._items: dict[str, Submission] = {}
        for submission in submissions or []:
            self._items[submission.id] = submission

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items.values()))

    def __contains__(self, submission_id) -> bool:
        return submission_id in self._items

    def get(self, submission_id: str) -> Submission:
        try:
            return self._items[submission_id]
        except KeyError:
            raise RecordNotFoundError(f"Submission {submission_id} not found") from None

    def load(self, submissions: Iterable[Submission]):
        """Replace the contents with a freshly fetched list"""
        self._items = {s.id: s for s in submissions}
        logger.info(f"Gradebook loaded: {len(self._items)} submissions")

    def replace(self, submission: Submission):
        """Swap in an updated record (same id, same position)"""
        if submission.id not in self._items:
            raise RecordNotFoundError(f"Submission {submission.id} not found")
        self._items[submission.id] = submission

    def filter(self, status=None, course=None, assignment=None, search=None) -> list[Submission]:
        return filter_submissions(
            self._items.values(), status=status, course=course, assignment=assignment, search=search
        )

    def to_csv(self, submissions: Optional[Iterable[Submission]] = None, quote_fields: Optional[bool] = None) -> str:
        return to_csv(self if submissions is None else submissions, quote_fields=quote_fields)

    def export_csv(self, directory=".", submissions: Optional[Iterable[Submission]] = None,
                   quote_fields: Optional[bool] = None) -> Path:
        """Write gradebook.csv into `directory`"""
        path = Path(directory) / CSV_FILENAME
        rows = list(self if submissions is None else submissions)
        path.write_text(self.to_csv(rows, quote_fields=quote_fields), encoding="utf-8")
        logger.info(f"Gradebook exported: {path} ({len(rows)} rows)")
        return path

    def count_by_status(self) -> dict[str, int]:
        return count_by_status(self)

    def count_late(self) -> int:
        return count_late(self)

    def summary(self) -> dict[str, int]:
        """Footer counts: pending, graded, returned, total, late"""
        counts = self.count_by_status()
        return {
            "pending": counts[SubmissionStatus.SUBMITTED.value],
            "graded": counts[SubmissionStatus.GRADED.value],
            "returned": counts[SubmissionStatus.RETURNED.value],
            "total": len(self),
            "late": self.count_late(),
        }
