"""
Data models (dataclasses)
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional, Union

from lms.errors import EmptyNoteError, IndexOutOfRangeError, InvalidInputError, InvalidStateError
from lms.services.grades import validate_grade
from lms.states import (
    ActivityType,
    CertificateStatus,
    FeedbackCategory,
    SubmissionStatus,
)


def parse_timestamp(value) -> Optional[datetime]:
    """ISO-8601 string or datetime -> aware datetime (naive values are UTC)"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat().replace("+00:00", "Z")


def _ref(data: dict, *keys) -> dict:
    """First nested object found under any of `keys` (populated refs only)"""
    for key in keys:
        value = data.get(key)
        if isinstance(value, dict):
            return value
    return {}


# ============================================
# Feedback
# ============================================

@dataclass
class Feedback:
    """Structured grading feedback"""
    general: str = ""
    strengths: list[str] = field(default_factory=list)
    improvements: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)

    def notes(self, category) -> list[str]:
        """List behind a category name"""
        try:
            category = FeedbackCategory(category)
        except ValueError:
            raise InvalidInputError(f"Unknown feedback category: {category!r}") from None
        return getattr(self, category.value)

    def add_note(self, category, text: str) -> str:
        """Append a trimmed note; duplicates are allowed"""
        notes = self.notes(category)
        cleaned = (text or "").strip()
        if not cleaned:
            raise EmptyNoteError("Feedback note cannot be empty")
        notes.append(cleaned)
        return cleaned

    def remove_note(self, category, index: int) -> str:
        """Remove a note by position, later notes shift left"""
        notes = self.notes(category)
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(notes):
            raise IndexOutOfRangeError(
                f"No {FeedbackCategory(category).value} note at index {index!r} ({len(notes)} notes)"
            )
        return notes.pop(index)

    def set_general(self, text: str):
        self.general = text

    def copy(self) -> "Feedback":
        return Feedback(
            general=self.general,
            strengths=list(self.strengths),
            improvements=list(self.improvements),
            suggestions=list(self.suggestions),
        )

    def to_api(self) -> dict:
        return {
            "general": self.general,
            "strengths": list(self.strengths),
            "improvements": list(self.improvements),
            "suggestions": list(self.suggestions),
        }

    @classmethod
    def from_api(cls, data: Optional[dict]) -> Optional["Feedback"]:
        if not data:
            return None
        if isinstance(data, str):
            return cls(general=data)
        return cls(
            general=data.get("general") or "",
            strengths=_clean_notes(data.get("strengths")),
            improvements=_clean_notes(data.get("improvements")),
            suggestions=_clean_notes(data.get("suggestions")),
        )

    def freeze(self) -> "FeedbackSnapshot":
        return FeedbackSnapshot(
            general=self.general,
            strengths=tuple(self.strengths),
            improvements=tuple(self.improvements),
            suggestions=tuple(self.suggestions),
        )


def _clean_notes(values) -> list[str]:
    """Trimmed non-empty strings; anything else the server sends is dropped"""
    return [s.strip() for s in values or [] if isinstance(s, str) and s.strip()]


@dataclass(frozen=True)
class FeedbackSnapshot:
    """Read-only feedback as stored on a submission; edit() gives a draft"""
    general: str = ""
    strengths: tuple[str, ...] = ()
    improvements: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()

    def notes(self, category) -> tuple[str, ...]:
        try:
            category = FeedbackCategory(category)
        except ValueError:
            raise InvalidInputError(f"Unknown feedback category: {category!r}") from None
        return getattr(self, category.value)

    def edit(self) -> Feedback:
        return Feedback(
            general=self.general,
            strengths=list(self.strengths),
            improvements=list(self.improvements),
            suggestions=list(self.suggestions),
        )

    def to_api(self) -> dict:
        return self.edit().to_api()


# ============================================
# Submissions
# ============================================

@dataclass(frozen=True)
class Student:
    """Submitting student (display only)"""
    first_name: str
    last_name: str
    email: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_api(cls, data: dict) -> "Student":
        return cls(
            first_name=data.get("firstName") or "",
            last_name=data.get("lastName") or "",
            email=data.get("email"),
        )


@dataclass(frozen=True)
class Assignment:
    """Assignment a submission answers"""
    title: str
    course: str
    max_points: float
    due_date: Optional[datetime]
    instructions: str = ""
    id: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.max_points, bool) or not isinstance(self.max_points, (int, float)) \
                or self.max_points <= 0:
            raise InvalidInputError(f"max_points must be a positive number, got {self.max_points!r}")

    @classmethod
    def from_api(cls, data: dict, course: Optional[str] = None) -> "Assignment":
        course_ref = data.get("course") or data.get("courseId")
        if isinstance(course_ref, dict):
            course_ref = course_ref.get("title")
        return cls(
            id=data.get("_id") or data.get("id"),
            title=data.get("title") or "",
            course=course or course_ref or "",
            max_points=data.get("maxPoints") or 100,
            due_date=parse_timestamp(data.get("dueDate")),
            instructions=data.get("instructions") or "",
        )


@dataclass(frozen=True)
class SubmissionFile:
    """Attached file"""
    original_name: str
    file_type: str
    file_size: int
    url: str

    def __post_init__(self):
        if self.file_size < 0:
            raise InvalidInputError(f"file_size cannot be negative: {self.file_size}")

    @classmethod
    def from_api(cls, data: dict) -> "SubmissionFile":
        return cls(
            original_name=data.get("originalName") or data.get("filename") or "",
            file_type=data.get("fileType") or data.get("mimetype") or "application/octet-stream",
            file_size=int(data.get("fileSize") or data.get("size") or 0),
            url=data.get("url") or "",
        )


@dataclass(frozen=True)
class Submission:
    """A student's delivered work for one assignment"""
    id: str
    student: Student
    assignment: Assignment
    submitted_at: datetime
    status: SubmissionStatus = SubmissionStatus.SUBMITTED
    grade: Optional[float] = None
    feedback: Optional[FeedbackSnapshot] = None  # a Feedback draft is frozen on creation
    is_late: Optional[bool] = None  # computed from submitted_at when omitted
    text_submission: Optional[str] = None
    files: tuple[SubmissionFile, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "status", SubmissionStatus(self.status))
        object.__setattr__(self, "files", tuple(self.files))
        if isinstance(self.feedback, Feedback):
            object.__setattr__(self, "feedback", self.feedback.freeze())
        if self.is_late is None:
            due = self.assignment.due_date
            object.__setattr__(self, "is_late", due is not None and self.submitted_at > due)

        if self.status is SubmissionStatus.SUBMITTED:
            if self.grade is not None:
                raise InvalidStateError(f"Submission {self.id}: ungraded submission cannot carry a grade")
        else:
            if self.grade is None:
                raise InvalidStateError(f"Submission {self.id}: status {self.status.value} requires a grade")
            object.__setattr__(self, "grade", validate_grade(self.grade, self.assignment.max_points))

    @property
    def is_graded(self) -> bool:
        return self.grade is not None

    def with_grade(self, grade: float, feedback: Union[Feedback, FeedbackSnapshot, None]) -> "Submission":
        """Copy with grade, feedback snapshot and status=graded"""
        return replace(
            self,
            grade=grade,
            feedback=feedback if feedback is not None else FeedbackSnapshot(),
            status=SubmissionStatus.GRADED,
        )

    def with_status(self, status: SubmissionStatus) -> "Submission":
        return replace(self, status=status)

    @classmethod
    def from_api(cls, data: dict) -> "Submission":
        """Build from the API shape (populated or plain student/assignment refs)"""
        course_ref = _ref(data, "courseId", "course")
        assignment = Assignment.from_api(
            _ref(data, "assignment", "assignmentId"),
            course=course_ref.get("title"),
        )

        grade = data.get("grade")
        if data.get("gradePercentage") is not None:
            grade = data["gradePercentage"] * assignment.max_points / 100

        status = data.get("status") or SubmissionStatus.SUBMITTED.value
        if status not in {s.value for s in SubmissionStatus}:
            status = SubmissionStatus.GRADED.value if grade is not None else SubmissionStatus.SUBMITTED.value
        if status == SubmissionStatus.SUBMITTED.value:
            grade = None

        return cls(
            id=str(data.get("_id") or data.get("id")),
            student=Student.from_api(_ref(data, "student", "studentId")),
            assignment=assignment,
            submitted_at=parse_timestamp(data.get("submittedAt") or data.get("createdAt")),
            status=status,
            grade=grade,
            feedback=Feedback.from_api(data.get("feedback")) if grade is not None else None,
            is_late=data.get("isLate"),
            text_submission=data.get("textSubmission"),
            files=tuple(SubmissionFile.from_api(f) for f in data.get("files") or []),
        )


# ============================================
# Certificates
# ============================================

@dataclass(frozen=True)
class CertificateStudent:
    first_name: str
    last_name: str
    avatar: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class CertificateRequest:
    """A student's request for a completion certificate"""
    id: str
    student: CertificateStudent
    course_title: str
    status: CertificateStatus
    completed_at: Optional[datetime]
    requested_at: Optional[datetime]
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, "status", CertificateStatus(self.status))
        if self.approved_at is not None and self.rejected_at is not None:
            raise InvalidStateError(f"Certificate request {self.id}: approved_at and rejected_at are both set")
        if self.approved_at is not None and self.status is not CertificateStatus.APPROVED:
            raise InvalidStateError(f"Certificate request {self.id}: approved_at set on a {self.status.value} request")
        if self.rejected_at is not None and self.status is not CertificateStatus.REJECTED:
            raise InvalidStateError(f"Certificate request {self.id}: rejected_at set on a {self.status.value} request")

    def transition(self, status: CertificateStatus, at: datetime) -> "CertificateRequest":
        """Move a pending request to a terminal state"""
        if self.status is not CertificateStatus.PENDING:
            raise InvalidStateError(
                f"Certificate request {self.id} is already {self.status.value}"
            )
        if status is CertificateStatus.APPROVED:
            return replace(self, status=status, approved_at=at)
        if status is CertificateStatus.REJECTED:
            return replace(self, status=status, rejected_at=at)
        raise InvalidStateError(f"Cannot move certificate request {self.id} to {status.value}")

    @classmethod
    def from_api(cls, data: dict) -> "CertificateRequest":
        student = data.get("student") or {}
        course = data.get("course") or {}
        status = CertificateStatus(data.get("status") or CertificateStatus.PENDING.value)
        return cls(
            id=str(data.get("_id") or data.get("id")),
            student=CertificateStudent(
                first_name=student.get("firstName") or "",
                last_name=student.get("lastName") or "",
                avatar=student.get("avatar"),
            ),
            course_title=course.get("title") or "",
            status=status,
            completed_at=parse_timestamp(data.get("completedAt")),
            requested_at=parse_timestamp(data.get("requestedAt")),
            approved_at=parse_timestamp(data.get("approvedAt")) if status is CertificateStatus.APPROVED else None,
            rejected_at=parse_timestamp(data.get("rejectedAt")) if status is CertificateStatus.REJECTED else None,
        )


# ============================================
# Activity
# ============================================

@dataclass(frozen=True)
class ActivityEvent:
    """Dashboard activity entry"""
    type: str
    created_at: datetime
    course_name: Optional[str] = None
    module_name: Optional[str] = None
    assignment_name: Optional[str] = None
    grade: Optional[float] = None
    video_name: Optional[str] = None
    message: Optional[str] = None

    @property
    def kind(self) -> ActivityType:
        return ActivityType.parse(self.type)

    @classmethod
    def from_api(cls, data: dict) -> "ActivityEvent":
        return cls(
            type=data.get("type") or "",
            created_at=parse_timestamp(data.get("createdAt")),
            course_name=data.get("courseName"),
            module_name=data.get("moduleName"),
            assignment_name=data.get("assignmentName"),
            grade=data.get("grade"),
            video_name=data.get("videoName"),
            message=data.get("message"),
        )


@dataclass(frozen=True)
class UpcomingAssignment:
    """Student dashboard row for an assignment that is not yet closed"""
    id: str
    title: str
    course: str
    due_date: datetime
    max_points: float = 100
    module: Optional[str] = None
    status: Optional[str] = None  # pending, submitted, graded
    grade: Optional[float] = None  # percentage once graded
