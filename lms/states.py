"""
Workflow states and closed enumerations
"""

from enum import Enum


class SubmissionStatus(str, Enum):
    """Lifecycle of a submission"""

    SUBMITTED = "submitted"    # Delivered, waiting for a grade
    GRADED = "graded"          # Grade and feedback attached
    RETURNED = "returned"      # Graded work handed back to the student


class CertificateStatus(str, Enum):
    """Lifecycle of a certificate request"""

    PENDING = "pending"
    APPROVED = "approved"      # Terminal
    REJECTED = "rejected"      # Terminal

    @property
    def is_terminal(self) -> bool:
        return self is not CertificateStatus.PENDING


class FeedbackCategory(str, Enum):
    """Itemised feedback lists"""

    STRENGTHS = "strengths"
    IMPROVEMENTS = "improvements"
    SUGGESTIONS = "suggestions"


class GradeBand(str, Enum):
    """Qualitative grade bands"""

    EXCELLENT = "excellent"    # >= 90%
    GOOD = "good"              # >= 80%
    FAIR = "fair"              # >= 70%
    POOR = "poor"              # < 70%
    UNGRADED = "ungraded"      # No grade yet


class UrgencyTier(str, Enum):
    """Urgency buckets by days until due"""

    OVERDUE = "overdue"        # < 0
    DUE_SOON = "due_soon"      # 0..1
    WARNING = "warning"        # 2..3
    NORMAL = "normal"          # > 3


class ActivityType(str, Enum):
    """Activity event types; OTHER covers anything the server adds later"""

    COURSE_ENROLLED = "course_enrolled"
    MODULE_COMPLETED = "module_completed"
    ASSIGNMENT_SUBMITTED = "assignment_submitted"
    ASSIGNMENT_GRADED = "assignment_graded"
    VIDEO_WATCHED = "video_watched"
    DUE_SOON = "due_soon"
    OTHER = "other"

    @classmethod
    def parse(cls, value) -> "ActivityType":
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER
