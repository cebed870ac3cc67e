"""
Grade computations: percentage, band, display helpers
"""

import math
from typing import Any, Optional

from lms.errors import InvalidGradeError, InvalidInputError
from lms.states import GradeBand


# Lower percentage bound of each band, best first
BAND_THRESHOLDS = (
    (90, GradeBand.EXCELLENT),
    (80, GradeBand.GOOD),
    (70, GradeBand.FAIR),
)

FILE_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    return value


def percentage(grade: float, max_points: float) -> float:
    """100 * grade / max_points, unrounded"""
    max_points = _number(max_points, "max_points")
    if max_points <= 0:
        raise InvalidInputError(f"max_points must be positive, got {max_points!r}")
    grade = _number(grade, "grade")
    return 100 * grade / max_points


def band(grade: Optional[float], max_points: float) -> GradeBand:
    """Qualitative band; a missing grade is UNGRADED, never a numeric band"""
    if grade is None:
        return GradeBand.UNGRADED
    pct = percentage(grade, max_points)
    for threshold, grade_band in BAND_THRESHOLDS:
        if pct >= threshold:
            return grade_band
    return GradeBand.POOR


def round_half_up(value: float) -> int:
    """Nearest integer with halves rounded up (84.5 -> 85), unlike round()"""
    return math.floor(value + 0.5)


def format_number(value: float) -> str:
    """Full-precision text for a number: whole values without a decimal point"""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def display_percentage(grade: Optional[float], max_points: float) -> str:
    """Rounded percentage for display ("85%" or "Not graded")"""
    if grade is None:
        return "Not graded"
    return f"{round_half_up(percentage(grade, max_points))}%"


def validate_grade(grade: Any, max_points: float) -> float:
    """
    Validates a grade against an assignment's maximum.

    Accepts numbers and numeric strings; booleans, NaN and infinities are
    rejected, as is anything outside [0, max_points].

    Returns:
        The grade as a float.

    Raises:
        InvalidGradeError: If the grade is not a finite number in range.
    """
    if isinstance(grade, bool) or grade is None:
        raise InvalidGradeError(f"Grade must be a number, got {grade!r}")
    try:
        value = float(grade)
    except (TypeError, ValueError):
        raise InvalidGradeError(f"Grade must be a number, got {grade!r}") from None

    if not math.isfinite(value):
        raise InvalidGradeError(f"Grade must be a finite number, got {grade!r}")
    if value < 0 or value > max_points:
        raise InvalidGradeError(f"Grade must be between 0 and {max_points:g}, got {value:g}")

    return value


def format_file_size(size: int) -> str:
    """Human file size, e.g. 1536 -> '1.5 KB'"""
    if size < 0:
        raise InvalidInputError(f"File size cannot be negative: {size}")
    if size == 0:
        return "0 Bytes"
    value = float(size)
    exponent = 0
    while value >= 1024 and exponent < len(FILE_SIZE_UNITS) - 1:
        value /= 1024
        exponent += 1
    return f"{round(value, 2):g} {FILE_SIZE_UNITS[exponent]}"


def file_kind(file_type: str) -> str:
    """Attachment bucket by MIME type: video, image or document"""
    if file_type.startswith("video/"):
        return "video"
    if file_type.startswith("image/"):
        return "image"
    return "document"
