"""
Error taxonomy
"""

from typing import Optional


class LmsError(Exception):
    """Base class for workflow errors"""


class InvalidInputError(LmsError, ValueError):
    """Malformed numeric input to a pure computation"""


class InvalidGradeError(LmsError, ValueError):
    """Grade is not a number or lies outside [0, max_points]"""


class EmptyNoteError(LmsError, ValueError):
    """Feedback note is blank after trimming"""


class IndexOutOfRangeError(LmsError, IndexError):
    """Feedback note index does not exist"""


class InvalidStateError(LmsError):
    """Transition attempted from the wrong state"""


class RecordNotFoundError(LmsError, KeyError):
    """No record with the given id in the collection"""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Record not found"


class ApiError(LmsError):
    """
    Collaborator call failed or answered success=false.

    `message` is the server-supplied text when there is one, otherwise the
    generic message of the failed operation.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, server_message: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.server_message = server_message
