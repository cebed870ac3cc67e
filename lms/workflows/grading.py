"""
Grading workflow: grade, feedback and return transitions for submissions
"""

import logging
from typing import Optional, Union

from lms.api import endpoints
from lms.errors import InvalidStateError
from lms.models import Feedback, FeedbackSnapshot, Submission
from lms.services.gradebook import SubmissionCollection
from lms.services.grades import percentage, validate_grade
from lms.states import SubmissionStatus

logger = logging.getLogger(__name__)


def _submission_id(submission: Union[Submission, str]) -> str:
    return submission.id if isinstance(submission, Submission) else submission


class SubmissionWorkflow:
    """
    Single writer for a SubmissionCollection.

    Transitions: submitted -> graded, graded <-> returned, and re-grading of
    graded or returned work. Nothing goes back to submitted. Every transition
    is confirmed by the API before the local record changes.
    """

    def __init__(self, submissions: SubmissionCollection, token: Optional[str] = None, api=endpoints):
        self.submissions = submissions
        self.token = token
        self.api = api

    async def load_assignment_submissions(self, assignment_id: str) -> list[Submission]:
        """Fetch an assignment's submissions into the collection"""
        rows = await self.api.get_assignment_submissions(self.token, assignment_id)
        self.submissions.load(rows)
        return rows

    async def grade_submission(
        self,
        submission: Union[Submission, str],
        grade,
        feedback: Union[Feedback, FeedbackSnapshot, None] = None
    ) -> Submission:
        """Validate, send one grade request, then apply grade + feedback + status=graded"""
        current = self.submissions.get(_submission_id(submission))
        max_points = current.assignment.max_points

        # Local validation: no request, no mutation
        value = validate_grade(grade, max_points)
        if isinstance(feedback, Feedback):
            feedback = feedback.freeze()
        elif feedback is None:
            feedback = FeedbackSnapshot()

        payload = {
            # The backend stores grades as percentages
            "grade": percentage(value, max_points),
            "points": value,
            "feedback": feedback.to_api(),
        }
        await self.api.grade_submission(self.token, current.id, payload)

        # Apply to the record as it stands now the response is in
        updated = self.submissions.get(current.id).with_grade(value, feedback)
        self.submissions.replace(updated)

        logger.info(f"Submission graded: id={current.id}, grade={value:g}/{max_points:g}")
        return updated

    async def return_submission(self, submission: Union[Submission, str]) -> Submission:
        """graded -> returned"""
        current = self.submissions.get(_submission_id(submission))

        if current.status is not SubmissionStatus.GRADED:
            raise InvalidStateError(
                f"Submission {current.id} is {current.status.value}; only graded work can be returned"
            )

        await self.api.return_submission(self.token, current.id)

        updated = self.submissions.get(current.id).with_status(SubmissionStatus.RETURNED)
        self.submissions.replace(updated)

        logger.info(f"Submission returned: id={current.id}")
        return updated
