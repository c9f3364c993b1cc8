"""
Assessment console: list, grade and submit assignments, projects and quizzes.

Admins only see and grade submissions for courses where the backend grants
them ``canGrade`` or ``canManage``. Students submit through the same service;
text and link drafts are checked before anything is sent.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..analytics.risk import as_utc
from ..errors import DashboardError, PermissionDeniedError
from ..models.course import Course
from ..models.enums import AssessmentKind, SubmissionType
from ..models.submission import (
    BulkGradeItem,
    GradeRequest,
    QuizResult,
    Submission,
    SubmissionDraft,
)
from ..resources import Backend
from ..resources.submissions import UploadedFile
from ..session import Session
from .common import raise_if_unavailable

logger = logging.getLogger(__name__)


class AssessmentRow(BaseModel):
    """A submission with the course context the grading table needs."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    submission: Submission
    course_id: Optional[str] = None
    course_title: str = ""
    item_title: str = ""
    due_date: Optional[datetime] = None
    status: str = "pending"
    can_grade: bool = False


def submission_status(submission: Submission, due_date: Optional[datetime]) -> str:
    """``graded``, ``late`` (submitted after the due date) or ``pending``."""
    if submission.is_graded:
        return "graded"
    if due_date and submission.created_at and as_utc(submission.created_at) > as_utc(due_date):
        return "late"
    return "pending"


class GradingService:
    def __init__(self, backend: Backend):
        self.backend = backend

    async def permissions(self, courses: List[Course], session: Session) -> Dict[str, bool]:
        """Course id -> whether the caller may review its submissions.

        A course whose permission check fails counts as not gradable.
        """
        outcomes = await asyncio.gather(
            *(self.backend.courses.permissions(course.id, session) for course in courses),
            return_exceptions=True,
        )
        raise_if_unavailable(outcomes)
        allowed = {}
        for course, outcome in zip(courses, outcomes):
            if isinstance(outcome, DashboardError):
                logger.warning(f"Permission check failed for course {course.id}: {outcome.message}")
                allowed[course.id] = False
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                allowed[course.id] = outcome.can_review
        return allowed

    async def _course_submissions(self, courses: List[Course], session: Session, projects_only: bool):
        outcomes = await asyncio.gather(
            *(self.backend.submissions.for_course(c.id, session, projects_only=projects_only) for c in courses),
            return_exceptions=True,
        )
        raise_if_unavailable(outcomes)
        for course, outcome in zip(courses, outcomes):
            if isinstance(outcome, DashboardError):
                logger.warning(f"Could not load submissions for course {course.id}: {outcome.message}")
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            yield course, outcome

    async def list(self, kind: AssessmentKind, session: Session) -> List[AssessmentRow]:
        """Every submission of one kind across the courses that have that kind."""
        courses = await self.backend.courses.list(session)
        if kind == AssessmentKind.quizzes:
            return await self._quizzes(courses, session)

        if kind == AssessmentKind.assignments:
            relevant = [c for c in courses if c.assignments]
        else:
            relevant = [c for c in courses if c.project is not None]
        allowed = await self.permissions(relevant, session)

        rows = []
        async for course, submissions in self._course_submissions(
            relevant, session, projects_only=kind == AssessmentKind.projects
        ):
            for submission in submissions:
                if kind == AssessmentKind.assignments:
                    if not submission.is_assignment:
                        continue
                    assignment = course.find_assignment(submission.assignment_id)
                    title = assignment.title if assignment else ""
                    due = assignment.due_date if assignment else None
                else:
                    if not submission.is_project:
                        continue
                    title = course.project.title or ""
                    due = course.project.due_date
                rows.append(AssessmentRow(
                    submission=submission,
                    course_id=course.id,
                    course_title=course.title,
                    item_title=title,
                    due_date=due,
                    status=submission_status(submission, due),
                    can_grade=allowed.get(course.id, False),
                ))
        logger.info(f"Loaded {len(rows)} {kind.value} submissions from {len(relevant)} courses")
        return rows

    async def _quizzes(self, courses: List[Course], session: Session) -> List[AssessmentRow]:
        titles = {course.id: course.title for course in courses}
        modules = {
            module.id: module.title for course in courses for module in course.modules if module.id
        }
        submissions = await self.backend.submissions.all(session, submission_type=SubmissionType.quiz.value)
        return [
            AssessmentRow(
                submission=submission,
                course_id=submission.course_key,
                course_title=titles.get(submission.course_key, ""),
                item_title=modules.get(submission.module_id, ""),
                status=submission_status(submission, None),
                can_grade=False,
            )
            for submission in submissions
        ]

    async def _check_can_grade(self, course_id: str, session: Session) -> None:
        permissions = await self.backend.courses.permissions(course_id, session)
        if not permissions.can_review:
            raise PermissionDeniedError(
                403, "You don't have permission to grade submissions for this course"
            )

    async def grade(
        self,
        submission_id: str,
        request: GradeRequest,
        session: Session,
        course_id: Optional[str] = None,
    ) -> Submission:
        """Grade one submission; with ``course_id`` the caller's permission is checked first."""
        if course_id:
            await self._check_can_grade(course_id, session)
        graded = await self.backend.submissions.grade(submission_id, request, session)
        logger.info(f"Graded submission {submission_id}: {request.grade}")
        return graded

    async def bulk_grade(self, items: List[BulkGradeItem], session: Session) -> Dict[str, Any]:
        result = await self.backend.submissions.bulk_grade(items, session)
        logger.info(f"Bulk graded {len(items)} submissions")
        return result

    # Student side

    async def submit_assignment(
        self, course_id: str, assignment_id: str, draft: SubmissionDraft, session: Session
    ) -> Submission:
        """Send a text or link submission.

        Raises:
            SubmissionValidationError: before any request, if the draft is empty.
        """
        payload = draft.to_payload()
        return await self.backend.submissions.submit_assignment(
            course_id, assignment_id, session, body=payload
        )

    async def submit_assignment_file(
        self, course_id: str, assignment_id: str, file: UploadedFile, session: Session
    ) -> Submission:
        return await self.backend.submissions.submit_assignment(
            course_id, assignment_id, session, file=file
        )

    async def submit_project(
        self,
        course_id: str,
        session: Session,
        draft: Optional[SubmissionDraft] = None,
        file: Optional[UploadedFile] = None,
    ) -> Submission:
        if file is not None:
            return await self.backend.submissions.submit_project(course_id, session, file=file)
        payload = (draft or SubmissionDraft()).to_payload()
        return await self.backend.submissions.submit_project(course_id, session, body=payload)

    async def submit_quiz(self, course_id: str, quiz_id: str, answers: List[str], session: Session) -> QuizResult:
        return await self.backend.submissions.submit_quiz(course_id, quiz_id, answers, session)
