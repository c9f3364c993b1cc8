"""Assessment console for admins and the student submission endpoints."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from pydantic import BaseModel, Field

from ..analytics.collection import all_of, query_collection, text_matcher
from ..dependencies import get_grading_service, require_admin, require_session
from ..models.enums import AssessmentKind
from ..models.submission import BulkGradeItem, GradeRequest, QuizAnswers, SubmissionDraft
from ..services.grading import GradingService
from ..session import Session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assessments", tags=["Assessments"])

SEARCH_FIELDS = ("submission.student_id.name", "submission.student_id.email", "course_title", "item_title")


class BulkGradeRequest(BaseModel):
    submissions: List[BulkGradeItem] = Field(..., min_length=1)


async def _upload(file: UploadFile):
    content = await file.read()
    return (file.filename or "upload", content, file.content_type or "application/octet-stream")


@router.get("/{kind}")
async def list_submissions(
    kind: AssessmentKind,
    status: Optional[str] = Query(None, description="graded, pending or late"),
    course: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    session: Session = Depends(require_admin),
    service: GradingService = Depends(get_grading_service),
):
    rows = await service.list(kind, session)
    predicate = all_of(
        text_matcher(search, SEARCH_FIELDS),
        (lambda row: row.status == status) if status and status != "all" else None,
        (lambda row: row.course_id == course) if course and course != "all" else None,
    )
    return query_collection(rows, predicate, page=page)


@router.put("/submissions/{submission_id}/grade")
async def grade_submission(
    submission_id: str,
    request: GradeRequest,
    course_id: Optional[str] = Query(None, alias="courseId"),
    session: Session = Depends(require_admin),
    service: GradingService = Depends(get_grading_service),
):
    return await service.grade(submission_id, request, session, course_id=course_id)


@router.post("/bulk-grade")
async def bulk_grade(
    request: BulkGradeRequest,
    session: Session = Depends(require_admin),
    service: GradingService = Depends(get_grading_service),
) -> Dict[str, Any]:
    return await service.bulk_grade(request.submissions, session)


@router.post("/courses/{course_id}/assignments/{assignment_id}/submit", status_code=201)
async def submit_assignment(
    course_id: str,
    assignment_id: str,
    draft: SubmissionDraft,
    session: Session = Depends(require_session),
    service: GradingService = Depends(get_grading_service),
):
    """Submit text or link content for an assignment."""
    return await service.submit_assignment(course_id, assignment_id, draft, session)


@router.post("/courses/{course_id}/assignments/{assignment_id}/upload", status_code=201)
async def upload_assignment(
    course_id: str,
    assignment_id: str,
    file: UploadFile = File(...),
    session: Session = Depends(require_session),
    service: GradingService = Depends(get_grading_service),
):
    return await service.submit_assignment_file(course_id, assignment_id, await _upload(file), session)


@router.post("/courses/{course_id}/project/submit", status_code=201)
async def submit_project(
    course_id: str,
    draft: SubmissionDraft,
    session: Session = Depends(require_session),
    service: GradingService = Depends(get_grading_service),
):
    return await service.submit_project(course_id, session, draft=draft)


@router.post("/courses/{course_id}/project/upload", status_code=201)
async def upload_project(
    course_id: str,
    file: UploadFile = File(...),
    session: Session = Depends(require_session),
    service: GradingService = Depends(get_grading_service),
):
    return await service.submit_project(course_id, session, file=await _upload(file))


@router.post("/courses/{course_id}/quizzes/{quiz_id}/submit")
async def submit_quiz(
    course_id: str,
    quiz_id: str,
    request: QuizAnswers,
    session: Session = Depends(require_session),
    service: GradingService = Depends(get_grading_service),
):
    return await service.submit_quiz(course_id, quiz_id, request.answers, session)
