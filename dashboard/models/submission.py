"""Submission records and the payloads used to create or grade them."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import Field, field_validator

from ..errors import SubmissionValidationError
from .common import ApiModel, RefId, id_field
from .course import CourseSummary
from .enrollment import UserSummary
from .enums import SubmissionType


class SubmissionFile(ApiModel):
    url: Optional[str] = None
    public_id: Optional[str] = Field(None, alias="public_id")
    name: Optional[str] = None
    type: Optional[str] = None
    size: Optional[int] = None
    format: Optional[str] = None


class SubmissionContent(ApiModel):
    text: Optional[str] = None
    link: Optional[str] = None
    file: Optional[SubmissionFile] = None
    answers: Optional[List[str]] = None
    score: Optional[float] = None
    passed: Optional[bool] = None


class RubricScore(ApiModel):
    criterion: str
    score: float
    max_score: Optional[float] = None
    comments: Optional[str] = None


class Submission(ApiModel):
    """A student's assignment/project/quiz artifact, with optional grade."""

    id: str = id_field()
    course_id: Optional[Union[CourseSummary, str]] = None
    section_id: RefId = None
    module_id: RefId = None
    assignment_id: RefId = None
    project_id: RefId = None
    student_id: Optional[Union[UserSummary, str]] = None
    submission_type: str = SubmissionType.text.value
    submission: SubmissionContent = SubmissionContent()
    grade: Optional[float] = None
    feedback: Optional[str] = None
    rubric_scores: List[RubricScore] = []
    resubmit_required: bool = False
    graded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @field_validator("submission", mode="before")
    @classmethod
    def _content(cls, v):
        return v or {}

    @field_validator("rubric_scores", mode="before")
    @classmethod
    def _rubric(cls, v):
        return v or []

    @property
    def is_graded(self) -> bool:
        return self.grade is not None

    @property
    def is_project(self) -> bool:
        return self.project_id is not None

    @property
    def is_assignment(self) -> bool:
        return self.assignment_id is not None and self.project_id is None

    @property
    def is_quiz(self) -> bool:
        return self.submission_type == SubmissionType.quiz.value

    @property
    def course_key(self) -> Optional[str]:
        if isinstance(self.course_id, CourseSummary):
            return self.course_id.id
        return self.course_id


class SubmissionDraft(ApiModel):
    """What a student has typed so far for a text or link submission."""

    submission_type: SubmissionType = SubmissionType.text
    text: str = ""
    link: str = ""

    def can_submit(self) -> bool:
        """Mirror of the submit button's enabled state."""
        if self.submission_type == SubmissionType.text:
            return bool(self.text.strip())
        if self.submission_type == SubmissionType.link:
            return bool(self.link.strip())
        return False

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for a non-file submission.

        Raises:
            SubmissionValidationError: if the draft cannot be submitted yet.
        """
        if self.submission_type == SubmissionType.text:
            text = self.text.strip()
            if not text:
                raise SubmissionValidationError("text", "Submission text cannot be empty")
            return {"submissionType": "text", "submission": {"text": text}}
        if self.submission_type == SubmissionType.link:
            link = self.link.strip()
            if not link:
                raise SubmissionValidationError("link", "Submission link cannot be empty")
            return {"submissionType": "link", "submission": {"link": link}}
        raise SubmissionValidationError(
            "submissionType",
            f"'{self.submission_type.value}' submissions are not sent as JSON",
        )


class GradeRequest(ApiModel):
    grade: float = Field(..., ge=0, le=100)
    feedback: str = ""
    rubric_scores: Optional[List[RubricScore]] = None
    resubmit_required: Optional[bool] = None
    resubmit_deadline: Optional[datetime] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class BulkGradeItem(GradeRequest):
    submission_id: str


class QuizAnswers(ApiModel):
    answers: List[str]


class QuizResult(ApiModel):
    score: float = 0
    total_questions: int = 0
    correct_answers: int = 0
    passed: bool = False
    attempts: int = 1
