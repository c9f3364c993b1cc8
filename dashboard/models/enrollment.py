"""Enrollment records from ``/api/enrollments``."""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import field_validator

from .common import ApiModel, RefId, id_field
from .course import CourseSummary


class UserSummary(ApiModel):
    """The trimmed user object the backend populates into other records."""
    id: Optional[str] = id_field(None)
    name: str = ""
    email: str = ""
    last_login: Optional[datetime] = None
    profile_picture: Optional[str] = None


class SectionProgress(ApiModel):
    section_id: RefId = None
    completed: bool = False
    modules_completed: int = 0
    total_modules: int = 0


class ModuleProgress(ApiModel):
    module_id: RefId = None
    completed: bool = False
    time_spent: Optional[float] = None


class AssignmentProgress(ApiModel):
    assignment_id: RefId = None
    submitted: bool = False
    graded: bool = False
    score: Optional[float] = None


class ProjectProgress(ApiModel):
    submitted: bool = False
    reviewed: bool = False
    score: Optional[float] = None


class QuizProgress(ApiModel):
    quiz_id: RefId = None
    score: Optional[float] = None
    attempts: int = 0


class Enrollment(ApiModel):
    """Links a user to a course. Created and mutated server-side only."""

    id: Optional[str] = id_field(None)
    user: Optional[Union[UserSummary, str]] = None
    course: Optional[Union[CourseSummary, str]] = None
    progress: float = 0
    completed: bool = False
    completed_at: Optional[datetime] = None
    time_spent: float = 0
    enrolled_at: Optional[datetime] = None
    last_accessed: Optional[datetime] = None
    section_progress: List[SectionProgress] = []
    module_progress: List[ModuleProgress] = []
    assignment_progress: List[AssignmentProgress] = []
    project_progress: Optional[ProjectProgress] = None
    quiz_progress: List[QuizProgress] = []

    @field_validator("progress", "time_spent", mode="before")
    @classmethod
    def _zero_if_missing(cls, v):
        return 0 if v is None else v

    @field_validator(
        "section_progress", "module_progress", "assignment_progress", "quiz_progress",
        mode="before",
    )
    @classmethod
    def _lists(cls, v):
        return v or []

    @property
    def course_id(self) -> Optional[str]:
        if isinstance(self.course, CourseSummary):
            return self.course.id
        return self.course or None

    @property
    def user_id(self) -> Optional[str]:
        if isinstance(self.user, UserSummary):
            return self.user.id
        return self.user or None

    @property
    def course_summary(self) -> Optional[CourseSummary]:
        return self.course if isinstance(self.course, CourseSummary) else None

    @property
    def user_summary(self) -> Optional[UserSummary]:
        return self.user if isinstance(self.user, UserSummary) else None

    @property
    def assignments_submitted(self) -> int:
        return sum(1 for a in self.assignment_progress if a.submitted)
