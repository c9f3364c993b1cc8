"""Course records as returned by ``/api/courses``."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import Field, field_validator

from .common import ApiModel, RefId, StrList, id_field

# Day counts per estimatedDuration unit
UNIT_DAYS = {
    "day": 1,
    "days": 1,
    "week": 7,
    "weeks": 7,
    "month": 30,
    "months": 30,
}


class EstimatedDuration(ApiModel):
    """``{"value": 6, "unit": "weeks"}``."""
    value: Optional[float] = None
    unit: Optional[str] = None

    @property
    def days(self) -> Optional[float]:
        if self.value is None:
            return None
        factor = UNIT_DAYS.get((self.unit or "days").lower())
        if factor is None:
            return None
        return self.value * factor


class Instructor(ApiModel):
    name: str = "Unknown Instructor"
    avatar: Optional[str] = None


class CourseInstructor(ApiModel):
    user_id: RefId = None
    name: Optional[str] = None
    role: str = "main"


class Module(ApiModel):
    id: Optional[str] = id_field(None)
    type: Optional[str] = None
    title: str = ""
    content_url: Optional[str] = None
    duration: Optional[str] = None
    estimated_duration: Optional[EstimatedDuration] = None
    quiz: Optional[Dict[str, Any]] = None


class Section(ApiModel):
    id: Optional[str] = id_field(None)
    title: str = ""
    description: Optional[str] = None
    modules: List[Module] = []

    @field_validator("modules", mode="before")
    @classmethod
    def _modules(cls, v):
        return v or []


class Material(ApiModel):
    url: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None


class Assignment(ApiModel):
    id: Optional[str] = id_field(None)
    title: str = ""
    instructions: Optional[str] = None
    materials: List[Material] = []
    submission_types: StrList = ["text"]
    due_date: Optional[datetime] = None


class Project(ApiModel):
    title: Optional[str] = None
    instructions: Optional[str] = None
    materials: List[Material] = []
    submission_types: StrList = ["file_upload"]
    due_date: Optional[datetime] = None


class Course(ApiModel):
    """A catalog course. The frontend only ever holds a read-mostly copy."""

    id: str = id_field()
    title: str = ""
    description: str = ""
    categories: StrList = []
    tags: StrList = []
    level: Optional[str] = None
    type: Optional[str] = None
    thumbnail: Optional[str] = None
    duration: Optional[str] = None
    estimated_duration: Optional[Union[EstimatedDuration, float]] = None
    instructor: Optional[Instructor] = None
    instructors: List[CourseInstructor] = []
    objectives: StrList = []
    prerequisites: StrList = []
    sections: List[Section] = []
    assignments: List[Assignment] = []
    project: Optional[Project] = None
    status: Optional[str] = None
    is_deleted: bool = False
    is_public: Optional[bool] = None
    is_enrolled: Optional[bool] = None
    progress: Optional[float] = None
    created_at: Optional[datetime] = None

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v):
        return v or ""

    @field_validator("instructors", "sections", "assignments", mode="before")
    @classmethod
    def _lists(cls, v):
        return v or []

    @property
    def is_available(self) -> bool:
        """False for soft-deleted courses."""
        return not self.is_deleted and self.status != "deleted"

    @property
    def modules(self) -> List[Module]:
        return [module for section in self.sections for module in section.modules]

    def has_instructor(self, user_id: str) -> bool:
        return any(instructor.user_id == user_id for instructor in self.instructors)

    def find_assignment(self, assignment_id: Optional[str]) -> Optional[Assignment]:
        if not assignment_id:
            return None
        return next((a for a in self.assignments if a.id == assignment_id), None)


class CourseSummary(ApiModel):
    """The trimmed course object embedded in enrollments and submissions."""
    id: Optional[str] = id_field(None)
    title: str = ""
    type: Optional[str] = None
    duration: Optional[str] = None
    estimated_duration: Optional[Union[EstimatedDuration, float]] = None


class CoursePermissions(ApiModel):
    can_view: bool = False
    can_edit: bool = False
    can_grade: bool = False
    can_manage: bool = False

    @property
    def can_review(self) -> bool:
        return self.can_grade or self.can_manage


class InstructorAssignment(ApiModel):
    """Request to add a user as an instructor of a course."""
    user_id: str
    course_id: str
    name: Optional[str] = None
    role: str = Field("assistant", pattern="^(main|assistant)$")
