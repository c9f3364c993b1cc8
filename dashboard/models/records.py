"""Read-only records: activity logs, survey responses and certificates."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import AliasChoices, Field, field_validator

from .common import ApiModel, RefId, id_field
from .course import CourseSummary
from .enrollment import UserSummary
from .enums import LogStatus


class LogEntry(ApiModel):
    id: Optional[str] = id_field(None)
    user_id: RefId = None
    user_name: str = ""
    user_email: str = ""
    action: str = ""
    resource: str = ""
    resource_id: Optional[str] = None
    details: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    status: LogStatus = LogStatus.success
    timestamp: Optional[datetime] = None
    course_name: Optional[str] = None
    module_name: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v):
        if v not in {status.value for status in LogStatus}:
            return LogStatus.info
        return v


class SurveyResponse(ApiModel):
    """A student's answers to an end-of-module survey."""

    id: Optional[str] = id_field(None)
    user: Optional[UserSummary] = Field(None, validation_alias=AliasChoices("userId", "user"))
    course: Optional[CourseSummary] = Field(None, validation_alias=AliasChoices("courseId", "course"))
    module_id: RefId = None
    module_title: str = ""
    # question index ("0", "1", ...) -> answer
    responses: Dict[str, Any] = {}
    submitted_at: Optional[datetime] = None

    @field_validator("user", "course", mode="before")
    @classmethod
    def _populated_only(cls, v):
        # An unpopulated reference is just an id string; there is nothing to show for it
        return v if isinstance(v, dict) else None

    @field_validator("responses", mode="before")
    @classmethod
    def _responses(cls, v):
        return v or {}

    @property
    def course_id(self) -> Optional[str]:
        return self.course.id if self.course else None


class CertificateMetadata(ApiModel):
    course_duration: Optional[str] = None
    course_level: Optional[str] = None
    total_modules: Optional[int] = None
    completed_modules: Optional[int] = None


class Certificate(ApiModel):
    """Result of looking up a certificate by its validation code."""

    valid: bool = False
    certificate_id: Optional[str] = None
    student_name: Optional[str] = None
    course_title: Optional[str] = None
    completion_date: Optional[datetime] = None
    issued_at: Optional[datetime] = None
    final_score: Optional[float] = None
    instructor_name: Optional[str] = None
    metadata: Optional[CertificateMetadata] = None
    status: Optional[str] = None
    message: Optional[str] = None
