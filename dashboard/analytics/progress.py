"""Aggregations behind the admin user-progress table."""

from collections import OrderedDict
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..models.enrollment import Enrollment
from ..models.enums import ProgressStatus, RiskLevel
from .risk import classify_enrollment


class ProgressSummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_students: int = 0
    completed: int = 0
    high_risk: int = 0
    total_courses: int = 0
    average_progress: float = 0.0


class ProgressRow(BaseModel):
    """One enrollment as shown in the progress table."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    enrollment_id: Optional[str] = None
    user_id: Optional[str] = None
    user_name: str = ""
    user_email: str = ""
    course_id: Optional[str] = None
    course_title: str = ""
    progress: float = 0
    completed: bool = False
    enrolled_at: Optional[datetime] = None
    last_accessed: Optional[datetime] = None
    time_spent: float = 0
    assignments_submitted: int = 0
    risk: RiskLevel = RiskLevel.low


def has_embedded_records(enrollment: Enrollment) -> bool:
    return enrollment.user_summary is not None and enrollment.course_summary is not None


def matches_status(enrollment: Enrollment, status: ProgressStatus) -> bool:
    if status == ProgressStatus.completed:
        return enrollment.completed
    if status == ProgressStatus.in_progress:
        return not enrollment.completed and enrollment.progress > 0
    if status == ProgressStatus.not_started:
        return enrollment.progress == 0
    return True


def matches_search(enrollment: Enrollment, term: Optional[str]) -> bool:
    needle = (term or "").strip().lower()
    if not needle:
        return True
    user = enrollment.user_summary
    course = enrollment.course_summary
    haystack = (
        user.name if user else "",
        user.email if user else "",
        course.title if course else "",
    )
    return any(needle in (text or "").lower() for text in haystack)


def filter_enrollments(
    enrollments: Iterable[Enrollment],
    search: Optional[str] = None,
    course_id: Optional[str] = None,
    status: ProgressStatus = ProgressStatus.all,
) -> List[Enrollment]:
    """Enrollments shown in the table; rows without a populated user or course are dropped."""
    return [
        enrollment for enrollment in enrollments
        if has_embedded_records(enrollment)
        and matches_search(enrollment, search)
        and (not course_id or course_id == "all" or enrollment.course_id == course_id)
        and matches_status(enrollment, status)
    ]


def to_row(enrollment: Enrollment, now: Optional[datetime] = None) -> ProgressRow:
    user = enrollment.user_summary
    course = enrollment.course_summary
    return ProgressRow(
        enrollment_id=enrollment.id,
        user_id=enrollment.user_id,
        user_name=user.name if user else "",
        user_email=user.email if user else "",
        course_id=enrollment.course_id,
        course_title=course.title if course else "",
        progress=enrollment.progress,
        completed=enrollment.completed,
        enrolled_at=enrollment.enrolled_at,
        last_accessed=enrollment.last_accessed,
        time_spent=enrollment.time_spent,
        assignments_submitted=enrollment.assignments_submitted,
        risk=classify_enrollment(enrollment, now=now),
    )


def summarise_progress(enrollments: Iterable[Enrollment], now: Optional[datetime] = None) -> ProgressSummary:
    enrollments = list(enrollments)
    students = {e.user_id for e in enrollments if e.user_summary is not None and e.user_id}
    courses = {e.course_id for e in enrollments if e.course_summary is not None and e.course_id}
    average = (
        round(sum(e.progress for e in enrollments) / len(enrollments), 1)
        if enrollments else 0.0
    )
    return ProgressSummary(
        total_students=len(students),
        completed=sum(1 for e in enrollments if e.completed),
        high_risk=sum(1 for e in enrollments if classify_enrollment(e, now=now) == RiskLevel.high),
        total_courses=len(courses),
        average_progress=average,
    )


def group_by_course(enrollments: Iterable[Enrollment]) -> Dict[str, List[Enrollment]]:
    """Course id -> its enrollments, in first-seen order."""
    groups: Dict[str, List[Enrollment]] = OrderedDict()
    for enrollment in enrollments:
        if not has_embedded_records(enrollment):
            continue
        groups.setdefault(enrollment.course_id, []).append(enrollment)
    return groups
