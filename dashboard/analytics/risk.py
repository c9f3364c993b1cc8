"""Risk classification for enrollments that fall behind the course pace."""

import math
import re
from datetime import datetime, timezone
from typing import Optional, Union

from ..models.course import UNIT_DAYS, Course, CourseSummary, EstimatedDuration
from ..models.enrollment import Enrollment
from ..models.enums import RiskLevel

DEFAULT_DURATION_DAYS = 30
HIGH_RISK_OVERRUN = 1.5
HIGH_RISK_PROGRESS = 50
MEDIUM_RISK_PROGRESS = 75

_DURATION_TEXT = re.compile(r"(\d+(?:\.\d+)?)\s*(day|week|month)s?", re.IGNORECASE)


def as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def parse_duration_text(text: Optional[str]) -> Optional[float]:
    """Days in a free text duration such as ``"6 weeks"``."""
    if not text:
        return None
    match = _DURATION_TEXT.search(text)
    if not match:
        return None
    return float(match.group(1)) * UNIT_DAYS[match.group(2).lower()]


def course_duration_days(course: Optional[Union[Course, CourseSummary]]) -> float:
    """Expected course length in days, defaulting to 30 when unknown."""
    if course is None:
        return DEFAULT_DURATION_DAYS
    estimated = course.estimated_duration
    if isinstance(estimated, EstimatedDuration) and estimated.days:
        return estimated.days
    if isinstance(estimated, (int, float)) and estimated > 0:
        return float(estimated)
    return parse_duration_text(course.duration) or DEFAULT_DURATION_DAYS


def classify_risk(
    enrolled_at: Optional[datetime],
    progress: float,
    completed: bool,
    estimated_duration_days: Optional[float] = None,
    now: Optional[datetime] = None,
) -> RiskLevel:
    """Classify how far a student has fallen behind.

    high:   more than 1.5x the course duration has passed and progress < 50
    medium: more than the course duration has passed and progress < 75
    low:    everything else, including completed enrollments
    """
    if completed or enrolled_at is None:
        return RiskLevel.low
    duration = estimated_duration_days or DEFAULT_DURATION_DAYS
    now = as_utc(now or datetime.now(timezone.utc))
    days_enrolled = math.floor((now - as_utc(enrolled_at)).total_seconds() / 86400)

    if days_enrolled > duration * HIGH_RISK_OVERRUN and progress < HIGH_RISK_PROGRESS:
        return RiskLevel.high
    if days_enrolled > duration and progress < MEDIUM_RISK_PROGRESS:
        return RiskLevel.medium
    return RiskLevel.low


def classify_enrollment(enrollment: Enrollment, now: Optional[datetime] = None) -> RiskLevel:
    return classify_risk(
        enrollment.enrolled_at,
        enrollment.progress,
        enrollment.completed,
        course_duration_days(enrollment.course_summary),
        now=now,
    )
