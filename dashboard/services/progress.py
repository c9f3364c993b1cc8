"""Admin view of enrollment progress across all students."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..analytics.collection import Page, paginate
from ..analytics.progress import (
    ProgressRow,
    ProgressSummary,
    filter_enrollments,
    group_by_course,
    summarise_progress,
    to_row,
)
from ..models.enums import ProgressStatus
from ..resources import Backend
from ..session import Session

logger = logging.getLogger(__name__)


class ProgressService:
    def __init__(self, backend: Backend, page_size: int = 50):
        self.backend = backend
        self.page_size = page_size

    async def table(
        self,
        session: Session,
        search: Optional[str] = None,
        course_id: Optional[str] = None,
        status: ProgressStatus = ProgressStatus.all,
        page: int = 1,
        now: Optional[datetime] = None,
    ) -> Page[ProgressRow]:
        enrollments = await self.backend.enrollments.all(session)
        rows = [to_row(e, now=now) for e in filter_enrollments(enrollments, search, course_id, status)]
        return paginate(rows, page=page, page_size=self.page_size)

    async def summary(self, session: Session, now: Optional[datetime] = None) -> ProgressSummary:
        enrollments = await self.backend.enrollments.all(session)
        return summarise_progress(enrollments, now=now)

    async def by_course(self, session: Session, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """One entry per course with its enrollment rows, in first-seen order."""
        enrollments = await self.backend.enrollments.all(session)
        groups = []
        for course_id, members in group_by_course(enrollments).items():
            rows = [to_row(e, now=now) for e in members]
            groups.append({
                "courseId": course_id,
                "courseTitle": members[0].course_summary.title,
                "enrolled": len(rows),
                "completed": sum(1 for row in rows if row.completed),
                "averageProgress": round(sum(row.progress for row in rows) / len(rows), 1),
                "rows": [row.model_dump(by_alias=True, mode="json") for row in rows],
            })
        return groups

    async def enroll(self, course_id: str, session: Session, user_ids: Optional[List[str]] = None) -> Dict[str, Any]:
        """Enroll the given users, or every user when ``user_ids`` is None."""
        if user_ids is None:
            logger.info(f"Enrolling all users in course {course_id}")
            return await self.backend.enrollments.enroll_all(course_id, session)
        logger.info(f"Enrolling {len(user_ids)} users in course {course_id}")
        return await self.backend.enrollments.enroll_users(course_id, user_ids, session)

    async def unenroll(self, course_id: str, session: Session, user_id: Optional[str] = None) -> Dict[str, Any]:
        """Remove one user from a course, or everyone when ``user_id`` is None."""
        if user_id is None:
            logger.warning(f"Unenrolling all users from course {course_id}")
            return await self.backend.enrollments.unenroll_all(course_id, session)
        return await self.backend.enrollments.unenroll_user(course_id, user_id, session)
