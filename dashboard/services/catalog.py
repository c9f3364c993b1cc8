"""Student course catalog: browse, search, enroll."""

import logging
from typing import Any, Dict, List, Optional

from ..analytics.collection import Page, paginate
from ..analytics.search import ALL_COURSES, filter_by_category, search_courses
from ..errors import AuthenticationError
from ..models.course import Course
from ..models.enrollment import Enrollment
from ..resources import Backend
from ..session import Session
from .common import gather_all

logger = logging.getLogger(__name__)


class CatalogService:
    """Course listing as the student dashboard shows it.

    Args:
        backend: Resource bundle bound to the shared ApiClient.
        page_size: Courses per catalog page.
    """

    def __init__(self, backend: Backend, page_size: int = 6):
        self.backend = backend
        self.page_size = page_size

    async def _enrolled_ids(self, session: Session) -> Optional[set]:
        if not session.is_authenticated:
            return None
        try:
            enrollments = await self.backend.enrollments.mine(session)
        except AuthenticationError:
            return None
        return {e.course_id for e in enrollments if e.course_id}

    async def browse(
        self,
        session: Session,
        query: str = "",
        category: str = ALL_COURSES,
        page: int = 1,
    ) -> Page[Course]:
        """Available courses, filtered by category, ranked by the query, one page."""
        courses, enrolled = await gather_all(
            self.backend.courses.list(session),
            self._enrolled_ids(session),
        )
        available = [course for course in courses if course.is_available]
        ranked = search_courses(filter_by_category(available, category), query)
        if enrolled is not None:
            ranked = [
                course.model_copy(update={"is_enrolled": course.id in enrolled})
                for course in ranked
            ]
        logger.info(f"Catalog query {query!r} in {category!r}: {len(ranked)} courses")
        return paginate(ranked, page=page, page_size=self.page_size)

    async def categories(self, session: Session) -> List[str]:
        """Category names for the filter bar, ``All Courses`` first."""
        courses = await self.backend.courses.list(session)
        names: Dict[str, None] = {}
        for course in courses:
            if not course.is_available:
                continue
            for name in [course.type] + course.categories:
                if name:
                    names.setdefault(name, None)
        return [ALL_COURSES] + sorted(names, key=str.casefold)

    async def course(self, course_id: str, session: Session) -> Course:
        return await self.backend.courses.get(course_id, session)

    async def enroll(self, course_id: str, session: Session) -> Dict[str, Any]:
        result = await self.backend.enrollments.enroll_self(course_id, session)
        logger.info(f"Enrolled in course {course_id}")
        return result

    async def unenroll(self, course_id: str, session: Session) -> Dict[str, Any]:
        result = await self.backend.enrollments.unenroll_self(course_id, session)
        logger.info(f"Unenrolled from course {course_id}")
        return result

    async def my_courses(self, session: Session) -> List[Enrollment]:
        enrollments = await self.backend.enrollments.mine(session)
        return [e for e in enrollments if e.course_id]
