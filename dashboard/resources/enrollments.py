"""``/api/enrollments``."""

from typing import Any, Dict, List

from ..models.enrollment import Enrollment
from ..session import Session
from .base import Resource, expect_object, parse_list


class EnrollmentsResource(Resource):
    prefix = "/api/enrollments"

    async def mine(self, session: Session) -> List[Enrollment]:
        payload = await self.client.get(self.path("my"), session)
        return parse_list("GET /api/enrollments/my", Enrollment, payload)

    async def all(self, session: Session) -> List[Enrollment]:
        """Every enrollment, with user and course populated (admin only)."""
        payload = await self.client.get(self.path("all"), session)
        return parse_list("GET /api/enrollments/all", Enrollment, payload)

    async def enroll_self(self, course_id: str, session: Session) -> Dict[str, Any]:
        payload = await self.client.post(self.path(course_id), session)
        return expect_object("POST /api/enrollments/:courseId", payload)

    async def unenroll_self(self, course_id: str, session: Session) -> Dict[str, Any]:
        payload = await self.client.delete(self.path("self-unenroll", course_id), session)
        return expect_object("DELETE /api/enrollments/self-unenroll/:courseId", payload)

    async def enroll_users(self, course_id: str, user_ids: List[str], session: Session) -> Dict[str, Any]:
        payload = await self.client.post(
            self.path("enroll-users", course_id), session, json={"userIds": list(user_ids)}
        )
        return expect_object("POST /api/enrollments/enroll-users/:courseId", payload)

    async def enroll_all(self, course_id: str, session: Session) -> Dict[str, Any]:
        payload = await self.client.post(self.path("enroll-all", course_id), session)
        return expect_object("POST /api/enrollments/enroll-all/:courseId", payload)

    async def unenroll_user(self, course_id: str, user_id: str, session: Session) -> Dict[str, Any]:
        payload = await self.client.delete(self.path("unenroll", course_id, user_id), session)
        return expect_object("DELETE /api/enrollments/unenroll/:courseId/:userId", payload)

    async def unenroll_all(self, course_id: str, session: Session) -> Dict[str, Any]:
        payload = await self.client.delete(self.path("unenroll-all", course_id), session)
        return expect_object("DELETE /api/enrollments/unenroll-all/:courseId", payload)
