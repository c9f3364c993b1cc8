"""``/api/courses``."""

from typing import Any, Dict, List

from ..models.course import Course, CoursePermissions, InstructorAssignment
from ..session import Session
from .base import Resource, expect_object, parse, parse_list


class CoursesResource(Resource):
    prefix = "/api/courses"

    async def list(self, session: Session) -> List[Course]:
        payload = await self.client.get(self.prefix, session)
        return parse_list("GET /api/courses", Course, payload)

    async def get(self, course_id: str, session: Session) -> Course:
        payload = await self.client.get(self.path(course_id), session)
        return parse("GET /api/courses/:id", Course, payload)

    async def permissions(self, course_id: str, session: Session) -> CoursePermissions:
        payload = await self.client.get(self.path(course_id, "permissions"), session)
        return parse("GET /api/courses/:id/permissions", CoursePermissions, payload)

    async def add_instructor(self, assignment: InstructorAssignment, session: Session) -> Dict[str, Any]:
        body = {"userId": assignment.user_id, "role": assignment.role}
        if assignment.name:
            body["name"] = assignment.name
        payload = await self.client.post(
            self.path(assignment.course_id, "instructors"), session, json=body
        )
        return expect_object("POST /api/courses/:id/instructors", payload)
