"""``/api/submissions``."""

from typing import Any, Dict, List, Optional, Tuple

from ..models.submission import BulkGradeItem, GradeRequest, QuizResult, Submission
from ..session import Session
from .base import Resource, expect_key_list, expect_object, parse, parse_list

# (filename, content, content type) as accepted by httpx ``files=``
UploadedFile = Tuple[str, bytes, str]


class SubmissionsResource(Resource):
    prefix = "/api/submissions"

    async def assignment_submission(self, course_id: str, assignment_id: str, session: Session) -> Submission:
        payload = await self.client.get(
            self.path("course", course_id, "assignments", assignment_id, "submission"), session
        )
        return parse("GET /api/submissions/course/:cid/assignments/:aid/submission", Submission, payload)

    async def submit_assignment(
        self,
        course_id: str,
        assignment_id: str,
        session: Session,
        body: Optional[Dict[str, Any]] = None,
        file: Optional[UploadedFile] = None,
    ) -> Submission:
        """Submit text/link content as JSON, or a file as multipart."""
        endpoint = "POST /api/submissions/course/:cid/assignments/:aid"
        path = self.path("course", course_id, "assignments", assignment_id)
        if file is not None:
            payload = await self.client.post(
                path, session, data={"submissionType": "file_upload"}, files={"file": file}
            )
        else:
            payload = await self.client.post(path, session, json=body)
        return parse(endpoint, Submission, expect_object(endpoint, payload).get("submission"))

    async def project_submission(self, course_id: str, session: Session) -> Submission:
        payload = await self.client.get(self.path("course", course_id, "project"), session)
        return parse("GET /api/submissions/course/:cid/project", Submission, payload)

    async def submit_project(
        self,
        course_id: str,
        session: Session,
        body: Optional[Dict[str, Any]] = None,
        file: Optional[UploadedFile] = None,
    ) -> Submission:
        endpoint = "POST /api/submissions/course/:cid/project"
        path = self.path("course", course_id, "project")
        if file is not None:
            payload = await self.client.post(
                path, session, data={"submissionType": "file_upload"}, files={"file": file}
            )
        else:
            payload = await self.client.post(path, session, json=body)
        return parse(endpoint, Submission, expect_object(endpoint, payload).get("submission"))

    async def submit_quiz(self, course_id: str, quiz_id: str, answers: List[str], session: Session) -> QuizResult:
        payload = await self.client.post(
            self.path("course", course_id, "quizzes", quiz_id), session, json={"answers": list(answers)}
        )
        return parse("POST /api/submissions/course/:cid/quizzes/:qid", QuizResult, payload)

    async def for_course(self, course_id: str, session: Session, projects_only: bool = False) -> List[Submission]:
        """All submissions for one course (admin)."""
        endpoint = "GET /api/submissions/admin/courses/:cid/submissions"
        params = {"projectOnly": "true"} if projects_only else None
        payload = await self.client.get(
            self.path("admin", "courses", course_id, "submissions"), session, params=params
        )
        return parse_list(endpoint, Submission, expect_key_list(endpoint, payload, "submissions"))

    async def all(self, session: Session, submission_type: Optional[str] = None) -> List[Submission]:
        endpoint = "GET /api/submissions/admin/submissions"
        params = {"type": submission_type} if submission_type else None
        payload = await self.client.get(self.path("admin", "submissions"), session, params=params)
        return parse_list(endpoint, Submission, expect_key_list(endpoint, payload, "submissions"))

    async def grade(self, submission_id: str, grade: GradeRequest, session: Session) -> Submission:
        endpoint = "PUT /api/submissions/:id/grade"
        payload = await self.client.put(
            self.path(submission_id, "grade"), session, json=grade.to_payload()
        )
        return parse(endpoint, Submission, expect_object(endpoint, payload).get("submission"))

    async def bulk_grade(self, items: List[BulkGradeItem], session: Session) -> Dict[str, Any]:
        body = {
            "submissions": [
                {"submissionId": item.submission_id, "grade": item.grade, "feedback": item.feedback}
                for item in items
            ]
        }
        payload = await self.client.post(self.path("admin", "bulk-grade"), session, json=body)
        return expect_object("POST /api/submissions/admin/bulk-grade", payload)
