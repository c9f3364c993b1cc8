"""Tests for the dashboard services against a fake backend."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from ..errors import ApiError, BackendUnavailableError, PermissionDeniedError, SubmissionValidationError
from ..models import (
    AssessmentKind,
    BlacklistRequest,
    CoursePermissions,
    GradeRequest,
    InstructorAssignment,
    SubmissionDraft,
    SubmissionType,
    UserRole,
    UserUpdate,
)
from ..services.activity import ActivityService
from ..services.catalog import CatalogService
from ..services.certificates import CertificateService
from ..services.common import gather_all, run_batch
from ..services.grading import GradingService
from ..services.progress import ProgressService
from ..services.surveys import SurveyService
from ..services.users import UserAdminService
from ..session import Session
from .conftest import FakeBackend, course_json, enrollment_json, user_json

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestCatalogService:
    @pytest.fixture
    def courses(self, fake_backend):
        fake_backend.add("GET", "/api/courses", [
            course_json("c1", "Intro to Video", type="Workshop", categories=["Media"]),
            course_json("c2", "Video", type="Video", categories=["Film"]),
            course_json("c3", "Old Video Course", isDeleted=True),
            course_json("c4", "Sound Design", type="Audio", description="Mixing for video"),
            course_json("c5", "Public Speaking", type="Talk", categories=["Soft Skills"]),
        ])

    @pytest.mark.asyncio
    async def test_browse_ranks_and_marks_enrollments(self, backend, fake_backend, courses, student_session):
        fake_backend.add("GET", "/api/enrollments/my", [enrollment_json("e1", "student-1", "c4")])
        service = CatalogService(backend, page_size=2)

        page = await service.browse(student_session, query="video")
        assert page.total == 3
        assert page.total_pages == 2
        assert [c.id for c in page.items] == ["c2", "c1"]
        assert [c.is_enrolled for c in page.items] == [False, False]

        page = await service.browse(student_session, query="video", page=2)
        assert [(c.id, c.is_enrolled) for c in page.items] == [("c4", True)]

    @pytest.mark.asyncio
    async def test_browse_anonymous(self, backend, fake_backend, courses):
        page = await CatalogService(backend).browse(Session.anonymous())
        assert [c.id for c in page.items] == ["c1", "c2", "c4", "c5"]
        assert all(c.is_enrolled is None for c in page.items)
        assert fake_backend.calls("GET", "/api/enrollments/my") == []

    @pytest.mark.asyncio
    async def test_browse_with_expired_token(self, backend, fake_backend, courses, student_session):
        fake_backend.add("GET", "/api/enrollments/my", {"message": "Token expired"}, status_code=401)

        page = await CatalogService(backend).browse(student_session, category="Soft Skills")
        assert [c.id for c in page.items] == ["c5"]

    @pytest.mark.asyncio
    async def test_browse_course_failure_is_raised(self, backend, fake_backend, student_session):
        fake_backend.add("GET", "/api/courses", {"message": "boom"}, status_code=500)
        fake_backend.add("GET", "/api/enrollments/my", [])

        with pytest.raises(ApiError) as exc_info:
            await CatalogService(backend).browse(student_session)
        assert exc_info.value.status_code == 500
        assert len(fake_backend.calls("GET", "/api/enrollments/my")) == 1

    @pytest.mark.asyncio
    async def test_browse_prefers_unavailable_over_other_errors(self, backend, fake_backend, student_session):
        fake_backend.add("GET", "/api/courses", {"message": "boom"}, status_code=500)
        fake_backend.add("GET", "/api/enrollments/my", {"message": "waking"}, status_code=503)

        with pytest.raises(BackendUnavailableError):
            await CatalogService(backend).browse(student_session)

    @pytest.mark.asyncio
    async def test_categories(self, backend, courses, student_session):
        assert await CatalogService(backend).categories(student_session) == [
            "All Courses", "Audio", "Film", "Media", "Soft Skills", "Talk", "Video", "Workshop",
        ]


class TestGradingSubmissions:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   "])
    async def test_empty_text_is_never_sent(self, backend, fake_backend, student_session, text):
        service = GradingService(backend)

        with pytest.raises(SubmissionValidationError):
            await service.submit_assignment("c1", "a1", SubmissionDraft(text=text), student_session)
        assert fake_backend.requests == []

    @pytest.mark.asyncio
    async def test_text_is_sent_once_trimmed(self, backend, fake_backend, student_session):
        path = "/api/submissions/course/c1/assignments/a1"
        fake_backend.add("POST", path, {"message": "ok", "submission": {"_id": "s1", "submission": {"text": "essay"}}})

        submission = await GradingService(backend).submit_assignment(
            "c1", "a1", SubmissionDraft(text="  essay \n"), student_session
        )
        assert submission.submission.text == "essay"
        calls = fake_backend.calls("POST", path)
        assert len(calls) == 1
        assert FakeBackend.body(calls[0]) == {"submissionType": "text", "submission": {"text": "essay"}}

    @pytest.mark.asyncio
    async def test_failed_submission_is_not_retried(self, backend, fake_backend, student_session):
        path = "/api/submissions/course/c1/assignments/a1"
        fake_backend.add("POST", path, {"message": "down"}, status_code=503)

        with pytest.raises(BackendUnavailableError):
            await GradingService(backend).submit_assignment(
                "c1", "a1", SubmissionDraft(text="essay"), student_session
            )
        assert len(fake_backend.calls("POST", path)) == 1

    @pytest.mark.asyncio
    async def test_project_link(self, backend, fake_backend, student_session):
        path = "/api/submissions/course/c1/project"
        fake_backend.add("POST", path, {"submission": {"_id": "s2", "projectId": "p1"}})

        draft = SubmissionDraft(submission_type=SubmissionType.link, link="https://example.com/reel")
        submission = await GradingService(backend).submit_project("c1", student_session, draft=draft)
        assert submission.is_project
        assert FakeBackend.body(fake_backend.requests[0])["submission"] == {"link": "https://example.com/reel"}

    @pytest.mark.asyncio
    async def test_quiz(self, backend, fake_backend, student_session):
        fake_backend.add("POST", "/api/submissions/course/c1/quizzes/q1", {
            "score": 80, "totalQuestions": 5, "correctAnswers": 4, "passed": True, "attempts": 2,
        })

        result = await GradingService(backend).submit_quiz("c1", "q1", ["a", "b"], student_session)
        assert result.passed
        assert result.correct_answers == 4


class TestGradingConsole:
    @pytest.fixture
    def console(self, fake_backend):
        fake_backend.add("GET", "/api/courses", [
            course_json("c1", "Video", assignments=[
                {"_id": "a1", "title": "Storyboard", "dueDate": "2024-02-10T00:00:00Z"},
            ]),
            course_json("c2", "Audio", assignments=[{"_id": "a2", "title": "Mix"}]),
            course_json("c3", "No work"),
        ])
        fake_backend.add("GET", "/api/courses/c1/permissions", {"canGrade": True})
        fake_backend.add("GET", "/api/courses/c2/permissions", {"message": "Forbidden"}, status_code=403)
        fake_backend.add("GET", "/api/submissions/admin/courses/c1/submissions", {"submissions": [
            {"_id": "s1", "assignmentId": "a1", "grade": 90, "createdAt": "2024-02-01T00:00:00Z",
             "studentId": {"_id": "u1", "name": "Ada", "email": "ada@example.com"}},
            {"_id": "s2", "assignmentId": "a1", "createdAt": "2024-02-12T00:00:00Z"},
            {"_id": "s3", "projectId": "p1"},
        ]})
        fake_backend.add("GET", "/api/submissions/admin/courses/c2/submissions", {"submissions": [
            {"_id": "s4", "assignmentId": "a2"},
        ]})

    @pytest.mark.asyncio
    async def test_assignment_rows(self, backend, fake_backend, console, admin_session):
        rows = await GradingService(backend).list(AssessmentKind.assignments, admin_session)

        assert [row.submission.id for row in rows] == ["s1", "s2", "s4"]
        assert [row.status for row in rows] == ["graded", "late", "pending"]
        assert [row.can_grade for row in rows] == [True, True, False]
        assert rows[0].item_title == "Storyboard"
        assert fake_backend.calls("GET", "/api/courses/c3/permissions") == []

    @pytest.mark.asyncio
    async def test_sleeping_backend_is_not_hidden(self, backend, fake_backend, console, admin_session):
        fake_backend.add("GET", "/api/submissions/admin/courses/c2/submissions", None, status_code=503)

        with pytest.raises(BackendUnavailableError):
            await GradingService(backend).list(AssessmentKind.assignments, admin_session)

    @pytest.mark.asyncio
    async def test_grade_checks_permission_first(self, backend, fake_backend, console, admin_session):
        with pytest.raises(PermissionDeniedError):
            await GradingService(backend).grade("s4", GradeRequest(grade=70), admin_session, course_id="c2")
        assert fake_backend.calls("PUT", "/api/submissions/s4/grade") == []

    @pytest.mark.asyncio
    async def test_grade(self, backend, fake_backend, console, admin_session):
        fake_backend.add("PUT", "/api/submissions/s2/grade", {"submission": {"_id": "s2", "grade": 70}})

        graded = await GradingService(backend).grade("s2", GradeRequest(grade=70), admin_session, course_id="c1")
        assert graded.grade == 70

    @pytest.mark.asyncio
    async def test_quiz_rows(self, backend, fake_backend, console, admin_session):
        fake_backend.add_handler("GET", "/api/submissions/admin/submissions", lambda request: httpx.Response(
            200,
            json={"submissions": [{"_id": "q1", "submissionType": "quiz", "courseId": "c1"}]}
            if request.url.params.get("type") == "quiz" else {"submissions": []},
        ))

        rows = await GradingService(backend).list(AssessmentKind.quizzes, admin_session)
        assert [(row.submission.id, row.course_title) for row in rows] == [("q1", "Video")]


class TestRunBatch:
    @pytest.mark.asyncio
    async def test_partial_failure(self, backend, fake_backend, admin_session):
        fake_backend.add("PATCH", "/api/users/u1/role", {"user": user_json("u1", "A", "a@example.com", role="admin")})

        result = await UserAdminService(backend).change_roles(["u1", "u2", "u1"], UserRole.admin, admin_session)
        assert result.succeeded == ["u1"]
        assert list(result.failed) == ["u2"]
        assert len(fake_backend.calls("PATCH", "/api/users/u1/role")) == 1

    @pytest.mark.asyncio
    async def test_programming_errors_propagate(self):
        async def broken():
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            await run_batch({"x": broken()})


class TestGatherAll:
    @pytest.mark.asyncio
    async def test_every_call_finishes_before_the_error_is_raised(self):
        finished = []

        async def broken():
            raise ValueError("bad")

        async def slow():
            await asyncio.sleep(0)
            finished.append("slow")
            return "done"

        with pytest.raises(ValueError):
            await gather_all(broken(), slow())
        assert finished == ["slow"]

    @pytest.mark.asyncio
    async def test_results_keep_call_order(self):
        async def value(v):
            return v

        assert await gather_all(value(1), value(2)) == [1, 2]


class TestUserAdminService:
    @pytest.mark.asyncio
    async def test_save_routes_role_and_fields(self, backend, fake_backend, admin_session):
        fake_backend.add("PATCH", "/api/users/u1/role", {"user": user_json("u1", "Ada", "a@example.com", role="admin")})
        fake_backend.add("PATCH", "/api/users/u1/quick", {"user": user_json("u1", "Ada L", "a@example.com", role="admin")})

        update = UserUpdate.model_validate({"role": "admin", "name": "Ada L"})
        user = await UserAdminService(backend).save("u1", update, admin_session)
        assert user.name == "Ada L"
        assert [r.url.path for r in fake_backend.requests] == ["/api/users/u1/role", "/api/users/u1/quick"]
        assert FakeBackend.body(fake_backend.requests[1]) == {"name": "Ada L"}

    @pytest.mark.asyncio
    async def test_save_nothing(self, backend, fake_backend, admin_session):
        with pytest.raises(ValueError, match="Nothing to update"):
            await UserAdminService(backend).save("u1", UserUpdate(), admin_session)
        assert fake_backend.requests == []

    @pytest.mark.asyncio
    async def test_users_table(self, backend, fake_backend, admin_session):
        fake_backend.add("GET", "/api/auth/users", [
            user_json("u1", "Ada", "ada@example.com", loginCount=3),
            user_json("u2", "Bob", "bob@example.com", loginCount=9, isVerified=False),
            user_json("u3", "Cy", "cy@test.org", role="admin", loginCount=1),
        ])
        service = UserAdminService(backend)

        page = await service.users(admin_session, sort="loginCount")
        assert [u.id for u in page.items] == ["u2", "u1", "u3"]
        page = await service.users(admin_session, search="example", verified="verified")
        assert [u.id for u in page.items] == ["u1"]
        page = await service.users(admin_session, role="admin")
        assert [u.id for u in page.items] == ["u3"]
        with pytest.raises(ValueError):
            await service.users(admin_session, sort="password")

    @pytest.mark.asyncio
    async def test_assign_instructors(self, backend, fake_backend, admin_session):
        fake_backend.add("GET", "/api/courses", [
            course_json("c1", "Video", instructors=[{"userId": "u1", "role": "main"}]),
        ])
        fake_backend.add("GET", "/api/auth/users", [
            user_json("u1", "Ada", "ada@example.com"),
            user_json("u2", "Bob", "bob@example.com"),
        ])
        fake_backend.add("POST", "/api/courses/c1/instructors", {"message": "added"})

        result = await UserAdminService(backend).assign_instructors([
            InstructorAssignment(user_id="u1", course_id="c1"),
            InstructorAssignment(user_id="u2", course_id="c1"),
            InstructorAssignment(user_id="u2", course_id="gone"),
        ], admin_session)
        assert result.succeeded == ["c1:u2"]
        assert result.skipped == ["c1:u1", "gone:u2"]
        body = FakeBackend.body(fake_backend.calls("POST", "/api/courses/c1/instructors")[0])
        assert body == {"userId": "u2", "role": "assistant", "name": "Bob"}

    @pytest.mark.asyncio
    async def test_blacklist_candidates(self, backend, fake_backend, admin_session):
        fake_backend.add("GET", "/api/auth/users", [
            user_json("u1", "Ada", "ada@example.com"),
            user_json("u2", "Bob", "bob@example.com"),
            user_json("a1", "Root", "root@example.com", role="admin-only"),
        ])
        fake_backend.add("GET", "/api/blacklist", {"count": 1, "blacklistedUsers": [
            {"_id": "bl1", "userId": {"_id": "u1", "name": "Ada"}, "email": "ada@example.com", "reason": "spam"},
        ]})

        users = await UserAdminService(backend).blacklist_candidates(admin_session)
        assert [user.id for user in users] == ["u2"]

    @pytest.mark.asyncio
    async def test_blacklist_search_matches_name_email_and_reason(self, backend, fake_backend, admin_session):
        fake_backend.add("GET", "/api/blacklist", {"count": 2, "blacklistedUsers": [
            {"_id": "bl1", "userId": {"_id": "u1", "name": "Ada"}, "email": "ada@example.com", "reason": "spam"},
            {"_id": "bl2", "userId": {"_id": "u2", "name": "Bob"}, "email": "bob@test.org", "reason": "cheating"},
        ]})
        service = UserAdminService(backend)

        assert [e.user_id for e in await service.blacklist(admin_session, search="ADA")] == ["u1"]
        assert [e.user_id for e in await service.blacklist(admin_session, search="test.org")] == ["u2"]
        assert [e.user_id for e in await service.blacklist(admin_session, search="cheat")] == ["u2"]
        assert len(await service.blacklist(admin_session)) == 2

    @pytest.mark.asyncio
    async def test_unblacklist_is_not_replayed_after_timeout(self, backend, fake_backend, admin_session):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        fake_backend.add_handler("DELETE", "/api/blacklist/u1", handler)

        with pytest.raises(BackendUnavailableError):
            await UserAdminService(backend).unblacklist("u1", admin_session)
        assert len(fake_backend.calls("DELETE", "/api/blacklist/u1")) == 1

    @pytest.mark.asyncio
    async def test_blacklist_user(self, backend, fake_backend, admin_session):
        fake_backend.add("POST", "/api/blacklist", {"blacklist": {"_id": "bl1", "userId": "u2", "reason": "spam"}}, status_code=201)

        entry = await UserAdminService(backend).blacklist_user(BlacklistRequest(user_id="u2", reason="spam"), admin_session)
        assert entry.id == "bl1"

    @pytest.mark.asyncio
    async def test_reset_first_login_for_everyone(self, backend, fake_backend, admin_session):
        fake_backend.add("PUT", "/api/auth/reset-first-login", {"message": "reset"})

        assert await UserAdminService(backend).reset_first_login(admin_session) == {"message": "reset"}


class TestProgressService:
    @pytest.mark.asyncio
    async def test_enroll_everyone(self, backend, fake_backend, admin_session):
        fake_backend.add("POST", "/api/enrollments/enroll-all/c1", {"message": "ok"})

        await ProgressService(backend).enroll("c1", admin_session)
        assert len(fake_backend.calls("POST", "/api/enrollments/enroll-all/c1")) == 1

    @pytest.mark.asyncio
    async def test_enroll_selected(self, backend, fake_backend, admin_session):
        fake_backend.add("POST", "/api/enrollments/enroll-users/c1", {"message": "ok"})

        await ProgressService(backend).enroll("c1", admin_session, user_ids=["u1", "u2"])
        assert FakeBackend.body(fake_backend.requests[0]) == {"userIds": ["u1", "u2"]}

    @pytest.mark.asyncio
    async def test_by_course(self, backend, fake_backend, admin_session):
        fake_backend.add("GET", "/api/enrollments/all", [
            enrollment_json("e1", "u1", "c1", progress=100, completed=True),
            enrollment_json("e2", "u2", "c1", progress=50),
            enrollment_json("e3", "u1", "c2", progress=10),
        ])

        groups = await ProgressService(backend).by_course(admin_session, now=NOW)
        assert [g["courseId"] for g in groups] == ["c1", "c2"]
        assert groups[0]["completed"] == 1
        assert groups[0]["averageProgress"] == 75.0
        assert groups[0]["rows"][0]["userName"] == "User u1"


class TestActivityService:
    @pytest.fixture
    def logs(self, fake_backend):
        fake_backend.add("GET", "/api/logs", [
            {"_id": "l1", "action": "login", "resource": "auth", "userName": "Ada", "timestamp": "2024-02-01T10:00:00Z"},
            {"_id": "l2", "action": "enroll", "resource": "course", "userName": "Bob", "timestamp": "2024-02-03T10:00:00Z"},
            {"_id": "l3", "action": "login", "resource": "auth", "userName": "Cy", "timestamp": "2024-02-02T10:00:00Z"},
        ])

    @pytest.mark.asyncio
    async def test_newest_first(self, backend, logs, admin_session):
        page = await ActivityService(backend).logs(admin_session)
        assert [e.id for e in page.items] == ["l2", "l3", "l1"]

    @pytest.mark.asyncio
    async def test_filters(self, backend, logs, admin_session):
        page = await ActivityService(backend).logs(admin_session, action="login", sort="userName")
        assert [e.user_name for e in page.items] == ["Cy", "Ada"]

    @pytest.mark.asyncio
    async def test_unknown_sort(self, backend, logs, admin_session):
        with pytest.raises(ValueError):
            await ActivityService(backend).logs(admin_session, sort="ipAddress")

    @pytest.mark.asyncio
    async def test_facets(self, backend, logs, admin_session):
        assert await ActivityService(backend).facets(admin_session) == {
            "actions": ["enroll", "login"], "resources": ["auth", "course"],
        }


class TestCertificateService:
    @pytest.mark.asyncio
    async def test_malformed_code_is_not_looked_up(self, backend, fake_backend):
        certificate = await CertificateService(backend).validate("no/slashes")
        assert not certificate.valid
        assert fake_backend.requests == []

    @pytest.mark.asyncio
    async def test_code_is_normalised(self, backend, fake_backend):
        fake_backend.add("GET", "/api/certificates/validate/LFC-AB12", {"valid": True, "certificateId": "LFC-AB12"})

        certificate = await CertificateService(backend).validate("  lfc-ab12 ")
        assert certificate.valid


@pytest.mark.asyncio
async def test_survey_responses_filtered_by_course(backend, fake_backend, admin_session):
    fake_backend.add("GET", "/api/feedback/survey-responses", [
        {"_id": "r1", "courseId": {"_id": "c1", "title": "Video"}, "moduleId": "m1"},
        {"_id": "r2", "courseId": {"_id": "c2", "title": "Audio"}, "moduleId": "m2"},
    ])

    responses = await SurveyService(backend).responses(admin_session, course_id="c2")
    assert [r.id for r in responses] == ["r2"]


class TestGradingWithMockBackend:
    """Service logic checked against a mocked resource bundle."""

    @pytest.fixture
    def mock_backend(self):
        backend = MagicMock()
        backend.submissions.submit_assignment = AsyncMock()
        backend.courses.permissions = AsyncMock()
        return backend

    @pytest.mark.asyncio
    async def test_blank_draft_never_reaches_backend(self, mock_backend, student_session):
        service = GradingService(mock_backend)

        with pytest.raises(SubmissionValidationError):
            await service.submit_assignment("c1", "a1", SubmissionDraft(text=" \n "), student_session)
        mock_backend.submissions.submit_assignment.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_draft_payload_is_forwarded(self, mock_backend, student_session):
        service = GradingService(mock_backend)

        await service.submit_assignment("c1", "a1", SubmissionDraft(text=" essay "), student_session)
        mock_backend.submissions.submit_assignment.assert_awaited_once_with(
            "c1", "a1", student_session,
            body={"submissionType": "text", "submission": {"text": "essay"}},
        )

    @pytest.mark.asyncio
    async def test_manage_permission_is_enough(self, mock_backend, admin_session):
        mock_backend.courses.permissions.return_value = CoursePermissions(can_manage=True)
        course = MagicMock(id="c1")

        allowed = await GradingService(mock_backend).permissions([course], admin_session)
        assert allowed == {"c1": True}
