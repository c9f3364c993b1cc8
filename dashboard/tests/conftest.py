"""Shared fixtures: signed test tokens, sessions and a mocked backend."""

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest
from jose import jwt

from ..client import ApiClient, RetryPolicy
from ..resources import Backend
from ..session import Session

BASE_URL = "http://backend.test"
TEST_SECRET = "test-secret"


async def no_sleep(seconds: float) -> None:
    return None


def make_token(**claims: Any) -> str:
    return jwt.encode(claims, TEST_SECRET, algorithm="HS256")


class FakeBackend:
    """Routes ``(METHOD, path)`` to canned responses and records every request."""

    def __init__(self):
        self.routes: Dict[tuple, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, body: Any = None, status_code: int = 200) -> None:
        self.routes[(method.upper(), path)] = lambda request: httpx.Response(status_code, json=body)

    def add_handler(self, method: str, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[(method.upper(), path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": f"No route for {request.method} {request.url.path}"})
        return handler(request)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content)


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def api_client(fake_backend):
    return ApiClient(
        BASE_URL,
        timeout=1.0,
        retry=RetryPolicy(max_retries=2, backoff=0),
        transport=httpx.MockTransport(fake_backend),
        sleep=no_sleep,
    )


@pytest.fixture
def backend(api_client):
    return Backend(api_client)


@pytest.fixture
def admin_token():
    return make_token(id="admin-1", role="admin")


@pytest.fixture
def student_token():
    return make_token(id="student-1", role="student")


@pytest.fixture
def admin_session(admin_token):
    return Session.from_token(admin_token)


@pytest.fixture
def student_session(student_token):
    return Session.from_token(student_token)


def course_json(course_id: str, title: str, **extra: Any) -> Dict[str, Any]:
    data = {
        "_id": course_id,
        "title": title,
        "description": "",
        "categories": [],
        "level": "Beginner",
        "type": "Video",
        "instructor": {"name": "Jane Doe"},
        "instructors": [],
        "sections": [],
        "assignments": [],
        "isDeleted": False,
    }
    data.update(extra)
    return data


def enrollment_json(
    enrollment_id: str,
    user_id: str = "u1",
    course_id: str = "c1",
    progress: float = 0,
    completed: bool = False,
    enrolled_at: str = "2024-01-01T00:00:00.000Z",
    **extra: Any,
) -> Dict[str, Any]:
    data = {
        "_id": enrollment_id,
        "user": {"_id": user_id, "name": f"User {user_id}", "email": f"{user_id}@example.com"},
        "course": {"_id": course_id, "title": f"Course {course_id}", "estimatedDuration": {"value": 10, "unit": "days"}},
        "progress": progress,
        "completed": completed,
        "enrolledAt": enrolled_at,
    }
    data.update(extra)
    return data


def user_json(user_id: str, name: str, email: str, role: str = "student", **extra: Any) -> Dict[str, Any]:
    data = {"_id": user_id, "name": name, "email": email, "role": role, "isVerified": True}
    data.update(extra)
    return data
