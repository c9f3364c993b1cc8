"""Typed wrappers around the LMS backend's REST endpoints.

Each wrapper checks that a response has the shape its endpoint actually
returns and raises UnexpectedResponseError otherwise.
"""

from ..client import ApiClient
from .auth import AuthResource
from .base import Resource
from .blacklist import BlacklistResource
from .certificates import CertificatesResource
from .courses import CoursesResource
from .enrollments import EnrollmentsResource
from .feedback import FeedbackResource
from .logs import LogsResource
from .submissions import SubmissionsResource
from .users import UsersResource


class Backend:
    """Every resource, sharing one ApiClient."""

    def __init__(self, client: ApiClient):
        self.client = client
        self.auth = AuthResource(client)
        self.courses = CoursesResource(client)
        self.enrollments = EnrollmentsResource(client)
        self.submissions = SubmissionsResource(client)
        self.users = UsersResource(client)
        self.blacklist = BlacklistResource(client)
        self.logs = LogsResource(client)
        self.feedback = FeedbackResource(client)
        self.certificates = CertificatesResource(client)


__all__ = [
    "AuthResource",
    "Backend",
    "BlacklistResource",
    "CertificatesResource",
    "CoursesResource",
    "EnrollmentsResource",
    "FeedbackResource",
    "LogsResource",
    "Resource",
    "SubmissionsResource",
    "UsersResource",
]
