"""Shared enums for models, analytics and routers."""
import enum


class UserRole(str, enum.Enum):
    student = "student"
    admin = "admin"
    admin_only = "admin-only"


class SubmissionType(str, enum.Enum):
    text = "text"
    link = "link"
    file_upload = "file_upload"
    quiz = "quiz"


class RiskLevel(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"


class LogStatus(str, enum.Enum):
    success = "success"
    error = "error"
    info = "info"


class ProgressStatus(str, enum.Enum):
    all = "all"
    completed = "completed"
    in_progress = "in-progress"
    not_started = "not-started"


class SortDirection(str, enum.Enum):
    asc = "asc"
    desc = "desc"


class AssessmentKind(str, enum.Enum):
    assignments = "assignments"
    projects = "projects"
    quizzes = "quizzes"
