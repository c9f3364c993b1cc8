"""Pydantic models for the records the LMS backend returns."""

from .blacklist import (
    AccessAttempt,
    BlacklistedAccount,
    BlacklistEntry,
    BlacklistRequest,
    BlacklistStats,
    BlacklistStatus,
)
from .common import ApiModel
from .course import (
    Assignment,
    Course,
    CourseInstructor,
    CoursePermissions,
    CourseSummary,
    EstimatedDuration,
    Instructor,
    InstructorAssignment,
    Module,
    Project,
    Section,
)
from .enrollment import Enrollment, UserSummary
from .enums import (
    AssessmentKind,
    LogStatus,
    ProgressStatus,
    RiskLevel,
    SortDirection,
    SubmissionType,
    UserRole,
)
from .records import Certificate, LogEntry, SurveyResponse
from .submission import (
    BulkGradeItem,
    GradeRequest,
    QuizAnswers,
    QuizResult,
    Submission,
    SubmissionDraft,
)
from .user import (
    BatchResult,
    BulkUserRequest,
    BulkUserResult,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    NewUser,
    RegisterRequest,
    ResendVerificationRequest,
    ResetPasswordRequest,
    RoleChangeRequest,
    User,
    UserUpdate,
    VerifyEmailRequest,
)

__all__ = [
    "AccessAttempt",
    "ApiModel",
    "Assignment",
    "AssessmentKind",
    "BatchResult",
    "BlacklistEntry",
    "BlacklistRequest",
    "BlacklistStats",
    "BlacklistStatus",
    "BlacklistedAccount",
    "BulkGradeItem",
    "BulkUserRequest",
    "BulkUserResult",
    "Certificate",
    "ChangePasswordRequest",
    "Course",
    "CourseInstructor",
    "CoursePermissions",
    "CourseSummary",
    "Enrollment",
    "EstimatedDuration",
    "ForgotPasswordRequest",
    "GradeRequest",
    "Instructor",
    "InstructorAssignment",
    "LogEntry",
    "LogStatus",
    "LoginRequest",
    "LoginResponse",
    "Module",
    "NewUser",
    "ProgressStatus",
    "Project",
    "QuizAnswers",
    "QuizResult",
    "RegisterRequest",
    "ResendVerificationRequest",
    "ResetPasswordRequest",
    "RiskLevel",
    "RoleChangeRequest",
    "Section",
    "SortDirection",
    "Submission",
    "SubmissionDraft",
    "SubmissionType",
    "SurveyResponse",
    "User",
    "UserRole",
    "UserSummary",
    "UserUpdate",
    "VerifyEmailRequest",
]
