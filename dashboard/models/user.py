"""User accounts and the auth request/response bodies."""

import json
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import EmailStr, Field, field_validator, model_validator

from ..analytics.profile import password_problems, validate_username
from .common import ApiModel, StrList, id_field
from .enums import UserRole

# Keys the quick-update endpoint must never receive
PROTECTED_UPDATE_FIELDS = ("role", "password", "_id", "id", "createdAt", "updatedAt")


class Streak(ApiModel):
    current: int = 0
    longest: int = 0
    last_login: Optional[datetime] = None


class Preferences(ApiModel):
    email_notifications: Optional[bool] = None
    push_notifications: Optional[bool] = None
    theme: Optional[str] = None


class User(ApiModel):
    """A backend user account as listed by ``/api/auth/users``."""

    id: str = id_field()
    name: Optional[str] = None
    email: str = ""
    username: Optional[str] = None
    role: UserRole = UserRole.student
    phone_number: Optional[str] = None
    date_of_birth: Optional[Union[date, datetime, str]] = None
    marital_status: Optional[str] = None
    technical_unit: Optional[str] = None
    address: Optional[Union[Dict[str, Any], str]] = None
    bio: Optional[str] = None
    occupation: Optional[str] = None
    company: Optional[str] = None
    skills: StrList = []
    preferences: Optional[Preferences] = None
    is_verified: bool = False
    is_onboarded: bool = False
    first_login: bool = False
    has_seen_onboarding: bool = False
    last_login: Optional[datetime] = None
    login_count: int = 0
    streak: Optional[Streak] = None
    profile_picture: Optional[Union[Dict[str, Any], str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("login_count", mode="before")
    @classmethod
    def _login_count(cls, v):
        return v or 0

    @property
    def is_admin(self) -> bool:
        return self.role in (UserRole.admin, UserRole.admin_only)

    @property
    def display_name(self) -> str:
        return self.name or self.username or self.email.split("@")[0]


class UserUpdate(ApiModel):
    """Edits made from the user table; only fields that were set are sent."""

    name: Optional[str] = None
    email: Optional[EmailStr] = None
    username: Optional[str] = None
    role: Optional[UserRole] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[str] = None
    marital_status: Optional[str] = None
    technical_unit: Optional[str] = None
    is_verified: Optional[bool] = None
    is_onboarded: Optional[bool] = None

    @field_validator("username")
    @classmethod
    def username_format(cls, v: Optional[str]) -> Optional[str]:
        problem = validate_username(v)
        if problem:
            raise ValueError(problem)
        return v

    def to_quick_payload(self) -> Dict[str, Any]:
        """Body for ``PATCH /api/users/:id/quick`` with protected keys removed."""
        payload = self.model_dump(by_alias=True, exclude_unset=True, mode="json")
        for key in PROTECTED_UPDATE_FIELDS:
            payload.pop(key, None)
        return payload


class NewUser(ApiModel):
    """One row of the bulk add form."""

    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    username: Optional[str] = None
    role: UserRole = UserRole.student
    phone_number: Optional[str] = None

    @field_validator("username")
    @classmethod
    def username_format(cls, v: Optional[str]) -> Optional[str]:
        problem = validate_username(v)
        if problem:
            raise ValueError(problem)
        return v or None


class BulkUserRequest(ApiModel):
    users: List[NewUser] = Field(..., min_length=1)

    def to_payload(self) -> Dict[str, str]:
        """The backend expects the user list as a JSON encoded string."""
        rows = [user.model_dump(by_alias=True, exclude_none=True, mode="json") for user in self.users]
        return {"users": json.dumps(rows)}


class BulkUserFailure(ApiModel):
    email: Optional[str] = None
    error: str = ""


class BulkUserSuccess(ApiModel):
    email: str = ""
    id: Optional[str] = None
    message: Optional[str] = None


class BulkUserResult(ApiModel):
    message: Optional[str] = None
    successful: List[BulkUserSuccess] = []
    failed: List[BulkUserFailure] = []

    @model_validator(mode="before")
    @classmethod
    def _unwrap_results(cls, data):
        # {"message": ..., "results": {"successful": [...], "failed": [...]}}
        if isinstance(data, dict) and isinstance(data.get("results"), dict):
            return {"message": data.get("message"), **data["results"]}
        return data


class RoleChangeRequest(ApiModel):
    """Give several users the same role at once."""
    user_ids: List[str] = Field(..., min_length=1)
    role: UserRole


class BatchResult(ApiModel):
    """Outcome of a fan-out of independent requests, keyed by item id."""
    succeeded: List[str] = []
    failed: Dict[str, str] = {}
    skipped: List[str] = []


# Auth bodies


class LoginRequest(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginResponse(ApiModel):
    token: str
    role: UserRole = UserRole.student
    first_login: bool = False
    is_onboarded: bool = False
    is_verified: bool = True


class RegisterRequest(ApiModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        problems = password_problems(v)
        if problems:
            raise ValueError(problems[0])
        return v


class ForgotPasswordRequest(ApiModel):
    email: EmailStr


class VerifyEmailRequest(ApiModel):
    email: EmailStr
    code: str = Field(..., min_length=1)


class ResendVerificationRequest(ApiModel):
    email: EmailStr


class ResetPasswordRequest(ApiModel):
    email: EmailStr
    code: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        problems = password_problems(v)
        if problems:
            raise ValueError(problems[0])
        return v


class ChangePasswordRequest(ApiModel):
    old_password: str = Field(..., min_length=1)
    new_password: str
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        problems = password_problems(v)
        if problems:
            raise ValueError(problems[0])
        return v

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("New passwords do not match")
        return self

    def to_payload(self) -> Dict[str, str]:
        return {"oldPassword": self.old_password, "newPassword": self.new_password}
