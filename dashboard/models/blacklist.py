"""Blacklist entries: accounts an admin has locked out of the platform."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, Field, field_validator

from .common import ApiModel, id_field


class BlacklistedAccount(ApiModel):
    """The populated ``userId`` or ``blacklistedBy`` reference of an entry."""

    id: Optional[str] = id_field(None)
    name: str = ""
    email: str = ""
    role: Optional[str] = None
    profile_picture: Optional[Union[Dict[str, Any], str]] = None


class AccessAttempt(ApiModel):
    timestamp: Optional[datetime] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    attempted_route: Optional[str] = None


class BlacklistEntry(ApiModel):
    id: Optional[str] = id_field(None)
    user: Optional[BlacklistedAccount] = Field(None, validation_alias=AliasChoices("userId", "user"))
    email: str = ""
    reason: str = ""
    notes: Optional[str] = None
    blacklisted_by: Optional[BlacklistedAccount] = None
    blacklisted_at: Optional[datetime] = None
    access_attempts: List[AccessAttempt] = []

    @field_validator("user", "blacklisted_by", mode="before")
    @classmethod
    def _unpopulated(cls, v):
        # the reference is a bare id when the backend did not populate it
        if isinstance(v, str):
            return {"_id": v}
        return v

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user else None


class BlacklistRequest(ApiModel):
    user_id: str = Field(..., min_length=1)
    reason: str
    notes: Optional[str] = None

    @field_validator("reason")
    @classmethod
    def reason_given(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("A reason is required")
        return v

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class BlacklistStatus(ApiModel):
    is_blacklisted: bool
    blacklist: Optional[BlacklistEntry] = None


class BlacklistStats(ApiModel):
    total_blacklisted: int = 0
    recent_blacklists: List[BlacklistEntry] = []
    recent_access_attempts: int = 0
