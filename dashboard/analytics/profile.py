"""Profile completion and the advisory checks shown on the profile page."""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

PROFILE_FIELDS = ("name", "dateOfBirth", "phoneNumber", "maritalStatus", "technicalUnit")

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIAL_CHARS = '!@#$%^&*(),.?":{}|<>'


@dataclass(frozen=True)
class ProfileCompletion:
    percentage: int
    is_complete: bool
    missing: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "percentage": self.percentage,
            "isComplete": self.is_complete,
            "missing": list(self.missing),
        }


def _is_filled(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def profile_completion(profile: Optional[Mapping[str, Any]]) -> ProfileCompletion:
    """Share of the five profile fields that are filled in.

    ``profile`` uses the backend's camelCase keys. A missing profile counts
    as 0% with every field missing.
    """
    if not profile:
        return ProfileCompletion(0, False, list(PROFILE_FIELDS))
    missing = [name for name in PROFILE_FIELDS if not _is_filled(profile.get(name))]
    filled = len(PROFILE_FIELDS) - len(missing)
    # Half rounds up, like Math.round
    percentage = int(100 * filled / len(PROFILE_FIELDS) + 0.5)
    return ProfileCompletion(percentage, not missing, missing)


def validate_username(username: Optional[str]) -> Optional[str]:
    """Return an error message, or None when the username is acceptable.

    An empty username is allowed; the account then falls back to its email.
    """
    if not username:
        return None
    if len(username) < USERNAME_MIN_LENGTH:
        return f"Username must be at least {USERNAME_MIN_LENGTH} characters"
    if len(username) > USERNAME_MAX_LENGTH:
        return f"Username must be less than {USERNAME_MAX_LENGTH} characters"
    if not USERNAME_PATTERN.match(username):
        return "Username can only contain letters, numbers, and underscores"
    return None


def password_checks(password: str) -> Dict[str, bool]:
    return {
        "minLength": len(password) >= PASSWORD_MIN_LENGTH,
        "hasUpperCase": any("A" <= char <= "Z" for char in password),
        "hasNumber": any("0" <= char <= "9" for char in password),
        "hasSpecialChar": any(char in PASSWORD_SPECIAL_CHARS for char in password),
    }


def password_problems(password: str) -> List[str]:
    """Human readable list of the password rules that are not met."""
    messages = {
        "minLength": f"Password must be at least {PASSWORD_MIN_LENGTH} characters long",
        "hasUpperCase": "Password must contain at least one uppercase letter",
        "hasNumber": "Password must contain at least one number",
        "hasSpecialChar": "Password must contain at least one special character",
    }
    return [messages[name] for name, ok in password_checks(password).items() if not ok]
