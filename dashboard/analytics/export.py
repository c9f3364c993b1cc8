"""CSV exports for the user table and survey responses."""

import csv
import io
import json
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..models.records import SurveyResponse
from ..models.user import User

EMPTY = "N/A"

DEFAULT_USER_FIELDS = (
    "name", "email", "role", "isVerified", "lastLogin", "loginCount",
)

USER_FIELDS = (
    "name", "email", "username", "role", "phoneNumber", "dateOfBirth",
    "maritalStatus", "technicalUnit", "address", "bio", "occupation", "company",
    "skills", "preferences", "isVerified", "isOnboarded", "firstLogin",
    "hasSeenOnboarding", "lastLogin", "loginCount", "streak", "createdAt",
    "updatedAt",
)

SURVEY_HEADERS = ["Student Name", "Email", "Course", "Module", "Submitted At"]


def _yes_no(flag: Any) -> str:
    return "Yes" if flag else "No"


def _format_date(value: Any) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)[:10]


def _format_address(address: Any) -> str:
    if isinstance(address, Mapping):
        parts = [address.get(key) for key in ("street", "city", "state")]
        return ", ".join(part for part in parts if part) or EMPTY
    return str(address)


def _cell(data: Mapping[str, Any], field: str) -> str:
    value = data.get(field)
    if value is None or value == "" or value == []:
        return EMPTY
    if field == "streak":
        return f"Current: {value.get('current', 0)}, Longest: {value.get('longest', 0)}"
    if field == "preferences":
        return (
            f"Email: {_yes_no(value.get('emailNotifications'))}, "
            f"Push: {_yes_no(value.get('pushNotifications'))}, "
            f"Theme: {value.get('theme') or 'Default'}"
        )
    if field == "skills":
        return ", ".join(value)
    if field == "address":
        return _format_address(value)
    if field in ("dateOfBirth", "lastLogin", "createdAt", "updatedAt"):
        return _format_date(value)
    if isinstance(value, bool):
        return _yes_no(value)
    return str(getattr(value, "value", value))


def _write_csv(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue()


def users_to_csv(users: Iterable[User], fields: Optional[Sequence[str]] = None) -> str:
    """CSV of the given users, one column per visible field.

    Raises:
        ValueError: for a field name the user table does not have.
    """
    fields = list(fields or DEFAULT_USER_FIELDS)
    unknown = [name for name in fields if name not in USER_FIELDS]
    if unknown:
        raise ValueError(f"Unknown user fields: {', '.join(unknown)}")
    rows = (user.model_dump(by_alias=True) for user in users)
    return _write_csv(fields, ([_cell(data, name) for name in fields] for data in rows))


def _question_keys(responses: List[SurveyResponse]) -> List[str]:
    keys: Dict[str, None] = {}
    for response in responses:
        for key in response.responses:
            keys.setdefault(key, None)
    return list(keys)


def _question_header(key: str) -> str:
    return f"Q{int(key) + 1}" if key.isdigit() else key


def _answer_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def survey_responses_to_csv(responses: Iterable[SurveyResponse]) -> str:
    """CSV with the fixed student columns plus one ``Q{n}`` column per question."""
    responses = list(responses)
    keys = _question_keys(responses)
    headers = SURVEY_HEADERS + [_question_header(key) for key in keys]

    def row(response: SurveyResponse) -> List[str]:
        user = response.user
        course = response.course
        cells = [
            user.name if user else "",
            user.email if user else "",
            course.title if course else "",
            response.module_title,
            response.submitted_at.isoformat() if response.submitted_at else "",
        ]
        return cells + [_answer_cell(response.responses.get(key)) for key in keys]

    return _write_csv(headers, (row(response) for response in responses))
