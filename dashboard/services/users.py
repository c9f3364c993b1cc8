"""User-management console: the user table and its bulk actions, plus the blacklist."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..analytics.collection import Page, SortState, all_of, query_collection, text_matcher
from ..analytics.export import users_to_csv
from ..models.blacklist import BlacklistEntry, BlacklistRequest, BlacklistStats
from ..models.course import InstructorAssignment
from ..models.enums import SortDirection, UserRole
from ..models.user import BatchResult, BulkUserRequest, BulkUserResult, User, UserUpdate
from ..resources import Backend
from ..session import Session
from .common import gather_all, run_batch

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("name", "email", "phone_number", "username", "technical_unit")
BLACKLIST_SEARCH_FIELDS = ("user.name", "email", "reason")


def field_name(name: str) -> str:
    """Python field name for a User column given in either spelling."""
    if name in User.model_fields:
        return name
    for field, info in User.model_fields.items():
        if info.alias == name:
            return field
    raise ValueError(f"Unknown user field: {name}")


def user_filter(search: Optional[str] = None, role: Optional[str] = None, verified: Optional[str] = None):
    """Predicate for the user table filters (``all`` disables a filter)."""
    def role_matches(user: User) -> bool:
        return not role or role == "all" or user.role.value == role

    def verified_matches(user: User) -> bool:
        if not verified or verified == "all":
            return True
        return user.is_verified if verified == "verified" else not user.is_verified

    return all_of(text_matcher(search, SEARCH_FIELDS), role_matches, verified_matches)


class UserAdminService:
    def __init__(self, backend: Backend, page_size: int = 50):
        self.backend = backend
        self.page_size = page_size

    async def users(
        self,
        session: Session,
        search: Optional[str] = None,
        role: Optional[str] = None,
        verified: Optional[str] = None,
        sort: Optional[str] = None,
        direction: SortDirection = SortDirection.desc,
        page: int = 1,
    ) -> Page[User]:
        users = await self.backend.users.list(session)
        sort_state = SortState(field=field_name(sort), direction=direction) if sort else None
        return query_collection(
            users, user_filter(search, role, verified), sort_state, page=page, page_size=self.page_size
        )

    async def save(self, user_id: str, update: UserUpdate, session: Session) -> User:
        """Apply an edit from the user table.

        A role change goes through the role endpoint; everything else through
        the quick-update endpoint, which never accepts a role.
        """
        user = None
        if update.role is not None:
            user = await self.backend.users.change_role(user_id, update.role, session)
            logger.info(f"Changed role of user {user_id} to {update.role.value}")
        if update.to_quick_payload():
            user = await self.backend.users.quick_update(user_id, update, session)
        if user is None:
            raise ValueError("Nothing to update")
        return user

    async def delete(self, user_id: str, session: Session) -> Dict[str, Any]:
        result = await self.backend.users.delete(user_id, session)
        logger.warning(f"Deleted user {user_id}")
        return result

    async def bulk_add(self, request: BulkUserRequest, session: Session) -> BulkUserResult:
        result = await self.backend.users.bulk_create(request, session)
        logger.info(f"Bulk add: {len(result.successful)} created, {len(result.failed)} failed")
        return result

    async def change_roles(self, user_ids: Sequence[str], role: UserRole, session: Session) -> BatchResult:
        """Give every listed user the same role; each change succeeds or fails on its own."""
        unique = list(dict.fromkeys(user_ids))
        return await run_batch({
            user_id: self.backend.users.change_role(user_id, role, session) for user_id in unique
        })

    async def assign_instructors(self, assignments: List[InstructorAssignment], session: Session) -> BatchResult:
        """Add assistant instructors, skipping users who already teach the course.

        Result keys are ``"<courseId>:<userId>"``.
        """
        course_list, user_list = await gather_all(
            self.backend.courses.list(session), self.backend.users.list(session)
        )
        courses = {course.id: course for course in course_list}
        users = {user.id: user for user in user_list}
        calls, skipped = {}, []
        for assignment in assignments:
            key = f"{assignment.course_id}:{assignment.user_id}"
            course = courses.get(assignment.course_id)
            if course is None or course.has_instructor(assignment.user_id):
                skipped.append(key)
                continue
            if not assignment.name and assignment.user_id in users:
                assignment = assignment.model_copy(update={"name": users[assignment.user_id].name})
            calls[key] = self.backend.courses.add_instructor(assignment, session)
        return await run_batch(calls, skipped=skipped)

    async def export_csv(
        self,
        session: Session,
        fields: Optional[Sequence[str]] = None,
        search: Optional[str] = None,
        role: Optional[str] = None,
        verified: Optional[str] = None,
    ) -> str:
        """CSV of every user matching the table filters (not just one page)."""
        users = await self.backend.users.list(session)
        predicate = user_filter(search, role, verified)
        return users_to_csv([user for user in users if predicate(user)], fields)

    async def blacklist(self, session: Session, search: Optional[str] = None) -> List[BlacklistEntry]:
        """Blacklisted accounts, filtered by name, email or reason."""
        entries = await self.backend.blacklist.list(session)
        matches = text_matcher(search, BLACKLIST_SEARCH_FIELDS)
        return [entry for entry in entries if matches(entry)]

    async def blacklist_candidates(self, session: Session) -> List[User]:
        """Users that may still be blacklisted: not admins and not already listed."""
        users, entries = await gather_all(
            self.backend.users.list(session), self.backend.blacklist.list(session)
        )
        listed = {entry.user_id for entry in entries}
        return [user for user in users if not user.is_admin and user.id not in listed]

    async def blacklist_user(self, request: BlacklistRequest, session: Session) -> BlacklistEntry:
        entry = await self.backend.blacklist.add(request, session)
        logger.warning(f"Blacklisted user {request.user_id}: {request.reason}")
        return entry

    async def unblacklist(self, user_id: str, session: Session) -> Dict[str, Any]:
        result = await self.backend.blacklist.remove(user_id, session)
        logger.info(f"Removed user {user_id} from the blacklist")
        return result

    async def blacklist_stats(self, session: Session) -> BlacklistStats:
        return await self.backend.blacklist.stats(session)

    async def reset_first_login(self, session: Session, user_id: Optional[str] = None) -> Dict[str, Any]:
        """Make one user, or every user, go through first-login setup again."""
        result = await self.backend.auth.reset_first_login(session, user_id)
        logger.warning(f"Reset first login for {user_id or 'all users'}")
        return result

    async def reset_onboarding(self, session: Session) -> Dict[str, Any]:
        result = await self.backend.auth.reset_onboarding(session)
        logger.warning("Reset the onboarding tour for all users")
        return result
