"""User administration: ``/api/auth/users`` and ``/api/users``."""

from typing import Any, Dict, List

from ..models.enums import UserRole
from ..models.user import BulkUserRequest, BulkUserResult, User, UserUpdate
from ..session import Session
from .base import Resource, expect_object, parse, parse_list, segment


class UsersResource(Resource):
    prefix = "/api/users"
    accounts_prefix = "/api/auth/users"

    async def list(self, session: Session) -> List[User]:
        payload = await self.client.get(self.accounts_prefix, session)
        return parse_list("GET /api/auth/users", User, payload)

    async def delete(self, user_id: str, session: Session) -> Dict[str, Any]:
        payload = await self.client.delete(f"{self.accounts_prefix}/{segment(user_id)}", session)
        return expect_object("DELETE /api/auth/users/:id", payload)

    async def change_role(self, user_id: str, role: UserRole, session: Session) -> User:
        endpoint = "PATCH /api/users/:id/role"
        payload = await self.client.patch(self.path(user_id, "role"), session, json={"role": role.value})
        return parse(endpoint, User, expect_object(endpoint, payload).get("user"))

    async def quick_update(self, user_id: str, update: UserUpdate, session: Session) -> User:
        endpoint = "PATCH /api/users/:id/quick"
        payload = await self.client.patch(
            self.path(user_id, "quick"), session, json=update.to_quick_payload()
        )
        return parse(endpoint, User, expect_object(endpoint, payload).get("user"))

    async def bulk_create(self, request: BulkUserRequest, session: Session) -> BulkUserResult:
        payload = await self.client.post(self.path("bulk"), session, json=request.to_payload())
        return parse("POST /api/users/bulk", BulkUserResult, payload)
