"""``/api/blacklist``: admin-only account lockouts."""

from typing import Any, Dict, List

from ..models.blacklist import BlacklistEntry, BlacklistRequest, BlacklistStats, BlacklistStatus
from ..session import Session
from .base import Resource, expect_key_list, expect_object, parse, parse_list


class BlacklistResource(Resource):
    prefix = "/api/blacklist"

    async def list(self, session: Session) -> List[BlacklistEntry]:
        """Every entry, most recent first."""
        endpoint = "GET /api/blacklist"
        payload = await self.client.get(self.prefix, session)
        return parse_list(endpoint, BlacklistEntry, expect_key_list(endpoint, payload, "blacklistedUsers"))

    async def add(self, request: BlacklistRequest, session: Session) -> BlacklistEntry:
        """Lock a user out.

        The backend answers 404 for an unknown user, 403 for an admin and 400
        when the user is already listed.
        """
        endpoint = "POST /api/blacklist"
        payload = await self.client.post(self.prefix, session, json=request.to_payload())
        return parse(endpoint, BlacklistEntry, expect_object(endpoint, payload).get("blacklist"))

    async def remove(self, user_id: str, session: Session) -> Dict[str, Any]:
        payload = await self.client.delete(self.path(user_id), session)
        return expect_object("DELETE /api/blacklist/:userId", payload)

    async def check(self, user_id: str, session: Session) -> BlacklistStatus:
        payload = await self.client.get(self.path("check", user_id), session)
        return parse("GET /api/blacklist/check/:userId", BlacklistStatus, payload)

    async def stats(self, session: Session) -> BlacklistStats:
        payload = await self.client.get(self.path("stats"), session)
        return parse("GET /api/blacklist/stats", BlacklistStats, payload)
