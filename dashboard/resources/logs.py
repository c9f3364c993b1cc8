"""``/api/logs``."""

from typing import List

from ..models.records import LogEntry
from ..session import Session
from .base import Resource, parse_list


class LogsResource(Resource):
    prefix = "/api/logs"

    async def list(self, session: Session) -> List[LogEntry]:
        """The newest 1000 entries, newest first."""
        payload = await self.client.get(self.prefix, session)
        return parse_list("GET /api/logs", LogEntry, payload)
