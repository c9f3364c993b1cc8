"""Activity-log viewer."""

from typing import Optional

from ..analytics.collection import Page, SortState, all_of, query_collection, text_matcher
from ..models.enums import SortDirection
from ..models.records import LogEntry
from ..resources import Backend
from ..session import Session

SEARCH_FIELDS = ("user_name", "user_email", "action", "resource", "details")
SORTABLE_FIELDS = {
    "timestamp": "timestamp",
    "userName": "user_name",
    "user_name": "user_name",
    "action": "action",
    "resource": "resource",
    "status": "status",
}


class ActivityService:
    def __init__(self, backend: Backend, page_size: int = 50):
        self.backend = backend
        self.page_size = page_size

    async def logs(
        self,
        session: Session,
        search: Optional[str] = None,
        action: Optional[str] = None,
        resource: Optional[str] = None,
        sort: str = "timestamp",
        direction: SortDirection = SortDirection.desc,
        page: int = 1,
    ) -> Page[LogEntry]:
        """Filtered, sorted page of log entries (newest first by default).

        Raises:
            ValueError: for a column that cannot be sorted on.
        """
        if sort not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort logs by {sort!r}")
        entries = await self.backend.logs.list(session)

        def exact(field: str, wanted: Optional[str]):
            if not wanted or wanted == "all":
                return None
            return lambda entry: getattr(entry, field) == wanted

        predicate = all_of(
            text_matcher(search, SEARCH_FIELDS),
            exact("action", action),
            exact("resource", resource),
        )
        sort_state = SortState(field=SORTABLE_FIELDS[sort], direction=direction)
        return query_collection(entries, predicate, sort_state, page=page, page_size=self.page_size)

    async def facets(self, session: Session) -> dict:
        """Distinct actions and resources for the filter dropdowns."""
        entries = await self.backend.logs.list(session)
        return {
            "actions": sorted({e.action for e in entries if e.action}),
            "resources": sorted({e.resource for e in entries if e.resource}),
        }
