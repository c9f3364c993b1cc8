"""Filter, sort and paginate pipeline shared by every admin table."""

import math
from datetime import date, datetime
from typing import Any, Callable, Generic, Iterable, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..models.enums import SortDirection

T = TypeVar("T")

Predicate = Callable[[Any], bool]


class Page(BaseModel, Generic[T]):
    model_config = ConfigDict(populate_by_name=True)

    items: List[T]
    page: int
    page_size: int = Field(serialization_alias="pageSize")
    total: int
    total_pages: int = Field(serialization_alias="totalPages")


class SortState(BaseModel):
    """Which column a table is sorted by.

    Clicking the active column flips its direction; clicking another column
    sorts by that column, newest/largest first.
    """

    field: str
    direction: SortDirection = SortDirection.desc

    def toggle(self, field: str) -> "SortState":
        if field == self.field:
            flipped = SortDirection.asc if self.direction == SortDirection.desc else SortDirection.desc
            return SortState(field=field, direction=flipped)
        return SortState(field=field, direction=SortDirection.desc)

    @property
    def descending(self) -> bool:
        return self.direction == SortDirection.desc


def get_field(item: Any, path: str) -> Any:
    """Read a (dotted) field from a dict or a model, ``None`` when absent.

    Model attributes are looked up by their Python name, dict keys as given.
    """
    value = item
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, dict):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def _sort_key(value: Any):
    if value is None:
        value = ""
    if isinstance(value, bool):
        value = str(value).lower()
    if isinstance(value, (datetime, date)):
        value = value.isoformat()
    if isinstance(value, (int, float)):
        return (0, value, "")
    if hasattr(value, "value"):
        value = value.value
    text = str(value)
    return (1, text.casefold(), text)


def text_matcher(term: Optional[str], fields: Sequence[str]) -> Predicate:
    """Predicate that is true when any of ``fields`` contains ``term``.

    Case-insensitive; a blank term matches everything.
    """
    needle = (term or "").strip().lower()
    if not needle:
        return lambda item: True

    def match(item: Any) -> bool:
        for name in fields:
            value = get_field(item, name)
            if value is not None and needle in str(getattr(value, "value", value)).lower():
                return True
        return False

    return match


def all_of(*predicates: Optional[Predicate]) -> Predicate:
    active = [p for p in predicates if p is not None]
    return lambda item: all(p(item) for p in active)


def paginate(items: Sequence[T], page: int = 1, page_size: int = 50) -> Page[T]:
    total = len(items)
    total_pages = max(1, math.ceil(total / page_size))
    page = min(max(1, page), total_pages)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        page=page,
        page_size=page_size,
        total=total,
        total_pages=total_pages,
    )


def query_collection(
    items: Iterable[T],
    predicate: Optional[Predicate] = None,
    sort: Optional[SortState] = None,
    page: int = 1,
    page_size: int = 50,
) -> Page[T]:
    """Filter, then sort, then cut out one page.

    The input is never modified, so running the same query twice on the same
    list gives the same page.
    """
    rows = [item for item in items if predicate is None or predicate(item)]
    if sort is not None:
        rows = sorted(
            rows,
            key=lambda item: _sort_key(get_field(item, sort.field)),
            reverse=sort.descending,
        )
    return paginate(rows, page=page, page_size=page_size)
