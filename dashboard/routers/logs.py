"""Activity-log viewer."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..dependencies import get_activity_service, require_admin
from ..models.enums import SortDirection
from ..services.activity import ActivityService
from ..session import Session

router = APIRouter(prefix="/logs", tags=["Logs"])


@router.get("")
async def list_logs(
    search: Optional[str] = None,
    action: Optional[str] = None,
    resource: Optional[str] = None,
    sort: str = "timestamp",
    direction: SortDirection = SortDirection.desc,
    page: int = Query(1, ge=1),
    session: Session = Depends(require_admin),
    service: ActivityService = Depends(get_activity_service),
):
    try:
        return await service.logs(
            session, search=search, action=action, resource=resource,
            sort=sort, direction=direction, page=page,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/facets")
async def log_facets(
    session: Session = Depends(require_admin),
    service: ActivityService = Depends(get_activity_service),
):
    return await service.facets(session)
