"""User-management console and blacklist."""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..dependencies import get_user_admin_service, require_admin
from ..models.blacklist import BlacklistEntry, BlacklistRequest, BlacklistStats
from ..models.course import InstructorAssignment
from ..models.enums import SortDirection
from ..models.user import BatchResult, BulkUserRequest, BulkUserResult, RoleChangeRequest, User, UserUpdate
from ..services.users import UserAdminService
from ..session import Session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def csv_response(content: str, prefix: str) -> Response:
    filename = f"{prefix}_{date.today().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("")
async def list_users(
    search: Optional[str] = None,
    role: Optional[str] = None,
    verified: Optional[str] = Query(None, description="all, verified or unverified"),
    sort: Optional[str] = None,
    direction: SortDirection = SortDirection.desc,
    page: int = Query(1, ge=1),
    session: Session = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
):
    try:
        return await service.users(
            session, search=search, role=role, verified=verified,
            sort=sort, direction=direction, page=page,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/export.csv")
async def export_users(
    fields: Optional[str] = Query(None, description="Comma separated column names"),
    search: Optional[str] = None,
    role: Optional[str] = None,
    verified: Optional[str] = None,
    session: Session = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
):
    columns = [name.strip() for name in fields.split(",") if name.strip()] if fields else None
    try:
        content = await service.export_csv(session, columns, search=search, role=role, verified=verified)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return csv_response(content, "users")


@router.get("/blacklist")
async def list_blacklist(
    search: Optional[str] = None,
    session: Session = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
) -> List[BlacklistEntry]:
    return await service.blacklist(session, search=search)


@router.get("/blacklist/candidates")
async def blacklist_candidates(
    session: Session = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
) -> List[User]:
    return await service.blacklist_candidates(session)


@router.get("/blacklist/stats")
async def blacklist_stats(
    session: Session = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
) -> BlacklistStats:
    return await service.blacklist_stats(session)


@router.post("/blacklist", status_code=status.HTTP_201_CREATED)
async def blacklist_user(
    request: BlacklistRequest,
    session: Session = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
) -> BlacklistEntry:
    return await service.blacklist_user(request, session)


@router.delete("/blacklist/{user_id}")
async def unblacklist_user(
    user_id: str,
    session: Session = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
) -> Dict[str, Any]:
    return await service.unblacklist(user_id, session)


@router.post("/onboarding/reset-first-login")
async def reset_first_login_all(
    session: Session = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
) -> Dict[str, Any]:
    return await service.reset_first_login(session)


@router.post("/onboarding/reset")
async def reset_onboarding(
    session: Session = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
) -> Dict[str, Any]:
    return await service.reset_onboarding(session)


@router.post("/{user_id}/reset-first-login")
async def reset_first_login(
    user_id: str,
    session: Session = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
) -> Dict[str, Any]:
    return await service.reset_first_login(session, user_id)


@router.patch("/{user_id}")
async def update_user(
    user_id: str,
    update: UserUpdate,
    session: Session = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
) -> User:
    try:
        return await service.save(user_id, update, session)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    session: Session = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
) -> Dict[str, Any]:
    return await service.delete(user_id, session)


@router.post("/bulk")
async def bulk_add(
    request: BulkUserRequest,
    session: Session = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
) -> BulkUserResult:
    return await service.bulk_add(request, session)


@router.post("/roles")
async def change_roles(
    request: RoleChangeRequest,
    session: Session = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
) -> BatchResult:
    return await service.change_roles(request.user_ids, request.role, session)


@router.post("/instructors")
async def assign_instructors(
    assignments: List[InstructorAssignment],
    session: Session = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
) -> BatchResult:
    return await service.assign_instructors(assignments, session)
