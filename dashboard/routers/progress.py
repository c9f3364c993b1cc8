"""Admin enrollment and progress views."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from ..dependencies import get_progress_service, require_admin
from ..models.enums import ProgressStatus
from ..services.progress import ProgressService
from ..session import Session

router = APIRouter(prefix="/progress", tags=["Progress"])


class EnrollRequest(BaseModel):
    course_id: str = Field(..., alias="courseId")
    # None enrolls every user
    user_ids: Optional[List[str]] = Field(None, alias="userIds")


class UnenrollRequest(BaseModel):
    course_id: str = Field(..., alias="courseId")
    # None removes everyone from the course
    user_id: Optional[str] = Field(None, alias="userId")


@router.get("/enrollments")
async def enrollments(
    search: Optional[str] = None,
    course: Optional[str] = None,
    status: ProgressStatus = ProgressStatus.all,
    page: int = Query(1, ge=1),
    session: Session = Depends(require_admin),
    service: ProgressService = Depends(get_progress_service),
):
    return await service.table(session, search=search, course_id=course, status=status, page=page)


@router.get("/summary")
async def summary(
    session: Session = Depends(require_admin),
    service: ProgressService = Depends(get_progress_service),
):
    return await service.summary(session)


@router.get("/by-course")
async def by_course(
    session: Session = Depends(require_admin),
    service: ProgressService = Depends(get_progress_service),
) -> List[Dict[str, Any]]:
    return await service.by_course(session)


@router.post("/enroll")
async def enroll(
    request: EnrollRequest,
    session: Session = Depends(require_admin),
    service: ProgressService = Depends(get_progress_service),
) -> Dict[str, Any]:
    return await service.enroll(request.course_id, session, user_ids=request.user_ids)


@router.post("/unenroll")
async def unenroll(
    request: UnenrollRequest,
    session: Session = Depends(require_admin),
    service: ProgressService = Depends(get_progress_service),
) -> Dict[str, Any]:
    return await service.unenroll(request.course_id, session, user_id=request.user_id)
