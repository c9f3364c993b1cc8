"""Student course catalog."""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query

from ..analytics.search import ALL_COURSES
from ..dependencies import get_catalog_service, get_session, require_session
from ..models.course import Course
from ..models.enrollment import Enrollment
from ..services.catalog import CatalogService
from ..session import Session

router = APIRouter(prefix="/catalog", tags=["Catalog"])


@router.get("/courses")
async def list_courses(
    q: str = Query("", description="Search text"),
    category: str = Query(ALL_COURSES),
    page: int = Query(1, ge=1),
    session: Session = Depends(get_session),
    service: CatalogService = Depends(get_catalog_service),
):
    """Available courses ranked by relevance to ``q``."""
    return await service.browse(session, query=q, category=category, page=page)


@router.get("/categories")
async def list_categories(
    session: Session = Depends(get_session),
    service: CatalogService = Depends(get_catalog_service),
) -> List[str]:
    return await service.categories(session)


@router.get("/courses/{course_id}")
async def get_course(
    course_id: str,
    session: Session = Depends(get_session),
    service: CatalogService = Depends(get_catalog_service),
) -> Course:
    return await service.course(course_id, session)


@router.post("/courses/{course_id}/enroll")
async def enroll(
    course_id: str,
    session: Session = Depends(require_session),
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, Any]:
    return await service.enroll(course_id, session)


@router.delete("/courses/{course_id}/enroll")
async def unenroll(
    course_id: str,
    session: Session = Depends(require_session),
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, Any]:
    return await service.unenroll(course_id, session)


@router.get("/my-courses")
async def my_courses(
    session: Session = Depends(require_session),
    service: CatalogService = Depends(get_catalog_service),
) -> List[Enrollment]:
    return await service.my_courses(session)
