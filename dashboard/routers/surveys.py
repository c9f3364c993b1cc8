"""Survey response review."""

from typing import List, Optional

from fastapi import APIRouter, Depends

from ..dependencies import get_survey_service, require_admin
from ..models.records import SurveyResponse
from ..services.surveys import SurveyService
from ..session import Session
from .users import csv_response

router = APIRouter(prefix="/surveys", tags=["Surveys"])


@router.get("")
async def list_responses(
    course: Optional[str] = None,
    module: Optional[str] = None,
    session: Session = Depends(require_admin),
    service: SurveyService = Depends(get_survey_service),
) -> List[SurveyResponse]:
    return await service.responses(session, course_id=course, module_id=module)


@router.get("/export.csv")
async def export_responses(
    course: Optional[str] = None,
    module: Optional[str] = None,
    session: Session = Depends(require_admin),
    service: SurveyService = Depends(get_survey_service),
):
    content = await service.export_csv(session, course_id=course, module_id=module)
    return csv_response(content, "survey-responses")
