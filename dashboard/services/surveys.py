"""Review of end-of-module survey responses."""

from typing import List, Optional

from ..analytics.export import survey_responses_to_csv
from ..models.records import SurveyResponse
from ..resources import Backend
from ..session import Session


def filter_responses(
    responses: List[SurveyResponse],
    course_id: Optional[str] = None,
    module_id: Optional[str] = None,
) -> List[SurveyResponse]:
    return [
        r for r in responses
        if (not course_id or course_id == "all" or r.course_id == course_id)
        and (not module_id or module_id == "all" or r.module_id == module_id)
    ]


class SurveyService:
    def __init__(self, backend: Backend):
        self.backend = backend

    async def responses(
        self, session: Session, course_id: Optional[str] = None, module_id: Optional[str] = None
    ) -> List[SurveyResponse]:
        responses = await self.backend.feedback.survey_responses(session)
        return filter_responses(responses, course_id, module_id)

    async def export_csv(
        self, session: Session, course_id: Optional[str] = None, module_id: Optional[str] = None
    ) -> str:
        return survey_responses_to_csv(await self.responses(session, course_id, module_id))
