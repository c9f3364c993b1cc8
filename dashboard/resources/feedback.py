"""``/api/feedback``."""

from typing import List

from ..models.records import SurveyResponse
from ..session import Session
from .base import Resource, parse_list


class FeedbackResource(Resource):
    prefix = "/api/feedback"

    async def survey_responses(self, session: Session) -> List[SurveyResponse]:
        payload = await self.client.get(self.path("survey-responses"), session)
        return parse_list("GET /api/feedback/survey-responses", SurveyResponse, payload)
