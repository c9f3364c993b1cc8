"""``/api/certificates``."""

import logging

from ..errors import NotFoundError
from ..models.records import Certificate
from .base import Resource, parse

logger = logging.getLogger(__name__)


class CertificatesResource(Resource):
    prefix = "/api/certificates"

    async def validate(self, code: str) -> Certificate:
        """Look up a certificate by validation code. Public, no token needed.

        An unknown code comes back as 404 with ``{"valid": false, "message": ...}``;
        that is returned as an invalid certificate rather than raised.
        """
        endpoint = "GET /api/certificates/validate/:code"
        try:
            payload = await self.client.get(self.path("validate", code))
        except NotFoundError as e:
            if isinstance(e.payload, dict) and e.payload.get("valid") is False:
                logger.info(f"Certificate code {code!r} is not valid")
                return parse(endpoint, Certificate, e.payload)
            raise
        return parse(endpoint, Certificate, payload)
