"""Public certificate validation."""

import logging
import re

from ..models.records import Certificate
from ..resources import Backend

logger = logging.getLogger(__name__)

CODE_PATTERN = re.compile(r"^[A-Za-z0-9-]{4,64}$")


class CertificateService:
    def __init__(self, backend: Backend):
        self.backend = backend

    async def validate(self, code: str) -> Certificate:
        code = (code or "").strip().upper()
        if not CODE_PATTERN.match(code):
            return Certificate(valid=False, message="Invalid validation code format")
        return await self.backend.certificates.validate(code)
