"""Public certificate validation page."""

from fastapi import APIRouter, Depends

from ..dependencies import get_certificate_service
from ..models.records import Certificate
from ..services.certificates import CertificateService

router = APIRouter(prefix="/certificates", tags=["Certificates"])


@router.get("/validate/{code}")
async def validate_certificate(
    code: str, service: CertificateService = Depends(get_certificate_service)
) -> Certificate:
    """Always 200; ``valid`` says whether the code belongs to a live certificate."""
    return await service.validate(code)
