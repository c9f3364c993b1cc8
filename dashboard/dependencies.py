"""FastAPI dependencies: settings, the shared client, the caller's session, services."""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from .client import ApiClient
from .config import Settings, get_settings
from .resources import Backend
from .services.activity import ActivityService
from .services.catalog import CatalogService
from .services.certificates import CertificateService
from .services.grading import GradingService
from .services.progress import ProgressService
from .services.surveys import SurveyService
from .services.users import UserAdminService
from .session import Session


def get_client(request: Request) -> ApiClient:
    """The ApiClient opened by the app lifespan."""
    return request.app.state.client


def get_backend(client: ApiClient = Depends(get_client)) -> Backend:
    return Backend(client)


def get_session(authorization: Optional[str] = Header(None)) -> Session:
    return Session.from_authorization(authorization)


def require_session(session: Session = Depends(get_session)) -> Session:
    if not session.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if session.is_expired():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired",
            headers={"WWW-Authenticate": 'Bearer error="invalid_token"'},
        )
    return session


def require_admin(session: Session = Depends(require_session)) -> Session:
    """Admin screens; the backend still enforces the real permission."""
    if not session.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return session


def get_catalog_service(
    backend: Backend = Depends(get_backend), settings: Settings = Depends(get_settings)
) -> CatalogService:
    return CatalogService(backend, page_size=settings.catalog_page_size)


def get_progress_service(
    backend: Backend = Depends(get_backend), settings: Settings = Depends(get_settings)
) -> ProgressService:
    return ProgressService(backend, page_size=settings.page_size)


def get_grading_service(backend: Backend = Depends(get_backend)) -> GradingService:
    return GradingService(backend)


def get_user_admin_service(
    backend: Backend = Depends(get_backend), settings: Settings = Depends(get_settings)
) -> UserAdminService:
    return UserAdminService(backend, page_size=settings.page_size)


def get_activity_service(
    backend: Backend = Depends(get_backend), settings: Settings = Depends(get_settings)
) -> ActivityService:
    return ActivityService(backend, page_size=settings.page_size)


def get_certificate_service(backend: Backend = Depends(get_backend)) -> CertificateService:
    return CertificateService(backend)


def get_survey_service(backend: Backend = Depends(get_backend)) -> SurveyService:
    return SurveyService(backend)
