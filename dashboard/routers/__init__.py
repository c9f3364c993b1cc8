"""HTTP routers for the dashboard gateway."""

from .assessments import router as assessments_router
from .auth import router as auth_router
from .catalog import router as catalog_router
from .certificates import router as certificates_router
from .logs import router as logs_router
from .progress import router as progress_router
from .surveys import router as surveys_router
from .users import router as users_router

__all__ = [
    "assessments_router",
    "auth_router",
    "catalog_router",
    "certificates_router",
    "logs_router",
    "progress_router",
    "surveys_router",
    "users_router",
]
