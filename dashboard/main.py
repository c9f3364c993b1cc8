import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .client import ApiClient
from .config import Settings, get_settings
from .dependencies import get_client
from .errors import (
    FAILURE_MESSAGES,
    ApiError,
    BackendUnavailableError,
    DashboardError,
    FailureKind,
    SubmissionValidationError,
    UnexpectedResponseError,
    classify_failure,
)
from .routers import (
    assessments_router,
    auth_router,
    catalog_router,
    certificates_router,
    logs_router,
    progress_router,
    surveys_router,
    users_router,
)

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open one backend client for the app's lifetime."""
    logger.info(f"Starting LFC dashboard gateway against {settings.api_url}")
    app.state.client = ApiClient.from_settings(settings)
    yield
    await app.state.client.aclose()
    logger.info("Shutting down LFC dashboard gateway...")


app = FastAPI(
    title="LFC Learning Dashboard Gateway",
    description="Student and admin dashboards over the LFC Learning REST API",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def failure_body(exc: DashboardError, kind: FailureKind) -> dict:
    title, message = FAILURE_MESSAGES[kind]
    return {"kind": kind.value, "title": title, "message": message, "detail": exc.message}


@app.exception_handler(BackendUnavailableError)
async def backend_unavailable_handler(request: Request, exc: BackendUnavailableError):
    logger.warning(f"{request.method} {request.url.path}: backend unavailable ({exc.message})")
    refresh = get_settings().wake_up_refresh
    body = failure_body(exc, FailureKind.backend_asleep)
    body["retryAfter"] = refresh
    return JSONResponse(status_code=503, content=body, headers={"Retry-After": str(refresh)})


@app.exception_handler(SubmissionValidationError)
async def submission_validation_handler(request: Request, exc: SubmissionValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.message, "field": exc.field})


@app.exception_handler(UnexpectedResponseError)
async def unexpected_response_handler(request: Request, exc: UnexpectedResponseError):
    logger.error(f"{request.method} {request.url.path}: {exc.message}")
    body = failure_body(exc, FailureKind.unexpected)
    body["endpoint"] = exc.endpoint
    return JSONResponse(status_code=502, content=body)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    kind = classify_failure(exc)
    if kind == FailureKind.backend_asleep:
        return await backend_unavailable_handler(request, BackendUnavailableError(exc.message))
    if kind == FailureKind.not_found:
        return JSONResponse(status_code=404, content=failure_body(exc, kind))
    # Pass the backend's own 4xx answer through; anything else is ours to report
    status_code = exc.status_code if exc.status_code and exc.status_code < 500 else 500
    if status_code == 500:
        return JSONResponse(status_code=500, content=failure_body(exc, kind))
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


app.include_router(auth_router)
app.include_router(catalog_router)
app.include_router(progress_router)
app.include_router(assessments_router)
app.include_router(users_router)
app.include_router(logs_router)
app.include_router(certificates_router)
app.include_router(surveys_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "LFC Learning Dashboard Gateway", "version": __version__}


@app.get("/health")
async def health_check(client: ApiClient = Depends(get_client), settings: Settings = Depends(get_settings)):
    """Gateway health plus whether the backend is awake."""
    awake = await client.ping()
    if not awake:
        logger.warning("Health check: backend did not respond")
    return {
        "status": "healthy",
        "backend": "up" if awake else "asleep",
        "backendUrl": settings.api_url,
        "retryAfter": None if awake else settings.wake_up_refresh,
        "version": __version__,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
