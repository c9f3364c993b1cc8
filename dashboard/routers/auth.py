"""Login, signup and account recovery, forwarded to the backend."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..analytics.profile import profile_completion, validate_username
from ..dependencies import get_backend, require_session
from ..models.user import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResendVerificationRequest,
    ResetPasswordRequest,
    User,
    VerifyEmailRequest,
)
from ..resources import Backend
from ..session import Session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login")
async def login(credentials: LoginRequest, backend: Backend = Depends(get_backend)):
    """Log in and return the session the client should keep."""
    response = await backend.auth.login(credentials)
    session = Session.from_login(response)
    logger.info(f"Login succeeded with role {session.role.value if session.role else 'unknown'}")
    return {
        "token": session.token,
        "role": session.role,
        "isVerified": session.is_verified,
        "firstLogin": session.first_login,
        "isOnboarded": session.is_onboarded,
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, backend: Backend = Depends(get_backend)) -> Dict[str, Any]:
    return await backend.auth.register(request)


@router.post("/forgot-password")
async def forgot_password(request: ForgotPasswordRequest, backend: Backend = Depends(get_backend)) -> Dict[str, Any]:
    return await backend.auth.forgot_password(request)


@router.post("/reset-password")
async def reset_password(request: ResetPasswordRequest, backend: Backend = Depends(get_backend)) -> Dict[str, Any]:
    return await backend.auth.reset_password(request)


@router.post("/verify-email")
async def verify_email(request: VerifyEmailRequest, backend: Backend = Depends(get_backend)) -> Dict[str, Any]:
    return await backend.auth.verify_email(request)


@router.post("/resend-verification")
async def resend_verification(
    request: ResendVerificationRequest, backend: Backend = Depends(get_backend)
) -> Dict[str, Any]:
    return await backend.auth.resend_verification(request)


@router.get("/me")
async def me(session: Session = Depends(require_session), backend: Backend = Depends(get_backend)) -> User:
    return await backend.auth.me(session)


@router.get("/me/profile-completion")
async def me_profile_completion(
    session: Session = Depends(require_session), backend: Backend = Depends(get_backend)
) -> Dict[str, Any]:
    """How much of the caller's profile is filled in, and what is missing."""
    user = await backend.auth.me(session)
    return profile_completion(user.model_dump(by_alias=True)).to_dict()


@router.put("/me/password")
async def change_password(
    request: ChangePasswordRequest,
    session: Session = Depends(require_session),
    backend: Backend = Depends(get_backend),
) -> Dict[str, Any]:
    return await backend.auth.change_password(request, session)


@router.get("/check-username")
async def check_username(
    username: str = Query(..., min_length=1),
    session: Session = Depends(require_session),
    backend: Backend = Depends(get_backend),
) -> Dict[str, Any]:
    problem = validate_username(username)
    if problem:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=problem)
    available = await backend.auth.username_available(username, session)
    return {"username": username, "available": available}
