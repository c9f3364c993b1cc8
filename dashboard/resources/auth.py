"""``/api/auth`` endpoints used by login, signup and account recovery."""

from typing import Any, Dict, Optional

from ..errors import UnexpectedResponseError
from ..models.user import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    ResendVerificationRequest,
    ResetPasswordRequest,
    User,
    VerifyEmailRequest,
)
from ..session import Session
from .base import Resource, expect_object, parse


class AuthResource(Resource):
    prefix = "/api/auth"

    async def login(self, credentials: LoginRequest) -> LoginResponse:
        """Exchange credentials for a token.

        An unverified account is answered with 403 and the message
        ``EMAIL_NOT_VERIFIED``; that surfaces as PermissionDeniedError.
        """
        payload = await self.client.post(
            self.path("login"), json=credentials.model_dump(mode="json")
        )
        return parse("POST /api/auth/login", LoginResponse, payload)

    async def _post(self, name: str, body: Dict[str, Any]) -> Dict[str, Any]:
        payload = await self.client.post(self.path(name), json=body)
        return expect_object(f"POST /api/auth/{name}", payload)

    async def register(self, request: RegisterRequest) -> Dict[str, Any]:
        return await self._post("register", request.model_dump(mode="json"))

    async def forgot_password(self, request: ForgotPasswordRequest) -> Dict[str, Any]:
        return await self._post("forgot-password", request.model_dump(mode="json"))

    async def reset_password(self, request: ResetPasswordRequest) -> Dict[str, Any]:
        return await self._post("reset-password", request.model_dump(by_alias=True, mode="json"))

    async def verify_email(self, request: VerifyEmailRequest) -> Dict[str, Any]:
        return await self._post("verify-email", request.model_dump(mode="json"))

    async def resend_verification(self, request: ResendVerificationRequest) -> Dict[str, Any]:
        return await self._post("resend-verification", request.model_dump(mode="json"))

    async def change_password(self, request: ChangePasswordRequest, session: Session) -> Dict[str, Any]:
        # A replay after the first PUT landed fails on the now stale current password
        payload = await self.client.put(
            self.path("change-password"), session, json=request.to_payload(), retry=False
        )
        return expect_object("PUT /api/auth/change-password", payload)

    async def me(self, session: Session) -> User:
        payload = await self.client.get(self.path("me"), session)
        return parse("GET /api/auth/me", User, payload)

    async def username_available(self, username: str, session: Session) -> bool:
        endpoint = "GET /api/auth/check-username"
        payload = await self.client.get(self.path("check-username"), session, params={"username": username})
        body = expect_object(endpoint, payload)
        if not isinstance(body.get("available"), bool):
            raise UnexpectedResponseError(endpoint, "an 'available' flag", payload)
        return body["available"]

    async def reset_first_login(self, session: Session, user_id: Optional[str] = None) -> Dict[str, Any]:
        """Send one user, or everyone when ``user_id`` is None, back through first-login setup."""
        if user_id is None:
            endpoint = "PUT /api/auth/reset-first-login"
            payload = await self.client.put(self.path("reset-first-login"), session)
        else:
            endpoint = "PUT /api/auth/reset-first-login/:userId"
            payload = await self.client.put(self.path("reset-first-login", user_id), session)
        return expect_object(endpoint, payload)

    async def reset_onboarding(self, session: Session) -> Dict[str, Any]:
        payload = await self.client.put(self.path("reset-onboarding"), session)
        return expect_object("PUT /api/auth/reset-onboarding", payload)
