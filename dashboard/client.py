"""
Async HTTP client for the LMS backend.

Every call has a timeout. Idempotent calls are retried with exponential
backoff when the connection could not be made or the backend answers
502/503/504, which is what a free-tier host returns while it wakes up.
A timeout or dropped connection after the request went out is retried only
for GET and HEAD, since a PUT or DELETE may already have been applied.
POST and PATCH are sent once.

Example:
    >>> async with ApiClient("http://localhost:5000") as client:
    ...     courses = await client.get("/api/courses", session=session)
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from .config import Settings
from .errors import ApiError, BackendUnavailableError, error_from_response
from .session import Session

logger = logging.getLogger(__name__)

SAFE_METHODS = frozenset({"GET", "HEAD"})
IDEMPOTENT_METHODS = SAFE_METHODS | {"PUT", "DELETE"}
RETRY_STATUSES = frozenset({502, 503, 504})

# Raised before any byte of the request reached the backend
NOT_SENT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout)


class RetryPolicy:
    """How often and how patiently to retry idempotent requests."""

    def __init__(self, max_retries: int = 2, backoff: float = 0.5):
        self.max_retries = max_retries
        self.backoff = backoff

    def should_retry(
        self, method: str, attempt: int, error: Optional[Exception] = None
    ) -> bool:
        """
        Whether attempt number ``attempt`` may be followed by another one.

        ``error`` is the transport error that ended the attempt, or None when
        the backend answered with a retryable status.
        """
        if attempt >= self.max_retries:
            return False
        method = method.upper()
        if error is None or isinstance(error, NOT_SENT_ERRORS):
            return method in IDEMPOTENT_METHODS
        return method in SAFE_METHODS

    def delay(self, attempt: int) -> float:
        """Seconds to wait before retry number ``attempt + 1``."""
        return self.backoff * (2 ** attempt)


class ApiClient:
    """
    Thin wrapper around ``httpx.AsyncClient`` bound to the backend base URL.

    Args:
        base_url: Backend root, e.g. ``http://localhost:5000``.
        timeout: Per-request timeout in seconds.
        retry: Retry policy for idempotent requests.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
        sleep: Coroutine used between retries.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        retry: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.base_url = base_url.rstrip("/")
        self.retry = retry or RetryPolicy()
        self._sleep = sleep
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "ApiClient":
        return cls(
            settings.api_url,
            timeout=settings.request_timeout,
            retry=RetryPolicy(settings.max_retries, settings.retry_backoff),
            **kwargs,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def request(
        self,
        method: str,
        path: str,
        session: Optional[Session] = None,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        retry: bool = True,
    ) -> Any:
        """
        Send a request and return the decoded JSON body.

        Pass ``retry=False`` for calls that must never reach the backend twice,
        whatever the method.

        Raises:
            BackendUnavailableError: if no usable response arrived, after retries.
            ApiError: (or a subclass) for any other non-2xx response.
        """
        method = method.upper()
        headers = session.auth_headers() if session else {}
        attempt = 0
        while True:
            try:
                response = await self._client.request(
                    method, path, params=params, json=json, data=data, files=files, headers=headers
                )
            except httpx.TransportError as e:
                if retry and self.retry.should_retry(method, attempt, e):
                    await self._wait(method, path, attempt, type(e).__name__)
                    attempt += 1
                    continue
                logger.error(f"{method} {path} failed: {type(e).__name__}: {e}")
                raise BackendUnavailableError(
                    f"Could not reach the backend: {type(e).__name__}",
                    {"method": method, "path": path},
                ) from e

            if response.status_code in RETRY_STATUSES:
                if retry and self.retry.should_retry(method, attempt):
                    await self._wait(method, path, attempt, f"HTTP {response.status_code}")
                    attempt += 1
                    continue
                logger.error(f"{method} {path} -> {response.status_code}, giving up")
                raise BackendUnavailableError(
                    f"Backend answered {response.status_code}",
                    {"method": method, "path": path, "status_code": response.status_code},
                )
            return self._handle_response(method, path, response)

    async def _wait(self, method: str, path: str, attempt: int, reason: str) -> None:
        delay = self.retry.delay(attempt)
        logger.warning(
            f"{method} {path}: {reason}, retry {attempt + 1}/{self.retry.max_retries} in {delay:.2f}s"
        )
        await self._sleep(delay)

    def _handle_response(self, method: str, path: str, response: httpx.Response) -> Any:
        payload = self._decode(response)
        if response.is_success:
            return payload
        logger.error(f"{method} {path} -> {response.status_code}")
        raise error_from_response(response.status_code, payload)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def get(self, path: str, session: Optional[Session] = None, **kwargs: Any) -> Any:
        return await self.request("GET", path, session, **kwargs)

    async def post(self, path: str, session: Optional[Session] = None, **kwargs: Any) -> Any:
        return await self.request("POST", path, session, **kwargs)

    async def put(self, path: str, session: Optional[Session] = None, **kwargs: Any) -> Any:
        return await self.request("PUT", path, session, **kwargs)

    async def patch(self, path: str, session: Optional[Session] = None, **kwargs: Any) -> Any:
        return await self.request("PATCH", path, session, **kwargs)

    async def delete(self, path: str, session: Optional[Session] = None, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, session, **kwargs)

    async def ping(self) -> bool:
        """True when the backend answered ``/health`` at all, even with an error."""
        try:
            await self.get("/health")
        except BackendUnavailableError:
            return False
        except ApiError as e:
            logger.info(f"Backend health check answered {e.status_code}")
        return True
