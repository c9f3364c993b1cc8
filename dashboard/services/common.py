"""Helpers shared by the services."""

import asyncio
import logging
from typing import Any, Awaitable, Dict, List, Optional

from ..errors import BackendUnavailableError, DashboardError
from ..models.user import BatchResult

logger = logging.getLogger(__name__)


async def run_batch(calls: Dict[str, Awaitable], skipped: Optional[list] = None) -> BatchResult:
    """Run independent calls concurrently and report each one's outcome.

    A failing call does not cancel the others. Only dashboard errors are
    collected; anything else is a bug and is raised.
    """
    keys = list(calls)
    outcomes = await asyncio.gather(*calls.values(), return_exceptions=True)
    result = BatchResult(skipped=list(skipped or []))
    for key, outcome in zip(keys, outcomes):
        if isinstance(outcome, DashboardError):
            logger.warning(f"Batch item {key} failed: {outcome.message}")
            result.failed[key] = outcome.message
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            result.succeeded.append(key)
    return result


def raise_if_unavailable(outcomes) -> None:
    """Re-raise the first BackendUnavailableError among gathered outcomes."""
    for outcome in outcomes:
        if isinstance(outcome, BackendUnavailableError):
            raise outcome


async def gather_all(*calls: Awaitable) -> List[Any]:
    """Await every call to completion, then raise the first failure.

    An unreachable backend takes precedence over other errors. No call is
    left running when one of them fails.
    """
    outcomes = await asyncio.gather(*calls, return_exceptions=True)
    raise_if_unavailable(outcomes)
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    return outcomes
