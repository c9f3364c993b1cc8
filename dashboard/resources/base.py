"""Shared plumbing for the backend resource wrappers."""

from typing import Any, Dict, List, Type, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from ..client import ApiClient
from ..errors import UnexpectedResponseError

M = TypeVar("M", bound=BaseModel)


def segment(value: str) -> str:
    """Escape one path segment (ids, codes)."""
    return quote(str(value), safe="")


def expect_list(endpoint: str, payload: Any) -> List[Dict[str, Any]]:
    if not isinstance(payload, list):
        raise UnexpectedResponseError(endpoint, "a JSON array", payload)
    return payload


def expect_object(endpoint: str, payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise UnexpectedResponseError(endpoint, "a JSON object", payload)
    return payload


def expect_key_list(endpoint: str, payload: Any, key: str) -> List[Dict[str, Any]]:
    """The list under ``payload[key]``, for endpoints that wrap their results."""
    body = expect_object(endpoint, payload)
    if not isinstance(body.get(key), list):
        raise UnexpectedResponseError(endpoint, f"an object with a '{key}' array", payload)
    return body[key]


def parse(endpoint: str, model: Type[M], payload: Any) -> M:
    try:
        return model.model_validate(expect_object(endpoint, payload))
    except ValidationError as e:
        raise UnexpectedResponseError(endpoint, model.__name__, payload) from e


def parse_list(endpoint: str, model: Type[M], payload: Any) -> List[M]:
    try:
        return [model.model_validate(item) for item in expect_list(endpoint, payload)]
    except ValidationError as e:
        raise UnexpectedResponseError(endpoint, f"a list of {model.__name__}", payload) from e


class Resource:
    """One area of the backend API, e.g. ``/api/courses``."""

    prefix = ""

    def __init__(self, client: ApiClient):
        self.client = client

    def path(self, *parts: str) -> str:
        return "/".join([self.prefix] + [segment(part) for part in parts])
