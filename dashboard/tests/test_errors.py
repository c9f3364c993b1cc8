"""Tests for error mapping and failure classification."""

import pytest

from ..errors import (
    FAILURE_MESSAGES,
    ApiError,
    BackendUnavailableError,
    FailureKind,
    NotFoundError,
    SubmissionValidationError,
    UnexpectedResponseError,
    classify_failure,
    error_from_response,
)


class TestErrorFromResponse:
    def test_message_from_body(self):
        error = error_from_response(404, {"message": "Course not found"})
        assert isinstance(error, NotFoundError)
        assert error.message == "Course not found"
        assert error.payload == {"message": "Course not found"}

    def test_detail_key(self):
        assert error_from_response(422, {"detail": "bad"}).message == "bad"

    def test_default_message(self):
        error = error_from_response(418, None)
        assert type(error) is ApiError
        assert error.message == "Request failed with status 418"


class TestClassifyFailure:
    @pytest.mark.parametrize("exc, kind", [
        (BackendUnavailableError(), FailureKind.backend_asleep),
        (ApiError(None, "no response"), FailureKind.backend_asleep),
        (Exception("TypeError: NetworkError when attempting to fetch resource."), FailureKind.backend_asleep),
        (Exception("Failed to fetch"), FailureKind.backend_asleep),
        (NotFoundError(404), FailureKind.not_found),
        (ApiError(500, "boom"), FailureKind.unexpected),
        (ApiError(400, "bad"), FailureKind.unexpected),
        (ValueError("bad value"), FailureKind.unexpected),
    ])
    def test_kinds(self, exc, kind):
        assert classify_failure(exc) == kind

    def test_every_kind_has_a_message(self):
        assert set(FAILURE_MESSAGES) == set(FailureKind)
        title, _ = FAILURE_MESSAGES[FailureKind.backend_asleep]
        assert title == "Server is waking up"


def test_structured_details():
    error = UnexpectedResponseError("/api/courses", "a list", payload={"courses": []})
    assert error.details == {"endpoint": "/api/courses", "expected": "a list"}
    assert "expected a list" in error.message

    error = SubmissionValidationError("text", "Submission text cannot be empty")
    assert error.field == "text"
    assert error.details == {"field": "text"}
