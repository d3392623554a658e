"""
Unit tests for the error taxonomy and exception handlers.
"""
import json
from unittest.mock import MagicMock

import pytest
from fastapi import Request

from core import errors


def _request() -> MagicMock:
    request = MagicMock(spec=Request)
    request.method = "GET"
    request.url.path = "/devices"
    return request


@pytest.mark.parametrize(
    "error_class,status_code,message",
    [
        (errors.MissingCredential, 401, "Missing or invalid Authorization header"),
        (errors.InvalidCredential, 401, "Invalid token"),
        (errors.EmptyBatch, 400, "detections must be a non-empty array"),
        (errors.MalformedBatch, 400, "each detection must be an object"),
        (errors.InsertFailed, 500, "Failed to insert detections batch"),
        (errors.QueryFailed, 500, "Internal server error"),
    ],
)
def test_taxonomy_defaults(error_class, status_code, message):
    error = error_class()

    assert isinstance(error, errors.ServiceError)
    assert error.status_code == status_code
    assert error.message == message
    assert str(error) == message


def test_custom_message_overrides_default():
    assert errors.QueryFailed("Failed to load detections for MAC").message == "Failed to load detections for MAC"


def test_insert_failed_carries_index():
    assert errors.InsertFailed(index=3).index == 3
    assert errors.InsertFailed().index is None


@pytest.mark.asyncio
async def test_service_error_response_body():
    response = await errors.handle_service_error(_request(), errors.InvalidCredential())

    assert response.status_code == 401
    assert json.loads(response.body) == {"error": "Invalid token"}


@pytest.mark.asyncio
async def test_unexpected_exception_hides_details(caplog):
    response = await errors.handle_unexpected_exception(_request(), ValueError("password=hunter2"))

    assert response.status_code == 500
    assert json.loads(response.body) == {"error": "Internal server error"}
    assert b"hunter2" not in response.body
    assert any(r.getMessage().startswith("request_crashed") for r in caplog.records)
