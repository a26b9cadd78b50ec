"""Tests for exception-to-response translation."""

import json

import pytest
from starlette.requests import Request

from quickhealth.config import settings
from quickhealth.core.exceptions import ConflictException, NotFoundException
from quickhealth.middleware.error_handler import app_exception_handler, general_exception_handler


def make_request(path: str = "/api/things/1") -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "scheme": "http",
            "server": ("test", 80),
            "path": path,
            "root_path": "",
            "query_string": b"",
            "headers": [],
        }
    )


@pytest.mark.asyncio
async def test_app_exception_body():
    response = await app_exception_handler(make_request(), NotFoundException("Thing not found"))

    assert response.status_code == 404
    assert json.loads(response.body) == {
        "error": "NotFound",
        "message": "Thing not found",
        "path": "http://test/api/things/1",
    }


@pytest.mark.asyncio
async def test_conflict_kind():
    response = await app_exception_handler(make_request(), ConflictException("Taken"))

    assert response.status_code == 409
    assert json.loads(response.body)["error"] == "Conflict"


@pytest.mark.asyncio
async def test_unhandled_exception_includes_stack_outside_production():
    try:
        raise RuntimeError("boom")
    except RuntimeError as e:
        response = await general_exception_handler(make_request(), e)

    body = json.loads(response.body)
    assert response.status_code == 500
    assert body["message"] == "An unexpected error occurred"
    assert "RuntimeError: boom" in body["stack"]


@pytest.mark.asyncio
async def test_unhandled_exception_hides_stack_in_production(monkeypatch):
    monkeypatch.setattr(settings, "environment", "production")

    response = await general_exception_handler(make_request(), RuntimeError("boom"))

    assert response.status_code == 500
    assert "stack" not in json.loads(response.body)
