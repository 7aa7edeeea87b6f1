"""
Tests for the HTTP client the upload watchers use to trigger analysis.
"""

import json

import httpx
import pytest

from antiplag.exceptions import (
    AlreadyExistsError,
    InternalError,
    NotFoundError,
    UnavailableError,
)
from antiplag.storing.analysis_client import AnalysisClient


def make_client(handler) -> AnalysisClient:
    return AnalysisClient("http://analysis.local/", transport=httpx.MockTransport(handler))


def error_response(status_code: int, code: str) -> httpx.Response:
    return httpx.Response(
        status_code,
        json={"status": "error", "code": code, "error_details": f"{code.lower()} happened"},
    )


def test_analyse_task_posts_object_key():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"status": True})

    client = make_client(handler)
    assert client.analyse_task("task-1", "task-1.txt") is True

    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/analysis/tasks/task-1/analyse"
    assert json.loads(request.content) == {"object_key": "task-1.txt"}


def test_analyse_task_false_status():
    client = make_client(lambda request: httpx.Response(200, json={"status": False}))
    assert client.analyse_task("task-1", "task-1.txt") is False


@pytest.mark.parametrize("status_code,code,error_cls", [
    (404, "NOT_FOUND", NotFoundError),
    (409, "ALREADY_EXISTS", AlreadyExistsError),
    (503, "UNAVAILABLE", UnavailableError),
    (500, "INTERNAL", InternalError),
])
def test_error_codes_are_mapped(status_code, code, error_cls):
    client = make_client(lambda request: error_response(status_code, code))
    with pytest.raises(error_cls):
        client.analyse_task("task-1", "task-1.txt")


def test_error_without_json_body_uses_status():
    client = make_client(lambda request: httpx.Response(503, text="upstream down"))
    with pytest.raises(UnavailableError, match="upstream down"):
        client.analyse_task("task-1", "task-1.txt")


def test_connection_failure_is_unavailable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UnavailableError):
        make_client(handler).analyse_task("task-1", "task-1.txt")


def test_timeout_is_unavailable():
    def handler(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(UnavailableError):
        make_client(handler).analyse_task("task-1", "task-1.txt")

