"""Shared fixtures for zipkin_sender tests."""

import json

import httpx
import pytest

from zipkin_sender.context import set_beacon
from zipkin_sender.errors import set_global_error_handler

ZIPKIN_URL = "http://zipkin.test:9411/api/v2/spans"


@pytest.fixture(autouse=True)
def reset_runtime():
    """Clear the registered beacon and error handler around each test."""
    set_beacon(None)
    set_global_error_handler(None)
    yield
    set_beacon(None)
    set_global_error_handler(None)


class RecordingCollector:
    """A fake collector answering every request with a fixed status."""

    def __init__(self, status_code: int = 202):
        self.status_code = status_code
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code)

    @property
    def last_body(self):
        return json.loads(self.requests[-1].content)

    @property
    def last_headers(self) -> httpx.Headers:
        return self.requests[-1].headers


@pytest.fixture
def collector():
    return RecordingCollector()


@pytest.fixture
def mock_transport(collector):
    return httpx.MockTransport(collector)


@pytest.fixture
def spans():
    return [
        {"traceId": "d4cda95b652f4a15", "id": "a2fb4a1d1a96d312", "name": "get /api"},
        {"traceId": "d4cda95b652f4a15", "id": "b7ad6b7169203331", "name": "select"},
    ]
