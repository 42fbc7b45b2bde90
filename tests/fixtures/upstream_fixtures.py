"""Fixtures that stand in for the upstream API and build the app around it."""
import json
from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from board_proxy.config.settings import Settings
from board_proxy.main import create_app
from tests.consts import TEST_ALLOWED_ORIGIN, TEST_API_BASE_URL, TEST_API_KEY

Responder = Callable[[httpx.Request], httpx.Response]


def json_responder(payload, status_code: int = 200) -> Responder:
    def respond(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)
    return respond


def text_responder(text: str, status_code: int = 200) -> Responder:
    def respond(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text=text)
    return respond


def raising_responder(exc_class: type) -> Responder:
    def respond(request: httpx.Request) -> httpx.Response:
        raise exc_class("upstream unavailable", request=request)
    return respond


class RecordingUpstream:
    """Records every outbound request and answers with ``responder``."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.responder: Responder = json_responder({"data": {"ok": True}})

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "no upstream request was made"
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last_request.content)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def upstream() -> RecordingUpstream:
    return RecordingUpstream()


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def settings(upload_dir) -> Settings:
    return Settings(
        _env_file=None,
        monday_api_key=TEST_API_KEY,
        api_base_url=TEST_API_BASE_URL,
        allowed_origins=[TEST_ALLOWED_ORIGIN],
        upload_dir=str(upload_dir),
        upstream_timeout_seconds=2.0,
    )


@pytest.fixture
def client(settings, upstream):
    app = create_app(settings, transport=upstream.transport())
    with TestClient(app) as test_client:
        yield test_client
