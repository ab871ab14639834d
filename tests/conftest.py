from __future__ import annotations

import asyncio
import contextlib
import os
from dataclasses import dataclass, field, replace
from typing import Any

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer
from fastapi.testclient import TestClient

from askservice.apps.api.app import create_app
from askservice.core import logging as logging_module
from askservice.core.ai import Answer
from askservice.core.result import success
from askservice.core.settings import ENV_PREFIX, TOKEN_ENV, GigaChatConfig, Settings, load_settings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Tests never see the developer's credential or overrides."""
    for key in list(os.environ):
        if key == TOKEN_ENV or key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    # Leave pytest's log capture handlers in place.
    monkeypatch.setattr(logging_module, "_configured", True)

    from askservice.core import settings as settings_module

    settings_module.get_settings.cache_clear()
    yield
    settings_module.get_settings.cache_clear()


@pytest.fixture
def make_settings(tmp_path):
    """Build settings from an inline TOML document and an explicit environment."""

    def _make(toml: str = "", **env: str) -> Settings:
        path = tmp_path / "config.toml"
        path.write_text(toml, encoding="utf-8")
        return load_settings(config_path=path, environ=env)

    return _make


@pytest.fixture
def client(make_settings):
    app = create_app(make_settings())
    with TestClient(app) as test_client:
        yield test_client


class CountingProvider:
    """Test double that records every question it receives."""

    name = "counting"

    def __init__(self, result=None) -> None:
        self.calls: list[str] = []
        self._result = result

    async def ask(self, question: str):
        self.calls.append(question)
        if self._result is not None:
            return self._result
        return success(Answer(text=f"echo: {question}", source=self.name))


@pytest.fixture
def counting_provider() -> CountingProvider:
    return CountingProvider()


@pytest.fixture
def provider_returning():
    """Factory for a counting provider that always returns ``result``."""
    return CountingProvider


@dataclass
class GigaChatStub:
    """Local stand-in for the GigaChat OAuth and chat/completions endpoints."""

    answer: str = "Rust is a systems programming language."
    oauth_status: int = 200
    chat_status: int = 200
    chat_body: Any = None
    hang: bool = False
    base_url: str = ""
    auth_url: str = ""
    oauth_requests: list[dict] = field(default_factory=list)
    chat_requests: list[dict] = field(default_factory=list)
    release: asyncio.Event = field(default_factory=asyncio.Event)

    def config(self, **overrides: Any) -> GigaChatConfig:
        base = GigaChatConfig(
            enabled=True,
            model="GigaChat",
            temperature=0.7,
            max_tokens=256,
            timeout_seconds=5.0,
            base_url=self.base_url,
            auth_url=self.auth_url,
            scope="GIGACHAT_API_PERS",
            verify_ssl=True,
        )
        return replace(base, **overrides)

    async def oauth(self, request: web.Request) -> web.Response:
        form = await request.post()
        self.oauth_requests.append({"headers": {k.lower(): v for k, v in request.headers.items()}, "form": dict(form)})
        if self.oauth_status != 200:
            return web.json_response({"code": self.oauth_status, "message": "denied"}, status=self.oauth_status)
        return web.json_response({"access_token": "access-token-1", "expires_at": 0})

    async def chat(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.chat_requests.append({"headers": {k.lower(): v for k, v in request.headers.items()}, "body": body})
        if self.hang:
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(self.release.wait(), timeout=10)
        if self.chat_status != 200:
            return web.json_response({"status": self.chat_status, "message": "nope"}, status=self.chat_status)
        if self.chat_body is not None:
            return web.json_response(self.chat_body)
        return web.json_response(
            {
                "choices": [
                    {"index": 0, "message": {"role": "assistant", "content": self.answer}, "finish_reason": "stop"}
                ],
                "model": "GigaChat",
                "object": "chat.completion",
            }
        )


@pytest_asyncio.fixture
async def gigachat_stub():
    stub = GigaChatStub()
    app = web.Application()
    app.router.add_post("/api/v2/oauth", stub.oauth)
    app.router.add_post("/api/v1/chat/completions", stub.chat)
    server = TestServer(app, host="127.0.0.1")
    await server.start_server()
    stub.base_url = str(server.make_url("/api/v1"))
    stub.auth_url = str(server.make_url("/api/v2/oauth"))
    try:
        yield stub
    finally:
        stub.release.set()
        await server.close()
