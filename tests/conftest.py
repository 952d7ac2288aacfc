"""Shared test fixtures for the Perplexity proxy."""

from __future__ import annotations

import httpx
import pytest
import respx
from fastapi.testclient import TestClient

from main import app
from perplexity_proxy.shared.config import config

SUPABASE_URL = "https://project.supabase.co"
SUPABASE_USER_URL = f"{SUPABASE_URL}/auth/v1/user"
PERPLEXITY_URL = "https://api.perplexity.ai/chat/completions"
PROXY_PATH = "/functions/v1/perplexity"

USER = {"id": "0b6f3a52-5b1e-4a5e-9f1c-2f0f5c9b7a11", "email": "reader@example.com"}
CHAT_BODY = {"messages": [{"role": "user", "content": "hi"}], "model": "sonar"}


@pytest.fixture(autouse=True)
def proxy_config(monkeypatch):
    """Point the proxy at mocked Supabase and Perplexity endpoints."""
    monkeypatch.setitem(config["supabase"], "url", SUPABASE_URL)
    monkeypatch.setitem(config["supabase"], "anon_key", "anon-key")
    monkeypatch.setitem(config["perplexity"], "api_key", "pplx-test-key")
    monkeypatch.setitem(config["perplexity"], "url", PERPLEXITY_URL)
    monkeypatch.setitem(config["requestProxy"], "enabled", False)
    return config


@pytest.fixture()
def client():
    """TestClient with the app lifespan (shared httpx client) running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def http_mock():
    """Mocks outbound httpx traffic; unmatched requests fail loudly."""
    with respx.mock(assert_all_called=False) as mock:
        yield mock


@pytest.fixture()
def supabase_auth(http_mock):
    """Supabase accepts `good-token` and rejects everything else."""

    def _verify(request: httpx.Request) -> httpx.Response:
        if request.headers.get("Authorization") == "Bearer good-token":
            return httpx.Response(200, json=USER)
        return httpx.Response(401, json={"code": 401, "msg": "invalid JWT"})

    return http_mock.get(SUPABASE_USER_URL).mock(side_effect=_verify)


@pytest.fixture()
def auth_headers():
    return {"Authorization": "Bearer good-token"}
