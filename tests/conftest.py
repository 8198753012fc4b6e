"""Shared fixtures: ASGI test client, fake SMTP, mocked HTTP providers, fake Supabase."""

import os

# Ensure tests never talk to real providers
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-test-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "service-test-key")

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from globex.app import app
from globex.core import http
from globex.core.config import Config
from globex.services import mailer, supabase_service

from .fake_supabase import FakeBackend, FakeSupabase


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Pin provider settings so a developer's .env cannot leak into tests."""
    monkeypatch.setattr(Config, "SMTP_HOST", "")
    monkeypatch.setattr(Config, "CONTACT_TO_ADDRESS", "hello@globexenterprises.net")
    monkeypatch.setattr(Config, "CONTACT_DELIVERY", "forms")
    monkeypatch.setattr(Config, "RELAY_BODY_FORMAT", "text")
    monkeypatch.setattr(Config, "WEB3FORMS_URL", "https://forms.test/submit")
    monkeypatch.setattr(Config, "WEB3FORMS_ACCESS_KEY", "forms-test-key")
    monkeypatch.setattr(Config, "RECAPTCHA_SECRET_KEY", "")
    monkeypatch.setattr(Config, "RECAPTCHA_SITE_KEY", "site-test-key")
    monkeypatch.setattr(Config, "RECAPTCHA_VERIFY_URL", "https://captcha.test/siteverify")


@pytest.fixture
async def client():
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
def smtp(monkeypatch):
    """Replace aiosmtplib.send; returns the list of sent calls.

    Set ``smtp.error`` to an exception to make the transport fail.
    """

    class _Outbox(list):
        error = None

    outbox = _Outbox()

    async def fake_send(message, **kwargs):
        if outbox.error is not None:
            raise outbox.error
        outbox.append({"message": message, **kwargs})
        return {}, "OK"

    monkeypatch.setattr(Config, "SMTP_HOST", "smtp.test")
    monkeypatch.setattr(mailer.aiosmtplib, "send", fake_send)
    return outbox


@pytest.fixture
def providers(monkeypatch):
    """Route outbound httpx calls to canned responses keyed by URL.

    Returns dict with:
      - requests: list of httpx.Request sent
      - responses: dict[url, httpx.Response | Exception]
    """
    state = {"requests": [], "responses": {}}

    def handler(request: httpx.Request) -> httpx.Response:
        state["requests"].append(request)
        url = str(request.url)
        result = state["responses"].get(url, httpx.Response(200, json={"success": True}))
        if isinstance(result, Exception):
            raise result
        return result

    def fake_build_client(timeout_seconds=None):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    monkeypatch.setattr(http, "build_client", fake_build_client)
    return state


@pytest.fixture
def supabase(monkeypatch):
    backend = FakeBackend()

    def fake_create_client(url, key):
        fake = FakeSupabase(backend)
        backend.clients.append(fake)
        return fake

    monkeypatch.setattr(supabase_service, "create_client", fake_create_client)
    return backend
