import os

# Settings are read at import time
os.environ.setdefault("SUPABASE_URL", "https://fake.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ["REQUEST_QUEUE_DELAY_MS"] = "0"
os.environ["ENABLE_RESPONSE_COMPRESSION"] = "false"
os.environ["PORTAL_ORIGIN"] = "https://app.example.com"

import pytest
from typing import AsyncGenerator
from datetime import date, timedelta
from httpx import AsyncClient, ASGITransport
from fastapi import FastAPI
from asgi_lifespan import LifespanManager

import main
from clientdesk.api.api_v1.endpoints import health
from clientdesk.core.request_queue import RequestQueue
from clientdesk.crud import base as crud_base
from clientdesk.services import file_service
from tests.fakes import FakeSupabase, VALID_TOKEN

@pytest.fixture(autouse=True)
def request_queue(monkeypatch) -> RequestQueue:
    """A fresh queue per test, bound to that test's event loop."""
    queue = RequestQueue(concurrency=2, delay=0)
    for module in (crud_base, file_service, health):
        monkeypatch.setattr(module, "request_queue", queue)
    return queue

@pytest.fixture
def fake_supabase() -> FakeSupabase:
    """A fresh, empty in-memory store for each test."""
    return FakeSupabase()

@pytest.fixture
async def test_app(fake_supabase, monkeypatch) -> AsyncGenerator[FastAPI, None]:
    """The FastAPI application, started against the in-memory store."""
    async def create_fake_client():
        return fake_supabase

    monkeypatch.setattr(main, "create_supabase_client", create_fake_client)
    async with LifespanManager(main.app):
        yield main.app

@pytest.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client signed in as the account owner."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {VALID_TOKEN}"},
    ) as client:
        yield client

@pytest.fixture
async def anonymous_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client without credentials, as a portal visitor would be."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as client:
        yield client

@pytest.fixture
def notifications(test_app):
    return test_app.state.notifications

@pytest.fixture
def client_data() -> dict:
    return {
        "full_name": "Maria Santos",
        "email": "maria@acme.com",
        "phone_number": "+63 917 555 0101",
        "address": "12 Rizal St, Makati",
        "company_name": "Acme",
    }

@pytest.fixture
def seeded_client(fake_supabase, client_data) -> dict:
    return fake_supabase.seed("clients", **client_data)

@pytest.fixture
def seeded_project(fake_supabase, seeded_client) -> dict:
    return fake_supabase.seed(
        "projects",
        client_id=seeded_client["id"],
        title="Website",
        description="Marketing site rebuild",
        deadline=(date.today() + timedelta(days=30)).isoformat(),
        budget=10000,
        status="Started",
        invoice_url=None,
    )
