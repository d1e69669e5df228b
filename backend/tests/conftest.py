"""
Order Desk Backend - Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Inventory:
    ├── sheet_tables: the four business tables, Hebrew headers as in production
    ├── memory_store: InMemorySheetStore over sheet_tables
    ├── query_service: QueryService reading memory_store
    ├── credentials: complete OneSignal credentials
    ├── notification_factory: builds a NotificationService on httpx.MockTransport
    │   and records every outbound request
    ├── action_router: router wired to the fixtures (no OneSignal credentials)
    └── test_client: HTTPX AsyncClient talking to the FastAPI app in-process
"""

import json
import os
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

# Settings are read at import time; keep tests away from any real
# spreadsheet or OneSignal app.
os.environ["SHEET_BACKEND"] = "google"
os.environ["SPREADSHEET_ID"] = "test-spreadsheet"
os.environ["ONE_SIGNAL_APP_ID"] = ""
os.environ["ONE_SIGNAL_REST_API_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from orderdesk.config import OneSignalCredentials
from orderdesk.services.action_router import ActionRouter
from orderdesk.services.memory_store import InMemorySheetStore
from orderdesk.services.notification_service import NotificationService
from orderdesk.services.order_service import OrderService
from orderdesk.services.query_service import QueryService

CUSTOMERS = "לקוחות"
CONTAINER_RENTALS = "שכירות מכולות"
MATERIAL_ORDERS = "הזמנות חומרי בנין"
CONTAINER_ORDERS = "הזמנות מכולות"


@pytest.fixture
def sheet_tables() -> Dict[str, List[List[Any]]]:
    """
    Fixture spreadsheet.

    Customer 123 has two container rentals (one keyed by the string "123")
    and two material orders; customer 456's phone cell carries stray spaces.
    The five orders resolve to this newest-first order:
        container 123 (received 03-10), materials 456 (received 03-06),
        container 789 (ordered 03-02), materials 123 cement (ordered 03-01),
        materials 123 blocks (no date)
    """
    return {
        CUSTOMERS: [
            ["מספר לקוח", "שם", "טלפון", "תאריך הצטרפות"],
            [123, "דנה כהן", "0501234567", datetime(2024, 1, 15, 8, 30)],
            [456, "אבי לוי", " 0529876543 ", datetime(2023, 6, 1, 12, 0)],
            [789, "מיכל", "0541112222", ""],
        ],
        CONTAINER_RENTALS: [
            ["מספר לקוח", "מספר מכולה", "כתובת"],
            [123, "C-1", "הרצל 1"],
            [456, "C-2", "ז'בוטינסקי 5"],
            ["123", "C-3", "הרצל 1"],
        ],
        MATERIAL_ORDERS: [
            ["מספר לקוח", "מוצר", "תאריך הזמנה", "תאריך קליטה"],
            [123, "מלט", "2024-03-01T09:00:00.000Z", ""],
            [456, "חול", "2024-03-05T09:00:00.000Z", "2024-03-06T10:00:00.000Z"],
            [123, "בלוקים", "", ""],
        ],
        CONTAINER_ORDERS: [
            ["מספר לקוח", "גודל מכולה", "תאריך הזמנה", "תאריך קליטה"],
            [789, "8 קוב", datetime(2024, 3, 2, 7, 0), ""],
            [123, "4 קוב", "2024-02-20T10:00:00.000Z", "2024-03-10T10:00:00.000Z"],
        ],
    }


@pytest.fixture
def memory_store(sheet_tables) -> InMemorySheetStore:
    return InMemorySheetStore(sheet_tables)


@pytest.fixture
def query_service(memory_store) -> QueryService:
    return QueryService(memory_store)


@pytest.fixture
def credentials() -> OneSignalCredentials:
    return OneSignalCredentials(app_id="app-123", rest_api_key="rest-key-secret")


@pytest.fixture
def notification_factory():
    """
    Builds NotificationServices whose HTTP calls go to a stub transport.

    Usage:
        service, calls = notification_factory(credentials, httpx.Response(200, json={...}))

    `reply` may also be a callable taking the httpx.Request (to raise
    transport errors). `calls` lists every request the stub received.
    """

    def build(
        credentials: OneSignalCredentials,
        reply: Optional[Any] = None,
    ) -> Tuple[NotificationService, List[httpx.Request]]:
        calls: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if callable(reply):
                return reply(request)
            return reply if reply is not None else httpx.Response(200, json={"recipients": 1})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return NotificationService(credentials=credentials, client=client), calls

    return build


@pytest.fixture
def action_router(query_service) -> ActionRouter:
    return ActionRouter(
        query_service=query_service,
        notification_service=NotificationService(credentials=OneSignalCredentials()),
        order_service=OrderService(),
    )


@pytest_asyncio.fixture
async def test_client(action_router):
    """
    Async HTTP client for endpoint tests, backed by the fixture spreadsheet.

    Usage:
        async def test_liveness(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    from orderdesk.main import create_app

    app = create_app(action_router=action_router)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def post_action() -> Callable[..., bytes]:
    """Serializes an action payload the way the client app does."""

    def build(action: Any, **fields: Any) -> bytes:
        return json.dumps({"action": action, **fields}).encode("utf-8")

    return build
