"""
Order Desk Backend - Action Router Unit Tests
===============================================

What:  Dispatch by `action` and the error-envelope boundary.

What we test:
    ✅ Each known action reaches its handler; aliases answer identically
    ✅ Unknown, misspelled, miscased and missing actions are echoed back
    ✅ Malformed bodies become error envelopes and leave no trace
    ✅ Application errors keep their message; others get the server-error prefix
"""

import json

import pytest

from orderdesk.exceptions import NotFoundError, ValidationError
from orderdesk.schemas.envelope import ResponseStatus
from orderdesk.services.action_router import (
    SERVER_ERROR_PREFIX,
    describe_action,
    parse_payload,
)
from orderdesk.services.order_service import SIMULATED_UPDATE_MESSAGE


class TestParsePayload:

    def test_accepts_bytes_and_text(self):
        assert parse_payload(b'{"action": "getAllOrders"}') == {"action": "getAllOrders"}
        assert parse_payload('{"a": 1}') == {"a": 1}

    @pytest.mark.parametrize("body", [b"", b"{not json", b"\xff\xfe"])
    def test_malformed_body_raises(self, body):
        with pytest.raises(ValidationError) as exc_info:
            parse_payload(body)
        assert exc_info.value.message.startswith(SERVER_ERROR_PREFIX)

    @pytest.mark.parametrize("body", [b"[]", b'"getAllOrders"', b"42", b"null"])
    def test_non_object_json_raises(self, body):
        with pytest.raises(ValidationError) as exc_info:
            parse_payload(body)
        assert exc_info.value.message == SERVER_ERROR_PREFIX + "request body must be a JSON object"


class TestDispatch:

    @pytest.mark.asyncio
    async def test_get_client_data(self, action_router, post_action):
        envelope = await action_router.handle(post_action("getClientData", customerId="123"))
        assert envelope.status is ResponseStatus.SUCCESS
        assert envelope.data["user"]["מספר לקוח"] == 123

    @pytest.mark.asyncio
    async def test_client_not_found(self, action_router, post_action):
        envelope = await action_router.handle(post_action("getClientData", customerId="999"))
        assert envelope.to_content() == {"status": "error", "message": "Client not found"}

    @pytest.mark.asyncio
    async def test_missing_customer_id_is_not_found(self, action_router, post_action):
        envelope = await action_router.handle(post_action("getClientData"))
        assert envelope.message == "Client not found"

    @pytest.mark.asyncio
    async def test_dashboard_and_all_orders_are_aliases(self, action_router, post_action):
        dashboard = await action_router.handle(post_action("getAdminDashboardData"))
        all_orders = await action_router.handle(post_action("getAllOrders"))

        assert dashboard.to_content() == all_orders.to_content()
        assert len(all_orders.data["orders"]) == 5

    @pytest.mark.asyncio
    async def test_update_order_status_is_acknowledged(self, action_router, post_action):
        envelope = await action_router.handle(
            post_action("updateOrderStatus", orderId="17", status="נשלח")
        )
        assert envelope.to_content() == {"status": "success", "message": SIMULATED_UPDATE_MESSAGE}

    @pytest.mark.asyncio
    async def test_notification_without_credentials(self, action_router, post_action):
        envelope = await action_router.handle(
            post_action("sendNotificationToClient", clientId="123", title="t", message="m")
        )
        assert envelope.to_content() == {
            "status": "error",
            "message": "OneSignal App ID or REST API Key is not configured.",
        }

    def test_action_inventory(self, action_router):
        assert action_router.actions == [
            "getAdminDashboardData",
            "getAllOrders",
            "getClientData",
            "sendNotificationToClient",
            "updateOrderStatus",
        ]


class TestUnknownActions:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", ["deleteEverything", "getclientdata", "GETALLORDERS", ""])
    async def test_unknown_action_is_echoed(self, action_router, post_action, action):
        envelope = await action_router.handle(post_action(action))
        assert envelope.to_content() == {"status": "error", "message": f"Unknown action: {action}"}

    @pytest.mark.asyncio
    async def test_missing_action(self, action_router):
        envelope = await action_router.handle(b'{"customerId": "123"}')
        assert envelope.message == "Unknown action: null"

    @pytest.mark.asyncio
    async def test_non_string_action(self, action_router, post_action):
        envelope = await action_router.handle(post_action(["getAllOrders"]))
        assert envelope.message == 'Unknown action: ["getAllOrders"]'

    def test_describe_action(self):
        assert describe_action("x") == "x"
        assert describe_action(None) == "null"
        assert describe_action(5) == "5"


class TestErrorBoundary:

    @pytest.mark.asyncio
    async def test_malformed_body_then_valid_request(self, action_router, post_action):
        """A bad request must not affect the one after it."""
        bad = await action_router.handle(b"{oops")
        good = await action_router.handle(post_action("getAllOrders"))

        assert bad.is_error
        assert bad.message.startswith(SERVER_ERROR_PREFIX)
        assert good.status is ResponseStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_application_error_message_is_kept(self, action_router, post_action, monkeypatch):
        async def fail():
            raise NotFoundError(resource="Order", resource_id="17")

        monkeypatch.setattr(action_router.query_service, "get_all_orders", fail)

        envelope = await action_router.handle(post_action("getAllOrders"))
        assert envelope.to_content() == {"status": "error", "message": "Order not found"}

    @pytest.mark.asyncio
    async def test_unexpected_error_gets_prefix(self, action_router, post_action, monkeypatch):
        async def explode():
            raise RuntimeError("sheet on fire")

        monkeypatch.setattr(action_router.query_service, "get_all_orders", explode)

        envelope = await action_router.handle(post_action("getAllOrders"))
        assert envelope.to_content() == {
            "status": "error",
            "message": SERVER_ERROR_PREFIX + "sheet on fire",
        }

    @pytest.mark.asyncio
    async def test_every_outcome_is_json_serializable(self, action_router, post_action):
        for body in (b"nope", post_action("x"), post_action("getAllOrders")):
            envelope = await action_router.handle(body)
            json.dumps(envelope.to_content())
