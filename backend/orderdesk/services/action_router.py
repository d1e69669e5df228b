"""
Order Desk Backend - Action Router
====================================

What:  Parses a POST body, reads its `action`, and runs exactly one handler.
How:   A dispatch table maps action names (exact, case-sensitive) to bound
       handler coroutines. handle() is the one place where failures become
       envelopes, so handlers are free to raise OrderDeskError subclasses.
Who:   Called by the POST / route with the raw request body.

Dispatch table:
    getClientData             → QueryService.get_client_data
    getAdminDashboardData     → QueryService.get_all_orders
    getAllOrders              → QueryService.get_all_orders
    updateOrderStatus         → OrderService.update_order_status (no write-back)
    sendNotificationToClient  → NotificationService.send_to_client

The router keeps no per-request state: a malformed or failing request has no
effect on the next one.
"""

import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, Union

from orderdesk import __version__
from orderdesk.exceptions import OrderDeskError, ValidationError
from orderdesk.schemas.envelope import Envelope
from orderdesk.services.notification_service import NotificationService
from orderdesk.services.order_service import OrderService
from orderdesk.services.query_service import QueryService

logger = logging.getLogger(__name__)

Payload = Dict[str, Any]
Handler = Callable[[Payload], Awaitable[Envelope]]

SERVER_ERROR_PREFIX = "Invalid request or server error: "


def parse_payload(body: Union[bytes, str]) -> Payload:
    """
    Decode a request body into a JSON object.

    Raises:
        ValidationError: Body is not UTF-8, not JSON, or not a JSON object.
    """
    try:
        text = body.decode("utf-8") if isinstance(body, bytes) else body
        payload = json.loads(text)
    except ValueError as e:
        raise ValidationError(message=SERVER_ERROR_PREFIX + str(e), field="body") from e

    if not isinstance(payload, dict):
        raise ValidationError(
            message=SERVER_ERROR_PREFIX + "request body must be a JSON object",
            field="body",
        )
    return payload


def describe_action(action: Any) -> str:
    """Action as echoed in "Unknown action" messages: strings verbatim, else JSON."""
    return action if isinstance(action, str) else json.dumps(action)


class ActionRouter:
    def __init__(
        self,
        query_service: QueryService,
        notification_service: NotificationService,
        order_service: OrderService,
    ):
        self.query_service = query_service
        self.notification_service = notification_service
        self.order_service = order_service
        self._handlers: Dict[str, Handler] = {
            "getClientData": self._get_client_data,
            "getAdminDashboardData": self._get_all_orders,
            "getAllOrders": self._get_all_orders,
            "updateOrderStatus": self.order_service.update_order_status,
            "sendNotificationToClient": self._send_notification,
        }

    @property
    def actions(self) -> List[str]:
        return sorted(self._handlers)

    async def _get_client_data(self, payload: Payload) -> Envelope:
        return await self.query_service.get_client_data(payload.get("customerId"))

    async def _get_all_orders(self, payload: Payload) -> Envelope:
        return await self.query_service.get_all_orders()

    async def _send_notification(self, payload: Payload) -> Envelope:
        return await self.notification_service.send_to_client(
            client_id=payload.get("clientId"),
            title=payload.get("title"),
            message=payload.get("message"),
        )

    async def handle(self, body: Union[bytes, str]) -> Envelope:
        """
        Route one request body to its handler and return its envelope.

        Never raises. Malformed bodies, unknown actions, application errors
        and unexpected exceptions all come back as error envelopes.
        """
        logger.debug("API v%s handling request", __version__)
        try:
            payload = parse_payload(body)
        except ValidationError as e:
            logger.warning("Rejected request body: %s", e.message)
            return Envelope.error(e.message)

        action = payload.get("action")
        logger.info("Received action: %s", action)
        logger.debug("Payload: %s", payload)

        handler = self._handlers.get(action) if isinstance(action, str) else None
        if handler is None:
            logger.warning("Unknown action requested: %r", action)
            return Envelope.error(f"Unknown action: {describe_action(action)}")

        try:
            return await handler(payload)
        except OrderDeskError as e:
            logger.warning("Action %s failed: %s | Context: %s", action, e.message, e.context)
            return Envelope.error(e.message)
        except Exception as e:
            logger.error("Unexpected error handling %s: %s", action, str(e), exc_info=True)
            return Envelope.error(SERVER_ERROR_PREFIX + str(e))
