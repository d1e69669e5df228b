"""
Order Desk Backend - OneSignal Notification Service
=====================================================

What:  Sends a push notification to one client through the OneSignal REST API.
How:   Builds the provider payload from the request fields, issues a single
       POST with httpx, and maps the provider's answer onto the envelope
       status taxonomy.
Who:   Called by ActionRouter for sendNotificationToClient.
When:  Once per request. No retries: every failure is reported once.

Outcome mapping:
    credentials missing          → ConfigurationError (no outbound call)
    transport / unreadable body  → NotificationServiceError
    200 and recipients > 0       → success envelope
    200 and recipients == 0      → warning envelope (accepted, no device matched)
    any other status             → NotificationServiceError with status and body

Recipients are addressed by external user id: the client app registers each
device with its customer number, so `clientId` is that number.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from orderdesk.config import OneSignalCredentials
from orderdesk.exceptions import ConfigurationError, NotificationServiceError
from orderdesk.schemas.envelope import Envelope

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://onesignal.com/api/v1/notifications"

# Languages the title/body are published under
LANGUAGES = ("en", "he")


class NotificationService:
    """
    OneSignal dispatcher.

    The credentials object is injected at construction; nothing is read from
    process-wide settings at call time. Pass `client` to supply a preconfigured
    httpx.AsyncClient (tests use one built on httpx.MockTransport).
    """

    def __init__(
        self,
        credentials: OneSignalCredentials,
        api_url: str = DEFAULT_API_URL,
        auth_scheme: str = "Basic",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.credentials = credentials
        self.api_url = api_url
        self.auth_scheme = auth_scheme
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def build_payload(self, client_id: Any, title: Any, message: Any) -> Dict[str, Any]:
        """OneSignal create-notification body for one external user id."""
        return {
            "app_id": self.credentials.app_id,
            "contents": {lang: message for lang in LANGUAGES},
            "headings": {lang: title for lang in LANGUAGES},
            "include_external_user_ids": ["" if client_id is None else str(client_id)],
        }

    async def send_to_client(self, client_id: Any, title: Any, message: Any) -> Envelope:
        """
        Push `title` / `message` to the devices registered for `client_id`.

        Returns:
            success envelope ("... to N recipient(s).") or warning envelope
            when OneSignal accepted the notification but matched no device.

        Raises:
            ConfigurationError: App id or REST API key missing.
            NotificationServiceError: Transport failure, unreadable response,
                or any status other than 200.
        """
        if not self.credentials.is_complete:
            logger.error("Notification rejected: OneSignal credentials are not configured")
            raise ConfigurationError(
                message="OneSignal App ID or REST API Key is not configured.",
            )

        payload = self.build_payload(client_id, title, message)
        headers = {
            "Authorization": f"{self.auth_scheme} {self.credentials.rest_api_key}",
            "Content-Type": "application/json",
        }

        try:
            logger.info("Sending notification to client %s", client_id)
            logger.debug("OneSignal payload: %s", payload)
            response = await self.client.post(
                self.api_url, json=payload, headers=headers, timeout=self.timeout
            )
            logger.info("OneSignal responded %d", response.status_code)
            logger.debug("OneSignal response body: %s", response.text)

            if response.status_code != 200:
                logger.error(
                    "OneSignal returned status %d: %s", response.status_code, response.text
                )
                raise NotificationServiceError(
                    message=(
                        f"Failed to send notification. OneSignal returned status "
                        f"{response.status_code}. Details: {response.text}"
                    ),
                    status_code=response.status_code,
                )

            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Notification call failed: %s", str(e), exc_info=True)
            raise NotificationServiceError(
                message=f"Failed to send notification due to an unexpected error: {e}",
                context={"error_type": type(e).__name__},
            ) from e

        recipients = body.get("recipients") if isinstance(body, dict) else None
        if (
            isinstance(recipients, (int, float))
            and not isinstance(recipients, bool)
            and recipients > 0
        ):
            return Envelope.success(
                message=f"Notification sent successfully to {recipients} recipient(s)."
            )

        warning = (
            f"Notification sent, but no recipients found for Client ID: {client_id}. "
            "Please verify the client has enabled notifications and is correctly "
            "identified in OneSignal."
        )
        logger.warning(warning)
        return Envelope.warning(warning)
