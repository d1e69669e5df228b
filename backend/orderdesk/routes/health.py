"""
Order Desk Backend - Liveness & Health Routes
===============================================

What:  GET /        plain-text liveness string with the version tag
       GET /health  JSON status of the external collaborators
Who:   Deployment checks (GET /) and load balancers / monitors (GET /health).

Status levels (/health):
    healthy:  sheet store reachable and OneSignal credentials present
    degraded: either of the above is missing; the process still serves
              requests, the affected actions answer with error envelopes
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from orderdesk import __version__
from orderdesk.routes.actions import get_action_router
from orderdesk.schemas.envelope import HealthResponse
from orderdesk.services.action_router import ActionRouter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()

LIVENESS_TEXT = "H.Saban order desk API is running. Version: v{version}"


@router.get(
    "/",
    response_class=PlainTextResponse,
    summary="Liveness string",
)
async def liveness() -> str:
    return LIVENESS_TEXT.format(version=__version__)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    action_router: ActionRouter = Depends(get_action_router),
) -> HealthResponse:
    """
    Probe the sheet store and report whether notifications can be sent.

    The OneSignal side is not called (that would send a notification);
    only the presence of credentials is reported.
    """
    overall = "healthy"

    store = action_router.query_service.store
    if not await store.health_check():
        overall = "degraded"
        logger.warning("Health check: sheet store unreachable")

    if action_router.notification_service.credentials.is_complete:
        notifications = "configured"
    else:
        notifications = "missing_credentials"
        overall = "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        sheet_backend=store.backend_name,
        notifications=notifications,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
