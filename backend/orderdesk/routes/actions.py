"""
Order Desk Backend - Action Route
===================================

What:  POST /, the single JSON API endpoint of the client app.
How:   Hands the raw body to the ActionRouter and serializes the envelope.
       The body is read raw (not through a Pydantic model) so malformed JSON
       becomes an error envelope instead of FastAPI's 422.

Request:   {"action": "<name>", ...action fields}
Response:  HTTP 200, application/json, {"status": ..., "message"?: ..., ...}
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from orderdesk.services.action_router import ActionRouter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Actions"])


def get_action_router(request: Request) -> ActionRouter:
    """Dependency: the ActionRouter wired up by create_app()."""
    return request.app.state.action_router


@router.post(
    "/",
    summary="Run an action",
    description=(
        "Dispatches on the `action` field: getClientData, getAdminDashboardData, "
        "getAllOrders, updateOrderStatus, sendNotificationToClient. Always answers "
        "200 with a status envelope."
    ),
)
async def run_action(
    request: Request,
    action_router: ActionRouter = Depends(get_action_router),
) -> JSONResponse:
    body = await request.body()
    envelope = await action_router.handle(body)
    return JSONResponse(content=envelope.to_content())
