"""
Order Desk Backend - FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires the services, middleware, exception handlers and
       routes; uvicorn serves the module-level `app` (orderdesk.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → CORS           │
    │                                                     │
    │  Routes:   POST /   GET /   GET /health             │
    │                                                     │
    │  POST / → ActionRouter → Query / Order /            │
    │                          Notification services      │
    │                                                     │
    │  Exception handlers: anything that escapes a route  │
    │  still answers with an error envelope               │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration report, credential diagnostics
    Shutdown: close the OneSignal HTTP client
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from orderdesk import __version__
from orderdesk.config import Settings, settings
from orderdesk.diagnostics import report_notification_credentials
from orderdesk.exceptions import OrderDeskError
from orderdesk.log_config import setup_logging
from orderdesk.middleware.logging import RequestLoggingMiddleware
from orderdesk.middleware.request_id import RequestIDMiddleware, request_id_var
from orderdesk.routes import actions, health
from orderdesk.schemas.envelope import Envelope
from orderdesk.services.action_router import SERVER_ERROR_PREFIX, ActionRouter
from orderdesk.services.google_sheets_store import GoogleSheetStore
from orderdesk.services.memory_store import InMemorySheetStore
from orderdesk.services.notification_service import NotificationService
from orderdesk.services.order_service import OrderService
from orderdesk.services.query_service import QueryService, TableNames
from orderdesk.services.store_base import SheetStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Service Wiring
# ══════════════════════════════════════════════════════════════════════════

def build_sheet_store(config: Settings) -> SheetStore:
    if config.sheet_backend == "json":
        return InMemorySheetStore.from_json_file(config.json_store_path)
    return GoogleSheetStore(
        spreadsheet_id=config.spreadsheet_id,
        service_account_file=config.google_service_account_file,
        date_columns=config.sheet_date_columns_list,
        timezone_name=config.sheet_timezone,
    )


def build_action_router(config: Settings) -> ActionRouter:
    """Assemble the services from settings; credentials are resolved here, once."""
    tables = TableNames(
        customers=config.customers_sheet,
        container_rentals=config.container_rentals_sheet,
        material_orders=config.material_orders_sheet,
        container_orders=config.container_orders_sheet,
    )
    notifications = NotificationService(
        credentials=config.one_signal_credentials(),
        api_url=config.one_signal_api_url,
        auth_scheme=config.one_signal_auth_scheme,
        timeout=config.notification_timeout,
    )
    return ActionRouter(
        query_service=QueryService(build_sheet_store(config), tables),
        notification_service=notifications,
        order_service=OrderService(),
    )


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("Order Desk API v%s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: affected actions answer with error envelopes
        logger.error("Configuration error: %s", str(e))

    action_router: ActionRouter = app.state.action_router
    report_notification_credentials(action_router.notification_service.credentials)
    logger.info("Sheet backend: %s", action_router.query_service.store.backend_name)
    logger.info("Actions: %s", ", ".join(action_router.actions))
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Order Desk API shutting down...")
    await action_router.notification_service.aclose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Last line of defence: the ActionRouter already converts handler failures,
    so these only fire for errors raised outside it (middleware, body reads).
    Both answer with the same envelope shape the client app understands.
    """

    @app.exception_handler(OrderDeskError)
    async def handle_app_error(request: Request, exc: OrderDeskError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content=Envelope.error(exc.message).to_content())

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=Envelope.error(SERVER_ERROR_PREFIX + str(exc)).to_content(),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(action_router: Optional[ActionRouter] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        action_router: Pre-wired router (tests pass one built on fixture
            stores); defaults to one assembled from `settings`.
    """
    app = FastAPI(
        title="Order Desk API",
        description=(
            "Backend of the H.Saban client app: customer and order lookups over "
            "the business spreadsheet, and OneSignal push notifications."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.action_router = action_router or build_action_router(settings)

    # Last added runs first: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(actions.router)
    app.include_router(health.router)

    return app


app = create_app()
