"""
Order Desk Backend - Application Configuration
================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by main.py to assemble services; services themselves receive
       plain values at construction and never read `settings` at call time.
When:  Loaded once at module import time.

Secrets:
    The OneSignal credentials keep the names they had as script properties
    (ONE_SIGNAL_APP_ID, ONE_SIGNAL_REST_API_KEY) so an existing deployment's
    environment carries over unchanged.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class OneSignalCredentials(BaseModel):
    """
    The two secrets the notification dispatcher needs.

    Either value may be missing; the dispatcher checks `is_complete`
    before attempting any outbound call.
    """

    app_id: Optional[str] = None
    rest_api_key: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.app_id) and bool(self.rest_api_key)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development with the JSON
    fixture store. Production deployments MUST set the Google Sheets and
    OneSignal values.
    """

    # ── Sheet Store ───────────────────────────────────────────────────────
    # "google": live spreadsheet via gspread (service account)
    # "json":   local file holding {table_name: [[header...], [row...]]}
    sheet_backend: str = Field(default="google")

    spreadsheet_id: str = Field(
        default="",
        description="Key of the Google spreadsheet holding the business tables",
    )
    google_service_account_file: str = Field(
        default="./service_account.json",
        description="Path to the Google service-account JSON key",
    )
    json_store_path: str = Field(default="./sheets.json")

    # Timezone the spreadsheet records its date cells in
    sheet_timezone: str = Field(default="Asia/Jerusalem")

    # Columns always read as timestamps, on top of date-formatted cells
    sheet_date_columns: str = Field(default="תאריך קליטה,תאריך הזמנה")

    @property
    def sheet_date_columns_list(self) -> List[str]:
        return [c.strip() for c in self.sheet_date_columns.split(",") if c.strip()]

    @field_validator("sheet_backend")
    @classmethod
    def validate_sheet_backend(cls, v: str) -> str:
        lower = v.lower()
        if lower not in {"google", "json"}:
            raise ValueError(f"Invalid sheet_backend '{v}'. Must be 'google' or 'json'")
        return lower

    # ── Table Names ───────────────────────────────────────────────────────
    customers_sheet: str = Field(default="לקוחות")
    container_rentals_sheet: str = Field(default="שכירות מכולות")
    material_orders_sheet: str = Field(default="הזמנות חומרי בנין")
    container_orders_sheet: str = Field(default="הזמנות מכולות")

    # ── OneSignal ─────────────────────────────────────────────────────────
    one_signal_app_id: str = Field(default="")
    one_signal_rest_api_key: str = Field(default="")
    one_signal_api_url: str = Field(default="https://onesignal.com/api/v1/notifications")

    # Prefix of the Authorization header value ("Basic" for legacy REST keys,
    # "Key" for the newer organisation keys)
    one_signal_auth_scheme: str = Field(default="Basic")

    # Seconds before the outbound notification call is abandoned
    notification_timeout: float = Field(default=10.0, gt=0, le=120)

    def one_signal_credentials(self) -> OneSignalCredentials:
        return OneSignalCredentials(
            app_id=self.one_signal_app_id or None,
            rest_api_key=self.one_signal_rest_api_key or None,
        )

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated list; "*" allows the mobile web client from any host
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that the external collaborators are configured.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        errors = []
        if self.sheet_backend == "google" and not self.spreadsheet_id:
            errors.append("SPREADSHEET_ID is not set.")
        if not self.one_signal_app_id:
            errors.append("ONE_SIGNAL_APP_ID is not set; notifications will be rejected.")
        if not self.one_signal_rest_api_key:
            errors.append("ONE_SIGNAL_REST_API_KEY is not set; notifications will be rejected.")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


settings = Settings()
