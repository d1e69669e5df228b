"""
Order Desk Backend - Credential Diagnostics
=============================================

What:  Reports whether the OneSignal credentials are configured.
How:   Logs SUCCESS/ERROR per credential. The API key is masked, only its
       last four characters are shown.
Who:   Run at startup by the lifespan, and by hand after changing secrets:

           python -m orderdesk.diagnostics

       Exit code 0 when both credentials are present, 1 otherwise.
"""

import logging
import sys
from typing import Optional

from orderdesk.config import OneSignalCredentials, settings
from orderdesk.log_config import setup_logging

logger = logging.getLogger(__name__)


def mask_secret(value: str) -> str:
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]


def report_notification_credentials(credentials: OneSignalCredentials) -> bool:
    """Log the state of each credential; return True when both are set."""
    logger.info("--- Verifying OneSignal credentials ---")
    if credentials.app_id:
        logger.info("SUCCESS: Found ONE_SIGNAL_APP_ID: %s", credentials.app_id)
    else:
        logger.error("ERROR: ONE_SIGNAL_APP_ID is not set.")

    if credentials.rest_api_key:
        logger.info(
            "SUCCESS: Found ONE_SIGNAL_REST_API_KEY: %s", mask_secret(credentials.rest_api_key)
        )
    else:
        logger.error("ERROR: ONE_SIGNAL_REST_API_KEY is not set.")
    logger.info("---------------------------------------")
    return credentials.is_complete


def main(credentials: Optional[OneSignalCredentials] = None) -> int:
    setup_logging(settings.log_level)
    ok = report_notification_credentials(credentials or settings.one_signal_credentials())
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
