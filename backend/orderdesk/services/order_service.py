"""
Order Desk Backend - Order Status Service
==========================================

What:  Handler for updateOrderStatus.
How:   Acknowledges the request without writing anything. Status changes are
       still made by hand in the spreadsheet; the admin screen only needs the
       call to succeed so its optimistic update stays on screen.
"""

import logging
from typing import Any, Dict

from orderdesk.schemas.envelope import Envelope

logger = logging.getLogger(__name__)

SIMULATED_UPDATE_MESSAGE = "Status updated successfully (simulation)."


class OrderService:
    async def update_order_status(self, payload: Dict[str, Any]) -> Envelope:
        # TODO: write the new status back to the order row once the sheets
        # carry a stable order-number column to match on.
        logger.info(
            "Order status update acknowledged without write-back: %s",
            {k: v for k, v in payload.items() if k != "action"},
        )
        return Envelope.success(message=SIMULATED_UPDATE_MESSAGE)
