"""
Order Desk Backend - Data Query Service
=========================================

What:  Read-only handlers joining the customer, container-rental and
       material-order tables.
How:   Each call reads the tables it needs fresh from the sheet store,
       filters/merges the normalized records, and returns an Envelope.
Who:   Called by ActionRouter for getClientData / getAllOrders /
       getAdminDashboardData.

Join key:
    Every table carries a "מספר לקוח" (customer number) column. A client may
    identify themselves by number or by phone; after the customer row is
    found, its own customer number (the canonical id) drives the joins.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, List, Optional, Tuple

from orderdesk.exceptions import NotFoundError
from orderdesk.models.record import Record, cell_text, parse_timestamp
from orderdesk.schemas.envelope import Envelope
from orderdesk.services.store_base import SheetStore

logger = logging.getLogger(__name__)

# ── Column headers (data keys, matched literally) ─────────────────────────
CUSTOMER_NUMBER = "מספר לקוח"
PHONE = "טלפון"
RECEIVED_DATE = "תאריך קליטה"
ORDER_DATE = "תאריך הזמנה"

# Discriminator added to every record of the merged orders feed
ORDER_TYPE = "orderType"
MATERIALS = "materials"
CONTAINER = "container"

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class TableNames:
    """Worksheet names of the four business tables."""

    customers: str = "לקוחות"
    container_rentals: str = "שכירות מכולות"
    material_orders: str = "הזמנות חומרי בנין"
    container_orders: str = "הזמנות מכולות"


def order_timestamp(record: Record) -> Optional[datetime]:
    """Received date if filled in, otherwise order date; None if neither parses."""
    return parse_timestamp(record.get(RECEIVED_DATE) or record.get(ORDER_DATE))


def _newest_first_key(record: Record) -> Tuple[bool, datetime]:
    moment = order_timestamp(record)
    return (moment is not None, moment or _EARLIEST)


class QueryService:
    """
    Responsibilities:
        - get_client_data(): one client plus their containers and material orders
        - get_all_orders(): materials + container orders as one newest-first feed
    """

    def __init__(self, store: SheetStore, tables: Optional[TableNames] = None):
        self.store = store
        self.tables = tables or TableNames()

    async def find_customer(self, customer_id: Any) -> Record:
        """
        First customer whose number or phone equals the trimmed identifier.

        Raises:
            NotFoundError: No row matches, or the identifier is blank.
        """
        wanted = cell_text(customer_id)
        # A blank identifier is rejected up front instead of matching the
        # first customer whose phone cell is empty.
        if wanted:
            customers = await self.store.read_table(self.tables.customers)
            for row in customers.records:
                if cell_text(row.get(CUSTOMER_NUMBER)) == wanted or cell_text(row.get(PHONE)) == wanted:
                    return row
        raise NotFoundError(resource="Client", resource_id=wanted)

    async def _rows_for_customer(self, table_name: str, canonical_id: str) -> List[Record]:
        table = await self.store.read_table(table_name)
        return [r for r in table.records if cell_text(r.get(CUSTOMER_NUMBER)) == canonical_id]

    async def get_client_data(self, customer_id: Any) -> Envelope:
        """
        Look up a client and everything they have ordered.

        Args:
            customer_id: Customer number or phone number, as sent by the app.

        Returns:
            success envelope with `user`, `containers`, `materialOrders`.

        Raises:
            NotFoundError: "Client not found".
        """
        user = await self.find_customer(customer_id)
        canonical_id = cell_text(user.get(CUSTOMER_NUMBER))

        containers = await self._rows_for_customer(self.tables.container_rentals, canonical_id)
        material_orders = await self._rows_for_customer(self.tables.material_orders, canonical_id)

        logger.info(
            "Client %s: %d containers, %d material orders",
            canonical_id,
            len(containers),
            len(material_orders),
        )
        return Envelope.success(
            user=user,
            containers=containers,
            materialOrders=material_orders,
        )

    async def get_all_orders(self) -> Envelope:
        """
        Merge material and container orders into a single feed.

        Ordering is newest first by order_timestamp(). Orders without a usable
        date go to the end, in the order they were read (materials first).
        """
        materials = await self.store.read_table(self.tables.material_orders)
        containers = await self.store.read_table(self.tables.container_orders)

        orders = [{**r, ORDER_TYPE: MATERIALS} for r in materials.records]
        orders += [{**r, ORDER_TYPE: CONTAINER} for r in containers.records]
        orders.sort(key=_newest_first_key, reverse=True)

        logger.info("Orders feed: %d materials + %d container", len(materials), len(containers))
        return Envelope.success(orders=orders)
