"""
Order Desk Backend - Abstract Sheet Store Interface
=====================================================

What:  Abstract base class for the tabular data store the handlers read.
How:   Concrete stores implement read_rows(); read_table() normalizes the
       raw rows into records the same way for every backend.
Who:   QueryService reads through it; main.py picks the concrete store.

Implementations:
    - GoogleSheetStore: the live spreadsheet via gspread
    - InMemorySheetStore: fixture tables for tests and local development,
      optionally loaded from a JSON file
"""

from abc import ABC, abstractmethod
from typing import Any, List

from orderdesk.models.record import Table, normalize_rows


class SheetStore(ABC):
    """
    Contract:
        - read_rows() returns the used range of one named table, header row
          first, as a list of row lists
        - A table that does not exist reads as an empty list (not an error)
        - Failures reaching the backend raise SheetStoreError
        - Stores hold no per-request state; one instance serves every request
    """

    # Reported by /health
    backend_name: str = "unknown"

    @abstractmethod
    async def read_rows(self, table_name: str) -> List[List[Any]]:
        """
        Read the raw cell grid of a table.

        Args:
            table_name: Worksheet / table name, e.g. "לקוחות".

        Returns:
            Header row followed by data rows. Date cells may be datetime
            objects; normalization happens in read_table().

        Raises:
            SheetStoreError: The backend could not be read.
        """
        ...

    async def read_table(self, table_name: str) -> Table:
        """Read a table and normalize it into keyed records."""
        return normalize_rows(await self.read_rows(table_name))

    @abstractmethod
    async def health_check(self) -> bool:
        """Return True if the store is reachable."""
        ...
