"""
Order Desk Backend - In-Memory Sheet Store
============================================

What:  A SheetStore backed by plain Python lists.
Who:   The test suite, and local development with SHEET_BACKEND=json.

JSON file layout (SHEET_BACKEND=json):
    {
        "לקוחות": [["מספר לקוח", "שם", "טלפון"], [123, "Dana", "0501234567"]],
        "הזמנות מכולות": [["מספר לקוח", "תאריך הזמנה"]]
    }

    Dates in the file are ISO-8601 strings and pass through untouched.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from orderdesk.exceptions import SheetStoreError
from orderdesk.services.store_base import SheetStore

logger = logging.getLogger(__name__)


class InMemorySheetStore(SheetStore):
    """Serves fixed tables; each read returns a fresh copy of the rows."""

    backend_name = "json"

    def __init__(self, tables: Optional[Dict[str, List[List[Any]]]] = None):
        self._tables: Dict[str, List[List[Any]]] = dict(tables or {})

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "InMemorySheetStore":
        """
        Load tables from a JSON file.

        Raises:
            SheetStoreError: File missing, unreadable, or not an object of tables.
        """
        file_path = Path(path)
        try:
            with file_path.open(encoding="utf-8") as fh:
                tables = json.load(fh)
        except (OSError, ValueError) as e:
            raise SheetStoreError(
                context={"path": str(file_path), "error": str(e)},
            ) from e

        if not isinstance(tables, dict):
            raise SheetStoreError(
                context={"path": str(file_path), "error": "top-level value must be an object"},
            )
        logger.info("Loaded %d tables from %s", len(tables), file_path)
        return cls(tables)

    async def read_rows(self, table_name: str) -> List[List[Any]]:
        rows = self._tables.get(table_name)
        if rows is None:
            logger.warning("Table '%s' not found; treating it as empty", table_name)
            return []
        return [list(row) for row in rows]

    async def health_check(self) -> bool:
        return True
