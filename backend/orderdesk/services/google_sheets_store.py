"""
Order Desk Backend - Google Sheets Store
=========================================

What:  SheetStore implementation reading the business spreadsheet via gspread.
How:   Authenticates with a service-account key, opens the spreadsheet by key
       on first use, and reads each worksheet's used range with unformatted
       values. gspread is synchronous, so every call runs in a worker thread
       (asyncio.to_thread) to keep the event loop free.
Who:   Built by main.py when SHEET_BACKEND=google.

Date cells:
    Sheets returns dates as serial numbers (days since 1899-12-30) when asked
    for unformatted values. A numeric cell is converted back into a
    timezone-aware datetime (in the sheet's timezone) when the sheet formats
    it as a date, date-time or time, or when its column is listed in
    SHEET_DATE_COLUMNS. The normalizer then renders it as a UTC ISO-8601
    string.
"""

import asyncio
import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple
from zoneinfo import ZoneInfo

import gspread
from google.auth.exceptions import GoogleAuthError
from gspread.utils import DateTimeOption, ValueRenderOption, absolute_range_name

from orderdesk.exceptions import SheetStoreError
from orderdesk.services.store_base import SheetStore

logger = logging.getLogger(__name__)

# Day zero of the Google Sheets / Lotus serial date system
SHEETS_EPOCH = datetime(1899, 12, 30)

# Number-format types whose serial values are points in time
DATE_FORMAT_TYPES = frozenset({"DATE", "DATE_TIME", "TIME"})

FORMAT_FIELDS = "sheets.data.rowData.values.effectiveFormat.numberFormat.type"

Cell = Tuple[int, int]


def serial_to_datetime(serial: float, tz: ZoneInfo) -> datetime:
    """Convert a Sheets serial date (fractional days) into an aware datetime."""
    return (SHEETS_EPOCH + timedelta(days=serial)).replace(tzinfo=tz)


def date_formatted_cells(metadata: Dict[str, Any]) -> Set[Cell]:
    """(row, column) positions whose effective number format is a date type."""
    cells: Set[Cell] = set()
    for sheet in metadata.get("sheets", []):
        for grid in sheet.get("data", []):
            for r, row in enumerate(grid.get("rowData", [])):
                for c, value in enumerate(row.get("values", [])):
                    number_format = value.get("effectiveFormat", {}).get("numberFormat", {})
                    if number_format.get("type") in DATE_FORMAT_TYPES:
                        cells.add((r, c))
    return cells


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class GoogleSheetStore(SheetStore):
    """
    Reads worksheets of one spreadsheet.

    The gspread client and spreadsheet handle are created lazily, so the app
    can start (and answer health checks) before credentials are in place.
    """

    backend_name = "google"

    def __init__(
        self,
        spreadsheet_id: str,
        service_account_file: str,
        date_columns: Iterable[str] = (),
        timezone_name: str = "Asia/Jerusalem",
    ):
        self.spreadsheet_id = spreadsheet_id
        self.service_account_file = service_account_file
        self.date_columns = frozenset(date_columns)
        self.timezone = ZoneInfo(timezone_name)
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._open_lock = threading.Lock()

    def _open(self) -> gspread.Spreadsheet:
        with self._open_lock:
            if self._spreadsheet is None:
                client = gspread.service_account(filename=self.service_account_file)
                self._spreadsheet = client.open_by_key(self.spreadsheet_id)
                logger.info("Opened spreadsheet %s", self.spreadsheet_id)
            return self._spreadsheet

    def _read_rows_sync(self, table_name: str) -> List[List[Any]]:
        spreadsheet = self._open()
        try:
            worksheet = spreadsheet.worksheet(table_name)
        except gspread.exceptions.WorksheetNotFound:
            logger.warning("Worksheet '%s' not found; treating it as empty", table_name)
            return []

        rows = worksheet.get_all_values(
            value_render_option=ValueRenderOption.unformatted,
            date_time_render_option=DateTimeOption.serial_number,
        )
        if len(rows) < 2:
            return rows

        metadata = spreadsheet.fetch_sheet_metadata(
            params={
                "includeGridData": "true",
                "ranges": absolute_range_name(table_name),
                "fields": FORMAT_FIELDS,
            }
        )
        return self._convert_date_cells(rows, date_formatted_cells(metadata))

    def _convert_date_cells(
        self, rows: List[List[Any]], formatted: Set[Cell] = frozenset()
    ) -> List[List[Any]]:
        named = {i for i, h in enumerate(rows[0]) if str(h) in self.date_columns}
        for r, row in enumerate(rows[1:], start=1):
            for c, cell in enumerate(row):
                if _is_number(cell) and (c in named or (r, c) in formatted):
                    row[c] = serial_to_datetime(cell, self.timezone)
        return rows

    async def read_rows(self, table_name: str) -> List[List[Any]]:
        try:
            return await asyncio.to_thread(self._read_rows_sync, table_name)
        except (gspread.exceptions.GSpreadException, GoogleAuthError, OSError) as e:
            logger.error("Failed to read worksheet '%s': %s", table_name, str(e))
            raise SheetStoreError(
                context={"table": table_name, "error_type": type(e).__name__},
            ) from e

    async def health_check(self) -> bool:
        try:
            await asyncio.to_thread(self._open)
            return True
        except Exception as e:
            logger.warning("Sheet store health check failed: %s", str(e))
            return False
