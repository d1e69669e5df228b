"""
Order Desk Backend - Sheet Records
====================================

What:  Turns a raw sheet range (header row + data rows) into keyed records.
How:   The header row is zipped against every data row; date cells become
       ISO-8601 UTC strings so records are JSON-ready as soon as they exist.
Who:   Used by SheetStore.read_table() and by the query service.

Record shape:
    {"מספר לקוח": 123, "שם": "Dana", "תאריך הזמנה": "2024-01-15T08:30:00.000Z"}

    Keys are the header cells exactly as written in the sheet. Consumers
    match on them literally, so they are never renamed or slugified.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Optional, Sequence

Record = Dict[str, Any]

# Value an empty sheet cell reads as
EMPTY_CELL = ""


@dataclass(frozen=True)
class Table:
    """A normalized sheet: its header order plus one record per data row."""

    headers: List[str] = field(default_factory=list)
    records: List[Record] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)


def to_iso8601(value: Any) -> Any:
    """
    Serialize temporal cell values; return everything else unchanged.

    Datetimes are rendered in UTC with millisecond precision and a `Z`
    suffix (2024-01-15T08:30:00.000Z). Naive datetimes are taken to be UTC,
    plain dates are midnight UTC.
    """
    if isinstance(value, datetime):
        moment = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    elif isinstance(value, date):
        moment = datetime.combine(value, time(), tzinfo=timezone.utc)
    else:
        return value
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def normalize_rows(rows: Sequence[Sequence[Any]]) -> Table:
    """
    Convert a header + data-row range into a Table of records.

    Args:
        rows: Row 0 is the header row; every later row is a data row.

    Returns:
        Table with one record per data row, in sheet order. Fewer than two
        rows (empty sheet or header only) gives an empty Table.

    Short rows are padded with empty cells and cells past the header width
    are dropped, so every record carries exactly the header's key set.
    A duplicated header name keeps the value of its right-most column.
    """
    if len(rows) < 2:
        return Table(headers=[str(h) for h in rows[0]] if rows else [])

    headers = [str(h) for h in rows[0]]
    records: List[Record] = []
    for row in rows[1:]:
        record: Record = {}
        for index, header in enumerate(headers):
            cell = row[index] if index < len(row) else EMPTY_CELL
            record[header] = to_iso8601(cell)
        records.append(record)
    return Table(headers=headers, records=records)


def cell_text(value: Any) -> str:
    """
    Render a cell as trimmed text for identifier comparisons.

    Whole-number floats lose their ".0" so a numeric customer number read
    as 123.0 still equals the string "123".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Best-effort conversion of a record's date field into an aware datetime."""
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime.combine(value, time())
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            moment = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)
