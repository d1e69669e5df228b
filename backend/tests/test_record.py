"""
Order Desk Backend - Row Normalizer Unit Tests
================================================

What:  Tests for normalize_rows() and the cell helpers in models/record.py.

What we test:
    ✅ Empty and header-only ranges give no records
    ✅ N data rows give N records sharing the header's key set, in order
    ✅ Short rows are padded, long rows truncated
    ✅ Date cells become UTC ISO-8601 strings; other cells pass through
    ✅ Identifier text and timestamp parsing helpers
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from orderdesk.models.record import (
    EMPTY_CELL,
    cell_text,
    normalize_rows,
    parse_timestamp,
    to_iso8601,
)


class TestNormalizeRows:

    def test_empty_range_yields_no_records(self):
        table = normalize_rows([])
        assert table.records == []
        assert table.headers == []

    def test_header_only_yields_no_records(self):
        table = normalize_rows([["מספר לקוח", "שם"]])
        assert table.records == []
        assert table.headers == ["מספר לקוח", "שם"]

    def test_n_rows_yield_n_records_with_identical_keys(self):
        rows = [
            ["מספר לקוח", "שם", "טלפון"],
            [1, "a", "050"],
            [2, "b", "051"],
            [3, "c", "052"],
        ]
        table = normalize_rows(rows)

        assert len(table) == 3
        assert [r["מספר לקוח"] for r in table.records] == [1, 2, 3]
        for record in table.records:
            assert list(record.keys()) == ["מספר לקוח", "שם", "טלפון"]

    def test_short_rows_are_padded_and_long_rows_truncated(self):
        table = normalize_rows([["a", "b"], [1], [1, 2, 3]])
        assert table.records == [{"a": 1, "b": EMPTY_CELL}, {"a": 1, "b": 2}]

    def test_datetime_cells_are_serialized(self):
        table = normalize_rows([["when", "n"], [datetime(2024, 1, 15, 8, 30), 5]])
        assert table.records[0] == {"when": "2024-01-15T08:30:00.000Z", "n": 5}

    def test_non_string_headers_become_strings(self):
        table = normalize_rows([[2024, "x"], ["a", "b"]])
        assert table.records[0] == {"2024": "a", "x": "b"}

    def test_duplicate_header_keeps_rightmost_value(self):
        table = normalize_rows([["a", "a"], [1, 2]])
        assert table.records[0] == {"a": 2}

    def test_source_rows_are_not_mutated(self):
        rows = [["when"], [datetime(2024, 1, 1)]]
        normalize_rows(rows)
        assert rows[1][0] == datetime(2024, 1, 1)


class TestToIso8601:

    def test_aware_datetime_is_converted_to_utc(self):
        moment = datetime(2024, 1, 15, 10, 30, tzinfo=timezone(timedelta(hours=2)))
        assert to_iso8601(moment) == "2024-01-15T08:30:00.000Z"

    def test_milliseconds_are_kept(self):
        moment = datetime(2024, 1, 15, 8, 30, 5, 123456, tzinfo=timezone.utc)
        assert to_iso8601(moment) == "2024-01-15T08:30:05.123Z"

    def test_plain_date_is_midnight_utc(self):
        assert to_iso8601(date(2024, 2, 29)) == "2024-02-29T00:00:00.000Z"

    @pytest.mark.parametrize("value", ["2024-01-15", 42, 4.5, True, "", None])
    def test_other_values_pass_through(self, value):
        assert to_iso8601(value) is value


class TestCellText:

    def test_numbers_render_like_the_sheet(self):
        assert cell_text(123) == "123"
        assert cell_text(123.0) == "123"
        assert cell_text(12.5) == "12.5"

    def test_strings_are_trimmed(self):
        assert cell_text("  0501234567 ") == "0501234567"

    def test_none_is_empty(self):
        assert cell_text(None) == ""


class TestParseTimestamp:

    def test_iso_with_z_suffix(self):
        assert parse_timestamp("2024-03-10T10:00:00.000Z") == datetime(
            2024, 3, 10, 10, 0, tzinfo=timezone.utc
        )

    def test_naive_values_are_taken_as_utc(self):
        assert parse_timestamp(datetime(2024, 3, 10)).tzinfo is timezone.utc
        assert parse_timestamp("2024-03-10").tzinfo is timezone.utc

    @pytest.mark.parametrize("value", ["", "   ", "not a date", None, 45306])
    def test_unusable_values_give_none(self, value):
        assert parse_timestamp(value) is None
