"""Tests for text, CSV and JSON outputs."""

from __future__ import annotations

import csv
from datetime import date
from decimal import Decimal

from estiba_wages.api_data import build_api_response, entry_to_dict, record_from_dict
from estiba_wages.outputs import ENTRY_COLUMNS, format_entries_output, format_run_summary, write_entries_csv
from estiba_wages.records import ShiftRecord
from estiba_wages.wages import calculate_records, calculate_shift_total, summarize_entries

TODAY = date(2026, 3, 10)


def _entries():
    record = ShiftRecord(
        date=date(2026, 3, 10), group="II", shift="08-14", specialty="AMARRADOR",
        company="CSP", ship="MSC AURORA", production=Decimal("45.50"), journal_type="TUR",
        label="08-14 AMARRADOR", entry_id="abc-1",
    )
    return calculate_records([record], 15)


def test_format_entries_output():
    text = format_entries_output(_entries())
    assert "10/03/2026  08-14  G.II  LABORABLE" in text
    assert "Vessel: MSC AURORA at CSP" in text
    assert "= 215.55 gross  [TUR]" in text
    assert "Net 183.22 (IRPF 15%)" in text


def test_format_run_summary():
    entries = _entries()
    summary = format_run_summary(3, summarize_entries(entries), "free_text")
    assert "Layout: free_text" in summary
    assert "Skipped (incomplete): 2" in summary
    assert "Net: 183.22" in summary


def test_write_entries_csv(tmp_path):
    path = tmp_path / "entries.csv"
    write_entries_csv(path, _entries())
    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert list(rows[0].keys()) == ENTRY_COLUMNS
    assert rows[0]["entry_id"] == "abc-1"
    assert rows[0]["total"] == "215.55"
    assert rows[0]["date"] == "2026-03-10"


def test_entry_dict_round_trip_recalculates_same_entry():
    (entry,) = _entries()
    data = entry_to_dict(entry)
    assert data["net"] == "183.22"
    assert data["id"] == "abc-1"
    assert calculate_shift_total(record_from_dict(data), 15) == entry


def test_build_api_response():
    entries = _entries()
    response = build_api_response(entries, summarize_entries(entries), detected=2, dialect="compact_row", today=TODAY)
    assert response["dialect"] == "compact_row"
    assert response["summary"] == {"detected": 2, "calculated": 1, "skipped": 1}
    assert response["totals"]["gross"] == "215.55"
    assert response["parsed_on"] == "2026-03-10"
    assert len(response["entries"]) == 1
