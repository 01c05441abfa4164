"""Tests for the token-stream layout."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from estiba_wages.token_stream import match_record_start, month_context, parse_token_stream

TODAY = date(2026, 3, 10)

SPLIT_EXPORT = """JORNALES DE ABRIL DE 2026
1
123456
15
TUR
DE 08 A 14 H.
CONDUCTOR 1A
CSP IBERIAN VALENCIA TERMINAL
MSC AURORA
CARGA
45,50
2
123457
16
NUD
DE 20 A 02 H.
AMARRADOR
APM TERMINALS VALENCIA
EVER GIVEN
DESCARGA
"""

MERGED_EXPORT = (
    "123456 15 TUR DE 08 A 14 H. GRUISTA VALENCIA TERMINAL EUROPA MAERSK LIMA CARGA 30\n"
    "123457 17 TUR FROM 14 TO 20 HOURS GRUISTA MEDITERRANEAN SHIPPING C. TV MSC ANNA LOADING\n"
)


def test_split_variant():
    records = parse_token_stream(SPLIT_EXPORT, "III", TODAY)
    assert len(records) == 2

    first, second = records
    assert first.date == date(2026, 4, 15)
    assert first.shift == "08-14"
    assert first.journal_type == "TUR"
    assert first.specialty == "CONDUCTOR 1A"
    assert first.group == "II"
    assert first.company == "CSP"
    assert first.ship == "MSC AURORA"
    assert first.production == Decimal("45.50")
    assert first.label == "08-14 CONDUCTOR 1A"

    assert second.date == date(2026, 4, 16)
    assert second.shift == "20-02"
    assert second.journal_type == "NUD"
    assert second.group == "III"
    assert second.company == "APM"
    assert second.ship == "EVER GIVEN"
    assert second.production == Decimal("0")


def test_merged_variant_without_header_uses_current_month():
    records = parse_token_stream(MERGED_EXPORT, "I", TODAY)
    assert [r.date for r in records] == [date(2026, 3, 15), date(2026, 3, 17)]
    assert [r.company for r in records] == ["VTE", "MSC"]
    assert [r.ship for r in records] == ["MAERSK LIMA", "MSC ANNA"]
    assert records[0].production == Decimal("30")
    assert records[1].shift == "14-20"


def test_trailing_amount_is_not_taken_as_next_record():
    records = parse_token_stream(SPLIT_EXPORT, "I", TODAY)
    assert records[0].production == Decimal("45.50")
    assert records[1].date.day == 16


def test_record_without_full_company_name_is_dropped():
    text = "1 123456 15 TUR DE 08 A 14 H. AMARRADOR ACME LTD SOME SHIP CARGA"
    assert parse_token_stream(text, "I", TODAY) == []


def test_match_record_start_is_positional():
    tokens = "1 123456 15 TUR DE 08 A 14 H. X".split()
    start = match_record_start(tokens, 0)
    assert start.layout.name == "split"
    assert start.day == 15
    assert start.shift == "08-14"
    assert start.body_start == 9
    assert match_record_start(tokens, 1).layout.name == "merged"
    assert match_record_start(tokens, 2) is None


def test_month_context():
    assert month_context("Records for October of 2025", TODAY) == (2025, 10)
    assert month_context("no header here", TODAY) == (2026, 3)


def test_full_name_spelling_variants_in_one_export():
    text = (
        "1 123456 15 TUR DE 08 A 14 H. AMARRADOR CSP IBERIAN VALENCIA TERMINAL EVER GIVEN CARGA 45.50\n"
        "2 123457 16 TUR DE 08 A 14 H. AMARRADOR MEDITERRANEAN SHIPPING C.TV MSC AURORA CARGA 30.00\n"
        "3 123458 17 TUR DE 08 A 14 H. AMARRADOR MEDITERRANEAN SHIPPING C TV MSC ANNA CARGA\n"
    )
    records = parse_token_stream(text, "I", TODAY)
    assert [r.company for r in records] == ["CSP", "MSC", "MSC"]
    assert [r.ship for r in records] == ["EVER GIVEN", "MSC AURORA", "MSC ANNA"]
    assert [r.production for r in records] == [Decimal("45.50"), Decimal("30.00"), Decimal("0")]


@pytest.mark.parametrize("amount, production", [("30,50", Decimal("30.50")), ("30", Decimal("30"))])
def test_stray_number_before_merged_export(amount, production):
    text = (
        "JORNALES DE MARZO DE 2026 PAGINA 1\n"
        f"123456 15 TUR DE 08 A 14 H. GRUISTA VALENCIA TERMINAL EUROPA MAERSK LIMA CARGA {amount}\n"
        "123457 17 TUR DE 14 A 20 H. GRUISTA APM TERMINALS VALENCIA MSC ANNA CARGA\n"
    )
    records = parse_token_stream(text, "I", TODAY)
    assert [r.company for r in records] == ["VTE", "APM"]
    assert records[0].production == production
    assert records[0].ship == "MAERSK LIMA"
    assert records[1].date == date(2026, 3, 17)


def test_numbered_split_export_keeps_row_numbers_out_of_production():
    text = (
        "1 123456 15 TUR DE 08 A 14 H. AMARRADOR APM TERMINALS VALENCIA EVER GIVEN CARGA\n"
        "2 123457 16 TUR DE 08 A 14 H. AMARRADOR APM TERMINALS VALENCIA EVER GIVEN CARGA\n"
    )
    records = parse_token_stream(text, "I", TODAY)
    assert [r.production for r in records] == [Decimal("0"), Decimal("0")]
    assert [r.date.day for r in records] == [15, 16]
