"""Tests for shift phrases and date tokens."""

from __future__ import annotations

from datetime import date

from estiba_wages.time_utils import (
    find_day_month,
    find_shift_phrase,
    month_number,
    parse_local_date,
    shift_window_from_hours,
    strip_shift_phrase,
)

TODAY = date(2026, 3, 10)


def test_spanish_shift_phrase():
    window, span = find_shift_phrase("DE 08 A 14 H. AMARRADOR")
    assert window == "08-14"
    assert span == (0, len("DE 08 A 14 H."))


def test_english_shift_phrase():
    assert find_shift_phrase("shift 20 to 02 h.")[0] == "20-02"
    assert find_shift_phrase("from 2 to 8 hours")[0] == "02-08"


def test_dash_with_suffix():
    assert find_shift_phrase("14-20 h")[0] == "14-20"


def test_bare_pair_is_not_a_shift():
    assert find_shift_phrase("20-02") is None


def test_unknown_window_is_ignored():
    assert find_shift_phrase("DE 09 A 15 H.") is None


def test_shift_window_from_hours():
    assert shift_window_from_hours(20, 2) == "20-02"
    assert shift_window_from_hours(2, 20) is None


def test_day_month_uses_today_year():
    assert find_day_month("15/03 DE 08 A 14 H.", TODAY) == date(2026, 3, 15)


def test_day_month_with_year():
    assert find_day_month("01-04-27", TODAY) == date(2027, 4, 1)


def test_invalid_day_month_skipped():
    assert find_day_month("31/02 then 02/03", TODAY) == date(2026, 3, 2)


def test_shift_phrase_not_read_as_date():
    assert find_day_month("DE 20 A 02 H.", TODAY) is None
    assert strip_shift_phrase("X DE 08 A 14 H. Y").split() == ["X", "Y"]


def test_parse_local_date():
    assert parse_local_date("2026-03-15") == date(2026, 3, 15)
    assert parse_local_date(date(2026, 1, 1)) == date(2026, 1, 1)


def test_month_number():
    assert month_number("Marzo") == 3
    assert month_number("OCTOBER") == 10
    assert month_number("Brumaire") is None
