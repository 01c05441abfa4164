"""Tests for day-type classification."""

from __future__ import annotations

from datetime import date

from estiba_wages.day_types import HOLIDAYS, get_day_type, is_holiday


def test_sunday_is_festivo():
    assert get_day_type(date(2026, 3, 15)) == "FESTIVO"


def test_listed_holiday_is_festivo():
    # San José, a Thursday
    assert get_day_type(date(2026, 3, 19)) == "FESTIVO"


def test_saturday_is_sabado():
    assert get_day_type(date(2026, 3, 14)) == "SABADO"


def test_weekday_is_laborable():
    assert get_day_type(date(2026, 3, 10)) == "LABORABLE"


def test_holiday_on_saturday_is_festivo():
    # Día de la Asunción 2026 falls on a Saturday
    assert get_day_type(date(2026, 8, 15)) == "FESTIVO"


def test_iso_string_is_read_as_local_date():
    assert get_day_type("2026-03-19") == "FESTIVO"
    assert is_holiday("2026-04-06")


def test_holiday_set_is_year_specific():
    assert "2026-12-25" in HOLIDAYS
    assert not is_holiday(date(2027, 3, 19))


def test_custom_holiday_set():
    assert is_holiday(date(2026, 3, 10), frozenset({"2026-03-10"}))
    assert get_day_type(date(2026, 3, 19), frozenset()) == "LABORABLE"
