"""
Time handling: shift-window phrases ("DE 08 A 14 H.", "8-14 h"), day/month tokens,
local calendar dates (no timezone conversion), month names for portal headers.
"""
import re
from datetime import date, timedelta
from typing import Dict, Optional, Tuple

from .records import SHIFT_02_08, SHIFT_08_14, SHIFT_14_20, SHIFT_20_02

# (start hour, end hour) -> shift window
WINDOW_BY_HOURS: Dict[Tuple[int, int], str] = {
    (2, 8): SHIFT_02_08,
    (8, 14): SHIFT_08_14,
    (14, 20): SHIFT_14_20,
    (20, 2): SHIFT_20_02,
}

# Shift phrase: optional keyword, two hour tokens, separator variants, optional hours suffix.
# A match counts only with a keyword or a suffix, so bare "20-02" (a date) is not a shift.
SHIFT_PHRASE_RE = re.compile(
    r"(?P<kw>\b(?:DE|SHIFT|FROM|TURNO)\s+)?"
    r"(?<![\d/.,])(?P<start>\d{1,2})\s*(?:\bA\b|\bTO\b|-|–)\s*(?P<end>\d{1,2})(?![\d/.,])"
    r"(?P<suffix>\s*H(?:ORAS|OURS|RS)?\b\.?)?",
    re.IGNORECASE,
)

# DD/MM, DD-MM, optional /YY or /YYYY
DAY_MONTH_RE = re.compile(r"(?<![\d/.,])(\d{1,2})[/-](\d{1,2})(?:[/-](\d{4}|\d{2}))?(?![\d/.,])")

MONTHS: Dict[str, int] = {
    "ENERO": 1, "FEBRERO": 2, "MARZO": 3, "ABRIL": 4, "MAYO": 5, "JUNIO": 6,
    "JULIO": 7, "AGOSTO": 8, "SEPTIEMBRE": 9, "SETIEMBRE": 9, "OCTUBRE": 10,
    "NOVIEMBRE": 11, "DICIEMBRE": 12,
    "JANUARY": 1, "FEBRUARY": 2, "MARCH": 3, "APRIL": 4, "MAY": 5, "JUNE": 6,
    "JULY": 7, "AUGUST": 8, "SEPTEMBER": 9, "OCTOBER": 10, "NOVEMBER": 11,
    "DECEMBER": 12,
}


def shift_window_from_hours(start: int, end: int) -> Optional[str]:
    """(8, 14) -> '08-14'. Returns None if not one of the four windows."""
    return WINDOW_BY_HOURS.get((start, end))


def find_shift_phrase(text: str) -> Optional[Tuple[str, Tuple[int, int]]]:
    """First recognizable shift phrase in text -> (window, (span_start, span_end))."""
    if not text:
        return None
    for m in SHIFT_PHRASE_RE.finditer(text):
        if not m.group("kw") and not m.group("suffix"):
            continue
        window = shift_window_from_hours(int(m.group("start")), int(m.group("end")))
        if window:
            return window, m.span()
    return None


def strip_shift_phrase(text: str) -> str:
    """Remove every recognized shift phrase (keeps hour digits out of money/day searches)."""
    out = text
    while True:
        found = find_shift_phrase(out)
        if not found:
            return out
        _, (a, b) = found
        out = out[:a] + " " + out[b:]


def strip_date_tokens(text: str) -> str:
    return DAY_MONTH_RE.sub(" ", text)


def _full_year(raw: Optional[str], default_year: int) -> int:
    if not raw:
        return default_year
    year = int(raw)
    return 2000 + year if len(raw) == 2 else year


def make_date(year: int, month: int, day: int) -> Optional[date]:
    """Local calendar date, or None if the combination is invalid (31/02)."""
    try:
        return date(year, month, day)
    except ValueError:
        return None


def find_day_month(text: str, today: date) -> Optional[date]:
    """First valid DD/MM[/YY] token in text (shift phrases ignored). Year defaults to today's."""
    if not text:
        return None
    for m in DAY_MONTH_RE.finditer(strip_shift_phrase(text)):
        d = make_date(_full_year(m.group(3), today.year), int(m.group(2)), int(m.group(1)))
        if d is not None:
            return d
    return None


def parse_local_date(value) -> date:
    """'2026-03-15' or date -> date. Strings are read as local calendar dates."""
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def next_day(d: date) -> date:
    return d + timedelta(days=1)


def month_number(name: str) -> Optional[int]:
    """Spanish or English month name (any case) -> 1..12."""
    return MONTHS.get((name or "").strip().upper())
