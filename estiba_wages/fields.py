"""
Field extraction for one pasted line: shift window, date, specialty, company,
vessel, production. Helpers here are shared by the bulk dialects in parser.py.
"""
import re
from datetime import date
from decimal import Decimal
from typing import Optional

from .companies import COMPANY_PATTERN, find_company, normalize_company
from .records import GROUP_II, JOURNAL_TYPES, ShiftRecord, ZERO, to_money
from .time_utils import (
    find_day_month,
    find_shift_phrase,
    strip_date_tokens,
    strip_shift_phrase,
)

# Specialty marker that always pays as group II (labor agreement, first-class driver)
GROUP_II_MARKERS = ("CONDUCTOR 1A", "DRIVER 1ST CLASS")

# Operation descriptions closing the vessel cell
OPERATION_MARKERS = (
    "CARGA/DESCARGA", "CARGA", "DESCARGA", "C/D", "TRINCA", "DESTRINCA",
    "LOADING", "UNLOADING", "LOAD", "DISCHARGE",
)
OPERATION_PATTERN = "(?:" + "|".join(re.escape(m) for m in OPERATION_MARKERS) + ")"
OPERATION_RE = re.compile(r"(?<![\w/])" + OPERATION_PATTERN + r"(?![\w/])", re.IGNORECASE)
OPERATION_SUFFIX_RE = re.compile(r"\s+" + OPERATION_PATTERN + r"(?![\w/]).*$", re.IGNORECASE)

# Decimal-looking amount standing on its own: 45.50 / 45,50 / 1.234,56 is not supported
AMOUNT_RE = re.compile(r"(?<![\w.,/-])\d{1,6}[.,]\d{1,2}(?![\w.,/])")
TRAILING_AMOUNT_RE = re.compile(r"\s+\d{1,6}(?:[.,]\d{1,2})?\s*$")

# Text following the shift phrase: "<specialty> <company> <rest>"
DETAILS_RE = re.compile(
    r"^\s*(?P<specialty>.+?)\s+(?P<company>\b" + COMPANY_PATTERN + r")(?![\w])(?P<rest>.*)$",
    re.IGNORECASE,
)

CELL_SPLIT_RE = re.compile(r"\t|\s{2,}")


def has_group_ii_marker(text: Optional[str]) -> bool:
    upper = (text or "").upper()
    return any(marker in upper for marker in GROUP_II_MARKERS)


def resolve_group(text: Optional[str], default_group: Optional[str]) -> Optional[str]:
    """First-class driver specialty forces group II; otherwise the caller's group."""
    return GROUP_II if has_group_ii_marker(text) else default_group


def is_operation_marker(text: Optional[str]) -> bool:
    return bool(text) and OPERATION_RE.fullmatch(text.strip()) is not None


def recognized_journal_type(value: Optional[str]) -> Optional[str]:
    """TUR / NUD pass through, anything else is dropped."""
    v = (value or "").strip().upper()
    return v if v in JOURNAL_TYPES else None


def extract_production(text: str) -> Decimal:
    """Last decimal-looking amount once shift phrases and date tokens are removed. Default 0."""
    cleaned = strip_date_tokens(strip_shift_phrase(text or ""))
    amounts = AMOUNT_RE.findall(cleaned)
    if not amounts:
        return ZERO
    return to_money(amounts[-1])


def clean_vessel(rest: Optional[str]) -> Optional[str]:
    """Text after the company: drop trailing amount and operation suffix, keep the first cell."""
    if not rest:
        return None
    text = rest.strip(" \t.-:")
    text = TRAILING_AMOUNT_RE.sub("", " " + text).strip()
    text = OPERATION_SUFFIX_RE.sub("", " " + text).strip()
    text = TRAILING_AMOUNT_RE.sub("", " " + text).strip()
    if is_operation_marker(text):
        return None
    cells = [c.strip() for c in CELL_SPLIT_RE.split(text) if c.strip()]
    if not cells:
        return None
    return cells[0].upper()


def build_label(shift: str, specialty: Optional[str]) -> str:
    if specialty:
        return f"{shift} {specialty}"
    return f"{shift} JORNAL ESTIBA"


def parse_single_line(line: str, group: Optional[str], today: Optional[date] = None) -> Optional[ShiftRecord]:
    """
    Parse one pasted line into a partial record.
    Returns None when the line has no shift-window phrase (headers, noise).
    """
    if not line or not line.strip():
        return None
    today = today or date.today()
    upper = line.upper().strip()

    found = find_shift_phrase(upper)
    if not found:
        return None
    shift, (_, phrase_end) = found

    record = ShiftRecord(
        group=resolve_group(upper, group),
        shift=shift,
        date=find_day_month(upper, today) or today,
        production=extract_production(upper),
    )

    details = upper[phrase_end:]
    m = DETAILS_RE.match(details)
    if m:
        record.specialty = m.group("specialty").strip()
        record.company = normalize_company(m.group("company"))
        record.ship = clean_vessel(m.group("rest"))
    else:
        # company right after the shift phrase, no specialty text
        company = find_company(details)
        if company:
            record.company = normalize_company(company.group(1))
            record.ship = clean_vessel(details[company.end():])
    record.label = build_label(shift, record.specialty)
    return record
