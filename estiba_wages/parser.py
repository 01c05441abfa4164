"""
Bulk parser for text pasted from the port employment portal.

Three layouts, tried in fixed order; the first one that yields a record wins:
  1. token stream  (cell per token, positional)
  2. compact row   (one strict line per record)
  3. free text     (heuristic fallback, a record per shift phrase)
Structured layouts go first: they are unambiguous, the fallback is not.
"""
import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from loguru import logger

from .companies import FULL_NAME_PATTERN, find_company, is_company_line, normalize_company
from .fields import (
    OPERATION_PATTERN,
    build_label,
    clean_vessel,
    extract_production,
    is_operation_marker,
    parse_single_line,
    recognized_journal_type,
    resolve_group,
)
from .records import ShiftRecord, to_money
from .time_utils import (
    find_day_month,
    find_shift_phrase,
    make_date,
    shift_window_from_hours,
    strip_date_tokens,
)
from .token_stream import month_context, parse_token_stream

DIALECT_TOKEN_STREAM = "token_stream"
DIALECT_COMPACT_ROW = "compact_row"
DIALECT_FREE_TEXT = "free_text"

COMPACT_ROW_RE = re.compile(
    r"^\s*(?P<index>\d{1,3})\s+"            # row index
    r"(?P<id>\d{3,7})\s+"                   # record id
    r"(?P<day>\d{1,2})\s+"                  # day of month
    r"(?P<journal>[A-Z]{3,4})\s+"           # journal type
    r"(?:DE|FROM)\s+(?P<start>\d{1,2})\s+(?:A|TO)\s+(?P<end>\d{1,2})\s+(?:HORAS|HOURS|H\.?)\s+"
    r"(?P<specialty>.+?)\s+"
    r"(?P<company>" + FULL_NAME_PATTERN + r")\s+"
    r"(?P<vessel>.+?)\s+"
    r"(?P<operation>" + OPERATION_PATTERN + r")"
    r"(?:\s+(?P<amount>\d{1,6}(?:[.,]\d{1,2})?))?\s*$",
    re.IGNORECASE,
)

STANDALONE_DAY_RE = re.compile(r"(?<![\w.,/-])(\d{1,2})(?![\w.,/-])")
NUMERIC_LINE_RE = re.compile(r"^[\d\s.,/:-]+$")
MAX_LEAD_LINES = 3


@dataclass
class Segmentation:
    """Records found in one pasted text, and the layout that produced them."""
    dialect: Optional[str]
    records: List[ShiftRecord] = field(default_factory=list)


def parse_compact_rows(text: str, group: Optional[str], today: Optional[date] = None) -> List[ShiftRecord]:
    """One record per line matching the compact-row grammar; other lines are ignored."""
    today = today or date.today()
    year, month = month_context(text, today)
    records = []
    for line in (text or "").splitlines():
        m = COMPACT_ROW_RE.match(line.strip())
        if not m:
            continue
        shift = shift_window_from_hours(int(m.group("start")), int(m.group("end")))
        day = int(m.group("day"))
        if not shift or not 1 <= day <= 31:
            continue
        specialty = m.group("specialty").strip().upper()
        records.append(ShiftRecord(
            date=make_date(year, month, day),
            group=resolve_group(specialty, group),
            shift=shift,
            specialty=specialty,
            company=normalize_company(m.group("company")),
            ship=m.group("vessel").strip().upper() or None,
            production=to_money(m.group("amount")),
            journal_type=m.group("journal").upper(),
            label=build_label(shift, specialty),
        ))
    return records


def _lone_day(line: Optional[str]) -> Optional[int]:
    """Line that holds nothing but a 1-31 integer."""
    s = (line or "").strip()
    if s.isdigit() and len(s) <= 2 and 1 <= int(s) <= 31:
        return int(s)
    return None


def _day_before_phrase(text: str) -> Optional[int]:
    """Standalone 1-31 integer closest to (before) the shift phrase."""
    days = [int(d) for d in STANDALONE_DAY_RE.findall(strip_date_tokens(text)) if 1 <= int(d) <= 31]
    return days[-1] if days else None


def _is_detail_line(line: str) -> bool:
    """Candidate specialty / vessel line: text, not a company, operation, journal type or number."""
    s = line.strip()
    if not s or NUMERIC_LINE_RE.match(s):
        return False
    if is_company_line(s) or is_operation_marker(s) or recognized_journal_type(s):
        return False
    return not find_shift_phrase(s.upper())


def _first_detail_index(lines: Sequence[str], start: int, stop: int) -> Optional[int]:
    for i in range(start, min(stop, len(lines))):
        if _is_detail_line(lines[i]):
            return i
    return None


def _lead_start(lines: Sequence[str], boundary: int, floor: int) -> int:
    """
    Index of the first line of the day / journal-type preamble right above a shift
    phrase ("15", "TUR"). Those lines belong to the record below, not the one above.
    """
    i = boundary
    while i > floor and boundary - i < MAX_LEAD_LINES:
        line = lines[i - 1]
        if line.strip() and _lone_day(line) is None and not recognized_journal_type(line):
            break
        i -= 1
    return i


def _journal_type_in(lines: Sequence[str]) -> Optional[str]:
    for line in lines:
        for tok in line.split():
            jt = recognized_journal_type(tok)
            if jt:
                return jt
    return None


def _parse_free_text_segment(
    lines: List[str],
    lead: List[str],
    group: Optional[str],
    today: date,
    year: int,
    month: int,
) -> ShiftRecord:
    # boundary line first, as a single line; the rest of the segment refines it
    record = parse_single_line(lines[0], group, today)
    boundary = lines[0].strip().upper()
    _, (phrase_start, _) = find_shift_phrase(boundary)
    segment_text = "\n".join(lines).upper()

    # Date: day/month token, then a day near the shift phrase, then today
    when = find_day_month(segment_text, today)
    if when is None:
        day = _day_before_phrase(boundary[:phrase_start])
        if day is None:
            day = next((d for d in map(_lone_day, reversed(lead)) if d is not None), None)
        if day is None:
            day = next((d for d in map(_lone_day, lines[1:]) if d is not None), None)
        if day is not None:
            when = make_date(year, month, day)
    record.date = when or today
    record.group = resolve_group(segment_text, group)
    record.production = extract_production(segment_text)
    record.journal_type = _journal_type_in(lead + lines[:1])

    company_index = 0 if record.company else None
    if company_index is None:
        for i, line in enumerate(lines[1:], start=1):
            m = find_company(line.upper())
            if m:
                record.company = normalize_company(m.group(1))
                record.ship = clean_vessel(line.upper()[m.end():])
                company_index = i
                break

    # Specialty: first detail line between the shift phrase and the company line,
    # else the boundary text before the company
    stop = company_index if company_index is not None else len(lines)
    specialty_at = _first_detail_index(lines, 1, stop)
    if specialty_at is not None:
        record.specialty = lines[specialty_at].strip().upper()
    if record.ship is None and company_index is not None:
        ship_at = _first_detail_index(lines, max(company_index, specialty_at or 0) + 1, len(lines))
        if ship_at is not None:
            record.ship = lines[ship_at].strip().upper()
    record.label = build_label(record.shift, record.specialty)
    return record


def parse_free_text(text: str, group: Optional[str], today: Optional[date] = None) -> List[ShiftRecord]:
    """Heuristic fallback: every line with a shift phrase opens a record that runs to the next one."""
    today = today or date.today()
    year, month = month_context(text, today)
    lines = (text or "").splitlines()
    boundaries = [i for i, line in enumerate(lines) if find_shift_phrase(line.upper())]
    lead_starts = [
        _lead_start(lines, start, boundaries[k - 1] + 1 if k else 0)
        for k, start in enumerate(boundaries)
    ]
    records = []
    for k, start in enumerate(boundaries):
        end = lead_starts[k + 1] if k + 1 < len(boundaries) else len(lines)
        lead = lines[lead_starts[k]:start]
        records.append(_parse_free_text_segment(lines[start:end], lead, group, today, year, month))
    return records


Dialect = Tuple[str, Callable[[str, Optional[str], Optional[date]], List[ShiftRecord]]]

DIALECTS: Tuple[Dialect, ...] = (
    (DIALECT_TOKEN_STREAM, parse_token_stream),
    (DIALECT_COMPACT_ROW, parse_compact_rows),
    (DIALECT_FREE_TEXT, parse_free_text),
)


def segment_text(text: str, group: Optional[str], today: Optional[date] = None) -> Segmentation:
    """Try each layout in order; stop at the first that produces records."""
    if not text or not text.strip():
        return Segmentation(dialect=None)
    for name, parse in DIALECTS:
        records = parse(text, group, today)
        if records:
            logger.debug("parsed {} record(s) as {}", len(records), name)
            return Segmentation(dialect=name, records=records)
    logger.debug("no layout recognized in {} line(s)", len(text.splitlines()))
    return Segmentation(dialect=None)


def parse_bulk_text(text: str, group: Optional[str], today: Optional[date] = None) -> List[ShiftRecord]:
    return segment_text(text, group, today).records


def extract_text_from_pdf(pdf_path: Path) -> str:
    """
    Text of every page of a portal printout, in reading order.
    Uses pdfplumber extract_text(); pages with no text layer contribute nothing.
    """
    try:
        import pdfplumber
    except ImportError:
        raise RuntimeError("pdfplumber is required for PDF input. pip install pdfplumber")
    with pdfplumber.open(pdf_path) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return "\n".join(p for p in pages if p)


def extract_text_from_file(path: Path) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def load_text(path: Path) -> str:
    """Load portal text from PDF or plain text."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(str(path))
    if path.suffix.lower() == ".pdf":
        return extract_text_from_pdf(path)
    return extract_text_from_file(path)
