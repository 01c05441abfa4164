"""
Token-stream layout: the portal export where every cell is its own token
(one per line, or whitespace separated). Records are found positionally:

    index  id  day  journal  shift-phrase  specialty...  COMPANY FULL NAME  vessel...  operation  [amount]

Alternate sub-variant: index and id merged into one 4-7 digit token.
"""
import re
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from .companies import FULL_NAME_RE, normalize_company
from .fields import build_label, is_operation_marker, resolve_group
from .records import ShiftRecord, ZERO, to_money
from .time_utils import make_date, month_number, shift_window_from_hours

# "JORNALES DE MARZO DE 2026" / "Records for March of 2026"
HEADER_RE = re.compile(
    r"\b(?:JORNALES|RECORDS)\s+(?:DE|FOR)\s+([^\W\d_]+)\s+(?:DE|OF)\s+(\d{4})\b",
    re.IGNORECASE,
)

SHIFT_TOKENS_RE = re.compile(
    r"(?:(?:DE|FROM|SHIFT|TURNO)\s+)?(\d{1,2})\s*(?:A|TO|-|–)\s*(\d{1,2})(?:\s*H(?:ORAS|OURS|RS)?\.?)?",
    re.IGNORECASE,
)
MAX_SHIFT_TOKENS = 5
MAX_COMPANY_TOKENS = 5

INDEX_RE = re.compile(r"^\d{1,3}$")
ID_RE = re.compile(r"^\d{3,7}$")
MERGED_ID_RE = re.compile(r"^\d{4,7}$")
DAY_RE = re.compile(r"^\d{1,2}$")
JOURNAL_RE = re.compile(r"^[A-Za-z]{3,4}$")
AMOUNT_TOKEN_RE = re.compile(r"^\d{1,6}(?:[.,]\d{1,2})?$")


@dataclass(frozen=True)
class StartLayout:
    """Named token offsets of a record start, relative to its first token."""
    name: str
    index: Optional[int]
    entry_id: int
    day: int
    journal: int
    shift: int


SPLIT_LAYOUT = StartLayout("split", index=0, entry_id=1, day=2, journal=3, shift=4)
MERGED_LAYOUT = StartLayout("merged", index=None, entry_id=0, day=1, journal=2, shift=3)
LAYOUTS = (SPLIT_LAYOUT, MERGED_LAYOUT)


@dataclass(frozen=True)
class RecordStart:
    layout: StartLayout
    position: int
    index: Optional[int]  # row number, split layout only
    day: int
    journal_type: str
    shift: str
    body_start: int  # first token after the shift phrase


def match_shift_tokens(tokens: Sequence[str], pos: int) -> Optional[Tuple[str, int]]:
    """Shift phrase spanning tokens[pos:pos+n] -> (window, n). Longest phrase wins."""
    for width in range(MAX_SHIFT_TOKENS, 0, -1):
        window = tokens[pos:pos + width]
        if len(window) < width:
            continue
        m = SHIFT_TOKENS_RE.fullmatch(" ".join(window))
        if not m:
            continue
        shift = shift_window_from_hours(int(m.group(1)), int(m.group(2)))
        if shift:
            return shift, width
    return None


def _token(tokens: Sequence[str], pos: int) -> str:
    return tokens[pos] if 0 <= pos < len(tokens) else ""


def match_record_start(
    tokens: Sequence[str],
    pos: int,
    layouts: Sequence[StartLayout] = LAYOUTS,
) -> Optional[RecordStart]:
    """Pure predicate: does a record begin at tokens[pos]? Looks at a bounded window only."""
    for layout in layouts:
        if layout.index is not None:
            if not INDEX_RE.match(_token(tokens, pos + layout.index)):
                continue
            if not ID_RE.match(_token(tokens, pos + layout.entry_id)):
                continue
        elif not MERGED_ID_RE.match(_token(tokens, pos + layout.entry_id)):
            continue
        day_tok = _token(tokens, pos + layout.day)
        if not DAY_RE.match(day_tok) or not 1 <= int(day_tok) <= 31:
            continue
        journal_tok = _token(tokens, pos + layout.journal)
        if not JOURNAL_RE.match(journal_tok):
            continue
        shift = match_shift_tokens(tokens, pos + layout.shift)
        if not shift:
            continue
        window, width = shift
        return RecordStart(
            layout=layout,
            position=pos,
            index=int(_token(tokens, pos + layout.index)) if layout.index is not None else None,
            day=int(day_tok),
            journal_type=journal_tok.upper(),
            shift=window,
            body_start=pos + layout.shift + width,
        )
    return None


class TokenCursor:
    """Forward-only cursor over the token sequence."""

    def __init__(self, tokens: Sequence[str]) -> None:
        self.tokens = list(tokens)
        self.pos = 0

    def find_start(
        self,
        from_pos: Optional[int] = None,
        layouts: Sequence[StartLayout] = LAYOUTS,
    ) -> Optional[RecordStart]:
        """Next record start at or after from_pos (default: cursor position). Does not move."""
        i = self.pos if from_pos is None else from_pos
        while i < len(self.tokens):
            start = match_record_start(self.tokens, i, layouts)
            if start is not None:
                return start
            i += 1
        return None

    def take(self, start: int, end: int) -> List[str]:
        """Tokens[start:end]; cursor moves to end."""
        self.pos = end
        return self.tokens[start:end]


def _find_company(body: Sequence[str]) -> Optional[Tuple[int, int]]:
    """First full company name in body -> (position, token count). Spacing variants of a name are accepted."""
    for i in range(len(body)):
        for width in range(MAX_COMPANY_TOKENS, 0, -1):
            window = body[i:i + width]
            if len(window) == width and FULL_NAME_RE.fullmatch(" ".join(window)):
                return i, width
    return None


def _decode_body(body: List[str]):
    """body tokens -> (specialty, company, vessel, production) or None without a company anchor."""
    found = _find_company(body)
    if found is None:
        return None
    at, width = found
    company = normalize_company(" ".join(body[at:at + width]))
    specialty = " ".join(body[:at]).upper() or None
    after = body[at + width:]

    op_at = next((i for i, t in enumerate(after) if is_operation_marker(t)), None)
    if op_at is not None:
        vessel_tokens = after[:op_at]
        tail = after[op_at + 1:]
    else:
        vessel_tokens, tail = after, []
        if vessel_tokens and AMOUNT_TOKEN_RE.match(vessel_tokens[-1]):
            vessel_tokens, tail = vessel_tokens[:-1], vessel_tokens[-1:]

    production = ZERO
    if tail and AMOUNT_TOKEN_RE.match(tail[-1]):
        production = to_money(tail[-1])
    vessel = " ".join(vessel_tokens).upper() or None
    return specialty, company, vessel, production


def month_context(text: str, today: date) -> Tuple[int, int]:
    """(year, month) from a portal header line, else today's."""
    m = HEADER_RE.search(text or "")
    if m:
        month = month_number(m.group(1))
        if month:
            return int(m.group(2)), month
    return today.year, today.month


def _chain(cursor: TokenCursor, first: RecordStart) -> List[RecordStart]:
    """first plus every later start of the same layout (one export uses one layout)."""
    starts = [first]
    following = cursor.find_start(first.body_start, (first.layout,))
    while following is not None:
        starts.append(following)
        following = cursor.find_start(following.body_start, (following.layout,))
    return starts


def _numbered_in_sequence(starts: Sequence[RecordStart]) -> bool:
    return all(b.index == a.index + 1 for a, b in zip(starts, starts[1:]))


def record_starts(cursor: TokenCursor) -> List[RecordStart]:
    """
    Every record start of the export, in order.

    A split start "1 123456 15 TUR ..." is also a merged start one token later, so
    a stray number before a merged export ("PAGINA 1") reads as a split start.
    Both readings are chained; the merged one wins when it finds more records, or
    as many while the split row numbers do not run 1, 2, 3...
    """
    first = cursor.find_start()
    if first is None:
        return []
    starts = _chain(cursor, first)
    if first.layout is not SPLIT_LAYOUT:
        return starts
    alternative = match_record_start(cursor.tokens, first.position + 1, (MERGED_LAYOUT,))
    if alternative is None:
        return starts
    merged = _chain(cursor, alternative)
    if len(merged) > len(starts) or (len(merged) == len(starts) and not _numbered_in_sequence(starts)):
        return merged
    return starts


def parse_token_stream(text: str, group: Optional[str], today: Optional[date] = None) -> List[ShiftRecord]:
    """Decode every record of the token-stream layout. Empty list when the layout does not apply."""
    today = today or date.today()
    year, month = month_context(text, today)
    cursor = TokenCursor((text or "").split())
    starts = record_starts(cursor)
    records: List[ShiftRecord] = []

    for k, start in enumerate(starts):
        body_end = starts[k + 1].position if k + 1 < len(starts) else len(cursor.tokens)
        body = cursor.take(start.body_start, body_end)
        decoded = _decode_body(body)
        if decoded is None:
            logger.debug("token stream: no company after record start at token {}", start.position)
            continue
        specialty, company, vessel, production = decoded
        records.append(ShiftRecord(
            date=make_date(year, month, start.day),
            group=resolve_group(specialty, group),
            shift=start.shift,
            specialty=specialty,
            company=company,
            ship=vessel,
            production=production,
            journal_type=start.journal_type,
            label=build_label(start.shift, specialty),
        ))
    return records
