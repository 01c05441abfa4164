"""
Produce JSON-serializable structures for the web API, and read entries back from them.
Money is sent as strings with two decimals so no float rounding happens on the way.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from .records import CompletedShiftEntry, ShiftRecord
from .time_utils import parse_local_date
from .wages import Totals


def _money(value) -> str:
    return f"{value:.2f}"


def entry_to_dict(e: CompletedShiftEntry) -> Dict[str, Any]:
    return {
        "id": e.entry_id,
        "date": e.date.isoformat(),
        "group": e.group,
        "day_type": e.day_type,
        "shift": e.shift,
        "base": _money(e.base),
        "production": _money(e.production),
        "extras": _money(e.extras),
        "total": _money(e.total),
        "net": _money(e.net),
        "irpf": e.irpf,
        "label": e.label,
        "specialty": e.specialty,
        "company": e.company,
        "ship": e.ship,
        "journal_type": e.journal_type,
    }


def record_from_dict(data: Dict[str, Any]) -> ShiftRecord:
    """Source fields of a stored entry (as produced by entry_to_dict) -> record to recalculate."""
    raw_date = data.get("date")
    return ShiftRecord(
        date=parse_local_date(raw_date) if raw_date else None,
        group=data.get("group"),
        shift=data.get("shift"),
        specialty=data.get("specialty"),
        company=data.get("company"),
        ship=data.get("ship"),
        production=data.get("production"),
        extras=data.get("extras"),
        journal_type=data.get("journal_type"),
        label=data.get("label") or "",
        entry_id=data.get("id"),
    )


def totals_to_dict(t: Totals) -> Dict[str, Any]:
    return {
        "count": t.count,
        "gross": _money(t.gross),
        "net": _money(t.net),
        "withheld": _money(t.withheld),
    }


def build_api_response(
    entries: List[CompletedShiftEntry],
    totals: Totals,
    detected: int,
    dialect: Optional[str] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Build JSON-serializable response for the web API."""
    return {
        "dialect": dialect,
        "summary": {
            "detected": detected,
            "calculated": totals.count,
            "skipped": detected - totals.count,
        },
        "totals": totals_to_dict(totals),
        "entries": [entry_to_dict(e) for e in entries],
        "parsed_on": (today or date.today()).isoformat(),
    }
