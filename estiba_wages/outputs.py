"""
Outputs: human-readable entry listing, run summary, entries CSV.
"""
import csv
from pathlib import Path
from typing import List, Optional

from .records import CompletedShiftEntry
from .wages import Totals

ENTRY_COLUMNS = [
    "entry_id", "date", "group", "day_type", "shift", "journal_type", "label",
    "specialty", "company", "ship", "base", "production", "extras", "total", "net", "irpf",
]


def _money(value) -> str:
    return f"{value:.2f}"


def format_entries_output(entries: List[CompletedShiftEntry]) -> str:
    """One block per shift, for checking against the payslip."""
    lines = []
    for e in entries:
        lines.append(f"{e.date.strftime('%d/%m/%Y')}  {e.shift}  G.{e.group}  {e.day_type}")
        lines.append(f"  {e.label}")
        if e.ship or e.company:
            lines.append(f"  Vessel: {e.ship or '-'} at {e.company or '-'}")
        jt = f"  [{e.journal_type}]" if e.journal_type else ""
        lines.append(
            f"  Base {_money(e.base)} + Production {_money(e.production)}"
            + (f" + Extras {_money(e.extras)}" if e.extras else "")
            + f" = {_money(e.total)} gross{jt}"
        )
        lines.append(f"  Net {_money(e.net)} (IRPF {e.irpf}%)")
        lines.append("")
    return "\n".join(lines).rstrip()


def format_run_summary(
    detected: int,
    totals: Totals,
    dialect: Optional[str],
) -> str:
    """Run summary text."""
    return (
        f"Layout: {dialect or 'not recognized'}\n"
        f"Detected shifts: {detected}\n"
        f"Calculated: {totals.count}\n"
        f"Skipped (incomplete): {detected - totals.count}\n"
        f"Gross: {_money(totals.gross)}\n"
        f"IRPF withheld: {_money(totals.withheld)}\n"
        f"Net: {_money(totals.net)}"
    )


def entry_to_row(e: CompletedShiftEntry) -> List[str]:
    return [
        e.entry_id or "", e.date.isoformat(), e.group, e.day_type, e.shift,
        e.journal_type or "", e.label, e.specialty or "", e.company or "", e.ship or "",
        _money(e.base), _money(e.production), _money(e.extras), _money(e.total), _money(e.net),
        str(e.irpf),
    ]


def write_entries_csv(path: Path, entries: List[CompletedShiftEntry]) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        w = csv.writer(f)
        w.writerow(ENTRY_COLUMNS)
        for e in entries:
            w.writerow(entry_to_row(e))
