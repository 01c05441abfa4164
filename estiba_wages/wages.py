"""
Wage calculation: base (salary table + overnight-holiday bridging) + production + extras
-> gross, then net after IRPF withholding.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional

from .day_types import HOLIDAYS, get_day_type
from .fields import recognized_journal_type
from .records import (
    DEFAULT_LABEL,
    CompletedShiftEntry,
    ShiftRecord,
    ZERO,
    round2,
    to_money,
)
from .salary_table import SalaryTable, resolve_base
from .time_utils import parse_local_date

ONE = Decimal("1")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class Totals:
    """Balance over a set of entries."""
    count: int
    gross: Decimal
    net: Decimal
    withheld: Decimal


def _optional_text(value: Any) -> Optional[str]:
    return str(value) if value else None


def calculate_shift_total(
    record: ShiftRecord,
    irpf_percent: Any = 0,
    salary_table: Optional[SalaryTable] = None,
    festive_rates: Optional[Mapping[str, Mapping[str, Decimal]]] = None,
    holidays=HOLIDAYS,
) -> Optional[CompletedShiftEntry]:
    """
    Completed entry for one record, or None when date, group or shift is missing.

    gross = round2(base + production + extras)
    net   = round2(gross * (1 - irpf / 100))

    irpf_percent is not range-checked; it is stored on the entry as given so the
    entry can be recomputed later with a different rate.
    """
    if not record.date or not record.group or not record.shift:
        return None
    day = parse_local_date(record.date)
    production = round2(to_money(record.production))
    extras = round2(to_money(record.extras))
    irpf = to_money(irpf_percent)

    base = round2(resolve_base(record.group, day, record.shift, salary_table, festive_rates, holidays))
    gross = round2(base + production + extras)
    net = round2(gross * (ONE - irpf / HUNDRED))

    return CompletedShiftEntry(
        date=day,
        group=record.group,
        day_type=get_day_type(day, holidays),
        shift=record.shift,
        base=base,
        production=production,
        extras=extras,
        total=gross,
        net=net,
        irpf=irpf_percent,
        label=str(record.label or DEFAULT_LABEL),
        specialty=_optional_text(record.specialty),
        company=_optional_text(record.company),
        ship=_optional_text(record.ship),
        journal_type=recognized_journal_type(record.journal_type),
        entry_id=record.entry_id,
    )


def calculate_records(
    records: Iterable[ShiftRecord],
    irpf_percent: Any = 0,
    salary_table: Optional[SalaryTable] = None,
    festive_rates: Optional[Mapping[str, Mapping[str, Decimal]]] = None,
    holidays=HOLIDAYS,
) -> List[CompletedShiftEntry]:
    """Calculate every record, dropping incomplete ones."""
    entries = []
    for record in records:
        entry = calculate_shift_total(record, irpf_percent, salary_table, festive_rates, holidays)
        if entry is not None:
            entries.append(entry)
    return entries


def recalculate_entries(
    entries: Iterable[CompletedShiftEntry],
    irpf_percent: Any,
    salary_table: Optional[SalaryTable] = None,
    festive_rates: Optional[Mapping[str, Mapping[str, Decimal]]] = None,
    holidays=HOLIDAYS,
) -> List[CompletedShiftEntry]:
    """
    New entries for a changed withholding rate (or table). Each entry is rebuilt from
    its own source fields; results do not depend on order or on each other.
    """
    return calculate_records(
        (e.to_record() for e in entries), irpf_percent, salary_table, festive_rates, holidays,
    )


def summarize_entries(entries: Iterable[CompletedShiftEntry]) -> Totals:
    count = 0
    gross = net = ZERO
    for e in entries:
        count += 1
        gross += e.total
        net += e.net
    return Totals(count=count, gross=gross, net=net, withheld=gross - net)
