"""
Base pay per (group, day type, shift window), 2025 port labor agreement.
Built-in defaults are never modified: overrides live in a separate sparse layer
and every load builds a fresh table.
Overrides come from CSV text or an Excel sheet: group, day_type, shift, amount (header row skipped).
"""
import csv
import io
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from loguru import logger

from .day_types import HOLIDAYS, get_day_type, is_holiday
from .records import (
    BRIDGING_KINDS,
    DAY_TYPES,
    FESTIVO,
    FESTIVO_TO_FESTIVO,
    FESTIVO_TO_LABORABLE,
    GROUPS,
    OVERNIGHT_SHIFT,
    SHIFTS,
    ZERO,
    round2,
    to_money,
)
from .time_utils import next_day

CellKey = Tuple[str, str, str]  # (group, day_type, shift)
FestiveNightRates = Dict[str, Dict[str, Decimal]]  # bridging kind -> group -> amount


def _row(*amounts: str) -> Dict[str, Decimal]:
    return dict(zip(SHIFTS, (Decimal(a) for a in amounts)))


# Shifts in order: 02-08, 08-14, 14-20, 20-02
DEFAULT_SALARY_TABLE: Mapping[str, Mapping[str, Mapping[str, Decimal]]] = {
    "I": {
        "LABORABLE": _row("216.50", "163.25", "163.25", "216.50"),
        "SABADO": _row("250.10", "196.40", "229.80", "289.60"),
        "FESTIVO": _row("317.45", "289.60", "289.60", "351.20"),
    },
    "II": {
        "LABORABLE": _row("223.30", "170.05", "170.05", "223.30"),
        "SABADO": _row("256.90", "203.20", "236.60", "296.40"),
        "FESTIVO": _row("324.25", "296.40", "296.40", "358.00"),
    },
    "III": {
        "LABORABLE": _row("230.10", "176.85", "176.85", "230.10"),
        "SABADO": _row("263.70", "210.00", "243.40", "303.20"),
        "FESTIVO": _row("331.05", "303.20", "303.20", "364.80"),
    },
    "IV": {
        "LABORABLE": _row("236.90", "183.65", "183.65", "236.90"),
        "SABADO": _row("270.50", "216.80", "250.20", "310.00"),
        "FESTIVO": _row("337.85", "310.00", "310.00", "371.60"),
    },
}


@dataclass(frozen=True)
class SalaryTable:
    """Defaults plus a sparse override layer. Lookups never touch the defaults' storage."""
    overrides: Mapping[CellKey, Decimal] = field(default_factory=dict)
    defaults: Mapping[str, Mapping[str, Mapping[str, Decimal]]] = field(default_factory=lambda: DEFAULT_SALARY_TABLE, repr=False)

    def get(self, group: str, day_type: str, shift: str) -> Decimal:
        key = (group, day_type, shift)
        if key in self.overrides:
            return self.overrides[key]
        return self.defaults.get(group, {}).get(day_type, {}).get(shift, ZERO)

    def with_overrides(self, overrides: Mapping[CellKey, Decimal]) -> "SalaryTable":
        merged = dict(self.overrides)
        merged.update(overrides)
        return SalaryTable(overrides=merged, defaults=self.defaults)

    def as_dict(self) -> Dict[str, Dict[str, Dict[str, Decimal]]]:
        """All 48 cells, nested group -> day type -> shift."""
        return {
            g: {d: {s: self.get(g, d, s) for s in SHIFTS} for d in DAY_TYPES}
            for g in GROUPS
        }


DEFAULT_TABLE = SalaryTable()


def _parse_amount(raw: Optional[str]) -> Optional[Decimal]:
    """'216,50' / '216.50' -> Decimal; None for anything non-numeric."""
    s = (raw or "").strip().replace(",", ".")
    if not s:
        return None
    try:
        d = Decimal(s)
    except InvalidOperation:
        return None
    return d if d.is_finite() else None


def _split_csv(text: str) -> List[List[str]]:
    """Rows after the header. Delimiter ';' or ','; '216,50' split by a comma delimiter is rejoined."""
    lines = [ln.strip() for ln in (text or "").splitlines() if ln.strip()]
    if len(lines) <= 1:
        return []
    delimiter = ";" if ";" in lines[0] else ","
    rows = []
    for row in csv.reader(io.StringIO("\n".join(lines[1:])), delimiter=delimiter):
        cells = [c.strip() for c in row]
        if delimiter == "," and len(cells) == 5 and cells[3].isdigit() and cells[4].isdigit():
            cells = cells[:3] + [f"{cells[3]}.{cells[4]}"]
        rows.append(cells)
    return rows


def _rows_from_xlsx(path: Path) -> List[List[str]]:
    try:
        import openpyxl
    except ImportError:
        raise RuntimeError("openpyxl required for Excel. pip install openpyxl")
    wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    ws = wb.active
    rows = list(ws.iter_rows(values_only=True))
    wb.close()
    return [
        ["" if c is None else str(c).strip() for c in row]
        for row in rows[1:]
        if row and any(c is not None for c in row)
    ]


def _cells(row: Sequence[str]) -> Tuple[str, str, str, Optional[Decimal]]:
    padded = list(row) + [""] * (4 - len(row))
    group, kind, shift, amount = padded[:4]
    return group.strip().upper(), kind.strip().upper(), shift.strip(), _parse_amount(amount)


def salary_overrides_from_rows(rows: Iterable[Sequence[str]]) -> Dict[CellKey, Decimal]:
    """Valid rows -> {(group, day_type, shift): amount}. Invalid rows are skipped."""
    overrides: Dict[CellKey, Decimal] = {}
    for n, row in enumerate(rows, start=2):
        group, day_type, shift, amount = _cells(row)
        if group not in GROUPS or day_type not in DAY_TYPES or shift not in SHIFTS or amount is None:
            logger.debug("salary table: skipping row {}: {}", n, list(row))
            continue
        overrides[(group, day_type, shift)] = round2(amount)
    return overrides


def festive_rates_from_rows(rows: Iterable[Sequence[str]], table: SalaryTable = DEFAULT_TABLE) -> FestiveNightRates:
    """
    Bridging rates for the overnight shift on a holiday. Both kinds start from the
    table's FESTIVO 20-02 cell; rows set group rates per kind (shift must be 20-02).
    """
    fallback = {g: table.get(g, FESTIVO, OVERNIGHT_SHIFT) for g in GROUPS}
    rates: FestiveNightRates = {kind: dict(fallback) for kind in BRIDGING_KINDS}
    for n, row in enumerate(rows, start=2):
        group, kind, shift, amount = _cells(row)
        if group not in GROUPS or kind not in BRIDGING_KINDS or shift != OVERNIGHT_SHIFT or amount is None:
            logger.debug("festive night rates: skipping row {}: {}", n, list(row))
            continue
        rates[kind][group] = round2(amount)
    return rates


def parse_salary_table_csv(text: str, base: SalaryTable = DEFAULT_TABLE) -> SalaryTable:
    """CSV text -> fresh table (defaults + valid override rows)."""
    return base.with_overrides(salary_overrides_from_rows(_split_csv(text)))


def parse_festive_night_rates_csv(text: str, table: SalaryTable = DEFAULT_TABLE) -> FestiveNightRates:
    return festive_rates_from_rows(_split_csv(text), table)


def load_salary_table(path: Optional[Path] = None) -> SalaryTable:
    """Load overrides from .csv or .xlsx. Defaults when path is None or missing."""
    if not path:
        return DEFAULT_TABLE
    path = Path(path)
    if not path.exists():
        logger.warning("salary table {} not found, using built-in defaults", path)
        return DEFAULT_TABLE
    if path.suffix.lower() in (".xlsx", ".xlsm"):
        return DEFAULT_TABLE.with_overrides(salary_overrides_from_rows(_rows_from_xlsx(path)))
    with open(path, "r", encoding="utf-8-sig") as f:
        return parse_salary_table_csv(f.read())


def load_festive_night_rates(path: Optional[Path], table: SalaryTable = DEFAULT_TABLE) -> Optional[FestiveNightRates]:
    """Load bridging rates from .csv or .xlsx. None when no file is configured."""
    if not path:
        return None
    path = Path(path)
    if not path.exists():
        logger.warning("festive night rates {} not found, using table FESTIVO 20-02", path)
        return None
    if path.suffix.lower() in (".xlsx", ".xlsm"):
        return festive_rates_from_rows(_rows_from_xlsx(path), table)
    with open(path, "r", encoding="utf-8-sig") as f:
        return parse_festive_night_rates_csv(f.read(), table)


def bridging_kind(day: date, holidays=HOLIDAYS) -> str:
    """Overnight shift on a holiday ends the next morning: classify by the next day."""
    return FESTIVO_TO_FESTIVO if is_holiday(next_day(day), holidays) else FESTIVO_TO_LABORABLE


def resolve_base(
    group: str,
    day: date,
    shift: str,
    table: Optional[SalaryTable] = None,
    festive_rates: Optional[Mapping[str, Mapping[str, Decimal]]] = None,
    holidays=HOLIDAYS,
) -> Decimal:
    """
    Base pay for one shift. The overnight window on a holiday is paid at the bridging
    rate (holiday->holiday or holiday->ordinary); without a rate for the group it falls
    back to the table's FESTIVO 20-02 cell.
    """
    table = table or DEFAULT_TABLE
    day_type = get_day_type(day, holidays)
    if shift == OVERNIGHT_SHIFT and day_type == FESTIVO and festive_rates:
        rate = festive_rates.get(bridging_kind(day, holidays), {}).get(group)
        if rate is not None:
            return to_money(rate)
    return table.get(group, day_type, shift)
