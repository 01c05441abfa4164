"""
Shift records: the partial record built while parsing, and the completed entry
produced by the wage calculator. Vocabulary constants follow the portal spelling.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

# Professional groups (ordinal)
GROUP_I = "I"
GROUP_II = "II"
GROUP_III = "III"
GROUP_IV = "IV"
GROUPS = (GROUP_I, GROUP_II, GROUP_III, GROUP_IV)

# Day types
LABORABLE = "LABORABLE"
SABADO = "SABADO"
FESTIVO = "FESTIVO"
DAY_TYPES = (LABORABLE, SABADO, FESTIVO)

# Shift windows (6 hours each)
SHIFT_02_08 = "02-08"
SHIFT_08_14 = "08-14"
SHIFT_14_20 = "14-20"
SHIFT_20_02 = "20-02"
SHIFTS = (SHIFT_02_08, SHIFT_08_14, SHIFT_14_20, SHIFT_20_02)
OVERNIGHT_SHIFT = SHIFT_20_02

# Overnight-on-holiday bridging kinds
FESTIVO_TO_FESTIVO = "FESTIVO_TO_FESTIVO"
FESTIVO_TO_LABORABLE = "FESTIVO_TO_LABORABLE"
BRIDGING_KINDS = (FESTIVO_TO_LABORABLE, FESTIVO_TO_FESTIVO)

# Journal types: ordinary shift vs night-designated
JOURNAL_TUR = "TUR"
JOURNAL_NUD = "NUD"
JOURNAL_TYPES = (JOURNAL_TUR, JOURNAL_NUD)

DEFAULT_LABEL = "Jornal Estiba"

ZERO = Decimal("0")
CENT = Decimal("0.01")


def round2(value: Decimal) -> Decimal:
    """Round half-up to cents."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_money(value: Any) -> Decimal:
    """Coerce a money-like value (number, '45,50', None, garbage) to Decimal. Non-numeric -> 0."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, (int, float)):
        try:
            d = Decimal(str(value))
        except InvalidOperation:
            return ZERO
        return d if d.is_finite() else ZERO
    s = str(value).strip().replace(",", ".")
    if not s:
        return ZERO
    try:
        d = Decimal(s)
    except InvalidOperation:
        return ZERO
    return d if d.is_finite() else ZERO


@dataclass
class ShiftRecord:
    """One partial record from a single parse pass (before wage calculation)."""
    date: Optional[date] = None
    group: Optional[str] = None
    shift: Optional[str] = None
    specialty: Optional[str] = None
    company: Optional[str] = None
    ship: Optional[str] = None
    production: Any = ZERO
    extras: Any = ZERO
    journal_type: Optional[str] = None
    label: str = ""
    entry_id: Optional[str] = None  # assigned by external persistence


@dataclass(frozen=True)
class CompletedShiftEntry:
    """Calculated shift. Never patched: recompute from to_record() instead."""
    date: date
    group: str
    day_type: str
    shift: str
    base: Decimal
    production: Decimal
    extras: Decimal
    total: Decimal  # gross
    net: Decimal
    irpf: Any  # withholding percentage, stored verbatim
    label: str = DEFAULT_LABEL
    specialty: Optional[str] = None
    company: Optional[str] = None
    ship: Optional[str] = None
    journal_type: Optional[str] = None
    entry_id: Optional[str] = None
    withheld: Decimal = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "withheld", self.total - self.net)

    def to_record(self) -> ShiftRecord:
        """Source fields for recomputation (base, gross and net are re-derived)."""
        return ShiftRecord(
            date=self.date,
            group=self.group,
            shift=self.shift,
            specialty=self.specialty,
            company=self.company,
            ship=self.ship,
            production=self.production,
            extras=self.extras,
            journal_type=self.journal_type,
            label=self.label,
            entry_id=self.entry_id,
        )
