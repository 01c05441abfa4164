"""
Day-type classification: LABORABLE, SABADO or FESTIVO.
FESTIVO = every Sunday plus the exact holiday dates of the supported year.
"""
from datetime import date
from typing import FrozenSet, Union

from .records import FESTIVO, LABORABLE, SABADO
from .time_utils import parse_local_date

# Valencia (city) working calendar 2026: national, regional and local holidays.
HOLIDAYS_2026: FrozenSet[str] = frozenset({
    "2026-01-01",  # Año Nuevo
    "2026-01-06",  # Reyes
    "2026-01-22",  # San Vicente Mártir
    "2026-03-19",  # San José
    "2026-04-03",  # Viernes Santo
    "2026-04-06",  # Lunes de Pascua
    "2026-04-13",  # San Vicente Ferrer
    "2026-05-01",  # Día del Trabajo
    "2026-06-24",  # San Juan
    "2026-08-15",  # Asunción
    "2026-10-09",  # Comunitat Valenciana
    "2026-10-12",  # Fiesta Nacional
    "2026-11-01",  # Todos los Santos
    "2026-12-06",  # Constitución
    "2026-12-08",  # Inmaculada
    "2026-12-25",  # Navidad
})

HOLIDAYS = HOLIDAYS_2026

SUNDAY = 6
SATURDAY = 5

DayLike = Union[date, str]


def is_holiday(day: DayLike, holidays: FrozenSet[str] = HOLIDAYS) -> bool:
    """True on Sundays and on dates listed in the holiday set (exact ISO string match)."""
    d = parse_local_date(day)
    return d.weekday() == SUNDAY or d.isoformat() in holidays


def get_day_type(day: DayLike, holidays: FrozenSet[str] = HOLIDAYS) -> str:
    d = parse_local_date(day)
    if is_holiday(d, holidays):
        return FESTIVO
    if d.weekday() == SATURDAY:
        return SABADO
    return LABORABLE
