"""
Utility date
Progetto: Sales Manager (Gestione Vendite)

Aritmetica di calendario su datetime timezone-aware (UTC).
"""

import calendar
import math
from datetime import datetime, timedelta, timezone
from typing import Optional

ONE_DAY = timedelta(days=1)


def utcnow() -> datetime:
    """Data/ora corrente in UTC (timezone-aware)."""
    return datetime.now(timezone.utc)


def ensure_aware(dt: datetime) -> datetime:
    """Le date naive vengono interpretate come UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def resolve_now(now: Optional[datetime]) -> datetime:
    return ensure_aware(now) if now is not None else utcnow()


def add_days(dt: datetime, days: int) -> datetime:
    return dt + timedelta(days=days)


def start_of_day(dt: datetime) -> datetime:
    """Tronca a mezzanotte."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_month(dt: datetime) -> datetime:
    """Primo giorno del mese alle 00:00."""
    return start_of_day(dt).replace(day=1)


def shift_month(dt: datetime, months: int) -> datetime:
    """
    Sposta una data di `months` mesi di calendario.

    Il giorno viene limitato all'ultimo giorno del mese di destinazione
    (31 gennaio + 1 mese = 28/29 febbraio).
    """
    index = dt.year * 12 + (dt.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return dt.replace(year=year, month=month, day=min(dt.day, last_day))


def same_day(a: datetime, b: datetime) -> bool:
    """True se le due date cadono nello stesso giorno di calendario."""
    return a.date() == b.date()


def same_month(dt: datetime, year: int, month: int) -> bool:
    return dt.year == year and dt.month == month


def ceil_days(delta: timedelta) -> int:
    """Numero di giorni arrotondato per eccesso (con segno)."""
    return math.ceil(delta / ONE_DAY)


def month_label(dt: datetime) -> str:
    """Etichetta mese nel formato YYYY-MM."""
    return f"{dt.year:04d}-{dt.month:02d}"
