"""Common utilities for KostKelola backend."""

from datetime import date, datetime, timezone
from decimal import Decimal

INDONESIAN_MONTHS = [
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
]


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (SQLite drops the offset)."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def format_currency_idr(amount: Decimal | float | int) -> str:
    """Format an amount the way id-ID renders IDR, e.g. ``Rp 1.500.000,00``."""
    quantized = Decimal(str(amount)).quantize(Decimal("0.01"))
    whole, _, cents = f"{quantized:,.2f}".partition(".")
    return f"Rp {whole.replace(',', '.')},{cents}"


def format_long_date_id(value: date) -> str:
    """Format a date as ``dd MMMM yyyy`` with Indonesian month names."""
    return f"{value.day:02d} {INDONESIAN_MONTHS[value.month - 1]} {value.year}"


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end (may be negative)."""
    return (end.year - start.year) * 12 + end.month - start.month
