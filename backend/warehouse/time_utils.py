from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 datetime string and normalize to UTC-naive datetime.

    - None / "" -> None
    - "YYYY-MM-DD" is midnight UTC
    - "YYYY-MM-DDTHH:MM" (naive) is interpreted as UTC
    - "...Z" or "...+/-HH:MM" is converted to UTC and tzinfo is stripped
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None

    # Accept trailing Z
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    dt = datetime.fromisoformat(s)

    # Normalize to UTC-naive
    if dt.tzinfo is None:
        # interpret naive as UTC
        return dt.replace(tzinfo=None)

    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes datetime to ISO-8601 with trailing 'Z'.
    If dt is naive, it is treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc).replace(microsecond=0)
    return dt_utc.isoformat().replace("+00:00", "Z")


def normalize_business_date(value: Optional[str]) -> str:
    """
    Canonical string form of a transaction's business date.

    Transaction dates are compared as strings, so every stored value uses the
    same fixed-width UTC layout ("YYYY-MM-DDTHH:MM:SSZ"). Missing -> now.
    Raises ValueError for unparseable input.
    """
    dt = parse_iso_datetime(value)
    if dt is None:
        dt = utcnow()
    return to_utc_z(dt)


def day_key(value: date | datetime | str) -> str:
    """'YYYY-MM-DD' prefix used to bucket business dates by day."""
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    return value[:10]


def month_key(value: date | datetime | str) -> str:
    """'YYYY-MM' prefix used to bucket business dates by month."""
    return day_key(value)[:7]
