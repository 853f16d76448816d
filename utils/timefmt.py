from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_db(value: Optional[datetime]) -> Optional[str]:
    # Fixed width so stored values compare correctly as text
    if value is None:
        return None
    return as_utc(value).isoformat(timespec="microseconds")


def from_db(text: Optional[str]) -> Optional[datetime]:
    if not text:
        return None
    return as_utc(datetime.fromisoformat(text))
