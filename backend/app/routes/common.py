"""
Helpers shared by the route modules: timestamp parsing and serialization.
"""

from datetime import datetime, timezone
from typing import Optional

from app.errors import ValidationError


def parse_timestamp(field: str, ts_str: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp (date-only values allowed).

    Returns a timezone-naive UTC datetime for SQLite compatibility, None for
    a missing value, and raises ValidationError on the field otherwise.
    """
    if ts_str is None or not ts_str.strip():
        return None
    value = ts_str.strip()
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        dt = datetime.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(field, "invalid timestamp") from exc
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
