"""UTC helpers shared by the models, services and tasks.

Columns are plain ``DateTime`` (naive) so values round-trip identically on
PostgreSQL and SQLite; everything stored is UTC.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_naive() -> datetime:
    """Naive current UTC time, the format every DateTime column stores."""
    return utc_now().replace(tzinfo=None)


def isoformat(value: datetime) -> str:
    """ISO-8601 with an explicit UTC ``Z`` suffix for naive UTC values."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.isoformat() + "Z"
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
