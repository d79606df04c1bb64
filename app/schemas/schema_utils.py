"""Helpers shared by the streaming and transmission schemas."""

from datetime import datetime, timezone
from typing import Any


def as_utc_datetime(v: Any) -> Any:
    """Normalize stored timestamps to timezone-aware UTC datetimes.

    Rows written by the legacy panel may hold Extended JSON
    (`{'$date': '2024-11-01T08:00:00Z'}` or `{'$date': {'$numberLong': '...'}}`)
    or epoch milliseconds. pymongo hands back naive datetimes, which are UTC.
    """
    if isinstance(v, dict) and "$date" in v:
        v = v["$date"]
        if isinstance(v, dict) and "$numberLong" in v:
            v = int(v["$numberLong"])
        elif isinstance(v, str):
            v = datetime.fromisoformat(v.replace("Z", "+00:00"))

    if isinstance(v, int) and not isinstance(v, bool):
        return datetime.fromtimestamp(v / 1000, tz=timezone.utc)
    if isinstance(v, datetime) and v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    # Anything else is left to pydantic
    return v
