from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Any


def parse_provider_datetime(value: Any) -> datetime | None:
    """
    Best-effort parse of a provider kickoff into a tz-aware UTC datetime.

    Supports:
      - ISO string: "2025-09-07T20:20:00Z" / "+00:00" / "2025-09-07T20:20:00.000Z"
      - Date-only string: "2025-09-07" (midnight UTC)
      - Unix timestamp (int)
      - Dict: {"timestamp": 123} or {"date": "YYYY-MM-DD", "time": "HH:MM"}

    Returns None on missing or unparseable input.
    """
    if value in (None, "") or isinstance(value, bool):
        return None

    if isinstance(value, dict):
        ts = value.get("timestamp")
        if isinstance(ts, int) and not isinstance(ts, bool):
            return datetime.fromtimestamp(ts, tz=UTC)
        date_part = value.get("date")
        time_part = value.get("time") or "00:00"
        if not isinstance(date_part, str) or not isinstance(time_part, str):
            return None
        return parse_provider_datetime(f"{date_part}T{time_part}:00+00:00")

    if isinstance(value, int):
        return datetime.fromtimestamp(value, tz=UTC)

    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=UTC)
        return parsed.astimezone(UTC)

    return None


def parse_provider_date(value: Any) -> date | None:
    """Calendar date (UTC) of a provider timestamp, or None."""
    parsed = parse_provider_datetime(value)
    return parsed.date() if parsed is not None else None
