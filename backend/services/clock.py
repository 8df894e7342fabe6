from __future__ import annotations

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_instant(value) -> datetime | None:
    """Parse an ISO timestamp (or datetime/date) into an aware UTC datetime.

    Naive values are taken to be UTC. A trailing ``Z`` is accepted.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        raw = str(value).strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_utc_iso(value) -> str | None:
    parsed = parse_instant(value)
    if parsed is None:
        return None
    # Millisecond precision; whole seconds serialize without a fraction.
    return parsed.replace(microsecond=parsed.microsecond // 1000 * 1000).isoformat()
