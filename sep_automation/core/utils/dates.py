"""Date helpers for activity and staleness calculations."""

from datetime import UTC, datetime

SECONDS_PER_DAY = 86400


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(tz=UTC)


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse a GitHub ISO 8601 timestamp into an aware datetime.

    GitHub returns ``2024-01-31T12:00:00Z``; naive values are treated as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        raw = str(value or "").strip()
        if not raw:
            raise ValueError("timestamp must not be empty")
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def days_between(start: datetime, end: datetime) -> int:
    """Whole days elapsed from *start* to *end*.

    Partial days are truncated, so 29 days and 23 hours is 29. Instants in
    the future relative to *end* count as zero days.
    """
    elapsed = end - start
    if elapsed.total_seconds() <= 0:
        return 0
    return elapsed.days
