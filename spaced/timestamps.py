"""Timestamp parsing for the last-reviewed field.

Two formats exist in the wild: timestamps that carry a zone (a trailing
``Z`` or a ``+HH:MM``/``-HH:MM`` offset after the time) and bare ones
written without any zone. Bare values are read in the configured default
zone, either ``"utc"`` or ``"local"``.
"""

from datetime import date, datetime, timezone

DAY_MS = 24 * 60 * 60 * 1000


def parse_timestamp(value, default_zone: str = "utc") -> datetime:
    """Parse a stored timestamp into an aware datetime.

    Raises ValueError for values that are not timestamps.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        if default_zone == "local":
            dt = dt.astimezone()
        else:
            dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_epoch_ms(value, default_zone: str = "utc") -> float:
    return parse_timestamp(value, default_zone).timestamp() * 1000


def format_timestamp(dt: datetime | None = None) -> str:
    """Render a review time for storage: UTC, second precision, trailing Z."""
    if dt is None:
        dt = datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
