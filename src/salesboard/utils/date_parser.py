"""Date parsing utilities."""

from datetime import UTC, datetime, time, timedelta

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_datetime(value: str, now: datetime | None = None) -> datetime:
    """Parse a date or timestamp string into a naive UTC datetime.

    Supports:
    - Absolute values: "2024-01-15", "2024-01-15 09:30", "2024-01-15T09:30:00+02:00"
    - Relative days: "now", "today", "yesterday", "tomorrow" (midnight except "now")
    - Month anchors: "this month", "last month", "next month" (midnight of the 1st)

    Timestamps carrying an offset are converted to UTC.

    Args:
        value: Date string in one of the formats above
        now: Reference "now" as naive UTC, defaults to the current time

    Returns:
        Naive UTC datetime

    Raises:
        ValueError: If the string cannot be parsed
    """
    text = value.strip().lower()
    if now is None:
        now = datetime.now(UTC).replace(tzinfo=None)
    midnight = datetime.combine(now.date(), time())

    relative = {
        "now": now,
        "today": midnight,
        "yesterday": midnight - timedelta(days=1),
        "tomorrow": midnight + timedelta(days=1),
        "this month": midnight.replace(day=1),
        "last month": midnight.replace(day=1) - relativedelta(months=1),
        "next month": midnight.replace(day=1) + relativedelta(months=1),
    }
    if text in relative:
        return relative[text]

    try:
        parsed = date_parser.parse(value.strip())
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{value}': {e}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC).replace(tzinfo=None)
    return parsed
