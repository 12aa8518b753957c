"""Parsing utilities for common data transformations."""

from datetime import UTC, date, datetime

from src.helpers.constants import INPUT_DATETIME_FORMAT


def parse_datetime(value: str, fmt: str = INPUT_DATETIME_FORMAT) -> datetime:
    """Parse a naive date-time string and pin it to UTC.

    Args:
        value: Date-time string, e.g. "2021-06-01 00:00:00"
        fmt: strptime pattern

    Returns:
        datetime: Timezone-aware datetime in UTC

    Raises:
        ValueError: If value does not match fmt

    Example:
        >>> parse_datetime("2021-06-01 12:30:00")
        datetime.datetime(2021, 6, 1, 12, 30, tzinfo=datetime.timezone.utc)
    """
    return datetime.strptime(value, fmt).replace(tzinfo=UTC)


def timestamp_to_day(timestamp: int) -> date:
    """Convert a Unix timestamp to its UTC calendar day.

    Example:
        >>> timestamp_to_day(1622505600)
        datetime.date(2021, 6, 1)
    """
    return datetime.fromtimestamp(timestamp, tz=UTC).date()


def to_timestamp(value: datetime) -> int:
    """Convert a datetime to whole Unix seconds, treating naive values as UTC.

    Example:
        >>> to_timestamp(datetime(2021, 6, 1))
        1622505600
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return int(value.timestamp())


__all__ = ["parse_datetime", "timestamp_to_day", "to_timestamp"]
