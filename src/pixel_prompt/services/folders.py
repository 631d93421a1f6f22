"""Timestamped upload folder names."""

from datetime import UTC, datetime


def new_folder_name(now: datetime | None = None) -> str:
    """
    Build an upload folder name from a UTC timestamp.

    Args:
        now: Instant to format; defaults to the current time. Naive values
            are taken as UTC.

    Returns:
        Folder name formatted as "YYYY-MM-DD HH:MM:SS:mmm" in UTC, which sorts
        lexicographically in creation order.

    Example:
        >>> new_folder_name(datetime(2025, 3, 9, 7, 5, 1, 42000, tzinfo=UTC))
        '2025-03-09 07:05:01:042'
    """
    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    else:
        now = now.astimezone(UTC)
    return f"{now:%Y-%m-%d %H:%M:%S}:{now.microsecond // 1000:03d}"
