from datetime import datetime, timedelta, timezone


def as_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from SQLite."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def days_ago(days: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


def percent(part: int, whole: int) -> int:
    """Whole-number percentage with halves rounded up; 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return int(part / whole * 100 + 0.5)
