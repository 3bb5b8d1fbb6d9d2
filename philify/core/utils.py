from datetime import date, datetime, timezone


def utc_today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def days_between(start: date, end: date) -> int:
    """Whole days from ``start`` to ``end``, clamped at 0."""
    return max(0, (end - start).days)


def format_history_date(day: date) -> str:
    """Format a date the way the history endpoint expects it, e.g. 19-10-2026."""
    return day.strftime("%d-%m-%Y")
