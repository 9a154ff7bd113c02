from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Optional, Union
from gitscope.models.github import SERIES_LENGTH, ActivityDay, ActivitySeries


def truncate_to_date(value: Union[str, datetime, date, None]) -> Optional[date]:
    """
    Reduces a timestamp to its calendar date without any timezone conversion.

    ISO strings keep their own `YYYY-MM-DD` prefix ("2024-03-01T23:59:59-08:00"
    is 2024-03-01), datetimes keep their own date component. Anything that
    does not carry a readable date returns None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip().split("T")[0][:10])
    except ValueError:
        return None


def utc_today() -> date:
    return truncate_to_date(datetime.now(timezone.utc))


def count_events_by_date(events: Iterable[Any]) -> Dict[date, int]:
    """Sparse per-date counts of events; events without a usable `created_at` are skipped."""
    counts: Counter = Counter()
    for event in events:
        if not isinstance(event, dict):
            continue
        day = truncate_to_date(event.get("created_at"))
        if day is not None:
            counts[day] += 1
    return dict(counts)


def build_series(counts: Dict[date, int], today: date, degraded: bool = False) -> ActivitySeries:
    # Walk back from today, then flip so the oldest day comes first.
    days = []
    for offset in range(SERIES_LENGTH):
        day = today - timedelta(days=offset)
        days.append(ActivityDay(date=day, contributions=counts.get(day, 0)))
    days.reverse()
    return ActivitySeries(days=days, degraded=degraded)


def empty_series(today: date) -> ActivitySeries:
    return build_series({}, today, degraded=True)
