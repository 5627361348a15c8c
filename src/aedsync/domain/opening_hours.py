"""Compress registry weekday intervals into an OSM ``opening_hours`` value."""

from __future__ import annotations

from typing import TYPE_CHECKING

from aedsync.domain.registry import Weekday

if TYPE_CHECKING:
    from collections.abc import Sequence

    from aedsync.domain.registry import DayHours

ALWAYS_OPEN = "24/7"
HOLIDAYS_CLOSED = "PH off"
_FULL_DAY = "00:00-24:00"


def format_time(value: int | None) -> str | None:
    """Render ``930`` as ``09:30``; ``None`` for anything that is not a clock time."""

    if value is None or isinstance(value, bool):
        return None
    hours, minutes = divmod(value, 100)
    if value < 0 or hours > 24 or minutes >= 60 or (hours == 24 and minutes):
        return None
    return f"{hours:02d}:{minutes:02d}"


def format_interval(day: DayHours) -> str | None:
    opens = format_time(day.opens)
    closes = format_time(day.closes)
    if opens is None or closes is None:
        return None
    return f"{opens}-{closes}"


def _day_range(first: Weekday, last: Weekday) -> str:
    if first == last:
        return first.osm_abbreviation
    return f"{first.osm_abbreviation}-{last.osm_abbreviation}"


def build_opening_hours(
    weekly_hours: Sequence[DayHours],
    *,
    closed_on_holidays: bool | None = None,
) -> str | None:
    """Merge consecutive weekdays sharing an interval into ``Mo-Fr 09:00-17:00`` style rules.

    Days without a complete, valid interval are omitted. ``PH off`` is appended when the
    registry says the site is closed on public holidays. Returns ``None`` when no day has
    usable hours.
    """

    intervals = [
        format_interval(weekly_hours[day]) if day < len(weekly_hours) else None
        for day in Weekday
    ]
    if not any(intervals):
        return None
    if all(interval == _FULL_DAY for interval in intervals) and not closed_on_holidays:
        return ALWAYS_OPEN

    rules: list[str] = []
    run_start: Weekday | None = None
    run_interval: str | None = None
    previous: Weekday | None = None
    for day in Weekday:
        interval = intervals[day]
        if run_start is not None and interval == run_interval and previous == day - 1:
            previous = day
            continue
        if run_start is not None and previous is not None:
            rules.append(f"{_day_range(run_start, previous)} {run_interval}")
        run_start, run_interval, previous = (day, interval, day) if interval else (None, None, None)
    if run_start is not None and previous is not None:
        rules.append(f"{_day_range(run_start, previous)} {run_interval}")

    if closed_on_holidays:
        rules.append(HOLIDAYS_CLOSED)
    return "; ".join(rules)
