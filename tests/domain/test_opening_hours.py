from __future__ import annotations

from aedsync.domain.opening_hours import build_opening_hours, format_time
from aedsync.domain.registry import DayHours


def _week(*days: DayHours) -> tuple[DayHours, ...]:
    return days + tuple(DayHours() for _ in range(7 - len(days)))


def test_format_time_pads_and_validates() -> None:
    assert format_time(930) == "09:30"
    assert format_time(0) == "00:00"
    assert format_time(2400) == "24:00"
    assert format_time(2460) is None
    assert format_time(1275) is None
    assert format_time(None) is None


def test_consecutive_days_with_same_interval_are_merged() -> None:
    office = DayHours(900, 1700)
    week = _week(office, office, office, office, office, DayHours(1000, 1400))

    assert build_opening_hours(week) == "Mo-Fr 09:00-17:00; Sa 10:00-14:00"


def test_gaps_split_runs() -> None:
    office = DayHours(800, 1600)
    week = _week(office, DayHours(), office, office)

    assert build_opening_hours(week) == "Mo 08:00-16:00; We-Th 08:00-16:00"


def test_incomplete_days_are_omitted() -> None:
    week = _week(DayHours(900, None), DayHours(900, 1500))

    assert build_opening_hours(week) == "Tu 09:00-15:00"


def test_no_usable_hours_returns_none() -> None:
    assert build_opening_hours(_week()) is None
    assert build_opening_hours(_week(), closed_on_holidays=True) is None


def test_full_week_collapses_to_always_open() -> None:
    full = DayHours(0, 2400)

    assert build_opening_hours([full] * 7) == "24/7"
    assert build_opening_hours([full] * 7, closed_on_holidays=True) == (
        "Mo-Su 00:00-24:00; PH off"
    )


def test_holiday_closure_is_appended() -> None:
    week = _week(DayHours(900, 1700))

    assert build_opening_hours(week, closed_on_holidays=True) == "Mo 09:00-17:00; PH off"
    assert build_opening_hours(week, closed_on_holidays=False) == "Mo 09:00-17:00"


def test_mixed_week_with_holidays_closed() -> None:
    office = DayHours(900, 1700)
    week = _week(office, office, office, DayHours(1000, 1800))

    assert build_opening_hours(week, closed_on_holidays=True) == (
        "Mo-We 09:00-17:00; Th 10:00-18:00; PH off"
    )
