from datetime import datetime, timedelta, timezone

import pytest

from henhouse.timewindows import (
    MONDAY,
    RESOLUTION,
    SUNDAY,
    in_range,
    is_in_current_month,
    is_in_current_week,
    is_same_day,
    month_range,
    to_local,
    week_start_date,
)

from .factories import NOW


def test_monday_weeks_contain_monday_through_sunday():
    assert is_in_current_week(datetime(2024, 3, 11, 0, 0), NOW)
    assert is_in_current_week(datetime(2024, 3, 17, 23, 59), NOW)
    assert not is_in_current_week(datetime(2024, 3, 10, 23, 59), NOW)
    assert not is_in_current_week(datetime(2024, 3, 18, 0, 0), NOW)


def test_sunday_weeks_shift_the_boundary():
    assert is_in_current_week(datetime(2024, 3, 10, 8, 0), NOW, week_start=SUNDAY)
    assert is_in_current_week(datetime(2024, 3, 16, 20, 0), NOW, week_start=SUNDAY)
    assert not is_in_current_week(datetime(2024, 3, 17, 8, 0), NOW, week_start=SUNDAY)


def test_week_spanning_new_year():
    now = datetime(2025, 1, 1, 9, 0)
    assert week_start_date(now.date(), MONDAY) == datetime(2024, 12, 30).date()
    assert is_in_current_week(datetime(2024, 12, 31, 9, 0), now)


def test_invalid_week_start_is_rejected():
    with pytest.raises(ValueError):
        week_start_date(NOW.date(), 7)


def test_current_month_requires_same_year():
    assert is_in_current_month(datetime(2024, 3, 1), NOW)
    assert is_in_current_month(datetime(2024, 3, 31, 23, 59), NOW)
    assert not is_in_current_month(datetime(2023, 3, 13), NOW)
    assert not is_in_current_month(datetime(2024, 4, 1), NOW)


def test_month_range_current_month_is_exact():
    start, end = month_range(0, NOW)
    assert start == datetime(2024, 3, 1)
    assert end == datetime(2024, 3, 31, 23, 59, 59, 999999)
    assert end + RESOLUTION == datetime(2024, 4, 1)


def test_month_range_handles_leap_february():
    start, end = month_range(1, NOW)
    assert start == datetime(2024, 2, 1)
    assert end.date() == datetime(2024, 2, 29).date()


def test_month_range_rolls_back_across_year_boundary():
    now = datetime(2024, 1, 15)
    assert month_range(1, now)[0] == datetime(2023, 12, 1)
    assert month_range(2, now) == (datetime(2023, 11, 1), datetime(2023, 11, 30, 23, 59, 59, 999999))
    assert month_range(13, now)[0] == datetime(2022, 12, 1)


def test_last_instant_of_month_is_in_range():
    start, end = month_range(0, NOW)
    assert in_range(datetime(2024, 3, 31, 23, 59, 59, 999999), start, end)
    assert not in_range(datetime(2024, 4, 1), start, end)


def test_aware_timestamps_compare_in_local_time():
    aware = NOW.astimezone(timezone.utc)
    assert to_local(aware) == NOW
    assert is_same_day(aware, NOW)
    assert not is_same_day(NOW + timedelta(days=1), NOW)
