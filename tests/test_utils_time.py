from datetime import date, datetime

from runlog.utils_time import (
    calculate_pace,
    format_date,
    format_duration,
    format_pace,
    format_time_from_hours,
    format_time_from_seconds,
    format_time_simple,
    parse_date,
    week_start,
)


def test_format_time_from_seconds():
    assert format_time_from_seconds(None) == "N/A"
    assert format_time_from_seconds(0) == "N/A"
    assert format_time_from_seconds(3725) == "01:02:05"
    assert format_time_from_seconds(59.9) == "00:00:59"


def test_format_time_simple():
    assert format_time_simple(0) == "0m"
    assert format_time_simple(300) == "5m"
    assert format_time_simple(3900) == "1h 5m"


def test_format_time_from_hours():
    assert format_time_from_hours(1.5) == "1h 30m"
    assert format_time_from_hours(0.25) == "15m"
    assert format_time_from_hours(0) == "0m"


def test_format_duration():
    assert format_duration(3723) == "1h 2m 3s"
    assert format_duration(123) == "2m 3s"
    assert format_duration(5) == "5s"


def test_format_date():
    assert format_date(None) == "N/A"
    assert format_date(date(2025, 1, 7)) == "Jan 7, 2025"
    assert format_date(datetime(2024, 12, 25, 8, 0)) == "Dec 25, 2024"


def test_calculate_pace_truncates_seconds():
    # 1500 s over 3.107 mi is 482.78 s/mi
    assert calculate_pace(3.107, 1500) == "8:02"
    assert calculate_pace(3.0, 1500) == "8:20"
    assert calculate_pace(10.0, 4205) == "7:00"


def test_calculate_pace_is_none_without_distance_or_time():
    assert calculate_pace(0, 1500) is None
    assert calculate_pace(3.0, 0) is None


def test_format_pace_from_average_speed():
    # 5 km in 1500 s: 1609.344 / 3.333 = 482.8 s/mi, rounded
    assert format_pace(5000 / 1500) == "8:03"
    assert format_pace(None) is None
    assert format_pace(0) is None


def test_format_pace_rounding_never_shows_sixty_seconds():
    assert format_pace(1609.344 / 479.6) == "8:00"


def test_week_start_is_monday():
    assert week_start(date(2025, 1, 7)) == date(2025, 1, 6)
    assert week_start(date(2025, 1, 6)) == date(2025, 1, 6)
    assert week_start(date(2025, 1, 12)) == date(2025, 1, 6)
    assert week_start(datetime(2025, 1, 13, 23, 59)) == date(2025, 1, 13)


def test_parse_date():
    assert parse_date("2025-01-07") == date(2025, 1, 7)
    assert parse_date("2025-01-07T00:00:00.000Z") == date(2025, 1, 7)
    assert parse_date(date(2025, 1, 7)) == date(2025, 1, 7)
    assert parse_date("not a date") is None
    assert parse_date("   ") is None
    assert parse_date(None) is None
