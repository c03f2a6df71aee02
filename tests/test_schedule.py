from datetime import date, datetime, timedelta

import pytest

from runlog.schedule import (
    block_weeks,
    first_monday_on_or_after,
    training_week_starts,
    weeks_remaining,
)
from runlog.schemas import ActivityOut


def test_tuesday_start_moves_to_next_monday():
    assert training_week_starts(date(2025, 1, 7), 3) == [
        date(2025, 1, 13),
        date(2025, 1, 20),
        date(2025, 1, 27),
    ]


@pytest.mark.parametrize(
    "start, expected",
    [
        (date(2025, 1, 6), date(2025, 1, 6)),  # Monday
        (date(2025, 1, 12), date(2025, 1, 13)),  # Sunday
        (date(2025, 1, 11), date(2025, 1, 13)),  # Saturday
        (date(2025, 1, 8), date(2025, 1, 13)),  # Wednesday
    ],
)
def test_first_monday_on_or_after(start, expected):
    assert first_monday_on_or_after(start) == expected


def test_schedule_shape_for_any_start_and_duration():
    for offset in range(14):
        start = date(2025, 3, 1) + timedelta(days=offset)
        for duration in range(1, 21):
            weeks = training_week_starts(start, duration)

            assert len(weeks) == duration
            assert len(set(weeks)) == duration
            assert all(w.weekday() == 0 for w in weeks)
            assert start <= weeks[0] <= start + timedelta(days=6)
            for earlier, later in zip(weeks, weeks[1:]):
                assert later - earlier == timedelta(days=7)


def test_zero_duration_has_no_weeks():
    assert training_week_starts(date(2025, 1, 7), 0) == []


def test_weeks_remaining_rounds_up():
    race = date(2025, 3, 1)
    assert weeks_remaining(race, now=datetime(2025, 2, 1)) == 4
    assert weeks_remaining(race, now=datetime(2025, 2, 2)) == 4
    assert weeks_remaining(race, now=datetime(2025, 2, 22)) == 1


def test_block_weeks_summarise_each_scheduled_week():
    activities = [
        ActivityOut(id=1, strava_id="1", distance=3.0, moving_time=1500, start_date_local=datetime(2025, 1, 8, 7, 0)),
        ActivityOut(id=2, strava_id="2", distance=6.0, moving_time=3000, start_date_local=datetime(2025, 1, 14, 7, 0)),
        ActivityOut(id=3, strava_id="3", distance=4.0, moving_time=2000, start_date_local=datetime(2025, 1, 26, 7, 0)),
    ]

    reports = block_weeks(activities, date(2025, 1, 7), 3)

    assert [r.week_number for r in reports] == [1, 2, 3]
    assert [r.week_start for r in reports] == [date(2025, 1, 13), date(2025, 1, 20), date(2025, 1, 27)]
    # the Jan 8 run is before the block's first Monday
    assert reports[0].summary.total_miles == pytest.approx(6.0)
    assert reports[1].summary.total_miles == pytest.approx(4.0)
    assert reports[2].summary.total_runs == 0
