import math
from datetime import date, datetime, timedelta
from typing import Iterable

from .rollup import WeekReport, get_week_data

def _js_weekday(d: date) -> int:
    # Sunday = 0 ... Saturday = 6
    return d.isoweekday() % 7

def first_monday_on_or_after(d: date) -> date:
    dow = _js_weekday(d)
    if dow == 1:
        return d
    if dow == 0:
        return d + timedelta(days=1)
    return d + timedelta(days=8 - dow)

def next_monday_after(d: date) -> date:
    dow = _js_weekday(d)
    if dow == 0:
        return d + timedelta(days=1)
    return d + timedelta(days=8 - dow)

def training_week_starts(start_date: date, duration_weeks: int) -> list[date]:
    """Monday starts of each week of a training block.

    Week 1 begins on the first Monday on or after `start_date`. Week 2 is the
    Monday after week 1 ends; later weeks follow at a 7 day stride.
    """
    if duration_weeks <= 0:
        return []

    week_one = first_monday_on_or_after(start_date)
    starts = [week_one]
    if duration_weeks > 1:
        week_two = next_monday_after(week_one + timedelta(days=6))
        starts.append(week_two)
        for i in range(1, duration_weeks - 1):
            starts.append(week_two + timedelta(days=7 * i))

    seen = set()
    unique = []
    for s in starts:
        if s not in seen:
            seen.add(s)
            unique.append(s)
    return unique

def block_weeks(activities: Iterable, start_date: date, duration_weeks: int) -> list[WeekReport]:
    """Week summaries for every scheduled week of a block, week 1 first."""
    activities = list(activities)
    return [
        WeekReport(week_start=s, week_number=i + 1, summary=get_week_data(activities, s).summary)
        for i, s in enumerate(training_week_starts(start_date, duration_weeks))
    ]

def weeks_remaining(race_date: date, now: datetime | None = None) -> int:
    now = now or datetime.now()
    race = datetime.combine(race_date, datetime.min.time())
    return math.ceil((race - now).total_seconds() / (7 * 86400))
