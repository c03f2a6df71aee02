"""Weekly aggregation of activities into day buckets and a week summary.

Weeks are Monday-aligned. Day labels follow the calendar day, so a week reads
Mon..Sun. Activities are expected in display units (distance in miles,
moving time in seconds), i.e. the shape the read path returns.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable

from .classify import has_pace
from .utils_time import calculate_pace, format_short_date, week_start

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

@dataclass
class DayBucket:
    day: str
    day_label: str
    date: date
    miles: float = 0.0
    time: int = 0

@dataclass
class WeekSummary:
    total_runs: int = 0
    total_miles: float = 0.0
    total_calories: float = 0.0
    total_time: int = 0
    heart_rate_sum: float = 0.0
    heart_rate_count: int = 0
    pace_activities: int = 0

    @property
    def average_pace(self) -> str | None:
        return calculate_pace(self.total_miles, self.total_time)

    @property
    def average_heart_rate(self) -> float | None:
        if self.heart_rate_count == 0:
            return None
        return self.heart_rate_sum / self.heart_rate_count

    @property
    def total_time_hours(self) -> float:
        return self.total_time / 3600

@dataclass
class WeekData:
    week_start: date
    days: list[DayBucket] = field(default_factory=list)
    summary: WeekSummary = field(default_factory=WeekSummary)

    @property
    def week_end(self) -> date:
        return self.week_start + timedelta(days=6)

    @property
    def label(self) -> str:
        return week_label(self.week_start)

    @property
    def active_days(self) -> int:
        return sum(1 for d in self.days if d.miles > 0)

    @property
    def miles_per_day(self) -> float:
        return self.summary.total_miles / 7 if self.active_days else 0.0

@dataclass
class WeekReport:
    week_start: date
    week_number: int
    summary: WeekSummary

    @property
    def week_end(self) -> date:
        return self.week_start + timedelta(days=6)

    @property
    def label(self) -> str:
        return week_label(self.week_start)

def week_label(start: date) -> str:
    return f"{format_short_date(start)} - {format_short_date(start + timedelta(days=6))}"

def _local_day(activity) -> date | None:
    local = getattr(activity, "start_date_local", None)
    if local is None:
        return None
    if isinstance(local, datetime):
        return local.date()
    return local

def empty_days(start: date) -> list[DayBucket]:
    days = []
    for i in range(7):
        d = start + timedelta(days=i)
        name = DAY_NAMES[d.weekday()]
        days.append(DayBucket(day=name, day_label=f"{name} {d.day}", date=d))
    return days

def get_week_data(activities: Iterable, start: date) -> WeekData:
    """Bucket `activities` into the 7 days starting at `start` (a Monday)."""
    week = WeekData(week_start=start, days=empty_days(start))
    summary = week.summary

    for activity in activities:
        day = _local_day(activity)
        if day is None:
            continue
        day_index = (day - start).days
        if day_index < 0 or day_index > 6:
            continue

        bucket = week.days[day_index]
        summary.total_runs += 1

        distance = activity.distance or 0
        moving_time = activity.moving_time or 0
        if distance:
            bucket.miles += distance
            summary.total_miles += distance
        if moving_time:
            bucket.time += moving_time
            summary.total_time += moving_time
        if activity.calories:
            summary.total_calories += activity.calories

        hr = activity.average_heartrate
        if hr and hr > 0:
            summary.heart_rate_sum += hr
            summary.heart_rate_count += 1

        if has_pace(distance, moving_time):
            summary.pace_activities += 1

    return week

def get_available_weeks(activities: Iterable) -> list[date]:
    """Distinct Monday week starts with at least one activity, most recent first."""
    starts = set()
    for activity in activities:
        day = _local_day(activity)
        if day is not None:
            starts.add(week_start(day))
    return sorted(starts, reverse=True)

def get_weekly_summaries(activities: Iterable) -> list[WeekReport]:
    """Summary of every available week, most recent first; the oldest is week 1."""
    activities = list(activities)
    weeks = get_available_weeks(activities)
    total = len(weeks)
    return [
        WeekReport(week_start=start, week_number=total - i, summary=get_week_data(activities, start).summary)
        for i, start in enumerate(weeks)
    ]
