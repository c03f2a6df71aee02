from datetime import date, datetime
from datetime import date as ddate

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

# Fields the per-activity detail endpoint knows better than the summary list.
DETAIL_FIELDS = ("average_heartrate", "calories", "average_speed", "sport_type")

class StravaActivityIn(BaseModel):
    """One activity as the platform sends it, summary or detail.

    Every field but the id is optional: the summary list and the detail
    endpoint return different subsets.
    """
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str | None = None
    distance: float | None = None  # meters
    moving_time: int | None = None
    elapsed_time: int | None = None
    total_elevation_gain: float | None = None
    average_heartrate: float | None = None
    calories: float | None = None
    average_speed: float | None = None
    type: str | None = None
    sport_type: str | None = None
    start_date: datetime | None = None
    start_date_local: datetime | None = None
    timezone: str | None = None
    utc_offset: float | None = None
    location_city: str | None = None
    location_state: str | None = None
    location_country: str | None = None
    achievement_count: int | None = None
    kudos_count: int | None = None
    comment_count: int | None = None
    athlete_count: int | None = None
    photo_count: int | None = None
    trainer: bool | None = None
    commute: bool | None = None
    manual: bool | None = None
    private: bool | None = None
    flagged: bool | None = None
    workout_type: int | None = None
    upload_id: int | None = None
    external_id: str | None = None

    def with_detail(self, detail: "StravaActivityIn") -> "StravaActivityIn":
        updates = {}
        for field in DETAIL_FIELDS:
            value = getattr(detail, field)
            if value is not None:
                updates[field] = value
        return self.model_copy(update=updates)

class ActivityOut(CamelModel):
    id: int
    strava_id: str
    name: str | None = None
    distance: float | None = None  # miles
    moving_time: int | None = None
    elapsed_time: int | None = None
    total_elevation_gain: float | None = None
    average_heartrate: float | None = None
    calories: float | None = None
    average_speed: float | None = None
    pace: str | None = None
    type: str | None = None
    sport_type: str | None = None
    start_date: datetime | None = None
    start_date_local: datetime | None = None
    timezone: str | None = None
    location_city: str | None = None
    location_state: str | None = None
    location_country: str | None = None
    kudos_count: int | None = None
    comment_count: int | None = None
    trainer: bool = False
    commute: bool = False
    manual: bool = False
    private: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

class ActivityUpdate(CamelModel):
    name: str | None = None

class CountOut(CamelModel):
    count: int

class RefetchResult(CamelModel):
    success: bool
    fetched: int
    total: int

class MessageOut(CamelModel):
    success: bool
    message: str

class TokenStatus(CamelModel):
    has_token: bool
    has_read_scope: bool
    has_write_scope: bool
    scopes: list[str]
    expires_at: datetime | None = None

class TrainingBlockCreate(CamelModel):
    # raw date strings; parsed and checked in blocks.validate_*
    race_name: str | None = None
    identifier: str | None = None
    race_date: str | None = None
    start_date: str | None = None
    duration_weeks: int | None = None

class TrainingBlockUpdate(TrainingBlockCreate):
    pass

class TrainingBlockOut(CamelModel):
    id: int
    race_name: str
    identifier: str
    race_date: date
    start_date: date
    duration_weeks: int
    weeks_remaining: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

class DayBucketOut(CamelModel):
    day: str
    day_label: str
    date: ddate
    miles: float
    time: int

class WeekSummaryOut(CamelModel):
    total_runs: int
    total_miles: float
    total_calories: float
    total_time: int
    heart_rate_sum: float
    heart_rate_count: int
    pace_activities: int
    average_pace: str | None = None
    average_heart_rate: float | None = None
    total_time_hours: float

class WeekOut(CamelModel):
    week_start: date
    week_end: date
    label: str
    days: list[DayBucketOut]
    summary: WeekSummaryOut
    active_days: int
    miles_per_day: float
    week_index: int | None = None
    week_count: int
    previous_week: date | None = None
    next_week: date | None = None

class WeekReportOut(CamelModel):
    week_start: date
    week_end: date
    week_number: int
    label: str
    summary: WeekSummaryOut

class BlockWeeksOut(CamelModel):
    block: TrainingBlockOut
    weeks: list[WeekReportOut]
