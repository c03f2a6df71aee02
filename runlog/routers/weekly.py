from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import ingest
from ..config import settings
from ..db import get_session
from ..rollup import WeekReport, get_available_weeks, get_week_data, get_weekly_summaries
from ..schemas import DayBucketOut, WeekOut, WeekReportOut, WeekSummaryOut
from ..utils_time import week_start

router = APIRouter(prefix="/api/weekly", tags=["weekly"])

def report_out(report: WeekReport) -> WeekReportOut:
    return WeekReportOut(
        week_start=report.week_start,
        week_end=report.week_end,
        week_number=report.week_number,
        label=report.label,
        summary=WeekSummaryOut.model_validate(report.summary),
    )

def _primary_activities(db: Session):
    return ingest.list_activities(db, settings.PRIMARY_ACTIVITY_TYPE)

@router.get("/weeks", response_model=list[date])
def available_weeks(db: Session = Depends(get_session)):
    return get_available_weeks(_primary_activities(db))

@router.get("/summaries", response_model=list[WeekReportOut])
def weekly_summaries(db: Session = Depends(get_session)):
    return [report_out(r) for r in get_weekly_summaries(_primary_activities(db))]

@router.get("", response_model=WeekOut)
def week(week: date | None = None, db: Session = Depends(get_session)):
    activities = _primary_activities(db)
    weeks = get_available_weeks(activities)
    if week is None:
        if not weeks:
            raise HTTPException(status_code=404, detail="No activity data available for weekly breakdown.")
        start = weeks[0]
    else:
        start = week_start(week)

    data = get_week_data(activities, start)
    older = [w for w in weeks if w < start]
    newer = [w for w in weeks if w > start]
    return WeekOut(
        week_start=data.week_start,
        week_end=data.week_end,
        label=data.label,
        days=[DayBucketOut.model_validate(d) for d in data.days],
        summary=WeekSummaryOut.model_validate(data.summary),
        active_days=data.active_days,
        miles_per_day=data.miles_per_day,
        week_index=weeks.index(start) if start in weeks else None,
        week_count=len(weeks),
        previous_week=older[0] if older else None,
        next_week=newer[-1] if newer else None,
    )
