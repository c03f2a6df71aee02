from dataclasses import dataclass

from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import strava
from .classify import is_primary
from .config import settings
from .models import Activity
from .schemas import ActivityOut, StravaActivityIn
from .strava import StravaAPIError
from .tokens import TokenManager
from .utils_time import KM_TO_MILES, format_pace

@dataclass
class SyncResult:
    fetched: int
    saved: int
    total: int

def activity_fields(a: StravaActivityIn) -> dict:
    """Column values for an activity; used verbatim for both insert and update."""
    start_local = a.start_date_local.replace(tzinfo=None) if a.start_date_local else None
    return {
        "name": a.name or None,
        "distance": a.distance / 1000 if a.distance else None,  # km
        "moving_time": a.moving_time or None,
        "elapsed_time": a.elapsed_time or None,
        "total_elevation_gain": a.total_elevation_gain or None,
        "average_heartrate": a.average_heartrate or None,
        "calories": a.calories or None,
        "average_speed": a.average_speed or None,
        "type": a.type or None,
        "sport_type": a.sport_type or None,
        "start_date": a.start_date,
        "start_date_local": start_local,
        "timezone": a.timezone or None,
        "utc_offset": a.utc_offset or None,
        "location_city": a.location_city or None,
        "location_state": a.location_state or None,
        "location_country": a.location_country or None,
        "achievement_count": a.achievement_count or None,
        "kudos_count": a.kudos_count or None,
        "comment_count": a.comment_count or None,
        "athlete_count": a.athlete_count or None,
        "photo_count": a.photo_count or None,
        "trainer": bool(a.trainer),
        "commute": bool(a.commute),
        "manual": bool(a.manual),
        "private": bool(a.private),
        "flagged": bool(a.flagged),
        "workout_type": a.workout_type or None,
        "upload_id": a.upload_id or None,
        "external_id": a.external_id or None,
    }

def upsert_activity(db: Session, a: StravaActivityIn) -> Activity:
    rec = db.query(Activity).filter_by(strava_id=a.id).first()
    if not rec:
        rec = Activity(strava_id=a.id)
    for key, value in activity_fields(a).items():
        setattr(rec, key, value)
    db.add(rec)
    db.commit()
    return rec

async def enrich(tokens: TokenManager, a: StravaActivityIn) -> StravaActivityIn:
    """Merge detail-only fields into a summary.

    A failed detail request falls back to the summary. Authorization errors
    propagate and abort the sync.
    """
    try:
        detail = StravaActivityIn.model_validate(await tokens.call(strava.get_activity, a.id))
    except (StravaAPIError, ValueError) as e:
        logger.warning(f"Failed to fetch detailed info for activity ({a.id}|{a.name}), using summary data only: {e}")
        return a
    return a.with_detail(detail)

async def save_activities(db: Session, tokens: TokenManager, activities: list[StravaActivityIn], *, detailed: bool = True) -> int:
    """Upsert activities one at a time; a failing activity is logged and skipped."""
    saved = 0
    for a in activities:
        if detailed and is_primary(a.type, a.sport_type):
            a = await enrich(tokens, a)
        try:
            upsert_activity(db, a)
            saved += 1
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"Failed to save activity {a.id}")
    return saved

async def fetch_activities(tokens: TokenManager, page: int = 1, per_page: int | None = None) -> list[StravaActivityIn]:
    raw = await tokens.call(strava.list_activities, page=page, per_page=per_page or settings.FETCH_PER_PAGE)
    return [StravaActivityIn.model_validate(item) for item in raw]

async def fetch_and_persist(
    db: Session,
    tokens: TokenManager,
    *,
    page: int = 1,
    per_page: int | None = None,
    detailed: bool = True,
) -> SyncResult:
    logger.info("Fetching activities from Strava")
    activities = await fetch_activities(tokens, page=page, per_page=per_page)
    saved = 0
    if activities:
        logger.info(f"Saving {len(activities)} activities to database")
        saved = await save_activities(db, tokens, activities, detailed=detailed)
    total = activity_count(db)
    logger.info(f"Sync finished: fetched={len(activities)} saved={saved} total={total}")
    return SyncResult(fetched=len(activities), saved=saved, total=total)

def activity_count(db: Session) -> int:
    return db.query(func.count(Activity.id)).scalar() or 0

def to_activity_out(rec: Activity) -> ActivityOut:
    return ActivityOut(
        id=rec.id,
        strava_id=str(rec.strava_id),
        name=rec.name,
        distance=rec.distance * KM_TO_MILES if rec.distance is not None else None,
        moving_time=rec.moving_time,
        elapsed_time=rec.elapsed_time,
        total_elevation_gain=rec.total_elevation_gain,
        average_heartrate=rec.average_heartrate,
        calories=rec.calories,
        average_speed=rec.average_speed,
        pace=format_pace(rec.average_speed),
        type=rec.type,
        sport_type=rec.sport_type,
        start_date=rec.start_date,
        start_date_local=rec.start_date_local,
        timezone=rec.timezone,
        location_city=rec.location_city,
        location_state=rec.location_state,
        location_country=rec.location_country,
        kudos_count=rec.kudos_count,
        comment_count=rec.comment_count,
        trainer=bool(rec.trainer),
        commute=bool(rec.commute),
        manual=bool(rec.manual),
        private=bool(rec.private),
        created_at=rec.created_at,
        updated_at=rec.updated_at,
    )

def list_activities(db: Session, activity_type: str | None = None) -> list[ActivityOut]:
    """Stored activities, most recent first, distance in miles."""
    q = db.query(Activity)
    if activity_type:
        q = q.filter(Activity.type == activity_type)
    rows = q.order_by(Activity.start_date.desc()).all()
    return [to_activity_out(r) for r in rows]

def update_activity(db: Session, strava_id: int, updates: dict) -> bool:
    """Apply local edits. A missing row is fine: the next sync brings it in."""
    rec = db.query(Activity).filter_by(strava_id=strava_id).first()
    if not rec:
        logger.info(f"Activity {strava_id} not stored yet, it will be picked up by the next sync")
        return False
    if "name" in updates and updates["name"] is not None:
        rec.name = updates["name"]
    db.add(rec)
    db.commit()
    return True

async def rename_activity(db: Session, tokens: TokenManager, strava_id: int, name: str) -> None:
    """Write the new name to Strava first, then to the local row."""
    await tokens.call(strava.update_activity, strava_id, name)
    update_activity(db, strava_id, {"name": name})
