from .config import settings

def is_primary(activity_type: str | None, sport_type: str | None = None) -> bool:
    """True for the activity type that gets detail enrichment and weekly views."""
    primary = settings.PRIMARY_ACTIVITY_TYPE
    return activity_type == primary or sport_type == primary

def has_pace(distance: float | None, moving_time: float | None) -> bool:
    return bool(distance and distance > 0 and moving_time and moving_time > 0)
