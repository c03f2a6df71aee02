from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from .. import ingest
from ..config import settings
from ..db import get_session
from ..oauth import AuthorizationError
from ..schemas import ActivityOut, ActivityUpdate, CountOut, MessageOut, RefetchResult, TokenStatus
from ..strava import StravaAPIError
from ..tokens import TokenCache, TokenManager, token_status

router = APIRouter(prefix="/api/activities", tags=["activities"])

def get_tokens(db: Session = Depends(get_session)) -> TokenManager:
    # one cache per request
    return TokenManager(db, TokenCache())

def platform_error(e: Exception) -> HTTPException:
    if isinstance(e, AuthorizationError):
        return HTTPException(status_code=401, detail=str(e))
    return HTTPException(status_code=502, detail=str(e))

@router.get("", response_model=list[ActivityOut])
def all_activities(
    activity_type: str | None = Query(None, alias="type"),
    db: Session = Depends(get_session),
):
    return ingest.list_activities(db, activity_type or settings.PRIMARY_ACTIVITY_TYPE)

@router.get("/count", response_model=CountOut)
def activity_count(db: Session = Depends(get_session)):
    return CountOut(count=ingest.activity_count(db))

@router.get("/token-status", response_model=TokenStatus)
def get_token_status(db: Session = Depends(get_session)):
    return token_status(db)

@router.post("/refetch", response_model=RefetchResult)
async def refetch(
    db: Session = Depends(get_session),
    tokens: TokenManager = Depends(get_tokens),
):
    try:
        result = await ingest.fetch_and_persist(db, tokens)
    except (StravaAPIError, AuthorizationError) as e:
        raise platform_error(e)
    return RefetchResult(success=True, fetched=result.fetched, total=result.total)

@router.put("/{activity_id}", response_model=MessageOut)
async def rename(
    activity_id: int,
    body: ActivityUpdate,
    db: Session = Depends(get_session),
    tokens: TokenManager = Depends(get_tokens),
):
    name = (body.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Name is required")
    try:
        await ingest.rename_activity(db, tokens, activity_id, name)
    except (StravaAPIError, AuthorizationError) as e:
        raise platform_error(e)
    return MessageOut(success=True, message="Activity updated successfully")
