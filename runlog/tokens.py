"""Strava access token lifecycle.

NoToken -> Authorizing -> Valid -> (near-)Expired -> Refreshing -> Valid

The stored record is the single row of `strava_tokens`. A `TokenCache` holds
the access token for one request or one CLI run and is never shared.
"""
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable

import httpx
from loguru import logger
from sqlalchemy.orm import Session

from . import oauth, strava
from .config import settings
from .models import StravaToken
from .oauth import AuthorizationError
from .schemas import TokenStatus
from .strava import StravaAPIError

READ_SCOPES = {"activity:read", "activity:read_all"}
WRITE_SCOPES = {"activity:write"}

class AuthorizationRequired(AuthorizationError):
    pass

@dataclass
class TokenCache:
    access_token: str | None = None
    expires_at: int = 0
    scope: str | None = None

    def is_fresh(self, now: float, margin: int) -> bool:
        return bool(self.access_token) and self.expires_at - now > margin

def scope_list(scope: str | None) -> list[str]:
    return [s.strip() for s in (scope or "").split(",") if s.strip()]

def load_token(db: Session) -> StravaToken | None:
    return db.query(StravaToken).order_by(StravaToken.id.desc()).first()

def save_token(db: Session, data: dict, scope: str | None = None) -> StravaToken:
    rec = load_token(db)
    if not rec:
        rec = StravaToken()
    rec.access_token = data["access_token"]
    rec.refresh_token = data.get("refresh_token") or rec.refresh_token
    rec.expires_at = int(data.get("expires_at") or 0)
    if scope is not None:
        rec.scope = scope
    athlete = data.get("athlete") or {}
    if athlete.get("id"):
        rec.athlete_id = athlete["id"]
    db.add(rec)
    db.commit()
    return rec

def token_status(db: Session) -> TokenStatus:
    rec = load_token(db)
    if not rec:
        return TokenStatus(has_token=False, has_read_scope=False, has_write_scope=False, scopes=[])
    scopes = scope_list(rec.scope)
    return TokenStatus(
        has_token=True,
        has_read_scope=bool(READ_SCOPES.intersection(scopes)),
        has_write_scope=bool(WRITE_SCOPES.intersection(scopes)),
        scopes=scopes,
        expires_at=datetime.fromtimestamp(rec.expires_at, tz=timezone.utc),
    )

def _http_error(prefix: str, e: httpx.HTTPError) -> StravaAPIError:
    if isinstance(e, httpx.HTTPStatusError):
        return StravaAPIError(
            f"{prefix}: HTTP {e.response.status_code} {e.response.text[:200]}",
            e.response.status_code,
        )
    return StravaAPIError(f"{prefix}: {e}")

class TokenManager:
    def __init__(
        self,
        db: Session,
        cache: TokenCache | None = None,
        *,
        interactive: bool | None = None,
        authorize_flow: Callable[[], Awaitable[oauth.AuthorizationGrant]] | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.db = db
        self.cache = cache or TokenCache()
        self.interactive = settings.OAUTH_INTERACTIVE if interactive is None else interactive
        self._authorize_flow = authorize_flow or oauth.wait_for_authorization
        self._clock = clock
        self._margin = settings.TOKEN_REFRESH_MARGIN_SECONDS

    def _remember(self, rec: StravaToken) -> str:
        self.cache.access_token = rec.access_token
        self.cache.expires_at = rec.expires_at
        self.cache.scope = rec.scope
        return rec.access_token

    async def access_token(self) -> str:
        """A usable access token, refreshing or authorizing first when needed."""
        now = self._clock()
        if self.cache.is_fresh(now, self._margin):
            return self.cache.access_token

        rec = load_token(self.db)
        if rec is None:
            if settings.STRAVA_REFRESH_TOKEN:
                logger.info("No stored Strava token, using STRAVA_REFRESH_TOKEN")
                return await self.refresh(settings.STRAVA_REFRESH_TOKEN)
            logger.info("No stored Strava token, starting authorization")
            return await self.authorize()

        if rec.expires_at - now <= self._margin:
            logger.info("Strava access token expires soon, refreshing")
            return await self.refresh(rec.refresh_token)
        return self._remember(rec)

    async def refresh(self, refresh_token: str | None = None) -> str:
        if refresh_token is None:
            rec = load_token(self.db)
            if rec is None:
                return await self.authorize()
            refresh_token = rec.refresh_token
        try:
            data = await strava.refresh_token(refresh_token)
        except httpx.HTTPError as e:
            raise _http_error("Failed to refresh Strava token", e) from e
        return self._remember(save_token(self.db, data))

    async def authorize(self) -> str:
        """Run the browser flow; the only way to gain scopes a token lacks."""
        if not self.interactive:
            raise AuthorizationRequired("Strava authorization required. Run `runlog authorize` to connect an account.")
        grant = await self._authorize_flow()
        try:
            data = await strava.exchange_code(grant.code)
        except httpx.HTTPError as e:
            raise AuthorizationError(f"Failed to exchange authorization code: {e}") from e
        rec = save_token(self.db, data, scope=grant.scope or "")
        logger.info(f"Strava authorization successful (scope={rec.scope})")
        return self._remember(rec)

    async def call(self, fn, *args, **kwargs):
        """Call `fn(access_token, *args, **kwargs)`, recovering from one 401.

        A missing-scope 401 re-runs authorization, any other 401 refreshes.
        Either way the call is retried exactly once.
        """
        token = await self.access_token()
        try:
            return await fn(token, *args, **kwargs)
        except httpx.HTTPStatusError as e:
            if e.response.status_code != 401:
                raise _http_error("Strava request failed", e) from e
            if strava.is_missing_scope(e.response):
                logger.warning("Strava token is missing a required scope, re-authorizing")
                token = await self.authorize()
            else:
                logger.info("Strava rejected the access token, refreshing and retrying")
                token = await self.refresh()
        except httpx.HTTPError as e:
            raise _http_error("Strava request failed", e) from e

        try:
            return await fn(token, *args, **kwargs)
        except httpx.HTTPError as e:
            raise _http_error("Strava request failed", e) from e
