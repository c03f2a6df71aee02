import httpx
from .config import settings

BASE = "https://www.strava.com/api/v3"
TOKEN_URL = "https://www.strava.com/oauth/token"
AUTHORIZE_URL = "https://www.strava.com/oauth/authorize"

class StravaAPIError(Exception):
    """A platform call failed in a way a retry will not fix."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

def _client(timeout: float = 30) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout)

def is_missing_scope(response: httpx.Response) -> bool:
    """Strava answers 401 with `{errors: [{resource: AccessToken, field: ..._permission, code: missing}]}`
    when the token lacks a scope."""
    if response.status_code != 401:
        return False
    try:
        body = response.json()
    except ValueError:
        return False
    errors = body.get("errors") if isinstance(body, dict) else None
    for e in errors or []:
        if (
            e.get("resource") == "AccessToken"
            and e.get("code") == "missing"
            and str(e.get("field", "")).endswith("permission")
        ):
            return True
    return False

async def exchange_code(code: str):
    async with _client() as c:
        r = await c.post(TOKEN_URL, data={
            "client_id": settings.STRAVA_CLIENT_ID,
            "client_secret": settings.STRAVA_CLIENT_SECRET,
            "code": code,
            "grant_type": "authorization_code",
        })
        r.raise_for_status()
        return r.json()

async def refresh_token(refresh_token: str):
    async with _client() as c:
        r = await c.post(TOKEN_URL, data={
            "client_id": settings.STRAVA_CLIENT_ID,
            "client_secret": settings.STRAVA_CLIENT_SECRET,
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        })
        r.raise_for_status()
        return r.json()

async def get_activity(access_token: str, activity_id: int):
    async with _client() as c:
        r = await c.get(f"{BASE}/activities/{activity_id}", headers={"Authorization": f"Bearer {access_token}"})
        r.raise_for_status()
        return r.json()

async def list_activities(access_token: str, page: int = 1, per_page: int = 30):
    async with _client() as c:
        r = await c.get(
            f"{BASE}/athlete/activities",
            headers={"Authorization": f"Bearer {access_token}"},
            params={"page": page, "per_page": per_page},
        )
        r.raise_for_status()
        return r.json()

async def update_activity(access_token: str, activity_id: int, name: str):
    async with _client() as c:
        r = await c.put(
            f"{BASE}/activities/{activity_id}",
            headers={"Authorization": f"Bearer {access_token}"},
            json={"name": name},
        )
        r.raise_for_status()
        return r.json()
