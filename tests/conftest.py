"""Shared fixtures.

Settings are read once at import, so the environment is prepared before any
runlog module is imported. Every test gets a freshly created SQLite schema.
"""
import os
import tempfile
import time
from pathlib import Path

_TMP = Path(tempfile.mkdtemp(prefix="runlog-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'test.db'}"
os.environ["STRAVA_CLIENT_ID"] = "test-client"
os.environ["STRAVA_CLIENT_SECRET"] = "test-secret"
os.environ["OAUTH_INTERACTIVE"] = "false"
os.environ.pop("STRAVA_REFRESH_TOKEN", None)

import httpx
import pytest
from fastapi.testclient import TestClient

from runlog.db import SessionLocal, engine
from runlog.models import Base
from runlog.tokens import save_token


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    from runlog.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def stored_token(db):
    """A valid token record good for an hour."""
    return save_token(
        db,
        {
            "access_token": "access-1",
            "refresh_token": "refresh-1",
            "expires_at": int(time.time()) + 3600,
            "athlete": {"id": 42},
        },
        scope="read,activity:read_all,activity:write",
    )


@pytest.fixture
def strava_payload():
    """Build an activity dict shaped like Strava's summary list entries."""

    def build(activity_id: int, **overrides) -> dict:
        payload = {
            "id": activity_id,
            "name": f"Run {activity_id}",
            "distance": 5000.0,
            "moving_time": 1500,
            "elapsed_time": 1600,
            "total_elevation_gain": 12.5,
            "type": "Run",
            "sport_type": "Run",
            "start_date": "2025-01-07T12:30:00Z",
            "start_date_local": "2025-01-07T07:30:00Z",
            "timezone": "(GMT-05:00) America/New_York",
            "utc_offset": -18000.0,
            "kudos_count": 3,
            "comment_count": 0,
            "trainer": False,
            "commute": False,
            "manual": False,
            "private": False,
            "average_speed": 5000 / 1500,
        }
        payload.update(overrides)
        return payload

    return build


def status_error(code: int, json: dict | None = None, method: str = "GET") -> httpx.HTTPStatusError:
    request = httpx.Request(method, "https://www.strava.com/api/v3/athlete/activities")
    response = httpx.Response(code, json=json or {}, request=request)
    return httpx.HTTPStatusError(f"HTTP {code}", request=request, response=response)


MISSING_SCOPE_BODY = {
    "message": "Authorization Error",
    "errors": [{"resource": "AccessToken", "field": "activity:read_permission", "code": "missing"}],
}


@pytest.fixture
def http_error():
    return status_error


@pytest.fixture
def missing_scope_body():
    return MISSING_SCOPE_BODY
