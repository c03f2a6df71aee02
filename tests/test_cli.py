import pytest
from typer.testing import CliRunner

from runlog import ingest, strava
from runlog.cli import app
from runlog.logger import setup_logger
from runlog.models import Activity, StravaToken
from runlog.schemas import StravaActivityIn
from runlog.strava import StravaAPIError

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_logger():
    # the CLI callback points loguru at the runner's captured stderr
    yield
    setup_logger()


@pytest.fixture
def fake_strava(monkeypatch, strava_payload):
    async def fake_list(token, page=1, per_page=30):
        return [strava_payload(1), strava_payload(2)]

    async def fake_detail(token, activity_id):
        return {"id": activity_id, "calories": 300.0}

    monkeypatch.setattr(strava, "list_activities", fake_list)
    monkeypatch.setattr(strava, "get_activity", fake_detail)


def test_truncate_refuses_without_confirmation(db, stored_token, strava_payload):
    ingest.upsert_activity(db, StravaActivityIn.model_validate(strava_payload(1)))

    result = runner.invoke(app, ["truncate"])

    assert result.exit_code == 1
    assert "Refusing to truncate" in result.stdout
    assert db.query(Activity).count() == 1


def test_truncate_deletes_activities_and_tokens(db, stored_token, strava_payload):
    ingest.upsert_activity(db, StravaActivityIn.model_validate(strava_payload(1)))
    ingest.upsert_activity(db, StravaActivityIn.model_validate(strava_payload(2)))

    result = runner.invoke(app, ["truncate", "--yes"])

    assert result.exit_code == 0
    assert "Deleted 2 activities" in result.stdout
    assert "Deleted 1 tokens" in result.stdout
    assert db.query(Activity).count() == 0
    assert db.query(StravaToken).count() == 0


def test_weekly_with_empty_database():
    result = runner.invoke(app, ["weekly"])

    assert result.exit_code == 0
    assert "No activity data available for weekly breakdown." in result.stdout


def test_weekly_prints_summaries(db, strava_payload):
    ingest.upsert_activity(db, StravaActivityIn.model_validate(strava_payload(1)))

    result = runner.invoke(app, ["weekly"])

    assert result.exit_code == 0
    assert "Weekly Training" in result.stdout


def test_fetch_saves_and_reports(db, stored_token, fake_strava):
    result = runner.invoke(app, ["fetch", "--per-page", "2"])

    assert result.exit_code == 0
    assert "Saved 2 of 2 activities" in result.stdout
    assert db.query(Activity).count() == 2


def test_fetch_platform_failure_exits_non_zero(monkeypatch, stored_token):
    async def failing_fetch(tokens, page=1, per_page=None):
        raise StravaAPIError("Strava request failed: HTTP 503", 503)

    monkeypatch.setattr(ingest, "fetch_activities", failing_fetch)

    result = runner.invoke(app, ["fetch"])

    assert result.exit_code == 1


def test_fetch_without_token_exits_non_zero(fake_strava):
    result = runner.invoke(app, ["fetch"])

    assert result.exit_code == 1


def test_token_status_without_token():
    result = runner.invoke(app, ["token-status"])

    assert result.exit_code == 0
    assert "No Strava token stored." in result.stdout
