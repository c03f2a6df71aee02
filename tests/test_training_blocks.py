import pytest

from runlog import ingest
from runlog.schemas import StravaActivityIn

VALID = {
    "raceName": "Boston Marathon",
    "identifier": "BOS25",
    "raceDate": "2025-04-21",
    "startDate": "2025-01-07",
    "durationWeeks": 15,
}


def create(client, **overrides):
    return client.post("/api/training-blocks", json={**VALID, **overrides})


def test_create_and_fetch_round_trip(client):
    resp = create(client)
    assert resp.status_code == 201
    created = resp.json()

    fetched = client.get(f"/api/training-blocks/{created['id']}").json()

    assert fetched == created
    assert fetched["raceName"] == "Boston Marathon"
    assert fetched["identifier"] == "BOS25"
    assert fetched["raceDate"] == "2025-04-21"
    assert fetched["startDate"] == "2025-01-07"
    assert fetched["durationWeeks"] == 15
    assert isinstance(fetched["weeksRemaining"], int)


def test_create_accepts_iso_timestamps(client):
    resp = create(client, raceDate="2025-04-21T00:00:00.000Z", startDate="2025-01-07T00:00:00.000Z")

    assert resp.status_code == 201
    assert resp.json()["startDate"] == "2025-01-07"


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"raceName": "  "}, "Race name is required"),
        ({"identifier": ""}, "Identifier is required"),
        ({"raceDate": None}, "Race date is required"),
        ({"startDate": None}, "Start date is required"),
        ({"raceDate": "someday"}, "Invalid race date"),
        ({"startDate": "2025-13-45"}, "Invalid start date"),
        ({"durationWeeks": 0}, "Duration weeks must be greater than 0"),
        ({"durationWeeks": -3}, "Duration weeks must be greater than 0"),
        ({"startDate": "2025-04-21"}, "Start date must be before race date"),
        ({"startDate": "2025-05-01"}, "Start date must be before race date"),
    ],
)
def test_create_rejects_invalid_payloads(client, overrides, message):
    resp = create(client, **overrides)

    assert resp.status_code == 400
    assert resp.json()["detail"] == message
    assert client.get("/api/training-blocks").json() == []


def test_list_is_ordered_by_race_date(client):
    create(client, raceName="Late", raceDate="2025-10-12")
    create(client, raceName="Early", raceDate="2025-03-01")

    assert [b["raceName"] for b in client.get("/api/training-blocks").json()] == ["Early", "Late"]


def test_partial_update(client):
    block = create(client).json()

    resp = client.patch(f"/api/training-blocks/{block['id']}", json={"raceName": "Boston 2025"})

    assert resp.status_code == 200
    assert resp.json()["raceName"] == "Boston 2025"
    assert resp.json()["startDate"] == "2025-01-07"


def test_update_checks_dates_against_stored_record(client):
    block = create(client).json()

    resp = client.patch(f"/api/training-blocks/{block['id']}", json={"startDate": "2025-05-01"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Start date must be before race date"

    resp = client.patch(f"/api/training-blocks/{block['id']}", json={"raceDate": "2025-01-01"})
    assert resp.status_code == 400

    resp = client.patch(
        f"/api/training-blocks/{block['id']}",
        json={"startDate": "2025-05-01", "raceDate": "2025-09-01"},
    )
    assert resp.status_code == 200
    assert resp.json()["raceDate"] == "2025-09-01"


def test_update_rejects_blank_fields(client):
    block = create(client).json()

    resp = client.patch(f"/api/training-blocks/{block['id']}", json={"identifier": " "})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Identifier is required"


def test_missing_block_is_404(client):
    assert client.get("/api/training-blocks/999").status_code == 404
    assert client.patch("/api/training-blocks/999", json={"raceName": "x"}).status_code == 404
    assert client.delete("/api/training-blocks/999").status_code == 404


def test_delete(client):
    block = create(client).json()

    resp = client.delete(f"/api/training-blocks/{block['id']}")

    assert resp.json() == {"success": True, "message": "Training block deleted successfully"}
    assert client.get(f"/api/training-blocks/{block['id']}").status_code == 404


def test_block_weeks(client, db, strava_payload):
    local = "2025-01-14T07:00:00Z"
    ingest.upsert_activity(db, StravaActivityIn.model_validate(strava_payload(1, start_date=local, start_date_local=local)))
    block = create(client, durationWeeks=3).json()

    body = client.get(f"/api/training-blocks/{block['id']}/weeks").json()

    assert body["block"]["id"] == block["id"]
    assert [w["weekStart"] for w in body["weeks"]] == ["2025-01-13", "2025-01-20", "2025-01-27"]
    assert [w["weekNumber"] for w in body["weeks"]] == [1, 2, 3]
    assert body["weeks"][0]["summary"]["totalRuns"] == 1
    assert body["weeks"][1]["summary"]["totalRuns"] == 0
