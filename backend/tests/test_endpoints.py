"""
HTTP API tests, run against a fully wired app with storage under tmp_path.
"""
import json

from fastapi.testclient import TestClient

from spark.app import connect, create_app, disconnect, sio
from spark.config import Settings

CENTRAL_PARK = {"latitude": 40.7851, "longitude": -73.9683}


def _create(client, **body):
    body.setdefault("title", "A note")
    body.setdefault("content", "Hidden until unlocked")
    response = client.post("/api/entries/", json=body)
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["entries"] == 0

    def test_root(self, client):
        assert client.get("/").json()["name"] == "Spark API"


class TestEntries:
    def test_create_returns_locked_view(self, client, settings):
        created = _create(client, weather="rain")

        assert created["persisted"] is True
        assert created["storage_error"] is None
        assert created["entry"]["is_locked"] is True
        assert created["entry"]["content"] is None
        assert created["entry"]["weather"] == "rain"

        document = json.loads(open(settings.STORAGE_PATH, encoding="utf-8").read())
        assert [r["id"] for r in document] == [created["entry"]["id"]]
        assert document[0]["content"] == "Hidden until unlocked"

    def test_create_validates_payload(self, client):
        bad_radius = {"title": "t", "content": "c", "geofence": {**CENTRAL_PARK, "radius": 0}}
        assert client.post("/api/entries/", json=bad_radius).status_code == 422
        assert client.post("/api/entries/", json={"title": "t", "content": "c", "weather": "unknown"}).status_code == 422
        assert client.post("/api/entries/", json={"title": "t"}).status_code == 422

    def test_get_includes_condition_status(self, client):
        created = _create(client, weather="snow")["entry"]

        view = client.get(f"/api/entries/{created['id']}").json()

        assert view["conditions"]["weather"] is False
        assert view["conditions"]["geofence"] is None
        assert view["conditions"]["earliest_unlock"] is True

    def test_missing_entry_is_404(self, client):
        assert client.get("/api/entries/nope").status_code == 404
        assert client.put("/api/entries/nope", json={"title": "x"}).status_code == 404

    def test_update_entry(self, client):
        created = _create(client, weather="snow")["entry"]

        response = client.put(f"/api/entries/{created['id']}", json={"title": "Renamed", "weather": None})

        assert response.status_code == 200
        updated = response.json()["entry"]
        assert updated["title"] == "Renamed"
        assert updated["weather"] is None
        assert updated["creation_date"] == created["creation_date"]

    def test_list_filters(self, client):
        _create(client, title="Rainy day", weather="rain")
        _create(client, title="Calm evening", emotion="calm")

        titles = {e["title"] for e in client.get("/api/entries/").json()}
        assert titles == {"Rainy day", "Calm evening"}

        rainy = client.get("/api/entries/", params={"weather": "rain"}).json()
        assert [e["title"] for e in rainy] == ["Rainy day"]

        found = client.get("/api/entries/", params={"search": "EVENING"}).json()
        assert [e["title"] for e in found] == ["Calm evening"]

        assert client.get("/api/entries/", params={"sort": "sideways"}).status_code == 422

    def test_clear(self, client, settings):
        _create(client)
        _create(client)

        response = client.delete("/api/entries/")

        assert response.json()["cleared_count"] == 2
        assert client.get("/api/entries/").json() == []
        assert json.loads(open(settings.STORAGE_PATH, encoding="utf-8").read()) == []

    def test_demo_entries(self, client):
        response = client.post("/api/entries/demo")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["entry_count"] == 10
        assert client.get("/health").json()["entries"] == 10

        unlocked = client.get("/api/entries/", params={"lock_state": "unlocked"}).json()
        assert len(unlocked) == 3
        assert all(e["content"] for e in unlocked)


class TestContext:
    def test_initial_context(self, client):
        state = client.get("/api/context/").json()
        assert state["emotion"] == "happy"
        assert state["coordinate"] is None
        assert state["location_permission"] == "not_determined"

    def test_reevaluate_unlocks_unconditional_entry(self, client):
        created = _create(client)["entry"]

        result = client.post("/api/context/reevaluate").json()

        assert result["unlocked_ids"] == [created["id"]]
        view = client.get(f"/api/entries/{created['id']}").json()
        assert view["is_locked"] is False
        assert view["content"] == "Hidden until unlocked"
        assert view["unlocked_at"] is not None

    def test_weather_code_unlocks(self, client):
        created = _create(client, weather="rain")["entry"]

        result = client.put("/api/context/weather", json={"wmo_code": 61}).json()

        assert result["unlocked_ids"] == [created["id"]]
        assert client.get("/api/context/").json()["weather"] == "rain"

    def test_weather_payload_needs_one_reading(self, client):
        assert client.put("/api/context/weather", json={}).status_code == 422

    def test_emotion_unlocks_and_persists(self, client, settings):
        created = _create(client, emotion="calm")["entry"]

        assert client.put("/api/context/emotion", json={"emotion": "sad"}).json()["unlocked_ids"] == []
        result = client.put("/api/context/emotion", json={"emotion": "calm"}).json()

        assert result["unlocked_ids"] == [created["id"]]
        stored = json.loads(open(settings.PREFERENCES_PATH, encoding="utf-8").read())
        assert stored["currentEmotion"] == "calm"

    def test_location_unlocks_inside_geofence(self, client):
        created = _create(client, geofence={**CENTRAL_PARK, "radius": 150})["entry"]
        far = {"latitude": 40.7896, "longitude": -73.9683}

        assert client.put("/api/context/location", json={"coordinate": far}).json()["unlocked_ids"] == []
        result = client.put("/api/context/location", json={"coordinate": CENTRAL_PARK}).json()

        assert result["unlocked_ids"] == [created["id"]]

    def test_denied_location_is_not_used(self, client):
        _create(client, geofence={**CENTRAL_PARK, "radius": 150})

        response = client.put(
            "/api/context/location",
            json={"coordinate": CENTRAL_PARK, "permission": "denied"},
        )

        assert response.json()["unlocked_ids"] == []
        assert client.get("/api/context/").json()["coordinate"] is None


class TestRestart:
    def test_unlocks_survive_restart(self, client, settings):
        created = _create(client)["entry"]
        client.post("/api/context/reevaluate")

        document = json.loads(open(settings.STORAGE_PATH, encoding="utf-8").read())

        assert [r["id"] for r in document] == [created["id"]]
        assert document[0]["unlockedAt"].endswith("Z")


class TestStartup:
    def test_seeds_demo_entries_into_empty_store(self, tmp_path):
        settings = Settings(
            STORAGE_PATH=str(tmp_path / "seed" / "sparkEntries.json"),
            PREFERENCES_PATH=str(tmp_path / "seed" / "preferences.json"),
            SEED_DEMO_ENTRIES=True,
        )
        with TestClient(create_app(settings)) as client:
            assert client.get("/health").json()["entries"] == 10

    def test_existing_entries_are_not_reseeded(self, tmp_path):
        settings = Settings(
            STORAGE_PATH=str(tmp_path / "seed" / "sparkEntries.json"),
            PREFERENCES_PATH=str(tmp_path / "seed" / "preferences.json"),
            SEED_DEMO_ENTRIES=True,
        )
        with TestClient(create_app(settings)) as client:
            client.delete("/api/entries/")
            _create(client)

        with TestClient(create_app(settings)) as client:
            assert client.get("/health").json()["entries"] == 1

    def test_socket_handlers_are_registered_once(self, settings):
        before = dict(sio.handlers["/"])
        create_app(settings)
        create_app(settings)

        assert sio.handlers["/"] == before
        assert before["connect"] is connect
        assert before["disconnect"] is disconnect
