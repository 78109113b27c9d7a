"""Tests for the presenter HTTP and WebSocket API."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocket, WebSocketDisconnect

from sow_presenter import __version__
from sow_presenter.server.app import create_app
from sow_presenter.server.routes.presenter import WS_CLOSE_SEND_FAILED

API = "/api/v1"

AMAZING_GRACE = "Amazing grace\nhow sweet\n\nthe sound"


@pytest.fixture
def client(presenter_config):
    """TestClient running the app lifespan against temp paths."""
    with TestClient(create_app(presenter_config)) as test_client:
        yield test_client


@pytest.fixture
def schedule_id(client):
    """ID of a freshly created schedule."""
    return client.post(f"{API}/schedules", json={"name": "Sunday Service"}).json()["id"]


@pytest.fixture
def song_entry(client, schedule_id):
    """Amazing Grace added to the schedule."""
    song = client.post(f"{API}/songs", json={"title": "Amazing Grace", "content": AMAZING_GRACE}).json()
    response = client.post(
        f"{API}/schedules/{schedule_id}/entries",
        json={"item_type": "song", "item_id": song["id"]},
    )
    assert response.status_code == 201
    return response.json()


class TestServiceInfo:
    """Tests for root and health endpoints."""

    def test_root(self, client):
        assert client.get("/").json() == {"message": "Stream of Worship Presenter", "version": __version__}

    def test_health(self, client):
        data = client.get(f"{API}/health").json()

        assert data["status"] == "healthy"
        assert data["services"]["database"]["status"] == "healthy"
        assert data["services"]["bible"]["status"] == "configured"


class TestSchedules:
    """Tests for schedule and entry endpoints."""

    def test_create_list_get(self, client, schedule_id):
        assert [s["id"] for s in client.get(f"{API}/schedules").json()] == [schedule_id]

        data = client.get(f"{API}/schedules/{schedule_id}").json()
        assert data["name"] == "Sunday Service"
        assert data["entries"] == []

    def test_rename(self, client, schedule_id):
        response = client.patch(f"{API}/schedules/{schedule_id}", json={"name": "Evening"})

        assert response.status_code == 200
        assert response.json()["name"] == "Evening"
        assert client.patch(f"{API}/schedules/schedule_missing", json={"name": "x"}).status_code == 404
        assert client.patch(f"{API}/schedules/{schedule_id}", json={"name": ""}).status_code == 422

    def test_create_requires_name(self, client):
        assert client.post(f"{API}/schedules", json={"name": ""}).status_code == 422

    def test_get_missing(self, client):
        response = client.get(f"{API}/schedules/schedule_missing")

        assert response.status_code == 404
        assert "schedule_missing" in response.json()["detail"]

    def test_song_entry(self, client, schedule_id, song_entry):
        entries = client.get(f"{API}/schedules/{schedule_id}/entries").json()

        assert entries == [song_entry]
        assert song_entry["title"] == "Amazing Grace"
        assert song_entry["slide_count"] == 2

    def test_unknown_item_type(self, client, schedule_id):
        response = client.post(
            f"{API}/schedules/{schedule_id}/entries",
            json={"item_type": "hymn", "item_id": "x"},
        )

        assert response.status_code == 422

    def test_missing_content(self, client, schedule_id):
        response = client.post(
            f"{API}/schedules/{schedule_id}/entries",
            json={"item_type": "song", "item_id": "song_missing"},
        )

        assert response.status_code == 422

    def test_scripture_entry(self, client, schedule_id):
        response = client.post(
            f"{API}/schedules/{schedule_id}/entries/scripture",
            json={"book": "Juan", "chapter": 3, "verse_nums": [16, 17, 18]},
        )

        assert response.status_code == 201
        assert response.json()["title"] == "Juan 3:16-18 NVI"

    def test_scripture_missing_book(self, client, schedule_id):
        response = client.post(
            f"{API}/schedules/{schedule_id}/entries/scripture",
            json={"book": "Génesis", "chapter": 1, "verse_nums": [1]},
        )

        assert response.status_code == 404

    def test_image_entry(self, client, schedule_id):
        response = client.post(
            f"{API}/schedules/{schedule_id}/entries/image",
            json={"image_url": "http://x/bg.png", "name": "Welcome"},
        )

        assert response.status_code == 201
        assert response.json()["title"] == "Welcome"

    def test_reorder(self, client, schedule_id, song_entry):
        image = client.post(
            f"{API}/schedules/{schedule_id}/entries/image", json={"image_url": "http://x/bg.png"}
        ).json()

        response = client.patch(f"{API}/schedules/{schedule_id}/entries/order", json={"order": [image["id"]]})

        assert response.status_code == 200
        assert [e["id"] for e in response.json()["entries"]] == [image["id"], song_entry["id"]]

    def test_reorder_invalid_keeps_order(self, client, schedule_id, song_entry):
        response = client.patch(
            f"{API}/schedules/{schedule_id}/entries/order",
            json={"order": [song_entry["id"], "entry_bogus"]},
        )

        assert response.status_code == 422
        entries = client.get(f"{API}/schedules/{schedule_id}/entries").json()
        assert [(e["id"], e["position"]) for e in entries] == [(song_entry["id"], 0)]

    def test_remove_entry(self, client, schedule_id, song_entry):
        assert client.delete(f"{API}/schedules/{schedule_id}/entries/{song_entry['id']}").status_code == 200
        assert client.get(f"{API}/schedules/{schedule_id}/entries").json() == []
        assert client.delete(f"{API}/schedules/{schedule_id}/entries/{song_entry['id']}").status_code == 404

    def test_delete_schedule(self, client, schedule_id):
        assert client.delete(f"{API}/schedules/{schedule_id}").status_code == 200
        assert client.get(f"{API}/schedules/{schedule_id}").status_code == 404


class TestPresenter:
    """Tests for presentation commands."""

    def test_present_and_navigate(self, client, schedule_id, song_entry):
        base = f"{API}/schedules/{schedule_id}/presenter"

        present = client.post(f"{base}/present", json={"entry_id": song_entry["id"]}).json()
        navigate = client.post(f"{base}/navigate", json={"slide_index": 1}).json()

        assert present == {
            "action": "present",
            "type": "song",
            "title": "Amazing Grace",
            "verses": ["Amazing grace\nhow sweet", "the sound"],
            "seq": 1,
        }
        assert navigate == {"action": "navigate_to", "verse_index": 2, "seq": 2}

    def test_navigate_out_of_range(self, client, schedule_id, song_entry):
        base = f"{API}/schedules/{schedule_id}/presenter"
        client.post(f"{base}/present", json={"entry_id": song_entry["id"]})

        response = client.post(f"{base}/navigate", json={"slide_index": 2})

        assert response.status_code == 409
        assert client.get(f"{base}/state").json()["slide_index"] == 0

    def test_next_and_previous(self, client, schedule_id, song_entry):
        base = f"{API}/schedules/{schedule_id}/presenter"
        assert client.post(f"{base}/next").status_code == 409

        client.post(f"{base}/present", json={"entry_id": song_entry["id"]})
        forward = client.post(f"{base}/next").json()
        at_end = client.post(f"{base}/next").json()
        back = client.post(f"{base}/previous").json()

        assert forward == {"moved": True, "payload": {"action": "navigate_to", "verse_index": 2, "seq": 2}}
        assert at_end == {"moved": False, "payload": None}
        assert back["payload"]["verse_index"] == 1
        assert client.get(f"{base}/state").json()["slide_index"] == 0

    def test_present_missing_entry(self, client, schedule_id):
        response = client.post(
            f"{API}/schedules/{schedule_id}/presenter/present", json={"entry_id": "entry_missing"}
        )

        assert response.status_code == 404

    def test_black_and_state(self, client, schedule_id, song_entry):
        base = f"{API}/schedules/{schedule_id}/presenter"
        client.post(f"{base}/present", json={"entry_id": song_entry["id"]})

        assert client.post(f"{base}/black").json() == {"action": "black", "seq": 2}

        state = client.get(f"{base}/state").json()
        assert state["blacked"] is True
        assert state["active_entry_id"] == song_entry["id"]
        assert state["present"]["title"] == "Amazing Grace"


class TestDisplaySocket:
    """Tests for the display WebSocket."""

    def test_display_receives_commands(self, client, schedule_id, song_entry):
        base = f"{API}/schedules/{schedule_id}/presenter"

        with client.websocket_connect(f"{base}/ws") as first, client.websocket_connect(f"{base}/ws") as second:
            client.post(f"{base}/present", json={"entry_id": song_entry["id"]})
            client.post(f"{base}/navigate", json={"slide_index": 1})

            for display in (first, second):
                assert display.receive_json()["action"] == "present"
                assert display.receive_json() == {"action": "navigate_to", "verse_index": 2, "seq": 2}

    def test_unknown_schedule_closed(self, client):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect(f"{API}/schedules/schedule_missing/presenter/ws") as ws:
                ws.receive_json()

        assert exc_info.value.code == 4404

    def test_failed_send_closes_socket(self, client, schedule_id, song_entry):
        base = f"{API}/schedules/{schedule_id}/presenter"

        with client.websocket_connect(f"{base}/ws") as display:
            with patch.object(WebSocket, "send_json", side_effect=RuntimeError("socket gone")):
                client.post(f"{base}/present", json={"entry_id": song_entry["id"]})
                with pytest.raises(WebSocketDisconnect) as exc_info:
                    display.receive_json()

        assert exc_info.value.code == WS_CLOSE_SEND_FAILED

    def test_display_disconnect(self, client, schedule_id, song_entry):
        base = f"{API}/schedules/{schedule_id}/presenter"

        with client.websocket_connect(f"{base}/ws"):
            pass

        response = client.post(f"{base}/present", json={"entry_id": song_entry["id"]})
        assert response.status_code == 200
        assert client.get(f"{API}/health").json()["services"]["displays"] == {}


class TestCatalog:
    """Tests for song, scripture and bible endpoints."""

    def test_songs(self, client):
        song = client.post(f"{API}/songs", json={"title": "Amazing Grace", "content": AMAZING_GRACE}).json()

        assert client.get(f"{API}/songs/{song['id']}").json()["title"] == "Amazing Grace"
        assert [s["id"] for s in client.get(f"{API}/songs", params={"q": "grace"}).json()] == [song["id"]]
        assert client.get(f"{API}/songs/song_missing").status_code == 404

    def test_delete_song(self, client, song_entry):
        in_use = client.delete(f"{API}/songs/{song_entry['item_id']}")
        unused = client.post(f"{API}/songs", json={"title": "Temporary"}).json()

        assert in_use.status_code == 422
        assert client.delete(f"{API}/songs/{unused['id']}").status_code == 200
        assert client.delete(f"{API}/songs/{unused['id']}").status_code == 404

    def test_scripture_search(self, client, schedule_id):
        client.post(
            f"{API}/schedules/{schedule_id}/entries/scripture",
            json={"book": "Salmos", "chapter": 23, "verse_nums": [1]},
        )

        results = client.get(f"{API}/scriptures", params={"q": "pastor"}).json()

        assert [s["bible_reference"] for s in results] == ["Salmos 23:1 NVI"]

    def test_bible_browser(self, client):
        books = client.get(f"{API}/bible/books", params={"bible_version": "NVI"}).json()
        chapters = client.get(f"{API}/bible/chapters", params={"book_id": "Juan"}).json()
        verses = client.get(f"{API}/bible/verses", params={"book_id": "Juan", "chapter_num": 3}).json()

        assert books == [{"title": "Juan", "chapters": 2}, {"title": "Salmos", "chapters": 1}]
        assert chapters == [3, 4]
        assert [v["num"] for v in verses] == [16, 17, 18]

    def test_bible_unknown_version(self, client):
        assert client.get(f"{API}/bible/books", params={"bible_version": "KJV"}).status_code == 404
