"""
Tests for the favorites API
"""
import pytest


@pytest.fixture
def artist_item(artist_user):
    return {"type": "artist", "itemId": artist_user.artist.id}


def _remove(client, payload, headers):
    return client.request("DELETE", "/api/favorites", json=payload, headers=headers)


class TestAddRemove:

    def test_add_favorite(self, client, user_headers, artist_item):
        response = client.post("/api/favorites", json=artist_item, headers=user_headers)
        assert response.status_code == 201
        assert response.json()["type"] == "artist"
        assert response.json()["itemId"] == artist_item["itemId"]

    def test_add_is_idempotent(self, client, user_headers, artist_item):
        first = client.post("/api/favorites", json=artist_item, headers=user_headers).json()
        second = client.post("/api/favorites", json=artist_item, headers=user_headers).json()
        assert first["id"] == second["id"]
        assert client.get("/api/favorites/artist", headers=user_headers).json() == [first]

    def test_add_missing_item(self, client, user_headers, db_session):
        response = client.post("/api/favorites", json={"type": "event", "itemId": 404}, headers=user_headers)
        assert response.status_code == 404

    def test_remove(self, client, user_headers, artist_item):
        client.post("/api/favorites", json=artist_item, headers=user_headers)
        response = _remove(client, artist_item, user_headers)
        assert response.status_code == 200
        assert client.get("/api/favorites/artist", headers=user_headers).json() == []

    def test_remove_absent_favorite(self, client, user_headers, artist_item):
        response = _remove(client, artist_item, user_headers)
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_requires_login(self, client, artist_item):
        assert client.post("/api/favorites", json=artist_item).status_code == 401


class TestCheckAndToggle:

    def test_check(self, client, user_headers, artist_item):
        params = {"type": "artist", "itemId": artist_item["itemId"]}
        assert client.get("/api/favorites/check", params=params, headers=user_headers).json() == {"isFavorite": False}

        client.post("/api/favorites", json=artist_item, headers=user_headers)
        assert client.get("/api/favorites/check", params=params, headers=user_headers).json() == {"isFavorite": True}

    def test_toggle_twice_restores_state(self, client, user_headers, artist_item):
        on = client.post("/api/favorites/toggle", json=artist_item, headers=user_headers)
        off = client.post("/api/favorites/toggle", json=artist_item, headers=user_headers)
        assert on.json() == {"isFavorite": True}
        assert off.json() == {"isFavorite": False}
        assert client.get("/api/favorites/artist", headers=user_headers).json() == []

    def test_favorites_are_per_user(self, client, user_headers, artist_headers, artist_item):
        client.post("/api/favorites", json=artist_item, headers=user_headers)
        params = {"type": "artist", "itemId": artist_item["itemId"]}
        assert client.get("/api/favorites/check", params=params, headers=artist_headers).json() == {"isFavorite": False}


class TestListing:

    def test_grouped(self, client, user_headers, artist_item, venue, event):
        client.post("/api/favorites", json=artist_item, headers=user_headers)
        client.post("/api/favorites", json={"type": "venue", "itemId": venue["id"]}, headers=user_headers)
        client.post("/api/favorites", json={"type": "event", "itemId": event["id"]}, headers=user_headers)

        grouped = client.get("/api/favorites", headers=user_headers).json()
        assert grouped == {
            "artist": [artist_item["itemId"]],
            "event": [event["id"]],
            "venue": [venue["id"]],
            "organiser": [],
        }

    def test_by_type(self, client, user_headers, organiser_user):
        item = {"type": "organiser", "itemId": organiser_user.organiser.id}
        client.post("/api/favorites", json=item, headers=user_headers)
        listed = client.get("/api/favorites/organiser", headers=user_headers).json()
        assert [f["itemId"] for f in listed] == [organiser_user.organiser.id]

    def test_unknown_type(self, client, user_headers):
        assert client.get("/api/favorites/spaceship", headers=user_headers).status_code == 422
