"""
Tests for event routes: multipart creation, line-ups, ownership and media
"""
import pytest

from conftest import headers_for, png_file, stored_files

from gig_guide.event_routes import parse_artist_ids
from gig_guide.exceptions import InvalidInputError


class TestParseArtistIds:

    @pytest.mark.parametrize("value, expected", [
        (None, []),
        ("[1, 2, 3]", [1, 2, 3]),
        ("1,2, 3", [1, 2, 3]),
        (["1", "2"], [1, 2]),
        (["[4, 5]", "6"], [4, 5, 6]),
        ([7, 7, "7"], [7]),
        ("", []),
    ])
    def test_accepted_shapes(self, value, expected):
        assert parse_artist_ids(value) == expected

    def test_rejects_garbage(self):
        with pytest.raises(InvalidInputError):
            parse_artist_ids("1,two")

    def test_rejects_broken_json(self):
        with pytest.raises(InvalidInputError):
            parse_artist_ids("[1, 2")


class TestCreateEvent:

    def test_event_fixture_owned_by_artist(self, event, artist_user, venue):
        assert event["owner_type"] == "artist"
        assert event["owner_id"] == artist_user.artist.id
        assert event["date"] == "2099-06-01"
        assert event["time"] == "20:00"
        assert event["venue"]["name"] == "The Roundhouse"
        assert event["is_owner"] is True

    def test_create_with_lineup_poster_and_gallery(self, client, artist_headers, artist_user, other_artist_user):
        lineup = f"[{artist_user.artist.id}, {other_artist_user.artist.id}]"
        response = client.post(
            "/api/events/create_event",
            data={"name": "Summer Fest", "date": "2099-07-04", "time": "18:30:00", "price": "12.50",
                  "artist_ids": lineup},
            files=[("poster", png_file("poster.png")), ("gallery", png_file("g1.png"))],
            headers=artist_headers,
        )
        assert response.status_code == 201, response.text
        data = response.json()
        assert sorted(data["artist_ids"]) == sorted([artist_user.artist.id, other_artist_user.artist.id])
        assert {a["stage_name"] for a in data["artists"]} == {"The Night Owls", "Brass Foundry"}
        assert data["price"] == 12.5
        assert "/uploads/events/" in data["poster"]
        assert "summer_fest" in data["poster"]
        assert len(data["gallery"]) == 1

    def test_plain_user_creates_as_user(self, client, plain_user, user_headers):
        response = client.post(
            "/api/events/create_event",
            data={"name": "House Party", "date": "2099-01-01", "time": "21:00"},
            headers=user_headers,
        )
        assert response.status_code == 201
        assert response.json()["owner_type"] == "user"
        assert response.json()["owner_id"] == plain_user.id

    def test_cannot_create_for_other_artist(self, client, artist_headers, other_artist_user):
        response = client.post(
            "/api/events/create_event",
            data={"name": "Fake", "date": "2099-01-01", "time": "21:00",
                  "owner_type": "artist", "owner_id": str(other_artist_user.artist.id)},
            headers=artist_headers,
        )
        assert response.status_code == 403

    def test_admin_creates_for_organiser(self, client, admin_headers, organiser_user):
        response = client.post(
            "/api/events/create_event",
            data={"name": "Gala", "date": "2099-01-01", "time": "19:00",
                  "owner_type": "organiser", "owner_id": str(organiser_user.organiser.id)},
            headers=admin_headers,
        )
        assert response.status_code == 201
        assert response.json()["owner_type"] == "organiser"

    def test_unknown_artist_in_lineup(self, client, artist_headers):
        response = client.post(
            "/api/events/create_event",
            data={"name": "Ghosts", "date": "2099-01-01", "time": "21:00", "artist_ids": "999"},
            headers=artist_headers,
        )
        assert response.status_code == 400

    def test_invalid_owner_type(self, client, admin_headers):
        response = client.post(
            "/api/events/create_event",
            data={"name": "X", "date": "2099-01-01", "time": "21:00", "owner_type": "venue", "owner_id": "1"},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_missing_required_fields(self, client, artist_headers):
        response = client.post("/api/events/create_event", data={"name": "No date"}, headers=artist_headers)
        assert response.status_code == 422

    def test_rejected_gallery_leaves_no_files(self, client, artist_headers):
        before = stored_files()
        response = client.post(
            "/api/events/create_event",
            data={"name": "Half Uploaded", "date": "2099-01-01", "time": "21:00"},
            files=[
                ("poster", png_file("poster.png")),
                ("gallery", ("bad.exe", b"MZ\x90\x00", "application/octet-stream")),
            ],
            headers=artist_headers,
        )
        assert response.status_code == 400
        assert stored_files() == before
        assert client.get("/api/events").json() == []


class TestEventQueries:

    def test_list_upcoming(self, client, event):
        events = client.get("/api/events", params={"upcoming": "true"}).json()
        assert [e["id"] for e in events] == [event["id"]]

    def test_list_by_owner(self, client, artist_user, event):
        events = client.get(f"/api/events/owner/artist/{artist_user.artist.id}").json()
        assert [e["id"] for e in events] == [event["id"]]

    def test_get_event_includes_features(self, client, event):
        data = client.get(f"/api/events/{event['id']}").json()
        assert data["features"] == []
        assert data["is_owner"] is False

    def test_artist_events_include_lineup_appearances(self, client, organiser_headers, other_artist_user):
        created = client.post(
            "/api/events/create_event",
            data={"name": "Showcase", "date": "2099-03-03", "time": "20:00",
                  "artist_ids": str(other_artist_user.artist.id)},
            headers=organiser_headers,
        ).json()
        events = client.get(f"/api/artists/{other_artist_user.artist.id}/events").json()
        assert [e["id"] for e in events] == [created["id"]]


class TestEditEvent:

    def test_owner_edits(self, client, artist_headers, event):
        response = client.put(
            f"/api/events/edit/{event['id']}", json={"name": "Saturday Jazz", "time": "21:15"}, headers=artist_headers
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Saturday Jazz"
        assert response.json()["time"] == "21:15"

    def test_non_owner_forbidden(self, client, other_artist_headers, event):
        response = client.put(f"/api/events/edit/{event['id']}", json={"name": "Mine"}, headers=other_artist_headers)
        assert response.status_code == 403

    def test_admin_edits(self, client, admin_headers, event):
        response = client.put(f"/api/events/edit/{event['id']}", json={"capacity": 80}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["capacity"] == 80

    def test_replace_lineup(self, client, artist_headers, artist_user, other_artist_user, event):
        response = client.put(
            f"/api/events/edit/{event['id']}",
            json={"artist_ids": [artist_user.artist.id, other_artist_user.artist.id]},
            headers=artist_headers,
        )
        assert len(response.json()["artist_ids"]) == 2

        response = client.put(
            f"/api/events/edit/{event['id']}",
            json={"artist_ids": [other_artist_user.artist.id]},
            headers=artist_headers,
        )
        assert response.json()["artist_ids"] == [other_artist_user.artist.id]


class TestLineup:

    def test_add_and_remove_artist(self, client, artist_headers, other_artist_user, event):
        artist_id = other_artist_user.artist.id
        response = client.post(
            f"/api/events/{event['id']}/artists", json={"artist_ids": [artist_id]}, headers=artist_headers
        )
        assert response.status_code == 200
        assert [a["id"] for a in response.json()] == [artist_id]

        # adding again leaves the line-up unchanged
        response = client.post(
            f"/api/events/{event['id']}/artists", json={"artist_ids": [artist_id]}, headers=artist_headers
        )
        assert len(response.json()) == 1

        response = client.delete(f"/api/events/{event['id']}/artists/{artist_id}", headers=artist_headers)
        assert response.status_code == 200
        assert client.get(f"/api/events/{event['id']}/artists").json() == []

    def test_remove_artist_not_on_lineup(self, client, artist_headers, event):
        response = client.delete(f"/api/events/{event['id']}/artists/999", headers=artist_headers)
        assert response.status_code == 404

    def test_lineup_changes_need_ownership(self, client, other_artist_headers, other_artist_user, event):
        response = client.post(
            f"/api/events/{event['id']}/artists",
            json={"artist_ids": [other_artist_user.artist.id]},
            headers=other_artist_headers,
        )
        assert response.status_code == 403


class TestEventMediaAndDelete:

    def test_replace_poster(self, client, artist_headers, event):
        first = client.post(f"/api/events/{event['id']}/poster", files=[("poster", png_file("p1.png"))],
                            headers=artist_headers).json()["poster"]
        second = client.post(f"/api/events/{event['id']}/poster", files=[("poster", png_file("p2.png"))],
                             headers=artist_headers).json()["poster"]
        assert first != second
        assert client.get(first.replace("http://testserver", "")).status_code == 404
        assert client.get(second.replace("http://testserver", "")).status_code == 200

    def test_gallery_upload(self, client, artist_headers, event):
        response = client.post(
            f"/api/events/{event['id']}/gallery",
            files=[("gallery", png_file("a.png")), ("gallery", png_file("b.png"))],
            headers=artist_headers,
        )
        assert response.status_code == 200
        assert len(response.json()["gallery"]) == 2

    def test_delete_event(self, client, artist_headers, user_headers, event):
        client.post("/api/ratings", json={"rateableType": "event", "rateableId": event["id"], "rating": 4},
                    headers=user_headers)

        response = client.delete(f"/api/events/delete/{event['id']}", headers=artist_headers)
        assert response.status_code == 200
        assert client.get(f"/api/events/{event['id']}").status_code == 404
        assert client.get(f"/api/ratings/event/{event['id']}/average").json() == {"average": 0.0, "count": 0}

    def test_delete_by_stranger(self, client, make_user, event):
        stranger = make_user("user")
        response = client.delete(f"/api/events/delete/{event['id']}", headers=headers_for(stranger))
        assert response.status_code == 403

    def test_partial_gallery_upload_is_rolled_back(self, client, artist_headers, event):
        before = stored_files()
        response = client.post(
            f"/api/events/{event['id']}/gallery",
            files=[("gallery", png_file("a.png")), ("gallery", ("notes.txt", b"hello", "text/plain"))],
            headers=artist_headers,
        )
        assert response.status_code == 400
        assert stored_files() == before
        assert client.get(f"/api/events/{event['id']}").json()["gallery"] == []

    @pytest.mark.parametrize("path, field", [
        ("poster", "poster"),
        ("gallery", "gallery"),
    ])
    def test_media_upload_by_non_owner(self, client, other_artist_headers, event, path, field):
        before = stored_files()
        response = client.post(
            f"/api/events/{event['id']}/{path}", files=[(field, png_file())], headers=other_artist_headers
        )
        assert response.status_code == 403
        assert stored_files() == before
