"""
Tests for venue routes: ownership on create/update/delete, uploads, listing
"""
from conftest import headers_for, png_file, stored_files


class TestCreateVenue:

    def test_artist_venue_owned_by_artist_profile(self, client, artist_user, venue):
        assert venue["owner_type"] == "artist"
        assert venue["owner_id"] == artist_user.artist.id
        assert venue["is_owner"] is True
        assert venue["can_edit"] is True

    def test_plain_user_creates_unclaimed_venue(self, client, user_headers):
        response = client.post("/api/venue/createVenue", json={"name": "Corner Pub"}, headers=user_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["owner_type"] == "unclaimed"
        assert data["owner_id"] is None
        assert data["is_owner"] is False

    def test_cannot_create_venue_for_other_profile(self, client, artist_headers, other_artist_user):
        response = client.post(
            "/api/venue/createVenue",
            json={"name": "Stolen Hall", "owner_type": "artist", "owner_id": other_artist_user.artist.id},
            headers=artist_headers,
        )
        assert response.status_code == 403
        assert response.json()["code"] == "PERMISSION_DENIED"

    def test_admin_assigns_any_owner(self, client, admin_headers, organiser_user):
        response = client.post(
            "/api/venue/createVenue",
            json={"name": "Town Hall", "owner_type": "organiser", "owner_id": organiser_user.organiser.id},
            headers=admin_headers,
        )
        assert response.status_code == 201
        assert response.json()["owner_type"] == "organiser"

    def test_invalid_owner_type_rejected(self, client, admin_headers):
        response = client.post(
            "/api/venue/createVenue",
            json={"name": "Odd", "owner_type": "dragon", "owner_id": 1},
            headers=admin_headers,
        )
        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_owner_id_without_type_rejected(self, client, admin_headers):
        response = client.post("/api/venue/createVenue", json={"name": "Odd", "owner_id": 1}, headers=admin_headers)
        assert response.status_code == 422

    def test_duplicate_contact_email(self, client, artist_headers, venue):
        response = client.post(
            "/api/venue/createVenue",
            json={"name": "Other", "contact_email": "bookings@roundhouse.example.com"},
            headers=artist_headers,
        )
        assert response.status_code == 409

    def test_requires_authentication(self, client):
        response = client.post("/api/venue/createVenue", json={"name": "Anon"})
        assert response.status_code == 401
        assert isinstance(response.json()["message"], str)


class TestReadVenues:

    def test_get_venue_public(self, client, venue):
        response = client.get(f"/api/venue/{venue['id']}")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "The Roundhouse"
        assert data["is_owner"] is False
        assert data["features"] == []

    def test_missing_venue(self, client, db_session):
        response = client.get("/api/venue/999")
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_search(self, client, venue):
        assert len(client.get("/api/venue", params={"q": "round"}).json()) == 1
        assert client.get("/api/venue", params={"location": "paris"}).json() == []

    def test_list_by_owner(self, client, artist_user, venue):
        response = client.get(f"/api/venue/owner/artist/{artist_user.artist.id}")
        assert [v["id"] for v in response.json()] == [venue["id"]]

    def test_list_by_owner_invalid_type(self, client, db_session):
        assert client.get("/api/venue/owner/dragon/1").status_code == 422


class TestUpdateVenue:

    def test_owner_updates(self, client, artist_headers, venue):
        response = client.put(f"/api/venue/updateVenue/{venue['id']}", json={"capacity": 500}, headers=artist_headers)
        assert response.status_code == 200
        assert response.json()["capacity"] == 500

    def test_non_owner_forbidden(self, client, other_artist_headers, venue):
        response = client.put(
            f"/api/venue/updateVenue/{venue['id']}", json={"capacity": 1}, headers=other_artist_headers
        )
        assert response.status_code == 403

    def test_admin_can_update(self, client, admin_headers, venue):
        response = client.put(f"/api/venue/updateVenue/{venue['id']}", json={"name": "Renamed"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"
        assert response.json()["can_edit"] is True
        assert response.json()["is_owner"] is False

    def test_owner_cannot_transfer_ownership(self, client, artist_headers, venue, organiser_user):
        response = client.put(
            f"/api/venue/updateVenue/{venue['id']}",
            json={"owner_type": "organiser", "owner_id": organiser_user.organiser.id},
            headers=artist_headers,
        )
        assert response.status_code == 403

    def test_admin_transfers_ownership(self, client, admin_headers, venue, organiser_user):
        response = client.put(
            f"/api/venue/updateVenue/{venue['id']}",
            json={"owner_type": "organiser", "owner_id": organiser_user.organiser.id},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["owner_type"] == "organiser"

        organiser_view = client.get(f"/api/venue/{venue['id']}", headers=headers_for(organiser_user)).json()
        assert organiser_view["is_owner"] is True


class TestVenueUploadsAndDelete:

    def test_upload_gallery_and_main_picture(self, client, artist_headers, venue):
        response = client.post(
            f"/api/venue/uploadGallery/{venue['id']}",
            files=[("gallery", png_file("a.png")), ("gallery", png_file("b.png")), ("main_picture", png_file("m.png"))],
            headers=artist_headers,
        )
        assert response.status_code == 200, response.text
        data = response.json()
        assert len(data["venue_gallery"]) == 2
        assert all(url.startswith("http://testserver/uploads/venues/") for url in data["venue_gallery"])
        assert data["main_picture"].startswith("http://testserver/uploads/venues/")

        served = client.get(data["venue_gallery"][0].replace("http://testserver", ""))
        assert served.status_code == 200

    def test_upload_rejects_non_images(self, client, artist_headers, venue):
        response = client.post(
            f"/api/venue/uploadGallery/{venue['id']}",
            files=[("gallery", ("notes.txt", b"hello", "text/plain"))],
            headers=artist_headers,
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    def test_rejected_upload_keeps_main_picture_off_disk(self, client, artist_headers, venue):
        before = stored_files()
        response = client.post(
            f"/api/venue/uploadGallery/{venue['id']}",
            files=[("main_picture", png_file("m.png")), ("gallery", ("setlist.pdf", b"%PDF-1.4", "application/pdf"))],
            headers=artist_headers,
        )
        assert response.status_code == 400
        assert stored_files() == before
        assert client.get(f"/api/venue/{venue['id']}").json()["main_picture"] == venue["main_picture"]

    def test_upload_by_non_owner(self, client, other_artist_headers, venue):
        response = client.post(
            f"/api/venue/uploadGallery/{venue['id']}",
            files=[("gallery", png_file())],
            headers=other_artist_headers,
        )
        assert response.status_code == 403

    def test_delete_detaches_events_and_purges_favorites(self, client, artist_headers, user_headers, venue, event):
        client.post("/api/favorites", json={"type": "venue", "itemId": venue["id"]}, headers=user_headers)

        response = client.delete(f"/api/venue/{venue['id']}", headers=artist_headers)
        assert response.status_code == 200

        assert client.get(f"/api/venue/{venue['id']}").status_code == 404
        assert client.get(f"/api/events/{event['id']}").json()["venue_id"] is None
        assert client.get("/api/favorites/venue", headers=user_headers).json() == []

    def test_delete_by_non_owner(self, client, other_artist_headers, venue):
        assert client.delete(f"/api/venue/{venue['id']}", headers=other_artist_headers).status_code == 403
