"""
REST client for the Gig Guide API

Every call injects the Bearer token and raises ApiError with the server's
message (or a per-call fallback) when the response is not successful.
"""
import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = httpx.Timeout(30.0, connect=10.0)


class ApiError(Exception):
    """Error returned by the API, carrying the HTTP status code"""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}

    def __str__(self):
        if self.status_code:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


FileTuple = Tuple[str, bytes, str]


class GigGuideClient:
    """
    Thin synchronous client over httpx.

    Usage:
        client = GigGuideClient("http://localhost:8000", token=token)
        venue = client.create_venue({"name": "The Roundhouse"})
    """

    def __init__(self, base_url: str, token: Optional[str] = None,
                 timeout: httpx.Timeout = DEFAULT_TIMEOUT,
                 transport: Optional[httpx.BaseTransport] = None):
        self.token = token
        self._http = httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport)

    def close(self):
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def set_token(self, token: Optional[str]) -> None:
        self.token = token

    def _headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    def _request(self, method: str, path: str, fallback: str, **kwargs) -> Any:
        try:
            response = self._http.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise ApiError(fallback) from e

        if response.is_success:
            if not response.content:
                return None
            return response.json()

        payload: Dict[str, Any] = {}
        try:
            body = response.json()
            if isinstance(body, dict):
                payload = body
        except ValueError:
            pass
        message = payload.get("message") if isinstance(payload.get("message"), str) else None
        raise ApiError(message or fallback, status_code=response.status_code, payload=payload)

    # Auth

    def signup(self, email: str, password: str, username: Optional[str] = None, role: str = "user") -> Dict[str, Any]:
        data = self._request(
            "POST", "/api/auth/signup", "Failed to sign up",
            json={"email": email, "password": password, "username": username, "role": role},
        )
        self.token = data["access_token"]
        return data

    def login(self, username: str, password: str) -> Dict[str, Any]:
        data = self._request(
            "POST", "/api/auth/login", "Failed to log in",
            data={"username": username, "password": password},
        )
        self.token = data["access_token"]
        return data

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/api/auth/me", "Failed to load current user")

    # Artists

    def list_artists(self, genre: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"genre": genre} if genre else None
        return self._request("GET", "/api/artists", "Failed to load artists", params=params)

    def search_artists(self, query: str) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/artists/search", "Failed to search artists", params={"q": query})

    def get_artist(self, artist_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/artists/{artist_id}", "Failed to load artist")

    def get_artist_by_user(self, user_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/artists/user/{user_id}", "Failed to load artist")

    def create_artist(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/artists", "Failed to create artist", json=data)

    def update_artist(self, artist_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/api/artists/{artist_id}", "Failed to update artist", json=data)

    def delete_artist(self, artist_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/artists/{artist_id}", "Failed to delete artist")

    def get_artist_events(self, artist_id: int) -> List[Dict[str, Any]]:
        return self._request("GET", f"/api/artists/{artist_id}/events", "Failed to load artist events")

    def upload_artist_gallery(self, artist_id: int, files: Iterable[FileTuple]) -> Dict[str, Any]:
        return self._request(
            "POST", f"/api/artists/{artist_id}/gallery", "Failed to upload gallery images",
            files=[("gallery", f) for f in files],
        )

    def delete_artist_gallery_image(self, artist_id: int, image: str) -> Dict[str, Any]:
        return self._request(
            "DELETE", f"/api/artists/{artist_id}/gallery", "Failed to delete gallery image",
            json={"image": image},
        )

    def upload_artist_profile_picture(self, artist_id: int, file: FileTuple) -> Dict[str, Any]:
        return self._request(
            "POST", f"/api/artists/{artist_id}/profile-picture", "Failed to upload profile picture",
            files=[("profile_picture", file)],
        )

    # Venues

    def list_venues(self, q: Optional[str] = None, location: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {k: v for k, v in {"q": q, "location": location}.items() if v}
        return self._request("GET", "/api/venue", "Failed to load venues", params=params or None)

    def get_venue(self, venue_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/venue/{venue_id}", "Failed to load venue")

    def get_venues_by_owner(self, owner_type: str, owner_id: int) -> List[Dict[str, Any]]:
        return self._request("GET", f"/api/venue/owner/{owner_type}/{owner_id}", "Failed to load venues")

    def create_venue(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/venue/createVenue", "Failed to create venue", json=data)

    def update_venue(self, venue_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/api/venue/updateVenue/{venue_id}", "Failed to update venue", json=data)

    def upload_venue_gallery(self, venue_id: int, gallery: Iterable[FileTuple] = (),
                             main_picture: Optional[FileTuple] = None) -> Dict[str, Any]:
        files = [("gallery", f) for f in gallery]
        if main_picture is not None:
            files.append(("main_picture", main_picture))
        return self._request(
            "POST", f"/api/venue/uploadGallery/{venue_id}", "Failed to upload venue images", files=files
        )

    def delete_venue(self, venue_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/venue/{venue_id}", "Failed to delete venue")

    # Events

    def list_events(self, upcoming: bool = False, **filters) -> List[Dict[str, Any]]:
        params = {k: v for k, v in filters.items() if v is not None}
        if upcoming:
            params["upcoming"] = "true"
        return self._request("GET", "/api/events", "Failed to load events", params=params or None)

    def get_event(self, event_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/events/{event_id}", "Failed to load event")

    def get_events_by_owner(self, owner_type: str, owner_id: int) -> List[Dict[str, Any]]:
        return self._request("GET", f"/api/events/owner/{owner_type}/{owner_id}", "Failed to load events")

    def create_event(self, data: Dict[str, Any], poster: Optional[FileTuple] = None,
                     gallery: Iterable[FileTuple] = ()) -> Dict[str, Any]:
        """Create an event; artist_ids are sent as a JSON array string"""
        form = {}
        for key, value in data.items():
            if value is None:
                continue
            form[key] = json.dumps(list(value)) if key == "artist_ids" else str(value)
        files = [("gallery", f) for f in gallery]
        if poster is not None:
            files.append(("poster", poster))
        return self._request(
            "POST", "/api/events/create_event", "Failed to create event", data=form, files=files or None
        )

    def update_event(self, event_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/api/events/edit/{event_id}", "Failed to update event", json=data)

    def delete_event(self, event_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/events/delete/{event_id}", "Failed to delete event")

    def upload_event_poster(self, event_id: int, file: FileTuple) -> Dict[str, Any]:
        return self._request(
            "POST", f"/api/events/{event_id}/poster", "Failed to upload poster", files=[("poster", file)]
        )

    def upload_event_gallery(self, event_id: int, files: Iterable[FileTuple]) -> Dict[str, Any]:
        return self._request(
            "POST", f"/api/events/{event_id}/gallery", "Failed to upload gallery images",
            files=[("gallery", f) for f in files],
        )

    def get_event_artists(self, event_id: int) -> List[Dict[str, Any]]:
        return self._request("GET", f"/api/events/{event_id}/artists", "Failed to load event artists")

    def add_event_artists(self, event_id: int, artist_ids: List[int]) -> List[Dict[str, Any]]:
        return self._request(
            "POST", f"/api/events/{event_id}/artists", "Failed to add artists to event",
            json={"artist_ids": artist_ids},
        )

    def remove_event_artist(self, event_id: int, artist_id: int) -> Dict[str, Any]:
        return self._request(
            "DELETE", f"/api/events/{event_id}/artists/{artist_id}", "Failed to remove artist from event"
        )

    # Favorites

    def add_favorite(self, item_type: str, item_id: int) -> Dict[str, Any]:
        return self._request(
            "POST", "/api/favorites", "Failed to add favorite", json={"type": item_type, "itemId": item_id}
        )

    def remove_favorite(self, item_type: str, item_id: int) -> Dict[str, Any]:
        return self._request(
            "DELETE", "/api/favorites", "Failed to remove favorite", json={"type": item_type, "itemId": item_id}
        )

    def is_favorite(self, item_type: str, item_id: int) -> bool:
        data = self._request(
            "GET", "/api/favorites/check", "Failed to check favorite",
            params={"type": item_type, "itemId": item_id},
        )
        return bool(data["isFavorite"])

    def toggle_favorite(self, item_type: str, item_id: int) -> bool:
        data = self._request(
            "POST", "/api/favorites/toggle", "Failed to toggle favorite",
            json={"type": item_type, "itemId": item_id},
        )
        return bool(data["isFavorite"])

    def list_favorites(self, item_type: Optional[str] = None):
        if item_type:
            return self._request("GET", f"/api/favorites/{item_type}", "Failed to load favorites")
        return self._request("GET", "/api/favorites", "Failed to load favorites")

    # Features

    def get_feature_catalog(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/features/catalog", "Failed to load feature catalog")["features"]

    def get_active_features(self, owner_type: str, owner_id: int) -> List[str]:
        data = self._request("GET", f"/api/features/{owner_type}/{owner_id}", "Failed to load features")
        return data.get("features", [])

    def purchase_feature(self, owner_type: str, owner_id: int, feature_key: str,
                         duration_days: Optional[int] = None,
                         metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        body = {"owner_type": owner_type, "owner_id": owner_id, "feature_key": feature_key}
        if duration_days is not None:
            body["duration_days"] = duration_days
        if metadata:
            body["metadata"] = metadata
        return self._request("POST", "/api/features/purchases", "Failed to purchase feature", json=body)

    def cancel_purchase(self, purchase_id: int) -> Dict[str, Any]:
        return self._request("POST", f"/api/features/purchases/{purchase_id}/cancel", "Failed to cancel purchase")

    # Notifications

    def send_notification(self, user_id: int, title: str, message: str,
                          type: str = "general", data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        body = {"userId": user_id, "title": title, "message": message, "type": type, "data": data}
        return self._request("POST", "/api/notifications", "Failed to send notification", json=body)

    def request_venue_booking(self, venue_id: int, message: str, event_date: Optional[str] = None,
                              details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        body = {"venueId": venue_id, "message": message, "eventDate": event_date, "details": details}
        return self._request("POST", "/api/notifications/venue-booking", "Failed to send booking request", json=body)

    def list_notifications(self, user_id: int, unread_only: bool = False) -> List[Dict[str, Any]]:
        params = {"unread_only": "true"} if unread_only else None
        return self._request(
            "GET", f"/api/notifications/user/{user_id}", "Failed to load notifications", params=params
        )

    def mark_notification_read(self, notification_id: int) -> Dict[str, Any]:
        return self._request(
            "PUT", f"/api/notifications/{notification_id}/read", "Failed to mark notification as read"
        )
