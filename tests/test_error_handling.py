"""
Tests for error responses
Every error has {message, code, status_code, request_id} and leaks no internals
"""
import asyncio
import json
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from gig_guide.exceptions import ErrorResponse, NotFoundError, general_exception_handler
from gig_guide.middleware.error_handler import ErrorSanitizer, database_error_handler


def _request(path="/api/test"):
    request = MagicMock()
    request.url.path = path
    request.method = "POST"
    return request


def _body(response):
    return json.loads(response.body)


class TestErrorSanitizer:
    """Test ErrorSanitizer utility functions"""

    def test_sanitize_windows_paths(self):
        sanitized = ErrorSanitizer.sanitize_message("Error in file C:\\Users\\admin\\project\\secret.py at line 42")
        assert "C:\\Users\\admin" not in sanitized
        assert "[REDACTED_PATH]" in sanitized

    def test_sanitize_unix_paths(self):
        sanitized = ErrorSanitizer.sanitize_message("Error in /home/admin/project/secret.py")
        assert "/home/admin/project/secret.py" not in sanitized
        assert "[REDACTED_PATH]" in sanitized

    def test_sanitize_sql_statements(self):
        sanitized = ErrorSanitizer.sanitize_message("Query failed: UPDATE users SET hashed_password='x'")
        assert "hashed_password" not in sanitized
        assert "[REDACTED]" in sanitized

    def test_sanitize_connection_strings(self):
        sanitized = ErrorSanitizer.sanitize_message("Connection failed: postgresql://user:pass@db:5432/gigs")
        assert "user:pass" not in sanitized
        assert "[REDACTED_CONNECTION]" in sanitized

    def test_sanitize_emails(self):
        sanitized = ErrorSanitizer.sanitize_message("Venue contact bookings@roundhouse.example.com exists")
        assert "bookings@roundhouse.example.com" not in sanitized

    def test_truncates_long_messages(self):
        sanitized = ErrorSanitizer.sanitize_message("Error: " + ("x" * 1000))
        assert len(sanitized) <= 520
        assert sanitized.endswith("[truncated]")

    def test_sanitize_details_drops_credentials(self):
        details = {"password": "hunter2", "path": "/etc/passwd", "nested": {"token": "abc", "ok": 1}}
        sanitized = ErrorSanitizer.sanitize_details(details)
        assert "password" not in sanitized
        assert "token" not in sanitized["nested"]
        assert sanitized["nested"]["ok"] == 1
        assert "[REDACTED_PATH]" in sanitized["path"]


class TestDatabaseErrorHandler:

    def test_integrity_error_is_conflict(self):
        exc = IntegrityError("INSERT INTO favorites ...", {}, Exception("UNIQUE constraint failed"))
        response = asyncio.run(database_error_handler(_request(), exc))
        body = _body(response)
        assert response.status_code == 409
        assert body["code"] == "DATABASE_CONSTRAINT_ERROR"
        assert "INSERT" not in body["message"]

    def test_operational_error_is_unavailable(self):
        exc = OperationalError("SELECT 1", {}, Exception("could not connect to postgresql://u:p@h/db"))
        response = asyncio.run(database_error_handler(_request(), exc))
        assert response.status_code == 503
        assert "postgresql" not in response.body.decode()

    def test_other_database_errors(self):
        response = asyncio.run(database_error_handler(_request(), SQLAlchemyError("boom")))
        assert response.status_code == 500
        assert _body(response)["code"] == "DATABASE_ERROR"


class TestEnvelope:

    def test_error_response_shape(self):
        body = ErrorResponse.create(message="Nope", code="NOT_FOUND", status_code=404, request_id="req-1")
        assert body == {"message": "Nope", "code": "NOT_FOUND", "status_code": 404, "request_id": "req-1"}

    def test_domain_error_defaults(self):
        exc = NotFoundError("Venue 3 not found")
        assert exc.status_code == 404
        assert exc.code == "NOT_FOUND"
        assert str(exc) == "Venue 3 not found"

    def test_unexpected_errors_hide_internals(self):
        response = asyncio.run(general_exception_handler(_request(), RuntimeError("secret internals")))
        body = _body(response)
        assert response.status_code == 500
        assert "secret internals" not in json.dumps(body)
        assert isinstance(body["message"], str)

    def test_not_found_over_http(self, client):
        response = client.get("/api/artists/4242")
        body = response.json()
        assert response.status_code == 404
        assert set(body) >= {"message", "code", "status_code", "request_id"}
        assert body["request_id"] == response.headers["X-Request-ID"]

    def test_request_id_propagated(self, client):
        response = client.get("/api/artists/4242", headers={"X-Request-ID": "trace-me"})
        assert response.headers["X-Request-ID"] == "trace-me"
        assert response.json()["request_id"] == "trace-me"

    def test_validation_error_lists_fields(self, client, user_headers):
        response = client.post("/api/favorites", json={"type": "spaceship", "itemId": "x"}, headers=user_headers)
        body = response.json()
        assert response.status_code == 422
        assert body["code"] == "VALIDATION_ERROR"
        fields = {error["field"] for error in body["details"]["errors"]}
        assert any("type" in field for field in fields)

    def test_invalid_token(self, client, db_session):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["code"] == "AUTH_ERROR"
