"""
Tests for signup, login and the current-user endpoint
"""
from datetime import timedelta

from gig_guide.auth import create_access_token, get_password_hash, verify_password


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = get_password_hash("correct horse battery")
        assert hashed != "correct horse battery"
        assert verify_password("correct horse battery", hashed)
        assert not verify_password("wrong", hashed)

    def test_long_passwords(self):
        password = "p" * 100
        assert verify_password(password, get_password_hash(password))


class TestSignup:

    def test_signup_returns_token(self, client, db_session):
        response = client.post(
            "/api/auth/signup", json={"email": "Fan@Example.com", "password": "MyP@ssw0rd123", "username": "fan"}
        )
        assert response.status_code == 201
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["email"] == "fan@example.com"
        assert body["user"]["role"] == "user"

    def test_duplicate_email(self, client, plain_user):
        response = client.post("/api/auth/signup", json={"email": plain_user.email, "password": "MyP@ssw0rd123"})
        assert response.status_code == 400
        assert response.json()["message"] == "Email already registered"

    def test_admin_role_not_self_assigned(self, client, db_session):
        response = client.post(
            "/api/auth/signup", json={"email": "boss@example.com", "password": "MyP@ssw0rd123", "role": "admin"}
        )
        assert response.status_code == 422

    def test_short_password(self, client, db_session):
        response = client.post("/api/auth/signup", json={"email": "short@example.com", "password": "abc"})
        assert response.status_code == 422


class TestLogin:

    def test_login_by_email(self, client, plain_user):
        response = client.post("/api/auth/login", data={"username": plain_user.email, "password": "testpassword123"})
        assert response.status_code == 200
        token = response.json()["access_token"]

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["id"] == plain_user.id

    def test_login_by_username(self, client, plain_user):
        response = client.post(
            "/api/auth/login", data={"username": plain_user.username, "password": "testpassword123"}
        )
        assert response.status_code == 200

    def test_wrong_password(self, client, plain_user):
        response = client.post("/api/auth/login", data={"username": plain_user.email, "password": "nope"})
        assert response.status_code == 401


class TestCurrentUser:

    def test_me_includes_profile_ids(self, client, artist_user, artist_headers):
        me = client.get("/api/auth/me", headers=artist_headers).json()
        assert me["artist_id"] == artist_user.artist.id
        assert me["organiser_id"] is None
        assert "hashed_password" not in me

    def test_missing_token(self, client, db_session):
        assert client.get("/api/auth/me").status_code == 401

    def test_expired_token(self, client, plain_user):
        token = create_access_token({"sub": str(plain_user.id)}, expires_delta=timedelta(minutes=-5))
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_token_for_deleted_user(self, client, db_session):
        token = create_access_token({"sub": "9999"})
        assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"}).status_code == 401

    def test_logout(self, client, user_headers):
        response = client.post("/api/auth/logout", headers=user_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Logged out successfully"}
