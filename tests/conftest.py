"""
Pytest configuration and fixtures
Runs the API against an in-memory SQLite database and a temporary uploads folder
"""
import os
import sys
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

# Add src to path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Set test environment variables before importing
UPLOADS_ROOT = tempfile.mkdtemp(prefix="gig_guide_uploads_")
os.environ["ENV"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-for-gig-guide-tests-only-min-32-chars"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOADS_ROOT"] = UPLOADS_ROOT
os.environ["API_BASE_URL"] = "http://testserver"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce log noise in tests

# Import after setting env vars
from gig_guide.app import create_app
from gig_guide.auth import create_user_token, get_password_hash
from gig_guide.db import Base, SessionLocal, engine, User
from gig_guide.db.models import Artist, Organiser, UserRole

TEST_PASSWORD = "testpassword123"


@pytest.fixture(scope="session")
def app():
    return create_app(init_database=False)


@pytest.fixture(scope="function")
def db_session():
    """Fresh schema and a database session for each test"""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(app, db_session):
    """Create test client"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def make_user(db_session: Session):
    """Factory creating users; artist and organiser accounts get a profile"""

    def _make_user(role: str = UserRole.USER.value, email: str = None, username: str = None,
                   profile_name: str = None) -> User:
        count = db_session.query(User).count() + 1
        user = User(
            email=email or f"{role}{count}@example.com",
            username=username or f"{role}{count}",
            hashed_password=get_password_hash(TEST_PASSWORD),
            role=role,
            is_active=True,
        )
        db_session.add(user)
        db_session.flush()

        if role == UserRole.ARTIST.value:
            db_session.add(Artist(user_id=user.id, stage_name=profile_name or f"Artist {count}", genre="jazz"))
        elif role == UserRole.ORGANISER.value:
            db_session.add(Organiser(user_id=user.id, name=profile_name or f"Organiser {count}"))

        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


def headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture(scope="function")
def admin_user(make_user):
    return make_user(UserRole.ADMIN.value)


@pytest.fixture(scope="function")
def artist_user(make_user):
    return make_user(UserRole.ARTIST.value, profile_name="The Night Owls")


@pytest.fixture(scope="function")
def other_artist_user(make_user):
    return make_user(UserRole.ARTIST.value, profile_name="Brass Foundry")


@pytest.fixture(scope="function")
def organiser_user(make_user):
    return make_user(UserRole.ORGANISER.value, profile_name="Basement Promotions")


@pytest.fixture(scope="function")
def plain_user(make_user):
    return make_user(UserRole.USER.value)


@pytest.fixture(scope="function")
def admin_headers(admin_user):
    return headers_for(admin_user)


@pytest.fixture(scope="function")
def artist_headers(artist_user):
    return headers_for(artist_user)


@pytest.fixture(scope="function")
def other_artist_headers(other_artist_user):
    return headers_for(other_artist_user)


@pytest.fixture(scope="function")
def organiser_headers(organiser_user):
    return headers_for(organiser_user)


@pytest.fixture(scope="function")
def user_headers(plain_user):
    return headers_for(plain_user)


@pytest.fixture(scope="function")
def venue(client, artist_user, artist_headers):
    """A venue owned by artist_user's artist profile"""
    response = client.post(
        "/api/venue/createVenue",
        json={"name": "The Roundhouse", "location": "London", "contact_email": "bookings@roundhouse.example.com"},
        headers=artist_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture(scope="function")
def event(client, artist_headers, venue):
    """An event owned by artist_user's artist profile at venue"""
    response = client.post(
        "/api/events/create_event",
        data={"name": "Friday Jazz", "date": "2099-06-01", "time": "20:00", "venue_id": str(venue["id"])},
        headers=artist_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00"
    b"\x1f\x15\xc4\x89\x00\x00\x00\nIDATx\x9cc\x00\x01\x00\x00\x05\x00\x01\r\n-\xb4\x00\x00\x00"
    b"\x00IEND\xaeB`\x82"
)


def png_file(name: str = "image.png"):
    return (name, PNG_BYTES, "image/png")


def stored_files():
    """Relative paths of every file currently under the uploads folder"""
    root = Path(UPLOADS_ROOT)
    return {path.relative_to(root).as_posix() for path in root.rglob("*") if path.is_file()}
